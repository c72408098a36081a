"""Markdown summary and title of the check run, shown on the "Checks" tab."""

from graphql_checks.models import ChangeCriticality, CheckRunConclusion, SchemaChange

SECTION_TITLES: dict[ChangeCriticality, str] = {
    ChangeCriticality.BREAKING: "Breaking changes",
    ChangeCriticality.DANGEROUS: "Dangerous changes",
    ChangeCriticality.SAFE: "Safe changes",
}


def create_summary(changes: list[SchemaChange], total_limit: int = 100) -> str:
    """Summarize the changes, listing at most ``total_limit`` of them.

    Changes are grouped by criticality, breaking changes first and safe changes last.
    """
    if not changes:
        return "No changes detected"

    counts = {
        criticality: sum(1 for c in changes if c.criticality == criticality)
        for criticality in ChangeCriticality
    }
    lines: list[str] = [
        f"### Found {len(changes)} change(s)",
        "",
        f"Breaking: {counts[ChangeCriticality.BREAKING]}",
        f"Dangerous: {counts[ChangeCriticality.DANGEROUS]}",
        f"Safe: {counts[ChangeCriticality.SAFE]}",
    ]

    listed = 0
    for criticality, section_title in SECTION_TITLES.items():
        section = [c for c in changes if c.criticality == criticality]
        if not section or listed >= total_limit:
            continue
        lines.extend(("", f"## {section_title}"))
        for change in section[: total_limit - listed]:
            lines.append(f"- {change.message}")
            listed += 1

    if listed < len(changes):
        lines.extend(("", f"... and {len(changes) - listed} more changes"))

    return "\n".join(lines)


def get_title(conclusion: CheckRunConclusion) -> str:
    """Title of the check run for its final conclusion."""
    if conclusion == CheckRunConclusion.FAILURE:
        return "Something is wrong with your schema"
    return "Everything looks good"
