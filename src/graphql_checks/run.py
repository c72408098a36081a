"""Compare the schema of the checked revision against its base and report the result."""

import logging
from pathlib import Path

from graphql import Source

from graphql_checks.config import InspectorConfig
from graphql_checks.diff import diff_schemas
from graphql_checks.git import get_current_commit_sha
from graphql_checks.github_api import GitHubChecks
from graphql_checks.loaders import (
    SchemaFileLoader,
    load_sources,
    print_schema_from_endpoint,
)
from graphql_checks.models import CheckRunConclusion, CheckRunOutput
from graphql_checks.reporter import report_check_run, resolve_conclusion
from graphql_checks.summary import create_summary, get_title

logger = logging.getLogger(__name__)

SUMMARY_CHANGES_LIMIT = 100


def set_output(output_path: Path | None, name: str, value: str) -> None:
    """Set an output of the current step, if running on GitHub Actions."""
    if output_path is None:
        return
    with output_path.open("a", encoding="utf-8") as output_file:
        output_file.write(f"{name}={value}\n")


def run(
    config: InspectorConfig,
    checks: GitHubChecks | None = None,
) -> CheckRunConclusion:
    """Inspect the schema and report the outcome as a completed check run.

    :param config: the configuration of this run
    :param checks: client for the check runs, created from ``config`` if omitted
    :return: the conclusion reported on the check run
    :raises GraphQLChecksError: if a schema cannot be loaded or annotations failed
    :raises RequestException: if the GitHub API could not be reached
    """
    logger.info("[graphql-checks] GraphQL Inspector started")

    ref = config.sha
    commit_sha = get_current_commit_sha(config.workspace)
    logger.info("[graphql-checks] Ref: %s", ref)
    logger.info("[graphql-checks] Commit SHA: %s", commit_sha)

    if checks is None:
        checks = GitHubChecks(
            api_url=config.api_url,
            graphql_url=config.graphql_url,
            repo=config.repo,
            token=config.github_token,
        )

    logger.info('[graphql-checks] Creating a check named "%s"', config.check_name)
    check_run_id = checks.create_check_run(config.check_name, commit_sha)
    logger.info("[graphql-checks] Check ID: %s", check_run_id)

    schema_ref, schema_path = config.schema_ref, config.schema_path
    workspace: Path | None = config.workspace

    if config.experimental_merge and config.pull_request:
        ref = f"refs/pull/{config.pull_request.number}/merge"
        workspace = None
        logger.info("[graphql-checks] EXPERIMENTAL - Using Pull Request %s", ref)
        if base_ref := config.pull_request.base_ref:
            schema_ref = base_ref
            logger.info(
                "[graphql-checks] EXPERIMENTAL - Using %s as base schema ref",
                base_ref,
            )

    loader = SchemaFileLoader(checks)
    endpoint = config.endpoint
    old_text, new_text = load_sources(
        lambda: (
            print_schema_from_endpoint(endpoint)
            if endpoint
            else loader.load(schema_ref, schema_path)
        ),
        lambda: loader.load(ref or commit_sha, schema_path, workspace),
    )
    logger.info("[graphql-checks] Got both sources")

    logger.info("[graphql-checks] Start comparing schemas")
    schema_diff = diff_schemas(
        schema_path,
        Source(old_text, endpoint or f"{schema_ref}:{schema_path}"),
        Source(new_text, schema_path),
    )

    set_output(config.output_path, "changes", str(len(schema_diff.changes)))
    logger.info("[graphql-checks] Changes: %d", len(schema_diff.changes))

    conclusion = resolve_conclusion(
        schema_diff.conclusion,
        fail_on_breaking=config.fail_on_breaking,
        has_approval_label=config.has_approval_label,
    )
    if conclusion != schema_diff.conclusion:
        logger.info("[graphql-checks] Breaking changes allowed. Forcing SUCCESS")

    annotations = schema_diff.annotations
    if not config.annotations:
        logger.info("[graphql-checks] Annotations are disabled. Skipping annotations")
        annotations = []

    output = CheckRunOutput(
        title=get_title(conclusion),
        summary=create_summary(schema_diff.changes, SUMMARY_CHANGES_LIMIT),
        annotations=annotations,
    )
    logger.info("[graphql-checks] Conclusion: %s", conclusion.value)

    return report_check_run(checks, check_run_id, conclusion, output)
