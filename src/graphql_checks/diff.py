"""Compare two schema versions with graphql-core and derive check run annotations."""

import re

from graphql import (
    DocumentNode,
    GraphQLError,
    GraphQLSchema,
    Source,
    build_ast_schema,
    find_breaking_changes,
    find_dangerous_changes,
    is_interface_type,
    is_object_type,
    is_specified_directive,
    is_specified_scalar_type,
    parse,
)

from graphql_checks.errors import SchemaLoadError
from graphql_checks.models import (
    ChangeCriticality,
    CheckAnnotation,
    CheckRunConclusion,
    SchemaChange,
    SchemaDiff,
)

# candidate schema coordinates in a change description, e.g. "Query.user" or "User"
COORDINATE_PATTERN = re.compile(r"[_A-Za-z][_0-9A-Za-z]*(?:\.[_A-Za-z][_0-9A-Za-z]*)?")


def _parse(source: Source) -> DocumentNode:
    try:
        return parse(source)
    except GraphQLError as exc:
        msg = f"Failed to parse schema '{source.name}': {exc.message}"
        raise SchemaLoadError(msg) from exc


def _build(document: DocumentNode, source: Source) -> GraphQLSchema:
    try:
        return build_ast_schema(document)
    except (GraphQLError, TypeError) as exc:
        msg = f"Failed to build schema '{source.name}': {exc}"
        raise SchemaLoadError(msg) from exc


def index_definition_lines(document: DocumentNode) -> dict[str, int]:
    """Map type names and ``Type.member`` coordinates to their line in the document.

    Members are fields, input fields and enum values. The first definition wins, so
    types extended later keep the line of their original definition.
    """
    lines: dict[str, int] = {}
    for definition in document.definitions:
        name_node = getattr(definition, "name", None)
        if name_node is None or definition.loc is None:
            continue
        type_name = name_node.value
        lines.setdefault(type_name, definition.loc.start_token.line)
        members = getattr(definition, "fields", None) or getattr(
            definition,
            "values",
            None,
        )
        for member in members or ():
            if member.loc is not None:
                lines.setdefault(
                    f"{type_name}.{member.name.value}",
                    member.loc.start_token.line,
                )
    return lines


def locate_change(message: str, lines: dict[str, int]) -> int:
    """Find the line in the new schema that a change description refers to.

    Member coordinates are preferred over bare type names, so a removed field
    points at its surviving parent type. Falls back to line 1.
    """
    candidates = COORDINATE_PATTERN.findall(message)
    dotted = [candidate for candidate in candidates if "." in candidate]
    types = [candidate.split(".")[0] for candidate in candidates]
    for coordinate in (*dotted, *types):
        if coordinate in lines:
            return lines[coordinate]
    return 1


def find_safe_changes(
    old_schema: GraphQLSchema,
    new_schema: GraphQLSchema,
) -> list[SchemaChange]:
    """Find the additions graphql-core does not report as breaking or dangerous.

    These are added types, added fields of object and interface types, and added
    directives.
    """
    changes: list[SchemaChange] = []
    old_types, new_types = old_schema.type_map, new_schema.type_map

    for type_name, new_type in new_types.items():
        if type_name.startswith("__") or is_specified_scalar_type(new_type):
            continue
        old_type = old_types.get(type_name)
        if old_type is None:
            changes.append(
                SchemaChange(
                    criticality=ChangeCriticality.SAFE,
                    type="TYPE_ADDED",
                    message=f"{type_name} was added.",
                ),
            )
            continue
        if not (
            (is_object_type(old_type) and is_object_type(new_type))
            or (is_interface_type(old_type) and is_interface_type(new_type))
        ):
            continue
        changes.extend(
            SchemaChange(
                criticality=ChangeCriticality.SAFE,
                type="FIELD_ADDED",
                message=f"{type_name}.{field_name} was added.",
            )
            for field_name in new_type.fields
            if field_name not in old_type.fields
        )

    old_directives = {directive.name for directive in old_schema.directives}
    changes.extend(
        SchemaChange(
            criticality=ChangeCriticality.SAFE,
            type="DIRECTIVE_ADDED",
            message=f"Directive {directive.name} was added.",
        )
        for directive in new_schema.directives
        if directive.name not in old_directives
        and not is_specified_directive(directive)
    )
    return changes


def diff_schemas(path: str, old: Source, new: Source) -> SchemaDiff:
    """Compare the old and the new schema.

    Breaking changes fail the check, dangerous changes produce warnings and safe
    changes notices.

    :param path: repository path of the schema file, used for annotations
    :param old: the schema being compared against, e.g. from the base branch
    :param new: the schema of the revision under check
    :raises SchemaLoadError: if either schema is not valid SDL
    """
    old_document, new_document = _parse(old), _parse(new)
    old_schema = _build(old_document, old)
    new_schema = _build(new_document, new)

    changes: list[SchemaChange] = [
        SchemaChange(
            criticality=ChangeCriticality.BREAKING,
            type=change.type.name,
            message=change.description,
        )
        for change in find_breaking_changes(old_schema, new_schema)
    ]
    changes.extend(
        SchemaChange(
            criticality=ChangeCriticality.DANGEROUS,
            type=change.type.name,
            message=change.description,
        )
        for change in find_dangerous_changes(old_schema, new_schema)
    )
    changes.extend(find_safe_changes(old_schema, new_schema))

    new_lines = index_definition_lines(new_document)
    annotations: list[CheckAnnotation] = []
    for change in changes:
        line = locate_change(change.message, new_lines)
        annotations.append(
            CheckAnnotation(
                path=path,
                start_line=line,
                end_line=line,
                annotation_level=change.criticality.to_annotation_level(),
                title=change.type.replace("_", " ").capitalize(),
                message=change.message,
            ),
        )

    conclusion = (
        CheckRunConclusion.FAILURE
        if any(c.criticality == ChangeCriticality.BREAKING for c in changes)
        else CheckRunConclusion.SUCCESS
    )
    return SchemaDiff(conclusion=conclusion, changes=changes, annotations=annotations)
