"""Command-line entry point, usable as a GitHub Action or from any CI system."""

import logging
import os
import sys
from collections.abc import Sequence

from configargparse import ArgumentParser
from requests import RequestException

from graphql_checks.config import APPROVE_LABEL, CHECK_NAME, InspectorConfig
from graphql_checks.errors import GraphQLChecksError
from graphql_checks.models import CheckRunConclusion
from graphql_checks.run import run
from graphql_checks.utils import cast_to_boolean


def build_parser() -> ArgumentParser:
    """Build the parser; every option can also be set like a GitHub Action input."""
    argparser = ArgumentParser(
        prog="graphql-checks",
        description="Compare a GraphQL schema against its base version and report "
        "the changes as a GitHub check run. Options can also be passed as environment "
        "variables, named the way GitHub Actions passes inputs (INPUT_<NAME>).",
    )
    argparser.add_argument(
        "--github-token",
        type=str,
        env_var="INPUT_GITHUB-TOKEN",
        help="Token authorized to create check runs and read repository contents.",
    )
    argparser.add_argument(
        "--name",
        type=str,
        env_var="INPUT_NAME",
        default=CHECK_NAME,
        help="Name of the check run, shown on pull requests.",
    )
    argparser.add_argument(
        "--schema",
        type=str,
        env_var="INPUT_SCHEMA",
        help="Schema to compare against, as 'ref:path', e.g. master:schema.graphql. "
        "When --endpoint is used, the path of the schema in this repository.",
    )
    argparser.add_argument(
        "--experimental-merge",
        type=str,
        env_var="INPUT_EXPERIMENTAL_MERGE",
        default="false",
        help="On pull requests, compare the pull request's merge ref against its base "
        "branch instead of the local checkout ('true' or 'false').",
    )
    argparser.add_argument(
        "--annotations",
        type=str,
        env_var="INPUT_ANNOTATIONS",
        default="true",
        help="Annotate the schema file with each change ('true' or 'false').",
    )
    argparser.add_argument(
        "--fail-on-breaking",
        type=str,
        env_var="INPUT_FAIL-ON-BREAKING",
        default="true",
        help="Fail the check if breaking changes are found ('true' or 'false').",
    )
    argparser.add_argument(
        "--approve-label",
        type=str,
        env_var="INPUT_APPROVE-LABEL",
        default=APPROVE_LABEL,
        help="Pull request label that allows breaking changes to pass the check.",
    )
    argparser.add_argument(
        "--endpoint",
        type=str,
        env_var="INPUT_ENDPOINT",
        help="URL of a live GraphQL endpoint, introspected as the schema to compare "
        "against instead of a git ref.",
    )
    argparser.add_argument(
        "--log-level",
        type=str,
        env_var="GRAPHQL_CHECKS_LOG_LEVEL",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Verbosity of the log output.",
    )
    return argparser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the check and return the process exit code."""
    args = build_parser().parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(message)s")

    try:
        config = InspectorConfig.from_environment(
            os.environ,
            github_token=args.github_token,
            schema_pointer=args.schema,
            check_name=args.name,
            experimental_merge=cast_to_boolean(args.experimental_merge, default=False),
            annotations=cast_to_boolean(args.annotations),
            fail_on_breaking=cast_to_boolean(args.fail_on_breaking),
            approve_label=args.approve_label,
            endpoint=args.endpoint,
        )
        conclusion = run(config)
    except (GraphQLChecksError, RequestException) as exc:
        logging.error("[graphql-checks] %s", exc)  # noqa: LOG015
        return 1

    if conclusion == CheckRunConclusion.FAILURE:
        logging.error("[graphql-checks] Breaking changes found. Failing the check.")  # noqa: LOG015
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
