"""Load the two schema versions to compare, from git, disk or a live endpoint."""

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

import requests
from graphql import (
    GraphQLError,
    build_client_schema,
    get_introspection_query,
    print_schema,
)

from graphql_checks.errors import SchemaLoadError
from graphql_checks.github_api import GitHubChecks

logger = logging.getLogger(__name__)

GET_FILE_QUERY = """
query GetFile($repo: String!, $owner: String!, $expression: String!) {
  repository(name: $repo, owner: $owner) {
    object(expression: $expression) {
      ... on Blob {
        text
      }
    }
  }
}
"""


class SchemaFileLoader:
    """Load schema files from the local workspace or from a git ref on GitHub."""

    def __init__(self, checks: GitHubChecks) -> None:
        self.checks = checks

    def load(self, ref: str, path: str, workspace: Path | None = None) -> str:
        """Load the text of ``path``, at ``ref`` or from the ``workspace`` checkout.

        :raises SchemaLoadError: if the file does not exist at that ref
        """
        if workspace:
            try:
                return (workspace / path).read_text(encoding="utf-8")
            except OSError as exc:
                msg = f"Failed to load '{path}' from {workspace}: {exc}"
                raise SchemaLoadError(msg) from exc

        owner, repo = self.checks.repo.owner, self.checks.repo.repo
        result = self.checks.graphql(
            GET_FILE_QUERY,
            {"repo": repo, "owner": owner, "expression": f"{ref}:{path}"},
        )
        logger.info("[graphql-checks] Query %s:%s from %s/%s", ref, path, owner, repo)

        text = ((result.get("repository") or {}).get("object") or {}).get("text")
        if not text:
            logger.error("[graphql-checks] repository.object.text is null: %s", result)
            msg = f"Failed to load '{path}' (ref: {ref})"
            raise SchemaLoadError(msg)
        return str(text)


def print_schema_from_endpoint(
    endpoint: str,
    headers: dict[str, str] | None = None,
    timeout: int = 15,
) -> str:
    """Introspect a running GraphQL server and print its schema as SDL.

    :raises HTTPError: if the endpoint answered with a non-successful status
    :raises SchemaLoadError: if the introspection result is unusable
    """
    response = requests.post(
        endpoint,
        json={"query": get_introspection_query(descriptions=True)},
        headers={"Content-Type": "application/json", **(headers or {})},
        timeout=timeout,
    )
    response.raise_for_status()
    body: dict[str, Any] = response.json()

    if body.get("errors"):
        msg = f"Introspection of {endpoint} returned errors: {body['errors']}"
        raise SchemaLoadError(msg)
    data = body.get("data") or {}
    if "__schema" not in data:
        msg = f"Introspection of {endpoint} returned no schema."
        raise SchemaLoadError(msg)

    try:
        schema = build_client_schema(data)
    except (GraphQLError, KeyError, TypeError, ValueError) as exc:
        msg = f"Introspection of {endpoint} returned an unusable schema: {exc!r}"
        raise SchemaLoadError(msg) from exc
    return print_schema(schema)


def load_sources(
    load_old: Callable[[], str],
    load_new: Callable[[], str],
) -> tuple[str, str]:
    """Run both loaders concurrently and return (old, new) once both are done.

    If either loader fails, its exception is raised here.
    """
    with ThreadPoolExecutor(max_workers=2) as executor:
        old_future = executor.submit(load_old)
        new_future = executor.submit(load_new)
        return old_future.result(), new_future.result()
