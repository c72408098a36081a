"""Utility functions to help interface with the GitHub checks and GraphQL APIs."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from requests import Response, patch, post

from graphql_checks.errors import GitHubAPIError
from graphql_checks.models import RepoContext

logger = logging.getLogger(__name__)


def _get_token_headers(token: str, accept_type: str) -> dict[str, str]:
    return {
        "Accept": f"{accept_type}",
        "Authorization": f"Bearer {token}",
    }


def gen_github_timestamp() -> str:
    """Generate a timestamp for the current moment in the GitHub-expected format."""
    return datetime.now().astimezone().replace(microsecond=0).isoformat()


@dataclass
class GitHubChecks:
    """Client for the check runs of a single repository.

    The repository context is fixed at construction and added to every request, so
    callers only ever deal with check run IDs.
    """

    api_url: str
    graphql_url: str
    repo: RepoContext
    token: str
    timeout: int = 10

    def __post_init__(self) -> None:
        """Initialize the headers for usage with the Checks API."""
        self.headers: dict[str, str] = _get_token_headers(
            self.token,
            "application/vnd.github+json",
        )

    @property
    def repo_base_url(self) -> str:
        """REST base URL of the repository, e.g. https://api.github.com/repos/o/r."""
        return f"{self.api_url}/repos/{self.repo.owner}/{self.repo.repo}"

    def create_check_run(self, name: str, head_sha: str) -> str:
        """Start a run of a check, in progress.

        :param name: name of the check, shown on pull requests
        :param head_sha: the sha revision being evaluated by this check run
        :return: the ID of the newly created check run
        :raises HTTPError: in case the GitHub API could not start the check run
        """
        json_payload: dict[str, str] = {
            "name": name,
            "head_sha": head_sha,
            "status": "in_progress",
            "started_at": gen_github_timestamp(),
        }
        response: Response = post(
            f"{self.repo_base_url}/check-runs",
            json=json_payload,
            headers=self.headers,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return str(response.json().get("id"))

    def update_check_run(self, check_run_id: str, payload: dict[str, Any]) -> None:
        """Update an existing check run with a partial payload.

        :param check_run_id: ID of the check run, as returned on creation
        :param payload: the fields to update, e.g. conclusion or output
        :raises HTTPError: in case the GitHub API rejected the update
        """
        response: Response = patch(
            f"{self.repo_base_url}/check-runs/{check_run_id}",
            json=payload,
            headers=self.headers,
            timeout=self.timeout,
        )
        response.raise_for_status()

    def graphql(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """Run a query against the GitHub GraphQL API.

        :return: the ``data`` member of the response
        :raises HTTPError: on a non-successful HTTP status
        :raises GitHubAPIError: if the response carries GraphQL errors
        """
        response: Response = post(
            self.graphql_url,
            json={"query": query, "variables": variables},
            headers=_get_token_headers(self.token, "application/json"),
            timeout=self.timeout,
        )
        response.raise_for_status()
        body: dict[str, Any] = response.json()
        if body.get("errors"):
            logger.debug("[graphql-checks] GraphQL response: %s", body)
            msg = f"GitHub GraphQL API returned errors: {body['errors']}"
            raise GitHubAPIError(msg)
        return body.get("data") or {}
