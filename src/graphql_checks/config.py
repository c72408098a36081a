"""Configuration of a run, collected once from the inputs and the CI environment."""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from graphql_checks.errors import ConfigurationError
from graphql_checks.models import RepoContext

CHECK_NAME = "GraphQL Inspector"
APPROVE_LABEL = "approved-breaking-change"
GITHUB_API_URL = "https://api.github.com"
GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"


class PullRequest(BaseModel):
    """The parts of a pull request event payload relevant to the check."""

    number: int
    base_ref: str | None = None
    labels: list[str] = []

    @classmethod
    def from_event_payload(cls, payload: Mapping[str, Any]) -> "PullRequest | None":
        """Extract the pull request from a webhook payload, if it is about one."""
        pull_request = payload.get("pull_request")
        if not pull_request:
            return None
        return cls(
            number=pull_request["number"],
            base_ref=(pull_request.get("base") or {}).get("ref"),
            labels=[
                label["name"]
                for label in pull_request.get("labels") or []
                if isinstance(label, Mapping) and "name" in label
            ],
        )


class InspectorConfig(BaseModel):
    """Everything a run needs to know, so that nothing downstream reads os.environ."""

    github_token: str
    check_name: str = CHECK_NAME
    schema_pointer: str
    experimental_merge: bool = False
    annotations: bool = True
    fail_on_breaking: bool = True
    approve_label: str = APPROVE_LABEL
    endpoint: str | None = None

    sha: str | None = None
    workspace: Path
    repo: RepoContext
    api_url: str = GITHUB_API_URL
    graphql_url: str = GITHUB_GRAPHQL_URL
    output_path: Path | None = None
    pull_request: PullRequest | None = None

    @property
    def schema_ref(self) -> str:
        """Git ref of the schema to compare against, e.g. ``master``."""
        return self.schema_pointer.partition(":")[0]

    @property
    def schema_path(self) -> str:
        """Repository path of the schema, or the whole pointer with an endpoint."""
        if self.endpoint:
            return self.schema_pointer
        return self.schema_pointer.partition(":")[2]

    @property
    def has_approval_label(self) -> bool:
        """Whether the pull request has been labelled to approve breaking changes."""
        if self.pull_request is None:
            return False
        return self.approve_label in self.pull_request.labels

    @classmethod
    def from_environment(  # noqa: PLR0913
        cls,
        environ: Mapping[str, str],
        *,
        github_token: str | None,
        schema_pointer: str | None,
        check_name: str | None = None,
        experimental_merge: bool = False,
        annotations: bool = True,
        fail_on_breaking: bool = True,
        approve_label: str | None = None,
        endpoint: str | None = None,
    ) -> "InspectorConfig":
        """Combine the parsed inputs with the GitHub Actions environment.

        :param environ: the process environment, e.g. ``os.environ``
        :raises ConfigurationError: if a required input or variable is missing
        """
        if not github_token:
            msg = "Input required and not supplied: github-token"
            raise ConfigurationError(msg)
        if not schema_pointer:
            msg = "Failed to find `schema` variable"
            raise ConfigurationError(msg)
        if not endpoint and ":" not in schema_pointer:
            msg = f"Invalid `schema` variable '{schema_pointer}', expected 'ref:path'"
            raise ConfigurationError(msg)

        workspace = environ.get("GITHUB_WORKSPACE")
        if not workspace:
            msg = "Failed to resolve workspace directory. GITHUB_WORKSPACE is missing"
            raise ConfigurationError(msg)

        try:
            repo = RepoContext.from_slug(environ.get("GITHUB_REPOSITORY", ""))
        except ValueError as exc:
            msg = f"Failed to resolve repository. GITHUB_REPOSITORY: {exc}"
            raise ConfigurationError(msg) from exc

        return cls(
            github_token=github_token,
            check_name=check_name or CHECK_NAME,
            schema_pointer=schema_pointer,
            experimental_merge=experimental_merge,
            annotations=annotations,
            fail_on_breaking=fail_on_breaking,
            approve_label=approve_label or APPROVE_LABEL,
            endpoint=endpoint or None,
            sha=environ.get("GITHUB_SHA") or None,
            workspace=Path(workspace),
            repo=repo,
            api_url=environ.get("GITHUB_API_URL") or GITHUB_API_URL,
            graphql_url=environ.get("GITHUB_GRAPHQL_URL") or GITHUB_GRAPHQL_URL,
            output_path=Path(p) if (p := environ.get("GITHUB_OUTPUT")) else None,
            pull_request=read_pull_request(environ.get("GITHUB_EVENT_PATH")),
        )


def read_pull_request(event_path: str | None) -> PullRequest | None:
    """Read the pull request of the triggering event, if there is one.

    :param event_path: path of the webhook payload, as in ``GITHUB_EVENT_PATH``
    :raises ConfigurationError: if the payload cannot be read
    """
    if not event_path or not (event_file := Path(event_path)).exists():
        return None
    try:
        with event_file.open("r", encoding="utf-8") as payload_file:
            payload = json.load(payload_file)
        return PullRequest.from_event_payload(payload)
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
        msg = f"Failed to read the event payload {event_path}: {exc!r}"
        raise ConfigurationError(msg) from exc
