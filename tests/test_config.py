# type: ignore  # noqa: PGH003
# ruff: noqa: S101, D103, D100, INP001
import json
from pathlib import Path

import pytest

from graphql_checks.config import InspectorConfig, PullRequest, read_pull_request
from graphql_checks.errors import ConfigurationError
from graphql_checks.models import RepoContext


@pytest.fixture
def environ(tmp_path: Path) -> dict[str, str]:
    return {
        "GITHUB_WORKSPACE": str(tmp_path),
        "GITHUB_REPOSITORY": "octo/api",
        "GITHUB_SHA": "1111111",
    }


@pytest.fixture
def event_path(tmp_path: Path) -> Path:
    payload = {
        "action": "labeled",
        "pull_request": {
            "number": 17,
            "base": {"ref": "main"},
            "labels": [{"name": "approved-breaking-change"}, {"name": "graphql"}],
        },
    }
    path = tmp_path / "event.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_from_environment_defaults(environ: dict[str, str], tmp_path: Path) -> None:
    config = InspectorConfig.from_environment(
        environ,
        github_token="secret",
        schema_pointer="master:schema.graphql",
    )

    assert config.check_name == "GraphQL Inspector"
    assert config.approve_label == "approved-breaking-change"
    assert config.annotations is True
    assert config.fail_on_breaking is True
    assert config.experimental_merge is False
    assert config.endpoint is None
    assert config.sha == "1111111"
    assert config.workspace == tmp_path
    assert config.repo == RepoContext(owner="octo", repo="api")
    assert config.api_url == "https://api.github.com"
    assert config.graphql_url == "https://api.github.com/graphql"
    assert config.output_path is None
    assert config.pull_request is None
    assert config.has_approval_label is False
    assert config.schema_ref == "master"
    assert config.schema_path == "schema.graphql"


def test_from_environment_empty_inputs_use_defaults(environ: dict[str, str]) -> None:
    config = InspectorConfig.from_environment(
        environ,
        github_token="secret",
        schema_pointer="master:schema.graphql",
        check_name="",
        approve_label="",
        endpoint="",
    )

    assert config.check_name == "GraphQL Inspector"
    assert config.approve_label == "approved-breaking-change"
    assert config.endpoint is None


def test_from_environment_with_pull_request(
    environ: dict[str, str],
    event_path: Path,
) -> None:
    environ["GITHUB_EVENT_PATH"] = str(event_path)
    environ["GITHUB_OUTPUT"] = "/tmp/output"  # noqa: S108

    config = InspectorConfig.from_environment(
        environ,
        github_token="secret",
        schema_pointer="master:schema.graphql",
    )

    assert config.pull_request == PullRequest(
        number=17,
        base_ref="main",
        labels=["approved-breaking-change", "graphql"],
    )
    assert config.has_approval_label is True
    assert config.output_path == Path("/tmp/output")  # noqa: S108


def test_custom_approve_label_not_present(
    environ: dict[str, str],
    event_path: Path,
) -> None:
    environ["GITHUB_EVENT_PATH"] = str(event_path)

    config = InspectorConfig.from_environment(
        environ,
        github_token="secret",
        schema_pointer="master:schema.graphql",
        approve_label="ship-it",
    )

    assert config.has_approval_label is False


def test_schema_path_with_endpoint(environ: dict[str, str]) -> None:
    config = InspectorConfig.from_environment(
        environ,
        github_token="secret",
        schema_pointer="schema.graphql",
        endpoint="https://api.example.com/graphql",
    )

    assert config.schema_path == "schema.graphql"


@pytest.mark.parametrize(
    ("overrides", "env_removed", "message"),
    [
        ({"github_token": ""}, None, "github-token"),
        ({"schema_pointer": None}, None, "`schema`"),
        ({"schema_pointer": "schema.graphql"}, None, "ref:path"),
        ({}, "GITHUB_WORKSPACE", "GITHUB_WORKSPACE"),
        ({}, "GITHUB_REPOSITORY", "GITHUB_REPOSITORY"),
    ],
)
def test_from_environment_configuration_errors(
    environ: dict[str, str],
    overrides,
    env_removed,
    message,
) -> None:
    if env_removed:
        del environ[env_removed]
    inputs = {"github_token": "secret", "schema_pointer": "master:schema.graphql"}
    inputs.update(overrides)

    with pytest.raises(ConfigurationError, match=message):
        InspectorConfig.from_environment(environ, **inputs)


def test_read_pull_request_without_pull_request(tmp_path: Path) -> None:
    event_path = tmp_path / "push.json"
    event_path.write_text(json.dumps({"ref": "refs/heads/main"}), encoding="utf-8")

    assert read_pull_request(str(event_path)) is None
    assert read_pull_request(str(tmp_path / "missing.json")) is None
    assert read_pull_request(None) is None


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        '{"pull_request": {"labels": []}}',
        '{"pull_request": "17"}',
    ],
)
def test_read_pull_request_malformed_payload(tmp_path: Path, content: str) -> None:
    event_path = tmp_path / "event.json"
    event_path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigurationError, match="event payload"):
        read_pull_request(str(event_path))
