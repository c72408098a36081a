# type: ignore  # noqa: PGH003
# ruff: noqa: S101, D103, D100, INP001, S106
from unittest.mock import MagicMock, patch

import pytest
from requests import HTTPError

from graphql_checks.errors import GitHubAPIError
from graphql_checks.github_api import GitHubChecks
from graphql_checks.models import RepoContext


@pytest.fixture
def checks() -> GitHubChecks:
    return GitHubChecks(
        api_url="https://api.github.com",
        graphql_url="https://api.github.com/graphql",
        repo=RepoContext(owner="octo", repo="api"),
        token="secret",
    )


def json_response(body) -> MagicMock:
    response = MagicMock()
    response.json.return_value = body
    return response


def test_headers(checks: GitHubChecks) -> None:
    assert checks.headers["Authorization"] == "Bearer secret"
    assert checks.repo_base_url == "https://api.github.com/repos/octo/api"


@patch("graphql_checks.github_api.post")
def test_create_check_run(mock_post, checks: GitHubChecks) -> None:
    mock_post.return_value = json_response({"id": 1234})

    assert checks.create_check_run("GraphQL Inspector", "1111111") == "1234"

    url = mock_post.call_args.args[0]
    payload = mock_post.call_args.kwargs["json"]
    assert url == "https://api.github.com/repos/octo/api/check-runs"
    assert payload["name"] == "GraphQL Inspector"
    assert payload["head_sha"] == "1111111"
    assert payload["status"] == "in_progress"
    assert payload["started_at"]
    assert mock_post.call_args.kwargs["timeout"] == 10


@patch("graphql_checks.github_api.post")
def test_create_check_run_http_error(mock_post, checks: GitHubChecks) -> None:
    mock_post.return_value.raise_for_status.side_effect = HTTPError("403")

    with pytest.raises(HTTPError):
        checks.create_check_run("GraphQL Inspector", "1111111")


@patch("graphql_checks.github_api.patch")
def test_update_check_run(mock_patch, checks: GitHubChecks) -> None:
    checks.update_check_run("1234", {"conclusion": "success"})

    mock_patch.assert_called_once()
    assert (
        mock_patch.call_args.args[0]
        == "https://api.github.com/repos/octo/api/check-runs/1234"
    )
    assert mock_patch.call_args.kwargs["json"] == {"conclusion": "success"}
    mock_patch.return_value.raise_for_status.assert_called_once()


@patch("graphql_checks.github_api.post")
def test_graphql_returns_data(mock_post, checks: GitHubChecks) -> None:
    mock_post.return_value = json_response({"data": {"repository": None}})

    assert checks.graphql("query { viewer { login } }", {"a": 1}) == {
        "repository": None,
    }
    assert mock_post.call_args.args[0] == "https://api.github.com/graphql"
    assert mock_post.call_args.kwargs["json"] == {
        "query": "query { viewer { login } }",
        "variables": {"a": 1},
    }


@patch("graphql_checks.github_api.post")
def test_graphql_errors(mock_post, checks: GitHubChecks) -> None:
    mock_post.return_value = json_response(
        {"data": None, "errors": [{"message": "Could not resolve to a Repository"}]},
    )

    with pytest.raises(GitHubAPIError, match="Could not resolve"):
        checks.graphql("query { viewer { login } }", {})
