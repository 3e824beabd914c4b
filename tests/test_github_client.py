from unittest.mock import Mock

import pytest
import requests

from issue_catalog import github_client
from issue_catalog.github_client import GitHubAPIError, GitHubIssueClient


def fake_response(status: int = 200, payload=None, headers=None, reason: str = "OK") -> Mock:
    response = Mock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.reason = reason
    response.headers = {"content-type": "application/json; charset=utf-8", **(headers or {})}
    response.json.return_value = payload if payload is not None else []
    return response


def make_client(**kwargs) -> GitHubIssueClient:
    return GitHubIssueClient("token-123", "awana/labs-showcase", **kwargs)


def test_repository_must_be_owner_slash_name():
    for bad in ("", "owner", "owner/", "/repo", "a/b/c"):
        with pytest.raises(ValueError):
            GitHubIssueClient("token", bad)


def test_fetch_paginates_until_short_page(monkeypatch):
    pages = [
        fake_response(payload=[{"number": 5}, {"number": 4}]),
        fake_response(payload=[{"number": 3}]),
    ]
    get = Mock(side_effect=pages)
    monkeypatch.setattr(github_client.requests, "get", get)

    issues = make_client(per_page=2).fetch_publishable_issues()

    assert [i["number"] for i in issues] == [5, 4, 3]
    assert get.call_count == 2
    first_call = get.call_args_list[0]
    assert first_call.args[0] == "https://api.github.com/repos/awana/labs-showcase/issues"
    assert first_call.kwargs["params"]["labels"] == "publish:yes"
    assert first_call.kwargs["params"]["state"] == "all"
    assert first_call.kwargs["params"]["page"] == 1
    assert get.call_args_list[1].kwargs["params"]["page"] == 2
    assert first_call.kwargs["headers"]["Authorization"] == "Bearer token-123"
    assert first_call.kwargs["timeout"] == 30


def test_fetch_stops_on_empty_page(monkeypatch):
    get = Mock(side_effect=[fake_response(payload=[{"number": 2}, {"number": 1}]), fake_response(payload=[])])
    monkeypatch.setattr(github_client.requests, "get", get)

    assert len(make_client(per_page=2).fetch_publishable_issues()) == 2
    assert get.call_count == 2


@pytest.mark.parametrize(
    "status, headers, fragment",
    [
        (401, {}, "authentication failed"),
        (404, {}, "awana/labs-showcase not found"),
        (403, {"X-RateLimit-Reset": "0"}, "Resets at: 1970-01-01T00:00:00+00:00"),
        (403, {}, "Resets at: unknown"),
        (500, {}, "request failed: 500"),
    ],
)
def test_http_errors_are_mapped(monkeypatch, status, headers, fragment):
    monkeypatch.setattr(
        github_client.requests,
        "get",
        Mock(return_value=fake_response(status=status, headers=headers, reason="Error")),
    )
    with pytest.raises(GitHubAPIError) as excinfo:
        make_client().fetch_publishable_issues()
    assert fragment in str(excinfo.value)


def test_non_json_response_is_rejected(monkeypatch):
    response = fake_response()
    response.headers = {"content-type": "text/html"}
    monkeypatch.setattr(github_client.requests, "get", Mock(return_value=response))

    with pytest.raises(GitHubAPIError, match="Expected JSON"):
        make_client().fetch_page(1)


def test_network_errors_are_wrapped(monkeypatch):
    monkeypatch.setattr(
        github_client.requests,
        "get",
        Mock(side_effect=requests.ConnectionError("connection refused")),
    )
    with pytest.raises(GitHubAPIError, match="Network error"):
        make_client().fetch_page(1)


@pytest.mark.parametrize("per_page", [0, -5, 101, 200])
def test_per_page_outside_api_limits_is_rejected(per_page):
    with pytest.raises(ValueError, match="per_page"):
        make_client(per_page=per_page)


def test_fetch_collects_every_page_at_api_maximum(monkeypatch):
    issues = [{"number": n} for n in range(250, 0, -1)]

    def get(url, headers, params, timeout):
        start = (params["page"] - 1) * params["per_page"]
        return fake_response(payload=issues[start : start + params["per_page"]])

    tracked = Mock(side_effect=get)
    monkeypatch.setattr(github_client.requests, "get", tracked)

    fetched = make_client(per_page=100).fetch_publishable_issues()

    assert len(fetched) == 250
    assert tracked.call_count == 3
