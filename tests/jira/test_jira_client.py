from __future__ import annotations

from typing import Any
from urllib.parse import unquote

import pytest
import requests

from jiralint.errors import (
    JiraIssueNotFoundError,
    JiraRequestError,
    JiraTimeoutError,
    JiraUnauthorizedError,
)
from jiralint.jira.client import JiraClient
from jiralint.jira.models import JiraIssueDetails

BASE_URL = "https://example.atlassian.net"


class DummyResponse:
    def __init__(self, status_code: int, json_data: Any = None, *, text: str = "") -> None:
        self.status_code = status_code
        self._json = json_data
        self.text = text

    def json(self) -> Any:
        if self._json is None:
            raise ValueError("No JSON object could be decoded")
        return self._json


class FakeSession:
    def __init__(self, responses: list[Any]) -> None:
        self._responses = responses
        self.headers: dict[str, str] = {}
        self.auth: Any = None
        self.calls: list[dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any) -> DummyResponse:
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self._responses:
            raise AssertionError("No more responses configured")
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _client(responses: list[Any], **kwargs: Any) -> tuple[JiraClient, FakeSession]:
    session = FakeSession(responses)
    client = JiraClient(f"{BASE_URL}/", "ZW1haWw6dG9rZW4=", session=session, **kwargs)  # type: ignore[arg-type]
    return client, session


def test_get_issue_details(jira_issue_payload: dict[str, Any]) -> None:
    client, session = _client([DummyResponse(200, jira_issue_payload)])

    details = client.get_issue_details("ENG-117")

    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == f"{BASE_URL}/rest/api/3/issue/ENG-117"
    assert call["params"] == {
        "fields": "project,summary,issuetype,labels,status,customfield_10016"
    }
    assert call["timeout"] == 2.0
    assert session.headers["Authorization"] == "Basic ZW1haWw6dG9rZW4="

    assert details.key == "ENG-117"
    assert details.summary == "Add retry budget to webhook delivery"
    assert details.url == f"{BASE_URL}/browse/ENG-117"
    assert details.status == "In Progress"
    assert details.type.name == "Story"
    assert details.type.icon.endswith("story.svg")
    assert details.project.name == "Engineering"
    assert details.project.url == f"{BASE_URL}/browse/ENG"
    assert details.display_estimate == "5"
    assert [label.name for label in details.labels] == ["backend", "webhooks"]
    assert unquote(details.labels[0].url) == (
        f"{BASE_URL}/issues?jql=project = ENG AND labels = backend ORDER BY created DESC"
    )


def test_user_switches_to_basic_auth(jira_issue_payload: dict[str, Any]) -> None:
    client, session = _client([DummyResponse(200, jira_issue_payload)], user="bot@example.com")

    client.get_issue("ENG-117")

    assert session.auth == ("bot@example.com", "ZW1haWw6dG9rZW4=")
    assert "Authorization" not in session.headers


@pytest.mark.parametrize(
    "status, error",
    [
        (404, JiraIssueNotFoundError),
        (401, JiraUnauthorizedError),
        (403, JiraUnauthorizedError),
        (500, JiraRequestError),
    ],
)
def test_http_errors_are_mapped(status: int, error: type[Exception]) -> None:
    client, _ = _client([DummyResponse(status, text="nope")])

    with pytest.raises(error) as excinfo:
        client.get_issue_details("ENG-117")

    assert excinfo.value.context["status_code"] == status
    assert excinfo.value.context["issue_key"] == "ENG-117"


def test_not_found_is_a_request_error() -> None:
    assert issubclass(JiraIssueNotFoundError, JiraRequestError)


def test_timeout_is_reported_once() -> None:
    client, session = _client([requests.Timeout("slow")], timeout=0.5)

    with pytest.raises(JiraTimeoutError, match="0.5s"):
        client.get_issue("ENG-117")
    assert len(session.calls) == 1


def test_connection_error_is_wrapped() -> None:
    client, _ = _client([requests.ConnectionError("refused")])

    with pytest.raises(JiraRequestError, match="refused"):
        client.get_issue("ENG-117")


@pytest.mark.parametrize("payload", [None, ["not", "a", "mapping"]])
def test_unexpected_payloads(payload: Any) -> None:
    client, _ = _client([DummyResponse(200, payload)])

    with pytest.raises(JiraRequestError):
        client.get_issue("ENG-117")


def test_sparse_payload_uses_defaults() -> None:
    details = JiraIssueDetails.from_issue_payload(
        {"fields": {"customfield_10016": None, "labels": ["", 3]}},
        base_url=BASE_URL,
        key="eng-5",
    )

    assert details.key == "ENG-5"
    assert details.display_estimate == "N/A"
    assert details.labels == ()
    assert details.project.key == ""
