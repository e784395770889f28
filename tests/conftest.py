"""Shared pytest fixtures for jiralint tests."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
import socket
from typing import Any

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session", autouse=True)
def block_network() -> None:
    """Prevent network access during the entire test session."""

    original_socket = socket.socket
    original_create_connection = socket.create_connection

    def _guard(*args: object, **kwargs: object) -> socket.socket:  # type: ignore[override]
        raise RuntimeError("Network access is disabled during tests.")

    socket.socket = _guard  # type: ignore[assignment]
    socket.create_connection = _guard  # type: ignore[assignment]

    try:
        yield
    finally:
        socket.socket = original_socket
        socket.create_connection = original_create_connection


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CI-provided inputs from leaking into settings under test."""

    for name in list(os.environ):
        if name.startswith("INPUT_") or name in {
            "JIRA_BASE_URL",
            "JIRA_TOKEN",
            "JIRA_USER",
            "GITHUB_TOKEN",
            "GITHUB_API_URL",
            "GITHUB_EVENT_PATH",
            "JIRALINT_LOG_JSON",
        }:
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_logging() -> None:
    """Drop handlers installed by ``configure_logging`` during a test."""

    root = logging.getLogger()
    level = root.level
    handlers = list(root.handlers)
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


def load_fixture(*parts: str) -> Any:
    return json.loads(FIXTURES.joinpath(*parts).read_text(encoding="utf-8"))


@pytest.fixture
def jira_issue_payload() -> dict[str, Any]:
    return load_fixture("jira", "issue_eng_117.json")


@pytest.fixture
def pull_request_event_payload() -> dict[str, Any]:
    return load_fixture("github", "pull_request_event.json")


@pytest.fixture
def commits_payload() -> list[dict[str, Any]]:
    return load_fixture("github", "pull_request_commits.json")
