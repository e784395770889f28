"""Application specific exception hierarchy."""

from __future__ import annotations

from typing import Any


class JiraLintError(RuntimeError):
    """Base exception that carries structured context."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


class ConfigurationError(JiraLintError):
    """Raised when required inputs are missing or malformed."""


class JiraRequestError(JiraLintError):
    """Raised when a Jira REST call fails."""


class JiraIssueNotFoundError(JiraRequestError):
    """Raised when Jira has no issue for the requested key."""


class JiraUnauthorizedError(JiraRequestError):
    """Raised when Jira rejects the configured credentials."""


class JiraTimeoutError(JiraRequestError):
    """Raised when Jira does not answer within the configured timeout."""


class GitHubRequestError(JiraLintError):
    """Raised when GitHub requests fail."""


__all__ = [
    "JiraLintError",
    "ConfigurationError",
    "JiraRequestError",
    "JiraIssueNotFoundError",
    "JiraUnauthorizedError",
    "JiraTimeoutError",
    "GitHubRequestError",
]
