"""GitHub pull request access."""

from __future__ import annotations

from .client import DryRunPullRequest, GitHubClient
from .event import PullRequestEvent, load_event

__all__ = ["DryRunPullRequest", "GitHubClient", "PullRequestEvent", "load_event"]
