"""Jira lookups for issue keys found in pull requests."""

from __future__ import annotations

from .client import JiraClient
from .models import IssueType, JiraIssueDetails, LabelLink, ProjectRef

__all__ = [
    "IssueType",
    "JiraClient",
    "JiraIssueDetails",
    "LabelLink",
    "ProjectRef",
]
