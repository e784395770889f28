"""Normalized Jira issue details used to label and describe pull requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import quote

DEFAULT_ESTIMATE_FIELD = "customfield_10016"


@dataclass(frozen=True)
class IssueType:
    name: str
    icon: str


@dataclass(frozen=True)
class ProjectRef:
    name: str
    key: str
    url: str


@dataclass(frozen=True)
class LabelLink:
    name: str
    url: str


@dataclass(frozen=True)
class JiraIssueDetails:
    """The subset of a Jira issue rendered into pull request descriptions."""

    key: str
    summary: str
    url: str
    status: str
    type: IssueType
    project: ProjectRef
    estimate: str | int | float | None
    labels: tuple[LabelLink, ...]

    @property
    def display_estimate(self) -> str:
        if self.estimate is None or self.estimate == "":
            return "N/A"
        return str(self.estimate)

    @classmethod
    def from_issue_payload(
        cls,
        payload: Mapping[str, Any],
        *,
        base_url: str,
        key: str | None = None,
        estimate_field: str = DEFAULT_ESTIMATE_FIELD,
    ) -> "JiraIssueDetails":
        """Build details from a ``GET /rest/api/3/issue/{key}`` response."""

        fields = payload.get("fields")
        if not isinstance(fields, Mapping):
            fields = {}

        issue_key = str(payload.get("key") or key or "").upper()
        project = fields.get("project") if isinstance(fields.get("project"), Mapping) else {}
        project_key = str(project.get("key") or "")
        issue_type = fields.get("issuetype") if isinstance(fields.get("issuetype"), Mapping) else {}
        status = fields.get("status") if isinstance(fields.get("status"), Mapping) else {}

        estimate = fields.get(estimate_field)
        if not isinstance(estimate, (str, int, float)) or isinstance(estimate, bool):
            estimate = None

        labels = tuple(
            LabelLink(name=label, url=label_search_url(base_url, project_key, label))
            for label in fields.get("labels") or []
            if isinstance(label, str) and label
        )

        return cls(
            key=issue_key,
            summary=str(fields.get("summary") or ""),
            url=f"{base_url}/browse/{issue_key}",
            status=str(status.get("name") or ""),
            type=IssueType(
                name=str(issue_type.get("name") or ""),
                icon=str(issue_type.get("iconUrl") or ""),
            ),
            project=ProjectRef(
                name=str(project.get("name") or ""),
                key=project_key,
                url=f"{base_url}/browse/{project_key}",
            ),
            estimate=estimate,
            labels=labels,
        )


def label_search_url(base_url: str, project_key: str, label: str) -> str:
    """Return a Jira search URL listing the project's issues carrying *label*."""

    jql = f"project = {project_key} AND labels = {label} ORDER BY created DESC"
    return f"{base_url}/issues?jql={quote(jql, safe='')}"


__all__ = [
    "DEFAULT_ESTIMATE_FIELD",
    "IssueType",
    "JiraIssueDetails",
    "LabelLink",
    "ProjectRef",
    "label_search_url",
]
