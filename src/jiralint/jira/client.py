"""Minimal Jira REST client used to look up the issue behind a branch."""

from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import quote

import requests

from ..errors import (
    JiraIssueNotFoundError,
    JiraRequestError,
    JiraTimeoutError,
    JiraUnauthorizedError,
)
from ..logging_config import get_logger
from .models import DEFAULT_ESTIMATE_FIELD, JiraIssueDetails

LOGGER = get_logger(__name__)
DEFAULT_TIMEOUT = 2.0
ISSUE_FIELDS = ("project", "summary", "issuetype", "labels", "status")


class JiraClient:
    """Fetch issues from Jira Cloud's v3 REST API.

    ``token`` is either a pre-encoded ``Basic`` credential (``base64(email:token)``)
    or, when ``user`` is given, the raw API token paired with that user. Calls
    are made once; failures surface as :class:`JiraRequestError` subclasses.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        user: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        estimate_field: str = DEFAULT_ESTIMATE_FIELD,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.estimate_field = estimate_field
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if user:
            self.session.auth = (user, token)
        else:
            self.session.headers.update({"Authorization": f"Basic {token}"})

    def _issue_url(self, key: str) -> str:
        return f"{self.base_url}/rest/api/3/issue/{quote(key, safe='')}"

    def get_issue(self, key: str) -> Mapping[str, Any]:
        """Return the raw issue payload for *key*."""

        fields = ",".join((*ISSUE_FIELDS, self.estimate_field))
        context = {"issue_key": key, "url": self._issue_url(key)}
        try:
            response = self.session.request(
                "GET",
                self._issue_url(key),
                params={"fields": fields},
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            raise JiraTimeoutError(
                f"Jira did not respond within {self.timeout:g}s", context=context
            ) from exc
        except requests.RequestException as exc:
            raise JiraRequestError(f"Jira request failed: {exc}", context=context) from exc

        status = response.status_code
        context["status_code"] = status
        if status == 404:
            raise JiraIssueNotFoundError(f"Jira issue {key} was not found", context=context)
        if status in (401, 403):
            raise JiraUnauthorizedError(
                "Jira rejected the configured credentials", context=context
            )
        if status >= 400:
            raise JiraRequestError(
                f"Jira API error {status}: {response.text}", context=context
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise JiraRequestError("Jira returned a non-JSON payload", context=context) from exc
        if not isinstance(payload, Mapping):
            raise JiraRequestError("Unexpected payload from Jira API", context=context)
        return payload

    def get_issue_details(self, key: str) -> JiraIssueDetails:
        """Return :class:`JiraIssueDetails` for *key*."""

        payload = self.get_issue(key)
        details = JiraIssueDetails.from_issue_payload(
            payload,
            base_url=self.base_url,
            key=key,
            estimate_field=self.estimate_field,
        )
        LOGGER.debug(
            "Fetched Jira issue",
            extra={"issue_key": details.key, "status": details.status},
        )
        return details


__all__ = ["DEFAULT_TIMEOUT", "JiraClient"]
