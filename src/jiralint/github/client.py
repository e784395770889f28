"""GitHub REST calls for a single pull request."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Sequence

import requests

from ..errors import GitHubRequestError
from ..logging_config import get_logger
from ..validation.commits import Commit

LOGGER = get_logger(__name__)
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 10.0
COMMITS_PER_PAGE = 100


class GitHubClient:
    """Read commits from and write feedback to one pull request."""

    def __init__(
        self,
        repository: str,
        number: int,
        token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.repository = repository
        self.number = number
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "User-Agent": "jiralint",
            }
        )

    @property
    def _pull_url(self) -> str:
        return f"{self.api_url}/repos/{self.repository}/pulls/{self.number}"

    @property
    def _issue_url(self) -> str:
        return f"{self.api_url}/repos/{self.repository}/issues/{self.number}"

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        context: Dict[str, Any] = {"method": method, "url": url}
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise GitHubRequestError(f"GitHub request failed: {exc}", context=context) from exc
        if response.status_code >= 400:
            context["status_code"] = response.status_code
            raise GitHubRequestError(
                f"GitHub API error {response.status_code}: {response.text}",
                context=context,
            )
        return response

    def _paginate(self, url: str, params: Dict[str, Any] | None = None) -> Iterable[dict]:
        next_url: str | None = url
        while next_url:
            response = self._request("GET", next_url, params=params)
            payload = response.json()
            if not isinstance(payload, list):
                raise GitHubRequestError(
                    "Unexpected payload from GitHub API", context={"url": next_url}
                )
            yield from payload
            links = getattr(response, "links", None) or {}
            next_url = links.get("next", {}).get("url")
            params = None  # the next link already carries the query string

    def list_commits(self) -> List[Commit]:
        commits = [
            Commit.from_github(item)
            for item in self._paginate(
                f"{self._pull_url}/commits", {"per_page": COMMITS_PER_PAGE}
            )
        ]
        LOGGER.info("Fetched pull request commits", extra={"count": len(commits)})
        return commits

    def post_comment(self, body: str) -> None:
        self._request("POST", f"{self._issue_url}/comments", json={"body": body})

    def update_body(self, body: str) -> None:
        self._request("PATCH", self._pull_url, json={"body": body})

    def add_labels(self, labels: Sequence[str]) -> None:
        if not labels:
            return
        self._request("POST", f"{self._issue_url}/labels", json={"labels": list(labels)})


class DryRunPullRequest:
    """Stand-in for :class:`GitHubClient` that logs writes instead of sending them.

    Commits are still read through *reader* so the checks run against the
    real pull request.
    """

    def __init__(self, reader: GitHubClient | None = None) -> None:
        self.reader = reader
        self.comments: List[str] = []
        self.bodies: List[str] = []
        self.labels: List[str] = []

    def list_commits(self) -> List[Commit]:
        return self.reader.list_commits() if self.reader is not None else []

    def post_comment(self, body: str) -> None:
        self.comments.append(body)
        LOGGER.info("Dry run: comment not posted", extra={"length": len(body)})

    def update_body(self, body: str) -> None:
        self.bodies.append(body)
        LOGGER.info("Dry run: description not updated", extra={"length": len(body)})

    def add_labels(self, labels: Sequence[str]) -> None:
        self.labels.extend(labels)
        LOGGER.info("Dry run: labels not added", extra={"labels": list(labels)})


__all__ = ["COMMITS_PER_PAGE", "DryRunPullRequest", "GitHubClient"]
