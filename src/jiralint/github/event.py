"""Parsing of the ``pull_request`` event GitHub Actions hands to the linter."""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
from typing import Any, Mapping

from ..errors import ConfigurationError


@dataclass(frozen=True)
class PullRequestEvent:
    repository: str
    number: int
    title: str
    body: str
    head_branch: str
    base_branch: str
    additions: int

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "PullRequestEvent":
        """Build the event from a webhook payload.

        Missing optional fields default to empty values. A payload without a
        ``pull_request`` object or a repository name is a configuration error:
        the linter is only meaningful on pull request events.
        """

        pull_request = payload.get("pull_request")
        if not isinstance(pull_request, Mapping):
            raise ConfigurationError("Event payload has no 'pull_request' object")

        repository = payload.get("repository")
        full_name = repository.get("full_name") if isinstance(repository, Mapping) else None
        if not full_name and isinstance(repository, Mapping):
            owner = repository.get("owner")
            login = owner.get("login") if isinstance(owner, Mapping) else None
            name = repository.get("name")
            if login and name:
                full_name = f"{login}/{name}"
        if not full_name:
            raise ConfigurationError("Event payload has no repository name")

        head = pull_request.get("head")
        base = pull_request.get("base")
        try:
            additions = int(pull_request.get("additions") or 0)
        except (TypeError, ValueError):
            additions = 0

        return cls(
            repository=str(full_name),
            number=int(pull_request.get("number") or 0),
            title=str(pull_request.get("title") or ""),
            body=str(pull_request.get("body") or ""),
            head_branch=str(head.get("ref") or "") if isinstance(head, Mapping) else "",
            base_branch=str(base.get("ref") or "") if isinstance(base, Mapping) else "",
            additions=additions,
        )


def load_event(path: str | Path) -> PullRequestEvent:
    """Read ``GITHUB_EVENT_PATH`` and return the pull request it describes."""

    event_path = Path(path)
    try:
        payload = json.loads(event_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigurationError(
            "Event file not found", context={"path": str(event_path)}
        ) from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(
            "Event file is not valid JSON", context={"path": str(event_path)}
        ) from exc
    if not isinstance(payload, Mapping):
        raise ConfigurationError(
            "Event file must contain a JSON object", context={"path": str(event_path)}
        )
    return PullRequestEvent.from_payload(payload)


__all__ = ["PullRequestEvent", "load_event"]
