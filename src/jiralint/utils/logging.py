"""Hide Jira and GitHub credentials before they reach a log line."""

from __future__ import annotations

import re
from typing import Any, Mapping

# Settings fields, action inputs and HTTP headers that hold credentials.
SECRET_FIELDS = frozenset(
    {
        "jira_token",
        "github_token",
        "authorization",
        "token",
        "secret",
        "password",
    }
)
_SECRET_SUFFIXES = ("_token", "_secret", "_password")
_AUTH_HEADER_VALUE = re.compile(r"^\s*(basic|bearer)\s+\S", re.IGNORECASE)


def is_secret_field(name: object) -> bool:
    """Return ``True`` for ``jira-token``, ``GITHUB_TOKEN``, ``Authorization`` and the like."""

    normalized = str(name).strip().lower().replace("-", "_")
    if normalized.startswith("input_"):
        normalized = normalized[len("input_") :]
    return normalized in SECRET_FIELDS or normalized.endswith(_SECRET_SUFFIXES)


def redact(key: str | None, value: Any, *, placeholder: str = "***") -> Any:
    """Return *value* with credentials replaced by *placeholder*.

    A value is hidden when its *key* names a credential or when it looks like
    an ``Authorization`` header value (``Basic ...``, ``Bearer ...``). Blank
    values are kept so a missing token is still visible in the logs. Mappings
    and lists are walked.
    """

    if value in (None, ""):
        return value
    if key is not None and is_secret_field(key):
        return placeholder
    if isinstance(value, str):
        return placeholder if _AUTH_HEADER_VALUE.match(value) else value
    if isinstance(value, Mapping):
        return redact_items(value, placeholder=placeholder)
    if isinstance(value, (list, tuple)):
        items = [redact(None, item, placeholder=placeholder) for item in value]
        return tuple(items) if isinstance(value, tuple) else items
    return value


def redact_items(items: Mapping[str, Any], *, placeholder: str = "***") -> dict[str, Any]:
    """Return a copy of *items* with every credential redacted."""

    return {key: redact(key, value, placeholder=placeholder) for key, value in items.items()}


__all__ = ["SECRET_FIELDS", "is_secret_field", "redact", "redact_items"]
