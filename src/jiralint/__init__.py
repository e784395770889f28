"""jiralint: lint GitHub pull requests against the Jira issue they implement."""

from __future__ import annotations

from .matcher import extract_key, extract_keys
from .validation import validate_commits, validate_title

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "extract_key",
    "extract_keys",
    "validate_commits",
    "validate_title",
]
