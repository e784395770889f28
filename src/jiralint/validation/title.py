"""Pull request title validation."""

from __future__ import annotations


def validate_title(title: str | None, expected_key: str | None) -> bool:
    """Return ``True`` when *title* opens with *expected_key* and a space."""

    if not isinstance(title, str) or not isinstance(expected_key, str):
        return False
    if not title or not expected_key:
        return False
    return title.startswith(f"{expected_key} ")


__all__ = ["validate_title"]
