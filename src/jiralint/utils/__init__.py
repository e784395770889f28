"""Shared helpers for jiralint."""

from __future__ import annotations

from .logging import is_secret_field, redact, redact_items

__all__ = ["is_secret_field", "redact", "redact_items"]
