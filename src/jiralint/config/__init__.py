"""Settings loading for jiralint."""

from __future__ import annotations

from .settings import LintSettings, load_settings

__all__ = ["LintSettings", "load_settings"]
