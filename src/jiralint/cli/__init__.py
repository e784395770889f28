"""jiralint command line interface."""

from __future__ import annotations

from .__main__ import cli, main

__all__ = ["cli", "main"]
