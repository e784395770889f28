"""Issue key grammar policies.

A :class:`KeyGrammar` captures every knob that decides what counts as a Jira
issue key in free-form text: the project-code alphabet, case handling, whether
the key must open the string, and which candidate wins when several are found.
Patterns are derived from the policy on demand, so there is no module level
regex state to keep in sync.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
import re

MAX_PROJECT_LENGTH = 10


class AnchorMode(str, Enum):
    """Where a key may appear in the scanned text."""

    ANYWHERE = "anywhere"
    START = "start"


class Preference(str, Enum):
    """Which candidate :meth:`KeyExtractor.extract_key` returns."""

    LAST = "last"
    FIRST = "first"


@dataclass(frozen=True)
class KeyGrammar:
    """Policy describing how issue keys are recognised.

    ``ANYWHERE`` grammars scan the reversed text with a reversed pattern
    (``digits-EDOCTCEJORP``) so the project code is read right to left from
    the hyphen; the key token has to be bounded by non-alphanumeric
    characters or the string edges on both sides. ``START`` grammars only
    accept a key at offset 0 that is followed by a hyphen or the end of the
    string.
    """

    max_project_length: int = MAX_PROJECT_LENGTH
    project_digits: bool = True
    case_sensitive: bool = False
    anchor: AnchorMode = AnchorMode.ANYWHERE
    prefer: Preference = Preference.LAST

    def __post_init__(self) -> None:
        if self.max_project_length < 1:
            raise ValueError("max_project_length must be at least 1")
        object.__setattr__(self, "anchor", AnchorMode(self.anchor))
        object.__setattr__(self, "prefer", Preference(self.prefer))

    @classmethod
    def trailing(cls) -> "KeyGrammar":
        """Multi-key grammar where the right-most key wins (the default)."""

        return cls()

    @classmethod
    def leading(cls) -> "KeyGrammar":
        """Strict grammar: an uppercase key opening the string, e.g. ``ABC-12-fix``."""

        return cls(case_sensitive=True, anchor=AnchorMode.START, prefer=Preference.FIRST)

    @classmethod
    def from_name(cls, name: str) -> "KeyGrammar":
        normalized = (name or "").strip().lower()
        if normalized in {"", "trailing"}:
            return cls.trailing()
        if normalized == "leading":
            return cls.leading()
        raise ValueError(f"Unknown key grammar: {name!r} (expected 'trailing' or 'leading')")

    @property
    def general(self) -> "KeyGrammar":
        """Unanchored, case-insensitive grammar sharing this project alphabet."""

        return KeyGrammar(
            max_project_length=self.max_project_length,
            project_digits=self.project_digits,
        )

    @property
    def flags(self) -> int:
        return 0 if self.case_sensitive else re.IGNORECASE

    def _project(self) -> str:
        tail = self.max_project_length - 1
        if self.project_digits:
            return f"[A-Z][A-Z0-9]{{0,{tail}}}"
        return f"[A-Z]{{1,{self.max_project_length}}}"

    def _reversed_project(self) -> str:
        tail = self.max_project_length - 1
        if self.project_digits:
            return f"[A-Z0-9]{{0,{tail}}}[A-Z]"
        return f"[A-Z]{{1,{self.max_project_length}}}"

    def reversed_pattern(self) -> re.Pattern[str]:
        """Pattern matching keys in reversed text.

        The key itself is ASCII; any Unicode letter or digit next to it
        (``ÉNG-1``, ``ENG-1é``) means the token is not a key.
        """

        return _compile(
            rf"(?<![^\W_])(?a:[0-9]+-{self._reversed_project()})(?![^\W_])", self.flags
        )

    def anchored_pattern(self) -> re.Pattern[str]:
        """Pattern matching a key at offset 0 followed by ``-`` or the end."""

        return _compile(rf"^(?a:{self._project()}-[0-9]+)(?=-|$)", self.flags)

    def key_pattern(self) -> re.Pattern[str]:
        """Pattern for ``fullmatch`` checks of a single normalized key."""

        return _compile(rf"{self._project()}-[0-9]+", re.ASCII)


@lru_cache(maxsize=None)
def _compile(pattern: str, flags: int) -> re.Pattern[str]:
    return re.compile(pattern, flags)


__all__ = ["AnchorMode", "KeyGrammar", "MAX_PROJECT_LENGTH", "Preference"]
