"""Jira issue key extraction from branch names, titles and commit messages."""

from __future__ import annotations

from dataclasses import dataclass

from .grammar import AnchorMode, KeyGrammar, Preference


@dataclass(frozen=True)
class CandidateMatch:
    """A key-shaped substring and its offsets in the scanned text."""

    raw: str
    start: int
    end: int

    @property
    def key(self) -> str:
        return self.raw.upper()


def _normalize_source(text: object) -> str | None:
    if not isinstance(text, str):  # tolerate ``None`` and unexpected payload types
        return None
    if not text.strip():
        return None
    return text


class KeyExtractor:
    """Find issue keys according to a :class:`KeyGrammar`."""

    def __init__(self, grammar: KeyGrammar | None = None) -> None:
        self.grammar = grammar or KeyGrammar()

    def find_candidates(self, text: str | None) -> list[CandidateMatch]:
        """Return every key-shaped substring of *text*, left to right."""

        source = _normalize_source(text)
        if source is None:
            return []

        if self.grammar.anchor is AnchorMode.START:
            match = self.grammar.anchored_pattern().match(source)
            if match is None:
                return []
            return [CandidateMatch(raw=match.group(0), start=0, end=match.end())]

        length = len(source)
        candidates: list[CandidateMatch] = []
        for match in self.grammar.reversed_pattern().finditer(source[::-1]):
            start = length - match.end()
            end = length - match.start()
            candidates.append(CandidateMatch(raw=source[start:end], start=start, end=end))
        candidates.reverse()
        return candidates

    def extract_keys(self, text: str | None) -> list[str]:
        """Return unique normalized keys found in *text* preserving order."""

        seen: list[str] = []
        for candidate in self.find_candidates(text):
            if candidate.key not in seen:
                seen.append(candidate.key)
        return seen

    def extract_key(self, text: str | None) -> str:
        """Return the preferred key in *text* or an empty string."""

        candidates = self.find_candidates(text)
        if not candidates:
            return ""
        if self.grammar.prefer is Preference.FIRST:
            return candidates[0].key
        return candidates[-1].key

    def contains_key(self, text: str | None) -> bool:
        return bool(self.find_candidates(text))

    def is_key(self, value: str | None) -> bool:
        """Return ``True`` when *value* is exactly one normalized key."""

        if not isinstance(value, str):
            return False
        return self.grammar.key_pattern().fullmatch(value) is not None


def extract_keys(text: str | None, grammar: KeyGrammar | None = None) -> list[str]:
    """Convenience wrapper around :meth:`KeyExtractor.extract_keys`."""

    return KeyExtractor(grammar).extract_keys(text)


def extract_key(text: str | None, grammar: KeyGrammar | None = None) -> str:
    """Convenience wrapper around :meth:`KeyExtractor.extract_key`."""

    return KeyExtractor(grammar).extract_key(text)


__all__ = [
    "CandidateMatch",
    "KeyExtractor",
    "extract_key",
    "extract_keys",
]
