"""Issue key grammar and extraction."""

from __future__ import annotations

from .grammar import AnchorMode, KeyGrammar, Preference
from .keys import CandidateMatch, KeyExtractor, extract_key, extract_keys

__all__ = [
    "AnchorMode",
    "CandidateMatch",
    "KeyExtractor",
    "KeyGrammar",
    "Preference",
    "extract_key",
    "extract_keys",
]
