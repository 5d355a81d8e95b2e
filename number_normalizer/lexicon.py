"""
English cardinal number vocabulary.

These tables are the ONLY source of truth for what counts as a number word.
They are read-only views, so every caller (and every thread) can share them
without locking.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

# ─── Word Lookup Tables ──────────────────────────────────────────────

ONES: Mapping[str, int] = MappingProxyType({
    "zero": 0,
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
    "thirteen": 13,
    "fourteen": 14,
    "fifteen": 15,
    "sixteen": 16,
    "seventeen": 17,
    "eighteen": 18,
    "nineteen": 19,
})

TENS: Mapping[str, int] = MappingProxyType({
    "twenty": 20,
    "thirty": 30,
    "forty": 40,
    "fifty": 50,
    "sixty": 60,
    "seventy": 70,
    "eighty": 80,
    "ninety": 90,
})

SCALES: Mapping[str, int] = MappingProxyType({
    "hundred": 100,
    "thousand": 1_000,
    "million": 1_000_000,
    "billion": 1_000_000_000,
    "trillion": 1_000_000_000_000,
})

# Allowed mid-phrase, contribute no value ("one hundred and five")
CONNECTORS: frozenset[str] = frozenset({"and"})

# Switches the parser into decimal mode ("three point one four")
DECIMAL_POINT = "point"


# ─── Word Classifier ─────────────────────────────────────────────────


def is_number_word(word: str) -> bool:
    """Return True if a lowercased word token is a cardinal number word.

    A hyphenated word counts only when it splits into exactly two non-empty
    parts that are both number words ("twenty-five", but not "mother-in-law").
    Matching is on the whole token, so "someone" never matches "one".
    """
    parts = hyphen_parts(word)
    if len(parts) == 2:
        return is_number_word(parts[0]) and is_number_word(parts[1])
    return word in ONES or word in TENS or word in SCALES


def hyphen_parts(word: str) -> list[str]:
    """Split on hyphens, dropping empty pieces ("twenty--five" -> 2 parts)."""
    return [part for part in word.split("-") if part]


def is_single_digit(word: str) -> bool:
    """True for the ones-words that can follow "point" ("zero" .. "nine")."""
    value = ONES.get(word)
    return value is not None and value <= 9
