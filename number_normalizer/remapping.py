"""
User-defined word remappings ("new line" → "\\n", "comma" → ",", ...).

Matches are whole-word and case-insensitive, so a remapping for "cat" never
touches "concatenate".
"""

from __future__ import annotations

import re
import unicodedata
from typing import Iterable

from .models import WordRemapping

# Replacements that are a single punctuation mark swallow repeats of it
# ("comma comma" → "," rather than ",,")
_PUNCTUATION_REPLACEMENTS: frozenset[str] = frozenset({",", ".", "!", "?", ":", ";"})


def _is_punctuation_only(replacement: str) -> bool:
    return replacement.strip() in _PUNCTUATION_REPLACEMENTS


def _is_unicode_punctuation(char: str) -> bool:
    return unicodedata.category(char).startswith("P")


def _build_pattern(remapping: WordRemapping, match: str) -> re.Pattern[str]:
    escaped = re.escape(match)
    if _is_punctuation_only(remapping.replacement) and not remapping.append_newline:
        punctuation = re.escape(remapping.replacement.strip())
        pattern = rf"(?<!\w){escaped}(?!\w)(?:\s*{punctuation})*"
    else:
        pattern = rf"(?<!\w){escaped}(?!\w)"
    return re.compile(pattern, re.IGNORECASE)


def _sub_swallowing_punctuation(pattern: re.Pattern[str], replacement: str, text: str) -> str:
    """Replace each match along with the punctuation run right after it.

    Only Unicode punctuation (categories P*) is dropped; symbols such as
    "$" or "%" stay.
    """
    pieces: list[str] = []
    pos = 0
    for m in pattern.finditer(text):
        if m.start() < pos:
            continue
        pieces.append(text[pos:m.start()])
        pieces.append(replacement)
        end = m.end()
        while end < len(text) and _is_unicode_punctuation(text[end]):
            end += 1
        pos = end
    pieces.append(text[pos:])
    return "".join(pieces)


def apply_remappings(text: str, remappings: Iterable[WordRemapping]) -> str:
    """Apply each enabled remapping, in order, to the text."""
    output = text
    for remapping in remappings:
        if not remapping.is_enabled:
            continue
        match = remapping.match.strip()
        if not match:
            continue
        replacement = remapping.replacement + ("\n" if remapping.append_newline else "")
        pattern = _build_pattern(remapping, match)
        if remapping.append_newline:
            # The newline replaces any punctuation the transcriber put after the word
            output = _sub_swallowing_punctuation(pattern, replacement, output)
        else:
            output = pattern.sub(lambda _m, r=replacement: r, output)
    return output
