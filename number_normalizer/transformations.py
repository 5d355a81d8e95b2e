"""
Pure text transformations — every stage kind except the LLM rewrite.

Each function takes a string and returns a string. No I/O, no shared state,
so they can run in any order and on any thread.
"""

from __future__ import annotations

import re

from .models import ReplaceTextConfig, Transformation, TransformationKind
from .remapping import apply_remappings
from .word_to_number import normalize

_WHITESPACE_RUN = re.compile(r"\s+")
_WORD = re.compile(r"\S+")


def title_case(text: str) -> str:
    """Capitalize each whitespace-separated word ("don't stop" → "Don't Stop")."""
    return _WORD.sub(lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), text)


def spongebob_case(text: str) -> str:
    """Lowercase even positions, uppercase odd ones: "hello" → "hElLo"."""
    return "".join(
        char.upper() if index % 2 else char.lower() for index, char in enumerate(text)
    )


def capitalize_first(text: str) -> str:
    if not text:
        return text
    return text[0].upper() + text[1:]


def replace_text(text: str, config: ReplaceTextConfig) -> str:
    """Replace every occurrence of the configured pattern."""
    flags = 0 if config.case_sensitive else re.IGNORECASE
    pattern = config.pattern if config.use_regex else re.escape(config.pattern)
    if not pattern:
        return text
    if config.use_regex:
        return re.sub(pattern, config.replacement, text, flags=flags)
    return re.sub(pattern, lambda _m: config.replacement, text, flags=flags)


def transform(transformation: Transformation, text: str) -> str:
    """Apply one non-LLM stage. Disabled stages return the text unchanged."""
    if not transformation.is_enabled:
        return text

    kind = transformation.kind
    if kind == TransformationKind.UPPERCASE:
        return text.upper()
    if kind == TransformationKind.LOWERCASE:
        return text.lower()
    if kind == TransformationKind.CAPITALIZE:
        return title_case(text)
    if kind == TransformationKind.CAPITALIZE_FIRST:
        return capitalize_first(text)
    if kind == TransformationKind.SPONGEBOB_CASE:
        return spongebob_case(text)
    if kind == TransformationKind.TRIM_WHITESPACE:
        return text.strip()
    if kind == TransformationKind.REMOVE_EXTRA_SPACES:
        return _WHITESPACE_RUN.sub(" ", text)
    if kind == TransformationKind.REPLACE_TEXT:
        assert transformation.replace is not None
        return replace_text(text, transformation.replace)
    if kind == TransformationKind.ADD_PREFIX:
        return (transformation.text or "") + text
    if kind == TransformationKind.ADD_SUFFIX:
        return text + (transformation.text or "")
    if kind == TransformationKind.CONVERT_NUMBERS:
        return normalize(text)
    if kind == TransformationKind.REMAP_WORDS:
        return apply_remappings(text, transformation.remappings)

    raise ValueError(f"{kind.value!r} is not a pure transformation")
