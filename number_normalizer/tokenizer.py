"""
Lossless tokenizer for transcribed text.

Splits text into maximal runs of one character class:

    word         letters, hyphen, apostrophe    "twenty-five", "don't"
    whitespace   spaces, tabs, newlines         "  ", "\\n"
    punctuation  everything else                ", ", "42", "$"

Digits land in punctuation runs on purpose: "25" is never a word token, so
running the normalizer over its own output changes nothing.

Invariant: "".join(t.text for t in tokenize(s)) == s for every string s.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenKind(str, Enum):
    """Character class of a token."""

    WORD = "word"
    WHITESPACE = "whitespace"
    PUNCTUATION = "punctuation"


@dataclass(frozen=True)
class Token:
    """A maximal run of same-class characters."""

    text: str
    kind: TokenKind

    @property
    def lower(self) -> str:
        return self.text.lower()

    @property
    def is_whitespace(self) -> bool:
        return self.kind is TokenKind.WHITESPACE

    @property
    def is_word(self) -> bool:
        return self.kind is TokenKind.WORD


def classify_char(char: str) -> TokenKind:
    if char.isspace():
        return TokenKind.WHITESPACE
    if char.isalpha() or char in "-'":
        return TokenKind.WORD
    return TokenKind.PUNCTUATION


def tokenize(text: str) -> list[Token]:
    """Split text into word / whitespace / punctuation tokens, dropping nothing."""
    tokens: list[Token] = []
    start = 0
    current_kind: TokenKind | None = None

    for index, char in enumerate(text):
        kind = classify_char(char)
        if kind is not current_kind:
            if current_kind is not None:
                tokens.append(Token(text[start:index], current_kind))
            start = index
            current_kind = kind

    if current_kind is not None:
        tokens.append(Token(text[start:], current_kind))

    return tokens
