"""
Convert spoken English cardinal numbers inside free text to digits.

    "I have twenty-five, maybe thirty."         → "I have 25, maybe 30."
    "one thousand three hundred thirty six"     → "1336"
    "one hundred and five"                      → "105"
    "three point one four"                      → "3.14"
    "someone and threesome"                     → unchanged

Everything that is not part of a number phrase — spacing, punctuation, the
casing of other words — comes back byte-for-byte.

We implement this ourselves rather than pulling in a word-to-number library
because those operate on a whole string that must BE a number; we need to
find phrases inside dictated prose and leave the rest alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from .exceptions import UnparseableNumberPhrase
from .lexicon import (
    CONNECTORS,
    DECIMAL_POINT,
    ONES,
    SCALES,
    TENS,
    hyphen_parts,
    is_number_word,
    is_single_digit,
)
from .tokenizer import Token, tokenize


# ─── Data Structures ────────────────────────────────────────────────


@dataclass(frozen=True)
class PhraseMatch:
    """Result of one phrase-parsing attempt.

    `consumed == 0` means "no number here" — the caller emits the start
    token unchanged.
    """

    consumed: int = 0
    value: int = 0
    has_decimal: bool = False
    decimal_digits: str = ""

    def __bool__(self) -> bool:
        return self.consumed > 0

    @property
    def literal(self) -> str:
        """The digit string that replaces the phrase ("25", "3.14", "3.")."""
        if self.has_decimal:
            return f"{self.value}.{self.decimal_digits}"
        return str(self.value)


NO_MATCH = PhraseMatch()


# ─── Phrase Parser ──────────────────────────────────────────────────


def _can_continue(tokens: Sequence[Token], index: int, in_decimal: bool) -> bool:
    """Peek past a whitespace run: does the next real token extend the phrase?"""
    while index < len(tokens) and tokens[index].is_whitespace:
        index += 1
    if index >= len(tokens):
        return False

    word = tokens[index].lower
    if in_decimal:
        return is_single_digit(word)
    return is_number_word(word) or word in CONNECTORS or word == DECIMAL_POINT


def _is_filler(token: Token) -> bool:
    return token.is_whitespace or token.lower in CONNECTORS


def parse_number_phrase(tokens: Sequence[Token], start: int) -> PhraseMatch:
    """Greedily parse one number phrase beginning at `tokens[start]`.

    Algorithm:
        Two accumulators, as with any English cardinal:
        - `total`:   completed scale groups (flushed at thousand/million/...)
        - `current`: the sub-thousand group being built

        - ones/teens/tens      → add to `current`
        - "hundred"            → `current` (or an implied 1) times 100
        - thousand and above   → flush `current` (or 1) × scale into `total`
        - "point"              → switch to collecting single digits
        - "and"                → allowed after a number, adds nothing

        Whitespace is only kept inside the phrase when the next real token
        continues it, so trailing spaces are never swallowed.

    Scale flushes are irreversible: "thousand hundred" is read left to right
    as 1000 + 100 rather than rejected.
    """
    consumed = 0
    current = 0
    total = 0
    last_was_number = False

    in_decimal = False
    has_decimal = False
    decimal_digits = ""

    i = start
    while i < len(tokens):
        token = tokens[i]
        word = token.lower

        if token.is_whitespace:
            if (last_was_number or in_decimal) and _can_continue(tokens, i + 1, in_decimal):
                consumed += 1
                i += 1
                continue
            break

        if word == DECIMAL_POINT and last_was_number and not in_decimal:
            in_decimal = True
            has_decimal = True
            last_was_number = False
            consumed += 1
            i += 1
            continue

        if in_decimal:
            if not is_single_digit(word):
                break
            decimal_digits += str(ONES[word])
            last_was_number = True
            consumed += 1
            i += 1
            continue

        if word in CONNECTORS and last_was_number:
            consumed += 1
            i += 1
            continue

        parts = hyphen_parts(word)
        if len(parts) == 2 and parts[0] in TENS and parts[1] in ONES:
            current += TENS[parts[0]] + ONES[parts[1]]
        elif word in ONES:
            current += ONES[word]
        elif word in TENS:
            current += TENS[word]
        elif word in SCALES:
            scale = SCALES[word]
            if scale == 100:
                current = (current or 1) * 100
            else:
                total += (current or 1) * scale
                current = 0
        else:
            break

        last_was_number = True
        consumed += 1
        i += 1

    total += current

    # A phrase never ends on a connector or whitespace: "five and then" keeps
    # its "and", and a peek that promised more than the parser took gives
    # its space back.
    while consumed > 0 and _is_filler(tokens[start + consumed - 1]):
        consumed -= 1

    # A lone "hundred"/"thousand" would otherwise become 100/1000 out of thin
    # air; only an explicit "zero" may stand alone as 0.
    first = tokens[start].lower
    lone_zero = consumed == 1 and first == "zero"
    lone_scale = consumed == 1 and first in SCALES
    if consumed > 0 and (has_decimal or lone_zero or (total > 0 and not lone_scale)):
        return PhraseMatch(consumed, total, has_decimal, decimal_digits)
    return NO_MATCH


# ─── Main Converters ────────────────────────────────────────────────


def normalize(text: str) -> str:
    """Replace every spoken cardinal number in `text` with its digits.

    Never raises; text without number words is returned unchanged.
    """
    if not text:
        return text

    tokens = tokenize(text)
    pieces: list[str] = []
    i = 0

    while i < len(tokens):
        token = tokens[i]
        if token.is_word and is_number_word(token.lower):
            match = parse_number_phrase(tokens, i)
            if match:
                pieces.append(match.literal)
                i += match.consumed
                continue
        pieces.append(token.text)
        i += 1

    return "".join(pieces)


def words_to_number(text: str) -> int | Decimal:
    """Convert a string that is entirely one number phrase to its value.

    Args:
        text: e.g. "One Thousand Three Hundred Thirty Six" or "three point one four"

    Returns:
        int for cardinals (1336), Decimal when "point" was spoken (Decimal("3.14")).

    Raises:
        UnparseableNumberPhrase: If the text is empty, does not start with a
            number word, or has anything left over after the phrase.
    """
    if not text or not text.strip():
        raise UnparseableNumberPhrase("Empty text cannot be converted to a number")

    tokens = tokenize(text.strip())
    first = tokens[0]
    if not (first.is_word and is_number_word(first.lower)):
        raise UnparseableNumberPhrase(
            f"Unrecognized number word: {first.text!r} in {text!r}",
            details={"token": first.text},
        )

    match = parse_number_phrase(tokens, 0)
    if not match:
        raise UnparseableNumberPhrase(
            f"Could not parse a valid number from: {text!r}",
            details={"text": text},
        )

    if match.consumed < len(tokens):
        leftover = "".join(t.text for t in tokens[match.consumed:])
        raise UnparseableNumberPhrase(
            f"Unexpected text after number phrase: {leftover.strip()!r} in {text!r}",
            details={"leftover": leftover.strip(), "consumed": match.consumed},
        )

    if match.has_decimal:
        return Decimal(match.literal.rstrip("."))
    return match.value
