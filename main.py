#!/usr/bin/env python3
"""
Number Normalizer — Entry Point
================================

Replaces spoken English numbers in text with digits.

Usage:
    python main.py "I have twenty-five, maybe thirty."   # → I have 25, maybe 30.
    echo "one hundred and five" | python main.py         # reads stdin
    python main.py --demo                                # before/after table
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from number_normalizer.word_to_number import normalize

load_dotenv()


# ─── Sample Dictation — Numbers Mixed Into Prose ─────────────────────

DEMO_SENTENCES = [
    "I have twenty-five, maybe thirty.",
    "Meet me at gate forty two in one hour.",
    "The total was one thousand three hundred thirty six dollars.",
    "Pi is roughly three point one four one five nine.",
    "We need one hundred and five chairs.",
    "Someone said threesome, not three.",
    "Budget: two million five hundred thousand.",
    "A hundred reasons, zero excuses.",
]


# ─── ANSI Color Constants ───────────────────────────────────────────

_GREEN = "\033[92m"
_CYAN = "\033[96m"
_DIM = "\033[2m"
_BOLD = "\033[1m"
_RESET = "\033[0m"
_WIDTH = 72


# ─── Pretty Printer ─────────────────────────────────────────────────


def print_demo() -> int:
    """Print every demo sentence before and after normalization."""
    print(f"\n{'=' * _WIDTH}")
    print(f"{_BOLD}{_CYAN}  NUMBER NORMALIZER DEMO{_RESET}")
    print(f"{'=' * _WIDTH}")

    for sentence in DEMO_SENTENCES:
        result = normalize(sentence)
        marker = f"{_GREEN}*{_RESET}" if result != sentence else " "
        print(f" {marker} {_DIM}{sentence}{_RESET}")
        print(f"   {_BOLD}{result}{_RESET}")
        print(f"{'─' * _WIDTH}")

    print()
    return 0


# ─── Main ────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Replace spoken English cardinal numbers with digits."
    )
    parser.add_argument("text", nargs="*", help="Text to normalize (default: read stdin)")
    parser.add_argument("--demo", action="store_true", help="Show sample conversions")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Normalize the given text (or stdin) and print the result."""
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "WARNING").upper())
    args = build_parser().parse_args(argv)

    if args.demo:
        return print_demo()

    text = " ".join(args.text) if args.text else sys.stdin.read()
    sys.stdout.write(normalize(text))
    if args.text:
        sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
