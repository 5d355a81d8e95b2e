"""
Number Normalizer — spoken English cardinals to digits inside dictated text.

Architecture: Tokenize (lossless) → Parse number phrases → Reassemble
Philosophy:  Change the numbers. Touch nothing else.
"""

from .word_to_number import normalize, words_to_number

__all__ = ["normalize", "words_to_number"]

__version__ = "1.0.0"
