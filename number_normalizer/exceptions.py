"""
Custom exception hierarchy for the normalizer and its transformation pipeline.

The core `normalize()` never raises — an unrecognized phrase is simply left
as-is. These exceptions belong to the stricter surfaces around it: the
standalone phrase converter, pipeline configuration, and the LLM stage.
"""

from __future__ import annotations


class NormalizerError(Exception):
    """Base exception for all normalizer failures."""

    def __init__(self, code: str, message: str, details: dict | None = None):
        self.code = code
        self.details = details or {}
        super().__init__(message)


class UnparseableNumberPhrase(NormalizerError, ValueError):
    """The text is not (entirely) a spoken cardinal number."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("NUMBER_PHRASE_UNPARSEABLE", message, details)


class TransformationConfigError(NormalizerError, ValueError):
    """A transformation stage was configured with unusable settings."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("TRANSFORMATION_CONFIG_INVALID", message, details)


class LLMUnavailableError(NormalizerError):
    """The LLM stage cannot run (no API key, empty response, client failure)."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__("LLM_UNAVAILABLE", message, details)
