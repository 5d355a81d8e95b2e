"""Pytest configuration — ensures the project root is importable."""

import sys
from pathlib import Path
from unittest.mock import patch

import pytest

sys.path.insert(0, str(Path(__file__).parent))

from number_normalizer.exceptions import LLMUnavailableError  # noqa: E402


@pytest.fixture(autouse=True)
def _no_llm_calls():
    """Prevent real LLM API calls during tests — keeps the suite fast and free."""
    with patch(
        "number_normalizer.llm.rewrite_with_llm",
        side_effect=LLMUnavailableError("LLM calls are disabled in tests"),
    ):
        yield
