"""
LLM rewrite stage using the OpenAI chat-completions API.

The model gets the stage's prompt as its system message and the current text
as the user message, and its reply replaces the text. This is the only
stage that can fail at runtime; the pipeline logs the failure and carries on
with the text unchanged.

Configuration (environment):
  - OPENAI_API_KEY         required, otherwise the stage is skipped
  - NORMALIZER_LLM_MODEL   default model when the stage names none
"""

from __future__ import annotations

import logging
import os

from .exceptions import LLMUnavailableError
from .models import LLMConfig

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-5"

SYSTEM_SUFFIX = """\

Return ONLY the rewritten text. No preamble, no quotes, no explanations."""


def rewrite_with_llm(config: LLMConfig, text: str) -> str:
    """Rewrite `text` according to `config.prompt`.

    Raises:
        LLMUnavailableError: No API key, the client failed, or the model
            returned nothing.
    """
    api_key = os.environ.get("OPENAI_API_KEY")
    if not api_key:
        raise LLMUnavailableError("No OPENAI_API_KEY set — cannot run LLM stage")

    model = config.model or os.environ.get("NORMALIZER_LLM_MODEL", DEFAULT_MODEL)

    from openai import OpenAI, OpenAIError

    client = OpenAI(api_key=api_key)
    try:
        response = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": config.prompt + SYSTEM_SUFFIX},
                {"role": "user", "content": text},
            ],
        )
    except OpenAIError as e:
        raise LLMUnavailableError(
            f"LLM request failed: {e}", details={"model": model}
        ) from e

    content = response.choices[0].message.content
    if not content:
        raise LLMUnavailableError("LLM returned an empty response", details={"model": model})

    logger.info("LLM rewrite succeeded (model=%s)", model)
    return content.strip()
