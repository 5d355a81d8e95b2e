"""
Transformation pipeline runner — applies a configured chain of stages.

Flow:
  ┌─────────────┐
  │ Transcript  │
  └──────┬──────┘
         │
  ┌──────▼──────┐
  │  Stage 1    │   ← e.g. remap words ("new line" → "\\n")
  └──────┬──────┘
         │
  ┌──────▼──────┐
  │  Stage 2    │   ← e.g. convert numbers ("twenty five" → "25")
  └──────┬──────┘
         │
        ...
         │
  ┌──────▼──────┐
  │   Result    │   ← final text + which stages ran
  └─────────────┘

Design principles:
  - Stages run strictly in list order; disabled stages are skipped.
  - A disabled pipeline returns the input untouched.
  - Pure stages cannot fail. The LLM stage can; its failure is logged and
    the text passes through unchanged (graceful degradation).
"""

from __future__ import annotations

import logging
from typing import Callable

from . import llm
from .models import LLMConfig, PipelineResult, TransformationKind, TransformationPipeline
from .transformations import transform

logger = logging.getLogger(__name__)

LLMRunner = Callable[[LLMConfig, str], str]


class TextTransformationPipeline:
    """Runs a TransformationPipeline over transcribed text.

    Usage:
        runner = TextTransformationPipeline()
        result = runner.run(pipeline, "I owe you twenty five dollars")
        print(result.result)   # "I owe you 25 dollars"
    """

    def __init__(self, llm_runner: LLMRunner | None = None):
        self._llm_runner = llm_runner

    @property
    def llm_runner(self) -> LLMRunner:
        # Resolved per call so the module-level function can be patched
        return self._llm_runner or llm.rewrite_with_llm

    def process(self, pipeline: TransformationPipeline, text: str) -> str:
        """Return only the transformed text."""
        return self.run(pipeline, text).result

    def run(self, pipeline: TransformationPipeline, text: str) -> PipelineResult:
        """Execute every enabled stage in order.

        Args:
            pipeline: The configured stages.
            text: The raw transcript.

        Returns:
            PipelineResult with the final text and the names of the stages
            that ran or were skipped after a failure.
        """
        if not pipeline.is_enabled:
            logger.info("Pipeline disabled — returning text unchanged")
            return PipelineResult(text=text, result=text)

        current = text
        stages_run: list[str] = []
        stages_skipped: list[str] = []

        for transformation in pipeline.transformations:
            if not transformation.is_enabled:
                continue

            if transformation.kind == TransformationKind.LLM:
                assert transformation.llm is not None
                try:
                    current = self.llm_runner(transformation.llm, current)
                except Exception as e:
                    logger.error("LLM transformation failed: %s", e)
                    stages_skipped.append(transformation.name)
                    continue
            else:
                current = transform(transformation, current)

            stages_run.append(transformation.name)

        logger.info("Pipeline ran %d stage(s), skipped %d", len(stages_run), len(stages_skipped))
        return PipelineResult(
            text=text,
            result=current,
            stages_run=stages_run,
            stages_skipped=stages_skipped,
        )
