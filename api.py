"""
Number Normalizer — FastAPI Server
===================================

HTTP access to the number normalizer and the transformation pipeline.

Endpoints:
    POST /normalize         Replace spoken numbers in free text with digits
    POST /convert           Convert a single number phrase to its value
    POST /transform         Run a transformation pipeline over text
    GET  /health            Health check / readiness probe

Run:
    uvicorn api:app --reload              # Dev (http://localhost:8000)
    uvicorn api:app --host 0.0.0.0        # Production

Docs:
    http://localhost:8000/docs             # Swagger UI (auto-generated)
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Union

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from number_normalizer import __version__
from number_normalizer.exceptions import UnparseableNumberPhrase
from number_normalizer.models import PipelineResult, TransformationPipeline
from number_normalizer.pipeline import TextTransformationPipeline
from number_normalizer.word_to_number import normalize, words_to_number

load_dotenv()
logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())

logger = logging.getLogger(__name__)


# ─── Application Lifespan ───────────────────────────────────────────

_runner: TextTransformationPipeline | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the shared pipeline runner on startup."""
    global _runner  # noqa: PLW0603
    _runner = TextTransformationPipeline()
    logger.info("Number Normalizer API %s ready", __version__)
    yield
    _runner = None


# ─── FastAPI App ─────────────────────────────────────────────────────

app = FastAPI(
    title="Number Normalizer API",
    description=(
        "Turns spoken English cardinal numbers in dictated text into digits, "
        "leaving every other character untouched. Also runs configurable "
        "text-transformation pipelines."
    ),
    version=__version__,
    lifespan=lifespan,
)


# ─── Request / Response Schemas ─────────────────────────────────────


class NormalizeRequest(BaseModel):
    """Request body for the /normalize endpoint."""

    text: str = Field(
        ...,
        description="Free text that may contain spoken numbers.",
        json_schema_extra={"example": "I have twenty-five, maybe thirty."},
    )


class NormalizeResponse(BaseModel):
    text: str
    normalized: str
    changed: bool


class ConvertRequest(BaseModel):
    """Request body for the /convert endpoint."""

    phrase: str = Field(
        ...,
        min_length=1,
        description="Text that is exactly one spoken number.",
        json_schema_extra={"example": "one thousand three hundred thirty six"},
    )


class ConvertResponse(BaseModel):
    phrase: str
    value: Union[int, Decimal]


class TransformRequest(BaseModel):
    """Request body for the /transform endpoint."""

    text: str
    pipeline: TransformationPipeline


class HealthResponse(BaseModel):
    status: str
    version: str


# ─── Helpers ─────────────────────────────────────────────────────────


def _get_runner() -> TextTransformationPipeline:
    if _runner is None:
        raise HTTPException(status_code=503, detail="Pipeline not initialised")
    return _runner


# ─── Endpoints ───────────────────────────────────────────────────────


@app.post("/normalize", summary="Replace spoken numbers with digits", tags=["Numbers"])
def normalize_text(request: NormalizeRequest) -> NormalizeResponse:
    """Replace every spoken cardinal number in the text with digits.

    Never fails: text without numbers comes back unchanged.
    """
    normalized = normalize(request.text)
    return NormalizeResponse(
        text=request.text,
        normalized=normalized,
        changed=normalized != request.text,
    )


@app.post(
    "/convert",
    summary="Convert one number phrase to its value",
    tags=["Numbers"],
    responses={422: {"description": "Text is not exactly one number phrase"}},
)
def convert_phrase(request: ConvertRequest) -> ConvertResponse:
    """Convert text that is entirely one spoken number ("twenty five" → 25)."""
    try:
        value = words_to_number(request.phrase)
    except UnparseableNumberPhrase as e:
        raise HTTPException(
            status_code=422,
            detail={"code": e.code, "message": str(e), "details": e.details},
        ) from e
    return ConvertResponse(phrase=request.phrase, value=value)


@app.post(
    "/transform",
    summary="Run a transformation pipeline",
    tags=["Pipeline"],
    responses={503: {"description": "Pipeline not yet initialised"}},
)
def transform_text(request: TransformRequest) -> PipelineResult:
    """Apply each enabled stage of the pipeline, in order, to the text.

    A failing LLM stage is skipped and reported in **stages_skipped**.
    """
    runner = _get_runner()
    return runner.run(request.pipeline, request.text)


@app.get(
    "/health",
    summary="Health check",
    tags=["System"],
    responses={503: {"description": "Pipeline not yet initialised"}},
)
def health_check() -> HealthResponse:
    """Returns service status and version."""
    _get_runner()
    return HealthResponse(status="healthy", version=__version__)
