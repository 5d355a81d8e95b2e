"""
Pydantic models for transformation pipelines.

A pipeline is an ordered list of string → string stages; the number
normalizer is one kind of stage. Each stage carries only the settings its
kind needs, and a stage that is missing them fails at the boundary.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, model_validator

from .exceptions import TransformationConfigError


# ─── Stage Kinds ────────────────────────────────────────────────────


class TransformationKind(str, Enum):
    """What a pipeline stage does to the text."""

    UPPERCASE = "uppercase"
    LOWERCASE = "lowercase"
    CAPITALIZE = "capitalize"  # Title Case Every Word
    CAPITALIZE_FIRST = "capitalize_first"
    SPONGEBOB_CASE = "spongebob_case"
    TRIM_WHITESPACE = "trim_whitespace"
    REMOVE_EXTRA_SPACES = "remove_extra_spaces"
    REPLACE_TEXT = "replace_text"
    ADD_PREFIX = "add_prefix"
    ADD_SUFFIX = "add_suffix"
    CONVERT_NUMBERS = "convert_numbers"
    REMAP_WORDS = "remap_words"
    LLM = "llm"


_STATIC_NAMES: dict[TransformationKind, str] = {
    TransformationKind.UPPERCASE: "UPPERCASE",
    TransformationKind.LOWERCASE: "lowercase",
    TransformationKind.CAPITALIZE: "Title Case",
    TransformationKind.CAPITALIZE_FIRST: "Capitalize first",
    TransformationKind.SPONGEBOB_CASE: "sPoNgEbOb cAsE",
    TransformationKind.TRIM_WHITESPACE: "Trim whitespace",
    TransformationKind.REMOVE_EXTRA_SPACES: "Remove extra spaces",
    TransformationKind.CONVERT_NUMBERS: "Convert numbers",
    TransformationKind.REMAP_WORDS: "Word remappings",
}


# ─── Stage Settings ─────────────────────────────────────────────────


class ReplaceTextConfig(BaseModel):
    """Find/replace settings. Case-insensitive unless `case_sensitive`."""

    id: UUID = Field(default_factory=uuid4)
    pattern: str
    replacement: str
    case_sensitive: bool = False
    use_regex: bool = False

    @model_validator(mode="after")
    def _pattern_compiles(self) -> ReplaceTextConfig:
        if not self.use_regex:
            return self
        try:
            compiled = re.compile(self.pattern)
        except re.error as e:
            raise TransformationConfigError(
                f"Invalid regular expression {self.pattern!r}: {e}",
                details={"pattern": self.pattern},
            ) from e
        try:
            _expand_against(compiled, self.replacement)
        except (re.error, IndexError) as e:
            raise TransformationConfigError(
                f"Invalid replacement {self.replacement!r} for {self.pattern!r}: {e}",
                details={"pattern": self.pattern, "replacement": self.replacement},
            ) from e
        return self


def _expand_against(compiled: re.Pattern[str], replacement: str) -> str:
    """Expand `replacement` on an empty match with the same groups as `compiled`.

    Raises re.error (or IndexError for an unknown group name on older
    interpreters) for bad escapes and references to missing groups.
    """
    names = {index: name for name, index in compiled.groupindex.items()}
    groups = "".join(
        f"(?P<{names[i]}>)" if i in names else "()" for i in range(1, compiled.groups + 1)
    )
    return re.compile(groups).match("").expand(replacement)


class LLMConfig(BaseModel):
    """Settings for a stage that rewrites the text with a language model."""

    prompt: str = Field(..., min_length=1)
    model: Optional[str] = None  # Falls back to NORMALIZER_LLM_MODEL


class WordRemapping(BaseModel):
    """Replace a spoken word or phrase with something else, whole-word only."""

    id: UUID = Field(default_factory=uuid4)
    is_enabled: bool = True
    match: str
    replacement: str
    append_newline: bool = False


# ─── Transformation ─────────────────────────────────────────────────


class Transformation(BaseModel):
    """One pipeline stage."""

    id: UUID = Field(default_factory=uuid4)
    is_enabled: bool = True
    kind: TransformationKind
    text: Optional[str] = None  # Prefix / suffix
    replace: Optional[ReplaceTextConfig] = None
    llm: Optional[LLMConfig] = None
    remappings: list[WordRemapping] = Field(default_factory=list)

    @model_validator(mode="after")
    def _settings_present(self) -> Transformation:
        required = {
            TransformationKind.ADD_PREFIX: "text",
            TransformationKind.ADD_SUFFIX: "text",
            TransformationKind.REPLACE_TEXT: "replace",
            TransformationKind.LLM: "llm",
        }
        field_name = required.get(self.kind)
        if field_name and getattr(self, field_name) is None:
            raise TransformationConfigError(
                f"A '{self.kind.value}' transformation requires '{field_name}'",
                details={"kind": self.kind.value, "field": field_name},
            )
        return self

    @property
    def name(self) -> str:
        """Human-readable label for listings."""
        if self.kind in _STATIC_NAMES:
            return _STATIC_NAMES[self.kind]
        if self.kind == TransformationKind.REPLACE_TEXT:
            assert self.replace is not None
            return f"Replace: {self.replace.pattern}"
        if self.kind == TransformationKind.ADD_PREFIX:
            return f"Prefix: {self.text}"
        if self.kind == TransformationKind.ADD_SUFFIX:
            return f"Suffix: {self.text}"
        return "LLM rewrite"


# ─── Pipeline ───────────────────────────────────────────────────────


class TransformationPipeline(BaseModel):
    """An ordered, individually switchable chain of transformations."""

    transformations: list[Transformation] = Field(default_factory=list)
    is_enabled: bool = True

    def move(self, source: int, destination: int) -> None:
        """Move a stage to a new position. Out-of-range indices are ignored."""
        count = len(self.transformations)
        if source == destination or not (0 <= source < count and 0 <= destination < count):
            return
        item = self.transformations.pop(source)
        self.transformations.insert(destination, item)


# ─── Pipeline Result ────────────────────────────────────────────────


class PipelineResult(BaseModel):
    """What a pipeline run produced, and which stages actually ran."""

    text: str
    result: str
    stages_run: list[str] = Field(default_factory=list)
    stages_skipped: list[str] = Field(default_factory=list)
