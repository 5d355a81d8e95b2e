"""
Tests for the transformation stages, word remappings, and pipeline runner.

The LLM stage is exercised with injected runners and a mocked OpenAI
client — never the network.

Run: pytest tests/ -v
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from number_normalizer.exceptions import LLMUnavailableError
from number_normalizer.llm import rewrite_with_llm
from number_normalizer.models import (
    LLMConfig,
    ReplaceTextConfig,
    Transformation,
    TransformationKind,
    TransformationPipeline,
    WordRemapping,
)
from number_normalizer.pipeline import TextTransformationPipeline
from number_normalizer.remapping import apply_remappings
from number_normalizer.transformations import transform


def _stage(kind: TransformationKind, **kwargs) -> Transformation:
    return Transformation(kind=kind, **kwargs)


def _llm_stage(prompt: str = "Fix grammar") -> Transformation:
    return _stage(TransformationKind.LLM, llm=LLMConfig(prompt=prompt))


# ═══════════════════════════════════════════════════════════════════════
# INDIVIDUAL TRANSFORMATIONS
# ═══════════════════════════════════════════════════════════════════════


class TestTransformations:
    @pytest.mark.parametrize(
        "kind, text, expected",
        [
            (TransformationKind.UPPERCASE, "hello world", "HELLO WORLD"),
            (TransformationKind.LOWERCASE, "HELLO WORLD", "hello world"),
            (TransformationKind.CAPITALIZE, "hello world", "Hello World"),
            (TransformationKind.CAPITALIZE, "don't STOP", "Don't Stop"),
            (TransformationKind.CAPITALIZE_FIRST, "hello world", "Hello world"),
            (TransformationKind.CAPITALIZE_FIRST, "", ""),
            (TransformationKind.SPONGEBOB_CASE, "hello", "hElLo"),
            (TransformationKind.TRIM_WHITESPACE, "  hello world  ", "hello world"),
            (TransformationKind.REMOVE_EXTRA_SPACES, "hello    world", "hello world"),
            (TransformationKind.CONVERT_NUMBERS, "I owe you twenty five", "I owe you 25"),
        ],
    )
    def test_simple_kinds(self, kind, text, expected):
        assert transform(_stage(kind), text) == expected

    def test_replace_text_case_insensitive(self):
        stage = _stage(
            TransformationKind.REPLACE_TEXT,
            replace=ReplaceTextConfig(pattern="hello", replacement="hi"),
        )
        assert transform(stage, "Hello world") == "hi world"

    def test_replace_text_case_sensitive(self):
        stage = _stage(
            TransformationKind.REPLACE_TEXT,
            replace=ReplaceTextConfig(pattern="hello", replacement="hi", case_sensitive=True),
        )
        assert transform(stage, "Hello hello") == "Hello hi"

    def test_replace_text_literal_special_chars(self):
        stage = _stage(
            TransformationKind.REPLACE_TEXT,
            replace=ReplaceTextConfig(pattern="a.b", replacement="x"),
        )
        assert transform(stage, "a.b axb") == "x axb"

    def test_replace_text_regex(self):
        stage = _stage(
            TransformationKind.REPLACE_TEXT,
            replace=ReplaceTextConfig(pattern=r"\d+", replacement="#", use_regex=True),
        )
        assert transform(stage, "call 555 now 42") == "call # now #"

    def test_prefix_and_suffix(self):
        assert transform(_stage(TransformationKind.ADD_PREFIX, text=">> "), "hello") == ">> hello"
        assert (
            transform(_stage(TransformationKind.ADD_SUFFIX, text="\n\nBest,\nJohn"), "Thanks")
            == "Thanks\n\nBest,\nJohn"
        )

    def test_disabled_transformation(self):
        stage = _stage(TransformationKind.UPPERCASE, is_enabled=False)
        assert transform(stage, "hello") == "hello"

    def test_llm_is_not_a_pure_transformation(self):
        with pytest.raises(ValueError, match="not a pure transformation"):
            transform(_llm_stage(), "hello")

    def test_names(self):
        assert _stage(TransformationKind.CONVERT_NUMBERS).name == "Convert numbers"
        assert _stage(TransformationKind.ADD_PREFIX, text=">> ").name == "Prefix: >> "
        stage = _stage(
            TransformationKind.REPLACE_TEXT,
            replace=ReplaceTextConfig(pattern="foo", replacement="bar"),
        )
        assert stage.name == "Replace: foo"


# ═══════════════════════════════════════════════════════════════════════
# CONFIGURATION VALIDATION
# ═══════════════════════════════════════════════════════════════════════


class TestConfigValidation:
    def test_prefix_requires_text(self):
        with pytest.raises(ValidationError, match="requires 'text'"):
            Transformation(kind=TransformationKind.ADD_PREFIX)

    def test_llm_requires_settings(self):
        with pytest.raises(ValidationError, match="requires 'llm'"):
            Transformation(kind=TransformationKind.LLM)

    def test_invalid_regex_rejected(self):
        with pytest.raises(ValidationError, match="Invalid regular expression"):
            ReplaceTextConfig(pattern="(unclosed", replacement="", use_regex=True)

    def test_invalid_regex_allowed_as_literal(self):
        config = ReplaceTextConfig(pattern="(unclosed", replacement="")
        assert config.use_regex is False

    @pytest.mark.parametrize(
        "pattern, replacement",
        [("a", "\\q"), ("(a)", "\\2"), ("(?P<word>a)", "\\g<other>")],
    )
    def test_invalid_replacement_rejected(self, pattern, replacement):
        with pytest.raises(ValidationError, match="Invalid replacement"):
            ReplaceTextConfig(pattern=pattern, replacement=replacement, use_regex=True)

    def test_group_references_accepted(self):
        config = ReplaceTextConfig(
            pattern=r"(?P<first>\w+) (\w+)", replacement=r"\2 \g<first>", use_regex=True
        )
        stage = _stage(TransformationKind.REPLACE_TEXT, replace=config)
        assert transform(stage, "hello world") == "world hello"

    def test_literal_replacement_not_checked_as_template(self):
        config = ReplaceTextConfig(pattern="a", replacement="\\q")
        stage = _stage(TransformationKind.REPLACE_TEXT, replace=config)
        assert transform(stage, "banana") == "b\\qn\\qn\\q"

    def test_pipeline_json_round_trip(self):
        pipeline = TransformationPipeline(
            transformations=[
                _stage(TransformationKind.UPPERCASE),
                _stage(
                    TransformationKind.REPLACE_TEXT,
                    replace=ReplaceTextConfig(pattern="test", replacement="prod"),
                ),
            ]
        )
        decoded = TransformationPipeline.model_validate_json(pipeline.model_dump_json())
        assert decoded == pipeline


# ═══════════════════════════════════════════════════════════════════════
# WORD REMAPPINGS
# ═══════════════════════════════════════════════════════════════════════


class TestWordRemappings:
    def test_whole_word_case_insensitive(self):
        remap = WordRemapping(match="cat", replacement="dog")
        assert apply_remappings("cat concatenate Cat", [remap]) == "dog concatenate dog"

    def test_multi_word_match(self):
        remap = WordRemapping(match="at sign", replacement="@")
        assert apply_remappings("me at sign example", [remap]) == "me @ example"

    def test_disabled_remapping_skipped(self):
        remap = WordRemapping(match="cat", replacement="dog", is_enabled=False)
        assert apply_remappings("cat", [remap]) == "cat"

    def test_blank_match_skipped(self):
        remap = WordRemapping(match="   ", replacement="dog")
        assert apply_remappings("cat", [remap]) == "cat"

    def test_append_newline_swallows_punctuation(self):
        remap = WordRemapping(match="new paragraph", replacement="", append_newline=True)
        assert apply_remappings("end new paragraph. next", [remap]) == "end \n next"

    def test_append_newline_keeps_symbols(self):
        remap = WordRemapping(match="new line", replacement="", append_newline=True)
        assert apply_remappings("new line$5", [remap]) == "\n$5"
        assert apply_remappings("new line…+1", [remap]) == "\n+1"

    def test_punctuation_replacement_collapses_repeats(self):
        remap = WordRemapping(match="comma", replacement=",")
        assert apply_remappings("yes comma, no", [remap]) == "yes , no"

    def test_replacement_is_literal(self):
        remap = WordRemapping(match="backslash", replacement="\\1")
        assert apply_remappings("a backslash b", [remap]) == "a \\1 b"

    def test_remap_stage(self):
        stage = _stage(
            TransformationKind.REMAP_WORDS,
            remappings=[WordRemapping(match="percent", replacement="%")],
        )
        assert transform(stage, "fifty percent") == "fifty %"


# ═══════════════════════════════════════════════════════════════════════
# PIPELINE
# ═══════════════════════════════════════════════════════════════════════


class TestPipeline:
    def test_empty_pipeline(self):
        runner = TextTransformationPipeline()
        assert runner.process(TransformationPipeline(), "hello") == "hello"

    def test_disabled_pipeline(self):
        pipeline = TransformationPipeline(
            transformations=[_stage(TransformationKind.UPPERCASE)], is_enabled=False
        )
        result = TextTransformationPipeline().run(pipeline, "hello")
        assert result.result == "hello"
        assert result.stages_run == []

    def test_sequence(self):
        pipeline = TransformationPipeline(
            transformations=[
                _stage(TransformationKind.TRIM_WHITESPACE),
                _stage(TransformationKind.REMOVE_EXTRA_SPACES),
                _stage(TransformationKind.CAPITALIZE),
            ]
        )
        result = TextTransformationPipeline().run(pipeline, "  hello    world  ")
        assert result.result == "Hello World"
        assert result.stages_run == ["Trim whitespace", "Remove extra spaces", "Title Case"]

    def test_disabled_stage_skipped(self):
        pipeline = TransformationPipeline(
            transformations=[
                _stage(TransformationKind.UPPERCASE, is_enabled=False),
                _stage(TransformationKind.ADD_PREFIX, text=">> "),
            ]
        )
        assert TextTransformationPipeline().process(pipeline, "hello") == ">> hello"

    def test_complex_pipeline(self):
        pipeline = TransformationPipeline(
            transformations=[
                _stage(TransformationKind.TRIM_WHITESPACE),
                _stage(
                    TransformationKind.REPLACE_TEXT,
                    replace=ReplaceTextConfig(pattern="my email", replacement="user@example.com"),
                ),
                _stage(TransformationKind.ADD_SUFFIX, text="\n\nSent by voice"),
            ]
        )
        result = TextTransformationPipeline().process(pipeline, " Please contact my email ")
        assert result == "Please contact user@example.com\n\nSent by voice"

    def test_numbers_after_remapping(self):
        pipeline = TransformationPipeline(
            transformations=[
                _stage(
                    TransformationKind.REMAP_WORDS,
                    remappings=[WordRemapping(match="percent", replacement="%")],
                ),
                _stage(TransformationKind.CONVERT_NUMBERS),
            ]
        )
        result = TextTransformationPipeline().process(pipeline, "about twenty five percent")
        assert result == "about 25 %"

    def test_move(self):
        pipeline = TransformationPipeline(
            transformations=[
                _stage(TransformationKind.UPPERCASE),
                _stage(TransformationKind.LOWERCASE),
                _stage(TransformationKind.CAPITALIZE),
            ]
        )
        pipeline.move(0, 2)
        kinds = [t.kind for t in pipeline.transformations]
        assert kinds == [
            TransformationKind.LOWERCASE,
            TransformationKind.CAPITALIZE,
            TransformationKind.UPPERCASE,
        ]

    @pytest.mark.parametrize("source, destination", [(0, 0), (0, 5), (-1, 0), (3, 1)])
    def test_move_ignores_invalid_indices(self, source, destination):
        pipeline = TransformationPipeline(
            transformations=[
                _stage(TransformationKind.UPPERCASE),
                _stage(TransformationKind.LOWERCASE),
            ]
        )
        pipeline.move(source, destination)
        kinds = [t.kind for t in pipeline.transformations]
        assert kinds == [TransformationKind.UPPERCASE, TransformationKind.LOWERCASE]


# ═══════════════════════════════════════════════════════════════════════
# LLM STAGE
# ═══════════════════════════════════════════════════════════════════════


class TestLLMStage:
    def test_failed_llm_stage_is_skipped(self):
        """The test suite blocks real LLM calls, so the stage fails and is skipped."""
        pipeline = TransformationPipeline(
            transformations=[_llm_stage(), _stage(TransformationKind.CONVERT_NUMBERS)]
        )
        result = TextTransformationPipeline().run(pipeline, "twenty five")
        assert result.result == "25"
        assert result.stages_skipped == ["LLM rewrite"]
        assert result.stages_run == ["Convert numbers"]

    def test_injected_runner(self):
        calls = []

        def fake_runner(config: LLMConfig, text: str) -> str:
            calls.append((config.prompt, text))
            return text.replace("um ", "")

        pipeline = TransformationPipeline(
            transformations=[_llm_stage("Remove fillers"), _stage(TransformationKind.CONVERT_NUMBERS)]
        )
        result = TextTransformationPipeline(llm_runner=fake_runner).run(pipeline, "um twenty one")
        assert result.result == "21"
        assert calls == [("Remove fillers", "um twenty one")]

    def test_runner_exception_does_not_escape(self):
        def broken_runner(config: LLMConfig, text: str) -> str:
            raise RuntimeError("boom")

        pipeline = TransformationPipeline(transformations=[_llm_stage()])
        result = TextTransformationPipeline(llm_runner=broken_runner).run(pipeline, "hello")
        assert result.result == "hello"
        assert result.stages_skipped == ["LLM rewrite"]

    def test_no_api_key_raises(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(LLMUnavailableError, match="OPENAI_API_KEY"):
            rewrite_with_llm(LLMConfig(prompt="Fix grammar"), "hi")

    def test_rewrite_uses_openai_client(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.delenv("NORMALIZER_LLM_MODEL", raising=False)
        response = SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content="  Hi there.  "))]
        )
        with patch("openai.OpenAI") as client_cls:
            create = client_cls.return_value.chat.completions.create
            create.return_value = response
            assert rewrite_with_llm(LLMConfig(prompt="Fix grammar"), "hi there") == "Hi there."

        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "gpt-5"
        assert kwargs["messages"][1] == {"role": "user", "content": "hi there"}
        assert kwargs["messages"][0]["content"].startswith("Fix grammar")

    def test_empty_response_raises(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        response = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=None))])
        with patch("openai.OpenAI") as client_cls:
            client_cls.return_value.chat.completions.create.return_value = response
            with pytest.raises(LLMUnavailableError, match="empty"):
                rewrite_with_llm(LLMConfig(prompt="x", model="gpt-4o-mini"), "hi")
