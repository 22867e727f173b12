"""Tests for mermaid_runner.core.errors module."""

import pytest

from mermaid_runner.core.errors import (
    ConfigError,
    DetailedError,
    DiagramSyntaxError,
    ElementSourceError,
    EngineUnavailableError,
    ErrorCategory,
    ErrorContext,
    MermaidError,
    RenderError,
    categorize_error,
)


class TestErrorContext:
    def test_empty_context(self):
        ctx = ErrorContext()
        assert ctx.diagram_id is None
        assert ctx.to_dict() == {}

    def test_to_dict_skips_none_and_merges_metadata(self):
        ctx = ErrorContext(diagram_id="mermaid-0", metadata={"attempt": 1})
        assert ctx.to_dict() == {"diagram_id": "mermaid-0", "attempt": 1}


class TestMermaidError:
    def test_default_category(self):
        err = MermaidError("boom")
        assert err.category == ErrorCategory.INTERNAL
        assert err.message == "boom"
        assert str(err) == "boom"

    def test_category_override(self):
        err = MermaidError("boom", category=ErrorCategory.RENDER)
        assert err.category == ErrorCategory.RENDER

    def test_cause_is_chained(self):
        cause = OSError("disk")
        err = MermaidError("wrapped", cause=cause)
        assert err.cause is cause
        assert err.__cause__ is cause

    def test_with_context_sets_known_fields_and_metadata(self):
        err = MermaidError("x").with_context(diagram_id="mermaid-2", retries=3)
        assert err.context.diagram_id == "mermaid-2"
        assert err.context.metadata == {"retries": 3}

    def test_to_dict(self):
        err = RenderError("layout failed", cause=ValueError("nan")).with_context(element_id="c1")
        d = err.to_dict()
        assert d["error_type"] == "RenderError"
        assert d["category"] == "RENDER"
        assert d["context"] == {"element_id": "c1"}
        assert d["cause"] == "nan"

    def test_repr(self):
        assert repr(ElementSourceError("none")) == "ElementSourceError('none', category=DOCUMENT)"


class TestSubclassCategories:
    @pytest.mark.parametrize(
        "cls, category",
        [
            (DiagramSyntaxError, ErrorCategory.PARSE),
            (RenderError, ErrorCategory.RENDER),
            (EngineUnavailableError, ErrorCategory.ENGINE),
            (ElementSourceError, ErrorCategory.DOCUMENT),
            (ConfigError, ErrorCategory.CONFIG),
        ],
    )
    def test_default_category(self, cls, category):
        assert cls("x").category == category
        assert isinstance(cls("x"), MermaidError)


class TestDiagramSyntaxError:
    def test_structured_fields(self):
        err = DiagramSyntaxError("Parse error on line 3", hash="L3")
        assert err.str == "Parse error on line 3"
        assert err.hash == "L3"

    def test_hash_defaults_to_category(self):
        assert DiagramSyntaxError("x").hash == "PARSE"

    def test_to_dict_includes_hash(self):
        assert DiagramSyntaxError("x", hash={"line": 3}).to_dict()["hash"] == {"line": 3}


class TestDetailedError:
    def test_fields(self):
        original = TypeError("boom")
        err = DetailedError("boom", hash="TypeError", error=original)
        assert err.str == "boom"
        assert err.message == "boom"
        assert err.hash == "TypeError"
        assert err.error is original
        assert err.__cause__ is original

    def test_category_follows_original(self):
        err = DetailedError("x", hash="h", error=RenderError("x"))
        assert err.category == ErrorCategory.RENDER

    def test_non_exception_original_is_not_chained(self):
        err = DetailedError("x", hash="h", error={"str": "x", "hash": "h"})
        assert err.__cause__ is None
        assert err.category == ErrorCategory.UNKNOWN

    def test_is_raisable(self):
        with pytest.raises(DetailedError) as exc_info:
            raise DetailedError("bad", hash="X1")
        assert exc_info.value.hash == "X1"


class TestCategorizeError:
    def test_mermaid_error(self):
        assert categorize_error(ConfigError("x")) == ErrorCategory.CONFIG

    def test_builtin_mappings(self):
        assert categorize_error(ValueError("x")) == ErrorCategory.PARSE
        assert categorize_error(FileNotFoundError("x")) == ErrorCategory.ENGINE
        assert categorize_error(RuntimeError("x")) == ErrorCategory.INTERNAL

    def test_non_exception(self):
        assert categorize_error("oops") == ErrorCategory.UNKNOWN
