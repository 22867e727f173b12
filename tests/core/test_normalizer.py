"""Tests for the error normalizer — structured vs generic failure shapes."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from mermaid_runner.core.errors import DetailedError, DiagramSyntaxError
from mermaid_runner.core.normalizer import (
    FailureShape,
    classify_failure,
    handle_error,
    is_detailed_error,
    normalize_error,
)


class TestClassifyFailure:
    def test_mapping_with_str_and_hash(self):
        assert classify_failure({"str": "bad", "hash": "X1"}) is FailureShape.STRUCTURED

    def test_object_with_str_and_hash(self):
        assert classify_failure(SimpleNamespace(str="bad", hash="X1")) is FailureShape.STRUCTURED

    def test_structured_exception(self):
        assert classify_failure(DiagramSyntaxError("bad", hash="X1")) is FailureShape.STRUCTURED

    def test_generic_exception(self):
        assert classify_failure(TypeError("boom")) is FailureShape.GENERIC

    def test_mapping_missing_hash_is_unrecognized(self):
        assert classify_failure({"str": "bad"}) is FailureShape.UNRECOGNIZED

    @pytest.mark.parametrize("value", ["plain string", 42, None, ["a"]])
    def test_other_values_are_unrecognized(self, value):
        assert classify_failure(value) is FailureShape.UNRECOGNIZED

    def test_is_detailed_error(self):
        assert is_detailed_error({"str": "a", "hash": "b"})
        assert not is_detailed_error(ValueError("a"))


class TestNormalizeStructured:
    def test_structured_mapping(self):
        failure = {"str": "bad syntax", "hash": "X1"}
        detailed = normalize_error(failure)
        assert isinstance(detailed, DetailedError)
        assert detailed.str == "bad syntax"
        assert detailed.message == "bad syntax"
        assert detailed.hash == "X1"
        assert detailed.error is failure

    def test_hook_receives_str_and_hash(self):
        hook = MagicMock()
        normalize_error(DiagramSyntaxError("bad syntax", hash="X1"), hook)
        hook.assert_called_once_with("bad syntax", "X1")


class TestNormalizeGeneric:
    def test_generic_exception(self):
        failure = TypeError("boom")
        detailed = normalize_error(failure)
        assert detailed.str == "boom"
        assert detailed.message == "boom"
        assert detailed.hash == "TypeError"
        assert detailed.error is failure

    def test_hook_receives_failure(self):
        hook = MagicMock()
        failure = RuntimeError("boom")
        normalize_error(failure, hook)
        hook.assert_called_once_with(failure)

    def test_message_attribute_preferred(self):
        class EngineCrash(Exception):
            def __init__(self):
                super().__init__("code 7")
                self.message = "renderer crashed"

        assert normalize_error(EngineCrash()).str == "renderer crashed"


class TestNormalizeUnrecognized:
    def test_returns_none_but_calls_hook(self):
        hook = MagicMock()
        assert normalize_error("just a string", hook) is None
        hook.assert_called_once_with("just a string")

    def test_without_hook(self):
        assert normalize_error(object()) is None


class TestHandleError:
    def test_appends_structured_and_generic(self):
        errors: list[DetailedError] = []
        handle_error({"str": "bad syntax", "hash": "X1"}, errors)
        handle_error(TypeError("boom"), errors)
        assert [(e.str, e.hash) for e in errors] == [("bad syntax", "X1"), ("boom", "TypeError")]

    def test_unrecognized_appends_nothing(self):
        errors: list[DetailedError] = []
        hook = MagicMock()
        result = handle_error(12345, errors, hook)
        assert result is None
        assert errors == []
        hook.assert_called_once_with(12345)

    def test_hook_failure_propagates(self):
        def hook(*args):
            raise RuntimeError("hook broke")

        with pytest.raises(RuntimeError, match="hook broke"):
            handle_error(TypeError("boom"), [], hook)
