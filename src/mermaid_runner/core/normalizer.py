"""Error Normalizer — one reporting contract for two failure shapes.

Manifesto:
The engine fails in two structurally different ways. Grammar errors
arrive as a *structured* value exposing ``str`` and ``hash``; everything
else arrives as a *generic* exception with only a message. Callers of
``run`` and the registered error hook should not care which one they got.

ARCHITECTURE
────────────
::

    failure ──► classify_failure() ──► FailureShape
                                         │
          ┌──────────────────────────────┼───────────────────────────┐
          ▼                              ▼                           ▼
      STRUCTURED                      GENERIC                  UNRECOGNIZED
      hook(str, hash)                 hook(failure)            hook(failure)
      DetailedError(str, hash)        DetailedError(msg,       nothing appended
                                        hash=type name)

The shape is resolved once here; the rest of the runtime only ever sees
``DetailedError``.

An UNRECOGNIZED failure (neither shape) still reaches the hook but is
never appended to the caller's error list, so it never surfaces as the
error raised by ``run``.

Example::

    errors: list[DetailedError] = []
    handle_error({"str": "bad syntax", "hash": "X1"}, errors)
    errors[0].message  # 'bad syntax'

Tags:
    mermaid-runner, errors, normalization

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from mermaid_runner.core.errors import DetailedError
from mermaid_runner.core.logging import get_logger

logger = get_logger(__name__)

ParseErrorHandler = Callable[..., Any]
"""Hook called as ``fn(str, hash)`` for structured failures, ``fn(failure)`` otherwise."""


class FailureShape(str, Enum):
    """Tagged variant of the failure values the engine can produce."""

    STRUCTURED = "structured"
    GENERIC = "generic"
    UNRECOGNIZED = "unrecognized"


def _structured_fields(failure: Any) -> tuple[Any, Any] | None:
    if isinstance(failure, Mapping):
        if "str" in failure and "hash" in failure:
            return failure["str"], failure["hash"]
        return None
    if hasattr(failure, "str") and hasattr(failure, "hash"):
        return failure.str, failure.hash
    return None


def is_detailed_error(failure: Any) -> bool:
    """True when *failure* already carries ``str`` and ``hash``."""
    return _structured_fields(failure) is not None


def classify_failure(failure: Any) -> FailureShape:
    """Resolve which shape *failure* has."""
    if is_detailed_error(failure):
        return FailureShape.STRUCTURED
    if isinstance(failure, Exception):
        return FailureShape.GENERIC
    return FailureShape.UNRECOGNIZED


def _failure_message(failure: Exception) -> str:
    message = getattr(failure, "message", None)
    if isinstance(message, str):
        return message
    return str(failure)


def normalize_error(
    failure: Any,
    parse_error: ParseErrorHandler | None = None,
) -> DetailedError | None:
    """Convert *failure* into a :class:`DetailedError`.

    The hook, when given, is invoked before the record is built. Returns
    ``None`` for UNRECOGNIZED failures.
    """
    logger.warning("normalizer.failure", failure=repr(failure))

    shape = classify_failure(failure)
    if shape is FailureShape.STRUCTURED:
        text, token = _structured_fields(failure)
        if parse_error:
            parse_error(text, token)
        return DetailedError(text, hash=token, error=failure)

    if parse_error:
        parse_error(failure)
    if shape is FailureShape.GENERIC:
        message = _failure_message(failure)
        return DetailedError(message, hash=type(failure).__name__, error=failure)
    return None


def handle_error(
    failure: Any,
    errors: list[DetailedError],
    parse_error: ParseErrorHandler | None = None,
) -> DetailedError | None:
    """Normalize *failure* and append the result to *errors*.

    UNRECOGNIZED failures append nothing.
    """
    detailed = normalize_error(failure, parse_error)
    if detailed is not None:
        errors.append(detailed)
    return detailed


__all__ = [
    "FailureShape",
    "ParseErrorHandler",
    "classify_failure",
    "handle_error",
    "is_detailed_error",
    "normalize_error",
]
