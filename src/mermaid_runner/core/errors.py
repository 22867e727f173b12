"""
Structured error types for mermaid-runner.

Every failure the runtime raises on its own behalf is a ``MermaidError``
subclass carrying a category, a structured context and an optional
chained cause.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                        MermaidError                           │
        │               (category, context, cause)                      │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  DiagramSyntaxError   RenderError        EngineUnavailable    │
        │  (PARSE, str/hash)    (RENDER)           (ENGINE)             │
        │                                                               │
        │  ElementSourceError   ConfigError        DetailedError        │
        │  (DOCUMENT)           (CONFIG)           (normalized record)  │
        └──────────────────────────────────────────────────────────────┘

    ``DiagramSyntaxError`` is the *structured* failure shape: besides its
    message it exposes ``str`` (the human-readable text) and ``hash``
    (a short classification/correlation token).

    ``DetailedError`` is what callers of ``run`` receive: the output of
    :mod:`mermaid_runner.core.normalizer`, raisable as an exception.

Examples:
    >>> err = DiagramSyntaxError("Parse error on line 2", hash="PARSE_LINE_2")
    >>> err.str, err.hash
    ('Parse error on line 2', 'PARSE_LINE_2')

    >>> ElementSourceError("no nodes").with_context(selector=".mermaid")
    ElementSourceError('no nodes', category=DOCUMENT)

Tags:
    error-handling, exception-hierarchy, mermaid-runner

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and log routing."""

    # Diagram source problems
    PARSE = "PARSE"               # Grammar / syntax errors
    RENDER = "RENDER"             # Layout or SVG generation failures

    # Collaborator problems
    ENGINE = "ENGINE"             # Engine missing or crashed
    DOCUMENT = "DOCUMENT"         # Element source unresolvable
    CONFIG = "CONFIG"             # Invalid settings

    INTERNAL = "INTERNAL"         # Bugs, unexpected state
    UNKNOWN = "UNKNOWN"           # Uncategorized


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        diagram_id: Generated diagram id (``mermaid-0``)
        element_id: Identity of the document element being rendered
        selector: Selector used to resolve candidate elements
        metadata: Additional key-value pairs
    """

    diagram_id: str | None = None
    element_id: str | None = None
    selector: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["diagram_id", "element_id", "selector"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class MermaidError(Exception):
    """
    Base exception for all mermaid-runner errors.

    Subclasses set ``default_category``; callers may override it per
    instance. ``cause`` is chained as ``__cause__`` so tracebacks show
    the underlying failure.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> MermaidError:
        """
        Add context to this error (fluent API).

        Usage:
            raise RenderError("Failed").with_context(diagram_id="mermaid-3")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# ENGINE FAILURES
# =============================================================================


class DiagramSyntaxError(MermaidError):
    """
    Diagram text rejected by the engine's grammar.

    Carries the structured ``str``/``hash`` pair that the error normalizer
    recognizes. ``hash`` is whatever correlation token the engine supplies;
    it defaults to the category value.
    """

    default_category = ErrorCategory.PARSE

    def __init__(self, message: str, *, hash: Any = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.str = message
        self.hash = hash if hash is not None else self.category.value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["hash"] = self.hash
        return result


class RenderError(MermaidError):
    """Layout or SVG generation failed after the text parsed."""

    default_category = ErrorCategory.RENDER


class EngineUnavailableError(MermaidError):
    """The rendering engine could not be started or reached."""

    default_category = ErrorCategory.ENGINE


# =============================================================================
# RUNTIME FAILURES
# =============================================================================


class ElementSourceError(MermaidError):
    """Neither explicit nodes nor a resolvable selector were supplied."""

    default_category = ErrorCategory.DOCUMENT


class ConfigError(MermaidError):
    """Invalid runtime configuration."""

    default_category = ErrorCategory.CONFIG


class DetailedError(MermaidError):
    """
    Normalized failure record surfaced to ``run`` callers and error hooks.

    Attributes:
        str: Human-readable message
        hash: Short classification/correlation token
        message: Display copy of ``str``
        error: The original failure value, passed through for diagnostics
    """

    def __init__(self, message: str, *, hash: Any, error: Any = None):
        cause = error if isinstance(error, BaseException) else None
        super().__init__(message, category=categorize_error(error), cause=cause)
        self.str = message
        self.hash = hash
        self.error = error

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["str"] = self.str
        result["hash"] = self.hash
        return result


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def categorize_error(error: Any) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, MermaidError):
        return error.category
    if isinstance(error, (SyntaxError, ValueError)):
        return ErrorCategory.PARSE
    if isinstance(error, (FileNotFoundError, ConnectionError)):
        return ErrorCategory.ENGINE
    if isinstance(error, Exception):
        return ErrorCategory.INTERNAL
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "MermaidError",
    "DiagramSyntaxError",
    "RenderError",
    "EngineUnavailableError",
    "ElementSourceError",
    "ConfigError",
    "DetailedError",
    "categorize_error",
]
