"""
Core primitives: errors, normalization, ids, text clean-up, document
boundary, settings and logging.
"""

from mermaid_runner.core.document import (
    DEFAULT_SELECTOR,
    PROCESSED_ATTRIBUTE,
    CandidateElement,
    DocumentTree,
    HtmlDocument,
    HtmlElement,
)
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
)
from mermaid_runner.core.ids import IdGenerator
from mermaid_runner.core.normalizer import (
    FailureShape,
    classify_failure,
    handle_error,
    is_detailed_error,
    normalize_error,
)

__all__ = [
    "DEFAULT_SELECTOR",
    "PROCESSED_ATTRIBUTE",
    "CandidateElement",
    "DocumentTree",
    "HtmlDocument",
    "HtmlElement",
    "ConfigError",
    "DetailedError",
    "DiagramSyntaxError",
    "ElementSourceError",
    "EngineUnavailableError",
    "ErrorCategory",
    "ErrorContext",
    "MermaidError",
    "RenderError",
    "IdGenerator",
    "FailureShape",
    "classify_failure",
    "handle_error",
    "is_detailed_error",
    "normalize_error",
]
