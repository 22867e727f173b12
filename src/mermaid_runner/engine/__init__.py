"""Engine boundary and the mermaid-cli implementation."""

from mermaid_runner.engine.mmdc import MermaidCliEngine
from mermaid_runner.engine.protocol import (
    DiagramEngine,
    MermaidConfig,
    ParseOptions,
    RenderResult,
    coerce_config,
)

__all__ = [
    "DiagramEngine",
    "MermaidCliEngine",
    "MermaidConfig",
    "ParseOptions",
    "RenderResult",
    "coerce_config",
]
