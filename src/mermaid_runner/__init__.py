"""
mermaid-runner - Serialized diagram rendering runtime.

- mermaid_runner.core: errors, normalization, ids, text, document boundary
- mermaid_runner.engine: engine protocol and the mermaid-cli engine
- mermaid_runner.execution: serialized queue and page scanner
- mermaid_runner.mermaid: the ``Mermaid`` facade
"""

__version__ = "0.4.0"

from mermaid_runner.core.errors import (  # noqa: E402
    DetailedError,
    DiagramSyntaxError,
    ElementSourceError,
    MermaidError,
)
from mermaid_runner.core.settings import MermaidSettings  # noqa: E402
from mermaid_runner.engine.protocol import (  # noqa: E402
    DiagramEngine,
    MermaidConfig,
    ParseOptions,
    RenderResult,
)
from mermaid_runner.execution.orchestrator import RunOptions  # noqa: E402
from mermaid_runner.mermaid import Mermaid, create_mermaid  # noqa: E402

__all__ = [
    "__version__",
    "DetailedError",
    "DiagramEngine",
    "DiagramSyntaxError",
    "ElementSourceError",
    "Mermaid",
    "MermaidConfig",
    "MermaidError",
    "MermaidSettings",
    "ParseOptions",
    "RenderResult",
    "RunOptions",
    "create_mermaid",
]
