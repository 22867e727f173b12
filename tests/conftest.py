"""
Shared pytest fixtures and configuration for mermaid-runner tests.

This module provides:
- Logging context cleanup for test isolation
- Stub engines (deterministic and random id configs)
- In-memory documents with a handful of diagram elements

Usage:
    Fixtures are auto-discovered by pytest; request them by name.

    def test_something(stub_engine, three_diagram_document):
        ...
"""

from pathlib import Path

import pytest
import structlog

from mermaid_runner.core.errors import DiagramSyntaxError
from mermaid_runner.engine.protocol import MermaidConfig
from mermaid_runner.testing import InMemoryDocument, InMemoryElement, StubEngine


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)
        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def clean_log_context():
    """Drop bound log context (run_id etc.) between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


# =============================================================================
# Engines
# =============================================================================


BAD_DIAGRAM = "graph TD; A-->"


@pytest.fixture
def deterministic_config() -> MermaidConfig:
    return MermaidConfig(deterministic_ids=True, deterministic_id_seed="", start_on_load=True)


@pytest.fixture
def stub_engine(deterministic_config) -> StubEngine:
    """Engine that renders everything except ``BAD_DIAGRAM``."""
    return StubEngine(
        deterministic_config,
        failures={BAD_DIAGRAM: DiagramSyntaxError("Parse error on line 1", hash="PARSE_1")},
    )


# =============================================================================
# Documents
# =============================================================================


def make_elements(*texts: str) -> list[InMemoryElement]:
    return [InMemoryElement(text, id=f"chart-{i}") for i, text in enumerate(texts)]


@pytest.fixture
def three_diagram_document() -> InMemoryDocument:
    return InMemoryDocument(
        make_elements("graph TD; A-->B", "sequenceDiagram\n  A->>B: hi", "pie\n  \"a\": 1")
    )


@pytest.fixture
def partial_failure_document() -> InMemoryDocument:
    """Three diagrams, the second one invalid."""
    return InMemoryDocument(make_elements("graph TD; A-->B", BAD_DIAGRAM, "graph LR; C-->D"))
