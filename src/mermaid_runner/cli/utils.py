"""
CLI utility helpers — settings, engine construction and output formatting.
"""

from __future__ import annotations

from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from mermaid_runner.core.document import PROCESSED_ATTRIBUTE, DocumentTree
from mermaid_runner.core.errors import MermaidError
from mermaid_runner.core.logging import configure_logging
from mermaid_runner.core.settings import MermaidSettings
from mermaid_runner.engine.mmdc import MermaidCliEngine
from mermaid_runner.engine.protocol import DiagramEngine

console = Console()
err_console = Console(stderr=True)


# ── Settings / engine ────────────────────────────────────────────────────


def load_settings(**overrides: Any) -> MermaidSettings:
    """Environment settings with explicit CLI options layered on top."""
    return MermaidSettings(**{k: v for k, v in overrides.items() if v is not None})


def setup_logging(settings: MermaidSettings) -> None:
    configure_logging(level=settings.log_level, json_format=settings.json_logs)


def build_engine(settings: MermaidSettings) -> DiagramEngine:
    """Engine used by every command."""
    return MermaidCliEngine(settings.mmdc_path, settings.to_config())


# ── Output helpers ───────────────────────────────────────────────────────


def fail(error: Exception) -> None:
    """Print *error* to stderr and exit with status 1."""
    if isinstance(error, MermaidError):
        err_console.print(f"[bold red]Error[/bold red] ({error.category.value}): {error.message}")
    else:
        err_console.print(f"[bold red]Error[/bold red] ({type(error).__name__}): {error}")
    raise typer.Exit(code=1)


def print_scan_summary(document: DocumentTree, selector: str, *, rendered: int, failed: int) -> None:
    """Table of the elements a scan touched."""
    elements = document.query_selector_all(selector)
    table = Table(title=f"Diagrams ({selector})")
    table.add_column("#", justify="right")
    table.add_column("Element id")
    table.add_column("Processed")
    for index, element in enumerate(elements):
        processed = bool(element.get_attribute(PROCESSED_ATTRIBUTE))
        table.add_row(str(index), element.id or "-", "yes" if processed else "no")
    err_console.print(table)
    err_console.print(f"{rendered} diagram(s) rendered")
    if failed:
        err_console.print(f"[yellow]{failed} diagram(s) failed to render[/yellow]")
