"""
Root Typer application for the mermaid-runner CLI.

    mermaid-runner render page.html -o out.html
    mermaid-runner parse diagram.mmd
    mermaid-runner svg diagram.mmd --id chart -o chart.svg
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from typer import Typer

from mermaid_runner.cli.utils import (
    build_engine,
    console,
    err_console,
    fail,
    load_settings,
    print_scan_summary,
    setup_logging,
)
from mermaid_runner.core.document import DEFAULT_SELECTOR, HtmlDocument, is_processed
from mermaid_runner.core.errors import MermaidError
from mermaid_runner.engine.protocol import ParseOptions
from mermaid_runner.mermaid import Mermaid

app = Typer(
    name="mermaid-runner",
    help="mermaid-runner — render diagrams embedded in HTML pages.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from mermaid_runner import __version__

        typer.echo(f"mermaid-runner {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """mermaid-runner CLI — scan pages, validate and render diagrams."""


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("render")
def render_page(
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="HTML page to scan."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write the rendered page here (default: stdout)."),
    selector: str = typer.Option(DEFAULT_SELECTOR, "--selector", "-s", help="CSS selector of diagram elements."),
    suppress_errors: bool = typer.Option(False, "--suppress-errors", help="Log diagram failures instead of failing."),
    deterministic_ids: bool | None = typer.Option(None, "--deterministic-ids/--random-ids"),
    seed: str | None = typer.Option(None, "--seed", help="Prefix for deterministic ids."),
    mmdc: str | None = typer.Option(None, "--mmdc", help="mermaid-cli executable."),
    json_logs: bool | None = typer.Option(None, "--json-logs/--console-logs"),
    log_level: str | None = typer.Option(None, "--log-level"),
) -> None:
    """Render every diagram in an HTML page."""
    settings = load_settings(
        deterministic_ids=deterministic_ids,
        deterministic_id_seed=seed,
        mmdc_path=mmdc,
        json_logs=json_logs,
        log_level=log_level,
    )
    setup_logging(settings)

    document = HtmlDocument.from_path(input_path)
    mermaid = Mermaid(build_engine(settings), document, start_on_load=settings.start_on_load)
    pending = [el for el in document.query_selector_all(selector) if not is_processed(el)]
    rendered: list[str] = []

    try:
        asyncio.run(
            mermaid.run(
                query_selector=selector,
                suppress_errors=suppress_errors,
                post_render_callback=rendered.append,
            )
        )
    except MermaidError as e:
        fail(e)

    if output:
        document.write(output)
        err_console.print(f"[green]Wrote[/green] {output}")
    else:
        typer.echo(document.to_html())
    print_scan_summary(document, selector, rendered=len(rendered), failed=len(pending) - len(rendered))


@app.command("parse")
def parse_diagram(
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Diagram source file."),
    suppress_errors: bool = typer.Option(False, "--suppress-errors", help="Report invalid text without an error."),
    mmdc: str | None = typer.Option(None, "--mmdc"),
) -> None:
    """Check a diagram's syntax."""
    settings = load_settings(mmdc_path=mmdc)
    setup_logging(settings)
    mermaid = Mermaid(build_engine(settings))
    text = input_path.read_text(encoding="utf-8")

    try:
        valid = asyncio.run(mermaid.parse(text, ParseOptions(suppress_errors=suppress_errors)))
    except MermaidError as e:
        fail(e)

    if valid:
        console.print(f"[green]valid[/green] {input_path}")
    else:
        console.print(f"[red]invalid[/red] {input_path}")
        raise typer.Exit(code=1)


@app.command("svg")
def render_svg(
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Diagram source file."),
    diagram_id: str = typer.Option("mermaid-0", "--id", help="Id of the generated SVG."),
    output: Path | None = typer.Option(None, "--output", "-o", help="SVG file (default: stdout)."),
    mmdc: str | None = typer.Option(None, "--mmdc"),
) -> None:
    """Render one diagram file to SVG."""
    settings = load_settings(mmdc_path=mmdc)
    setup_logging(settings)
    mermaid = Mermaid(build_engine(settings))
    text = input_path.read_text(encoding="utf-8")

    try:
        result = asyncio.run(mermaid.render(diagram_id, text))
    except MermaidError as e:
        fail(e)

    if output:
        output.write_text(result.svg, encoding="utf-8")
        err_console.print(f"[green]Wrote[/green] {output}")
    else:
        typer.echo(result.svg)
