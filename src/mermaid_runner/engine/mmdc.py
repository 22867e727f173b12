"""mermaid-cli engine — renders diagrams by running the ``mmdc`` executable.

Each call writes the diagram text and the current site configuration to a
scratch directory, runs::

    mmdc -i diagram.mmd -o diagram.svg -c config.json -I <id> -q

with ``asyncio.create_subprocess_exec`` and reads the SVG back. A non-zero
exit means the diagram was rejected: the last stderr lines become a
:class:`DiagramSyntaxError` whose ``hash`` identifies the failing diagram;
a clean exit without an SVG file is a :class:`RenderError`.

The engine itself does no locking. Route concurrent callers through
:class:`~mermaid_runner.execution.queue.SerializedOperationQueue` (the
``Mermaid`` facade does).
"""

from __future__ import annotations

import asyncio
import json
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from mermaid_runner.core.errors import (
    DiagramSyntaxError,
    EngineUnavailableError,
    RenderError,
)
from mermaid_runner.core.logging import get_logger
from mermaid_runner.engine.protocol import (
    MermaidConfig,
    ParseOptions,
    RenderResult,
    coerce_config,
)

logger = get_logger(__name__)

_STDERR_TAIL = 20


class MermaidCliEngine:
    """``DiagramEngine`` backed by mermaid-cli.

    Args:
        executable: ``mmdc`` name on ``$PATH`` or absolute path.
        config: Initial site configuration.
        extra_args: Additional arguments appended to every ``mmdc`` call
            (e.g. ``["-p", "puppeteer.json"]``).
    """

    def __init__(
        self,
        executable: str = "mmdc",
        config: MermaidConfig | Mapping[str, Any] | None = None,
        extra_args: list[str] | None = None,
    ) -> None:
        self.executable = executable
        self.extra_args = list(extra_args or [])
        self._config = coerce_config(config)

    # ── Configuration ────────────────────────────────────────────────

    def initialize(self, config: MermaidConfig | Mapping[str, Any]) -> None:
        self._config = coerce_config(config)

    def get_config(self) -> MermaidConfig:
        return self._config.model_copy(deep=True)

    def update_site_config(self, partial: Mapping[str, Any]) -> MermaidConfig:
        self._config = self._config.merged(partial)
        return self.get_config()

    # ── Operations ───────────────────────────────────────────────────

    async def parse(self, text: str, options: ParseOptions | None = None) -> bool:
        """Validate *text* by rendering it and discarding the output."""
        options = options or ParseOptions()
        try:
            await self._run_mmdc("parse-check", text)
        except DiagramSyntaxError:
            if options.suppress_errors:
                return False
            raise
        return True

    async def render(
        self, id: str, text: str, container: Any | None = None
    ) -> RenderResult:
        svg = await self._run_mmdc(id, text)
        return RenderResult(svg=svg)

    # ── Internals ────────────────────────────────────────────────────

    def _command(self, workdir: Path, id: str) -> list[str]:
        return [
            self.executable,
            "-i", str(workdir / "diagram.mmd"),
            "-o", str(workdir / "diagram.svg"),
            "-c", str(workdir / "config.json"),
            "-I", id,
            "-q",
            *self.extra_args,
        ]

    async def _run_mmdc(self, id: str, text: str) -> str:
        with tempfile.TemporaryDirectory(prefix="mermaid-runner-") as tmp:
            workdir = Path(tmp)
            (workdir / "diagram.mmd").write_text(text, encoding="utf-8")
            (workdir / "config.json").write_text(
                json.dumps(self._config.to_engine_dict()), encoding="utf-8"
            )
            cmd = self._command(workdir, id)

            try:
                process = await asyncio.create_subprocess_exec(
                    *cmd,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except FileNotFoundError as exc:
                raise EngineUnavailableError(
                    f"Command not found: {self.executable}",
                    cause=exc,
                ).with_context(diagram_id=id) from exc

            _, stderr = await process.communicate()
            if process.returncode != 0:
                tail = stderr.decode("utf-8", errors="replace").strip().splitlines()
                message = "\n".join(tail[-_STDERR_TAIL:]) or f"mmdc exited with {process.returncode}"
                logger.debug("mmdc.failed", diagram_id=id, returncode=process.returncode)
                raise DiagramSyntaxError(
                    message, hash=f"{id}:exit-{process.returncode}"
                ).with_context(diagram_id=id)

            svg_path = workdir / "diagram.svg"
            if not svg_path.exists():
                raise RenderError(
                    f"mmdc produced no output for {id}"
                ).with_context(diagram_id=id)
            return svg_path.read_text(encoding="utf-8")
