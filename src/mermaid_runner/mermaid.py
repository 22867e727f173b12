"""
Mermaid facade — the entry points an embedding caller uses.

Manifesto:
    One object owns the engine handle, the serialized queue and the
    error hook. Nothing is ambient: build a ``Mermaid`` once per engine
    and pass it to whoever needs to render.

Architecture:
    ::

        Mermaid(engine, document)
          ├── run(options)          ─ scan the page (ScanOrchestrator),
          │                           log, hook, raise or suppress
          ├── parse(text)           ─┐
          ├── render(id, text, el)  ─┴─ SerializedOperationQueue → engine
          ├── set_parse_error_handler(fn)
          ├── initialize(config)    ─ engine configuration
          ├── init(...)             ─ deprecated: initialize + run
          └── content_loaded()      ─ page-load trigger (start_on_load)

    Error flow::

        element failure ─► normalizer ─► hook(str, hash) ─► errors[]
        run failure     ─► log ─► hook(error) ─► raise | suppress
        queue failure   ─► log ─► hook(error) ─► caller's await raises

Examples:
    >>> mermaid = Mermaid(engine, HtmlDocument.from_path("page.html"))
    >>> mermaid.set_parse_error_handler(lambda *args: print(args))
    >>> await mermaid.run(suppress_errors=True)
    >>> ok = await mermaid.parse("graph TD; A-->B")

Tags:
    mermaid-runner, facade, api

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import dataclasses
import uuid
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from mermaid_runner.core.document import CandidateElement, DocumentTree
from mermaid_runner.core.logging import LogContext, get_logger
from mermaid_runner.core.normalizer import ParseErrorHandler, is_detailed_error
from mermaid_runner.core.settings import MermaidSettings
from mermaid_runner.engine.mmdc import MermaidCliEngine
from mermaid_runner.engine.protocol import (
    DiagramEngine,
    MermaidConfig,
    ParseOptions,
    RenderResult,
    coerce_config,
)
from mermaid_runner.execution.orchestrator import RunOptions, ScanOrchestrator
from mermaid_runner.execution.queue import SerializedOperationQueue

logger = get_logger(__name__)


class Mermaid:
    """Public API around one engine instance.

    Args:
        engine: The parser/renderer to drive.
        document: Page scanned by ``run`` when no explicit nodes are given.
        start_on_load: Lets ``content_loaded()`` trigger a scan.
        queue: Shared queue for this engine. Failures of ``parse`` and
            ``render`` always reach this facade's error hook, whichever
            queue runs them.
        parse_error: Initial error hook.
    """

    def __init__(
        self,
        engine: DiagramEngine,
        document: DocumentTree | None = None,
        *,
        start_on_load: bool = True,
        queue: SerializedOperationQueue | None = None,
        parse_error: ParseErrorHandler | None = None,
    ) -> None:
        self.engine = engine
        self.document = document
        self.start_on_load = start_on_load
        self._parse_error = parse_error
        self.queue = queue or SerializedOperationQueue()

    # ── Error hook ───────────────────────────────────────────────────

    @property
    def parse_error(self) -> ParseErrorHandler | None:
        return self._parse_error

    def set_parse_error_handler(self, handler: ParseErrorHandler | None) -> None:
        """Install the hook called for every failure before it surfaces.

        Structured failures call ``handler(str, hash)``; everything else
        calls ``handler(failure)``.
        """
        self._parse_error = handler

    register_error_handler = set_parse_error_handler

    def _dispatch_parse_error(self, *args: Any) -> None:
        if self._parse_error:
            self._parse_error(*args)

    # ── Configuration ────────────────────────────────────────────────

    def initialize(self, config: MermaidConfig | Mapping[str, Any]) -> None:
        """Set the engine configuration; call before ``run``."""
        self.engine.initialize(coerce_config(config))

    # ── Page scanning ────────────────────────────────────────────────

    async def run(self, options: RunOptions | None = None, **overrides: Any) -> None:
        """Render every unprocessed diagram on the page.

        Keyword overrides are applied on top of *options*
        (``await mermaid.run(query_selector=".chart", suppress_errors=True)``).

        Raises:
            DetailedError: First element failure, unless suppressed.
            MermaidError: Fatal failures (no element source), unless suppressed.
        """
        options = options or RunOptions()
        if overrides:
            options = dataclasses.replace(options, **overrides)

        orchestrator = ScanOrchestrator(
            self.engine, self.document, error_handler=self._dispatch_parse_error
        )
        async with LogContext(run_id=uuid.uuid4().hex[:12]):
            try:
                await orchestrator.run_throws_errors(options)
            except Exception as e:
                if is_detailed_error(e):
                    logger.error("mermaid.run_failed", error=e.str, hash=e.hash)
                else:
                    logger.error("mermaid.run_failed", error=str(e), error_type=type(e).__name__)
                self._dispatch_parse_error(e)
                if not options.suppress_errors:
                    logger.error("mermaid.run_failed_hint", hint="Use the suppress_errors option to suppress these errors")
                    raise
                logger.warning("mermaid.errors_suppressed")

    async def init(
        self,
        config: MermaidConfig | Mapping[str, Any] | None = None,
        nodes: str | CandidateElement | Sequence[CandidateElement] | None = None,
        callback: Callable[[str], Any] | None = None,
    ) -> None:
        """Deprecated: use ``initialize`` and ``run``.

        *nodes* may be a selector string, one element, or a sequence of
        elements; it defaults to the ``.mermaid`` selector.
        """
        logger.warning("mermaid.init_deprecated", hint="Use initialize() and run() instead")
        if config:
            self.initialize(config)
        options = RunOptions(post_render_callback=callback)
        if isinstance(nodes, str):
            options.query_selector = nodes
        elif isinstance(nodes, Sequence):
            options.nodes = list(nodes)
        elif nodes is not None:
            options.nodes = [nodes]
        await self.run(options)

    async def content_loaded(self) -> None:
        """Page-load trigger: scan once if both the facade and config allow it.

        Failures are logged, never raised.
        """
        if not self.start_on_load:
            return
        if not self.engine.get_config().start_on_load:
            return
        try:
            await self.run()
        except Exception as e:
            logger.error("mermaid.failed_to_initialize", error=str(e))

    # ── Queued operations ────────────────────────────────────────────

    async def parse(self, text: str, options: ParseOptions | None = None) -> bool:
        """Validate *text* through the queue.

        Returns ``False`` for invalid text only when
        ``options.suppress_errors`` is set; otherwise raises.
        """
        return await self.queue.submit(
            lambda: self.engine.parse(text, options),
            name="parse",
            error_handler=self._dispatch_parse_error,
        )

    async def render(self, id: str, text: str, container: Any | None = None) -> RenderResult:
        """Render one diagram through the queue."""
        return await self.queue.submit(
            lambda: self.engine.render(id, text, container),
            name="render",
            error_handler=self._dispatch_parse_error,
        )

    render_one = render


def create_mermaid(
    settings: MermaidSettings | None = None,
    document: DocumentTree | None = None,
) -> Mermaid:
    """Build a ``Mermaid`` around a ``MermaidCliEngine`` configured from *settings*."""
    settings = settings or MermaidSettings()
    engine = MermaidCliEngine(settings.mmdc_path, settings.to_config())
    return Mermaid(engine, document, start_on_load=settings.start_on_load)


__all__ = ["Mermaid", "create_mermaid"]
