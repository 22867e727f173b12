"""Scan/Render Orchestrator — render every unprocessed diagram on a page once.

WHY
───
A page may call ``run`` many times (initial load, after injecting new
markup, from several widgets). Each element must be rendered exactly
once across all of those calls, one failing diagram must not stop its
siblings, and ids must be reproducible when snapshot tests ask for it.

ARCHITECTURE
────────────
::

    run_throws_errors(options)
      1. resolve elements   options.nodes  or  document.query_selector_all()
                            neither → ElementSourceError (fatal)
      2. IdGenerator(config.deterministic_ids, config.deterministic_id_seed)
      3. for element in order:
           processed?  → skip
           mark processed              (commit point, never retried)
           id    = "mermaid-" + ids.next()
           text  = normalize_diagram_text(element.inner_html)
           try:   result = await engine.render(id, text, element)
           except → handle_error() → errors[]      (collected, continue)
           element.inner_html = result.svg
           await post_render_callback(id)        (failure is fatal)
           result.bind_functions(element)        (failure is fatal)
      4. errors → raise errors[0]

Engine calls go straight to the engine, not through the queue: the loop
already awaits each element before starting the next.

Example::

    orchestrator = ScanOrchestrator(engine, document, error_handler=hook)
    ids = await orchestrator.run_throws_errors(RunOptions(query_selector=".diagram"))

Tags:
    mermaid-runner, execution, orchestrator, scanning, idempotency

Doc-Types:
    api-reference
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from mermaid_runner.core.document import (
    DEFAULT_SELECTOR,
    CandidateElement,
    DocumentTree,
    is_processed,
    mark_processed,
)
from mermaid_runner.core.errors import DetailedError, ElementSourceError
from mermaid_runner.core.ids import IdGenerator
from mermaid_runner.core.logging import get_logger
from mermaid_runner.core.normalizer import ParseErrorHandler, handle_error
from mermaid_runner.core.text import detect_init, normalize_diagram_text
from mermaid_runner.engine.protocol import DiagramEngine

logger = get_logger(__name__)

ID_PREFIX = "mermaid-"


@dataclass
class RunOptions:
    """Options for one scan pass.

    ``nodes`` wins over ``query_selector`` when both are given.
    """

    query_selector: str | None = DEFAULT_SELECTOR
    nodes: Sequence[CandidateElement] | None = None
    post_render_callback: Callable[[str], Any] | None = None
    suppress_errors: bool = False


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class ScanOrchestrator:
    """Scans a document and renders each unprocessed candidate element.

    Parameters
    ----------
    engine : DiagramEngine
        Called directly, once per element, strictly sequentially.
    document : DocumentTree, optional
        Queried when the options carry a selector instead of nodes.
    error_handler : callable, optional
        Hook handed to the error normalizer for every element failure.
    """

    def __init__(
        self,
        engine: DiagramEngine,
        document: DocumentTree | None = None,
        error_handler: ParseErrorHandler | None = None,
    ) -> None:
        self._engine = engine
        self._document = document
        self._error_handler = error_handler

    def resolve_elements(self, options: RunOptions) -> Sequence[CandidateElement]:
        """Element working set for *options*; raises ``ElementSourceError``."""
        if options.nodes is not None:
            return options.nodes
        if options.query_selector:
            if self._document is None:
                raise ElementSourceError(
                    "No document to query"
                ).with_context(selector=options.query_selector)
            return self._document.query_selector_all(options.query_selector)
        raise ElementSourceError("Nodes and query_selector are both undefined")

    async def run_throws_errors(self, options: RunOptions | None = None) -> list[str]:
        """Render every unprocessed element; return the ids rendered.

        Raises the first collected ``DetailedError`` after all elements have
        been attempted, or any fatal failure immediately.
        """
        options = options or RunOptions()
        conf = self._engine.get_config()

        if options.post_render_callback is None:
            logger.debug("orchestrator.no_callback")
        else:
            logger.debug("orchestrator.callback_found")

        elements = self.resolve_elements(options)
        logger.debug("orchestrator.found_diagrams", count=len(elements))

        if conf.start_on_load is not None:
            logger.debug("orchestrator.start_on_load", start_on_load=conf.start_on_load)
            self._engine.update_site_config({"startOnLoad": conf.start_on_load})

        id_generator = IdGenerator(conf.deterministic_ids, conf.deterministic_id_seed)

        errors: list[DetailedError] = []
        rendered: list[str] = []

        for element in elements:
            logger.info("orchestrator.rendering", element_id=element.id)
            if is_processed(element):
                continue
            mark_processed(element)

            diagram_id = f"{ID_PREFIX}{id_generator.next()}"
            text = normalize_diagram_text(element.inner_html)

            init = detect_init(text)
            if init:
                logger.debug("orchestrator.early_reinit", diagram_id=diagram_id, init=init)

            try:
                result = await self._engine.render(diagram_id, text, element)
            except Exception as e:
                handle_error(e, errors, self._error_handler)
                continue

            element.inner_html = result.svg
            if options.post_render_callback:
                await _maybe_await(options.post_render_callback(diagram_id))
            if result.bind_functions:
                await _maybe_await(result.bind_functions(element))
            rendered.append(diagram_id)

        if errors:
            logger.debug("orchestrator.collected_errors", count=len(errors))
            raise errors[0]
        return rendered


__all__ = ["ID_PREFIX", "RunOptions", "ScanOrchestrator"]
