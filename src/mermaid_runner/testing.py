"""Test Harness — in-memory doubles for engines and documents.

Manifesto:
Exercising the scanner and the queue should not need a browser or the
mermaid-cli toolchain. These doubles satisfy ``DiagramEngine``,
``DocumentTree`` and ``CandidateElement`` and record every call so tests
can assert on ordering and overlap.

ARCHITECTURE
────────────
::

    StubEngine            → renders "<svg id=...>" for every diagram;
                            scripted failures and delays per text
    InMemoryElement       → attribute dict + inner_html string
    InMemoryDocument      → class-selector lookup over InMemoryElements

Example::

    engine = StubEngine(failures={"bad": DiagramSyntaxError("nope", hash="X")})
    doc = InMemoryDocument([InMemoryElement("graph TD; A-->B"),
                            InMemoryElement("bad")])
    await Mermaid(engine, doc).run(suppress_errors=True)
    engine.render_calls  # [("mermaid-...", "graph TD; A-->B"), ...]

Tags:
    mermaid-runner, testing, doubles

Doc-Types:
    api-reference
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from mermaid_runner.engine.protocol import (
    MermaidConfig,
    ParseOptions,
    RenderResult,
    coerce_config,
)

# ---------------------------------------------------------------------------
# Engine double
# ---------------------------------------------------------------------------


class StubEngine:
    """``DiagramEngine`` that never leaves the process.

    Parameters
    ----------
    config
        Initial configuration.
    failures
        ``text → exception`` raised by ``parse``/``render`` for that text.
    delays
        ``text → seconds`` slept before answering, to force interleaving.
    bind_functions
        Returned in every ``RenderResult``.
    """

    def __init__(
        self,
        config: MermaidConfig | Mapping[str, Any] | None = None,
        *,
        failures: Mapping[str, BaseException] | None = None,
        delays: Mapping[str, float] | None = None,
        bind_functions: Callable[[Any], Any] | None = None,
    ) -> None:
        self._config = coerce_config(config)
        self.failures = dict(failures or {})
        self.delays = dict(delays or {})
        self.bind_functions = bind_functions
        self.render_calls: list[tuple[str, str]] = []
        self.parse_calls: list[str] = []
        self.events: list[str] = []
        self.site_config_updates: list[dict[str, Any]] = []
        self._in_flight = 0
        self.max_in_flight = 0

    def initialize(self, config: MermaidConfig | Mapping[str, Any]) -> None:
        self._config = coerce_config(config)

    def get_config(self) -> MermaidConfig:
        return self._config.model_copy(deep=True)

    def update_site_config(self, partial: Mapping[str, Any]) -> MermaidConfig:
        self.site_config_updates.append(dict(partial))
        self._config = self._config.merged(partial)
        return self.get_config()

    async def _call(self, kind: str, text: str) -> None:
        self._in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self._in_flight)
        self.events.append(f"{kind}:start:{text}")
        try:
            await asyncio.sleep(self.delays.get(text, 0))
            if text in self.failures:
                raise self.failures[text]
        finally:
            self.events.append(f"{kind}:end:{text}")
            self._in_flight -= 1

    async def parse(self, text: str, options: ParseOptions | None = None) -> bool:
        self.parse_calls.append(text)
        try:
            await self._call("parse", text)
        except Exception:
            if options and options.suppress_errors:
                return False
            raise
        return True

    async def render(self, id: str, text: str, container: Any | None = None) -> RenderResult:
        self.render_calls.append((id, text))
        await self._call("render", text)
        return RenderResult(svg=f'<svg id="{id}"></svg>', bind_functions=self.bind_functions)


# ---------------------------------------------------------------------------
# Document doubles
# ---------------------------------------------------------------------------


class InMemoryElement:
    """``CandidateElement`` holding its state in plain attributes."""

    def __init__(
        self,
        inner_html: str = "",
        *,
        id: str = "",
        classes: Iterable[str] = ("mermaid",),
        attributes: Mapping[str, str] | None = None,
    ) -> None:
        self._id = id
        self.classes = set(classes)
        self.attributes: dict[str, str] = dict(attributes or {})
        self._inner_html = inner_html
        self.html_writes = 0

    @property
    def id(self) -> str:
        return self._id

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def remove_attribute(self, name: str) -> None:
        self.attributes.pop(name, None)

    @property
    def inner_html(self) -> str:
        return self._inner_html

    @inner_html.setter
    def inner_html(self, value: str) -> None:
        self.html_writes += 1
        self._inner_html = value

    def __repr__(self) -> str:
        return f"InMemoryElement(id={self._id!r})"


class InMemoryDocument:
    """``DocumentTree`` supporting ``.class`` and ``#id`` selectors."""

    def __init__(self, elements: Iterable[InMemoryElement] = ()) -> None:
        self.elements = list(elements)
        self.queries: list[str] = []

    def query_selector_all(self, selector: str) -> list[InMemoryElement]:
        self.queries.append(selector)
        if selector.startswith("#"):
            return [el for el in self.elements if el.id == selector[1:]]
        if selector.startswith("."):
            return [el for el in self.elements if selector[1:] in el.classes]
        return []


__all__ = ["InMemoryDocument", "InMemoryElement", "StubEngine"]
