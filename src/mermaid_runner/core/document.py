"""Document tree boundary — what the scanner needs from a page.

Manifesto:
The scanner only ever asks a page for "all elements matching a selector"
and, per element, for an attribute, its inner markup and an id to log.
``DocumentTree`` and ``CandidateElement`` capture exactly that, so any
tree (BeautifulSoup, a browser bridge, an in-memory test double) can be
scanned.

ARCHITECTURE
────────────
::

    DocumentTree (Protocol)
      └── .query_selector_all(selector) → list[CandidateElement]

    CandidateElement (Protocol)
      ├── .id                          ─ identity for logging
      ├── .get_attribute / .set_attribute
      └── .inner_html  (get / set)

    HtmlDocument / HtmlElement        ─ BeautifulSoup-backed implementation

The ``data-processed`` attribute is the only state the scanner keeps on a
page; clearing it is the only way to get an element rendered again.

Example::

    doc = HtmlDocument.from_path("page.html")
    for el in doc.query_selector_all(".mermaid"):
        print(el.id, el.inner_html)

Tags:
    mermaid-runner, document, html, protocol

Doc-Types:
    api-reference
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from bs4 import BeautifulSoup, Tag

PROCESSED_ATTRIBUTE = "data-processed"
DEFAULT_SELECTOR = ".mermaid"


@runtime_checkable
class CandidateElement(Protocol):
    """One diagram source in a document tree."""

    @property
    def id(self) -> str: ...

    def get_attribute(self, name: str) -> str | None: ...

    def set_attribute(self, name: str, value: str) -> None: ...

    @property
    def inner_html(self) -> str: ...

    @inner_html.setter
    def inner_html(self, value: str) -> None: ...


@runtime_checkable
class DocumentTree(Protocol):
    """A page that can be queried for candidate elements."""

    def query_selector_all(self, selector: str) -> list[CandidateElement]: ...


def is_processed(element: CandidateElement) -> bool:
    """True once the scanner has claimed *element*."""
    return bool(element.get_attribute(PROCESSED_ATTRIBUTE))


def mark_processed(element: CandidateElement) -> None:
    element.set_attribute(PROCESSED_ATTRIBUTE, "true")


# ---------------------------------------------------------------------------
# BeautifulSoup implementation
# ---------------------------------------------------------------------------


class HtmlElement:
    """``CandidateElement`` over a ``bs4.Tag``."""

    def __init__(self, tag: Tag) -> None:
        self._tag = tag

    @property
    def tag(self) -> Tag:
        return self._tag

    @property
    def id(self) -> str:
        return str(self._tag.get("id") or "")

    def get_attribute(self, name: str) -> str | None:
        value = self._tag.get(name)
        if value is None:
            return None
        # multi-valued attributes (class) come back as lists
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def set_attribute(self, name: str, value: str) -> None:
        self._tag[name] = value

    @property
    def inner_html(self) -> str:
        return self._tag.decode_contents()

    @inner_html.setter
    def inner_html(self, value: str) -> None:
        fragment = BeautifulSoup(value, "html.parser")
        self._tag.clear()
        for child in list(fragment.contents):
            self._tag.append(child.extract())

    def __eq__(self, other: object) -> bool:
        return isinstance(other, HtmlElement) and other._tag is self._tag

    def __hash__(self) -> int:
        return id(self._tag)

    def __repr__(self) -> str:
        return f"HtmlElement(<{self._tag.name} id={self.id!r}>)"


class HtmlDocument:
    """``DocumentTree`` over a parsed HTML page.

    Selectors are CSS, resolved by soupsieve through ``BeautifulSoup.select``.
    """

    def __init__(self, soup: BeautifulSoup) -> None:
        self._soup = soup

    @classmethod
    def from_string(cls, markup: str) -> HtmlDocument:
        return cls(BeautifulSoup(markup, "html.parser"))

    @classmethod
    def from_path(cls, path: str | Path) -> HtmlDocument:
        return cls.from_string(Path(path).read_text(encoding="utf-8"))

    @property
    def soup(self) -> BeautifulSoup:
        return self._soup

    def query_selector_all(self, selector: str) -> list[CandidateElement]:
        return [HtmlElement(tag) for tag in self._soup.select(selector)]

    def to_html(self) -> str:
        return str(self._soup)

    def write(self, path: str | Path) -> Path:
        target = Path(path)
        target.write_text(self.to_html(), encoding="utf-8")
        return target


__all__ = [
    "DEFAULT_SELECTOR",
    "PROCESSED_ATTRIBUTE",
    "CandidateElement",
    "DocumentTree",
    "HtmlDocument",
    "HtmlElement",
    "is_processed",
    "mark_processed",
]
