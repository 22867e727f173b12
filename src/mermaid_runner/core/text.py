"""Diagram text clean-up applied between an element's markup and the engine.

Diagram sources embedded in HTML arrive indented to match the page and
with ``<``, ``>`` and ``&`` entity-encoded. The engine needs the raw text
back, flush-left (YAML front matter is indentation sensitive).
"""

from __future__ import annotations

import html
import json
import re
from typing import Any

from mermaid_runner.core.logging import get_logger

logger = get_logger(__name__)

_BR_PATTERN = re.compile(r"<br\s*/?>", re.IGNORECASE)

_TRAILING_BLANK_LINE = re.compile(r"\r?\n[\t ]*\Z")
# indentation of each line after a newline; 0 for lines starting with text
_LINE_START = re.compile(r"\n([\t ]+|(?!\s).)")
_LEADING_NEWLINE = re.compile(r"\A\r?\n")

# %%{init: {...}}%%  or  %%{initialize: {...}}%%
_INIT_DIRECTIVE = re.compile(
    r"%%\{\s*(?:init|initialize)\s*:\s*(?P<args>\{.*\})\s*\}%%",
    re.DOTALL,
)


def entity_decode(text: str) -> str:
    """Decode HTML character references (``&lt;``, ``&#35;``, ``&amp;``)."""
    return html.unescape(text)


def dedent(text: str) -> str:
    """Remove the common indentation of every line after the first.

    The first line usually sits right after the opening tag, so its own
    indentation is not counted. A trailing whitespace-only line and one
    leading newline are dropped.
    """
    text = _TRAILING_BLANK_LINE.sub("", text)
    indents = [
        len(m.group(1)) if m.group(1)[0] in " \t" else 0
        for m in _LINE_START.finditer(text)
    ]
    if indents:
        text = re.sub(rf"\n[\t ]{{{min(indents)}}}", "\n", text)
    return _LEADING_NEWLINE.sub("", text)


def normalize_diagram_text(raw: str) -> str:
    """Turn element markup into engine-ready diagram text."""
    text = dedent(entity_decode(raw)).strip()
    return _BR_PATTERN.sub("<br/>", text)


def detect_init(text: str) -> dict[str, Any] | None:
    """Return the configuration of a leading ``%%{init: ...}%%`` directive.

    Single-quoted keys and values are accepted. A directive that cannot be
    decoded is ignored.
    """
    match = _INIT_DIRECTIVE.search(text)
    if not match:
        return None
    payload = match.group("args").replace("'", '"')
    try:
        config = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.debug("text.init_directive_unreadable", error=str(e))
        return None
    return config if isinstance(config, dict) else None


__all__ = [
    "dedent",
    "detect_init",
    "entity_decode",
    "normalize_diagram_text",
]
