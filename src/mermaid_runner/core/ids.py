"""Diagram id suffix generation.

Deterministic mode yields ``{seed}{counter}`` with the counter starting at
zero, so two scans over the same page produce the same ids (snapshot
tests rely on this). Otherwise each suffix is a random uuid4 hex string.

One generator is built per scan pass; passes never share a counter.
"""

from __future__ import annotations

import uuid


class IdGenerator:
    """Produces id suffixes for one scan pass.

    Example:
        >>> gen = IdGenerator(deterministic=True, seed="doc-")
        >>> gen.next(), gen.next()
        ('doc-0', 'doc-1')
    """

    def __init__(self, deterministic: bool = False, seed: str | None = None) -> None:
        self.deterministic = bool(deterministic)
        self.seed = seed or ""
        self._count = 0

    @property
    def count(self) -> int:
        """Number of ids handed out so far."""
        return self._count

    def next(self) -> str:
        self._count += 1
        if not self.deterministic:
            return uuid.uuid4().hex
        return f"{self.seed}{self._count - 1}"

    def __repr__(self) -> str:
        mode = "deterministic" if self.deterministic else "random"
        return f"IdGenerator({mode}, seed={self.seed!r}, count={self._count})"
