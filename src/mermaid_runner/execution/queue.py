"""Serialized Operation Queue — one engine call in flight, FIFO order.

WHY
───
The engine is a single instance that must never process two requests at
once, yet many independent callers may ``await mermaid.parse(...)`` or
``await mermaid.render(...)`` concurrently. The queue turns those calls
into units that run strictly one after another, in submission order,
while each caller still awaits its own result.

ARCHITECTURE
────────────
::

    SerializedOperationQueue
      ├── .submit(unit)   ─ enqueue, start the drain loop if idle,
      │                     await this unit's own result
      ├── ._drain()       ─ popleft → await → next, until empty
      ├── .running        ─ True while a drain loop is active
      └── .pending        ─ units waiting to start

    submit(unit) ──► deque ──► _drain task ──► unit() ──► engine
                                  │                       │
                    failure caught + logged     value/failure delivered
                    (loop keeps going)          to the submitting caller

Each unit's outcome goes to two consumers: the drain loop, which only
uses it to move on (its failure is logged, never propagated), and the
submitting caller's future, which receives the same value or failure.
On failure the error hook runs before the caller's future is rejected.

There is no cancellation and no timeout. A caller that stops awaiting
does not remove its unit; a hung engine call stalls the queue.

Example::

    queue = SerializedOperationQueue(error_handler=on_error)
    ok = await queue.submit(lambda: engine.parse(text), name="parse")

Tags:
    mermaid-runner, execution, queue, asyncio, serialization

Doc-Types:
    api-reference
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from mermaid_runner.core.logging import get_logger
from mermaid_runner.core.normalizer import ParseErrorHandler

logger = get_logger(__name__)

T = TypeVar("T")

OperationUnit = Callable[[], Awaitable[Any]]


class SerializedOperationQueue:
    """FIFO scheduler guaranteeing at most one in-flight engine call.

    Construct one per process (or per engine) and share it between every
    entry point that talks to that engine.

    Parameters
    ----------
    error_handler : callable, optional
        Invoked with the failure of any unit before its caller sees it.
    """

    def __init__(self, error_handler: ParseErrorHandler | None = None) -> None:
        self._pending: deque[OperationUnit] = deque()
        self._running = False
        self._drain_task: asyncio.Task[None] | None = None
        self._error_handler = error_handler
        self._submitted = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def pending(self) -> int:
        return len(self._pending)

    # ── Submission ───────────────────────────────────────────────────

    async def submit(
        self,
        unit: Callable[[], Awaitable[T]],
        *,
        name: str = "operation",
        error_handler: ParseErrorHandler | None = None,
    ) -> T:
        """Run *unit* after every previously submitted unit; return its result.

        *error_handler*, when given, is called on failure instead of the
        queue's own handler.

        Raises whatever *unit* raises.
        """
        loop = asyncio.get_running_loop()
        result: asyncio.Future[T] = loop.create_future()
        self._submitted += 1
        seq = self._submitted
        on_error = error_handler or self._error_handler

        async def perform_call() -> T:
            logger.debug("queue.unit_started", unit=name, seq=seq)
            try:
                value = await unit()
            except Exception as exc:
                logger.error("queue.unit_failed", unit=name, seq=seq, error=str(exc))
                try:
                    if on_error:
                        on_error(exc)
                finally:
                    if not result.done():
                        result.set_exception(exc)
                raise
            if not result.done():
                result.set_result(value)
            return value

        self._pending.append(perform_call)
        self._ensure_running(loop)
        return await result

    # ── Drain loop ───────────────────────────────────────────────────

    def _ensure_running(self, loop: asyncio.AbstractEventLoop) -> None:
        task = self._drain_task
        if self._running and task is not None and not task.done() and task.get_loop() is loop:
            return
        # a drain task orphaned by a closed event loop never clears the flag itself
        self._running = True
        self._drain_task = loop.create_task(self._drain())

    async def _drain(self) -> None:
        try:
            while self._pending:
                perform_call = self._pending.popleft()
                try:
                    await perform_call()
                except Exception as e:
                    logger.error("queue.execution_error", error=str(e))
        finally:
            self._running = False
            self._drain_task = None

    def __repr__(self) -> str:
        return f"SerializedOperationQueue(running={self._running}, pending={self.pending})"


__all__ = ["OperationUnit", "SerializedOperationQueue"]
