"""Execution layer: the serialized queue and the page scanner."""

from mermaid_runner.execution.orchestrator import ID_PREFIX, RunOptions, ScanOrchestrator
from mermaid_runner.execution.queue import OperationUnit, SerializedOperationQueue

__all__ = [
    "ID_PREFIX",
    "OperationUnit",
    "RunOptions",
    "ScanOrchestrator",
    "SerializedOperationQueue",
]
