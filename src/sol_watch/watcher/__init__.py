"""Watch cycle engine — cursors, diffing, transfer extraction, orchestration."""

from __future__ import annotations

from sol_watch.watcher.cursor import CursorStore, MemoryCursorStore
from sol_watch.watcher.diff import DiffResult, compute_diff
from sol_watch.watcher.orchestrator import CycleReport, CycleState, TargetOutcome, WatchCycle
from sol_watch.watcher.transfer import Direction, TransferEvent, extract_transfer

__all__ = [
    "CursorStore",
    "CycleReport",
    "CycleState",
    "DiffResult",
    "Direction",
    "MemoryCursorStore",
    "TargetOutcome",
    "TransferEvent",
    "WatchCycle",
    "compute_diff",
    "extract_transfer",
]
