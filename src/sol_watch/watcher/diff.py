"""Diff engine — which signatures are newer than the stored cursor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sol_watch.ledger.models import SignatureInfo


@dataclass(frozen=True)
class DiffResult:
    """Outcome of diffing one signature window against a cursor.

    Attributes:
        new: Unseen signatures, oldest first.
        cursor: Cursor value to store once the diff is processed, or None
            to leave the stored cursor untouched.
        cursor_slot: Slot of ``cursor`` as reported by the ledger.
        seeded: True when the target had no cursor and was seeded.
        overflow: True when the cursor was not found in the window, so
            activity older than the window may have been dropped.
        stale: True when the whole window predates the stored cursor.
    """

    new: list[SignatureInfo] = field(default_factory=list)
    cursor: str | None = None
    cursor_slot: int | None = None
    seeded: bool = False
    overflow: bool = False
    stale: bool = False


def compute_diff(
    signatures: Sequence[SignatureInfo],
    cursor: str | None,
    cursor_slot: int | None = None,
) -> DiffResult:
    """Compute the unseen signatures of a newest-first window.

    - Empty window: nothing new, cursor untouched.
    - No cursor yet: seed it to the newest signature and report nothing,
      so pre-existing history is never replayed.
    - Otherwise walk newest to oldest until the cursor is met. A cursor
      missing from the window means every signature in it is new; anything
      older than the window is lost.
    - A window whose newest slot is below ``cursor_slot`` comes from a node
      lagging behind the one that produced the cursor. Nothing is new and
      the cursor stays where it is.
    """
    if not signatures:
        return DiffResult()

    newest = signatures[0]
    if cursor is None:
        return DiffResult(cursor=newest.signature, cursor_slot=newest.slot, seeded=True)

    collected: list[SignatureInfo] = []
    overflow = True
    for sig in signatures:
        if sig.signature == cursor:
            overflow = False
            break
        collected.append(sig)

    if overflow and cursor_slot and newest.slot < cursor_slot:
        return DiffResult(stale=True)

    collected.reverse()
    return DiffResult(new=collected, cursor=newest.signature, cursor_slot=newest.slot, overflow=overflow)
