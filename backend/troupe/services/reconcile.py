"""Optimistic ordering state for a client showing a reorderable list.

The client keeps two sequences of identities apart: ``confirmed`` (what the
server last reported) and ``pending`` (a local edit such as a drag that the
server has not acknowledged yet). The list shown to the user is ``pending``
when present, ``confirmed`` otherwise.

Server updates replace the visible list only when they differ from it and no
local edit is in flight. An update equal to the visible list is an echo of our
own write and is absorbed without a redraw. Concurrent reorders from two
clients are last-writer-wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence


def move_item(items: Sequence[str], old_index: int, new_index: int) -> list[str]:
    """Return a copy of ``items`` with the element at ``old_index`` moved to ``new_index``."""
    size = len(items)
    if not (0 <= old_index < size and 0 <= new_index < size):
        raise IndexError(f"move {old_index} -> {new_index} out of range for {size} items")
    moved = list(items)
    moved.insert(new_index, moved.pop(old_index))
    return moved


@dataclass
class OrderReconciler:
    confirmed: list[str] = field(default_factory=list)
    pending: list[str] | None = None
    in_flight: bool = False

    @property
    def view(self) -> list[str]:
        """The sequence to render."""
        return list(self.pending if self.pending is not None else self.confirmed)

    @property
    def is_synced(self) -> bool:
        return self.pending is None and not self.in_flight

    def move(self, old_index: int, new_index: int) -> list[str]:
        """Apply a local move and keep it as the pending order."""
        if old_index == new_index:
            return self.view
        self.pending = move_item(self.view, old_index, new_index)
        return self.view

    def begin_submit(self) -> list[str]:
        """Mark the pending order as sent; returns the ids to submit."""
        self.in_flight = True
        return self.view

    def submit_succeeded(self, server_ids: Sequence[str]) -> None:
        self.in_flight = False
        self.confirmed = list(server_ids)
        if self.pending == self.confirmed:
            self.pending = None

    def submit_failed(self) -> None:
        """Drop the local edit and fall back to the confirmed order."""
        self.in_flight = False
        self.pending = None

    def on_server_update(self, server_ids: Sequence[str]) -> bool:
        """Fold a fresh server list into the state.

        Returns:
            True when the visible sequence changed.
        """
        before = self.view
        self.confirmed = list(server_ids)
        # an in-flight edit keeps its pending order until the submit settles
        if not self.in_flight:
            self.pending = None
        return self.view != before
