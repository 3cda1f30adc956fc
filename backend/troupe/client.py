"""HTTP client for the reorderable lists (sketches, team members).

Keeps an :class:`~troupe.services.reconcile.OrderReconciler` in step with the
server: local moves show up immediately, are sent as a full reorder, and are
rolled back to the last confirmed order when the server refuses them.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from troupe.errors import TroupeError
from troupe.services.reconcile import OrderReconciler

logger = logging.getLogger(__name__)


class OrderSyncError(TroupeError):
    """A reorder was not accepted; the local order was reset to the server's."""

    status_code = 502


class OrderedListClient:
    """Client-side view of one ordered collection."""

    def __init__(self, http: httpx.Client, collection: str, reorder_field: str):
        self.http = http
        self.collection = collection
        self.reorder_field = reorder_field
        self.state = OrderReconciler()
        self._records: dict[str, dict[str, Any]] = {}

    @classmethod
    def for_sketches(cls, http: httpx.Client) -> "OrderedListClient":
        return cls(http, "sketches", "sketch_ids")

    @classmethod
    def for_team_members(cls, http: httpx.Client) -> "OrderedListClient":
        return cls(http, "team-members", "member_ids")

    @property
    def items(self) -> list[dict[str, Any]]:
        """Records in the order the user should see them."""
        return [self._records[i] for i in self.state.view if i in self._records]

    def _remember(self, records: list[dict[str, Any]]) -> list[str]:
        for record in records:
            self._records[record["id"]] = record
        return [record["id"] for record in records]

    def refresh(self) -> bool:
        """Fetch the server list; returns True when the visible order changed."""
        response = self.http.get(f"/api/{self.collection}/")
        response.raise_for_status()
        records = response.json()
        self._records = {}
        return self.state.on_server_update(self._remember(records))

    def move(self, old_index: int, new_index: int) -> list[str]:
        """Move one item locally and submit the full new order.

        Raises:
            OrderSyncError: the server rejected the reorder or was unreachable.
        """
        if old_index == new_index:
            return self.state.view
        self.state.move(old_index, new_index)
        ids = self.state.begin_submit()
        try:
            response = self.http.post(
                f"/api/{self.collection}/reorder", json={self.reorder_field: ids}
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            self.state.submit_failed()
            logger.warning("Reorder of %s failed: %s", self.collection, exc)
            raise OrderSyncError(f"Failed to reorder {self.collection}") from exc

        self.state.submit_succeeded(self._remember(response.json()))
        return self.state.view
