"""Tracked: a VersionStore view bound to one entity key."""

from __future__ import annotations

from typing import Any

from .graph import HistoryGraph, Outcome
from .projection import Projection, Projector
from .store import VersionStore


class Tracked:
    """The history API for a single entity.

    Every call goes through the owning store, so a Tracked view and
    direct store calls on the same key see the same history.

    Args:
        store: The owning VersionStore.
        key: Entity key, e.g. a file path.
        initial_state: Root state used if the key has no history yet.
    """

    def __init__(self, store: VersionStore, key: str, initial_state: Any = None) -> None:
        if not isinstance(store, VersionStore):
            raise TypeError(
                f"Tracked can only wrap VersionStore, not {type(store).__name__}"
            )
        self.store = store
        self.key = key
        self.initial_state = initial_state
        self._projector = Projector()

    @property
    def history(self) -> HistoryGraph | None:
        """The stored graph, or None before the first successful operation."""
        return self.store.get(self.key)

    # -- Write operations --

    def commit(self, summary: str, new_state: Any) -> HistoryGraph:
        return self.store.commit(
            self.key, summary, new_state, initial_state=self.initial_state
        )

    def checkout(self, node_id: str) -> Outcome:
        return self.store.checkout(
            self.key, node_id, initial_state=self.initial_state
        )

    def undo(self) -> Outcome:
        return self.store.undo(self.key, initial_state=self.initial_state)

    def redo(self) -> Outcome:
        return self.store.redo(self.key, initial_state=self.initial_state)

    # -- Read operations --

    @property
    def can_undo(self) -> bool:
        return self.store.can_undo(self.key)

    @property
    def can_redo(self) -> bool:
        return self.store.can_redo(self.key)

    @property
    def projection(self) -> Projection:
        """Display tree for the current history, recomputed only on change."""
        return self._projector(self.history)

    def preview(self, node_id: str) -> Any:
        return self.store.preview(self.key, node_id)
