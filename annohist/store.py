"""Per-entity history store and factory function."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterator, MutableMapping
from typing import TYPE_CHECKING, Any, Callable, Literal

from .checkout import checkout as _checkout
from .checkout import preview as _preview
from .commit import commit as _commit
from .graph import INITIAL_SUMMARY, HistoryGraph, Outcome, new_graph
from .ids import Clock, IdFactory, counter_ids, uuid_ids
from .projection import Projection, project
from .undo import redo as _redo
from .undo import undo as _undo

if TYPE_CHECKING:
    from .tracked import Tracked

logger = logging.getLogger(__name__)


class VersionStore(MutableMapping[str, HistoryGraph]):
    """Entity key (e.g. a file path) -> that entity's history graph.

    Histories never share nodes or pointers. The mutating methods
    look up the key's graph (creating a fresh one if needed), run
    the engine, and store the result back under the key. Failed
    operations store nothing. Mutations are serialized by one lock
    so two operations on the same key cannot interleave.

    Args:
        ids: Node id factory (default: UUID4).
        clock: Timestamp source (default: ``time.time``).
        initial_summary: Summary of each history's root node.
    """

    def __init__(
        self,
        *,
        ids: IdFactory | None = None,
        clock: Clock | None = None,
        initial_summary: str = INITIAL_SUMMARY,
    ) -> None:
        self._graphs: dict[str, HistoryGraph] = {}
        self._lock = threading.Lock()
        self.ids = ids or uuid_ids()
        self.clock = clock or time.time
        self.initial_summary = initial_summary

    # -- Mapping protocol --

    def __getitem__(self, key: str) -> HistoryGraph:
        return self._graphs[key]

    def __setitem__(self, key: str, graph: HistoryGraph) -> None:
        if not isinstance(graph, HistoryGraph):
            raise TypeError(f"Expected HistoryGraph, got {type(graph).__name__}")
        with self._lock:
            self._graphs[key] = graph

    def __delitem__(self, key: str) -> None:
        with self._lock:
            del self._graphs[key]

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._graphs))

    def __len__(self) -> int:
        return len(self._graphs)

    def __contains__(self, key: object) -> bool:
        return key in self._graphs

    def clear(self) -> None:
        """Drop every history (e.g. when a workspace is reloaded)."""
        with self._lock:
            count = len(self._graphs)
            self._graphs.clear()
        logger.info("cleared %d histories", count)

    # -- Lookup --

    def ensure(self, key: str, initial_state: Any) -> HistoryGraph:
        """The graph for ``key``, or a fresh one rooted at ``initial_state``.

        A fresh graph is returned but not stored; it is stored by the
        first operation that succeeds on it.
        """
        graph = self._graphs.get(key)
        if graph is not None:
            return graph
        return new_graph(
            initial_state,
            self.initial_summary,
            ids=self.ids,
            clock=self.clock,
        )

    # -- Operations --

    def _apply(
        self,
        key: str,
        initial_state: Any,
        op: Callable[[HistoryGraph], Outcome],
    ) -> Outcome:
        with self._lock:
            created = key not in self._graphs
            outcome = op(self.ensure(key, initial_state))
            if outcome:
                self._graphs[key] = outcome.graph
                if created:
                    logger.info("started history for %s", key)
        return outcome

    def commit(
        self,
        key: str,
        summary: str,
        new_state: Any,
        *,
        initial_state: Any = None,
    ) -> HistoryGraph:
        """Commit ``new_state`` to ``key``'s history and return the new graph.

        ``initial_state`` seeds the root when ``key`` has no history yet.
        """
        outcome = self._apply(
            key,
            initial_state,
            lambda g: Outcome(
                _commit(g, summary, new_state, ids=self.ids, clock=self.clock),
                new_state,
            ),
        )
        return outcome.graph

    def checkout(
        self, key: str, node_id: str, *, initial_state: Any = None
    ) -> Outcome:
        """Branch ``key``'s history from ``node_id``."""
        return self._apply(
            key,
            initial_state,
            lambda g: _checkout(g, node_id, ids=self.ids, clock=self.clock),
        )

    def undo(self, key: str, *, initial_state: Any = None) -> Outcome:
        """Move ``key``'s head to its parent."""
        return self._apply(key, initial_state, _undo)

    def redo(self, key: str, *, initial_state: Any = None) -> Outcome:
        """Move ``key``'s head to the last undone node."""
        return self._apply(key, initial_state, _redo)

    # -- Queries --

    def can_undo(self, key: str) -> bool:
        graph = self._graphs.get(key)
        return graph is not None and graph.can_undo

    def can_redo(self, key: str) -> bool:
        graph = self._graphs.get(key)
        return graph is not None and graph.can_redo

    def project(self, key: str) -> Projection:
        """Display tree and active path for ``key`` (empty if no history)."""
        return project(self._graphs.get(key))

    def preview(self, key: str, node_id: str) -> Any:
        """State of ``node_id`` in ``key``'s history, without moving head."""
        return _preview(self._graphs.get(key), node_id)

    def track(self, key: str, initial_state: Any = None) -> Tracked:
        """A view bound to one entity key."""
        from .tracked import Tracked

        return Tracked(self, key, initial_state)


def store(
    *,
    ids: Literal["uuid", "counter"] = "uuid",
    clock: Clock | None = None,
    initial_summary: str = INITIAL_SUMMARY,
) -> VersionStore:
    """Create a VersionStore with sensible defaults.

    Args:
        ids: ``"uuid"`` (default) for random UUID4 node ids, or
            ``"counter"`` for a monotonic counter with a random
            suffix.
        clock: Timestamp source (default: ``time.time``).
        initial_summary: Summary given to each history's root node.

    Returns:
        An empty ``VersionStore``.
    """
    if ids == "uuid":
        factory = uuid_ids()
    elif ids == "counter":
        factory = counter_ids()
    else:
        raise ValueError(f"Unknown ids: {ids!r}")

    return VersionStore(ids=factory, clock=clock, initial_summary=initial_summary)
