"""Commit: append a new snapshot under the current head."""

import logging
import time

from .errors import CorruptHistory
from .graph import HistoryGraph, HistoryNode, T
from .ids import Clock, IdFactory, uuid_ids

logger = logging.getLogger(__name__)


def append_node(
    graph: HistoryGraph[T],
    parent_id: str,
    summary: str,
    state: T,
    *,
    ids: IdFactory,
    clock: Clock,
) -> HistoryGraph[T]:
    """Add a fresh leaf under ``parent_id`` and make it the head.

    Shared by commit and checkout. The redo stack is cleared since
    the new leaf is not on the path the stack was recorded along.
    """
    if parent_id not in graph.nodes:
        raise CorruptHistory(f"parent {parent_id!r} is not in the graph", parent_id)

    node_id = ids()
    if node_id in graph.nodes:
        raise CorruptHistory(f"id factory reused {node_id!r}", node_id)

    node = HistoryNode(
        id=node_id,
        parent_id=parent_id,
        timestamp=clock(),
        summary=summary,
        state=state,
    )
    return HistoryGraph(
        nodes={**graph.nodes, node_id: node},
        root=graph.root,
        head=node_id,
        redo_stack=(),
    )


def commit(
    graph: HistoryGraph[T],
    summary: str,
    new_state: T,
    *,
    ids: IdFactory | None = None,
    clock: Clock | None = None,
) -> HistoryGraph[T]:
    """Record ``new_state`` as a child of the head.

    Args:
        graph: The entity's current graph.
        summary: Short description of the change.
        new_state: The full snapshot after the change.
        ids: Node id factory (default: UUID4).
        clock: Timestamp source (default: ``time.time``).

    Returns:
        A new graph whose head is the new node and whose redo stack
        is empty. ``graph`` itself is not modified.
    """
    new = append_node(
        graph,
        graph.head,
        summary,
        new_state,
        ids=ids or uuid_ids(),
        clock=clock or time.time,
    )
    logger.debug("commit %s -> %s: %s", graph.head, new.head, summary)
    return new
