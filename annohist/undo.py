"""Undo/redo: move the head along parent links with a linear redo stack."""

import logging

from .errors import CorruptHistory, Failure
from .graph import HistoryGraph, Outcome, T

logger = logging.getLogger(__name__)


def undo(graph: HistoryGraph[T]) -> Outcome[T]:
    """Move the head to its parent, pushing the old head for redo.

    Returns ``Failure.AT_ROOT`` when the head has no parent.
    """
    head = graph.head_node
    if head.parent_id is None:
        return Outcome(graph, failure=Failure.AT_ROOT)

    parent = graph.nodes.get(head.parent_id)
    if parent is None:
        raise CorruptHistory(f"parent of head {head.id!r} is missing", head.id)

    logger.debug("undo %s -> %s", head.id, parent.id)
    new = HistoryGraph(
        nodes=graph.nodes,
        root=graph.root,
        head=parent.id,
        redo_stack=(*graph.redo_stack, head.id),
    )
    return Outcome(new, parent.state)


def redo(graph: HistoryGraph[T]) -> Outcome[T]:
    """Move the head back to the most recently undone node.

    The top entry is jumped to as-is; it is not checked against the
    current head's children. Returns ``Failure.NO_REDO`` when the
    stack is empty.
    """
    if not graph.redo_stack:
        return Outcome(graph, failure=Failure.NO_REDO)

    *rest, redo_id = graph.redo_stack
    node = graph.nodes.get(redo_id)
    if node is None:
        raise CorruptHistory(f"redo entry {redo_id!r} is missing", redo_id)

    logger.debug("redo %s -> %s", graph.head, redo_id)
    new = HistoryGraph(
        nodes=graph.nodes,
        root=graph.root,
        head=redo_id,
        redo_stack=tuple(rest),
    )
    return Outcome(new, node.state)


def can_undo(graph: HistoryGraph | None) -> bool:
    return graph is not None and graph.can_undo


def can_redo(graph: HistoryGraph | None) -> bool:
    return graph is not None and graph.can_redo
