"""Checkout: fork a new head from any existing snapshot."""

import copy
import logging
import time

from .commit import append_node
from .errors import Failure
from .graph import HistoryGraph, Outcome, T
from .ids import Clock, IdFactory, uuid_ids

logger = logging.getLogger(__name__)

CHECKOUT_SUMMARY = "Restored from version %s"


def format_time(timestamp: float) -> str:
    """Local wall-clock time of a timestamp, as ``HH:MM:SS``."""
    return time.strftime("%H:%M:%S", time.localtime(timestamp))


def checkout(
    graph: HistoryGraph[T],
    target_id: str,
    *,
    ids: IdFactory | None = None,
    clock: Clock | None = None,
) -> Outcome[T]:
    """Make ``target_id``'s state current by branching from it.

    Checking out the head is a no-op. Any other node gets a new
    child holding a copy of its state, and that child becomes the
    head. Nothing is removed: the previous head and its ancestors
    stay in the graph.

    Returns:
        An Outcome carrying the new head's state (for a fork, the
        copy, so editing it leaves the target untouched), or
        ``Failure.NOT_FOUND`` if ``target_id`` is not in the graph.
    """
    target = graph.nodes.get(target_id)
    if target is None:
        logger.debug("checkout %s: not found", target_id)
        return Outcome(graph, failure=Failure.NOT_FOUND)

    if target_id == graph.head:
        return Outcome(graph, target.state)

    new = append_node(
        graph,
        target_id,
        CHECKOUT_SUMMARY % format_time(target.timestamp),
        copy.deepcopy(target.state),
        ids=ids or uuid_ids(),
        clock=clock or time.time,
    )
    logger.debug("checkout %s: forked %s (head was %s)", target_id, new.head, graph.head)
    return Outcome(new, new.head_node.state)


def preview(graph: HistoryGraph[T] | None, node_id: str) -> T | None:
    """Read a node's state without moving the head, or None if absent."""
    if graph is None:
        return None
    node = graph.nodes.get(node_id)
    if node is None:
        return None
    return node.state
