"""History graph: an append-only arena of snapshots for one entity."""

from __future__ import annotations

import time
from dataclasses import dataclass
from types import MappingProxyType
from typing import Generic, Iterator, Mapping, TypeVar

from .errors import CorruptHistory, Failure
from .ids import Clock, IdFactory, uuid_ids

T = TypeVar("T")

INITIAL_SUMMARY = "initial version"


@dataclass(frozen=True)
class HistoryNode(Generic[T]):
    """One immutable snapshot in a history graph."""

    id: str
    parent_id: str | None
    timestamp: float
    summary: str
    state: T


@dataclass(frozen=True, eq=False)
class HistoryGraph(Generic[T]):
    """All snapshots of one entity, plus the head/root/redo pointers.

    Nodes are never removed or replaced. ``nodes`` is a read-only view
    over a private copy of the mapping passed in, iterating in
    creation order. Graphs compare and hash by identity, so they can
    key a cache.
    """

    nodes: Mapping[str, HistoryNode[T]]
    root: str
    head: str
    redo_stack: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.nodes, MappingProxyType):
            object.__setattr__(self, "nodes", MappingProxyType(dict(self.nodes)))
        object.__setattr__(self, "redo_stack", tuple(self.redo_stack))

    @property
    def head_node(self) -> HistoryNode[T]:
        node = self.nodes.get(self.head)
        if node is None:
            raise CorruptHistory(f"head {self.head!r} is not in the graph", self.head)
        return node

    @property
    def root_node(self) -> HistoryNode[T]:
        node = self.nodes.get(self.root)
        if node is None:
            raise CorruptHistory(f"root {self.root!r} is not in the graph", self.root)
        return node

    @property
    def can_undo(self) -> bool:
        return self.head_node.parent_id is not None

    @property
    def can_redo(self) -> bool:
        return len(self.redo_stack) > 0

    def __getitem__(self, node_id: str) -> HistoryNode[T]:
        return self.nodes[node_id]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a checkout, undo or redo.

    Truthy when the operation applied. On failure ``graph`` is the
    input graph itself and ``state`` is None.
    """

    graph: HistoryGraph[T]
    state: T | None = None
    failure: Failure | None = None

    def __bool__(self) -> bool:
        return self.failure is None


def new_graph(
    initial_state: T,
    summary: str = INITIAL_SUMMARY,
    *,
    ids: IdFactory | None = None,
    clock: Clock | None = None,
) -> HistoryGraph[T]:
    """Create a one-node graph whose root is also its head."""
    ids = ids or uuid_ids()
    clock = clock or time.time
    root = HistoryNode(
        id=ids(),
        parent_id=None,
        timestamp=clock(),
        summary=summary,
        state=initial_state,
    )
    return HistoryGraph(nodes={root.id: root}, root=root.id, head=root.id)


def lineage(graph: HistoryGraph, node_id: str | None = None) -> Iterator[str]:
    """Yield node ids from ``node_id`` (default: head) up to the root.

    Both ends are included. Raises CorruptHistory on a dangling
    parent or a cycle.
    """
    current: str | None = graph.head if node_id is None else node_id
    steps = 0
    while current is not None:
        node = graph.nodes.get(current)
        if node is None:
            raise CorruptHistory(f"node {current!r} is not in the graph", current)
        yield current
        steps += 1
        if steps > len(graph.nodes):
            raise CorruptHistory(f"cycle through {current!r}", current)
        current = node.parent_id


def check(graph: HistoryGraph) -> None:
    """Verify the structural invariants of a graph.

    Raises CorruptHistory describing the first violation found.
    """
    if not graph.nodes:
        raise CorruptHistory("graph has no nodes")

    roots = [nid for nid, node in graph.nodes.items() if node.parent_id is None]
    if roots != [graph.root]:
        raise CorruptHistory(
            f"expected single root {graph.root!r}, found {roots!r}", graph.root
        )

    for nid, node in graph.nodes.items():
        if node.id != nid:
            raise CorruptHistory(f"node stored under {nid!r} has id {node.id!r}", nid)
        if node.parent_id is not None and node.parent_id not in graph.nodes:
            raise CorruptHistory(f"parent of {nid!r} is missing", nid)

    # Every node must reach the root. Nodes already known to reach it
    # are not walked again, so this stays linear in the node count.
    reaches_root: set[str] = {graph.root}
    for nid in graph.nodes:
        path: set[str] = set()
        current = nid
        while current not in reaches_root:
            if current in path:
                raise CorruptHistory(f"cycle through {current!r}", current)
            path.add(current)
            current = graph.nodes[current].parent_id  # type: ignore[assignment]
        reaches_root.update(path)

    if graph.head not in graph.nodes:
        raise CorruptHistory(f"head {graph.head!r} is not in the graph", graph.head)

    for rid in graph.redo_stack:
        if rid not in graph.nodes:
            raise CorruptHistory(f"redo entry {rid!r} is not in the graph", rid)
