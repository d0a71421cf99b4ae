"""Projection of a history graph into a renderable tree."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Iterator

from .checkout import format_time
from .graph import HistoryGraph, HistoryNode, lineage

HEAD_MARKER = "HEAD -> "


@dataclass(frozen=True)
class TreeNode:
    """Display record for one snapshot, with its children in time order."""

    id: str
    parent_id: str | None
    timestamp: float
    summary: str
    children: tuple[TreeNode, ...] = ()


@dataclass(frozen=True)
class Projection:
    """A history tree plus the head-to-root path to highlight.

    ``tree`` holds the root node, or nothing for an absent graph.
    ``active_path`` starts at the head and ends at the root.
    """

    tree: tuple[TreeNode, ...] = ()
    active_path: tuple[str, ...] = ()

    @property
    def head(self) -> str | None:
        return self.active_path[0] if self.active_path else None

    def is_head(self, node_id: str) -> bool:
        return self.head == node_id

    def is_active(self, node_id: str) -> bool:
        return node_id in self.active_path

    def walk(self) -> Iterator[TreeNode]:
        """Pre-order traversal over every tree node."""
        stack = list(reversed(self.tree))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def __len__(self) -> int:
        return sum(1 for _ in self.walk())


EMPTY = Projection()


def _children_index(graph: HistoryGraph) -> dict[str, list[HistoryNode]]:
    """Group non-root nodes by parent, each group sorted by timestamp.

    ``sorted`` is stable and ``nodes`` iterates in creation order, so
    equal timestamps keep their creation order.
    """
    index: dict[str, list[HistoryNode]] = {}
    for node in graph.nodes.values():
        if node.parent_id is not None:
            index.setdefault(node.parent_id, []).append(node)
    for siblings in index.values():
        siblings.sort(key=lambda n: n.timestamp)
    return index


def project(graph: HistoryGraph | None) -> Projection:
    """Build the display tree and active path for ``graph``.

    Pure function of the graph. An absent graph gives the empty
    projection.
    """
    if graph is None or not graph.nodes:
        return EMPTY

    index = _children_index(graph)

    # Order nodes root-first, then build bottom-up so each node's
    # children already exist. Avoids recursion on deep histories.
    order: list[str] = []
    queue: deque[str] = deque([graph.root])
    while queue:
        nid = queue.popleft()
        order.append(nid)
        queue.extend(child.id for child in index.get(nid, ()))

    built: dict[str, TreeNode] = {}
    for nid in reversed(order):
        node = graph.nodes[nid]
        built[nid] = TreeNode(
            id=node.id,
            parent_id=node.parent_id,
            timestamp=node.timestamp,
            summary=node.summary,
            children=tuple(built.pop(c.id) for c in index.get(nid, ())),
        )

    return Projection(
        tree=(built[graph.root],),
        active_path=tuple(lineage(graph)),
    )


def describe(node: TreeNode, projection: Projection) -> str:
    """Title text for a tree node, marking the head."""
    title = f"{node.summary} - {format_time(node.timestamp)}"
    if projection.is_head(node.id):
        return HEAD_MARKER + title
    return title


class Projector:
    """Caches the projection of the most recently seen graph.

    Graphs are immutable values, so the same object always projects
    to the same tree.
    """

    def __init__(self) -> None:
        self._graph: HistoryGraph | None = None
        self._projection: Projection = EMPTY

    def __call__(self, graph: HistoryGraph | None) -> Projection:
        if graph is None:
            return EMPTY
        if graph is not self._graph:
            self._projection = project(graph)
            self._graph = graph
        return self._projection
