"""annohist: Git-like version history for annotation files."""

from .checkout import checkout, preview
from .commit import commit
from .errors import CorruptHistory, Failure
from .graph import HistoryGraph, HistoryNode, Outcome, check, lineage, new_graph
from .ids import counter_ids, uuid_ids
from .projection import Projection, Projector, TreeNode, describe, project
from .store import VersionStore, store
from .tracked import Tracked
from .undo import can_redo, can_undo, redo, undo

__all__ = [
    "CorruptHistory",
    "Failure",
    "HistoryGraph",
    "HistoryNode",
    "Outcome",
    "Projection",
    "Projector",
    "Tracked",
    "TreeNode",
    "VersionStore",
    "can_redo",
    "can_undo",
    "check",
    "checkout",
    "commit",
    "counter_ids",
    "describe",
    "lineage",
    "new_graph",
    "preview",
    "project",
    "redo",
    "store",
    "undo",
    "uuid_ids",
]
