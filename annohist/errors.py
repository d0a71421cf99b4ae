"""annohist error types."""

from enum import Enum


class Failure(str, Enum):
    """Why a checkout, undo or redo did not apply.

    These are expected outcomes, reported on an ``Outcome`` rather
    than raised. The graph is left exactly as it was.
    """

    NOT_FOUND = "not_found"
    AT_ROOT = "at_root"
    NO_REDO = "no_redo"


class CorruptHistory(AssertionError):
    """Raised when a history graph breaks one of its invariants.

    A head that is not in the node map, a parent that was never
    created, or a cycle. None of these can be produced by the
    engines, so seeing one means the graph was built or edited by
    hand.

    Attributes:
        node_id: The node at which the violation was found, if any.
    """

    def __init__(self, message: str, node_id: str | None = None) -> None:
        self.node_id = node_id
        super().__init__(message)
