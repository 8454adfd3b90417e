"""
Child context derivation for outbound calls.
"""

from typing import Mapping, Optional

from .grid_context import GridContext
from .operation import OperationTracker


class ChildContextFactory:
    """
    Creates initialized child contexts for calls to other nodes.

    The child carries the parent's correlation id and its causation id is
    the operation id of the tracker wrapping the outbound call, so the
    receiving node can tell which operation caused it. Root contexts are
    never created here; scope owners create those.
    """

    def create_child(
        self,
        parent: GridContext,
        operation: OperationTracker,
        node_id: Optional[str] = None,
        extra_baggage: Optional[Mapping[str, str]] = None,
    ) -> GridContext:
        """
        Args:
            parent: Initialized, live context of the current scope
            operation: Tracker of the outbound operation
            node_id: Target node; defaults to the parent's node
            extra_baggage: Entries added on top of the parent's baggage

        Raises:
            ContextNotInitializedError, ContextDisposedError: parent is not readable
        """
        return parent.create_child_context(
            node_id,
            operation_id=operation.operation_id,
            extra_baggage=extra_baggage,
        )
