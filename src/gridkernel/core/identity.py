"""
Process-level node identity.

A NodeIdentity is established once at process startup (usually from the
[node] configuration table) and never mutated. Every GridContext created in
the process carries it.
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from gridkernel.constants import MAX_NODE_ID_LENGTH, MIN_NODE_ID_LENGTH

from .validation import require_text

NODE_ID_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def validate_node_id(value: str) -> Tuple[bool, Optional[str]]:
    """
    Check that a node id is kebab-case and of acceptable length.

    Returns:
        (is_valid, error_message)
    """
    if not isinstance(value, str) or not value.strip():
        return False, "Node ID cannot be empty"
    if not MIN_NODE_ID_LENGTH <= len(value) <= MAX_NODE_ID_LENGTH:
        return False, (
            f"Node ID must be between {MIN_NODE_ID_LENGTH} and "
            f"{MAX_NODE_ID_LENGTH} characters"
        )
    if not NODE_ID_PATTERN.match(value):
        return False, (
            "Node ID must be kebab-case: lowercase letters, digits and single "
            "hyphens, not starting or ending with a hyphen"
        )
    return True, None


@dataclass(frozen=True)
class NodeIdentity:
    """Immutable (node, studio, environment) triple for this process."""

    node_id: str
    studio_id: str
    environment: str

    def __post_init__(self):
        require_text(self.node_id, "node_id")
        require_text(self.studio_id, "studio_id")
        require_text(self.environment, "environment")

    def with_node(self, node_id: str) -> "NodeIdentity":
        """Same studio and environment, different node."""
        return NodeIdentity(node_id, self.studio_id, self.environment)
