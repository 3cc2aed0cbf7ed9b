from __future__ import annotations

"""
Selection Tree Data Models.

Defines the arena-style structures used by the selection engine. Nodes are
addressed by their slash-normalized relative path, and directories reference
their children by key instead of holding live object references.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

class NodeKind(Enum):
    """Classification of a path segment in the project hierarchy."""
    FILE = "file"
    DIRECTORY = "directory"


@dataclass
class Node:
    """
    One path segment of the project hierarchy.

    Attributes:
        name: Display name of the segment (no separators).
        rel_path: Full slash-normalized path from the project root; unique key.
        kind: File or directory.
        selected: Inclusion flag. Authoritative for files, advisory for directories.
        children: Ordered child keys for directories; None for files.
    """
    name: str
    rel_path: str
    kind: NodeKind
    selected: bool = False
    children: Optional[List[str]] = None

    @property
    def is_dir(self) -> bool:
        return self.kind is NodeKind.DIRECTORY


@dataclass
class TreeState:
    """
    Owned snapshot of a built tree.

    Replaced wholesale on every rebuild; `generation` lets collaborators
    detect that a node key they hold belongs to an older tree.

    Attributes:
        nodes: Arena of nodes keyed by relative path.
        roots: Ordered keys of root-level nodes.
        generation: Monotonic build counter.
    """
    nodes: Dict[str, Node] = field(default_factory=dict)
    roots: List[str] = field(default_factory=list)
    generation: int = 0

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, rel_path: object) -> bool:
        return rel_path in self.nodes


@dataclass(frozen=True)
class TreeChange:
    """
    Change notification payload.

    Attributes:
        generation: Generation of the tree the change applies to.
        rel_path: Key of the node whose subtree changed, or None when the
                  whole tree changed.
    """
    generation: int
    rel_path: Optional[str] = None

    @property
    def whole_tree(self) -> bool:
        return self.rel_path is None
