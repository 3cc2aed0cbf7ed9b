from __future__ import annotations

"""
Selection Tree Renderer.

Converts the node arena into a visual ASCII tree with check markers, the
textual equivalent of the interactive selection view.
"""

from typing import List, Optional

from project2text.domain.tree_models import TreeState

CHECKED = "[x] "
UNCHECKED = "[ ] "

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def render_selection_tree(state: TreeState) -> List[str]:
    """
    Render every node with its selection marker.

    Uses standard ASCII connectors (├──, └──); directories carry a
    trailing '/'.

    Args:
        state: Tree arena to render.

    Returns:
        List[str]: Visual lines of the tree.
    """
    lines: List[str] = []
    _render_level(state, state.roots or [], lines, prefix="")
    return lines


def _render_level(state: TreeState, keys: Optional[List[str]], lines: List[str], prefix: str) -> None:
    entries = [state.nodes[k] for k in (keys or []) if k in state.nodes]
    total = len(entries)

    for i, node in enumerate(entries):
        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "
        marker = CHECKED if node.selected else UNCHECKED
        label = f"{node.name}/" if node.is_dir else node.name

        lines.append(f"{prefix}{connector}{marker}{label}")

        if node.is_dir:
            new_prefix = prefix + ("    " if is_last else "│   ")
            _render_level(state, node.children, lines, new_prefix)
