from __future__ import annotations

"""
Selection Tree Generator.

Constructs the hierarchical node arena from a flat list of relative paths.
Optional per-path classification (file vs. directory) is fanned out over a
bounded thread pool and joined before any node is inserted, so the final
shape only depends on the input path set.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from project2text.core.pipeline.components.filters import PathMatcher, split_rel_path
from project2text.domain.constants import DEFAULT_MAX_WORKERS
from project2text.domain.tree_models import Node, NodeKind, TreeState

logger = logging.getLogger(__name__)

Classifier = Callable[[str], NodeKind]

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_tree(
        paths: Iterable[str],
        matcher: Optional[PathMatcher] = None,
        classify: Optional[Classifier] = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
        generation: int = 0,
) -> TreeState:
    """
    Build a sorted node arena from relative paths.

    Every non-terminal segment becomes a directory node (created once per
    cumulative path); the terminal segment becomes a file node unless the
    classifier reports a directory. Duplicate paths are no-ops. When a
    matcher is given, file nodes get their default selection from it and
    directory nodes start unselected.

    Args:
        paths: Relative paths, '/' or '\\' separated.
        matcher: Compiled include/exclude sets for default selection.
        classify: Optional metadata lookup; failures default to file.
        max_workers: Upper bound of concurrent classification calls.
        generation: Generation stamp of the resulting state.

    Returns:
        TreeState: The built and sorted tree.
    """
    segment_lists: Dict[str, List[str]] = {}
    for raw in paths:
        segments = split_rel_path(raw)
        if not segments:
            logger.debug(f"Skipping empty path entry: {raw!r}")
            continue
        segment_lists.setdefault("/".join(segments), segments)

    kinds = _classify_all(list(segment_lists), classify, max_workers)

    state = TreeState(generation=generation)
    for rel_path, segments in segment_lists.items():
        _insert(state, segments, kinds.get(rel_path, NodeKind.FILE))

    sort_tree(state)

    if matcher is not None:
        apply_default_selection(state, matcher)

    logger.debug(
        f"Built tree generation {generation}: {len(state.nodes)} nodes, "
        f"{len(state.roots)} roots"
    )
    return state


def sort_tree(state: TreeState) -> None:
    """
    Order every children list: directories first, then files, by name.
    """
    state.roots.sort(key=lambda key: _sort_key(state, key))
    for node in state.nodes.values():
        if node.children:
            node.children.sort(key=lambda key: _sort_key(state, key))


def apply_default_selection(state: TreeState, matcher: PathMatcher) -> None:
    """
    Derive selection from patterns: files by match, directories False.
    """
    for node in state.nodes.values():
        node.selected = False if node.is_dir else matcher.matches(node.rel_path)


def iter_subtree(state: TreeState, rel_path: str) -> Iterator[Node]:
    """
    Yield a node and all of its descendants, depth-first pre-order.

    Directories whose children list was invalidated, or that reference keys
    missing from the arena, are walked as if those children did not exist.

    Args:
        state: Tree arena.
        rel_path: Key of the subtree root.

    Yields:
        Node: Nodes of the subtree.
    """
    stack = [rel_path]
    while stack:
        node = state.nodes.get(stack.pop())
        if node is None:
            continue
        yield node
        if node.children:
            stack.extend(reversed(node.children))


def iter_tree(state: TreeState) -> Iterator[Node]:
    """Yield every node reachable from the roots, depth-first pre-order."""
    for root in list(state.roots or []):
        yield from iter_subtree(state, root)

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _classify_all(
        rel_paths: List[str],
        classify: Optional[Classifier],
        max_workers: int,
) -> Dict[str, NodeKind]:
    """Fan out classification over a bounded pool and join all results."""
    if classify is None or not rel_paths:
        return {}

    kinds: Dict[str, NodeKind] = {}
    workers = max(1, min(int(max_workers), len(rel_paths)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ClassifyWorker") as executor:
        futures = {p: executor.submit(classify, p) for p in rel_paths}
        for rel_path, future in futures.items():
            try:
                kinds[rel_path] = NodeKind(future.result())
            except Exception as e:
                logger.debug(f"Classification failed for {rel_path}: {e}. Defaulting to file.")
                kinds[rel_path] = NodeKind.FILE

    return kinds


def _insert(state: TreeState, segments: List[str], terminal_kind: NodeKind) -> None:
    """Walk the segments, creating or reusing nodes along the way."""
    siblings = state.roots
    cumulative = ""
    last = len(segments) - 1

    for i, segment in enumerate(segments):
        cumulative = f"{cumulative}/{segment}" if cumulative else segment
        kind = terminal_kind if i == last else NodeKind.DIRECTORY
        node = state.nodes.get(cumulative)

        if node is None:
            node = Node(
                name=segment,
                rel_path=cumulative,
                kind=kind,
                children=[] if kind is NodeKind.DIRECTORY else None,
            )
            state.nodes[cumulative] = node
            siblings.append(cumulative)
        elif kind is NodeKind.DIRECTORY and not node.is_dir:
            # Path seen as a file earlier is also a prefix of another path
            node.kind = NodeKind.DIRECTORY
            node.children = []

        if node.children is not None:
            siblings = node.children


def _sort_key(state: TreeState, key: str):
    node = state.nodes.get(key)
    if node is None:
        return (2, key)
    return (0 if node.is_dir else 1, node.name)
