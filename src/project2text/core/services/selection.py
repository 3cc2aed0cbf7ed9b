from __future__ import annotations

"""
Selection State Service.

Owns the current selection tree and applies the user-facing operations:
rebuild, toggle with downward propagation, select-all/none and selected-file
collection. Observers are notified after every mutation with either
whole-tree or subtree granularity.
"""

import logging
from typing import Callable, Iterable, List, Optional, Sequence

from project2text.core.analysis.tree_generator import (
    Classifier,
    apply_default_selection,
    build_tree,
    iter_subtree,
    iter_tree,
)
from project2text.core.pipeline.components.filters import PathMatcher, normalize_rel_path
from project2text.domain.constants import DEFAULT_MAX_WORKERS
from project2text.domain.errors import MalformedPatternError
from project2text.domain.tree_models import Node, NodeKind, TreeChange, TreeState

logger = logging.getLogger(__name__)

ChangeListener = Callable[[TreeChange], None]


class SelectionEngine:
    """
    Single-writer owner of one TreeState.

    The tree is never patched in place on configuration changes: `rebuild`
    computes a fresh state and swaps it in only after it is complete, so a
    failed rebuild leaves the previous tree untouched.
    """

    def __init__(
            self,
            include: Optional[Sequence[str]] = None,
            exclude: Optional[Sequence[str]] = None,
            case_sensitive: bool = True,
            max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self._include: List[str] = list(include or [])
        self._exclude: List[str] = list(exclude or [])
        self._case_sensitive = case_sensitive
        self._max_workers = max_workers
        self._state = TreeState()
        self._listeners: List[ChangeListener] = []

    # -------------------------------------------------------------------------
    # STATE ACCESS
    # -------------------------------------------------------------------------

    @property
    def state(self) -> TreeState:
        return self._state

    @property
    def generation(self) -> int:
        return self._state.generation

    @property
    def roots(self) -> List[Node]:
        return [self._state.nodes[k] for k in self._state.roots if k in self._state.nodes]

    def get_node(self, rel_path: str) -> Node:
        """
        Look up a node of the current tree.

        Raises:
            KeyError: If the path is not part of the current tree.
        """
        return self._state.nodes[normalize_rel_path(rel_path)]

    def children_of(self, rel_path: Optional[str] = None) -> List[Node]:
        """Return the ordered children of a node, or the roots when None."""
        if rel_path is None:
            return self.roots
        keys = self.get_node(rel_path).children or []
        return [self._state.nodes[k] for k in keys if k in self._state.nodes]

    # -------------------------------------------------------------------------
    # OBSERVERS
    # -------------------------------------------------------------------------

    def subscribe(self, listener: ChangeListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, rel_path: Optional[str] = None) -> None:
        change = TreeChange(generation=self._state.generation, rel_path=rel_path)
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception as e:
                logger.error(f"Tree change listener failed: {e}", exc_info=True)

    # -------------------------------------------------------------------------
    # BUILD
    # -------------------------------------------------------------------------

    def configure(
            self,
            include: Optional[Sequence[str]] = None,
            exclude: Optional[Sequence[str]] = None,
            case_sensitive: Optional[bool] = None,
    ) -> None:
        """Replace the pattern configuration used by the next rebuild."""
        if include is not None:
            self._include = list(include)
        if exclude is not None:
            self._exclude = list(exclude)
        if case_sensitive is not None:
            self._case_sensitive = case_sensitive

    def matcher(self) -> PathMatcher:
        """
        Compile the current pattern configuration.

        Raises:
            MalformedPatternError: If a pattern has unbalanced braces.
        """
        return PathMatcher.from_patterns(self._include, self._exclude, self._case_sensitive)

    def build(self, paths: Iterable[str], classify: Optional[Classifier] = None) -> TreeState:
        """
        Rebuild the tree from candidate paths with default selection applied.

        Args:
            paths: All candidate relative paths.
            classify: Optional file/directory metadata lookup.

        Returns:
            TreeState: The new current state.

        Raises:
            MalformedPatternError: If a pattern has unbalanced braces; the
                                   previous tree is kept.
        """
        matcher = self.matcher()
        state = build_tree(
            paths,
            matcher=matcher,
            classify=classify,
            max_workers=self._max_workers,
            generation=self._state.generation + 1,
        )
        self._state = state
        logger.info(
            f"Selection tree rebuilt (generation {state.generation}): "
            f"{len(self.get_selected_files())} of {self._count_files()} files selected"
        )
        self._notify()
        return state

    def rebuild(
            self,
            paths: Iterable[str],
            include: Optional[Sequence[str]] = None,
            exclude: Optional[Sequence[str]] = None,
            classify: Optional[Classifier] = None,
    ) -> TreeState:
        """
        Apply a new pattern configuration and rebuild in one step.

        Raises:
            MalformedPatternError: If a new pattern has unbalanced braces; the
                                   previous tree and patterns are kept.
        """
        previous = (self._include, self._exclude)
        self.configure(include=include, exclude=exclude)
        try:
            return self.build(paths, classify=classify)
        except MalformedPatternError:
            self._include, self._exclude = previous
            raise

    def apply_default_selection(self) -> None:
        """Re-derive selection from the patterns, discarding toggles."""
        apply_default_selection(self._state, self.matcher())
        self._notify()

    # -------------------------------------------------------------------------
    # SELECTION OPERATIONS
    # -------------------------------------------------------------------------

    def toggle(self, rel_path: str) -> bool:
        """
        Flip a node and write the new value to every descendant.

        Ancestors are never modified.

        Args:
            rel_path: Key of a node in the current tree.

        Returns:
            bool: The node's new selection value.

        Raises:
            KeyError: If the path is not part of the current tree.
        """
        node = self.get_node(rel_path)
        new_value = not node.selected
        for item in iter_subtree(self._state, node.rel_path):
            item.selected = new_value
        logger.debug(f"Toggled {node.rel_path} -> {new_value}")
        self._notify(node.rel_path)
        return new_value

    def select_all(self) -> None:
        self._set_all(True)

    def select_none(self) -> None:
        self._set_all(False)

    def _set_all(self, value: bool) -> None:
        for node in iter_tree(self._state):
            node.selected = value
        self._notify()

    def get_selected_files(self) -> List[str]:
        """
        Collect selected file paths in tree order.

        Directory flags are ignored; only file nodes are reported.

        Returns:
            List[str]: Relative paths of selected files.
        """
        return [
            node.rel_path
            for node in iter_tree(self._state)
            if node.kind is NodeKind.FILE and node.selected
        ]

    def _count_files(self) -> int:
        return sum(1 for n in self._state.nodes.values() if n.kind is NodeKind.FILE)
