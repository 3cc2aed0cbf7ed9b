from __future__ import annotations

"""
Path Discovery and Metadata Service.

Filesystem-backed implementations of the collaborators consumed by the
selection engine: enumerating candidate paths under a project root,
classifying a path as file or directory, and binding a content reader to
the root.
"""

import logging
import os
import stat
from typing import Callable, List, Optional, Sequence

from project2text.core.pipeline.components.filters import PathMatcher, normalize_rel_path
from project2text.core.pipeline.components.reader import read_text
from project2text.domain.constants import DEFAULT_SKIP_DIRS
from project2text.domain.tree_models import NodeKind

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API (DISCOVERY SERVICES)
# ==============================================================================

def find_all_paths(root_path: str, skip_dirs: Optional[Sequence[str]] = None) -> List[str]:
    """
    Enumerate every file (and empty directory) under the project root.

    Directories named in `skip_dirs` are pruned from the walk. A missing or
    invalid root yields an empty list instead of an error.

    Args:
        root_path: Project root directory.
        skip_dirs: Directory names never descended into.

    Returns:
        List[str]: Sorted slash-normalized relative paths.
    """
    if not root_path or not os.path.isdir(root_path):
        logger.warning(f"Discovery skipped: project root not found ({root_path!r}).")
        return []

    root_abs = os.path.abspath(root_path)
    skipped = set(DEFAULT_SKIP_DIRS if skip_dirs is None else skip_dirs)
    found: List[str] = []

    def _on_error(err: OSError) -> None:
        logger.warning(f"Discovery error: {err}")

    for root, dirs, files in os.walk(root_abs, onerror=_on_error):
        # In-place pruning keeps os.walk from descending into skipped folders
        dirs[:] = sorted(d for d in dirs if d not in skipped)
        rel_root = os.path.relpath(root, root_abs)

        if rel_root != "." and not dirs and not files:
            found.append(normalize_rel_path(rel_root))
            continue

        for file_name in sorted(files):
            rel = file_name if rel_root == "." else os.path.join(rel_root, file_name)
            found.append(normalize_rel_path(rel))

    logger.debug(f"Discovered {len(found)} paths under {root_abs}")
    return sorted(found)


def find_paths(
        root_path: str,
        include: Optional[Sequence[str]],
        exclude: Optional[Sequence[str]],
        case_sensitive: bool = True,
        skip_dirs: Optional[Sequence[str]] = None,
) -> List[str]:
    """
    Enumerate only the files selected by the include/exclude globs.

    Raises:
        MalformedPatternError: If a pattern has unbalanced braces.
    """
    matcher = PathMatcher.from_patterns(include, exclude, case_sensitive)
    return [
        p for p in find_all_paths(root_path, skip_dirs)
        if matcher.matches(p) and os.path.isfile(os.path.join(root_path, p))
    ]


def classify_path(root_path: str, rel_path: str) -> NodeKind:
    """
    Classify a relative path using filesystem metadata.

    Raises:
        OSError: If the path cannot be inspected.
    """
    mode = os.stat(os.path.join(root_path, rel_path)).st_mode
    return NodeKind.DIRECTORY if stat.S_ISDIR(mode) else NodeKind.FILE


def make_classifier(root_path: str) -> Callable[[str], NodeKind]:
    """Bind `classify_path` to a project root."""
    def _classify(rel_path: str) -> NodeKind:
        return classify_path(root_path, rel_path)
    return _classify


def make_content_provider(root_path: str) -> Callable[[str], str]:
    """Bind the text reader to a project root."""
    def _provider(rel_path: str) -> str:
        return read_text(os.path.join(root_path, rel_path))
    return _provider
