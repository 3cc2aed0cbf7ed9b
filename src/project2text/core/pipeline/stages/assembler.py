from __future__ import annotations

"""
Document Assembler Stage.

Renders the final text document from a list of selected files:
1. Fixed preamble naming the project.
2. Directory listing built from the sorted paths.
3. One delimited (and optionally fenced) content block per file.

A file that cannot be read is replaced by an inline notice; rendering
always completes.
"""

import logging
import os
import re
from typing import Callable, Iterable, List, Optional

from project2text.core.pipeline.components.filters import normalize_rel_path, split_rel_path
from project2text.domain.constants import (
    CONTENTS_HEADER,
    EXTENSION_LANGUAGES,
    FILE_BEGIN_MARKER,
    FILE_END_MARKER,
    PREAMBLE_TEXT,
    PREAMBLE_TITLE,
    READ_ERROR_NOTICE,
    STRUCTURE_HEADER,
)
from project2text.domain.document_models import ContentReadFailure, RenderResult

logger = logging.getLogger(__name__)

ContentProvider = Callable[[str], str]

_BACKTICK_RUN = re.compile(r"`+")


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def generate(
        selected_paths: Iterable[str],
        content_provider: ContentProvider,
        root_name: Optional[str],
        fence_code_blocks: bool = True,
) -> str:
    """
    Produce the structured text document for the selected files.

    Args:
        selected_paths: Relative paths of the files to include.
        content_provider: Returns the text of a relative path; may raise OSError.
        root_name: Display name of the project root; None short-circuits to ''.
        fence_code_blocks: Wrap contents in Markdown code fences.

    Returns:
        str: The rendered document.
    """
    return render_document(selected_paths, content_provider, root_name, fence_code_blocks).text


def render_document(
        selected_paths: Iterable[str],
        content_provider: ContentProvider,
        root_name: Optional[str],
        fence_code_blocks: bool = True,
) -> RenderResult:
    """
    Render the document and report which files failed to read.

    Args:
        selected_paths: Relative paths of the files to include.
        content_provider: Returns the text of a relative path; may raise OSError.
        root_name: Display name of the project root; None short-circuits.
        fence_code_blocks: Wrap contents in Markdown code fences.

    Returns:
        RenderResult: Document text, rendered paths and read failures.
    """
    if root_name is None:
        logger.debug("No project root available; rendering empty document.")
        return RenderResult(text="")

    paths = sorted({normalize_rel_path(p) for p in selected_paths} - {""})

    sections: List[str] = [
        PREAMBLE_TITLE.format(root=root_name),
        "",
        PREAMBLE_TEXT,
        "",
        STRUCTURE_HEADER,
    ]
    sections.extend(render_listing(paths))
    sections.extend(["", CONTENTS_HEADER, ""])

    errors: List[ContentReadFailure] = []
    for rel_path in paths:
        block, failure = _render_block(rel_path, content_provider, fence_code_blocks)
        sections.extend(block)
        sections.append("")
        if failure:
            errors.append(failure)

    if errors:
        logger.warning(f"{len(errors)} of {len(paths)} files could not be read.")

    return RenderResult(text="\n".join(sections), files=paths, errors=errors)


def render_listing(sorted_paths: List[str]) -> List[str]:
    """
    Build the indented directory listing.

    Each unique directory prefix is printed once, the first time a path
    beneath it is visited.

    Args:
        sorted_paths: Lexicographically sorted relative paths.

    Returns:
        List[str]: Listing lines ('* dir/' and '* file' entries).
    """
    lines: List[str] = []
    printed_dirs = set()

    for rel_path in sorted_paths:
        segments = split_rel_path(rel_path)
        cumulative = ""
        last = len(segments) - 1
        for depth, segment in enumerate(segments):
            cumulative = f"{cumulative}/{segment}" if cumulative else segment
            indent = "  " * depth
            if depth < last:
                if cumulative in printed_dirs:
                    continue
                printed_dirs.add(cumulative)
                lines.append(f"{indent}* {segment}/")
            else:
                lines.append(f"{indent}* {segment}")

    return lines


def normalize_content(text: str) -> str:
    """
    Normalize line endings and strip trailing horizontal whitespace.

    Trailing blank lines are removed so that the closing marker follows the
    last line of content directly.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = [line.rstrip(" \t") for line in text.split("\n")]
    return "\n".join(lines).rstrip("\n")


def language_for(rel_path: str) -> str:
    """Return the fence language tag of a path, or '' when unmapped."""
    _, ext = os.path.splitext(rel_path)
    return EXTENSION_LANGUAGES.get(ext.lower(), "")

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _render_block(
        rel_path: str,
        content_provider: ContentProvider,
        fence_code_blocks: bool,
):
    """Render one file block; returns (lines, failure or None)."""
    lines = [FILE_BEGIN_MARKER.format(path=rel_path)]

    try:
        content = normalize_content(content_provider(rel_path))
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to read {rel_path}: {e}")
        lines.append(READ_ERROR_NOTICE.format(path=rel_path, error=e))
        lines.append(FILE_END_MARKER.format(path=rel_path))
        return lines, ContentReadFailure(rel_path=rel_path, error=str(e))

    if fence_code_blocks:
        fence = _fence_for(content)
        lines.append(f"{fence}{language_for(rel_path)}")
        if content:
            lines.append(content)
        lines.append(fence)
    elif content:
        lines.append(content)

    lines.append(FILE_END_MARKER.format(path=rel_path))
    return lines, None


def _fence_for(content: str) -> str:
    """Pick a backtick fence longer than any run inside the content."""
    longest = max((len(m.group(0)) for m in _BACKTICK_RUN.finditer(content)), default=0)
    return "`" * max(3, longest + 1)
