from __future__ import annotations

"""
Resilient File Reading Component.

Reads selected files as text. Undecodable byte sequences are replaced
instead of failing, so only genuine I/O errors reach the serializer.
"""

from typing import Iterator

# -----------------------------------------------------------------------------
# READING OPERATIONS
# -----------------------------------------------------------------------------

def stream_file_content(file_path: str) -> Iterator[str]:
    """
    Generate a line-by-line stream of file content.

    Implements the 'replace' error handling strategy to substitute
    unrecognized byte sequences with placeholder characters.

    Args:
        file_path: Absolute path to the target file.

    Yields:
        str: Lines from the file, newline characters preserved.
    """
    with open(file_path, "r", encoding="utf-8", errors="replace", newline="") as f:
        for line in f:
            yield line


def read_text(file_path: str) -> str:
    """
    Read a whole file as text.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    return "".join(stream_file_content(file_path))
