from __future__ import annotations

"""
Document Output Component.

Handles the physical persistence of the generated document.
"""

import logging
import os

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# FILE OUTPUT MANAGEMENT
# -----------------------------------------------------------------------------

def write_document(output_path: str, text: str) -> str:
    """
    Write the document to disk, creating parent directories as needed.

    Args:
        output_path: Target file.
        text: Document content.

    Returns:
        str: Absolute path of the written file.

    Raises:
        OSError: If the directory or file cannot be written.
    """
    target = os.path.abspath(output_path)
    os.makedirs(os.path.dirname(target), exist_ok=True)

    with open(target, "w", encoding="utf-8", newline="\n") as out:
        out.write(text)

    logger.info(f"Document written to: {target}")
    return target
