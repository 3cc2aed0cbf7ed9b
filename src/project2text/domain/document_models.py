from __future__ import annotations

"""
Document Domain Data Models.

Data Transfer Objects describing the output of the serializer and the
per-file read failures recovered while rendering.
"""

from dataclasses import dataclass, field
from typing import List

# -----------------------------------------------------------------------------
# ERROR TRACKING MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ContentReadFailure:
    """
    A selected file whose content could not be read.

    Attributes:
        rel_path: File path identifier relative to project root.
        error: Descriptive exception message.
    """
    rel_path: str
    error: str

# -----------------------------------------------------------------------------
# RENDERING RESULT
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class RenderResult:
    """
    Output of a document render.

    Attributes:
        text: The generated document.
        files: Relative paths rendered, in document order.
        errors: Read failures substituted by inline notices.
    """
    text: str
    files: List[str] = field(default_factory=list)
    errors: List[ContentReadFailure] = field(default_factory=list)

    @property
    def ok_count(self) -> int:
        return len(self.files) - len(self.errors)
