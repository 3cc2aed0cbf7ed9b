from __future__ import annotations

"""
Pipeline Domain Data Models.

Defines the result structure and factory functions used to communicate
execution results between the pipeline engine and the CLI.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from project2text.domain.document_models import ContentReadFailure

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class PipelineResult:
    """
    Unified result object of a complete pipeline execution.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        root_path: Normalized project root processed.
        output_path: File the document was written to (empty when not written).
        document: The generated document text.
        selected_files: Relative paths rendered into the document.
        read_errors: Files replaced by inline error notices.
        tree_lines: Rendered selection tree.
        token_count: Estimated token density of the document.
        summary: Technical execution summary and statistics.
    """
    ok: bool
    error: str

    root_path: str
    output_path: str = ""

    document: str = ""
    selected_files: List[str] = field(default_factory=list)
    read_errors: List[ContentReadFailure] = field(default_factory=list)
    tree_lines: List[str] = field(default_factory=list)

    token_count: int = 0

    summary: Dict[str, Any] = field(default_factory=dict)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        root_path: str,
        summary_extra: Optional[Dict[str, Any]] = None
) -> PipelineResult:
    """
    Create a failed pipeline result instance.

    Args:
        error: Detailed error description.
        root_path: The target project root.
        summary_extra: Additional metadata for the summary payload.

    Returns:
        PipelineResult: An immutable error result object.
    """
    return PipelineResult(
        ok=False,
        error=error,
        root_path=root_path,
        summary=summary_extra or {},
    )


def create_success_result(
        root_path: str,
        document: str,
        selected_files: List[str],
        read_errors: Optional[List[ContentReadFailure]] = None,
        output_path: str = "",
        tree_lines: Optional[List[str]] = None,
        token_count: int = 0,
        summary_extra: Optional[Dict[str, Any]] = None
) -> PipelineResult:
    """
    Create a successful pipeline result instance.

    Args:
        root_path: Normalized project root.
        document: Generated document text.
        selected_files: Files rendered into the document.
        read_errors: Recovered read failures.
        output_path: Destination file, if the document was persisted.
        tree_lines: Rendered selection tree.
        token_count: Final token count metrics.
        summary_extra: Final execution metrics.

    Returns:
        PipelineResult: An immutable success result object.
    """
    return PipelineResult(
        ok=True,
        error="",
        root_path=root_path,
        output_path=output_path,
        document=document,
        selected_files=list(selected_files),
        read_errors=list(read_errors or []),
        tree_lines=list(tree_lines or []),
        token_count=token_count,
        summary=summary_extra or {},
    )
