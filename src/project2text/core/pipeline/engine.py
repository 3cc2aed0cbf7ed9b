from __future__ import annotations

"""
Core orchestration pipeline.

Coordinates one end-to-end generation:
1. Validates configuration and the project root.
2. Resolves the pattern sets (including .gitignore rules).
3. Discovers candidate paths and builds the selection tree.
4. Applies bulk selection and individual toggles.
5. Renders the document and computes token metrics.
6. Optionally persists the document.
"""

import logging
import os
from typing import Any, Dict, List, Optional, Sequence

from project2text.core.analysis.tree_renderer import render_selection_tree
from project2text.core.pipeline.components.filters import load_gitignore_patterns
from project2text.core.pipeline.components.writer import write_document
from project2text.core.pipeline.stages.assembler import render_document
from project2text.core.pipeline.stages.validator import validate_config
from project2text.core.processing.tokenizer import count_tokens
from project2text.core.services.scanner import (
    find_all_paths,
    find_paths,
    make_classifier,
    make_content_provider,
)
from project2text.core.services.selection import SelectionEngine
from project2text.domain.errors import MalformedPatternError
from project2text.domain.pipeline_models import (
    PipelineResult,
    create_error_result,
    create_success_result,
)
from project2text.infra.fs import normalize_path, root_display_name

logger = logging.getLogger(__name__)

SELECT_MODES = ("all", "none")


def run_pipeline(
        config: Optional[Dict[str, Any]],
        *,
        select: Optional[str] = None,
        toggles: Sequence[str] = (),
        quick: bool = False,
        output_path: Optional[str] = None,
) -> PipelineResult:
    """
    Execute a full generation for one project root.

    Args:
        config: The configuration dictionary (raw or partial).
        select: Bulk selection applied after the default selection
                ('all' or 'none').
        toggles: Relative paths toggled, in order, after bulk selection.
        quick: Skip the selection tree and render the pattern matches directly.
        output_path: Destination file; overrides the configured one.

    Returns:
        PipelineResult: Object containing status, document and summary.
    """
    logger.info("Pipeline execution started.")

    # -------------------------------------------------------------------------
    # 1) Config & Root Normalization
    # -------------------------------------------------------------------------
    cfg, warnings = validate_config(config, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    root_path = normalize_path(cfg.get("root_path", ""), os.getcwd())
    if not os.path.isdir(root_path):
        msg = f"Invalid project root: {root_path}"
        logger.error(msg)
        return create_error_result(msg, root_path)

    if select is not None and select not in SELECT_MODES:
        return create_error_result(f"Unknown selection mode: {select!r}", root_path)

    # -------------------------------------------------------------------------
    # 2) Pattern Resolution
    # -------------------------------------------------------------------------
    include = list(cfg["include_patterns"])
    exclude = list(cfg["exclude_patterns"])
    if cfg["respect_gitignore"]:
        git_patterns = load_gitignore_patterns(root_path)
        if git_patterns:
            logger.debug(f"Loaded {len(git_patterns)} patterns from .gitignore")
            exclude.extend(git_patterns)

    # -------------------------------------------------------------------------
    # 3) Selection
    # -------------------------------------------------------------------------
    tree_lines: List[str] = []
    missing_toggles: List[str] = []
    candidate_count = 0

    try:
        if quick:
            selected = find_paths(
                root_path, include, exclude,
                case_sensitive=cfg["case_sensitive"],
                skip_dirs=cfg["skip_dirs"],
            )
            candidate_count = len(selected)
        else:
            engine = SelectionEngine(
                include=include,
                exclude=exclude,
                case_sensitive=cfg["case_sensitive"],
                max_workers=cfg["max_workers"],
            )
            all_paths = find_all_paths(root_path, cfg["skip_dirs"])
            candidate_count = len(all_paths)
            engine.build(all_paths, classify=make_classifier(root_path))

            if select == "all":
                engine.select_all()
            elif select == "none":
                engine.select_none()

            for rel_path in toggles:
                try:
                    engine.toggle(rel_path)
                except KeyError:
                    logger.warning(f"Toggle ignored, path not in tree: {rel_path}")
                    missing_toggles.append(rel_path)

            selected = engine.get_selected_files()
            tree_lines = render_selection_tree(engine.state)
    except MalformedPatternError as e:
        logger.error(str(e))
        return create_error_result(str(e), root_path)

    # -------------------------------------------------------------------------
    # 4) Rendering & Metrics
    # -------------------------------------------------------------------------
    rendered = render_document(
        selected,
        make_content_provider(root_path),
        root_display_name(root_path),
        fence_code_blocks=cfg["fence_code_blocks"],
    )
    token_count = count_tokens(rendered.text, model=cfg["target_model"])
    logger.info(f"Estimated token count ({cfg['target_model']}): {token_count}")

    # -------------------------------------------------------------------------
    # 5) Persistence
    # -------------------------------------------------------------------------
    destination = output_path if output_path is not None else cfg["output_path"]
    written_path = ""
    if destination:
        try:
            written_path = write_document(normalize_path(destination, root_path), rendered.text)
        except OSError as e:
            msg = f"Failed to write document to '{destination}': {e}"
            logger.error(msg)
            return create_error_result(msg, root_path)

    summary = {
        "candidates": candidate_count,
        "selected": len(rendered.files),
        "read_errors": len(rendered.errors),
        "missing_toggles": missing_toggles,
        "quick": quick,
        "token_count": token_count,
        "output_path": written_path,
    }

    logger.info("Pipeline execution finalized successfully.")
    return create_success_result(
        root_path=root_path,
        document=rendered.text,
        selected_files=rendered.files,
        read_errors=rendered.errors,
        output_path=written_path,
        tree_lines=tree_lines,
        token_count=token_count,
        summary_extra=summary,
    )
