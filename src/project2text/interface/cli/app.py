from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging initialization, merging of
configuration sources (defaults, optional config file and CLI overrides),
pipeline execution and result rendering.
"""

import json
import os
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional, TextIO

from project2text.core.pipeline.engine import run_pipeline
from project2text.core.pipeline.stages.validator import validate_config
from project2text.domain.config import CONFIG_KEYS, get_default_config, load_config_file
from project2text.domain.pipeline_models import PipelineResult
from project2text.infra.fs import normalize_path
from project2text.infra.logging import LoggingConfig, configure_logging, get_logger
from project2text.interface.cli import args as cli_args

logger = get_logger(__name__)

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 failure, 2 invalid root,
             130 interrupted).
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (console on stderr, stdout is reserved for output)
    log_level = "DEBUG" if args.debug else "INFO"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=args.log_file))

    logger.debug("CLI execution initiated. Resolving configuration hierarchy...")

    # 3. Resolve base configuration (defaults vs config file)
    if args.config_file:
        base_conf = load_config_file(args.config_file)
    else:
        base_conf = get_default_config()

    # 4. Merge command-line overrides and validate
    overrides = cli_args.args_to_overrides(args)
    raw_conf = _merge_config(base_conf, overrides)
    clean_conf, warnings = validate_config(raw_conf, strict=False)

    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    root_path = normalize_path(clean_conf.get("root_path", ""), os.getcwd())
    clean_conf["root_path"] = root_path

    if args.dump_config:
        print(json.dumps(clean_conf, ensure_ascii=False, indent=2))
        return 0

    # 5. Pre-flight root verification
    if not os.path.isdir(root_path):
        msg = f"Project root does not exist: {root_path}"
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return 2

    # 6. Pipeline execution phase
    try:
        result = run_pipeline(
            clean_conf,
            select=cli_args.selection_mode(args),
            toggles=args.toggles,
            quick=bool(args.quick),
        )
    except KeyboardInterrupt:
        logger.warning("Operation interrupted by user.")
        return 130
    except Exception as e:
        logger.critical(f"Pipeline failed: {e}", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    # 7. Output rendering phase
    if not result.ok:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return 1

    document_on_stdout = not result.output_path and not args.json_output
    side_channel = sys.stderr if document_on_stdout else sys.stdout

    if args.print_tree and result.tree_lines:
        print("\n".join(result.tree_lines), file=side_channel)

    if args.json_output:
        print(json.dumps(_result_payload(result), ensure_ascii=False, indent=2))
    elif document_on_stdout:
        sys.stdout.write(result.document)
    else:
        _print_human_summary(result, side_channel)

    return 0

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow merge of override values into the base configuration.

    Only known keys with non-None values are merged.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    for k in CONFIG_KEYS:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _result_payload(result: PipelineResult) -> Dict[str, Any]:
    """Summary dictionary for --json output (the document itself is omitted)."""
    return {
        "ok": result.ok,
        "error": result.error,
        "root_path": result.root_path,
        "output_path": result.output_path,
        "selected_files": list(result.selected_files),
        "read_errors": [asdict(e) for e in result.read_errors],
        "token_count": result.token_count,
        "summary": result.summary,
    }


def _print_human_summary(result: PipelineResult, stream: TextIO) -> None:
    """
    Print the execution result as a short report.

    Args:
        result: The pipeline result to render.
        stream: Destination stream.
    """
    summary = result.summary
    print("Document generated successfully.", file=stream)
    print(f"Output file: {result.output_path}", file=stream)
    print(f"Files selected: {summary.get('selected', 0)} of {summary.get('candidates', 0)}", file=stream)

    if result.token_count > 0:
        print(f"Estimated Token Density: {result.token_count:,}", file=stream)

    if result.read_errors:
        print("Unreadable files:", file=stream)
        for err in result.read_errors:
            print(f"  - {err.rel_path}: {err.error}", file=stream)

    for missing in summary.get("missing_toggles", []):
        print(f"Toggle ignored (not in tree): {missing}", file=stream)

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
