from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line interface schema and translates the parsed
namespace into configuration overrides and selection actions.
"""

import argparse
from typing import Any, Dict, List, Optional

from project2text.core.pipeline.stages.validator import split_csv

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the project2text CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="project2text",
        description="Convert a selection of project files into one structured text document.",
    )

    # --- Path Management ---
    p.add_argument(
        "-i", "--input",
        dest="root_path",
        default=None,
        help="Project root directory (default: current directory).",
    )
    p.add_argument(
        "-o", "--output",
        dest="output_path",
        default=None,
        help="Write the document to this file instead of stdout.",
    )
    p.add_argument(
        "--config",
        dest="config_file",
        default=None,
        help="JSON configuration file merged over the defaults.",
    )

    # --- Pattern Selection ---
    p.add_argument(
        "--include",
        dest="include_patterns",
        default=None,
        help="Comma-separated include globs (brace groups allowed).",
    )
    p.add_argument(
        "--exclude",
        dest="exclude_patterns",
        default=None,
        help="Comma-separated exclude globs (brace groups allowed).",
    )
    p.add_argument(
        "--no-gitignore",
        action="store_true",
        help="Ignore local .gitignore rules.",
    )
    p.add_argument(
        "--ignore-case",
        action="store_true",
        help="Match globs case-insensitively.",
    )

    # --- Selection Actions ---
    bulk = p.add_mutually_exclusive_group()
    bulk.add_argument(
        "--select-all",
        action="store_true",
        help="Select every file before applying toggles.",
    )
    bulk.add_argument(
        "--select-none",
        action="store_true",
        help="Deselect every file before applying toggles.",
    )
    p.add_argument(
        "-t", "--toggle",
        dest="toggles",
        action="append",
        default=[],
        metavar="PATH",
        help="Toggle a file or directory (repeatable, applied in order).",
    )
    p.add_argument(
        "--quick",
        action="store_true",
        help="Render the pattern matches directly, without the selection tree.",
    )

    # --- Output Format ---
    p.add_argument(
        "--print-tree",
        action="store_true",
        help="Print the selection tree with check markers.",
    )
    p.add_argument(
        "--no-fence",
        action="store_true",
        help="Do not wrap file contents in code fences.",
    )
    p.add_argument(
        "--model",
        dest="target_model",
        default=None,
        help="Model identifier used for token estimation.",
    )
    p.add_argument(
        "--workers",
        dest="max_workers",
        type=int,
        default=None,
        help="Maximum concurrent metadata lookups while building the tree.",
    )

    # --- Configuration and Diagnostic Tools ---
    p.add_argument(
        "--dump-config",
        action="store_true",
        help="Print the effective configuration as JSON and exit.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print the execution summary as JSON.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write logs to this (rotating) file.",
    )

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset (None means unset).
    """
    overrides: Dict[str, Any] = {
        "root_path": args.root_path,
        "output_path": args.output_path,
        "target_model": args.target_model,
        "max_workers": args.max_workers,
    }

    if args.include_patterns is not None:
        overrides["include_patterns"] = _split_csv(args.include_patterns)
    if args.exclude_patterns is not None:
        overrides["exclude_patterns"] = _split_csv(args.exclude_patterns)
    if args.no_gitignore:
        overrides["respect_gitignore"] = False
    if args.ignore_case:
        overrides["case_sensitive"] = False
    if args.no_fence:
        overrides["fence_code_blocks"] = False

    return overrides


def selection_mode(args: argparse.Namespace) -> Optional[str]:
    """Map the bulk selection flags to the pipeline's selection mode."""
    if args.select_all:
        return "all"
    if args.select_none:
        return "none"
    return None

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """
    Convert a comma-separated string into a list of sanitized patterns.
    """
    if value is None:
        return None
    parts = [x.strip() for x in split_csv(value)]
    return [x for x in parts if x]
