from __future__ import annotations

"""
Configuration Domain Management.

Provides the default session configuration and the loader for optional JSON
configuration files. Values from the file are merged over the defaults; the
CLI merges its own overrides on top.
"""

import json
import logging
import os
from typing import Any, Dict

from project2text.domain.constants import (
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_INCLUDE_PATTERNS,
    DEFAULT_MAX_WORKERS,
    DEFAULT_MODEL_KEY,
    DEFAULT_SKIP_DIRS,
)

logger = logging.getLogger(__name__)

CONFIG_KEYS = (
    "root_path",
    "include_patterns",
    "exclude_patterns",
    "respect_gitignore",
    "case_sensitive",
    "skip_dirs",
    "max_workers",
    "fence_code_blocks",
    "output_path",
    "target_model",
)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # IO Paths
        "root_path": os.getcwd(),
        "output_path": "",

        # Selection
        "include_patterns": list(DEFAULT_INCLUDE_PATTERNS),
        "exclude_patterns": list(DEFAULT_EXCLUDE_PATTERNS),
        "respect_gitignore": True,
        "case_sensitive": True,

        # Discovery
        "skip_dirs": list(DEFAULT_SKIP_DIRS),
        "max_workers": DEFAULT_MAX_WORKERS,

        # Output Format
        "fence_code_blocks": True,
        "target_model": DEFAULT_MODEL_KEY,
    }


# -----------------------------------------------------------------------------
# File Loading
# -----------------------------------------------------------------------------
def load_config_file(path: str) -> Dict[str, Any]:
    """
    Load a JSON configuration file merged over the defaults.

    Unknown keys are dropped. A missing or corrupted file yields the defaults.

    Args:
        path: Path to the JSON file.

    Returns:
        Dict[str, Any]: The merged configuration.
    """
    config = get_default_config()

    if not path or not os.path.exists(path):
        logger.debug(f"Config file not found: {path!r}. Using defaults.")
        return config

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config '{path}': {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning(f"Corrupted config file '{path}'. Using defaults.")
        return config

    for key, value in data.items():
        if key in CONFIG_KEYS:
            config[key] = value
        else:
            logger.debug(f"Ignoring unknown config key '{key}'")

    return config
