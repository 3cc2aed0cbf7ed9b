from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for candidate path lists, on-disk projects and
   configuration dictionaries used across unit and integration tests.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def sample_paths() -> List[str]:
    """
    Return a small, deliberately unordered candidate path list.

    Mixes separators and nesting depths so that tree builds exercise
    normalization and sorting.
    """
    return [
        "src/utils/strings.ts",
        "README.md",
        "src\\index.ts",
        "src/components/Button.tsx",
        "node_modules/lib/index.js",
        "docs/guide.md",
        "src/components/Alpha.tsx",
        "package.json",
    ]


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Create a small project on disk for scanner, pipeline and CLI tests."""
    root = tmp_path / "demo"
    root.mkdir()

    (root / "src").mkdir()
    (root / "src" / "lib").mkdir()
    (root / "node_modules").mkdir()
    (root / "node_modules" / "dep").mkdir()
    (root / ".git").mkdir()
    (root / "empty").mkdir()

    (root / "src" / "app.ts").write_text("export const app = 1;   \r\n", encoding="utf-8")
    (root / "src" / "lib" / "util.js").write_text("module.exports = {};\n", encoding="utf-8")
    (root / "README.md").write_text("# Demo\n", encoding="utf-8")
    (root / "node_modules" / "dep" / "index.js").write_text("// dep\n", encoding="utf-8")
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")

    return root


@pytest.fixture
def mock_config_dict(project_dir: Path) -> Dict[str, Any]:
    """
    Return a valid, complete configuration dictionary for testing.

    Reflects the structure defined in 'project2text.domain.config'.
    """
    return {
        "root_path": str(project_dir),
        "output_path": "",
        "include_patterns": ["**/*"],
        "exclude_patterns": ["**/node_modules/**", "**/.git/**"],
        "respect_gitignore": True,
        "case_sensitive": True,
        "skip_dirs": [".git"],
        "max_workers": 4,
        "fence_code_blocks": True,
        "target_model": "- Default Model -",
    }
