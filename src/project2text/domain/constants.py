from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Centralizes the default pattern sets, the document layout markers and the
extension-to-language lookup used when fencing file contents.
"""

from typing import Dict, List

# -----------------------------------------------------------------------------
# PATTERN DEFAULTS
# -----------------------------------------------------------------------------

DEFAULT_INCLUDE_PATTERNS: List[str] = ["**/*"]
DEFAULT_EXCLUDE_PATTERNS: List[str] = ["**/node_modules/**", "**/.git/**"]

# Directories never descended into during discovery
DEFAULT_SKIP_DIRS: List[str] = [".git"]

DEFAULT_MAX_WORKERS = 8
DEFAULT_MODEL_KEY = "- Default Model -"

# -----------------------------------------------------------------------------
# DOCUMENT LAYOUT
# -----------------------------------------------------------------------------

PREAMBLE_TITLE = "# Project Context: {root}"
PREAMBLE_TEXT = (
    "This document contains the directory structure of the selected project "
    "files followed by the contents of each file."
)
STRUCTURE_HEADER = "## Project File Structure:"
CONTENTS_HEADER = "## File Contents:"
FILE_BEGIN_MARKER = '<file path="{path}">'
FILE_END_MARKER = '</file path="{path}">'
READ_ERROR_NOTICE = "[Error reading file: {path}] {error}"

# -----------------------------------------------------------------------------
# LANGUAGE TAGS
# -----------------------------------------------------------------------------

EXTENSION_LANGUAGES: Dict[str, str] = {
    ".py": "python",
    ".pyi": "python",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "jsx",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".json": "json",
    ".md": "markdown",
    ".markdown": "markdown",
    ".html": "html",
    ".htm": "html",
    ".css": "css",
    ".scss": "scss",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
    ".xml": "xml",
    ".ini": "ini",
    ".cfg": "ini",
    ".sh": "bash",
    ".bash": "bash",
    ".zsh": "zsh",
    ".ps1": "powershell",
    ".sql": "sql",
    ".java": "java",
    ".kt": "kotlin",
    ".go": "go",
    ".rs": "rust",
    ".rb": "ruby",
    ".php": "php",
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".hpp": "cpp",
    ".cs": "csharp",
    ".swift": "swift",
    ".dart": "dart",
    ".lua": "lua",
    ".vue": "vue",
}
