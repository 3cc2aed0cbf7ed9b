from __future__ import annotations

"""
Unit tests for the Document Assembler Stage.

Verifies the document layout (preamble, listing, content blocks), content
normalization and fencing, and recovery from unreadable files.
"""

from typing import Dict

from project2text.core.pipeline.stages.assembler import (
    _fence_for,
    generate,
    language_for,
    normalize_content,
    render_document,
    render_listing,
)


def _provider(files: Dict[str, str]):
    def _read(rel_path: str) -> str:
        if rel_path not in files:
            raise FileNotFoundError(f"No such file: '{rel_path}'")
        return files[rel_path]
    return _read

# -----------------------------------------------------------------------------
# Degenerate Inputs
# -----------------------------------------------------------------------------

def test_no_root_yields_empty_document():
    """Without a project root there is nothing to describe."""
    assert generate([], _provider({}), None) == ""
    assert generate(["a.ts"], _provider({"a.ts": "x"}), None) == ""


def test_root_without_selection_keeps_headers():
    doc = generate([], _provider({}), "demo")

    assert doc.startswith("# Project Context: demo\n")
    assert "## Project File Structure:" in doc
    assert "## File Contents:" in doc
    assert "<file" not in doc

# -----------------------------------------------------------------------------
# Layout
# -----------------------------------------------------------------------------

def test_full_document_layout():
    files = {"src/a.ts": "const a = 1;\n", "README.md": "# Hi\n"}

    doc = generate(["src/a.ts", "README.md"], _provider(files), "demo")

    assert doc.splitlines() == [
        "# Project Context: demo",
        "",
        "This document contains the directory structure of the selected project "
        "files followed by the contents of each file.",
        "",
        "## Project File Structure:",
        "* README.md",
        "* src/",
        "  * a.ts",
        "",
        "## File Contents:",
        "",
        '<file path="README.md">',
        "```markdown",
        "# Hi",
        "```",
        '</file path="README.md">',
        "",
        '<file path="src/a.ts">',
        "```typescript",
        "const a = 1;",
        "```",
        '</file path="src/a.ts">',
    ]


def test_paths_are_normalized_sorted_and_deduplicated():
    files = {"b.txt": "b", "a/c.txt": "c"}

    result = render_document(["b.txt", "a\\c.txt", "b.txt", ""], _provider(files), "demo")

    assert result.files == ["a/c.txt", "b.txt"]
    assert result.text.count('<file path="b.txt">') == 1


def test_listing_prints_each_directory_once():
    lines = render_listing(["src/a/x.ts", "src/a/y.ts", "src/b.ts", "top.md"])

    assert lines == [
        "* src/",
        "  * a/",
        "    * x.ts",
        "    * y.ts",
        "  * b.ts",
        "* top.md",
    ]


def test_unfenced_blocks_contain_raw_content():
    doc = generate(["a.py"], _provider({"a.py": "print(1)\n"}), "demo", fence_code_blocks=False)

    assert '<file path="a.py">\nprint(1)\n</file path="a.py">' in doc
    assert "```" not in doc


def test_empty_file_renders_empty_fence():
    doc = generate(["empty.txt"], _provider({"empty.txt": ""}), "demo")
    assert '<file path="empty.txt">\n```\n```\n</file path="empty.txt">' in doc

# -----------------------------------------------------------------------------
# Read Failures
# -----------------------------------------------------------------------------

def test_read_failure_is_reported_inline():
    """good.ts renders intact; bad.ts is replaced by a notice, no exception."""
    files = {"good.ts": "export const ok = true;"}

    result = render_document(["good.ts", "bad.ts"], _provider(files), "demo")

    assert '<file path="good.ts">\n```typescript\nexport const ok = true;\n```\n</file path="good.ts">' in result.text
    assert '<file path="bad.ts">\n[Error reading file: bad.ts]' in result.text
    assert [e.rel_path for e in result.errors] == ["bad.ts"]
    assert "No such file" in result.errors[0].error
    assert result.ok_count == 1


def test_decode_errors_are_recovered():
    def provider(rel_path: str) -> str:
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

    result = render_document(["bin.dat"], provider, "demo")

    assert "[Error reading file: bin.dat]" in result.text
    assert len(result.errors) == 1

# -----------------------------------------------------------------------------
# Content Helpers
# -----------------------------------------------------------------------------

def test_normalize_content_line_endings_and_trailing_space():
    assert normalize_content("a  \r\nb\t\rc\n\n\n") == "a\nb\nc"


def test_fence_grows_past_backtick_runs():
    assert _fence_for("no ticks") == "```"
    assert _fence_for("```python\nx\n```") == "````"


def test_fenced_markdown_with_code_block_uses_longer_fence():
    content = "Example:\n```js\nx()\n```"
    doc = generate(["doc.md"], _provider({"doc.md": content}), "demo")

    assert "````markdown\nExample:\n```js\nx()\n```\n````" in doc


def test_language_for_known_and_unknown_extensions():
    assert language_for("src/app.TS") == "typescript"
    assert language_for("main.py") == "python"
    assert language_for("Makefile") == ""
