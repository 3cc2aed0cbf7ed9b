from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Verifies the application's external behavior: argument parsing, exit codes,
stream output (stdout/stderr) and file system side effects. Most cases drive
`main()` in-process so that token counting can be patched to the offline
heuristic; one case runs the module in a subprocess.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import Any, Dict, List

import pytest

from project2text.core.processing.tokenizer import HeuristicStrategy
from project2text.infra.logging import shutdown_logging
from project2text.interface.cli.app import main

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"

_HEURISTIC = HeuristicStrategy()


@pytest.fixture(autouse=True)
def offline_cli(monkeypatch: pytest.MonkeyPatch):
    """Patch token counting and release logging handlers after each run."""
    monkeypatch.setattr(
        "project2text.core.pipeline.engine.count_tokens",
        lambda text, model="": _HEURISTIC.count(text, model),
    )
    yield
    shutdown_logging()


def run_cli_subprocess(args: List[str]) -> subprocess.CompletedProcess[str]:
    """
    Execute the CLI in a separate process.

    Injects the 'src' directory into PYTHONPATH so the package resolves
    without being installed.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    cmd = [sys.executable, "-m", "project2text.interface.cli.app"] + args
    return subprocess.run(cmd, env=env, capture_output=True, text=True, encoding="utf-8")


def test_cli_prints_document_to_stdout(project_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """TC-01: Without an output file the document goes to stdout."""
    code = main(["-i", str(project_dir)])
    out = capsys.readouterr().out

    assert code == 0
    assert out.startswith("# Project Context: demo\n")
    assert '<file path="README.md">' in out
    assert "node_modules" not in out


def test_cli_writes_output_file(tmp_path: Path, project_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """TC-02: -o persists the document and prints a short report."""
    target = tmp_path / "results" / "context.md"

    code = main(["-i", str(project_dir), "-o", str(target)])
    out = capsys.readouterr().out

    assert code == 0
    assert target.exists()
    assert target.read_text(encoding="utf-8").startswith("# Project Context: demo")
    assert "Document generated successfully." in out
    assert "Files selected: 3 of 5" in out


def test_cli_handles_missing_input(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """TC-03: A missing project root exits with code 2."""
    code = main(["-i", str(tmp_path / "non_existent_folder")])

    assert code == 2
    assert "does not exist" in capsys.readouterr().err


def test_cli_json_output_structure(project_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """TC-04: --json prints the summary instead of the document."""
    code = main(["-i", str(project_dir), "--json", "--select-none", "-t", "src/app.ts"])
    assert code == 0

    data: Dict[str, Any] = json.loads(capsys.readouterr().out)

    assert data["ok"] is True
    assert data["selected_files"] == ["src/app.ts"]
    assert data["read_errors"] == []
    assert data["token_count"] > 0
    assert data["summary"]["candidates"] == 5


def test_cli_print_tree_goes_to_stderr_with_stdout_document(
        project_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    code = main(["-i", str(project_dir), "--print-tree"])
    captured = capsys.readouterr()

    assert code == 0
    assert "[x] README.md" in captured.err
    assert "[x] README.md" not in captured.out


def test_cli_malformed_pattern_fails(project_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["-i", str(project_dir), "--include", "src/{a,b"])

    assert code == 1
    assert "Malformed pattern" in capsys.readouterr().err


def test_cli_config_file_and_override_precedence(
        tmp_path: Path, project_dir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Flags override the config file, which overrides the defaults."""
    config_path = tmp_path / "p2t.json"
    config_path.write_text(
        json.dumps({"include_patterns": ["**/*.md"], "fence_code_blocks": False}),
        encoding="utf-8",
    )

    code = main(["-i", str(project_dir), "--config", str(config_path), "--include", "src/**"])
    out = capsys.readouterr().out

    assert code == 0
    assert '<file path="src/app.ts">\nexport const app = 1;\n</file path="src/app.ts">' in out
    assert '<file path="README.md">' not in out


def test_cli_dump_config_subprocess(project_dir: Path) -> None:
    """TC-05: --dump-config prints the effective configuration and exits."""
    result = run_cli_subprocess([
        "-i", str(project_dir),
        "--include", "src/**/*.{ts,js}",
        "--no-gitignore",
        "--dump-config",
    ])

    assert result.returncode == 0, result.stderr
    data = json.loads(result.stdout)
    assert data["root_path"] == os.path.abspath(str(project_dir))
    assert data["include_patterns"] == ["src/**/*.{ts,js}"]
    assert data["respect_gitignore"] is False
