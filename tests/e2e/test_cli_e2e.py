from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Verifies the application's external behavior by invoking the entry point
module via subprocess. These tests validate argument parsing, exit codes,
stream output (stdout/stderr) and artifact generation. Only the headless
commands are exercised, so no display server is required.
"""

import os
import subprocess
import sys
from pathlib import Path
from typing import List

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
EXAMPLES_DIR = PROJECT_ROOT / "examples"


def run_cli(args: List[str], home: Path) -> subprocess.CompletedProcess[str]:
    """
    Helper to execute the CLI in a separate process.

    Injects the 'src' directory into PYTHONPATH so the package resolves
    without being installed, and points HOME at a scratch directory so the
    user's configuration is never read or written.

    Args:
        args: Command line arguments (excluding the interpreter and module).
        home: Directory used as the user's home.

    Returns:
        subprocess.CompletedProcess: Result with returncode, stdout and stderr.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    env["HOME"] = str(home)
    env["LOCALAPPDATA"] = str(home)

    cmd = [sys.executable, "-m", "ctkdecl.main"] + args

    return subprocess.run(
        cmd,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8",
    )


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


def test_cli_version(home: Path) -> None:
    """TC-01: Verify --version prints the program version and exits cleanly."""
    result = run_cli(["--version"], home)

    assert result.returncode == 0
    assert "ctkdecl" in result.stdout


def test_cli_check_sample(home: Path) -> None:
    """TC-02: Verify 'check' on the shipped sample succeeds."""
    result = run_cli(["check", str(EXAMPLES_DIR / "gui.xml")], home)

    assert result.returncode == 0, result.stderr
    assert "widget(s) built" in result.stdout


def test_cli_snapshot_artifact(home: Path, tmp_path: Path) -> None:
    """TC-03: Verify 'snapshot' writes the SVG artifact."""
    out = tmp_path / "snap.svg"
    result = run_cli(["snapshot", str(EXAMPLES_DIR / "menu.json5"), "-o", str(out)], home)

    assert result.returncode == 0, result.stderr
    assert out.exists()
    assert "Pick a month" in out.read_text(encoding="utf-8")


def test_cli_missing_file(home: Path, tmp_path: Path) -> None:
    """TC-04: Verify a nonexistent description exits with code 2 and an error."""
    result = run_cli(["check", str(tmp_path / "nope.json")], home)

    assert result.returncode == 2
    assert "ERROR" in result.stderr


def test_cli_requires_command(home: Path) -> None:
    """TC-05: Verify argparse rejects an invocation without a command."""
    result = run_cli([], home)

    assert result.returncode != 0
    assert "usage" in result.stderr.lower()
