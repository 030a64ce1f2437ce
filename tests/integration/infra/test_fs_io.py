from __future__ import annotations

"""
Integration tests for FileSystem Infrastructure.

Validates cross-platform data directory resolution, watch path
normalization and the text I/O helpers.
"""

import os
from pathlib import Path
from unittest.mock import patch

from ctkdecl.infra.fs import get_user_data_dir, read_text, watch_target, write_text

# -----------------------------------------------------------------------------
# PATH RESOLUTION TESTS
# -----------------------------------------------------------------------------

def test_get_user_data_dir_windows() -> None:
    """TC-01: Verify resolution of %LOCALAPPDATA% on Windows systems."""
    mock_appdata = "C:/Users/Test/AppData/Local"
    with patch("os.name", "nt"):
        with patch.dict(os.environ, {"LOCALAPPDATA": mock_appdata}):
            with patch("os.makedirs"):
                path = get_user_data_dir()
                assert "ctkdecl" in path
                assert path.lower().startswith(os.path.abspath(mock_appdata).lower())


def test_get_user_data_dir_unix() -> None:
    """TC-02: Verify resolution of ~/.ctkdecl on Unix-like systems."""
    with patch("os.name", "posix"):
        with patch("os.path.expanduser", return_value="/home/testuser"):
            with patch("os.makedirs"):
                path = get_user_data_dir().replace("\\", "/")
                assert path.endswith("/home/testuser/.ctkdecl")


def test_watch_target_normalizes_relative_paths(tmp_path: Path, monkeypatch) -> None:
    """TC-03: Verify relative and absolute spellings of one file compare equal."""
    monkeypatch.chdir(tmp_path)

    assert watch_target("gui.json") == watch_target(str(tmp_path / "sub" / ".." / "gui.json"))

# -----------------------------------------------------------------------------
# TEXT I/O TESTS
# -----------------------------------------------------------------------------

def test_write_creates_parents_and_read_strips_bom(tmp_path: Path) -> None:
    """TC-04: Verify parent creation on write and BOM tolerance on read."""
    target = tmp_path / "a" / "b" / "out.txt"
    write_text(str(target), "hello")

    assert read_text(str(target)) == "hello"

    bom_file = tmp_path / "bom.json"
    bom_file.write_bytes(b"\xef\xbb\xbf{}")
    assert read_text(str(bom_file)) == "{}"
