from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema (global flags plus the run, check, snapshot
and kinds commands) and translates parsed namespaces into configuration
overrides.
"""

import argparse
from typing import Any, Dict

from ctkdecl.domain import constants as const
from ctkdecl.domain.config import APPEARANCE_MODES, COLOR_THEMES

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the ctkdecl CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="ctkdecl",
        description="Render declarative widget descriptions as live, hot-reloading windows.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {const.CURRENT_VERSION}")

    # --- Global Tuning ---
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--appearance",
        dest="appearance_mode",
        choices=APPEARANCE_MODES,
        default=None,
        help="Appearance mode of the window.",
    )
    p.add_argument(
        "--theme",
        dest="color_theme",
        choices=COLOR_THEMES,
        default=None,
        help="Built-in colour theme.",
    )
    p.add_argument(
        "--poll-ms",
        dest="poll_interval_ms",
        type=int,
        default=None,
        help=f"Reload polling interval in milliseconds (default {const.DEFAULT_POLL_INTERVAL_MS}).",
    )

    sub = p.add_subparsers(dest="command", required=True)

    # --- run ---
    run = sub.add_parser("run", help="Show a description file and reload it on change.")
    _add_source_args(run)
    run.add_argument("--width", type=int, default=const.DEFAULT_WINDOW_SIZE[0])
    run.add_argument("--height", type=int, default=const.DEFAULT_WINDOW_SIZE[1])
    run.add_argument("--title", default=None, help="Window title (default: file name).")
    run.add_argument(
        "--no-reload",
        action="store_true",
        help="Do not watch the file for changes.",
    )

    # --- check ---
    check = sub.add_parser("check", help="Build a description headlessly and report.")
    _add_source_args(check)

    # --- snapshot ---
    snap = sub.add_parser("snapshot", help="Export an SVG snapshot without a display.")
    _add_source_args(snap)
    snap.add_argument("-o", "--output", dest="snapshot_path", default=None, help="Output SVG path.")
    snap.add_argument("--width", type=int, default=const.DEFAULT_WINDOW_SIZE[0])
    snap.add_argument("--height", type=int, default=const.DEFAULT_WINDOW_SIZE[1])

    # --- kinds ---
    sub.add_parser("kinds", help="List the registered widget kinds and their capabilities.")

    return p


def _add_source_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("path", help="Description file (.json, .json5, .yaml, .toml, .xml).")
    p.add_argument(
        "--format",
        dest="fmt",
        choices=sorted(set(const.FORMAT_BY_EXTENSION.values())),
        default=None,
        help="Override format detection by extension.",
    )

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Only the keys explicitly given on the command line.
    """
    overrides: Dict[str, Any] = {}

    if args.appearance_mode is not None:
        overrides["appearance_mode"] = args.appearance_mode
    if args.color_theme is not None:
        overrides["color_theme"] = args.color_theme
    if args.poll_interval_ms is not None:
        overrides["poll_interval_ms"] = args.poll_interval_ms
    if args.debug:
        overrides["log_level"] = "DEBUG"
    if getattr(args, "snapshot_path", None):
        overrides["snapshot_path"] = args.snapshot_path

    return overrides
