from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, merging of configuration
sources (defaults, persistent storage and command-line overrides) and
dispatch to the run, check, snapshot and kinds commands.
"""

import argparse
import os
import sys
from typing import Any, Dict, List, Optional, Tuple

from ctkdecl.app import DeclarativeApp
from ctkdecl.core.registry import default_registry
from ctkdecl.core.validator import validate_config
from ctkdecl.domain import constants as const
from ctkdecl.domain.config import load_config
from ctkdecl.domain.errors import SourceLoadError, WidgetBuildError
from ctkdecl.infra.logging import LoggingConfig, configure_logging, get_default_log_path, get_logger
from ctkdecl.interface.cli import args as cli_args
from ctkdecl.toolkit.headless import HeadlessBackend

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_MISSING_FILE = 2

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the main CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 load/build failure, 2 missing file).
    """
    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Configuration hierarchy (persistent state + CLI overrides)
    raw_conf = load_config()
    raw_conf.update(cli_args.args_to_overrides(args))
    clean_conf, warnings = validate_config(raw_conf, strict=False)

    # 3. Logging bootstrap
    configure_logging(LoggingConfig.from_app_config(clean_conf, get_default_log_path()))
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if args.command == "kinds":
        _print_kinds()
        return EXIT_OK

    # 4. Pre-flight input verification
    if not os.path.isfile(args.path):
        msg = f"Description file does not exist: {args.path}"
        logger.error(msg)
        print(f"ERROR: {msg}", file=sys.stderr)
        return EXIT_MISSING_FILE

    # 5. Command execution phase
    try:
        if args.command == "check":
            return _check(args, clean_conf)
        if args.command == "snapshot":
            return _snapshot(args, clean_conf)
        return _run(args, clean_conf)
    except (SourceLoadError, WidgetBuildError, ValueError) as e:
        logger.error(f"CLI: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.warning("CLI: Interrupted by user.")
        return 130

# -----------------------------------------------------------------------------
# COMMANDS
# -----------------------------------------------------------------------------

def _run(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    title = args.title or os.path.basename(args.path)
    app = DeclarativeApp.from_path(args.width, args.height, title, args.path, args.fmt, config=config)
    logger.info(f"CLI: Opening '{args.path}' ({'static' if args.no_reload else 'hot reload'}).")
    if args.no_reload:
        app.run_once()
    else:
        app.run()
    return EXIT_OK


def _check(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    app = DeclarativeApp.from_path(
        *_headless_size(args), os.path.basename(args.path), args.path, args.fmt,
        backend=HeadlessBackend(), config=config,
    )
    window = app.build()
    report = app.factory.report
    print(f"{args.path}: {app.tree.count()} node(s), {window.count_descendants()} widget(s) built.")
    if report.dropped_kinds:
        print(f"Dropped unknown kinds: {', '.join(sorted(set(report.dropped_kinds)))}")
    return EXIT_OK


def _snapshot(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    app = DeclarativeApp.from_path(
        *_headless_size(args), os.path.basename(args.path), args.path, args.fmt,
        backend=HeadlessBackend(), config=config,
    )
    print(app.dump_image())
    return EXIT_OK

# -----------------------------------------------------------------------------
# VIEW RENDERING (HUMAN READABLE)
# -----------------------------------------------------------------------------

def _print_kinds() -> None:
    registry = default_registry()
    width = max(len(t) for t in registry.tags())
    for tag in registry.tags():
        kind = registry.get(tag)
        marker = "*" if kind.is_container else " "
        print(f"{tag.ljust(width)} {marker} {', '.join(kind.capability_names())}")
    print(f"\n{len(registry)} kinds (* = container)")


def _headless_size(args: argparse.Namespace) -> Tuple[int, int]:
    default_w, default_h = const.DEFAULT_WINDOW_SIZE
    return getattr(args, "width", default_w), getattr(args, "height", default_h)
