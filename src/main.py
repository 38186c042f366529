# src/main.py — v2
"""CLI entry point: scan and stats commands.

Usage:
    treesum scan <config.json> [--workers N] [--dry-run] [--no-notify]
    treesum stats <snapshot.json>

Exit codes: 0 on a finished run (detected changes included), 1 on
configuration or persistence errors, 130 when interrupted.
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from pathlib import Path

from treesum.version import __version__

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_ERROR

    try:
        return args.func(args)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return EXIT_INTERRUPTED


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="treesum",
        description=f"treesum v{__version__} - checksum-based file integrity scanner",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- scan ---
    p_scan = subparsers.add_parser(
        "scan", help="Scan configured folders and report new/changed files",
    )
    p_scan.add_argument("config", type=Path, help="Path to JSON config file")
    p_scan.add_argument(
        "-w", "--workers", type=int, default=None,
        help="Checksum worker threads (default: config value, 0 = CPU count)",
    )
    p_scan.add_argument(
        "--dry-run", action="store_true",
        help="Do not write the new snapshot",
    )
    p_scan.add_argument(
        "--no-notify", action="store_true",
        help="Do not send notifications or append to the change log",
    )
    p_scan.set_defaults(func=_cmd_scan)

    # --- stats ---
    p_stats = subparsers.add_parser(
        "stats", help="Show snapshot statistics",
    )
    p_stats.add_argument("snapshot", type=Path, help="Snapshot JSON file")
    p_stats.set_defaults(func=_cmd_stats)

    return parser


def _cmd_scan(args: argparse.Namespace) -> int:
    """Execute one integrity scan."""
    from treesum.api.facade import run_scan
    from treesum.config.settings import ConfigurationError, load_settings
    from treesum.logging.logger import setup_logging
    from treesum.store.base_snapshot_store import PersistenceError

    try:
        settings = load_settings(args.config, workers=args.workers)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_ERROR

    setup_logging(
        level="DEBUG" if args.verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )

    cancel_event = threading.Event()
    restore = _install_cancel_handlers(cancel_event)
    try:
        report = run_scan(
            settings,
            notifiers=[] if args.no_notify else None,
            cancel_event=cancel_event,
            dry_run=args.dry_run,
        )
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return EXIT_ERROR
    except PersistenceError as exc:
        logger.error("Snapshot not saved: %s", exc)
        return EXIT_ERROR
    finally:
        restore()

    stats = report.stats
    print(f"\nScan {'complete' if report.complete else 'INCOMPLETE'}:")
    print(f"  Roots:        {stats.roots_scanned}")
    print(f"  Files:        {len(report.snapshot)}")
    print(f"  New:          {len(report.new_files)}")
    print(f"  Changed:      {len(report.changed_files)}")
    print(f"  Missing:      {len(report.missing_files)}")
    print(f"  Errors:       {len(report.errors)}")
    print(f"  Duration:     {stats.duration_seconds:.1f}s")
    return EXIT_OK if report.complete else EXIT_INTERRUPTED


def _cmd_stats(args: argparse.Namespace) -> int:
    """Display entry counts for a snapshot file."""
    from treesum.config.settings import ConfigurationError
    from treesum.scan.models import READ_ERROR_PREFIX
    from treesum.store.json_store import JsonSnapshotStore

    try:
        snapshot = JsonSnapshotStore(args.snapshot).load()
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return EXIT_ERROR

    unreadable = sum(1 for v in snapshot.values() if v.startswith(READ_ERROR_PREFIX))
    print(f"\nSnapshot {args.snapshot}:")
    print(f"  Entries:     {len(snapshot)}")
    print(f"  Unreadable:  {unreadable}")
    return EXIT_OK


def _install_cancel_handlers(cancel_event: threading.Event):
    """Route SIGINT/SIGTERM to ``cancel_event``; returns a restore callable."""
    if threading.current_thread() is not threading.main_thread():
        return lambda: None

    def _handler(signum, frame):  # noqa: ARG001
        logger.warning("Received signal %d, cancelling scan", signum)
        cancel_event.set()

    previous = {
        sig: signal.signal(sig, _handler) for sig in (signal.SIGINT, signal.SIGTERM)
    }

    def _restore() -> None:
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    return _restore


def _setup_logging(verbose: bool) -> None:
    """Configure bootstrap logging until settings are loaded."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


if __name__ == "__main__":
    sys.exit(main())
