from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from threading import Event
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from snaprestore.app import export_snapshot_bytes, restore_snapshot
from snaprestore.config import ConfigurationError, configure_logging
from snaprestore.domain.restore import SnapshotError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

_CANCEL = Event()


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Restore and export snaprestore snapshots")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log per-record details",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    restore = subparsers.add_parser("restore", help="Restore a snapshot into the record store")
    restore.add_argument("path", type=Path, help="Snapshot JSON file to restore")
    restore.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Write the JSON report to this file instead of stdout",
    )

    export = subparsers.add_parser("export", help="Export the record store as a snapshot")
    export.add_argument("path", type=Path, help="Destination file for the snapshot")

    return parser.parse_args(list(argv))


def _read_snapshot(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise ValueError(f"Cannot read snapshot {path}: {exc}") from exc


def _write_report(payload: dict[str, object], output: Path | None) -> None:
    rendered = json.dumps(payload, indent=2, default=str)
    if output is None:
        sys.stdout.write(rendered + "\n")
        return
    output.write_text(rendered + "\n", encoding="utf-8")
    log.info("Wrote restore report to %s", output)


def main(argv: Sequence[str] | None = None, *, cancel: Event | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(verbose=parsed_args.verbose)

    try:
        if parsed_args.command == "restore":
            raw = _read_snapshot(parsed_args.path)
            report = restore_snapshot(raw, cancel=cancel or _CANCEL)
            _write_report(report.as_dict(), parsed_args.output)
        elif parsed_args.command == "export":
            parsed_args.path.write_bytes(export_snapshot_bytes())
            log.info("Wrote snapshot to %s", parsed_args.path)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (ValueError, SnapshotError, ConfigurationError):
        log.exception("Snapshot rejected")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Stop after the current entity kind on the first Ctrl+C, exit on the second."""
    if _CANCEL.is_set():
        log.info("Closed by user (Ctrl+C)")
        sys.exit(0)
    log.info("Cancelling after the current entity kind (Ctrl+C again to exit)")
    _CANCEL.set()


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
