from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from sheetrecon.app import (
    clean_reserved_block,
    consolidate_sources,
    merge_secondary,
    run_full_process,
    sync_merge_workspace,
)
from sheetrecon.config import (
    ConfigurationError,
    configure_logging,
    get_reconcile_config,
    get_workspace_config,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Folder holding the source workbooks (defaults to SHEETRECON_DATA_DIR)",
    )
    common.add_argument(
        "--identity-column",
        type=str,
        default=None,
        help="Header of the column identifying a record (defaults to config)",
    )
    common.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug details",
    )

    parser = argparse.ArgumentParser(description="Consolidate and reconcile spreadsheet records")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser(
        "consolidate",
        parents=[common],
        help="Fold source workbooks into the canonical and duplicates files",
    )
    subparsers.add_parser(
        "sync",
        parents=[common],
        help="Append canonical records missing from the merge workspace copy",
    )
    subparsers.add_parser(
        "merge",
        parents=[common],
        help="Join the secondary workbook into the merge copy and write a report",
    )
    subparsers.add_parser(
        "clean",
        parents=[common],
        help="Clear the configured column block of the canonical file",
    )
    subparsers.add_parser(
        "run-all",
        parents=[common],
        help="Run consolidate, sync and merge in sequence",
    )
    return parser.parse_args(list(argv))


def _run_command(args: argparse.Namespace) -> None:
    workspace = get_workspace_config(data_dir=args.data_dir)
    settings = get_reconcile_config(identity_column=args.identity_column)

    if args.command == "consolidate":
        outcome = consolidate_sources(workspace=workspace, settings=settings)
        if not outcome.audit.balanced:
            log.warning("Consolidation finished with unreconciled totals")
    elif args.command == "sync":
        sync_merge_workspace(workspace=workspace)
    elif args.command == "merge":
        merge_secondary(workspace=workspace, settings=settings)
    elif args.command == "clean":
        clean_reserved_block(workspace=workspace, settings=settings)
    elif args.command == "run-all":
        run_full_process(workspace=workspace, settings=settings)
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(
        level=logging.DEBUG if parsed_args.verbose else logging.INFO,
        force=parsed_args.verbose,
    )

    try:
        _run_command(parsed_args)
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)
    except Exception:
        log.exception(f"Fatal error during {parsed_args.command}")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    main()
