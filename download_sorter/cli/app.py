from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

import pandas as pd
from dotenv import load_dotenv

from download_sorter.config.loader import DEFAULT_CONFIG_PATH, ConfigError, SorterConfig, load_config
from download_sorter.excel.properties import JsonFilePropertyStore, sidecar_path
from download_sorter.excel.workbook import WorkbookDataSource, WorkbookError
from download_sorter.logging.error_log import FailureLog
from download_sorter.logging.init import log_summary, set_level, setup_logging
from download_sorter.models.cell import grid_shape
from download_sorter.models.outcome import ErrorKind, OperationOutcome, SortDirection
from download_sorter.services.about import render_about_html
from download_sorter.services.permutation import find_key_column
from download_sorter.services.restore_controller import RestoreController
from download_sorter.services.snapshot_store import SnapshotStore
from download_sorter.services.sort_controller import SortController
from download_sorter.services.summary import render_summary_line
from download_sorter.services.value_parser import parse_download_value

from .console import ConsoleInteraction

"""CLI entrypoint.

Commands:
- sort [--asc|--desc]  reorder data rows by the downloads column, save workbook
- restore [--yes]      put back the grid captured by the last sort
- about                describe the tool and the supported value formats
- inspect [--limit N]  preview rows with their parsed magnitudes (read-only)

The workbook is only saved after a successful sort/restore; a failed write
never reaches the file. A failed save turns the outcome into a WriteFailure
before the SUMMARY line is logged.
"""

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_OPERATION_FAILED = 2


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env with python-dotenv; DOWNLOAD_SORTER_* values override the YAML config."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="download-sorter",
        description="Sort sheet rows by 'Downloads Last Month' while keeping formulas and hyperlinks",
    )
    p.add_argument("--config", type=Path, default=None, help=f"YAML config (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--workbook", default=None, help="Path to the .xlsx workbook")
    p.add_argument("--sheet", default=None, help="Worksheet name (default: active sheet)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    sort_p = sub.add_parser("sort", help="Sort data rows by downloads")
    order = sort_p.add_mutually_exclusive_group()
    order.add_argument("--desc", dest="direction", action="store_const", const=SortDirection.DESC,
                       help="Highest downloads first (default)")
    order.add_argument("--asc", dest="direction", action="store_const", const=SortDirection.ASC,
                       help="Lowest downloads first")
    sort_p.set_defaults(direction=SortDirection.DESC)

    restore_p = sub.add_parser("restore", help="Restore the order saved by the last sort")
    restore_p.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    sub.add_parser("about", help="Show what this tool does")

    inspect_p = sub.add_parser("inspect", help="Preview rows and parsed download magnitudes")
    inspect_p.add_argument("--limit", type=int, default=10, help="Rows to show (default: 10)")
    return p.parse_args(argv)


def _resolve_config(args: argparse.Namespace) -> SorterConfig:
    """CLI flags > environment > YAML > defaults.

    The default config path may be absent; an explicit --config must exist.
    """
    if args.config is not None:
        cfg = load_config(args.config)
    elif DEFAULT_CONFIG_PATH.exists():
        cfg = load_config(DEFAULT_CONFIG_PATH)
    else:
        cfg = SorterConfig.defaults()
    cfg = cfg.with_env()
    if args.workbook:
        cfg = replace(cfg, workbook=args.workbook)
    if args.sheet:
        cfg = replace(cfg, sheet=args.sheet)
    return cfg


def _inspect(source: WorkbookDataSource, cfg: SorterConfig, limit: int) -> int:
    grid = source.read_grid()
    rows, cols = grid_shape(grid)
    if rows == 0:
        print(f"SHEET: {source.label} (empty)")
        return EXIT_SUCCESS
    header = [
        str(c.display) if c.display not in (None, "") else f"column_{i + 1}"
        for i, c in enumerate(grid[0])
    ]
    key_index = find_key_column(grid[0], cfg.key_column_tokens)
    key_name = header[key_index] if key_index is not None else None
    print(f"SHEET: {source.label} rows={rows - 1} cols={cols} key_column={key_name}")
    sample = grid[1 : limit + 1]
    df = pd.DataFrame([[c.content for c in row] for row in sample], columns=header)
    if key_index is not None:
        df["magnitude"] = [parse_download_value(row[key_index].display) for row in sample]
    if not df.empty:
        print(df.to_string(index=False))
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    setup_logging()

    # None のときのみシステム引数を読む ([] はテストからの明示的な空引数)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    if args.debug:
        set_level(logging.DEBUG)
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = _resolve_config(args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    ui = ConsoleInteraction(assume_yes=getattr(args, "yes", False))
    if args.command == "about":
        ui.show_info_panel(render_about_html())
        return EXIT_SUCCESS

    if not cfg.workbook:
        logger.error(f"config: no workbook given (use --workbook, DOWNLOAD_SORTER_WORKBOOK or 'workbook:' in {DEFAULT_CONFIG_PATH})")
        return EXIT_FATAL
    workbook = Path(cfg.workbook)
    try:
        source = WorkbookDataSource(workbook, cfg.sheet)
    except WorkbookError as e:
        logger.error(f"workbook: {e}")
        return EXIT_FATAL

    if args.command == "inspect":
        return _inspect(source, cfg, args.limit)

    logger.info(f"Processing sheet '{source.label}' of {workbook}")
    properties = JsonFilePropertyStore(sidecar_path(workbook, cfg.properties_suffix))
    snapshots = SnapshotStore(properties, key=cfg.backup_key)

    outcome: OperationOutcome
    if args.command == "sort":
        outcome = SortController(source, snapshots, ui, key_tokens=cfg.key_column_tokens).sort(args.direction)
    else:
        outcome = RestoreController(source, snapshots, ui).restore()

    exit_code = EXIT_SUCCESS
    if outcome.ok:
        try:
            source.save()
        except OSError as e:
            logger.error(f"save: failed to write {workbook}: {e}")
            outcome = replace(
                outcome,
                ok=False,
                error_kind=ErrorKind.WRITE_FAILURE,
                message=f"Could not save {workbook.name}: {e}",
            )
            ui.alert("Error", outcome.message)
    if not outcome.ok and not outcome.aborted:
        FailureLog(workbook, source.label).record(outcome)
        exit_code = EXIT_OPERATION_FAILED

    # log_summary が "SUMMARY " を付与するので接頭辞を除去
    log_summary(render_summary_line(outcome)[len("SUMMARY "):])
    return exit_code
