"""Rollup CLI entry points.

This module exposes commands to rebuild daily documents from raw data
and to list the days already built. It maps argparse commands onto SDK
calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import RollupConfig
from core.dates import parse_date_args
from core.errors import RollupIngestError
from core.logging_config import configure_cli_logging
from core.types import DailyRangeOptions
from ingest.pipeline import build_daily_from_raw_range
from store.daily_writer import list_daily_dates


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="fi-rollup", description="Daily FI rollup builder")
    parser.add_argument("--data-root", help="Override ROLLUP_DATA_ROOT for this command")
    parser.add_argument("--registry", help="Override ROLLUP_REGISTRY_PATH for this command")
    parser.add_argument("--tables", help="YAML file with instance aliases and test instances")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_build_command(subparsers)
    _add_days_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the rollup CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_cli_logging()
    config = _build_config(args)
    if args.command == "build":
        return _run_build_command(parser, config, args)
    if args.command == "days":
        return _run_days_command(config)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(args: argparse.Namespace) -> RollupConfig:
    """Build runtime config with optional CLI overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Configured runtime config.
    """
    config = RollupConfig.from_env()
    if args.data_root:
        config = RollupConfig.for_data_root(
            Path(args.data_root).expanduser().resolve(), tables_path=config.tables_path
        )
    if args.registry:
        config = replace(config, registry_path=Path(args.registry).expanduser().resolve())
    if args.tables:
        config = replace(config, tables_path=Path(args.tables).expanduser().resolve())
    return config


def _run_build_command(
    parser: argparse.ArgumentParser,
    config: RollupConfig,
    args: argparse.Namespace,
) -> int:
    """Handle build command.

    Args:
        parser: Parser used to report argument errors.
        config: Runtime config.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    try:
        start_date, end_date = parse_date_args(args.dates)
    except RollupIngestError as error:
        parser.error(str(error))
    result = build_daily_from_raw_range(
        DailyRangeOptions(start_date=start_date, end_date=end_date), config
    )
    for written_path in result.written_paths:
        print(written_path)
    for day in result.skipped_dates:
        print(f"skipped\t{day}")
    return 0


def _run_days_command(config: RollupConfig) -> int:
    """Handle days command."""
    for day in list_daily_dates(config.daily_dir):
        print(day)
    return 0


def _add_build_command(subparsers: Any) -> None:
    """Register build subcommand."""
    parser = subparsers.add_parser("build", help="Rebuild daily documents from raw day files")
    parser.add_argument(
        "dates",
        nargs="*",
        metavar="DATE",
        help="Optional START_DATE [END_DATE] in YYYY-MM-DD; defaults to today (UTC)",
    )


def _add_days_command(subparsers: Any) -> None:
    """Register days subcommand."""
    subparsers.add_parser("days", help="List dates that have a built daily document")
