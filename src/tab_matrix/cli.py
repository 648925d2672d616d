"""
Command line interface.

    tab-matrix analyze tabs.json
    tab-matrix analyze tabs.json --format json --output-dir ./exports
    tab-matrix analyze tabs.json --format txt --matrix-id matrix-domain-github-com
    tab-matrix serve --port 8000
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import polars as pl

from tab_matrix.config import get_config
from tab_matrix.errors import Failure
from tab_matrix.export import ExportFormat, LocalFileWriter, summary_frame
from tab_matrix.ingestion import JsonFileTabSource
from tab_matrix.logging_config import setup_logging
from tab_matrix.models import AnalysisReport
from tab_matrix.pipeline import AnalysisSession

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    config = get_config()
    parser = argparse.ArgumentParser(
        prog="tab-matrix",
        description="Deduplicate browser tab URLs and group them by domain.",
    )
    parser.add_argument(
        "--log-level",
        default=config.log_level,
        help="Logging level (defaults to config).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Analyze a JSON file of tabs.")
    analyze.add_argument("tabs_file", type=Path, help="JSON array of tab objects.")
    analyze.add_argument(
        "--format",
        choices=[f.value for f in ExportFormat],
        default=None,
        help="Write an export in this format.",
    )
    analyze.add_argument(
        "--matrix-id",
        action="append",
        default=[],
        dest="matrix_ids",
        help="Export only this matrix (repeatable; default: all).",
    )
    analyze.add_argument(
        "--output-dir",
        type=Path,
        default=config.export.output_dir,
        help="Directory for exports (defaults to config.export.output_dir).",
    )
    analyze.add_argument(
        "--compress",
        default=config.export.compress,
        action=argparse.BooleanOptionalAction,
        help="zstd-compress the written export.",
    )
    analyze.add_argument(
        "--current-window",
        default=None,
        help="Only collect tabs from this window ID.",
    )
    analyze.add_argument(
        "--active-only",
        action="store_true",
        help="Only collect the active tab of each window.",
    )

    serve = subparsers.add_parser("serve", help="Run the HTTP API.")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser


def run_analyze(args: argparse.Namespace) -> int:
    """Analyze a tabs file, print a summary and optionally export."""
    source = JsonFileTabSource(
        args.tabs_file,
        current_window=_window_id(args.current_window),
        active_only=args.active_only,
    )
    session = AnalysisSession()

    result = session.analyze_source(source)
    if not result.ok:
        return _fail(result.error)

    print_report(result.value)

    if args.format is None:
        return 0

    writer = LocalFileWriter(output_dir=args.output_dir, compress=args.compress)
    exported = asyncio.run(session.export(args.matrix_ids, args.format, writer))
    if not exported.ok:
        return _fail(exported.error)

    receipt = exported.value
    print(
        f"\nExported {receipt.artifact.exported_urls} URL(s) from "
        f"{receipt.artifact.exported_matrices} matrice(s) to {receipt.handle.path}"
    )
    return 0


def print_report(report: AnalysisReport) -> None:
    """Print matrices and statistics."""
    stats = report.statistics

    with pl.Config(tbl_rows=-1, fmt_str_lengths=80):
        print(summary_frame(report.matrices))

    print(f"\nTabs:        {report.input_count}")
    print(f"Valid URLs:  {report.normalized_count}")
    print(f"Unique URLs: {report.unique_count}")
    print(f"Matrices:    {stats.total_matrices}")
    print(
        f"URLs/matrix: avg {stats.avg_urls_per_matrix}, "
        f"max {stats.max_urls_in_matrix}, min {stats.min_urls_in_matrix}"
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    if args.command == "serve":
        from tab_matrix.api.server import main as serve

        serve(host=args.host, port=args.port)
        return 0

    return run_analyze(args)


def _window_id(value: Optional[str]) -> int | str | None:
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return value


def _fail(failure: Failure) -> int:
    logger.error("%s: %s", failure.kind.value, failure.message)
    print(f"error [{failure.kind.value}]: {failure.message}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
