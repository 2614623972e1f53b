from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .config import ConfigManager
from .core import Pipeline, PlanExecutor
from .errors import BackendUnavailable, InvalidInputRoot
from .utils import reporting


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    print(f"exif-photo-sort v{__version__}")
    if args.config and not Path(args.config).is_file():
        parser.error(f"config file not found: {args.config}")
    try:
        config = ConfigManager(Path(args.config) if args.config else None)
    except ValueError as exc:
        print(f"Error: cannot parse config file {args.config}: {exc}", file=sys.stderr)
        return 1

    config_errors = config.validate_config()
    if config_errors:
        print("Error: invalid configuration:", file=sys.stderr)
        for error in config_errors:
            print(f"  {error}", file=sys.stderr)
        return 1

    try:
        return _run(args, config)
    except (BackendUnavailable, InvalidInputRoot) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exif-photo-sort",
        description="Copy photos into RAW|JPEG/YYYY/MM/DD folders, grouping HDR and burst sequences.",
    )
    parser.add_argument("input_dir", help="Input directory path")
    parser.add_argument("output_dir", help="Output directory path")
    parser.add_argument("--dry-run", action="store_true", help="Print actions without copying files")
    parser.add_argument(
        "--incremental",
        action="store_true",
        help="Only process files newer than the most recent file in the destination directory",
    )
    parser.add_argument("--config", help="Path to a JSON config file", default=None)
    parser.add_argument("--report-csv", help="Write a CSV report of the copy run", default=None)
    return parser


def _run(args: argparse.Namespace, config: ConfigManager) -> int:
    source_path = Path(args.input_dir)
    output_root = Path(args.output_dir)
    mode = "Dry-run" if args.dry_run else "Copy"
    if args.incremental:
        mode = f"{mode} (incremental)"

    pipeline = Pipeline(config)
    result = pipeline.run_plan(
        source_path,
        output_root,
        incremental=args.incremental,
        mode=mode,
        stage_callback=lambda message: print(message),
        log_callback=lambda message: print(message),
    )
    plan = result.plan

    print(reporting.build_summary_text(result.summary_info))
    if plan.conflicts:
        print("Conflicts (excluded from the copy):")
        for line in reporting.format_conflicts(plan):
            print(line)
    if plan.failures:
        print("Per-file issues:")
        for line in reporting.format_failures(plan.failures):
            print(line)

    if args.dry_run:
        for line in reporting.format_plan_lines(plan.entries):
            print(line)
        if args.report_csv:
            print("Dry-run: CSV report not written")
        return 0

    if plan.is_empty:
        return 0

    executor = PlanExecutor(config)
    execution = executor.execute_plan(plan)
    print(
        f"Copy done. Copied: {len(execution.executed_entries)}, "
        f"Failed: {len(execution.failed_entries)}"
    )
    for line in reporting.format_failures(execution.failed_entries):
        print(line)

    if args.report_csv:
        report_path = reporting.write_report_csv(
            Path(args.report_csv),
            plan,
            executed=execution.executed_entries,
            failed=execution.failed_entries,
        )
        print(f"Report written to: {report_path}")

    return 0 if execution.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
