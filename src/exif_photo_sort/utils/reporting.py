"""Human-readable run summary and CSV report."""

from __future__ import annotations

from collections import Counter
import csv
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, Optional

from ..models import CopyPlan, CopyPlanEntry, DateSource, ProcessError, SequenceKind
from . import time_utils

REPORT_FIELDNAMES = [
    "status",
    "source_path",
    "destination_path",
    "group_id",
    "format_class",
    "date_source",
    "code",
    "message",
]


@dataclass
class SummaryInfo:
    run_time: str
    mode: str
    source_dir: str
    output_dir: str
    scanned_files: int
    skipped_incremental: int
    threshold: Optional[str]
    planned_files: int
    exif_dated_files: int
    mtime_dated_files: int
    hdr_sequence_count: int
    burst_sequence_count: int
    conflict_count: int
    conflicted_file_count: int
    failure_counts: Dict[str, int]
    no_changes_needed: bool


def build_summary_info(
    plan: CopyPlan,
    *,
    mode: str,
    source_dir: Path,
    output_dir: Path,
    scanned_files: int,
    skipped_incremental: int = 0,
    threshold: Optional[float] = None,
) -> SummaryInfo:
    date_sources = Counter(entry.date_source for entry in plan.entries)
    kinds = Counter(group.kind for group in plan.sequence_groups)
    return SummaryInfo(
        run_time=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        mode=mode,
        source_dir=str(source_dir),
        output_dir=str(output_dir),
        scanned_files=scanned_files,
        skipped_incremental=skipped_incremental,
        threshold=time_utils.format_timestamp(threshold) if threshold is not None else None,
        planned_files=len(plan.entries),
        exif_dated_files=date_sources.get(DateSource.EXIF, 0),
        mtime_dated_files=date_sources.get(DateSource.FILE_MTIME, 0),
        hdr_sequence_count=kinds.get(SequenceKind.HDR, 0),
        burst_sequence_count=kinds.get(SequenceKind.BURST, 0),
        conflict_count=len(plan.conflicts),
        conflicted_file_count=sum(len(conflict.source_paths) for conflict in plan.conflicts),
        failure_counts=dict(sorted(Counter(failure.code for failure in plan.failures).items())),
        no_changes_needed=plan.is_empty,
    )


def build_summary_text(info: SummaryInfo) -> str:
    lines = [
        "=== exif-photo-sort summary ===",
        f"Run time: {info.run_time}",
        f"Mode: {info.mode}",
        f"Source: {info.source_dir}",
        f"Destination: {info.output_dir}",
        "",
        "--- Scan ---",
        f"Files found: {info.scanned_files}",
    ]
    if info.threshold is not None:
        lines.append(f"Incremental threshold: {info.threshold}")
        lines.append(f"Skipped as not newer: {info.skipped_incremental}")

    lines.extend(
        [
            "",
            "--- Plan ---",
            f"Files to copy: {info.planned_files}",
            f"Dated from EXIF: {info.exif_dated_files}",
            f"Dated from file mtime: {info.mtime_dated_files}",
            f"HDR sequences: {info.hdr_sequence_count}",
            f"BURST sequences: {info.burst_sequence_count}",
            "",
            "--- Problems ---",
            f"Conflicts: {info.conflict_count} ({info.conflicted_file_count} files excluded)",
        ]
    )
    if info.failure_counts:
        for code, count in info.failure_counts.items():
            lines.append(f"{code}: {count}")
    else:
        lines.append("Per-file failures: none")

    if info.no_changes_needed:
        lines.extend(["", "No files to process."])
    return "\n".join(lines) + "\n"


def format_conflicts(plan: CopyPlan) -> list[str]:
    lines = []
    for conflict in plan.conflicts:
        sources = ", ".join(str(path) for path in conflict.source_paths)
        lines.append(f"  {conflict.reason.value}: {conflict.destination_path} <- {sources}")
    return lines


def format_failures(failures: Iterable[ProcessError]) -> list[str]:
    return [f"  {failure.code}: {failure.file_path or '-'} - {failure.message}" for failure in failures]


def format_plan_lines(entries: Iterable[CopyPlanEntry]) -> list[str]:
    return [f"Would copy {entry.source_path} -> {entry.destination_path}" for entry in entries]


def write_report_csv(
    report_path: Path,
    plan: CopyPlan,
    executed: Iterable[CopyPlanEntry] = (),
    failed: Iterable[ProcessError] = (),
) -> Path:
    executed_sources = {entry.source_path for entry in executed}
    failed_by_source = {failure.file_path: failure for failure in failed}

    report_path.parent.mkdir(parents=True, exist_ok=True)
    with report_path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=REPORT_FIELDNAMES)
        writer.writeheader()
        for entry in plan.entries:
            failure = failed_by_source.get(str(entry.source_path))
            if failure is not None:
                status = "FAILED"
            elif entry.source_path in executed_sources:
                status = "COPIED"
            else:
                status = "PLANNED"
            row = entry.to_dict()
            row.update(
                status=status,
                code=failure.code if failure else None,
                message=failure.message if failure else None,
            )
            writer.writerow(row)
        for conflict in plan.conflicts:
            for source_path in conflict.source_paths:
                writer.writerow(
                    {
                        "status": "CONFLICT",
                        "source_path": str(source_path),
                        "destination_path": str(conflict.destination_path),
                        "code": conflict.reason.value,
                    }
                )
        for failure in plan.failures:
            writer.writerow(
                {
                    "status": "ISSUE",
                    "source_path": failure.file_path,
                    "code": failure.code,
                    "message": failure.message,
                }
            )
    return report_path
