"""Config validation."""

from __future__ import annotations

import re
from typing import Any


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def validate_config(config: dict[str, Any]) -> list[str]:
    errors: list[str] = []

    def add_error(path: str, message: str) -> None:
        errors.append(f"{path}: {message}")

    metadata = config.get("metadata", {})
    backend = metadata.get("backend")
    exiftool_path = metadata.get("exiftool_path")
    parallel_workers = metadata.get("parallel_workers")
    batch_size = metadata.get("batch_size")
    if backend not in {"exiftool", "pillow"}:
        add_error("metadata.backend", "must be 'exiftool' or 'pillow'")
    if not isinstance(exiftool_path, str) or not exiftool_path.strip():
        add_error("metadata.exiftool_path", "must be a non-empty string")
    if not isinstance(parallel_workers, int) or isinstance(parallel_workers, bool) or parallel_workers < 0:
        add_error("metadata.parallel_workers", "must be an integer >= 0 (0 = one per CPU)")
    if not isinstance(batch_size, int) or isinstance(batch_size, bool) or batch_size <= 0:
        add_error("metadata.batch_size", "must be a positive integer")

    date = config.get("date", {})
    min_year = date.get("min_year")
    max_year = date.get("max_year")
    if not isinstance(min_year, int) or not (1 <= min_year <= 9999):
        add_error("date.min_year", "must be an integer between 1 and 9999")
    if not isinstance(max_year, int) or not (1 <= max_year <= 9999):
        add_error("date.max_year", "must be an integer between 1 and 9999")
    if isinstance(min_year, int) and isinstance(max_year, int) and min_year > max_year:
        add_error("date", "min_year must not be greater than max_year")

    sequence = config.get("sequence", {})
    keyword_sets = sequence.get("hdr_keyword_sets")
    if not isinstance(keyword_sets, list) or not keyword_sets:
        add_error("sequence.hdr_keyword_sets", "must be a non-empty list of string lists")
    else:
        for index, keywords in enumerate(keyword_sets):
            if not _is_str_list(keywords) or not keywords:
                add_error(f"sequence.hdr_keyword_sets[{index}]", "must be a non-empty list of strings")
    for key in ("hdr_shot_pattern", "burst_sequence_pattern"):
        pattern = sequence.get(key)
        if not isinstance(pattern, str) or not pattern:
            add_error(f"sequence.{key}", "must be a non-empty string")
            continue
        try:
            compiled = re.compile(pattern)
        except re.error as exc:
            add_error(f"sequence.{key}", f"invalid regular expression ({exc})")
            continue
        if compiled.groups < 1:
            add_error(f"sequence.{key}", "must contain a capture group for the number")

    file_extensions = config.get("file_extensions", {})
    raw_exts = file_extensions.get("raw", [])
    jpeg_exts = file_extensions.get("jpeg", [])
    if not _is_str_list(raw_exts):
        add_error("file_extensions.raw", "must be a list of strings")
    if not _is_str_list(jpeg_exts):
        add_error("file_extensions.jpeg", "must be a list of strings")
    if _is_str_list(raw_exts) and _is_str_list(jpeg_exts):
        overlap = {item.lower() for item in raw_exts} & {item.lower() for item in jpeg_exts}
        if overlap:
            add_error("file_extensions", f"extensions listed as both raw and jpeg: {sorted(overlap)}")

    scan = config.get("scan", {})
    if not _is_str_list(scan.get("exclude_patterns", [])):
        add_error("scan.exclude_patterns", "must be a list of strings")

    retry = config.get("retry", {})
    max_retries = retry.get("max_retries", 3)
    backoff_base_sec = retry.get("backoff_base_sec", 0.5)
    backoff_cap_sec = retry.get("backoff_cap_sec", 10.0)
    if not isinstance(max_retries, int) or max_retries < 0:
        add_error("retry.max_retries", "must be an integer >= 0")
    if not isinstance(backoff_base_sec, (int, float)) or backoff_base_sec <= 0:
        add_error("retry.backoff_base_sec", "must be a number > 0")
    if not isinstance(backoff_cap_sec, (int, float)) or backoff_cap_sec <= 0:
        add_error("retry.backoff_cap_sec", "must be a number > 0")
    if (
        isinstance(backoff_base_sec, (int, float))
        and isinstance(backoff_cap_sec, (int, float))
        and backoff_base_sec > backoff_cap_sec
    ):
        add_error("retry", "backoff_base_sec must not exceed backoff_cap_sec")

    return errors
