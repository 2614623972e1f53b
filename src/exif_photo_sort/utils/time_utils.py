"""Timestamp parsing helpers."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"

# exiftool may append sub-seconds and/or a zone: "2024:07:15 14:30:00.12+02:00"
_EXIF_DATETIME_RE = re.compile(r"^(\d{4}:\d{2}:\d{2} \d{2}:\d{2}:\d{2})(?:\.\d+)?(?:Z|[+-]\d{2}:?\d{2})?$")


def parse_exif_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an EXIF local date-time. The zone suffix is dropped, not applied."""
    if not value:
        return None
    match = _EXIF_DATETIME_RE.match(value.strip())
    if match is None:
        return None
    try:
        return datetime.strptime(match.group(1), EXIF_DATETIME_FORMAT)
    except ValueError:
        return None


def from_mtime(mtime: float) -> datetime:
    return datetime.fromtimestamp(mtime)


def format_timestamp(value: float) -> str:
    if value == float("-inf"):
        return "(none)"
    return datetime.fromtimestamp(value).strftime("%Y-%m-%d %H:%M:%S")
