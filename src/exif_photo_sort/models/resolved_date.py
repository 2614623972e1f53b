"""Capture date chosen for a file."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class DateSource(str, Enum):
    EXIF = "Exif"
    FILE_MTIME = "FileMTime"


@dataclass(frozen=True)
class ResolvedDate:
    year: int
    month: int
    day: int
    timestamp: datetime
    date_source: DateSource

    @classmethod
    def from_datetime(cls, value: datetime, source: DateSource) -> "ResolvedDate":
        return cls(
            year=value.year,
            month=value.month,
            day=value.day,
            timestamp=value,
            date_source=source,
        )

    @property
    def key(self) -> tuple[int, int, int]:
        return self.year, self.month, self.day

    def folder_parts(self) -> tuple[str, str, str]:
        return f"{self.year:04d}", f"{self.month:02d}", f"{self.day:02d}"
