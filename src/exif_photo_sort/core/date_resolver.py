"""Capture date resolution with mtime fallback."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..config import ConfigManager
from ..models import DateSource, PhotoFile, PhotoMetadata, ResolvedDate
from ..utils import time_utils


class DateResolver:
    """Camera local time is taken as-is; no timezone conversion happens."""

    def __init__(self, config: ConfigManager) -> None:
        self.min_year = int(config.get("date.min_year", 1990))
        self.max_year = int(config.get("date.max_year", 2050))

    def parse_capture_time(self, metadata: PhotoMetadata) -> tuple[Optional[datetime], Optional[str]]:
        """Return (capture time, rejection reason).

        The reason is only set when a value was present but unusable.
        """
        raw_value = metadata.datetime_original
        if raw_value is None:
            return None, None
        parsed = time_utils.parse_exif_datetime(raw_value)
        if parsed is None:
            return None, f"Unparsable DateTimeOriginal: {raw_value!r}"
        if not (self.min_year <= parsed.year <= self.max_year):
            return None, (
                f"DateTimeOriginal {raw_value!r} outside {self.min_year}-{self.max_year}"
            )
        return parsed, None

    def resolve(self, photo_file: PhotoFile, metadata: PhotoMetadata) -> ResolvedDate:
        capture_time, _reason = self.parse_capture_time(metadata)
        if capture_time is not None:
            return ResolvedDate.from_datetime(capture_time, DateSource.EXIF)
        return self.from_mtime(photo_file)

    def from_mtime(self, photo_file: PhotoFile) -> ResolvedDate:
        return ResolvedDate.from_datetime(time_utils.from_mtime(photo_file.mtime), DateSource.FILE_MTIME)
