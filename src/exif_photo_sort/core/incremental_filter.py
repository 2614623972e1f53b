"""Incremental mode: only files newer than the newest photo already copied."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from ..config import ConfigManager
from ..models import FormatClass, PhotoBundle
from ..utils import path_utils, time_utils
from ..utils.file_classifier import FormatClassifier
from ..utils.logger import get_logger

MIN_TIMESTAMP = float("-inf")


class IncrementalFilter:
    def __init__(self, config: ConfigManager, logger=None) -> None:
        self.logger = logger or get_logger(self.__class__.__name__)
        self.classifier = FormatClassifier(config)

    def threshold(self, output_root: Path) -> float:
        """Newest photo mtime under `{root}/{RAW|JPEG}/YYYY/MM/DD`.

        Day folders are visited newest date first and the scan stops at the
        first one that holds nothing newer than what was already found.
        """
        day_dirs: list[tuple[tuple[int, int, int], Path]] = []
        for format_class in (FormatClass.RAW, FormatClass.JPEG):
            format_dir = output_root / format_class.value
            if not format_dir.is_dir():
                continue
            for year, year_dir in path_utils.numeric_subdirs(format_dir):
                for month, month_dir in path_utils.numeric_subdirs(year_dir):
                    for day, day_dir in path_utils.numeric_subdirs(month_dir):
                        day_dirs.append(((year, month, day), day_dir))
        day_dirs.sort(key=lambda item: item[0], reverse=True)

        best = MIN_TIMESTAMP
        files_checked = 0
        for _date_key, day_dir in day_dirs:
            newest, count = self._newest_photo_mtime(day_dir)
            files_checked += count
            if count == 0:
                continue
            if newest <= best:
                break
            best = newest

        if files_checked:
            self.logger.info(
                f"Scanned {files_checked} files in destination; newest: {time_utils.format_timestamp(best)}"
            )
        else:
            self.logger.info("No photo files found in destination directory")
        return best

    def filter(self, bundles: Iterable[PhotoBundle], threshold: float) -> list[PhotoBundle]:
        """Keep whole bundles with at least one member newer than `threshold`.

        An edited sidecar brings its photo back along with it, so both keep
        the photo's date and folder.
        """
        return [
            bundle for bundle in bundles if any(member.mtime > threshold for member in bundle.members)
        ]

    def _newest_photo_mtime(self, day_dir: Path) -> tuple[float, int]:
        newest = MIN_TIMESTAMP
        count = 0
        # sequence folders sit one level below the day folder
        for dirpath, _dirnames, filenames in os.walk(day_dir):
            for name in filenames:
                path = Path(dirpath) / name
                if self.classifier.classify_ext(path.suffix) == FormatClass.SIDECAR:
                    continue
                try:
                    mtime = path.stat().st_mtime
                except OSError as exc:
                    self.logger.warning(f"Cannot stat destination file: {path} ({exc})")
                    continue
                count += 1
                newest = max(newest, mtime)
        return newest, count
