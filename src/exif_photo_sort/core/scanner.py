"""Directory traversal producing PhotoFile records."""

from __future__ import annotations

from dataclasses import dataclass, field
import os
from pathlib import Path
from typing import Callable, Optional

from ..config import ConfigManager
from ..errors import InvalidInputRoot
from ..models import ErrorCode, PhotoFile, ProcessError
from ..utils import path_utils
from ..utils.error_handler import ErrorHandler
from ..utils.file_classifier import FormatClassifier
from ..utils.logger import get_logger


@dataclass
class ScanResult:
    files: list[PhotoFile] = field(default_factory=list)
    failures: list[ProcessError] = field(default_factory=list)


class FileScanner:
    def __init__(self, config: ConfigManager, logger=None) -> None:
        self.config = config
        self.logger = logger or get_logger(self.__class__.__name__)
        self.classifier = FormatClassifier(config)
        self.exclude_patterns = list(config.get("scan.exclude_patterns", []))

    def should_exclude_path(self, path: Path) -> bool:
        return path_utils.should_exclude_path(path, self.exclude_patterns, self.logger)

    def scan_directory(
        self,
        root: Path,
        progress_callback: Optional[Callable[[int], None]] = None,
    ) -> ScanResult:
        if not root.is_dir():
            raise InvalidInputRoot(f"Input directory does not exist or is not a directory: {root}")
        try:
            with os.scandir(root) as entries:
                next(entries, None)
        except OSError as exc:
            raise InvalidInputRoot(f"Input directory cannot be read: {root} ({exc})") from exc

        errors = ErrorHandler()
        files: list[PhotoFile] = []
        processed = 0

        def on_walk_error(exc: OSError) -> None:
            self._record_os_error(errors, Path(exc.filename or root), exc)

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_walk_error):
            current_dir = Path(dirpath)
            dirnames[:] = sorted(
                name for name in dirnames if not self.should_exclude_path(current_dir / name)
            )

            for name in sorted(filenames):
                file_path = current_dir / name
                if self.should_exclude_path(file_path):
                    continue

                photo_file = self._build_photo_file(file_path, errors)
                if photo_file is not None:
                    files.append(photo_file)

                processed += 1
                if progress_callback:
                    progress_callback(processed)

        return ScanResult(files=files, failures=errors.errors)

    def _build_photo_file(self, path: Path, errors: ErrorHandler) -> Optional[PhotoFile]:
        try:
            stat = path.stat()
        except OSError as exc:
            self._record_os_error(errors, path, exc)
            return None
        if not path.is_file():
            return None
        if not os.access(path, os.R_OK):
            self.logger.warning(f"Permission denied: {path}")
            errors.add_warning(ErrorCode.PERMISSION_DENIED, "Source file is not readable", path)
            return None

        ext = path.suffix.lower()
        return PhotoFile(
            path=path.absolute(),
            ext=ext,
            format_class=self.classifier.classify_ext(ext),
            mtime=stat.st_mtime,
        )

    def _record_os_error(self, errors: ErrorHandler, path: Path, exc: OSError) -> None:
        self.logger.warning(f"Cannot read file info: {path} ({exc})")
        if isinstance(exc, PermissionError):
            errors.add_warning(ErrorCode.PERMISSION_DENIED, str(exc), path)
        else:
            errors.add_warning(ErrorCode.UNREADABLE_SOURCE, str(exc), path)
