"""Metadata backends.

A backend turns one file path into a mapping of tag name to value. Three are
provided: exiftool (production, needed for DriveMode/SpecialMode maker-note
fields), Pillow/piexif (DateTimeOriginal only, no external tool) and an
in-memory one for tests.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol, Union

import exiftool
import piexif
import PIL
from exiftool.exceptions import ExifToolException
from PIL import Image

from ..errors import BackendUnavailable, ExtractionFailed
from ..models.photo_metadata import DATETIME_ORIGINAL_TAG, REQUESTED_TAGS
from ..utils.logger import get_logger

EXIFTOOL_INSTALL_HINT = """Please install exiftool to use this program:
- On Ubuntu/Debian: sudo apt install libimage-exiftool-perl
- On macOS: brew install exiftool
- On other systems: https://exiftool.org/install.html"""


class MetadataBackend(Protocol):
    name: str

    def check_available(self) -> str:
        """Return a version string or raise BackendUnavailable."""
        ...

    def read(self, path: Path) -> dict[str, Any]:
        """Return tag values for one file or raise ExtractionFailed."""
        ...

    def close(self) -> None:
        ...


class ExifToolBackend:
    name = "exiftool"

    def __init__(self, executable: str = "exiftool", logger=None) -> None:
        self.executable = executable
        self.logger = logger or get_logger(self.__class__.__name__)
        self._local = threading.local()
        self._lock = threading.Lock()
        self._helpers: list[exiftool.ExifToolHelper] = []

    def check_available(self) -> str:
        try:
            with exiftool.ExifToolHelper(executable=self.executable, common_args=[]) as helper:
                version = str(helper.version)
        except (OSError, ExifToolException) as exc:
            raise BackendUnavailable(
                self.name,
                f"'{self.executable}' is not installed or not found in PATH ({exc})",
                EXIFTOOL_INSTALL_HINT,
            ) from exc
        self.logger.info(f"Found exiftool version: {version}")
        return version

    def read(self, path: Path) -> dict[str, Any]:
        helper = self._helper()
        try:
            records = helper.get_tags([str(path)], tags=list(REQUESTED_TAGS))
        except (ExifToolException, ValueError) as exc:
            raise ExtractionFailed(path, f"exiftool failed: {exc}") from exc
        except OSError as exc:
            # the exiftool process died; the next read on this thread starts a new one
            self._discard_helper(helper)
            raise ExtractionFailed(path, f"exiftool process error: {exc}") from exc
        if not records:
            raise ExtractionFailed(path, "exiftool returned no record")
        record = dict(records[0])
        if "Error" in record:
            raise ExtractionFailed(path, str(record["Error"]))
        return record

    def close(self) -> None:
        with self._lock:
            helpers, self._helpers = self._helpers, []
        for helper in helpers:
            if helper.running:
                helper.terminate()

    def _helper(self) -> exiftool.ExifToolHelper:
        helper = getattr(self._local, "helper", None)
        if helper is None:
            # one exiftool process per worker thread; a helper is not thread-safe
            helper = exiftool.ExifToolHelper(executable=self.executable, common_args=[])
            with self._lock:
                self._helpers.append(helper)
            self._local.helper = helper
        return helper

    def _discard_helper(self, helper: exiftool.ExifToolHelper) -> None:
        self._local.helper = None
        with self._lock:
            if helper in self._helpers:
                self._helpers.remove(helper)
        try:
            if helper.running:
                helper.terminate()
        except (OSError, ExifToolException) as exc:
            self.logger.warning(f"Cannot stop exiftool process: {exc}")


class PillowBackend:
    name = "pillow"

    def __init__(self, logger=None) -> None:
        self.logger = logger or get_logger(self.__class__.__name__)

    def check_available(self) -> str:
        return f"Pillow {PIL.__version__}, piexif {piexif.VERSION}"

    def read(self, path: Path) -> dict[str, Any]:
        try:
            with Image.open(path) as image:
                exif_bytes = image.info.get("exif")
        except (OSError, ValueError) as exc:
            raise ExtractionFailed(path, f"cannot open image: {exc}") from exc
        if not exif_bytes:
            return {}

        try:
            exif_dict = piexif.load(exif_bytes)
        except Exception as exc:  # noqa: BLE001 - piexif raises a mix of error types
            raise ExtractionFailed(path, f"cannot parse EXIF: {exc}") from exc
        value = exif_dict.get("Exif", {}).get(piexif.ExifIFD.DateTimeOriginal)
        if value is None:
            return {}
        if isinstance(value, bytes):
            value = value.decode("utf-8", errors="ignore")
        return {DATETIME_ORIGINAL_TAG: value}

    def close(self) -> None:
        return None


class InMemoryBackend:
    """Canned tag mappings keyed by path; unknown paths fail extraction."""

    name = "memory"

    def __init__(
        self,
        records: Optional[Mapping[Union[str, Path], Union[Mapping[str, Any], Exception]]] = None,
        *,
        available: bool = True,
    ) -> None:
        self._records = {str(key): value for key, value in (records or {}).items()}
        self.available = available
        self.calls: list[Path] = []
        self.closed = False
        self._lock = threading.Lock()

    def check_available(self) -> str:
        if not self.available:
            raise BackendUnavailable(self.name, "in-memory backend disabled")
        return "memory"

    def read(self, path: Path) -> dict[str, Any]:
        with self._lock:
            self.calls.append(path)
        value = self._records.get(str(path))
        if value is None:
            raise ExtractionFailed(path, "no metadata record")
        if isinstance(value, Exception):
            raise ExtractionFailed(path, str(value))
        return dict(value)

    def close(self) -> None:
        self.closed = True


def create_backend(config, logger=None) -> MetadataBackend:
    backend_name = str(config.get("metadata.backend", "exiftool"))
    if backend_name == "pillow":
        return PillowBackend(logger=logger)
    if backend_name == "exiftool":
        return ExifToolBackend(
            executable=str(config.get("metadata.exiftool_path", "exiftool")),
            logger=logger,
        )
    raise ValueError(f"Unknown metadata backend: {backend_name}")
