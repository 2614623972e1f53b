"""Exception hierarchy for exif-photo-sort."""

from __future__ import annotations

from pathlib import Path


class PhotoSortError(Exception):
    """Base class for all errors raised by exif-photo-sort."""


class BackendUnavailable(PhotoSortError):
    """Raised when the metadata backend cannot be started; aborts the run."""

    def __init__(self, backend: str, reason: str, remediation: str = "") -> None:
        self.backend = backend
        self.reason = reason
        self.remediation = remediation
        message = f"Metadata backend '{backend}' is unavailable: {reason}"
        if remediation:
            message = f"{message}\n\n{remediation}"
        super().__init__(message)


class InvalidInputRoot(PhotoSortError):
    """Raised when the input directory is missing or cannot be listed."""


class ExtractionFailed(PhotoSortError):
    """Metadata could not be read for a single file. Recoverable."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")
