"""File format classification."""

from __future__ import annotations

from typing import Optional

from ..models import FormatClass

DEFAULT_RAW_EXTS = {".cr2", ".cr3", ".nef", ".arw", ".dng", ".raw", ".orf", ".rw2", ".raf"}
DEFAULT_JPEG_EXTS = {".jpg", ".jpeg"}


class FormatClassifier:
    def __init__(self, config=None) -> None:
        raw_exts = DEFAULT_RAW_EXTS
        jpeg_exts = DEFAULT_JPEG_EXTS
        if config is not None:
            raw_exts = {str(item).lower() for item in config.get("file_extensions.raw", sorted(raw_exts))}
            jpeg_exts = {str(item).lower() for item in config.get("file_extensions.jpeg", sorted(jpeg_exts))}
        self.raw_exts = raw_exts
        self.jpeg_exts = jpeg_exts

    def classify_ext(self, ext: str) -> FormatClass:
        ext = (ext or "").lower()
        if ext in self.raw_exts:
            return FormatClass.RAW
        if ext in self.jpeg_exts:
            return FormatClass.JPEG
        return FormatClass.SIDECAR

    def photo_class_for_ext(self, ext: Optional[str]) -> Optional[FormatClass]:
        """RAW/JPEG for a photo extension, None otherwise."""
        if ext is None:
            return None
        format_class = self.classify_ext(ext)
        if format_class == FormatClass.SIDECAR:
            return None
        return format_class
