"""Files of one shot: same folder, same base name."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from .photo_file import FormatClass, PhotoFile
from .photo_metadata import PhotoMetadata
from .resolved_date import ResolvedDate


@dataclass(frozen=True)
class PhotoBundle:
    folder: Path
    base_name: str
    members: tuple[PhotoFile, ...]

    @property
    def representative(self) -> Optional[PhotoFile]:
        """JPEG first, then RAW; None for a bundle made only of sidecars."""
        for format_class in (FormatClass.JPEG, FormatClass.RAW):
            for member in self.members:
                if member.format_class == format_class:
                    return member
        return None

    @property
    def key(self) -> tuple[str, str]:
        return str(self.folder), self.base_name


@dataclass(frozen=True)
class PhotoRecord:
    bundle: PhotoBundle
    metadata: PhotoMetadata
    resolved_date: ResolvedDate

    @property
    def name(self) -> str:
        return self.bundle.base_name

    @property
    def sort_key(self) -> tuple[datetime, str, str]:
        return self.resolved_date.timestamp, self.bundle.base_name, str(self.bundle.folder)
