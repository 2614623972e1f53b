"""Discovered source files."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class FormatClass(str, Enum):
    RAW = "RAW"
    JPEG = "JPEG"
    SIDECAR = "SIDECAR"


@dataclass(frozen=True)
class PhotoFile:
    path: Path
    ext: str
    format_class: FormatClass
    mtime: float

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def base_name(self) -> str:
        """Text before the first dot; `P1.ORF.xmp` and `P1.JPG` share `P1`."""
        return self.path.name.split(".", 1)[0]

    @property
    def inner_ext(self) -> Optional[str]:
        parts = self.path.name.split(".")
        if len(parts) < 3:
            return None
        return f".{parts[-2].lower()}"
