"""Per-file capture metadata as returned by a metadata backend."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

DATETIME_ORIGINAL_TAG = "DateTimeOriginal"
DRIVE_MODE_TAG = "DriveMode"
SPECIAL_MODE_TAG = "SpecialMode"

REQUESTED_TAGS = (DATETIME_ORIGINAL_TAG, DRIVE_MODE_TAG, SPECIAL_MODE_TAG)


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="ignore")
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class PhotoMetadata:
    datetime_original: Optional[str] = None
    drive_mode: Optional[str] = None
    special_mode: Optional[str] = None

    @classmethod
    def from_tags(cls, tags: Mapping[str, Any]) -> "PhotoMetadata":
        return cls(
            datetime_original=_text(tags.get(DATETIME_ORIGINAL_TAG)),
            drive_mode=_text(tags.get(DRIVE_MODE_TAG)),
            special_mode=_text(tags.get(SPECIAL_MODE_TAG)),
        )


EMPTY_METADATA = PhotoMetadata()
