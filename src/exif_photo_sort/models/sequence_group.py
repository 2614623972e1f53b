"""Grouping result for one date bucket."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .photo_bundle import PhotoRecord


class SequenceKind(str, Enum):
    NONE = "None"
    HDR = "HDR"
    BURST = "BURST"


@dataclass(frozen=True)
class SequenceGroup:
    kind: SequenceKind
    members: tuple[PhotoRecord, ...]

    def __post_init__(self) -> None:
        if not self.members:
            raise ValueError("SequenceGroup needs at least one member")
        if len(self.members) < 2 and self.kind != SequenceKind.NONE:
            raise ValueError("A single-member group cannot be a named sequence")

    @property
    def folder_name(self) -> Optional[str]:
        if self.kind == SequenceKind.NONE:
            return None
        return f"{self.members[0].bundle.base_name}_{self.kind.value}"
