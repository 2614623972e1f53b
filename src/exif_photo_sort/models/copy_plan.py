"""Copy plan handed to the executor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .error_record import ProcessError
from .photo_file import FormatClass
from .resolved_date import DateSource
from .sequence_group import SequenceGroup


@dataclass(frozen=True)
class CopyPlanEntry:
    source_path: Path
    destination_path: Path
    group_id: Optional[str] = None
    format_class: Optional[FormatClass] = None
    date_source: Optional[DateSource] = None

    def to_dict(self) -> dict[str, object]:
        return {
            "source_path": str(self.source_path),
            "destination_path": str(self.destination_path),
            "group_id": self.group_id,
            "format_class": self.format_class.value if self.format_class else None,
            "date_source": self.date_source.value if self.date_source else None,
        }


class ConflictReason(str, Enum):
    DESTINATION_EXISTS = "DESTINATION_EXISTS"
    DUPLICATE_DESTINATION = "DUPLICATE_DESTINATION"


@dataclass(frozen=True)
class Conflict:
    destination_path: Path
    source_paths: tuple[Path, ...]
    reason: ConflictReason


@dataclass(frozen=True)
class CopyPlan:
    entries: tuple[CopyPlanEntry, ...] = ()
    conflicts: tuple[Conflict, ...] = ()
    failures: tuple[ProcessError, ...] = ()
    groups: tuple[SequenceGroup, ...] = ()

    @property
    def sequence_groups(self) -> tuple[SequenceGroup, ...]:
        return tuple(group for group in self.groups if group.folder_name is not None)

    @property
    def is_empty(self) -> bool:
        return not self.entries
