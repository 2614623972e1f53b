"""Destination planning and conflict detection."""

from __future__ import annotations

from collections import defaultdict
import os
from pathlib import Path
from typing import Iterable, Sequence

from ..config import ConfigManager
from ..models import (
    Conflict,
    ConflictReason,
    CopyPlan,
    CopyPlanEntry,
    FormatClass,
    PhotoBundle,
    PhotoFile,
    PhotoRecord,
    ProcessError,
    SequenceGroup,
)
from ..utils.file_classifier import FormatClassifier
from ..utils.logger import get_logger


class PlanBuilder:
    def __init__(self, config: ConfigManager, logger=None) -> None:
        self.logger = logger or get_logger(self.__class__.__name__)
        self.classifier = FormatClassifier(config)

    def build(
        self,
        groups: Sequence[SequenceGroup],
        output_root: Path,
        failures: Iterable[ProcessError] = (),
    ) -> CopyPlan:
        candidates: list[CopyPlanEntry] = []
        for group in groups:
            for record in group.members:
                candidates.extend(self._entries_for(record, group.folder_name, output_root))

        by_destination: dict[Path, list[CopyPlanEntry]] = defaultdict(list)
        for entry in candidates:
            by_destination[entry.destination_path].append(entry)

        entries: list[CopyPlanEntry] = []
        conflicts: list[Conflict] = []
        for destination, competing in by_destination.items():
            if len(competing) > 1:
                conflicts.append(
                    Conflict(
                        destination_path=destination,
                        source_paths=tuple(sorted((item.source_path for item in competing), key=str)),
                        reason=ConflictReason.DUPLICATE_DESTINATION,
                    )
                )
                continue
            entry = competing[0]
            if os.path.lexists(destination):
                conflicts.append(
                    Conflict(
                        destination_path=destination,
                        source_paths=(entry.source_path,),
                        reason=ConflictReason.DESTINATION_EXISTS,
                    )
                )
                continue
            entries.append(entry)

        entries.sort(key=lambda item: str(item.source_path))
        conflicts.sort(key=lambda item: str(item.destination_path))
        for conflict in conflicts:
            self.logger.warning(
                f"Conflict ({conflict.reason.value}): {conflict.destination_path} "
                f"<- {', '.join(str(path) for path in conflict.source_paths)}"
            )

        return CopyPlan(
            entries=tuple(entries),
            conflicts=tuple(conflicts),
            failures=tuple(failures),
            groups=tuple(groups),
        )

    def format_dir(self, member: PhotoFile, bundle: PhotoBundle) -> FormatClass:
        """RAW/JPEG folder for a file; sidecars follow their paired photo."""
        if member.format_class != FormatClass.SIDECAR:
            return member.format_class
        inner = self.classifier.photo_class_for_ext(member.inner_ext)
        if inner is not None:
            return inner
        representative = bundle.representative
        if representative is not None:
            return representative.format_class
        return FormatClass.JPEG

    def _entries_for(
        self,
        record: PhotoRecord,
        folder_name: str | None,
        output_root: Path,
    ) -> list[CopyPlanEntry]:
        year, month, day = record.resolved_date.folder_parts()
        entries = []
        for member in record.bundle.members:
            target_dir = output_root / self.format_dir(member, record.bundle).value / year / month / day
            if folder_name is not None:
                target_dir = target_dir / folder_name
            entries.append(
                CopyPlanEntry(
                    source_path=member.path,
                    destination_path=target_dir / member.name,
                    group_id=folder_name,
                    format_class=member.format_class,
                    date_source=record.resolved_date.date_source,
                )
            )
        return entries
