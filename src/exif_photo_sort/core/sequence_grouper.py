"""HDR and burst sequence detection for one date bucket."""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial, reduce
import re
from typing import Iterable, Optional, Sequence

from ..config import ConfigManager
from ..models import PhotoMetadata, PhotoRecord, SequenceGroup, SequenceKind
from ..utils.logger import get_logger

Run = tuple[PhotoRecord, ...]
_FoldState = tuple[tuple[Run, ...], Run, Optional[int]]

HDR_FIRST_SHOT = 1


@dataclass(frozen=True)
class HdrPredicate:
    """Drive-mode matcher: all keywords of any one set, plus a shot number."""

    keyword_sets: tuple[tuple[str, ...], ...]
    shot_pattern: re.Pattern

    @classmethod
    def from_config(cls, config: ConfigManager) -> "HdrPredicate":
        keyword_sets = config.get(
            "sequence.hdr_keyword_sets",
            [["AE Auto Bracketing", "Electronic shutter"]],
        )
        return cls(
            keyword_sets=tuple(tuple(str(word).lower() for word in words) for words in keyword_sets),
            shot_pattern=re.compile(str(config.get("sequence.hdr_shot_pattern", r"Shot\s+(\d+)"))),
        )

    def matches(self, drive_mode: Optional[str]) -> bool:
        if not drive_mode:
            return False
        lowered = drive_mode.lower()
        return any(all(word in lowered for word in words) for words in self.keyword_sets)

    def shot_number(self, metadata: PhotoMetadata) -> Optional[int]:
        if not self.matches(metadata.drive_mode):
            return None
        match = self.shot_pattern.search(metadata.drive_mode or "")
        if match is None:
            return None
        return int(match.group(1))


def burst_number(metadata: PhotoMetadata, pattern: re.Pattern) -> Optional[int]:
    if not metadata.special_mode:
        return None
    match = pattern.search(metadata.special_mode)
    if match is None:
        return None
    number = int(match.group(1))
    # cameras report "Sequence: 0" for single shots
    return number or None


def _closed(run: Run) -> tuple[Run, ...]:
    return (run,) if len(run) >= 2 else ()


def _step(
    start: Optional[int],
    state: _FoldState,
    item: tuple[PhotoRecord, Optional[int]],
) -> _FoldState:
    closed, current, last = state
    record, number = item
    if number is None:
        return closed + _closed(current), (), None
    if current and last is not None and number == last + 1:
        return closed, current + (record,), number
    if start is not None and number != start:
        return closed + _closed(current), (), None
    return closed + _closed(current), (record,), number


def fold_runs(
    items: Iterable[tuple[PhotoRecord, Optional[int]]],
    start: Optional[int] = None,
) -> tuple[Run, ...]:
    """Split (record, number) pairs into runs of strictly consecutive numbers.

    A missing number or a gap closes the current run. With `start` set, a run
    only opens on that number. Runs shorter than two are dropped.
    """
    closed, current, _last = reduce(partial(_step, start), items, ((), (), None))
    return closed + _closed(current)


class SequenceGrouper:
    def __init__(self, config: ConfigManager, logger=None) -> None:
        self.logger = logger or get_logger(self.__class__.__name__)
        self.hdr_predicate = HdrPredicate.from_config(config)
        self.burst_pattern = re.compile(
            str(config.get("sequence.burst_sequence_pattern", r"Sequence:\s*(\d+)"))
        )

    def group(self, records: Sequence[PhotoRecord]) -> list[SequenceGroup]:
        """Group records of one date bucket; HDR claims records before burst."""
        ordered = sorted(records, key=lambda record: record.sort_key)

        # a bracket always opens on its first shot
        hdr_runs = fold_runs(
            ((record, self.hdr_predicate.shot_number(record.metadata)) for record in ordered),
            start=HDR_FIRST_SHOT,
        )
        claimed = {record.bundle.key for run in hdr_runs for record in run}

        burst_runs = fold_runs(
            (record, burst_number(record.metadata, self.burst_pattern))
            for record in ordered
            if record.bundle.key not in claimed
        )
        claimed.update(record.bundle.key for run in burst_runs for record in run)

        groups = [SequenceGroup(kind=SequenceKind.HDR, members=run) for run in hdr_runs]
        groups.extend(SequenceGroup(kind=SequenceKind.BURST, members=run) for run in burst_runs)
        groups.extend(
            SequenceGroup(kind=SequenceKind.NONE, members=(record,))
            for record in ordered
            if record.bundle.key not in claimed
        )

        position = {record.bundle.key: index for index, record in enumerate(ordered)}
        groups.sort(key=lambda group: position[group.members[0].bundle.key])

        if hdr_runs or burst_runs:
            self.logger.info(
                f"Detected {len(hdr_runs)} HDR and {len(burst_runs)} BURST sequences "
                f"among {len(ordered)} photos"
            )
        return groups
