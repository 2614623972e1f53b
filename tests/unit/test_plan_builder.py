from datetime import datetime
from pathlib import Path

from exif_photo_sort.config import ConfigManager
from exif_photo_sort.core import PlanBuilder
from exif_photo_sort.models import (
    ConflictReason,
    DateSource,
    ErrorCode,
    ErrorLevel,
    FormatClass,
    PhotoBundle,
    PhotoFile,
    PhotoMetadata,
    PhotoRecord,
    ProcessError,
    ResolvedDate,
    SequenceGroup,
    SequenceKind,
)
from exif_photo_sort.utils.file_classifier import FormatClassifier

CAPTURED = datetime(2024, 7, 15, 14, 30, 0)


def _record(folder: Path, *names: str, source: DateSource = DateSource.EXIF) -> PhotoRecord:
    classifier = FormatClassifier()
    members = tuple(
        PhotoFile(
            path=folder / name,
            ext=Path(name).suffix.lower(),
            format_class=classifier.classify_ext(Path(name).suffix),
            mtime=0.0,
        )
        for name in names
    )
    return PhotoRecord(
        bundle=PhotoBundle(folder=folder, base_name=names[0].split(".", 1)[0], members=members),
        metadata=PhotoMetadata(),
        resolved_date=ResolvedDate.from_datetime(CAPTURED, source),
    )


def _single(record: PhotoRecord) -> SequenceGroup:
    return SequenceGroup(kind=SequenceKind.NONE, members=(record,))


def _destinations(plan) -> dict[str, Path]:
    return {entry.source_path.name: entry.destination_path for entry in plan.entries}


def test_single_photo_layout(tmp_path: Path) -> None:
    output = tmp_path / "out"
    record = _record(tmp_path / "in", "P1.JPG")

    plan = PlanBuilder(ConfigManager()).build([_single(record)], output)

    assert len(plan.entries) == 1
    entry = plan.entries[0]
    assert entry.destination_path == output / "JPEG" / "2024" / "07" / "15" / "P1.JPG"
    assert entry.group_id is None
    assert entry.date_source == DateSource.EXIF
    assert plan.conflicts == ()


def test_sequence_folder_and_sidecar_routing(tmp_path: Path) -> None:
    source = tmp_path / "in"
    output = tmp_path / "out"
    first = _record(source, "P1.JPG", "P1.ORF", "P1.ORF.xmp")
    second = _record(source, "P2.JPG", "P2.ORF")
    group = SequenceGroup(kind=SequenceKind.HDR, members=(first, second))

    plan = PlanBuilder(ConfigManager()).build([group], output)

    day = ("2024", "07", "15")
    destinations = _destinations(plan)
    assert destinations["P1.JPG"] == output.joinpath("JPEG", *day, "P1_HDR", "P1.JPG")
    assert destinations["P1.ORF"] == output.joinpath("RAW", *day, "P1_HDR", "P1.ORF")
    assert destinations["P1.ORF.xmp"] == output.joinpath("RAW", *day, "P1_HDR", "P1.ORF.xmp")
    assert destinations["P2.ORF"] == output.joinpath("RAW", *day, "P1_HDR", "P2.ORF")
    assert {entry.group_id for entry in plan.entries} == {"P1_HDR"}
    assert len(plan.sequence_groups) == 1


def test_format_dir_for_sidecars(tmp_path: Path) -> None:
    builder = PlanBuilder(ConfigManager())

    raw_pair = _record(tmp_path, "P1.ORF", "P1.xmp").bundle
    jpeg_only = _record(tmp_path, "P2.JPG", "P2.xmp").bundle
    orphan = _record(tmp_path, "P3.xmp").bundle
    inner = _record(tmp_path, "P4.ORF", "P4.JPG", "P4.ORF.xmp").bundle
    pair = _record(tmp_path, "P5.JPG", "P5.ORF", "P5.xmp").bundle

    assert builder.format_dir(raw_pair.members[1], raw_pair) == FormatClass.RAW
    assert builder.format_dir(jpeg_only.members[1], jpeg_only) == FormatClass.JPEG
    assert builder.format_dir(orphan.members[0], orphan) == FormatClass.JPEG
    assert builder.format_dir(inner.members[2], inner) == FormatClass.RAW
    # a bare sidecar follows the representative, which is the JPEG
    assert builder.format_dir(pair.members[2], pair) == FormatClass.JPEG


def test_bare_sidecar_lands_beside_the_jpeg(tmp_path: Path) -> None:
    output = tmp_path / "out"
    record = _record(tmp_path / "in", "P1.JPG", "P1.ORF", "P1.xmp")

    plan = PlanBuilder(ConfigManager()).build([_single(record)], output)

    destinations = _destinations(plan)
    assert destinations["P1.xmp"] == output / "JPEG" / "2024" / "07" / "15" / "P1.xmp"
    assert destinations["P1.ORF"] == output / "RAW" / "2024" / "07" / "15" / "P1.ORF"


def test_duplicate_destination_is_one_conflict(tmp_path: Path) -> None:
    output = tmp_path / "out"
    card_a = _record(tmp_path / "card_a", "P1.JPG")
    card_b = _record(tmp_path / "card_b", "P1.JPG")
    other = _record(tmp_path / "card_a", "P2.JPG")

    plan = PlanBuilder(ConfigManager()).build([_single(card_a), _single(card_b), _single(other)], output)

    assert len(plan.conflicts) == 1
    conflict = plan.conflicts[0]
    assert conflict.reason == ConflictReason.DUPLICATE_DESTINATION
    assert set(conflict.source_paths) == {tmp_path / "card_a" / "P1.JPG", tmp_path / "card_b" / "P1.JPG"}
    assert [entry.source_path.name for entry in plan.entries] == ["P2.JPG"]


def test_existing_destination_is_excluded(tmp_path: Path) -> None:
    output = tmp_path / "out"
    existing = output / "JPEG" / "2024" / "07" / "15" / "P1.JPG"
    existing.parent.mkdir(parents=True)
    existing.write_bytes(b"already here")
    records = [_record(tmp_path / "in", "P1.JPG"), _record(tmp_path / "in", "P2.JPG")]

    plan = PlanBuilder(ConfigManager()).build([_single(record) for record in records], output)

    assert [conflict.reason for conflict in plan.conflicts] == [ConflictReason.DESTINATION_EXISTS]
    assert plan.conflicts[0].destination_path == existing
    assert [entry.source_path.name for entry in plan.entries] == ["P2.JPG"]


def test_mtime_dated_record_and_failures_pass_through(tmp_path: Path) -> None:
    record = _record(tmp_path / "in", "P1.JPG", source=DateSource.FILE_MTIME)
    failure = ProcessError(
        code=ErrorCode.EXTRACTION_FAILED,
        level=ErrorLevel.RECOVERABLE,
        message="exiftool failed",
        file_path=str(tmp_path / "in" / "P1.JPG"),
    )

    plan = PlanBuilder(ConfigManager()).build([_single(record)], tmp_path / "out", [failure])

    assert plan.entries[0].date_source == DateSource.FILE_MTIME
    assert plan.failures == (failure,)
