import os
from datetime import datetime
from pathlib import Path

import pytest
from PIL import Image

from exif_photo_sort.config import ConfigManager
from exif_photo_sort.core import InMemoryBackend, Pipeline, PlanExecutor
from exif_photo_sort.errors import BackendUnavailable, InvalidInputRoot
from exif_photo_sort.models import ConflictReason, DateSource, ErrorCode, ErrorLevel, SequenceKind

HDR_MODE = "Continuous Shooting, AE Auto Bracketing, Electronic shutter, Shot {}"
SOURCE_MTIME = datetime(2024, 8, 1, 12, 0).timestamp()


def _create_image(path: Path, mtime: float = SOURCE_MTIME) -> None:
    image = Image.new("RGB", (64, 48), color=(0, 128, 255))
    image.save(path, "jpeg")
    os.utime(path, (mtime, mtime))


def _create_raw(path: Path, mtime: float = SOURCE_MTIME) -> None:
    path.write_bytes(b"raw-data")
    os.utime(path, (mtime, mtime))


def _build_source(source: Path) -> dict[str, object]:
    source.mkdir()
    records: dict[str, object] = {}
    for shot in (1, 2, 3):
        name = f"P{shot}"
        _create_image(source / f"{name}.JPG")
        _create_raw(source / f"{name}.ORF")
        records[str(source / f"{name}.JPG")] = {
            "DateTimeOriginal": f"2024:07:15 10:00:0{shot}",
            "DriveMode": HDR_MODE.format(shot),
        }
    (source / "P1.ORF.xmp").write_text("<x:xmpmeta/>", encoding="utf-8")
    os.utime(source / "P1.ORF.xmp", (SOURCE_MTIME, SOURCE_MTIME))

    for number in (5, 6, 7):
        name = f"B{number}"
        _create_image(source / f"{name}.JPG")
        records[str(source / f"{name}.JPG")] = {
            "DateTimeOriginal": f"2024:07:15 11:00:0{number}",
            "SpecialMode": f"Normal, Sequence: {number}, Panorama: (none)",
        }

    _create_image(source / "S1.JPG")
    records[str(source / "S1.JPG")] = {"DateTimeOriginal": "2024:07:16 09:00:00"}

    # no metadata record: extraction fails, mtime decides the date
    _create_image(source / "N1.JPG", mtime=datetime(2023, 1, 2, 12, 0).timestamp())
    return records


def _relative(plan, output: Path) -> dict[str, str]:
    return {
        entry.source_path.name: entry.destination_path.relative_to(output).as_posix()
        for entry in plan.entries
    }


def test_dry_run_plans_without_writing(tmp_path: Path) -> None:
    source = tmp_path / "source"
    output = tmp_path / "output"
    backend = InMemoryBackend(_build_source(source))

    result = Pipeline(ConfigManager(), backend=backend).run_plan(source, output)
    plan = result.plan

    assert _relative(plan, output) == {
        "P1.JPG": "JPEG/2024/07/15/P1_HDR/P1.JPG",
        "P2.JPG": "JPEG/2024/07/15/P1_HDR/P2.JPG",
        "P3.JPG": "JPEG/2024/07/15/P1_HDR/P3.JPG",
        "P1.ORF": "RAW/2024/07/15/P1_HDR/P1.ORF",
        "P2.ORF": "RAW/2024/07/15/P1_HDR/P2.ORF",
        "P3.ORF": "RAW/2024/07/15/P1_HDR/P3.ORF",
        "P1.ORF.xmp": "RAW/2024/07/15/P1_HDR/P1.ORF.xmp",
        "B5.JPG": "JPEG/2024/07/15/B5_BURST/B5.JPG",
        "B6.JPG": "JPEG/2024/07/15/B5_BURST/B6.JPG",
        "B7.JPG": "JPEG/2024/07/15/B5_BURST/B7.JPG",
        "S1.JPG": "JPEG/2024/07/16/S1.JPG",
        "N1.JPG": "JPEG/2023/01/02/N1.JPG",
    }
    assert [group.kind for group in plan.sequence_groups] == [SequenceKind.HDR, SequenceKind.BURST]
    assert plan.conflicts == ()
    assert [failure.code for failure in plan.failures] == [ErrorCode.EXTRACTION_FAILED]
    assert result.summary_info.mtime_dated_files == 1
    assert result.summary_info.exif_dated_files == 11

    # only one read per bundle, and RAW files are never asked for
    assert len(backend.calls) == 8
    assert all(path.suffix == ".JPG" for path in backend.calls)
    assert backend.closed is True
    assert not output.exists()


def test_execute_then_rerun_is_idempotent(tmp_path: Path) -> None:
    source = tmp_path / "source"
    output = tmp_path / "output"
    records = _build_source(source)
    config = ConfigManager()

    first = Pipeline(config, backend=InMemoryBackend(records)).run_plan(source, output, mode="Copy")
    execution = PlanExecutor(config).execute_plan(first.plan)

    assert execution.ok is True
    assert len(execution.executed_entries) == 12
    copied = output / "RAW" / "2024" / "07" / "15" / "P1_HDR" / "P1.ORF"
    assert copied.read_bytes() == b"raw-data"
    assert copied.stat().st_mtime == SOURCE_MTIME

    second = Pipeline(config, backend=InMemoryBackend(records)).run_plan(source, output, mode="Copy")

    assert second.plan.is_empty is True
    assert len(second.plan.conflicts) == 12
    assert {conflict.reason for conflict in second.plan.conflicts} == {ConflictReason.DESTINATION_EXISTS}


def test_incremental_run_only_plans_newer_files(tmp_path: Path) -> None:
    source = tmp_path / "source"
    output = tmp_path / "output"
    records = _build_source(source)
    new_photo = source / "NEW.JPG"
    records[str(new_photo)] = {"DateTimeOriginal": "2024:09:01 10:00:00"}
    config = ConfigManager()

    first = Pipeline(config, backend=InMemoryBackend(records)).run_plan(source, output, mode="Copy")
    PlanExecutor(config).execute_plan(first.plan)

    _create_image(new_photo, mtime=datetime(2024, 9, 1, 10, 0).timestamp())
    result = Pipeline(config, backend=InMemoryBackend(records)).run_plan(
        source,
        output,
        incremental=True,
        mode="Dry-run (incremental)",
    )

    assert result.threshold == SOURCE_MTIME
    assert _relative(result.plan, output) == {"NEW.JPG": "JPEG/2024/09/01/NEW.JPG"}
    assert result.plan.entries[0].date_source == DateSource.EXIF
    assert result.summary_info.skipped_incremental == 12
    assert result.plan.conflicts == ()


def test_unavailable_backend_aborts_before_scanning(tmp_path: Path) -> None:
    pipeline = Pipeline(ConfigManager(), backend=InMemoryBackend(available=False))

    with pytest.raises(BackendUnavailable):
        pipeline.run_plan(tmp_path / "does-not-exist", tmp_path / "output")


def test_missing_input_root(tmp_path: Path) -> None:
    pipeline = Pipeline(ConfigManager(), backend=InMemoryBackend())

    with pytest.raises(InvalidInputRoot):
        pipeline.run_plan(tmp_path / "does-not-exist", tmp_path / "output")


@pytest.mark.parametrize("exif_dt", ["1970:01:01 00:00:00", "0000:00:00 00:00:00", "not a date"])
def test_invalid_capture_date_falls_back_to_mtime(tmp_path: Path, exif_dt: str) -> None:
    source = tmp_path / "source"
    output = tmp_path / "output"
    source.mkdir()
    _create_image(source / "P1.JPG")
    backend = InMemoryBackend({str(source / "P1.JPG"): {"DateTimeOriginal": exif_dt}})

    plan = Pipeline(ConfigManager(), backend=backend).run_plan(source, output).plan

    assert _relative(plan, output) == {"P1.JPG": "JPEG/2024/08/01/P1.JPG"}
    assert plan.entries[0].date_source == DateSource.FILE_MTIME
    assert [(failure.code, failure.level) for failure in plan.failures] == [
        (ErrorCode.INVALID_DATE, ErrorLevel.INFO)
    ]
    assert plan.failures[0].file_path == str(source / "P1.JPG")


def test_incremental_run_keeps_new_sidecar_with_its_photo(tmp_path: Path) -> None:
    source = tmp_path / "source"
    output = tmp_path / "output"
    source.mkdir()
    _create_image(source / "P1.JPG")
    records = {str(source / "P1.JPG"): {"DateTimeOriginal": "2024:07:15 10:00:00"}}
    config = ConfigManager()

    first = Pipeline(config, backend=InMemoryBackend(records)).run_plan(source, output, mode="Copy")
    PlanExecutor(config).execute_plan(first.plan)

    sidecar = source / "P1.JPG.xmp"
    sidecar.write_text("<x:xmpmeta/>", encoding="utf-8")
    edited = datetime(2024, 9, 20, 18, 0).timestamp()
    os.utime(sidecar, (edited, edited))

    result = Pipeline(config, backend=InMemoryBackend(records)).run_plan(source, output, incremental=True)

    # the sidecar is dated by its photo, not by its own mtime
    assert _relative(result.plan, output) == {"P1.JPG.xmp": "JPEG/2024/07/15/P1.JPG.xmp"}
    assert [
        (conflict.destination_path.relative_to(output).as_posix(), conflict.reason)
        for conflict in result.plan.conflicts
    ] == [("JPEG/2024/07/15/P1.JPG", ConflictReason.DESTINATION_EXISTS)]
    assert result.summary_info.skipped_incremental == 0
