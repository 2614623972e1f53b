import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from exif_photo_sort.config import ConfigManager
from exif_photo_sort.core import InMemoryBackend, MetadataFetcher
from exif_photo_sort.core.metadata_fetcher import resolve_worker_count
from exif_photo_sort.errors import BackendUnavailable
from exif_photo_sort.models import EMPTY_METADATA


def _backend() -> InMemoryBackend:
    return InMemoryBackend(
        {
            "/in/P1.JPG": {"DateTimeOriginal": "2024:07:15 14:30:00", "DriveMode": "Single Shot"},
            "/in/P2.JPG": {"SpecialMode": "Normal, Sequence: 3, Panorama: (none)"},
            "/in/P3.JPG": ValueError("truncated file"),
        }
    )


def test_fetch_returns_result_per_path() -> None:
    backend = _backend()
    fetcher = MetadataFetcher(backend, ConfigManager())
    paths = [Path("/in/P1.JPG"), Path("/in/P2.JPG"), Path("/in/P3.JPG"), Path("/in/P4.JPG")]

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = fetcher.fetch(paths, pool)

    assert set(results) == set(paths)
    assert results[Path("/in/P1.JPG")].metadata.datetime_original == "2024:07:15 14:30:00"
    assert results[Path("/in/P2.JPG")].metadata.special_mode == "Normal, Sequence: 3, Panorama: (none)"
    assert results[Path("/in/P3.JPG")].ok is False
    assert results[Path("/in/P3.JPG")].metadata == EMPTY_METADATA
    assert results[Path("/in/P4.JPG")].failure is not None


def test_fetch_reads_each_path_once_in_batches() -> None:
    backend = _backend()
    config = ConfigManager()
    config.set("metadata.batch_size", 1)
    fetcher = MetadataFetcher(backend, config)
    progress = []

    with ThreadPoolExecutor(max_workers=3) as pool:
        results = fetcher.fetch(
            [Path("/in/P1.JPG"), Path("/in/P2.JPG"), Path("/in/P1.JPG")],
            pool,
            progress_callback=lambda done, total: progress.append((done, total)),
        )

    assert len(results) == 2
    assert sorted(str(path) for path in backend.calls) == ["/in/P1.JPG", "/in/P2.JPG"]
    assert progress[-1] == (2, 2)


def test_ensure_backend_raises_when_unavailable() -> None:
    fetcher = MetadataFetcher(InMemoryBackend(available=False), ConfigManager())
    with pytest.raises(BackendUnavailable):
        fetcher.ensure_backend()


def test_resolve_worker_count() -> None:
    config = ConfigManager()
    assert resolve_worker_count(config) == (os.cpu_count() or 1)
    config.set("metadata.parallel_workers", 3)
    assert resolve_worker_count(config) == 3


class _BrokenPipeBackend(InMemoryBackend):
    def read(self, path: Path) -> dict:
        if path.name == "P2.JPG":
            raise BrokenPipeError(32, "Broken pipe")
        return super().read(path)


def test_os_error_from_backend_fails_only_that_file() -> None:
    fetcher = MetadataFetcher(_BrokenPipeBackend({"/in/P1.JPG": {"DriveMode": "Single Shot"}}), ConfigManager())

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = fetcher.fetch([Path("/in/P1.JPG"), Path("/in/P2.JPG")], pool)

    assert results[Path("/in/P1.JPG")].ok is True
    assert results[Path("/in/P2.JPG")].ok is False
    assert "BrokenPipeError" in results[Path("/in/P2.JPG")].failure.reason
    assert results[Path("/in/P2.JPG")].metadata == EMPTY_METADATA
