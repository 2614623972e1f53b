"""Parallel metadata extraction."""

from __future__ import annotations

from concurrent.futures import Executor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
import os
from pathlib import Path
from typing import Callable, Iterable, Optional

from ..config import ConfigManager
from ..errors import ExtractionFailed
from ..models import EMPTY_METADATA, PhotoMetadata
from ..utils.logger import get_logger
from .backends import MetadataBackend


@dataclass(frozen=True)
class FetchResult:
    path: Path
    metadata: PhotoMetadata
    failure: Optional[ExtractionFailed] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def resolve_worker_count(config: ConfigManager) -> int:
    workers = int(config.get("metadata.parallel_workers", 0))
    if workers <= 0:
        workers = os.cpu_count() or 1
    return workers


def create_worker_pool(config: ConfigManager) -> ThreadPoolExecutor:
    """Pool for one run; the caller owns and shuts it down."""
    return ThreadPoolExecutor(
        max_workers=resolve_worker_count(config),
        thread_name_prefix="metadata",
    )


class MetadataFetcher:
    def __init__(self, backend: MetadataBackend, config: ConfigManager, logger=None) -> None:
        self.backend = backend
        self.logger = logger or get_logger(self.__class__.__name__)
        self.batch_size = max(1, int(config.get("metadata.batch_size", 256)))

    def ensure_backend(self) -> str:
        """Raises BackendUnavailable before any file is touched."""
        return self.backend.check_available()

    def fetch(
        self,
        paths: Iterable[Path],
        executor: Executor,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> dict[Path, FetchResult]:
        unique_paths = sorted(set(paths), key=str)
        total = len(unique_paths)
        results: dict[Path, FetchResult] = {}

        for start in range(0, total, self.batch_size):
            batch = unique_paths[start : start + self.batch_size]
            futures = [executor.submit(self._fetch_one, path) for path in batch]
            for future in as_completed(futures):
                result = future.result()
                results[result.path] = result
                if progress_callback:
                    progress_callback(len(results), total)

        failed = sum(1 for result in results.values() if not result.ok)
        self.logger.info(f"Metadata read for {total - failed}/{total} files via {self.backend.name}")
        return results

    def _fetch_one(self, path: Path) -> FetchResult:
        try:
            tags = self.backend.read(path)
        except ExtractionFailed as exc:
            failure = exc
        except OSError as exc:
            failure = ExtractionFailed(path, f"{type(exc).__name__}: {exc}")
        else:
            return FetchResult(path=path, metadata=PhotoMetadata.from_tags(tags))
        self.logger.warning(f"Metadata extraction failed: {failure}")
        return FetchResult(path=path, metadata=EMPTY_METADATA, failure=failure)
