"""Pipeline coordinator for planning one run."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from ..config import ConfigManager
from ..models import EMPTY_METADATA, CopyPlan, ErrorCode, PhotoBundle, PhotoRecord, SequenceGroup, SequenceKind
from ..utils import reporting
from ..utils.error_handler import ErrorHandler
from ..utils.logger import get_logger
from .backends import MetadataBackend, create_backend
from .bundler import bundle_files
from .date_resolver import DateResolver
from .incremental_filter import IncrementalFilter
from .metadata_fetcher import FetchResult, MetadataFetcher, create_worker_pool
from .plan_builder import PlanBuilder
from .scanner import FileScanner
from .sequence_grouper import SequenceGrouper


@dataclass
class PipelineResult:
    plan: CopyPlan
    summary_info: reporting.SummaryInfo
    backend_version: str
    threshold: Optional[float] = None


class Pipeline:
    def __init__(
        self,
        config: ConfigManager,
        backend: Optional[MetadataBackend] = None,
        logger=None,
    ) -> None:
        self.config = config
        self.logger = logger or get_logger(self.__class__.__name__)
        self.backend = backend or create_backend(config, self.logger)
        self.scanner = FileScanner(config, self.logger)
        self.incremental_filter = IncrementalFilter(config, self.logger)
        self.fetcher = MetadataFetcher(self.backend, config, self.logger)
        self.date_resolver = DateResolver(config)
        self.grouper = SequenceGrouper(config, self.logger)
        self.plan_builder = PlanBuilder(config, self.logger)

    def run_plan(
        self,
        source_path: Path,
        output_root: Path,
        *,
        incremental: bool = False,
        mode: str = "Dry-run",
        progress_callback: Optional[Callable[[int, int], None]] = None,
        stage_callback: Optional[Callable[[str], None]] = None,
        log_callback: Optional[Callable[[str], None]] = None,
    ) -> PipelineResult:
        stage_callback = stage_callback or (lambda _message: None)
        log_callback = log_callback or (lambda _message: None)

        stage_callback("Stage: checking metadata backend...")
        backend_version = self.fetcher.ensure_backend()
        log_callback(f"Metadata backend: {self.backend.name} {backend_version}")

        stage_callback("Stage: scanning...")
        scan_result = self.scanner.scan_directory(source_path)
        errors = ErrorHandler()
        errors.extend(scan_result.failures)
        files = scan_result.files
        log_callback(f"Scan complete, {len(files)} files")

        bundles = bundle_files(files)

        threshold: Optional[float] = None
        skipped_incremental = 0
        if incremental:
            stage_callback("Stage: scanning destination for newest file...")
            threshold = self.incremental_filter.threshold(output_root)
            kept = self.incremental_filter.filter(bundles, threshold)
            kept_files = sum(len(bundle.members) for bundle in kept)
            skipped_incremental = len(files) - kept_files
            bundles = kept
            log_callback(f"Incremental mode: {kept_files} files to check, {skipped_incremental} skipped")

        stage_callback("Stage: reading metadata...")
        representatives = [bundle.representative for bundle in bundles if bundle.representative is not None]
        try:
            with create_worker_pool(self.config) as pool:
                fetched = self.fetcher.fetch(
                    [item.path for item in representatives],
                    pool,
                    progress_callback=progress_callback,
                )
        finally:
            self.backend.close()

        stage_callback("Stage: detecting sequences...")
        groups = self._group(bundles, fetched, errors)

        stage_callback("Stage: planning copies...")
        plan = self.plan_builder.build(groups, output_root, errors.errors)

        summary_info = reporting.build_summary_info(
            plan,
            mode=mode,
            source_dir=source_path,
            output_dir=output_root,
            scanned_files=len(scan_result.files),
            skipped_incremental=skipped_incremental,
            threshold=threshold,
        )
        return PipelineResult(
            plan=plan,
            summary_info=summary_info,
            backend_version=backend_version,
            threshold=threshold,
        )

    def _group(
        self,
        bundles: list[PhotoBundle],
        fetched: dict[Path, FetchResult],
        errors: ErrorHandler,
    ) -> list[SequenceGroup]:
        buckets: dict[tuple[int, int, int], list[PhotoRecord]] = defaultdict(list)
        orphans: list[PhotoRecord] = []
        for bundle in bundles:
            record = self._build_record(bundle, fetched, errors)
            if bundle.representative is None:
                orphans.append(record)
            else:
                buckets[record.resolved_date.key].append(record)

        groups: list[SequenceGroup] = []
        for date_key in sorted(buckets):
            groups.extend(self.grouper.group(buckets[date_key]))
        # sidecars without a photo never join a sequence
        groups.extend(SequenceGroup(kind=SequenceKind.NONE, members=(record,)) for record in orphans)
        return groups

    def _build_record(
        self,
        bundle: PhotoBundle,
        fetched: dict[Path, FetchResult],
        errors: ErrorHandler,
    ) -> PhotoRecord:
        representative = bundle.representative
        if representative is None:
            return PhotoRecord(
                bundle=bundle,
                metadata=EMPTY_METADATA,
                resolved_date=self.date_resolver.from_mtime(bundle.members[0]),
            )

        result = fetched[representative.path]
        if result.failure is not None:
            errors.add_warning(ErrorCode.EXTRACTION_FAILED, result.failure.reason, representative.path)

        _capture_time, rejection = self.date_resolver.parse_capture_time(result.metadata)
        if rejection is not None:
            self.logger.warning(f"Invalid capture date, using file mtime: {representative.path} ({rejection})")
            errors.add_info(ErrorCode.INVALID_DATE, rejection, representative.path)

        return PhotoRecord(
            bundle=bundle,
            metadata=result.metadata,
            resolved_date=self.date_resolver.resolve(representative, result.metadata),
        )
