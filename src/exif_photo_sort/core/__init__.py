"""Core pipeline modules."""

from .backends import ExifToolBackend, InMemoryBackend, MetadataBackend, PillowBackend, create_backend
from .bundler import bundle_files
from .date_resolver import DateResolver
from .executor import ExecutionResult, PlanExecutor
from .incremental_filter import MIN_TIMESTAMP, IncrementalFilter
from .metadata_fetcher import FetchResult, MetadataFetcher, create_worker_pool
from .pipeline import Pipeline, PipelineResult
from .plan_builder import PlanBuilder
from .scanner import FileScanner, ScanResult
from .sequence_grouper import HdrPredicate, SequenceGrouper, fold_runs

__all__ = [
    "DateResolver",
    "ExecutionResult",
    "ExifToolBackend",
    "FetchResult",
    "FileScanner",
    "HdrPredicate",
    "InMemoryBackend",
    "IncrementalFilter",
    "MIN_TIMESTAMP",
    "MetadataBackend",
    "MetadataFetcher",
    "Pipeline",
    "PipelineResult",
    "PillowBackend",
    "PlanBuilder",
    "PlanExecutor",
    "ScanResult",
    "SequenceGrouper",
    "bundle_files",
    "create_backend",
    "create_worker_pool",
    "fold_runs",
]
