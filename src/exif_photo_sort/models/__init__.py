"""Data models."""

from .copy_plan import Conflict, ConflictReason, CopyPlan, CopyPlanEntry
from .error_record import ErrorCode, ErrorLevel, ProcessError
from .photo_bundle import PhotoBundle, PhotoRecord
from .photo_file import FormatClass, PhotoFile
from .photo_metadata import EMPTY_METADATA, REQUESTED_TAGS, PhotoMetadata
from .resolved_date import DateSource, ResolvedDate
from .sequence_group import SequenceGroup, SequenceKind

__all__ = [
    "Conflict",
    "ConflictReason",
    "CopyPlan",
    "CopyPlanEntry",
    "DateSource",
    "EMPTY_METADATA",
    "ErrorCode",
    "ErrorLevel",
    "FormatClass",
    "PhotoBundle",
    "PhotoFile",
    "PhotoMetadata",
    "PhotoRecord",
    "ProcessError",
    "REQUESTED_TAGS",
    "ResolvedDate",
    "SequenceGroup",
    "SequenceKind",
]
