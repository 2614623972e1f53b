"""Per-file problems collected during a run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorLevel(str, Enum):
    INFO = "I"
    RECOVERABLE = "W"


class ErrorCode:
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    INVALID_DATE = "INVALID_DATE"
    UNREADABLE_SOURCE = "UNREADABLE_SOURCE"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    COPY_FAILED = "COPY_FAILED"


@dataclass(frozen=True)
class ProcessError:
    code: str
    level: ErrorLevel
    message: str
    file_path: Optional[str] = None
