"""Collects per-file problems for the end-of-run report."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from ..models.error_record import ErrorLevel, ProcessError


@dataclass
class ErrorHandler:
    errors: List[ProcessError] = field(default_factory=list)

    def add(self, error: ProcessError) -> None:
        self.errors.append(error)

    def extend(self, errors: Iterable[ProcessError]) -> None:
        self.errors.extend(errors)

    def add_info(self, code: str, message: str, file_path: Optional[Path] = None) -> None:
        self.add(_record(code, ErrorLevel.INFO, message, file_path))

    def add_warning(self, code: str, message: str, file_path: Optional[Path] = None) -> None:
        self.add(_record(code, ErrorLevel.RECOVERABLE, message, file_path))


def _record(code: str, level: ErrorLevel, message: str, file_path: Optional[Path]) -> ProcessError:
    return ProcessError(
        code=code,
        level=level,
        message=message,
        file_path=str(file_path) if file_path is not None else None,
    )
