"""Execute a copy plan."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from ..config import ConfigManager
from ..models import CopyPlan, CopyPlanEntry, ErrorCode, ErrorLevel, ProcessError
from ..utils import file_ops
from ..utils.logger import get_logger


@dataclass
class ExecutionResult:
    executed_entries: list[CopyPlanEntry] = field(default_factory=list)
    failed_entries: list[ProcessError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed_entries


class PlanExecutor:
    """Copies entries one at a time; never overwrites an existing file."""

    def __init__(self, config: ConfigManager | None = None, logger=None) -> None:
        self.logger = logger or get_logger(self.__class__.__name__)
        self.config = config or ConfigManager()

    def execute_plan(
        self,
        plan: CopyPlan,
        *,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> ExecutionResult:
        result = ExecutionResult()
        total = len(plan.entries)
        for index, entry in enumerate(plan.entries, start=1):
            try:
                file_ops.copy_file(
                    entry.source_path,
                    entry.destination_path,
                    config=self.config,
                    logger=self.logger,
                )
            except OSError as exc:
                self.logger.error(f"Copy failed: {entry.source_path} -> {entry.destination_path} ({exc})")
                result.failed_entries.append(
                    ProcessError(
                        code=ErrorCode.COPY_FAILED,
                        level=ErrorLevel.RECOVERABLE,
                        message=f"{entry.destination_path}: {exc}",
                        file_path=str(entry.source_path),
                    )
                )
            else:
                result.executed_entries.append(entry)
            if progress_callback:
                progress_callback(index, total)
        return result
