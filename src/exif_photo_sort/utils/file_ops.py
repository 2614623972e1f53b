"""No-overwrite copies with retry on transient OS errors."""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
import shutil
import time
from pathlib import Path
from typing import Callable, Optional

from ..config.manager import ConfigManager
from .logger import get_logger


@dataclass
class OperationResult:
    success: bool
    error_message: Optional[str] = None
    retry_count: int = 0


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 3
    backoff_base_sec: float = 0.5
    backoff_cap_sec: float = 10.0

    @classmethod
    def from_config(cls, config: ConfigManager) -> "RetryPolicy":
        return cls(
            max_retries=int(config.get("retry.max_retries", 3)),
            backoff_base_sec=float(config.get("retry.backoff_base_sec", 0.5)),
            backoff_cap_sec=float(config.get("retry.backoff_cap_sec", 10.0)),
        )

    def wait_time(self, attempt: int) -> float:
        return min(self.backoff_base_sec * (2**attempt), self.backoff_cap_sec)


def safe_op(policy: RetryPolicy, logger=None) -> Callable:
    """Retry on OSError with exponential backoff; report instead of raising."""

    op_logger = logger or get_logger("FileOps")

    def decorator(func: Callable[..., None]) -> Callable[..., OperationResult]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> OperationResult:
            attempt = 0
            while True:
                try:
                    func(*args, **kwargs)
                    return OperationResult(success=True, retry_count=attempt)
                except OSError as exc:
                    if attempt >= policy.max_retries:
                        op_logger.error("%s failed after %s retries: %s", func.__name__, attempt, exc)
                        return OperationResult(success=False, error_message=str(exc), retry_count=attempt)
                    wait_time = policy.wait_time(attempt)
                    attempt += 1
                    op_logger.warning(
                        "Retrying %s (%s/%s) in %.2fs: %s",
                        func.__name__,
                        attempt,
                        policy.max_retries,
                        wait_time,
                        exc,
                    )
                    time.sleep(wait_time)

        return wrapper

    return decorator


def safe_copy2(
    src_path: Path,
    dst_path: Path,
    *,
    policy: Optional[RetryPolicy] = None,
    logger=None,
) -> OperationResult:
    @safe_op(policy or RetryPolicy(), logger=logger)
    def copy2() -> None:
        # copy2 keeps mtime, which incremental runs compare against
        shutil.copy2(src_path, dst_path)

    return copy2()


def copy_file(
    src_path: Path,
    dst_path: Path,
    *,
    config: Optional[ConfigManager] = None,
    logger=None,
) -> str:
    logger = logger or get_logger("FileOps")
    policy = RetryPolicy.from_config(config or ConfigManager())
    if dst_path.exists():
        raise FileExistsError(f"Destination already exists: {dst_path}")

    @safe_op(policy, logger=logger)
    def makedirs() -> None:
        dst_path.parent.mkdir(parents=True, exist_ok=True)

    mkdir_result = makedirs()
    if not mkdir_result.success:
        raise OSError(mkdir_result.error_message)

    copy_result = safe_copy2(src_path, dst_path, policy=policy, logger=logger)
    if not copy_result.success:
        raise OSError(copy_result.error_message)
    logger.info(f"COPIED: {src_path} -> {dst_path}")
    return "COPIED"
