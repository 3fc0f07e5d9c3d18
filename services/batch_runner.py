"""
Serial batch runner with a fixed pause between batches.

Bulk workflows persist one record at a time. The runner groups the
calls into batches and sleeps between batches to keep the request rate
on the remote store bounded. There is no retry and no backoff.
"""

import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, TypeVar
import structlog

from config import settings
from exceptions import AppError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass
class BatchFailure:
    """One item that failed."""
    key: str
    code: str
    message: str


@dataclass
class BatchResult:
    """Outcome of a run."""
    succeeded: int = 0
    failed: int = 0
    batches: int = 0
    failures: list[BatchFailure] = field(default_factory=list)


class BatchRunner:
    """
    Runs a callable over items, serially, in fixed-size batches.

    AppError raised for an item is logged and counted; the run
    continues. Any other exception propagates.

    Usage:
        runner = BatchRunner(batch_size=10, pause_seconds=0.5)
        result = runner.run(entries, save_entry, key=lambda e: e.sku)
    """

    def __init__(
        self,
        batch_size: Optional[int] = None,
        pause_seconds: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.batch_size = settings.bulk_batch_size if batch_size is None else batch_size
        self.pause_seconds = (
            settings.bulk_batch_pause_seconds if pause_seconds is None else pause_seconds
        )
        if self.batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if self.pause_seconds < 0:
            raise ValueError("pause_seconds cannot be negative")
        self._sleep = sleep

    def run(
        self,
        items: Iterable[T],
        action: Callable[[T], object],
        key: Callable[[T], str] = str,
        operation: str = "batch",
    ) -> BatchResult:
        items = list(items)
        result = BatchResult()

        for start in range(0, len(items), self.batch_size):
            if start > 0 and self.pause_seconds:
                self._sleep(self.pause_seconds)

            result.batches += 1
            for item in items[start:start + self.batch_size]:
                try:
                    action(item)
                    result.succeeded += 1
                except AppError as e:
                    result.failed += 1
                    result.failures.append(BatchFailure(key(item), e.code, e.message))
                    logger.warning(
                        "batch_item_failed",
                        operation=operation,
                        item=key(item),
                        code=e.code,
                        error=e.message
                    )

        logger.info(
            "batch_run_complete",
            operation=operation,
            succeeded=result.succeeded,
            failed=result.failed,
            batches=result.batches
        )
        return result
