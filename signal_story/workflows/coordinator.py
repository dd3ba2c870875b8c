"""Bounded-concurrency batch driver with a soft wall-clock deadline."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Sequence, TypeVar

from ..config import BATCH_CONCURRENCY, BATCH_DELAY_SECONDS, RUN_TIME_BUDGET_SECONDS

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class BatchRunCoordinator:
    """Process items in small concurrent batches until the budget runs out.

    The deadline is checked before each batch only: a batch that has started
    always finishes, and no new batch starts once the deadline has passed.
    Results are handed to ``on_result`` on the calling thread, in item order,
    so aggregation needs no locking.
    """

    def __init__(
        self,
        time_budget: float = RUN_TIME_BUDGET_SECONDS,
        concurrency: int = BATCH_CONCURRENCY,
        batch_delay: float = BATCH_DELAY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.time_budget = time_budget
        self.concurrency = max(1, concurrency)
        self.batch_delay = batch_delay
        self._clock = clock
        self._sleep = sleep
        self._deadline: Optional[float] = None

    def start(self) -> None:
        """Start the budget clock; called once at the beginning of a run."""
        self._deadline = self._clock() + self.time_budget

    @property
    def remaining(self) -> float:
        if self._deadline is None:
            return self.time_budget
        return self._deadline - self._clock()

    @property
    def expired(self) -> bool:
        return self.remaining <= 0

    def run(
        self,
        items: Sequence[T],
        worker: Callable[[T], R],
        on_result: Callable[[T, R], None],
        on_error: Callable[[T, Exception], None],
    ) -> bool:
        """Run *worker* over *items*; return ``True`` if the budget ran out.

        An exception raised by *worker* is passed to *on_error* and never
        stops the remaining items.
        """
        if self._deadline is None:
            self.start()

        total = len(items)
        for offset in range(0, total, self.concurrency):
            if self.expired:
                logger.warning(
                    "Time budget exhausted after %d/%d items; skipping the rest", offset, total
                )
                return True

            batch = items[offset : offset + self.concurrency]
            with ThreadPoolExecutor(max_workers=len(batch)) as executor:
                futures = [executor.submit(worker, item) for item in batch]
                for item, future in zip(batch, futures):
                    try:
                        result = future.result()
                    except Exception as exc:  # noqa: BLE001
                        on_error(item, exc)
                        continue
                    on_result(item, result)

            if offset + self.concurrency < total and self.batch_delay > 0:
                self._sleep(self.batch_delay)
        return False


__all__ = ["BatchRunCoordinator"]
