"""Fork-join execution of the two independent halves of a recursive transform.

The right branch is submitted to a shared ThreadPoolExecutor while the caller
runs the left branch itself. At the join, a right branch that no worker has
picked up yet is cancelled and run inline, so a thread only ever blocks on a
branch that is already running. Nested forks therefore cannot deadlock a
bounded pool.

Forking is a performance knob only: any threshold and any pool size produce
identical results.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple, TypeVar

_logger = logging.getLogger(__name__)

L = TypeVar("L")
R = TypeVar("R")


# --- Configuration ---

@dataclass(frozen=True)
class ParallelConfig:
    """Worker pool parameters.

    Attributes:
        max_workers: Worker threads; below 2 every branch runs inline
        threshold: Smallest sub-problem size (number of field elements) worth forking
    """
    max_workers: int = field(default_factory=lambda: os.cpu_count() or 1)
    threshold: int = 1 << 10

    def __post_init__(self) -> None:
        if self.threshold < 1:
            raise ValueError(f"threshold must be positive, got {self.threshold}")


# --- Pool ---

class ForkJoinPool:
    """Fork-join scheduler shared by any number of concurrent transforms."""

    def __init__(self, config: Optional[ParallelConfig] = None) -> None:
        self.config = config or ParallelConfig()
        self._executor: Optional[ThreadPoolExecutor] = None
        if self.config.max_workers >= 2:
            self._executor = ThreadPoolExecutor(
                max_workers=self.config.max_workers, thread_name_prefix="ecfft"
            )
            _logger.debug(
                "Started fork-join pool: %d workers, threshold %d",
                self.config.max_workers, self.config.threshold,
            )

    @property
    def parallel(self) -> bool:
        return self._executor is not None

    def fork_join(self, size: int, left: Callable[[], L], right: Callable[[], R]) -> Tuple[L, R]:
        """Run both branches and return (left(), right()).

        Args:
            size: Sub-problem size, compared against the fork threshold
            left: Branch run on the calling thread
            right: Branch offered to the pool

        Both branches have finished before this returns or raises. If both
        fail, the left branch's exception is the one raised.
        """
        executor = self._executor
        if executor is None or size < self.config.threshold:
            return left(), right()

        future = executor.submit(right)
        try:
            lhs = left()
        except BaseException:
            # Join a right branch that is already running; its own error, if any, is superseded
            if not future.cancel():
                wait([future])
            raise
        if future.cancel():
            return lhs, right()
        return lhs, future.result()

    def shutdown(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
            _logger.debug("Fork-join pool shut down")

    def __enter__(self) -> "ForkJoinPool":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()


SERIAL = ForkJoinPool(ParallelConfig(max_workers=1))
"""Pool that never forks; used when callers pass pool=None."""
