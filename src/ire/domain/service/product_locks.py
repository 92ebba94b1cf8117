"""Per-product serialization boundary.

Every ledger mutation for a product runs while holding that product's lock,
so reservation checks and alert evaluation see a consistent record.
Different products never share a lock and never wait on each other.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TypeVar

import structlog

from ire.domain.exceptions import ConcurrencyConflictError, TransientConflictError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class ProductLockRegistry:

    def __init__(
        self,
        timeout_seconds: float = 2.0,
        max_retries: int = 5,
        backoff_seconds: float = 0.01,
    ) -> None:
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self._timeout = timeout_seconds
        self._max_retries = max_retries
        self._backoff = backoff_seconds
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def _lock_for(self, product_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(product_id)
            if lock is None:
                lock = self._locks[product_id] = threading.RLock()
            return lock

    @contextmanager
    def hold(self, product_id: str) -> Iterator[None]:
        """Acquire the product's lock, giving up after the configured timeout.

        Raises ConcurrencyConflictError on timeout so callers retry instead
        of blocking indefinitely.
        """
        lock = self._lock_for(product_id)
        if not lock.acquire(timeout=self._timeout):
            raise ConcurrencyConflictError(
                f"Product {product_id} is busy, lock not acquired in {self._timeout}s"
            )
        try:
            yield
        finally:
            lock.release()

    def run(self, product_id: str, operation: Callable[[], T]) -> T:
        """Run ``operation`` under the product's lock, retrying on conflicts.

        ``operation`` must reload whatever it mutates, because a retry starts
        from fresh state. After the retry budget is spent the last conflict is
        surfaced as TransientConflictError.
        """
        last_conflict: ConcurrencyConflictError | None = None
        for attempt in range(1, self._max_retries + 1):
            try:
                with self.hold(product_id):
                    return operation()
            except ConcurrencyConflictError as exc:
                last_conflict = exc
                logger.info(
                    "Write conflict, retrying",
                    product_id=product_id,
                    attempt=attempt,
                    max_retries=self._max_retries,
                    error=str(exc),
                )
                if attempt < self._max_retries:
                    time.sleep(self._backoff * attempt)

        logger.warning(
            "Retry budget exhausted",
            product_id=product_id,
            max_retries=self._max_retries,
        )
        raise TransientConflictError(
            f"Product {product_id} is under contention, gave up after "
            f"{self._max_retries} attempts"
        ) from last_conflict
