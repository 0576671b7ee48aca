"""Queue Manager service for bounding concurrent model calls.

Consensus fanout starts every model call at once. When a limit is
configured, QueueManager caps the number of calls in flight with an
asyncio.Semaphore; extra calls wait in FIFO order for a free slot.
All results are still required, so the limit adds backpressure without
changing what a job returns.

A limit of 0 means unbounded: slots are granted immediately.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class QueueManager:
    """Bounded (or unbounded) pool of model-call slots.

    Attributes:
        max_concurrent: Maximum concurrent calls, 0 for unbounded.
    """

    def __init__(self, max_concurrent: int = 0) -> None:
        """Initialize QueueManager.

        Args:
            max_concurrent: Maximum concurrent calls (default: 0, unbounded).

        Raises:
            ValueError: If max_concurrent is negative.
        """
        if max_concurrent < 0:
            raise ValueError(f"max_concurrent must be >= 0, got {max_concurrent}")

        self._max_concurrent = max_concurrent
        self._semaphore = (
            asyncio.Semaphore(max_concurrent) if max_concurrent > 0 else None
        )

        self._active_count = 0
        self._peak_active = 0
        self._total_processed = 0

    @property
    def max_concurrent(self) -> int:
        """Get maximum concurrent calls limit (0 = unbounded)."""
        return self._max_concurrent

    @property
    def is_bounded(self) -> bool:
        """Check whether a concurrency limit applies."""
        return self._semaphore is not None

    @property
    def active_count(self) -> int:
        """Get current number of calls holding a slot."""
        return self._active_count

    @property
    def peak_active(self) -> int:
        """Get the highest number of simultaneously held slots."""
        return self._peak_active

    @property
    def total_processed(self) -> int:
        """Get total number of released slots."""
        return self._total_processed

    @property
    def is_full(self) -> bool:
        """Check if a new call would have to wait."""
        return self.is_bounded and self._active_count >= self._max_concurrent

    async def acquire_slot(self) -> None:
        """Acquire a slot, waiting while the pool is full."""
        if self._semaphore is not None:
            await self._semaphore.acquire()
        self._active_count += 1
        self._peak_active = max(self._peak_active, self._active_count)

    def release_slot(self) -> None:
        """Release a slot acquired with acquire_slot()."""
        self._active_count = max(0, self._active_count - 1)
        self._total_processed += 1

        if self._semaphore is not None:
            self._semaphore.release()

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        """Hold a slot for the duration of the block.

        Example:
            async with queue.slot():
                text = await invoker.invoke(model_id, prompt)
        """
        await self.acquire_slot()
        try:
            yield
        finally:
            self.release_slot()
