"""
Performance helpers - Operation timing and a bounded worker slot pool
"""

from __future__ import annotations

import asyncio
import time
from collections import deque
from collections.abc import Callable
from typing import Any, TypeVar

from starlette.concurrency import run_in_threadpool

T = TypeVar("T")

# Measurements kept per operation
MAX_SAMPLES = 100


class PerformanceMonitor:
    """Rolling average of operation durations in milliseconds"""

    _instance = None

    def __init__(self):
        self._metrics: dict[str, deque[float]] = {}

    @classmethod
    def get_instance(cls) -> "PerformanceMonitor":
        """Get singleton instance"""
        if cls._instance is None:
            cls._instance = PerformanceMonitor()
        return cls._instance

    def start_timer(self, operation: str) -> Callable[[], float]:
        """Start timing ``operation``; call the returned function to stop"""
        start = time.perf_counter()

        def stop() -> float:
            duration = (time.perf_counter() - start) * 1000
            self.record_metric(operation, duration)
            return duration

        return stop

    def record_metric(self, operation: str, duration: float):
        self._metrics.setdefault(operation, deque(maxlen=MAX_SAMPLES)).append(duration)

    def get_average_time(self, operation: str) -> float:
        samples = self._metrics.get(operation)
        if not samples:
            return 0.0
        return sum(samples) / len(samples)

    def get_metrics(self) -> dict[str, dict[str, float]]:
        return {
            operation: {"average": self.get_average_time(operation), "count": len(samples)}
            for operation, samples in self._metrics.items()
        }

    def reset(self):
        self._metrics.clear()


class ImageProcessingQueue:
    """Run blocking image work in the threadpool, at most ``limit`` at a time"""

    def __init__(self, limit: int = 3):
        self.limit = limit
        self._semaphore: asyncio.Semaphore | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    def _get_semaphore(self) -> asyncio.Semaphore:
        # One semaphore per event loop; test clients start a fresh loop each time
        loop = asyncio.get_running_loop()
        if self._semaphore is None or self._loop is not loop:
            self._semaphore = asyncio.Semaphore(self.limit)
            self._loop = loop
        return self._semaphore

    async def run(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        async with self._get_semaphore():
            return await run_in_threadpool(func, *args, **kwargs)


_queue: ImageProcessingQueue | None = None


def get_processing_queue(limit: int) -> ImageProcessingQueue:
    """Return the shared queue, rebuilding it when the configured limit changes"""
    global _queue
    if _queue is None or _queue.limit != limit:
        _queue = ImageProcessingQueue(limit)
    return _queue
