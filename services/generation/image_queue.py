"""Ordered per-slide image jobs consumed by a single worker."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable

from shared.utils import setup_logging

logger = setup_logging("image-job-queue")


@dataclass(frozen=True)
class ImageJob:
    slide_id: str
    position: int
    prompt: str


class ImageJobQueue:
    """FIFO of image jobs drained one at a time.

    ``drain`` awaits each handler before taking the next job, so at most one
    job is in flight and jobs finish in the order they were enqueued.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[ImageJob] = asyncio.Queue()
        self.in_flight = 0
        self.max_in_flight = 0

    def enqueue(self, job: ImageJob) -> None:
        self._queue.put_nowait(job)
        logger.debug("Enqueued image job for slide %s", job.slide_id)

    def get_length(self) -> int:
        return self._queue.qsize()

    async def drain(self, handler: Callable[[ImageJob], Awaitable[None]]) -> int:
        """Run ``handler`` for every queued job in order; returns the job count."""
        processed = 0
        while not self._queue.empty():
            job = self._queue.get_nowait()
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            try:
                await handler(job)
            finally:
                self.in_flight -= 1
                self._queue.task_done()
            processed += 1
        return processed
