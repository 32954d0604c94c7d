import asyncio

import pytest

from services.generation.image_queue import ImageJob, ImageJobQueue


@pytest.mark.asyncio
async def test_jobs_drain_in_order_one_at_a_time() -> None:
    queue = ImageJobQueue()
    for position in range(1, 4):
        queue.enqueue(ImageJob(slide_id=f"s{position}", position=position, prompt=f"p{position}"))
    handled = []

    async def handler(job: ImageJob) -> None:
        await asyncio.sleep(0)
        handled.append(job.slide_id)

    assert queue.get_length() == 3
    processed = await queue.drain(handler)

    assert processed == 3
    assert handled == ["s1", "s2", "s3"]
    assert queue.max_in_flight == 1
    assert queue.get_length() == 0


@pytest.mark.asyncio
async def test_handler_error_propagates_and_keeps_remaining_jobs() -> None:
    queue = ImageJobQueue()
    queue.enqueue(ImageJob(slide_id="s1", position=1, prompt="p1"))
    queue.enqueue(ImageJob(slide_id="s2", position=2, prompt="p2"))

    async def handler(job: ImageJob) -> None:
        raise RuntimeError("worker crashed")

    with pytest.raises(RuntimeError):
        await queue.drain(handler)

    assert queue.in_flight == 0
    assert queue.get_length() == 1
