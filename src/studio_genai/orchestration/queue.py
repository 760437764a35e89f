"""Single-flight FIFO job queue for calls to the generation service.

At most one job is in flight at any time; a job's whole lifetime, including
every retry it performs internally, counts as in flight. After a job
settles the queue waits `cooldown_s` before starting the next one.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import time
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from studio_genai.errors import JobTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_job_ids = itertools.count(1)


@dataclass
class Job:
    execute: Callable[[], Awaitable[Any]]
    future: asyncio.Future
    timeout: float | None = None
    job_id: int = field(default_factory=lambda: next(_job_ids))


class SerialJobQueue:
    def __init__(
        self,
        *,
        cooldown_s: float = 1.0,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.cooldown_s = cooldown_s
        self._sleep = sleep
        self._clock = clock
        self._pending: deque[Job] = deque()
        self._is_processing = False
        self._drainer: asyncio.Task | None = None
        self._last_settled_at: float | None = None

    @property
    def is_processing(self) -> bool:
        return self._is_processing

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def enqueue(self, work: Callable[[], Awaitable[T]], *, timeout: float | None = None) -> T:
        """
        Submit `work` and wait for its result.

        `timeout` bounds the job once it has started (queue wait excluded).
        Cancelling the awaiting caller skips a job that has not started yet,
        or cancels it if it is running.
        """
        loop = asyncio.get_running_loop()
        job = Job(execute=work, future=loop.create_future(), timeout=timeout)
        self._pending.append(job)
        logger.debug("Queued job %d (%d pending)", job.job_id, len(self._pending))
        if self._drainer is None or self._drainer.done() or self._drainer.get_loop() is not loop:
            self._drainer = loop.create_task(self._drain())
        return await job.future

    async def _drain(self) -> None:
        while self._pending:
            job = self._pending.popleft()
            if job.future.done():
                logger.info("Skipping job %d (cancelled before start)", job.job_id)
                continue
            await self._wait_for_cooldown()
            if job.future.done():
                logger.info("Skipping job %d (cancelled before start)", job.job_id)
                continue
            await self._run(job)

    async def _wait_for_cooldown(self) -> None:
        if self._last_settled_at is None:
            return
        remaining = self._last_settled_at + self.cooldown_s - self._clock()
        if remaining > 0:
            await self._sleep(remaining)

    async def _run(self, job: Job) -> None:
        self._is_processing = True
        logger.info("Starting job %d", job.job_id)
        task = asyncio.ensure_future(self._execute(job))

        def _cancel_if_abandoned(fut: asyncio.Future) -> None:
            if fut.cancelled() and not task.done():
                task.cancel()

        job.future.add_done_callback(_cancel_if_abandoned)
        try:
            result = await task
        except asyncio.CancelledError:
            job.future.cancel()
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                # The drainer itself is being cancelled, not just this job.
                raise
            logger.info("Job %d cancelled", job.job_id)
        except Exception as exc:
            if not job.future.done():
                job.future.set_exception(exc)
            logger.info("Job %d failed: %s", job.job_id, exc)
        else:
            if not job.future.done():
                job.future.set_result(result)
            logger.info("Job %d succeeded", job.job_id)
        finally:
            self._is_processing = False
            self._last_settled_at = self._clock()

    async def _execute(self, job: Job) -> Any:
        if job.timeout is None:
            return await job.execute()
        try:
            return await asyncio.wait_for(job.execute(), timeout=job.timeout)
        except asyncio.TimeoutError as exc:
            raise JobTimeoutError(f"The request did not complete within {job.timeout:g} seconds.") from exc
