"""Async job polling.

Long-running commands (such as scaleKubernetesCluster) return a job ID
instead of a result. The job is resolved by querying queryAsyncJobResult
until it reports a terminal status:

    submitted -> pending -> ... -> succeeded | failed

An overall deadline bounds the whole sequence. Running out of time is
reported as JobTimeoutError, distinct from a failed job: the outcome is
unknown and the job may still finish on the server.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from enum import IntEnum
from typing import Any

import pydantic

from cks.exceptions import AsyncJobError, DecodeError, JobCancelledError, JobTimeoutError
from cks.models.common import AsyncJobResult

logger = logging.getLogger("cks.polling")

DEFAULT_POLL_INTERVAL = 2.0
DEFAULT_JOB_TIMEOUT = 3600.0

JobQuery = Callable[[str], dict[str, Any]]


class JobStatus(IntEnum):
    """Job status codes reported by queryAsyncJobResult."""

    PENDING = 0
    SUCCEEDED = 1
    FAILED = 2


class AsyncJob:
    """A single async job and its deadline.

    `step` performs exactly one status query, so a caller can drive the
    job from any loop it likes. `cancel` only affects this job.
    """

    def __init__(
        self,
        job_id: str,
        query: JobQuery,
        *,
        timeout: float = DEFAULT_JOB_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.job_id = job_id
        self.timeout = timeout
        self._query = query
        self._clock = clock
        self.deadline = clock() + timeout
        self.status: JobStatus | None = None
        self.result: dict[str, Any] | None = None
        self.queries = 0
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Stop polling this job before its next query."""
        self._cancelled.set()

    def pause(self, seconds: float) -> None:
        """Sleep between queries, waking early if the job is cancelled."""
        self._cancelled.wait(seconds)

    @property
    def done(self) -> bool:
        return self.status in (JobStatus.SUCCEEDED, JobStatus.FAILED)

    def expired(self) -> bool:
        return self._clock() >= self.deadline

    def remaining(self) -> float:
        return max(0.0, self.deadline - self._clock())

    def step(self) -> bool:
        """Query the job status once.

        Returns:
            True once the job succeeded, False while it is pending.

        Raises:
            JobTimeoutError: If the deadline has passed. No query is sent.
            AsyncJobError: If the job failed or reported an unknown status.
        """
        if self.done:
            return self.status == JobStatus.SUCCEEDED
        if self.expired():
            raise JobTimeoutError(
                f"Timed out getting result for job {self.job_id} after {self.timeout}s",
                job_id=self.job_id,
                timeout=self.timeout,
            )

        data = self._query(self.job_id)
        self.queries += 1
        try:
            result = AsyncJobResult.model_validate(data)
        except pydantic.ValidationError as e:
            raise DecodeError(f"Invalid status response for job {self.job_id}: {e}") from e

        logger.debug("Job %s status: %s", self.job_id, result.job_status)

        if result.job_status == JobStatus.PENDING:
            self.status = JobStatus.PENDING
            return False

        if result.job_status == JobStatus.SUCCEEDED:
            self.status = JobStatus.SUCCEEDED
            self.result = result.job_result or {}
            return True

        self.status = JobStatus.FAILED
        job_result = result.job_result or {}
        error_text = job_result.get("errortext") or "Unknown error"
        raise AsyncJobError(
            f"Async API failed for job {self.job_id}: {error_text}",
            job_id=self.job_id,
            job_status=result.job_status,
            result=job_result,
        )


class AsyncJobPoller:
    """Polls async jobs until they resolve.

    Each query is followed by a wait for whatever is left of the polling
    interval after the query itself returned. A wait in progress can be
    stopped with `cancel(job_id)`; other waits on the same poller carry on.
    """

    def __init__(
        self,
        query: JobQuery,
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
        timeout: float = DEFAULT_JOB_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Any] | None = None,
    ) -> None:
        self._query = query
        self._interval = interval
        self._timeout = timeout
        self._clock = clock
        self._sleep = sleep
        self._active: dict[str, list[AsyncJob]] = {}
        self._active_lock = threading.Lock()

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def timeout(self) -> float:
        return self._timeout

    def cancel(self, job_id: str) -> bool:
        """Stop the wait in progress for `job_id`.

        Returns:
            False if no wait for the job is in progress.
        """
        with self._active_lock:
            jobs = list(self._active.get(job_id, ()))
        for job in jobs:
            job.cancel()
        return bool(jobs)

    def wait(self, job_id: str) -> dict[str, Any]:
        """Block until the job resolves.

        Args:
            job_id: Job ID returned by an async command.

        Returns:
            The job result payload.

        Raises:
            AsyncJobError: If the job failed.
            JobTimeoutError: If the job did not finish within the timeout.
            JobCancelledError: If the job was cancelled while waiting.
        """
        job = AsyncJob(job_id, self._query, timeout=self._timeout, clock=self._clock)
        with self._active_lock:
            self._active.setdefault(job_id, []).append(job)
        try:
            return self._run(job)
        finally:
            with self._active_lock:
                jobs = self._active[job_id]
                jobs.remove(job)
                if not jobs:
                    del self._active[job_id]

    def _run(self, job: AsyncJob) -> dict[str, Any]:
        logger.debug("Waiting for job %s (timeout %ss)", job.job_id, self._timeout)
        sleep = self._sleep or job.pause

        while True:
            if job.cancelled:
                raise JobCancelledError(
                    f"Polling cancelled for job {job.job_id}", job_id=job.job_id
                )

            started = self._clock()
            if job.step():
                logger.debug("Job %s succeeded after %d queries", job.job_id, job.queries)
                return job.result or {}

            delay = min(self._interval - (self._clock() - started), job.remaining())
            if delay > 0:
                sleep(delay)
