"""Async jobs resource."""

from __future__ import annotations

from typing import Any

from cks.models.common import AsyncJobResult
from cks.resources._base import SyncResource


class AsyncJobs(SyncResource):
    """Async job lookups."""

    def query(self, job_id: str) -> AsyncJobResult:
        """Get the current status of an async job without waiting.

        Args:
            job_id: Job ID.

        Returns:
            Job status and, once finished, its result.
        """
        return self._http.request_model("queryAsyncJobResult", AsyncJobResult, {"jobid": job_id})

    def wait(self, job_id: str) -> dict[str, Any]:
        """Block until an async job resolves and return its result."""
        return self._http.poller.wait(job_id)
