"""Common models shared across resources."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CKSModel(BaseModel):
    """Base model for all CKS models.

    Instances are immutable; the management server adds fields between
    releases, so unknown keys are ignored.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )


class AsyncJobResult(CKSModel):
    """Response of the queryAsyncJobResult command."""

    job_id: str | None = Field(None, alias="jobid", description="Async job ID")
    job_status: int = Field(..., alias="jobstatus", description="0 pending, 1 succeeded, 2 failed")
    job_result_code: int | None = Field(None, alias="jobresultcode")
    job_result: dict[str, Any] | None = Field(None, alias="jobresult")
    command: str | None = Field(None, alias="cmd")
