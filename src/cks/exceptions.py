"""CKS autoscaler exceptions.

All exceptions inherit from CKSError for easy catching.
"""

from __future__ import annotations

from typing import Any


class CKSError(Exception):
    """Base exception for all CKS autoscaler errors."""

    def __init__(self, message: str, *, response: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.response = response

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class ConfigurationError(CKSError):
    """Missing or malformed configuration.

    Check API_KEY, SECRET_KEY, ENDPOINT and CKS_NODES.
    """


class TransportError(CKSError):
    """The request did not produce a usable response."""


class ConnectionError(TransportError):
    """Failed to connect to the CloudStack management server.

    Check network connectivity and the endpoint configuration.
    """


class TimeoutError(TransportError):
    """HTTP request timed out."""


class DecodeError(TransportError):
    """Response body could not be decoded into the expected shape."""


class APIError(CKSError):
    """The management server rejected the command.

    Carries the vendor error codes and error text unchanged.
    """

    def __init__(
        self,
        message: str,
        *,
        error_code: int | None = None,
        cs_error_code: int | None = None,
        error_text: str | None = None,
        status_code: int | None = None,
        response: Any = None,
    ) -> None:
        super().__init__(message, response=response)
        self.error_code = error_code
        self.cs_error_code = cs_error_code
        self.error_text = error_text
        self.status_code = status_code


class NotFoundError(CKSError):
    """Resource not found."""

    def __init__(
        self, message: str, *, resource_type: str = "", resource_id: str = "", response: Any = None
    ) -> None:
        super().__init__(message, response=response)
        self.resource_type = resource_type
        self.resource_id = resource_id


class AsyncJobError(CKSError):
    """Async job finished in a failed or unknown state.

    Check job_id and result for details.
    """

    def __init__(
        self,
        message: str,
        *,
        job_id: str,
        job_status: int | None = None,
        result: dict[str, Any] | None = None,
        response: Any = None,
    ) -> None:
        super().__init__(message, response=response)
        self.job_id = job_id
        self.job_status = job_status
        self.result = result or {}


class JobTimeoutError(CKSError):
    """Async job did not reach a terminal state in time.

    The outcome of the job is unknown, it may still complete on the server.
    """

    def __init__(self, message: str, *, job_id: str, timeout: float) -> None:
        super().__init__(message)
        self.job_id = job_id
        self.timeout = timeout


class JobCancelledError(CKSError):
    """Polling was cancelled before the job finished."""

    def __init__(self, message: str, *, job_id: str) -> None:
        super().__init__(message)
        self.job_id = job_id


class BoundsError(CKSError):
    """Scaling request violates the configured size bounds."""


class ValidationError(CKSError):
    """Request arguments are invalid."""


class UnsupportedOperationError(CKSError):
    """Operation is not supported by this provider."""
