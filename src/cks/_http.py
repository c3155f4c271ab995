"""HTTP client infrastructure for the CloudStack API.

Handles:
- Request signing via RequestSigner
- Response envelope unwrapping
- Error mapping
- Dispatch of async commands to the job poller
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any, TypeVar

import httpx
import pydantic

from cks._polling import DEFAULT_JOB_TIMEOUT, DEFAULT_POLL_INTERVAL, AsyncJobPoller
from cks._version import __version__
from cks.auth import Credentials, RequestSigner
from cks.exceptions import (
    APIError,
    ConnectionError,
    DecodeError,
    TimeoutError,
    TransportError,
)

logger = logging.getLogger("cks.http")

T = TypeVar("T", bound=pydantic.BaseModel)

DEFAULT_TIMEOUT = 60.0

DEFAULT_HEADERS = {
    "User-Agent": f"cks-autoscaler/{__version__}",
    "Accept": "application/json",
}

ENVELOPE_SUFFIX = "response"

_SECRET_PARAMS = re.compile(r"(?i)(apikey|signature)=[^&]*")


class APIClient:
    """Synchronous client for the CloudStack API.

    Every call is a signed HTTP GET. The transport (connection pool and
    cookie jar) is shared by all calls made through one client.

    Example:
        ```python
        client = APIClient(credentials)
        payload = client.request("listKubernetesClusters", {"id": cluster_id})
        job_result = client.request(
            "scaleKubernetesCluster", {"id": cluster_id, "size": "3"}, asynchronous=True
        )
        ```
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        job_timeout: float = DEFAULT_JOB_TIMEOUT,
    ) -> None:
        self._credentials = credentials
        self._signer = RequestSigner(credentials)
        self._client = httpx.Client(
            headers=DEFAULT_HEADERS.copy(),
            timeout=timeout,
            verify=verify_ssl,
            trust_env=True,
        )
        self._poller = AsyncJobPoller(
            self._query_job,
            interval=poll_interval,
            timeout=job_timeout,
        )

    @property
    def endpoint(self) -> str:
        return self._credentials.endpoint

    @property
    def poller(self) -> AsyncJobPoller:
        return self._poller

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> APIClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        command: str,
        params: Mapping[str, str] | None = None,
        *,
        asynchronous: bool = False,
    ) -> dict[str, Any]:
        """Run an API command.

        Args:
            command: API command name.
            params: Command parameters.
            asynchronous: Whether the command may return a job ID. If it
                does, the job is polled and its result returned instead.

        Returns:
            The unwrapped response payload, or the job result.
        """
        payload = self._send(command, params)
        if asynchronous and payload.get("jobid"):
            job_id = str(payload["jobid"])
            logger.debug("%s started async job %s", command, job_id)
            return self._poller.wait(job_id)
        return payload

    def request_model(
        self,
        command: str,
        model: type[T],
        params: Mapping[str, str] | None = None,
        *,
        asynchronous: bool = False,
    ) -> T:
        """Run an API command and decode the payload into `model`.

        Raises:
            DecodeError: If the payload does not fit the model.
        """
        data = self.request(command, params, asynchronous=asynchronous)
        try:
            return model.model_validate(data)
        except pydantic.ValidationError as e:
            raise DecodeError(f"Unexpected {command} response: {e}", response=data) from e

    def _query_job(self, job_id: str) -> dict[str, Any]:
        return self.request("queryAsyncJobResult", {"jobid": job_id})

    def _send(self, command: str, params: Mapping[str, str] | None) -> dict[str, Any]:
        signed = self._signer.sign(command, params)
        url = f"{self._credentials.endpoint}?{signed.query}"
        logger.debug("API request: %s", _redact(url))

        try:
            response = self._client.get(url)
        except httpx.TimeoutException as e:
            raise TimeoutError(f"Request timed out: {e}") from e
        except httpx.TransportError as e:
            raise ConnectionError(f"Failed to connect: {e}") from e

        logger.debug("API response status: %s", response.status_code)
        return self._handle_response(response, command)

    def _handle_response(self, response: httpx.Response, command: str) -> dict[str, Any]:
        """Unwrap the response envelope and map errors."""
        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(
                f"HTTP {response.status_code}: response is not valid JSON", response=response
            ) from e

        payload = unwrap_envelope(data, command)

        if "errorcode" in payload:
            error_code = payload.get("errorcode")
            cs_error_code = payload.get("cserrorcode")
            error_text = payload.get("errortext")
            raise APIError(
                f"(HTTP {error_code}, error code {cs_error_code}) {error_text}",
                error_code=error_code,
                cs_error_code=cs_error_code,
                error_text=error_text,
                status_code=response.status_code,
                response=response,
            )

        if not response.is_success:
            raise TransportError(
                f"HTTP {response.status_code}: {response.reason_phrase}", response=response
            )

        return payload


def unwrap_envelope(data: Any, command: str) -> dict[str, Any]:
    """Return the payload wrapped in the ``<command>response`` key.

    Falls back to the single top-level key ending in ``response``
    (error responses are not always keyed by command).

    Raises:
        DecodeError: If no envelope can be found.
    """
    if not isinstance(data, dict):
        raise DecodeError("Failed to decode response: expected a JSON object", response=data)

    expected = f"{command.lower()}{ENVELOPE_SUFFIX}"
    if expected in data:
        payload = data[expected]
    else:
        keys = [key for key in data if key.endswith(ENVELOPE_SUFFIX)]
        if len(keys) != 1:
            raise DecodeError(
                f"Failed to decode response: no unique '*{ENVELOPE_SUFFIX}' key in {sorted(data)}",
                response=data,
            )
        payload = data[keys[0]]

    if not isinstance(payload, dict):
        raise DecodeError("Failed to decode response: envelope is not an object", response=data)
    return payload


def _redact(url: str) -> str:
    return _SECRET_PARAMS.sub(lambda m: f"{m.group(1)}=***", url)
