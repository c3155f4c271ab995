"""CKS API client.

Main entry point for talking to the CloudStack Kubernetes Service.
"""

from __future__ import annotations

from typing import Any

from cks._config import CKSConfig
from cks._http import APIClient
from cks.auth import Credentials
from cks.exceptions import ConfigurationError
from cks.resources.clusters import Clusters
from cks.resources.jobs import AsyncJobs


class CKSClient:
    """Synchronous client for the CloudStack Kubernetes Service API.

    Example:
        ```python
        from cks import CKSClient

        with CKSClient(api_key="...", secret_key="...", endpoint="https://cloud/client/api") as client:
            cluster = client.clusters.get("cluster-id")
            client.clusters.scale(cluster.id, cluster.worker_count + 1)
        ```

    Environment variables:
        API_KEY: API key
        SECRET_KEY: Secret key used for request signing
        ENDPOINT: Management server API URL
        CKS_TIMEOUT: HTTP timeout in seconds (default: 60)
        CKS_POLL_INTERVAL: Async job polling interval in seconds (default: 2)
        CKS_JOB_TIMEOUT: Async job timeout in seconds (default: 3600)
        CKS_VERIFY_SSL: Whether to verify TLS certificates (default: true)

    Explicit arguments take priority over environment variables, which take
    priority over the config file.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        secret_key: str | None = None,
        endpoint: str | None = None,
        timeout: float | None = None,
        poll_interval: float | None = None,
        job_timeout: float | None = None,
        verify_ssl: bool | None = None,
        config: CKSConfig | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: API key. Falls back to API_KEY env var or config file.
            secret_key: Secret key. Falls back to SECRET_KEY.
            endpoint: API endpoint URL. Falls back to ENDPOINT.
            timeout: HTTP request timeout in seconds.
            poll_interval: Seconds between async job status queries.
            job_timeout: Maximum seconds to wait for an async job.
            verify_ssl: Whether to verify TLS certificates.
            config: Preloaded configuration, used instead of CKSConfig.load().
        """
        config = config or CKSConfig.load()

        self._credentials = Credentials(
            api_key=api_key or config.api_key or "",
            secret_key=secret_key or config.secret_key or "",
            endpoint=endpoint or config.endpoint or "",
        )
        missing = [
            env_var
            for env_var, value in (
                ("API_KEY", self._credentials.api_key),
                ("SECRET_KEY", self._credentials.secret_key),
                ("ENDPOINT", self._credentials.endpoint),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Missing configuration: {', '.join(missing)} not set. "
                "Pass them to CKSClient, set the environment variables, "
                "or configure ~/.cks/config.toml"
            )

        self._timeout = timeout if timeout is not None else config.timeout
        self._poll_interval = poll_interval if poll_interval is not None else config.poll_interval
        self._job_timeout = job_timeout if job_timeout is not None else config.job_timeout
        self._verify_ssl = verify_ssl if verify_ssl is not None else config.verify_ssl

        self._http = APIClient(
            self._credentials,
            timeout=self._timeout,
            verify_ssl=self._verify_ssl,
            poll_interval=self._poll_interval,
            job_timeout=self._job_timeout,
        )

        # Initialize resource managers
        self.clusters = Clusters(self._http)
        self.jobs = AsyncJobs(self._http)

    @property
    def http(self) -> APIClient:
        return self._http

    @property
    def endpoint(self) -> str:
        return self._credentials.endpoint

    def close(self) -> None:
        """Close the client and release resources."""
        self._http.close()

    def __enter__(self) -> CKSClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"CKSClient(endpoint={self.endpoint!r})"
