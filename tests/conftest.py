"""Pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest
import respx

from cks._http import APIClient
from cks.auth import Credentials
from tests.fakes import CommandRouter, cluster_payload


@pytest.fixture
def endpoint() -> str:
    """Test API endpoint."""
    return "https://cloud.example.com/client/api"


@pytest.fixture
def credentials(endpoint: str) -> Credentials:
    """Test credentials."""
    return Credentials(api_key="test-api-key", secret_key="test-secret-key", endpoint=endpoint)


@pytest.fixture
def api_client(credentials: Credentials) -> Generator[APIClient, None, None]:
    """APIClient that polls async jobs without waiting."""
    c = APIClient(credentials, poll_interval=0)
    yield c
    c.close()


@pytest.fixture
def mock_api(endpoint: str) -> Generator[CommandRouter, None, None]:
    """Mock management server dispatching on the command parameter."""
    router = CommandRouter()
    with respx.mock(assert_all_called=False) as mock:
        mock.get(endpoint).mock(side_effect=router)
        yield router


@pytest.fixture
def sample_cluster() -> dict[str, Any]:
    """Sample cluster as returned by listKubernetesClusters."""
    return cluster_payload(worker_count=2, master_count=1)
