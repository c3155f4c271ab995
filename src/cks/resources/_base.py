"""Base resource class."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cks._http import APIClient


class SyncResource:
    """Base class for API resources."""

    def __init__(self, http: APIClient) -> None:
        self._http = http
