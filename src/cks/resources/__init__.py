"""API resource modules."""

from cks.resources.clusters import Clusters
from cks.resources.jobs import AsyncJobs

__all__ = [
    "AsyncJobs",
    "Clusters",
]
