"""
CKS Autoscaler - node group provider for CloudStack Kubernetes Service.

Signed API client, async job polling and a lock-guarded cluster manager.
"""

from cks._config import CKSConfig, NodeGroupSpec
from cks._version import __version__
from cks.auth import Credentials, RequestSigner
from cks.client import CKSClient
from cks.exceptions import (
    APIError,
    AsyncJobError,
    BoundsError,
    CKSError,
    ConfigurationError,
    ConnectionError,
    DecodeError,
    JobCancelledError,
    JobTimeoutError,
    NotFoundError,
    TimeoutError,
    TransportError,
    UnsupportedOperationError,
    ValidationError,
)
from cks.manager import ClusterManager
from cks.models import ClusterSnapshot, Instance, Node
from cks.node_group import ClusterNodeGroup, NodeGroup
from cks.provider import CloudStackProvider, build_provider

__all__ = [
    # Version
    "__version__",
    # Client
    "CKSClient",
    "Credentials",
    "RequestSigner",
    # Config
    "CKSConfig",
    "NodeGroupSpec",
    # Cluster management
    "ClusterManager",
    "ClusterSnapshot",
    "ClusterNodeGroup",
    "NodeGroup",
    "CloudStackProvider",
    "build_provider",
    "Instance",
    "Node",
    # Exceptions
    "CKSError",
    "ConfigurationError",
    "TransportError",
    "ConnectionError",
    "TimeoutError",
    "DecodeError",
    "APIError",
    "NotFoundError",
    "AsyncJobError",
    "JobTimeoutError",
    "JobCancelledError",
    "BoundsError",
    "ValidationError",
    "UnsupportedOperationError",
]
