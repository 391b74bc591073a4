"""
kubequery

以只读关系表的形式向SQL宿主进程暴露Kubernetes集群对象
"""

__version__ = "1.0.0"

from .config import KubeQueryConfig
from .errors import (
    ClusterError,
    ClusterUnreachable,
    ConfigurationError,
    KubeQueryError,
    PartialDecode,
    SchemaContractViolation,
    TransportError,
    UnknownTableError,
)

__all__ = [
    "KubeQueryConfig",
    "KubeQueryError",
    "ConfigurationError",
    "ClusterError",
    "ClusterUnreachable",
    "PartialDecode",
    "UnknownTableError",
    "SchemaContractViolation",
    "TransportError",
]
