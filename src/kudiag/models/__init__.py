"""Data models for kudiag."""

from .items import (
    DiagnosticItem,
    ErrorItem,
    LogItem,
    ObjectItem,
    ObjectListItem,
    OpaqueItem,
    ValueItem,
)
from .objects import (
    KUDO_API_VERSION,
    KUDO_GROUP,
    GroupVersionKind,
    Instance,
    KubeObject,
    KubeObjectList,
    ObjectMeta,
    Operator,
    OperatorVersion,
)

__all__ = [
    "DiagnosticItem",
    "ErrorItem",
    "LogItem",
    "ObjectItem",
    "ObjectListItem",
    "OpaqueItem",
    "ValueItem",
    "KUDO_API_VERSION",
    "KUDO_GROUP",
    "GroupVersionKind",
    "Instance",
    "KubeObject",
    "KubeObjectList",
    "ObjectMeta",
    "Operator",
    "OperatorVersion",
]
