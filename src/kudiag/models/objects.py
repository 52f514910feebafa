"""Models for Kubernetes-style objects written into a bundle."""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

KUDO_GROUP = "kudo.dev"
KUDO_API_VERSION = "kudo.dev/v1beta1"


@dataclass(frozen=True)
class GroupVersionKind:
    """Fully qualified kind of an object."""
    group: str
    version: str
    kind: str

    @property
    def api_version(self) -> str:
        """apiVersion string; the core group has no prefix."""
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    @classmethod
    def from_api_version(cls, api_version: str, kind: str) -> "GroupVersionKind":
        """Split an ``apiVersion`` such as ``apps/v1`` into group and version."""
        group, _, version = api_version.rpartition("/")
        return cls(group=group, version=version, kind=kind)


class ObjectMeta(BaseModel):
    """Identity metadata of an object."""
    name: str | None = None
    namespace: str | None = None
    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None

    model_config = ConfigDict(extra="allow")


class KubeObject(BaseModel):
    """Generic structured object with optional type metadata.

    Fields other than apiVersion, kind and metadata (spec, status, data, ...)
    are kept as extra fields and rendered in the order they were given.
    """
    api_version: str | None = Field(alias="apiVersion", default=None)
    kind: str | None = None
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @property
    def name(self) -> str | None:
        return self.metadata.name

    def group(self) -> str:
        if not self.api_version:
            return ""
        group, _, _ = self.api_version.rpartition("/")
        return group

    def to_manifest(self) -> dict[str, Any]:
        """Dump as a plain mapping using wire field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class KubeObjectList(BaseModel):
    """List of structured objects, as returned by list calls."""
    api_version: str | None = Field(alias="apiVersion", default=None)
    kind: str | None = None
    items: list[Any] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Instance(KubeObject):
    """KUDO operator instance custom resource."""
    api_version: str | None = Field(alias="apiVersion", default=KUDO_API_VERSION)
    kind: str | None = "Instance"


class Operator(KubeObject):
    """KUDO operator custom resource."""
    api_version: str | None = Field(alias="apiVersion", default=KUDO_API_VERSION)
    kind: str | None = "Operator"


class OperatorVersion(KubeObject):
    """KUDO operator version custom resource."""
    api_version: str | None = Field(alias="apiVersion", default=KUDO_API_VERSION)
    kind: str | None = "OperatorVersion"
