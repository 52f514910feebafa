"""Type registry resolving the kind of Python objects."""

import logging
from typing import Any, Dict

from kudiag.errors import KindResolutionError
from kudiag.models.objects import (
    KUDO_API_VERSION,
    GroupVersionKind,
    Instance,
    KubeObject,
    Operator,
    OperatorVersion,
)

logger = logging.getLogger(__name__)


class Scheme:
    """Maps Python types to the kind they represent.

    Lookup is by exact type. Objects returned by list calls usually have an
    empty kind, so the registered type is the only reliable source.
    """

    def __init__(self, trust_declared_kind: bool = False):
        """Initialize an empty scheme.

        Args:
            trust_declared_kind: Resolve generic KubeObject instances from the
                apiVersion and kind they declare when their type is not
                registered (useful for manifests read from disk).
        """
        self.trust_declared_kind = trust_declared_kind
        self._kinds: Dict[type, GroupVersionKind] = {}

    def register(self, cls: type, gvk: GroupVersionKind) -> None:
        """Register ``cls`` as representing ``gvk``."""
        self._kinds[cls] = gvk

    def is_registered(self, cls: type) -> bool:
        return cls in self._kinds

    def object_kind(self, obj: Any) -> GroupVersionKind:
        """Resolve the kind of ``obj``.

        Raises:
            KindResolutionError: If the type of ``obj`` is not registered
        """
        gvk = self._kinds.get(type(obj))
        if gvk is not None:
            return gvk

        if self.trust_declared_kind and isinstance(obj, KubeObject) and obj.kind and obj.api_version:
            return GroupVersionKind.from_api_version(obj.api_version, obj.kind)

        cls = type(obj)
        raise KindResolutionError(
            f"no kind is registered for the type {cls.__module__}.{cls.__qualname__}"
        )


def default_scheme(trust_declared_kind: bool = False) -> Scheme:
    """Create a scheme with the KUDO custom resources registered."""
    scheme = Scheme(trust_declared_kind=trust_declared_kind)
    for cls in (Instance, Operator, OperatorVersion):
        kind = cls.model_fields["kind"].default
        scheme.register(cls, GroupVersionKind.from_api_version(KUDO_API_VERSION, kind))
    return scheme
