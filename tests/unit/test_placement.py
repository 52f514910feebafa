"""Unit tests for placement rules and kind resolution."""

from pathlib import Path
from types import SimpleNamespace

import pytest

from kudiag.bundle.placement import (
    PlacementDispatcher,
    PrintMode,
    flat_placement,
    item_for_mode,
    list_items,
    nested_placement,
    object_name,
)
from kudiag.config import KudiagConfig
from kudiag.errors import KindResolutionError, MissingIdentityError
from kudiag.models.items import ObjectItem, ObjectListItem, OpaqueItem
from kudiag.models.objects import GroupVersionKind, Instance, KubeObject, KubeObjectList
from kudiag.scheme import Scheme, default_scheme
from kudiag.utils.fs import MemoryFileSystem


class Pod(KubeObject):
    """Core pod as returned by a list call, without type metadata."""


class CountingScheme(Scheme):
    """Scheme recording every lookup."""

    def __init__(self):
        super().__init__()
        self.lookups = 0

    def object_kind(self, obj):
        self.lookups += 1
        return super().object_kind(obj)


class TestPlacementNaming:
    """Test deterministic path derivation."""

    def test_nested_placement(self):
        """Kind is lowercased and joined to the name with an underscore."""
        placement = nested_placement("root", "Pod", "web-1")
        assert placement.path == Path("root/pod_web-1/web-1.yaml")

    def test_flat_placement(self):
        """Flat placement writes directly into the parent directory."""
        placement = flat_placement("root", "ConfigMap")
        assert placement.directory == Path("root")
        assert placement.path == Path("root/configmap.yaml")


class TestObjectIdentity:
    """Test identity and list extraction."""

    def test_object_name_sources(self):
        """Names come from models, mappings and attribute objects."""
        assert object_name(Pod(metadata={"name": "web-1"})) == "web-1"
        assert object_name({"metadata": {"name": "web-2"}}) == "web-2"
        assert object_name(SimpleNamespace(metadata=SimpleNamespace(name="web-3"))) == "web-3"

    def test_object_name_missing(self):
        """Objects without a name yield None."""
        assert object_name(Pod()) is None
        assert object_name({"metadata": {}}) is None
        assert object_name(42) is None

    def test_list_items_sources(self):
        """Lists come from list models, mappings and plain sequences."""
        pods = [Pod(metadata={"name": "a"}), Pod(metadata={"name": "b"})]
        assert list_items(KubeObjectList(items=pods)) == pods
        assert list_items({"items": pods}) == pods
        assert list_items(tuple(pods)) == pods

    def test_list_items_rejects_non_lists(self):
        """Single objects are not lists."""
        with pytest.raises(KindResolutionError):
            list_items(Pod(metadata={"name": "a"}))
        with pytest.raises(KindResolutionError):
            list_items("pods")

    def test_item_for_mode(self):
        """Each print mode maps to one item type."""
        pod = Pod(metadata={"name": "a"})
        assert item_for_mode(pod, PrintMode.OBJECT_WITH_DIR) == ObjectItem(pod)
        assert item_for_mode(pod, PrintMode.OBJECT_LIST_WITH_DIRS) == ObjectListItem(pod)
        assert item_for_mode(pod, PrintMode.RUNTIME_OBJECT) == OpaqueItem(pod)


class TestKindResolution:
    """Test the dispatcher's kind resolution contract."""

    def make_dispatcher(self, scheme):
        return PlacementDispatcher(MemoryFileSystem(), scheme, KudiagConfig())

    def test_pre_resolved_objects_skip_scheme(self):
        """Domain objects carrying their kind are never looked up."""
        scheme = CountingScheme()
        dispatcher = self.make_dispatcher(scheme)

        gvk = dispatcher.resolve_kind(Instance(metadata={"name": "my-instance"}), "diag")

        assert gvk == GroupVersionKind("kudo.dev", "v1beta1", "Instance")
        assert scheme.lookups == 0

    def test_other_objects_use_scheme(self):
        """Registered types resolve through the scheme."""
        scheme = CountingScheme()
        scheme.register(Pod, GroupVersionKind("", "v1", "Pod"))
        dispatcher = self.make_dispatcher(scheme)

        assert dispatcher.resolve_kind(Pod(metadata={"name": "a"}), "diag").kind == "Pod"
        assert scheme.lookups == 1

    def test_declared_kind_outside_domain_group_is_resolved(self):
        """A declared kind outside the pre-resolved groups is still looked up."""
        dispatcher = self.make_dispatcher(default_scheme())
        obj = KubeObject(apiVersion="apps/v1", kind="Deployment", metadata={"name": "d"})

        with pytest.raises(KindResolutionError, match="failed to resolve kind of object in diag"):
            dispatcher.resolve_kind(obj, "diag")

    def test_unregistered_object_is_not_written(self):
        """Kind resolution failures stop the write before any file exists."""
        dispatcher = self.make_dispatcher(Scheme())

        with pytest.raises(KindResolutionError, match="no kind is registered for the type"):
            dispatcher.dispatch(ObjectItem(Pod(metadata={"name": "a"})), "diag")
        assert dispatcher.fs.list_files() == []

    def test_missing_identity(self):
        """Nested placement without a name raises MissingIdentityError."""
        scheme = Scheme()
        scheme.register(Pod, GroupVersionKind("", "v1", "Pod"))
        dispatcher = self.make_dispatcher(scheme)

        with pytest.raises(MissingIdentityError, match="no metadata.name"):
            dispatcher.dispatch(ObjectItem(Pod()), "diag")

    def test_flat_placement_needs_no_identity(self):
        """Opaque objects are written by kind only."""
        scheme = Scheme()
        scheme.register(Pod, GroupVersionKind("", "v1", "Pod"))
        dispatcher = self.make_dispatcher(scheme)

        path = dispatcher.dispatch(OpaqueItem(Pod()), "diag")

        assert path == Path("diag/pod.yaml")

    def test_dispatch_rejects_unexpanded_lists(self):
        """Lists must be expanded into single items first."""
        dispatcher = self.make_dispatcher(Scheme())
        with pytest.raises(TypeError):
            dispatcher.dispatch(ObjectListItem([]), "diag")

    def test_expand_list(self):
        """Lists expand into one ObjectItem per element."""
        dispatcher = self.make_dispatcher(Scheme())
        pods = [Pod(metadata={"name": "a"}), Pod(metadata={"name": "b"})]
        assert dispatcher.expand(ObjectListItem(pods)) == [ObjectItem(pods[0]), ObjectItem(pods[1])]
