"""Tests for chroot re-rooting and difference filtering."""

import pytest
from yamldelta import (
    ChrootError,
    Difference,
    DiffKind,
    FilterOptions,
    Options,
    ValidationError,
    compare,
    filter_differences,
    parse,
)
from yamldelta.chroot import apply_chroot, navigate_to_path, parse_chroot_path
from yamldelta.filters import path_matches


DOC_FROM = b"""
metadata:
  name: app
spec:
  containers:
    - image: nginx:1.0
      port: 80
    - image: redis:6
"""

DOC_TO = b"""
metadata:
  name: renamed
spec:
  containers:
    - image: nginx:1.1
      port: 80
    - image: redis:6
"""


class TestChrootPath:
    """Test chroot path parsing."""

    def test_keys_and_index(self):
        segments = parse_chroot_path("spec.containers[0].image")
        assert [str(s) for s in segments] == ["spec", "containers", "[0]", "image"]
        assert segments[2].is_index
        assert segments[2].index == 0

    def test_keys_are_literal(self):
        segments = parse_chroot_path("metadata.annotations.team/owner")
        assert [str(s) for s in segments] == ["metadata", "annotations", "team/owner"]
        assert [s.key for s in parse_chroot_path("data.where")] == ["data", "where"]
        assert [s.key for s in parse_chroot_path("spec.*")] == ["spec", "*"]

    def test_empty_path(self):
        assert parse_chroot_path("") == []

    @pytest.mark.parametrize("path", [
        "spec.containers[*]", "items[0:2]", "items[]", "items[0]x", "a[0][1]", "spec[", "spec]",
    ])
    def test_malformed_index(self, path):
        with pytest.raises(ChrootError):
            parse_chroot_path(path)


class TestNavigate:
    """Test resolving chroot paths in a document."""

    def setup_method(self):
        self.doc = parse(DOC_FROM)[0]

    def test_resolves_node(self):
        assert navigate_to_path(self.doc, "spec.containers[1].image") == "redis:6"

    def test_missing_key(self):
        with pytest.raises(ChrootError) as exc_info:
            navigate_to_path(self.doc, "spec.volumes")
        assert "not found" in exc_info.value.message
        assert exc_info.value.path == "spec.volumes"

    def test_index_out_of_bounds(self):
        with pytest.raises(ChrootError) as exc_info:
            navigate_to_path(self.doc, "spec.containers[5]")
        assert "out of bounds" in exc_info.value.message

    def test_index_into_map(self):
        with pytest.raises(ChrootError) as exc_info:
            navigate_to_path(self.doc, "spec[0]")
        assert "expected list" in exc_info.value.message

    def test_key_into_scalar(self):
        with pytest.raises(ChrootError) as exc_info:
            navigate_to_path(self.doc, "metadata.name.first")
        assert "expected map" in exc_info.value.message

    def test_keyword_and_slash_keys(self):
        doc = parse(
            "data:\n  where: here\n"
            "metadata:\n  annotations:\n    team/owner: platform\n    on call: alice\n"
        )[0]
        assert navigate_to_path(doc, "data.where") == "here"
        assert navigate_to_path(doc, "metadata.annotations.team/owner") == "platform"
        assert navigate_to_path(doc, "metadata.annotations.on call") == "alice"

    def test_list_to_documents(self):
        docs = apply_chroot([self.doc], "spec.containers", list_to_documents=True)
        assert len(docs) == 2
        assert docs[1]["image"] == "redis:6"


class TestChrootCompare:
    """Test chroot options through the engine."""

    def test_chroot_narrows_comparison(self):
        diffs = compare(DOC_FROM, DOC_TO, Options(chroot="spec"))
        assert [d.path for d in diffs] == ["containers.0.image"]

    def test_chroot_from_and_to(self):
        old = b"wrapper:\n  value: 1\n"
        new = b"value: 2\n"
        diffs = compare(old, new, Options(chroot_from="wrapper"))

        assert [(d.path, d.from_value, d.to_value) for d in diffs] == [("value", 1, 2)]

    def test_chroot_overrides_side_paths(self):
        diffs = compare(
            DOC_FROM, DOC_TO, Options(chroot="metadata", chroot_from="spec", chroot_to="spec")
        )
        assert [d.path for d in diffs] == ["name"]

    def test_chroot_list_to_documents(self):
        options = Options(chroot="spec.containers", chroot_list_to_documents=True)
        diffs = compare(DOC_FROM, DOC_TO, options)

        assert [(d.path, d.document_index) for d in diffs] == [("[0].image", 0)]

    def test_chroot_applies_after_swap(self):
        old = b"a:\n  v: 1\n"
        new = b"b:\n  v: 2\n"
        diffs = compare(old, new, Options(swap=True, chroot_from="b", chroot_to="a"))

        assert [(d.from_value, d.to_value) for d in diffs] == [(2, 1)]

    def test_unresolved_chroot_raises(self):
        with pytest.raises(ChrootError):
            compare(DOC_FROM, DOC_TO, Options(chroot="status"))


class TestFilters:
    """Test filtering differences by path."""

    def setup_method(self):
        self.diffs = [
            Difference(path="spec.replicas", kind=DiffKind.MODIFIED, from_value=1, to_value=2),
            Difference(path="specs.other", kind=DiffKind.ADDED, to_value=1),
            Difference(path="metadata.labels.app", kind=DiffKind.REMOVED, from_value="x"),
            Difference(path="[1].spec.image", kind=DiffKind.MODIFIED, from_value="a", to_value="b"),
        ]

    def test_path_boundary(self):
        assert path_matches("spec.replicas", "spec")
        assert path_matches("spec", "spec")
        assert path_matches("[1][0]", "[1]")
        assert not path_matches("specs.other", "spec")

    def test_no_filter(self):
        assert filter_differences(self.diffs) == self.diffs
        assert filter_differences(self.diffs, FilterOptions()) == self.diffs

    def test_include_paths(self):
        result = filter_differences(self.diffs, FilterOptions(include_paths=["spec"]))
        assert [d.path for d in result] == ["spec.replicas"]

    def test_exclude_paths(self):
        result = filter_differences(self.diffs, FilterOptions(exclude_paths=["metadata"]))
        assert [d.path for d in result] == ["spec.replicas", "specs.other", "[1].spec.image"]

    def test_include_then_exclude(self):
        options = FilterOptions(include_regexp=[r"spec"], exclude_paths=["specs"])
        result = filter_differences(self.diffs, options)
        assert [d.path for d in result] == ["spec.replicas", "[1].spec.image"]

    def test_exclude_regexp(self):
        result = filter_differences(self.diffs, FilterOptions(exclude_regexp=[r"^\[\d+\]"]))
        assert "[1].spec.image" not in [d.path for d in result]

    def test_invalid_regexp(self):
        with pytest.raises(ValidationError) as exc_info:
            filter_differences(self.diffs, FilterOptions(include_regexp=["("]))
        assert exc_info.value.details == {"pattern": "("}
