"""Tests for path order extraction and difference sorting."""

from yamldelta import Difference, DiffKind, Options, extract_path_order, parse, sort_differences
from yamldelta.ordering import is_list_entry


def modified(path, document_index=0):
    return Difference(path=path, kind=DiffKind.MODIFIED, from_value=1, to_value=2,
                      document_index=document_index)


def paths(diffs):
    return [d.path for d in diffs]


class TestExtractPathOrder:
    """Test recording source positions of paths."""

    def test_depth_first_source_order(self):
        old = parse("b:\n  x: 1\na:\n  - name: n\n    v: 1\n  - 5\n")
        new = parse("c: 1\n")
        order = extract_path_order(old, new, Options())

        assert list(order) == ["b", "b.x", "a", "a.n", "a.n.name", "a.n.v", "a.1", "c"]
        assert order["c"] == 7

    def test_first_occurrence_wins(self):
        old = parse("a: 1\nb: 2\n")
        new = parse("b: 2\na: 1\n")
        order = extract_path_order(old, new, Options())
        assert order == {"a": 0, "b": 1}

    def test_additional_identifier(self):
        old = parse("- key: k1\n  v: 1\n")
        order = extract_path_order(old, [], Options(additional_identifiers=("key",)))
        assert "k1.v" in order

    def test_empty_document(self):
        assert extract_path_order([None], [None], Options()) == {}


class TestSortDifferences:
    """Test presentation order of differences."""

    def test_root_order_follows_source(self):
        order = {"b": 0, "a": 1}
        result = sort_differences([modified("a"), modified("b")], order)
        assert paths(result) == ["b", "a"]

    def test_alphabetical_fallback(self):
        result = sort_differences([modified("zeta"), modified("alpha")], {})
        assert paths(result) == ["alpha", "zeta"]

    def test_shallow_before_deep(self):
        order = {"a": 0, "a.b": 1, "a.b.c": 2, "z": 3}
        result = sort_differences([modified("a.b.c"), modified("z")], order)
        assert paths(result) == ["z", "a.b.c"]

    def test_documents_grouped_by_index(self):
        diffs = [modified("[1].a", 1), modified("[0].b.c", 0), modified("[0].z", 0)]
        result = sort_differences(diffs, {})
        assert paths(result) == ["[0].z", "[0].b.c", "[1].a"]

    def test_root_addition_first(self):
        added = Difference(path="new", kind=DiffKind.ADDED, to_value="x")
        order = {"old": 0, "new": 1}
        result = sort_differences([modified("old"), added], order)
        assert paths(result) == ["new", "old"]

    def test_known_path_beats_unknown(self):
        order = {"r": 0, "r.z": 1}
        result = sort_differences([modified("r.a"), modified("r.z")], order)
        assert paths(result) == ["r.z", "r.a"]

    def test_parent_order_tie_break(self):
        order = {"r": 0, "r.b": 1, "r.a": 2}
        result = sort_differences([modified("r.a.x"), modified("r.b.y")], order)
        assert paths(result) == ["r.b.y", "r.a.x"]

    def test_sort_is_stable(self):
        removed = Difference(path="l.1", kind=DiffKind.REMOVED, from_value="a")
        added = Difference(path="l.1", kind=DiffKind.ADDED, to_value="b")
        result = sort_differences([removed, added], {"l": 0})
        assert result == [removed, added]


class TestListEntry:
    """Test recognising differences that describe whole list entries."""

    def test_numeric_segment(self):
        assert is_list_entry(Difference(path="items.0", kind=DiffKind.ADDED, to_value="x"))

    def test_bracket_suffix(self):
        assert is_list_entry(Difference(path="a[2]", kind=DiffKind.ADDED, to_value="x"))

    def test_identified_entry(self):
        entry = parse("name: web\nimage: nginx")[0]
        diff = Difference(path="containers", kind=DiffKind.ADDED, to_value=entry)
        assert is_list_entry(diff)

    def test_plain_key(self):
        assert not is_list_entry(Difference(path="spec.replicas", kind=DiffKind.ADDED, to_value=3))
