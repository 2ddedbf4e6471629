"""Tests for Kubernetes resource detection and document matching."""

from yamldelta import is_kubernetes_resource, kubernetes_identifier, match_documents, parse


def resource(kind="Deployment", name="web", namespace=None, api_version="apps/v1"):
    meta = f"  name: {name}\n"
    if namespace:
        meta += f"  namespace: {namespace}\n"
    return parse(f"apiVersion: {api_version}\nkind: {kind}\nmetadata:\n{meta}")[0]


class TestDetection:
    """Test recognising Kubernetes resources."""

    def test_full_resource(self):
        assert is_kubernetes_resource(resource())

    def test_generate_name(self):
        doc = parse("apiVersion: v1\nkind: Pod\nmetadata:\n  generateName: job-\n")[0]
        assert is_kubernetes_resource(doc)
        assert kubernetes_identifier(doc) == "v1:Pod:job-"

    def test_missing_fields(self):
        assert not is_kubernetes_resource(parse("kind: Pod\nmetadata: {name: a}")[0])
        assert not is_kubernetes_resource(parse("apiVersion: v1\nmetadata: {name: a}")[0])
        assert not is_kubernetes_resource(parse("apiVersion: v1\nkind: Pod")[0])
        assert not is_kubernetes_resource(
            parse("apiVersion: v1\nkind: Pod\nmetadata: {labels: {}}")[0]
        )

    def test_non_string_kind(self):
        assert not is_kubernetes_resource(parse("apiVersion: v1\nkind: 5\nmetadata: {name: a}")[0])

    def test_non_map_document(self):
        assert not is_kubernetes_resource(None)
        assert not is_kubernetes_resource(["apiVersion"])


class TestIdentifier:
    """Test Kubernetes identity strings."""

    def test_with_namespace(self):
        doc = resource(namespace="prod")
        assert kubernetes_identifier(doc) == "apps/v1:Deployment:prod/web"

    def test_without_namespace(self):
        assert kubernetes_identifier(resource()) == "apps/v1:Deployment:web"

    def test_not_a_resource(self):
        assert kubernetes_identifier(parse("a: 1")[0]) is None


class TestMatching:
    """Test pairing documents across streams."""

    def test_reordered_documents(self):
        old = [resource(name="a"), resource(name="b")]
        new = [resource(name="b"), resource(name="a")]
        match = match_documents(old, new)

        assert match.matched == [(0, 1), (1, 0)]
        assert match.unmatched_old == []
        assert match.unmatched_new == []

    def test_namespace_distinguishes(self):
        old = [resource(namespace="dev")]
        new = [resource(namespace="prod")]
        match = match_documents(old, new)

        assert match.matched == []
        assert match.unmatched_old == [0]
        assert match.unmatched_new == [0]

    def test_kind_distinguishes(self):
        match = match_documents([resource(kind="Service")], [resource(kind="Deployment")])
        assert match.matched == []

    def test_plain_documents_are_unmatched(self):
        old = [parse("a: 1")[0], resource(name="x")]
        new = [resource(name="x"), parse("a: 1")[0]]
        match = match_documents(old, new)

        assert match.matched == [(1, 0)]
        assert match.unmatched_old == [0]
        assert match.unmatched_new == [1]

    def test_duplicate_identity_matches_once(self):
        old = [resource(), resource()]
        new = [resource()]
        match = match_documents(old, new)

        assert match.matched == [(0, 0)]
        assert match.unmatched_old == [1]
