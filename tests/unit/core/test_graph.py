"""Unit tests for the graph model builder, filter and index."""

import pytest

from dsdiff.core.extractor import NodeExtractor
from dsdiff.core.graph import GraphIndex, GraphModelBuilder, filter_graph
from dsdiff.core.types import (
    ChangeStatus,
    DocstoreNode,
    Graph,
    GraphLink,
    GraphNode,
    NodeType,
    Relationship,
)


def _text(node_id, *targets):
    return DocstoreNode(
        id=node_id,
        node_type=NodeType.TEXT_NODE,
        content_hash=f"h-{node_id}",
        relationships=[Relationship(node_id=t) for t in targets],
    )


class TestGraphModelBuilder:
    @pytest.fixture
    def builder(self):
        return GraphModelBuilder()

    def test_document_links_to_children(self, builder):
        nodes = NodeExtractor().extract({
            "docstore/data": {"n1": {"hash": "a"}, "n2": {"hash": "b"}},
            "docstore/ref_doc_info": {"doc1": {"node_ids": ["n1", "n2", "n3"]}},
        })

        graph = builder.build(nodes)

        documents = [n for n in graph.nodes if n.node_type == NodeType.DOCUMENT]
        assert [d.id for d in documents] == ["doc1"]
        assert [link.to_dict() for link in graph.links] == [
            {"source": "doc1", "target": "n1"},
            {"source": "doc1", "target": "n2"},
        ]

    def test_statuses_default_to_unchanged(self, builder):
        graph = builder.build({"a": _text("a"), "b": _text("b")}, None)
        assert {n.status for n in graph.nodes} == {ChangeStatus.UNCHANGED}

    def test_statuses_from_lookup(self, builder):
        lookup = {"a": ChangeStatus.ADDED, "b": ChangeStatus.MODIFIED}
        graph = builder.build({"a": _text("a"), "b": _text("b"), "c": _text("c")}, lookup)
        assert [n.status for n in graph.nodes] == [
            ChangeStatus.ADDED, ChangeStatus.MODIFIED, ChangeStatus.UNCHANGED,
        ]

    def test_dangling_and_missing_targets_are_skipped(self, builder):
        node_map = {
            "a": DocstoreNode(id="a", relationships=[
                Relationship(kind="1", node_id=None),
                Relationship(kind="2", node_id="ghost"),
                Relationship(kind="3", node_id="b"),
            ]),
            "b": _text("b"),
        }
        graph = builder.build(node_map)
        assert graph.links == [GraphLink(source="a", target="b")]

    def test_order_is_stable(self, builder):
        node_map = {
            "c": _text("c", "a", "b"),
            "a": _text("a", "b"),
            "b": _text("b"),
        }
        graph = builder.build(node_map)
        assert graph.node_ids == ["c", "a", "b"]
        assert [(l.source, l.target) for l in graph.links] == [("c", "a"), ("c", "b"), ("a", "b")]

    def test_no_dangling_links(self, builder):
        node_map = {
            "a": _text("a", "b", "x"),
            "b": _text("b", "y", "a"),
            "c": _text("c", "c"),
        }
        graph = builder.build(node_map)
        ids = set(graph.node_ids)
        assert all(l.source in ids and l.target in ids for l in graph.links)

    def test_empty_map(self, builder):
        assert builder.build({}).to_dict() == {"nodes": [], "links": []}


class TestFilterGraph:
    @pytest.fixture
    def graph(self):
        return Graph(
            nodes=[
                GraphNode(id="doc", node_type=NodeType.DOCUMENT),
                GraphNode(id="t1", node_type=NodeType.TEXT_NODE),
                GraphNode(id="t2", node_type=NodeType.TEXT_NODE),
            ],
            links=[
                GraphLink(source="doc", target="t1"),
                GraphLink(source="doc", target="t2"),
                GraphLink(source="t1", target="t2"),
            ],
        )

    def test_keeps_allowed_types(self, graph):
        result = filter_graph(graph, {NodeType.TEXT_NODE})
        assert result.node_ids == ["t1", "t2"]
        assert result.links == [GraphLink(source="t1", target="t2")]

    def test_accepts_string_tags(self, graph):
        result = filter_graph(graph, ["document"])
        assert result.node_ids == ["doc"]
        assert result.links == []

    def test_all_types_keep_everything(self, graph):
        result = filter_graph(graph, {"document", "text-node"})
        assert result.to_dict() == graph.to_dict()

    def test_empty_type_set(self, graph):
        assert filter_graph(graph, set()).to_dict() == {"nodes": [], "links": []}

    @pytest.mark.parametrize("types", [set(), {"document"}, {"text-node"}, {"document", "text-node"}])
    def test_idempotent(self, graph, types):
        once = filter_graph(graph, types)
        twice = filter_graph(once, types)
        assert twice.to_dict() == once.to_dict()

    def test_does_not_mutate_source(self, graph):
        before = graph.to_dict()
        result = filter_graph(graph, {"text-node"})
        result.nodes[0].x = 10.0
        assert graph.to_dict() == before
        assert graph.get_node("t1").x is None


class TestGraphIndex:
    @pytest.fixture
    def index(self):
        graph = Graph(
            nodes=[
                GraphNode(id="doc", node_type=NodeType.DOCUMENT),
                GraphNode(id="t1", node_type=NodeType.TEXT_NODE),
                GraphNode(id="t2", node_type=NodeType.TEXT_NODE),
                GraphNode(id="lonely", node_type=NodeType.TEXT_NODE),
            ],
            links=[
                GraphLink(source="doc", target="t1"),
                GraphLink(source="doc", target="t2"),
                GraphLink(source="t1", target="t2"),
            ],
        )
        return GraphIndex(graph)

    def test_children_and_parents(self, index):
        assert index.children("doc") == ["t1", "t2"]
        assert index.parents("t2") == ["doc", "t1"]
        assert index.children("missing") == []

    def test_degree_and_connected_count(self, index):
        assert index.degree("t1") == 2
        assert index.connected_count("doc") == 2
        assert index.connected_count("t1") == 2
        assert index.connected_count("lonely") == 0

    def test_orphans_and_components(self, index):
        assert index.orphans() == ["lonely"]
        assert index.components() == [{"doc", "t1", "t2"}, {"lonely"}]

    def test_stats(self, index):
        stats = index.get_stats()
        assert stats["total_nodes"] == 4
        assert stats["total_links"] == 3
        assert stats["nodes_by_type"] == {"document": 1, "text-node": 3}
        assert stats["orphans"] == 1
        assert stats["components"] == 2

    def test_empty_graph(self):
        index = GraphIndex(Graph())
        assert index.components() == []
        assert index.get_stats()["total_nodes"] == 0
