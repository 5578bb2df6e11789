"""Tests for hub/authority/orphan analysis."""

from __future__ import annotations

from docgraph.graph.analysis import analyze_graph
from docgraph.graph.builder import GraphBuilder
from docgraph.graph.models import Edge, EdgeType, Node


def _node(path: str, in_links: int = 0, out_links: int = 0, importance: float = 0) -> Node:
    return Node(
        path=path,
        title=path,
        section="root",
        in_links=in_links,
        out_links=out_links,
        importance=importance,
    )


def _edges(count: int) -> list[Edge]:
    return [Edge(source="a", target="b", type=EdgeType.INTERNAL) for _ in range(count)]


class TestAnalyzeGraph:
    def test_sample_corpus(self, sample_docs):
        analysis = GraphBuilder().build(sample_docs).analysis

        assert analysis.total_nodes == 5
        assert analysis.total_edges == 7
        assert analysis.average_links_per_doc == 1.4
        assert analysis.hubs == []
        assert [a.path for a in analysis.authorities] == ["api/endpoints.md"]
        assert analysis.orphans == ["notes/orphan.md"]
        assert analysis.isolated_count == 1
        assert analysis.most_important[0].path == "api/endpoints.md"
        assert analysis.most_important[-1].path == "notes/orphan.md"

    def test_thresholds_inclusive(self):
        nodes = [_node("hub", out_links=5), _node("almost", out_links=4, in_links=2),
                 _node("auth", in_links=3)]
        analysis = analyze_graph(nodes, _edges(9))

        assert [h.path for h in analysis.hubs] == ["hub"]
        assert [a.path for a in analysis.authorities] == ["auth"]

    def test_custom_thresholds(self):
        nodes = [_node("a", out_links=2, in_links=1), _node("b", in_links=1)]
        analysis = analyze_graph(nodes, _edges(2), hub_threshold=2, authority_threshold=1)

        assert [h.path for h in analysis.hubs] == ["a"]
        assert [a.path for a in analysis.authorities] == ["a", "b"]

    def test_ties_keep_input_order(self):
        nodes = [_node("z", out_links=6), _node("a", out_links=6), _node("m", out_links=9)]
        analysis = analyze_graph(nodes, _edges(21))

        assert [h.path for h in analysis.hubs] == ["m", "z", "a"]

    def test_top_n_limits_rankings(self):
        nodes = [_node(f"d{i}", in_links=5, importance=i) for i in range(15)]
        analysis = analyze_graph(nodes, _edges(75), top_n=3)

        assert len(analysis.authorities) == 3
        assert [e.path for e in analysis.most_important] == ["d14", "d13", "d12"]

    def test_orphans_need_no_links_either_way(self):
        nodes = [_node("in_only", in_links=1), _node("out_only", out_links=1), _node("alone")]
        analysis = analyze_graph(nodes, _edges(1))

        assert analysis.orphans == ["alone"]
        assert analysis.isolated_count == 1

    def test_empty(self):
        analysis = analyze_graph([], [])

        assert analysis.total_nodes == 0
        assert analysis.average_links_per_doc == 0.0
        assert analysis.most_important == []
