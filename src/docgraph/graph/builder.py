"""Build the document link graph from a Markdown corpus."""

from __future__ import annotations

import logging

import networkx as nx

from docgraph.config import GraphConfig
from docgraph.corpus.models import Document
from docgraph.graph.analysis import analyze_graph
from docgraph.graph.links import extract_links
from docgraph.graph.models import Edge, LinkGraph, Node
from docgraph.graph.ranking import compute_importance

logger = logging.getLogger("docgraph.graph")


def build_nodes(documents: list[Document], edges: list[Edge]) -> list[Node]:
    """Create one node per document with in/out link counts.

    Counts come from a single pass over `edges`, keyed by target and source.
    """
    in_links: dict[str, int] = {}
    out_links: dict[str, int] = {}
    for edge in edges:
        in_links[edge.target] = in_links.get(edge.target, 0) + 1
        out_links[edge.source] = out_links.get(edge.source, 0) + 1

    return [
        Node(
            path=doc.relative_path,
            title=doc.title,
            section=doc.section,
            in_links=in_links.get(doc.relative_path, 0),
            out_links=out_links.get(doc.relative_path, 0),
            importance=1.0,
            word_count=len(doc.content.split()) if doc.content else 0,
        )
        for doc in documents
    ]


class GraphBuilder:
    """Builds the link graph for a set of documents.

    Pipeline: extract links -> build nodes -> rank importance -> analyze.
    The internal edges are also kept as a NetworkX multigraph (parallel
    links and same-page anchors preserved) on `self.graph`.
    """

    def __init__(self, config: GraphConfig | None = None) -> None:
        self.config = config or GraphConfig()
        self.graph = nx.MultiDiGraph()
        self._dropped_links = 0

    def build(self, documents: list[Document]) -> LinkGraph:
        """Build, score and analyze the link graph.

        Args:
            documents: All documents of the corpus, in a stable order.

        Returns:
            The LinkGraph artifact. `external_links` is only populated when
            `include_external_links` is enabled.
        """
        # Reset state so reusing a builder doesn't accumulate stale data
        self.graph = nx.MultiDiGraph()
        self._dropped_links = 0

        doc_paths = {doc.relative_path for doc in documents}
        edges: list[Edge] = []
        external: list[Edge] = []
        for doc in documents:
            links = extract_links(doc, doc_paths)
            edges.extend(links.internal)
            external.extend(links.external)
            self._dropped_links += links.dropped

        nodes = build_nodes(documents, edges)

        self.graph.add_nodes_from((node.path, {"title": node.title}) for node in nodes)
        for edge in edges:
            self.graph.add_edge(
                edge.source, edge.target, type=edge.type.value, anchor=edge.anchor
            )

        compute_importance(
            nodes,
            self.graph,
            damping_factor=self.config.damping_factor,
            iterations=self.config.iterations,
        )

        analysis = analyze_graph(
            nodes,
            edges,
            hub_threshold=self.config.hub_threshold,
            authority_threshold=self.config.authority_threshold,
            top_n=self.config.top_n,
        )

        logger.info("Link graph built (%d nodes, %d edges)", len(nodes), len(edges))
        return LinkGraph(
            nodes=nodes,
            edges=edges,
            external_links=external if self.config.include_external_links else None,
            analysis=analysis,
        )

    def get_stats(self) -> dict:
        """Get graph statistics for the last build."""
        edge_types: dict[str, int] = {}
        for _, _, data in self.graph.edges(data=True):
            kind = data.get("type", "unknown")
            edge_types[kind] = edge_types.get(kind, 0) + 1

        return {
            "total_nodes": self.graph.number_of_nodes(),
            "total_edges": self.graph.number_of_edges(),
            "edge_types": edge_types,
            "self_links": nx.number_of_selfloops(self.graph),
            "components": (
                nx.number_weakly_connected_components(self.graph)
                if self.graph.number_of_nodes()
                else 0
            ),
            "dropped_links": self._dropped_links,
        }
