"""Structural analysis of a scored link graph."""

from __future__ import annotations

from docgraph.graph.models import (
    AuthorityEntry,
    Edge,
    GraphAnalysis,
    HubEntry,
    ImportanceEntry,
    Node,
)

HUB_THRESHOLD = 5
AUTHORITY_THRESHOLD = 3
TOP_N = 10


def analyze_graph(
    nodes: list[Node],
    edges: list[Edge],
    hub_threshold: int = HUB_THRESHOLD,
    authority_threshold: int = AUTHORITY_THRESHOLD,
    top_n: int = TOP_N,
) -> GraphAnalysis:
    """Find hubs, authorities, orphans and the most important documents.

    All rankings use a stable sort, so ties keep the input node order.
    `orphans` and `isolated_count` describe the same population
    (no links in either direction).
    """
    hubs = sorted(
        (n for n in nodes if n.out_links >= hub_threshold),
        key=lambda n: n.out_links,
        reverse=True,
    )[:top_n]

    authorities = sorted(
        (n for n in nodes if n.in_links >= authority_threshold),
        key=lambda n: n.in_links,
        reverse=True,
    )[:top_n]

    orphans = [n.path for n in nodes if n.in_links == 0 and n.out_links == 0]
    isolated = [n.path for n in nodes if n.in_links == 0 and n.out_links == 0]

    most_important = sorted(nodes, key=lambda n: n.importance, reverse=True)[:top_n]

    return GraphAnalysis(
        total_nodes=len(nodes),
        total_edges=len(edges),
        average_links_per_doc=len(edges) / len(nodes) if nodes else 0.0,
        hubs=[HubEntry(path=n.path, out_links=n.out_links) for n in hubs],
        authorities=[
            AuthorityEntry(path=n.path, in_links=n.in_links) for n in authorities
        ],
        orphans=orphans,
        isolated_count=len(isolated),
        most_important=[
            ImportanceEntry(path=n.path, importance=n.importance) for n in most_important
        ],
    )
