"""Document link graph: link extraction, importance ranking and analysis."""

from docgraph.graph.builder import GraphBuilder
from docgraph.graph.models import LinkGraph, SectionGraph
from docgraph.graph.sections import build_section_graph, create_anchor

__all__ = [
    "GraphBuilder",
    "LinkGraph",
    "SectionGraph",
    "build_section_graph",
    "create_anchor",
]
