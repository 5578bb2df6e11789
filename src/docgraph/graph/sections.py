"""Section-level graph built from Markdown heading structure."""

from __future__ import annotations

import re
from dataclasses import dataclass

from docgraph.corpus.models import Document
from docgraph.graph.models import (
    Edge,
    SectionEdge,
    SectionEdgeType,
    SectionGraph,
    SectionNode,
    SectionStatistics,
)

_HEADING = re.compile(r"^(#{1,6})\s+(.+)$")
_FENCE = re.compile(r"^\s*(```|~~~)")


@dataclass
class Heading:
    level: int
    title: str
    anchor: str


def create_anchor(title: str) -> str:
    """Turn a heading title into a URL-safe slug.

    >>> create_anchor("What's New?")
    'whats-new'
    """
    slug = title.lower()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def extract_headings(content: str) -> list[Heading]:
    """Collect ATX headings, skipping lines inside fenced code blocks."""
    headings: list[Heading] = []
    fence: str | None = None

    for line in content.split("\n"):
        fence_match = _FENCE.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker
            elif marker == fence:
                fence = None
            continue
        if fence is not None:
            continue

        m = _HEADING.match(line.rstrip("\r"))
        if m:
            title = m.group(2).strip()
            headings.append(
                Heading(level=len(m.group(1)), title=title, anchor=create_anchor(title))
            )

    return headings


def build_section_graph(documents: list[Document], edges: list[Edge]) -> SectionGraph:
    """Build the section graph for all documents.

    Produces one node per heading, a `section-reference` edge from a document
    to `target#anchor` for every anchored internal link it contains, and
    `parent-child` edges reflecting each document's outline.
    """
    nodes: list[SectionNode] = []
    section_edges: list[SectionEdge] = []

    headings_by_doc = {
        doc.relative_path: extract_headings(doc.content or "") for doc in documents
    }
    anchored_by_source: dict[str, list[Edge]] = {}
    for edge in edges:
        if edge.is_internal and edge.anchor:
            anchored_by_source.setdefault(edge.source, []).append(edge)

    for doc in documents:
        path = doc.relative_path
        for heading in headings_by_doc[path]:
            nodes.append(
                SectionNode(
                    id=f"{path}#{heading.anchor}",
                    doc_path=path,
                    title=heading.title,
                    level=heading.level,
                    anchor=heading.anchor,
                )
            )
        for edge in anchored_by_source.get(path, []):
            section_edges.append(
                SectionEdge(
                    source=path,
                    target=f"{edge.target}#{edge.anchor}",
                    type=SectionEdgeType.SECTION_REFERENCE,
                )
            )

    for doc in documents:
        path = doc.relative_path
        section_edges.extend(_outline_edges(path, headings_by_doc[path]))

    return SectionGraph(
        nodes=nodes,
        edges=section_edges,
        statistics=SectionStatistics(
            total_sections=len(nodes),
            total_section_edges=len(section_edges),
        ),
    )


def _outline_edges(path: str, headings: list[Heading]) -> list[SectionEdge]:
    # Level-ordered stack: a heading's parent is the nearest shallower heading above it.
    edges = []
    stack: list[Heading] = []
    for heading in headings:
        while stack and stack[-1].level >= heading.level:
            stack.pop()
        if stack:
            edges.append(
                SectionEdge(
                    source=f"{path}#{stack[-1].anchor}",
                    target=f"{path}#{heading.anchor}",
                    type=SectionEdgeType.PARENT_CHILD,
                )
            )
        stack.append(heading)
    return edges
