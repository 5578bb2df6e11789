"""Data models for the document link graph and the section graph."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

ARTIFACT_VERSION = "1.0.0"


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp for the `generated_at` field of artifacts."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class EdgeType(str, Enum):
    """Types of links between documents."""

    INTERNAL = "internal"
    INTERNAL_ANCHOR = "internal-anchor"
    EXTERNAL = "external"


class SectionEdgeType(str, Enum):
    """Types of edges in the section graph."""

    SECTION_REFERENCE = "section-reference"
    PARENT_CHILD = "parent-child"


class Edge(BaseModel):
    """A link found in a document.

    For internal edges `target` is a document path; for external edges it is
    the raw URL.
    """

    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    anchor: str | None = None
    text: str = ""
    type: EdgeType

    @property
    def is_internal(self) -> bool:
        return self.type != EdgeType.EXTERNAL


class Node(BaseModel):
    """A document in the link graph."""

    path: str
    title: str
    section: str
    in_links: int = 0
    out_links: int = 0
    importance: float = 1.0  # 0-100 once ranked
    word_count: int = 0


class HubEntry(BaseModel):
    path: str
    out_links: int


class AuthorityEntry(BaseModel):
    path: str
    in_links: int


class ImportanceEntry(BaseModel):
    path: str
    importance: float


class GraphAnalysis(BaseModel):
    """Structural summary of a scored link graph."""

    total_nodes: int = 0
    total_edges: int = 0
    average_links_per_doc: float = 0.0
    hubs: list[HubEntry] = Field(default_factory=list)
    authorities: list[AuthorityEntry] = Field(default_factory=list)
    orphans: list[str] = Field(default_factory=list)
    isolated_count: int = 0
    most_important: list[ImportanceEntry] = Field(default_factory=list)


class LinkGraph(BaseModel):
    """The persisted graph artifact (graph.json)."""

    version: str = ARTIFACT_VERSION
    generated_at: str = Field(default_factory=utc_timestamp)
    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)
    external_links: list[Edge] | None = None
    analysis: GraphAnalysis = Field(default_factory=GraphAnalysis)

    def node(self, path: str) -> Node | None:
        """Look up a node by document path."""
        for node in self.nodes:
            if node.path == path:
                return node
        return None

    def importance_by_path(self) -> dict[str, float]:
        return {node.path: node.importance for node in self.nodes}

    def to_dict(self) -> dict:
        """JSON-ready dict; `external_links` is omitted unless collected."""
        data = self.model_dump(mode="json")
        if self.external_links is None:
            data.pop("external_links")
        return data


class SectionNode(BaseModel):
    """A heading, addressed as `path#anchor`."""

    id: str
    doc_path: str
    title: str
    level: int
    anchor: str


class SectionEdge(BaseModel):
    source: str
    target: str
    type: SectionEdgeType


class SectionStatistics(BaseModel):
    total_sections: int = 0
    total_section_edges: int = 0


class SectionGraph(BaseModel):
    """The persisted section graph artifact (graph-sections.json)."""

    version: str = ARTIFACT_VERSION
    generated_at: str = Field(default_factory=utc_timestamp)
    nodes: list[SectionNode] = Field(default_factory=list)
    edges: list[SectionEdge] = Field(default_factory=list)
    statistics: SectionStatistics = Field(default_factory=SectionStatistics)

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")
