"""Orchestrates graph, section-graph and bundle generation for a corpus."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from docgraph.config import (
    BUNDLE_META_FILE,
    GRAPH_FILE,
    SECTION_GRAPH_FILE,
    ProjectConfig,
)
from docgraph.context.bundler import ContextBundler
from docgraph.context.models import Bundle, BundleManifest
from docgraph.corpus.models import CorpusInfo, Document
from docgraph.graph.builder import GraphBuilder
from docgraph.graph.models import LinkGraph, SectionGraph
from docgraph.graph.sections import build_section_graph
from docgraph.store import ArtifactStore

logger = logging.getLogger("docgraph.pipeline")


@dataclass
class BuildResult:
    """Everything produced by one pipeline run."""

    graph: LinkGraph | None = None
    section_graph: SectionGraph | None = None
    bundles: list[Bundle] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    stats: dict = field(default_factory=dict)
    elapsed_ms: float = 0.0


def corpus_info(config: ProjectConfig) -> CorpusInfo:
    """Bundle header metadata from the project config."""
    corpus = config.corpus
    return CorpusInfo(
        title=corpus.title or config.name or "Documentation",
        description=corpus.description,
        instructions=corpus.instructions,
    )


def run_pipeline(
    documents: list[Document],
    config: ProjectConfig,
    store: ArtifactStore | None = None,
    *,
    graph: bool = True,
    sections: bool | None = None,
    bundles: bool = True,
    budgets: list[int] | None = None,
    usage_metrics: Mapping[str, Mapping[str, float]] | None = None,
    now: datetime | None = None,
) -> BuildResult:
    """Generate the requested artifacts and write them to `store`.

    Args:
        documents: The materialized corpus.
        config: Project configuration.
        store: Destination for artifacts; None keeps everything in memory.
        graph: Produce graph.json.
        sections: Produce graph-sections.json (defaults to the
            `graph.include_section_graph` setting).
        bundles: Produce the context bundles and bundles.meta.json.
        budgets: Token budgets overriding `bundler.bundle_sizes`.
        usage_metrics: Optional usage scores forwarded to the ranker.
        now: Reference time for recency scoring.

    Returns:
        A BuildResult. The link graph is only handed to the bundler when
        `graph` is enabled; otherwise ranking runs without importance.
    """
    start_time = time.time()
    if sections is None:
        sections = config.graph.include_section_graph

    result = BuildResult()

    link_graph = None
    if graph or sections:
        builder = GraphBuilder(config.graph)
        link_graph = builder.build(documents)
        result.stats = builder.get_stats()

    if graph and link_graph is not None:
        result.graph = link_graph
        if store is not None:
            result.written.append(store.write_json(GRAPH_FILE, link_graph.to_dict()))
            logger.info(
                "%s (%d nodes, %d edges)",
                GRAPH_FILE,
                len(link_graph.nodes),
                len(link_graph.edges),
            )

    if sections and link_graph is not None:
        result.section_graph = build_section_graph(documents, link_graph.edges)
        if store is not None:
            result.written.append(
                store.write_json(SECTION_GRAPH_FILE, result.section_graph.to_dict())
            )
            logger.info(
                "%s (%d sections)",
                SECTION_GRAPH_FILE,
                result.section_graph.statistics.total_sections,
            )

    if bundles:
        bundler = ContextBundler(config.bundler)
        result.bundles = bundler.pack(
            documents,
            corpus_info(config),
            graph=result.graph,
            usage_metrics=usage_metrics,
            now=now,
            sizes=budgets,
        )
        if store is not None:
            for bundle in result.bundles:
                result.written.append(store.write_text(bundle.filename, bundle.content))
            manifest = BundleManifest.from_bundles(result.bundles)
            result.written.append(store.write_json(BUNDLE_META_FILE, manifest.to_dict()))
            logger.info("Context bundles generated (%d sizes)", len(result.bundles))

    result.elapsed_ms = round((time.time() - start_time) * 1000, 1)
    return result
