"""Multi-tier context bundles packed under token budgets.

For each budget B (processed smallest first) the bundler emits a header,
then walks the ranked documents and appends every one whose full entry still
fits in what is left of B, skipping (not stopping at) those that do not.
A footer reserve is held back for the truncation notice. The notice is
appended to the content but not counted in `actual_tokens`, so every
bundle reports at most B tokens.

Tiers are nested: a larger tier starts from the documents chosen for the
next smaller tier and fills the rest greedily. Every document in the smaller
tier already fit in a smaller budget, so it fits again, and document counts
never shrink as the budget grows.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime

from docgraph.config import BundlerConfig
from docgraph.context.models import Bundle, TokenEstimator, bundle_filename
from docgraph.context.scoring import DocumentScorer, RankedDocument
from docgraph.corpus.models import CorpusInfo, Document
from docgraph.exceptions import ConfigError
from docgraph.graph.models import LinkGraph

logger = logging.getLogger("docgraph.context")


class ContextBundler:
    """Builds one context bundle per configured token budget.

    Usage:
        bundler = ContextBundler(BundlerConfig(bundle_sizes=[2000, 8000]))
        bundles = bundler.pack(documents, corpus, graph=link_graph)
    """

    def __init__(
        self,
        config: BundlerConfig | None = None,
        scorer: DocumentScorer | None = None,
    ) -> None:
        self.config = config or BundlerConfig()
        self.scorer = scorer or DocumentScorer(
            weights=self.config.priority_weights,
            long_document_chars=self.config.long_document_chars,
        )

    def pack(
        self,
        documents: list[Document],
        corpus: CorpusInfo,
        graph: LinkGraph | None = None,
        usage_metrics: Mapping[str, Mapping[str, float]] | None = None,
        now: datetime | None = None,
        sizes: list[int] | None = None,
    ) -> list[Bundle]:
        """Rank documents once and build a bundle for every budget tier.

        Args:
            documents: All documents of the corpus.
            corpus: Title/description/instructions for the bundle header.
            graph: Optional link graph; its importance scores feed ranking.
            usage_metrics: Optional path -> {"score": float} usage data.
            now: Reference time for recency scoring.
            sizes: Token budgets; defaults to the configured bundle sizes.

        Returns:
            Bundles in ascending budget order.

        Raises:
            ConfigError: If any budget is not a positive token count.
        """
        budgets = sorted(set(sizes if sizes is not None else self.config.bundle_sizes))
        invalid = [b for b in budgets if b <= 0]
        if invalid:
            raise ConfigError(
                f"Bundle budgets must be positive token counts, got: {invalid}"
            )

        ranked = self.scorer.rank(documents, graph, usage_metrics, now)

        bundles: list[Bundle] = []
        carried: set[str] = set()
        for budget in budgets:
            bundle = self.build_bundle(budget, ranked, corpus, carried)
            bundles.append(bundle)
            carried = set(bundle.included_documents)
            logger.debug(
                "%s: %d/%d documents, %d/%d tokens",
                bundle.filename,
                bundle.document_count,
                bundle.total_documents,
                bundle.actual_tokens,
                budget,
            )
        return bundles

    def build_bundle(
        self,
        budget: int,
        ranked: list[RankedDocument],
        corpus: CorpusInfo,
        carried: set[str] | None = None,
    ) -> Bundle:
        """Pack a single tier.

        `carried` holds paths that must be included (the previous tier's
        selection); they are rendered in rank order like any other entry.
        """
        carried = carried or set()
        entries = {r.document.relative_path: self.build_entry(r.document) for r in ranked}
        entry_tokens = {path: TokenEstimator.estimate(e) for path, e in entries.items()}

        available = budget - self.config.footer_reserve
        carried_tokens = sum(entry_tokens[p] for p in carried if p in entry_tokens)

        header = self.build_header(corpus)
        header_tokens = TokenEstimator.estimate(header)
        if header_tokens + carried_tokens > available:
            header, header_tokens = "", 0

        parts = [header] if header else []
        used = header_tokens + carried_tokens
        included: list[str] = []
        sections: list[str] = []

        for r in ranked:
            doc = r.document
            path = doc.relative_path
            cost = entry_tokens[path]

            if path in carried:
                fits = True
            elif used + cost <= available:
                used += cost
                fits = True
            else:
                fits = False

            if fits:
                parts.append(entries[path])
                included.append(path)
                if doc.section not in sections:
                    sections.append(doc.section)
            elif self.config.include_references:
                reference = self.build_reference(doc)
                ref_tokens = TokenEstimator.estimate(reference)
                if used + ref_tokens <= available:
                    parts.append(reference)
                    used += ref_tokens

        excluded = len(ranked) - len(included)
        if excluded:
            footer = (
                f"\n---\n*Context truncated. {excluded} additional documents available.*\n"
            )
            parts.append(footer)

        return Bundle(
            filename=bundle_filename(budget),
            size_tokens=budget,
            actual_tokens=used,
            document_count=len(included),
            total_documents=len(ranked),
            included_documents=included,
            sections_included=sections,
            content="".join(parts),
            truncated=excluded > 0,
        )

    def build_header(self, corpus: CorpusInfo) -> str:
        header = f"# {corpus.title}\n\n"
        if corpus.description:
            header += f"> {corpus.description}\n\n"
        if corpus.instructions:
            header += f"{corpus.instructions}\n\n"
        return header

    def build_entry(self, doc: Document) -> str:
        """Full document entry: title, source path, content, separator."""
        return f"## {doc.title}\n*Source: {doc.relative_path}*\n\n{doc.content or ''}\n\n---\n\n"

    def build_reference(self, doc: Document) -> str:
        """One-line link used when a document's full text does not fit."""
        base_url = self.config.base_url or ""
        ref = f"- [{doc.title}]({base_url}{doc.relative_path})"
        if doc.summary:
            ref += f": {doc.summary}"
        return ref + "\n"
