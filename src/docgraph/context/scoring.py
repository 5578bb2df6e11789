"""Document priority scoring for context packing.

score(d) = index bonus + readme bonus + important-path bonus
         + importance(d) / 100 * graph weight       [if a link graph is given]
         + recency bonus, decaying over 30 days     [if modified_time is known]
         + usage score                              [if usage metrics are given]
         + root-level bonus
         - long-document penalty                    [content > 10,000 chars]
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from types import MappingProxyType

from docgraph.corpus.models import Document
from docgraph.exceptions import ConfigError
from docgraph.graph.models import LinkGraph

DEFAULT_PRIORITY_WEIGHTS: Mapping[str, float] = MappingProxyType(
    {
        "is_index": 100,
        "is_readme": 90,
        "is_important": 50,
        "has_high_inlinks": 30,
        "recently_modified": 10,
        "root_level": 5,
        "long_document": 10,
    }
)

INDEX_FILENAMES = frozenset({"index.md", "index.mdx", "index.html"})
README_FILENAMES = frozenset({"readme.md", "readme.mdx", "readme.html"})

IMPORTANT_PATTERNS: tuple[str, ...] = (
    "getting-started", "quickstart", "quick-start",
    "introduction", "intro", "overview",
    "tutorial", "guide", "doc", "docs",
    "api", "reference", "usage",
)

LONG_DOCUMENT_CHARS = 10_000
RECENCY_WINDOW_DAYS = 30


@dataclass(frozen=True)
class RankedDocument:
    document: Document
    score: float


def merge_weights(overrides: Mapping[str, float] | None = None) -> dict[str, float]:
    """Copy the default weight table with caller overrides applied."""
    weights = dict(DEFAULT_PRIORITY_WEIGHTS)
    for key, value in (overrides or {}).items():
        if key not in weights:
            raise ConfigError(
                f"Unknown priority weight '{key}'. "
                f"Valid keys: {', '.join(sorted(weights))}"
            )
        weights[key] = float(value)
    return weights


class DocumentScorer:
    """Ranks documents for inclusion in context bundles."""

    def __init__(
        self,
        weights: Mapping[str, float] | None = None,
        long_document_chars: int = LONG_DOCUMENT_CHARS,
        important_patterns: tuple[str, ...] = IMPORTANT_PATTERNS,
    ) -> None:
        self.weights = merge_weights(weights)
        self.long_document_chars = long_document_chars
        self.important_patterns = important_patterns

    def score(
        self,
        doc: Document,
        importance: Mapping[str, float] | None = None,
        usage_metrics: Mapping[str, Mapping[str, float]] | None = None,
        now: datetime | None = None,
    ) -> float:
        """Compute the priority score of one document.

        Args:
            doc: The document to score.
            importance: Path -> 0-100 importance from the link graph, if any.
            usage_metrics: Path -> {"score": float} usage data, if any.
            now: Reference time for the recency bonus (defaults to now, UTC).
        """
        w = self.weights
        path = doc.relative_path.lower()
        filename = path.rsplit("/", 1)[-1]
        score = 0.0

        if filename in INDEX_FILENAMES:
            score += w["is_index"]
        if filename in README_FILENAMES:
            score += w["is_readme"]
        if any(p in path for p in self.important_patterns):
            score += w["is_important"]

        if importance:
            node_importance = importance.get(doc.relative_path, 0)
            if node_importance:
                score += node_importance / 100 * w["has_high_inlinks"]

        if doc.modified_time is not None:
            score += self._recency_bonus(doc.modified_time, now)

        if usage_metrics and doc.relative_path in usage_metrics:
            score += usage_metrics[doc.relative_path].get("score", 0) or 0

        if "/" not in doc.relative_path:
            score += w["root_level"]

        if len(doc.content or "") > self.long_document_chars:
            score -= w["long_document"]

        return score

    def rank(
        self,
        documents: list[Document],
        graph: LinkGraph | None = None,
        usage_metrics: Mapping[str, Mapping[str, float]] | None = None,
        now: datetime | None = None,
    ) -> list[RankedDocument]:
        """Score all documents and sort them, highest first.

        The sort is stable: equal scores keep the input order. A missing
        graph simply contributes no importance.
        """
        importance = graph.importance_by_path() if graph is not None else None
        now = now or datetime.now(timezone.utc)
        ranked = [
            RankedDocument(doc, self.score(doc, importance, usage_metrics, now))
            for doc in documents
        ]
        ranked.sort(key=lambda r: r.score, reverse=True)
        return ranked

    def _recency_bonus(self, modified: datetime, now: datetime | None) -> float:
        now = now or datetime.now(timezone.utc)
        if modified.tzinfo is None:
            modified = modified.replace(tzinfo=timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        days = max(0.0, (now - modified).total_seconds() / 86400)
        if days >= RECENCY_WINDOW_DAYS:
            return 0.0
        return self.weights["recently_modified"] * (1 - days / RECENCY_WINDOW_DAYS)
