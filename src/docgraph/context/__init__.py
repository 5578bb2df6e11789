"""Token-budgeted context bundles.

Ranks documents by structural heuristics and link-graph importance, then
packs them greedily into one bundle per token budget tier.

Usage:
    from docgraph.context import ContextBundler

    bundler = ContextBundler()
    bundles = bundler.pack(documents, corpus, graph=link_graph)
    print(bundles[0].content)
"""

from docgraph.context.bundler import ContextBundler
from docgraph.context.models import Bundle, BundleManifest, TokenEstimator
from docgraph.context.scoring import DEFAULT_PRIORITY_WEIGHTS, DocumentScorer

__all__ = [
    "Bundle",
    "BundleManifest",
    "ContextBundler",
    "DEFAULT_PRIORITY_WEIGHTS",
    "DocumentScorer",
    "TokenEstimator",
]
