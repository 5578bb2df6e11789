"""PageRank-style importance scoring for the document link graph.

    score[i] = (1 - d) / n + d * sum(score[j] / out_degree[j] for j -> i)

Scores start uniform at 1/n and every iteration reads only the previous
iteration's vector. A fixed number of iterations is run with no convergence
check, so results are deterministic for a given input.

Dangling nodes (no outgoing links) pass nothing on and their mass is not
redistributed, unlike textbook PageRank.
"""

from __future__ import annotations

import math

import networkx as nx

from docgraph.graph.models import Node

DEFAULT_DAMPING_FACTOR = 0.85
DEFAULT_ITERATIONS = 20


def pagerank_scores(
    graph: nx.MultiDiGraph,
    order: list[str],
    damping_factor: float = DEFAULT_DAMPING_FACTOR,
    iterations: int = DEFAULT_ITERATIONS,
) -> dict[str, float]:
    """Run the fixed-iteration diffusion and return raw scores by path.

    Parallel edges count individually, as do self-loops from same-page
    anchor links.
    """
    n = len(order)
    if n == 0:
        return {}

    out_degree = {path: graph.out_degree(path) for path in order}
    incoming = {path: [src for src, _ in graph.in_edges(path)] for path in order}

    scores = dict.fromkeys(order, 1.0 / n)
    base = (1 - damping_factor) / n
    for _ in range(iterations):
        new_scores = dict.fromkeys(order, base)
        for path in order:
            for src in incoming[path]:
                new_scores[path] += damping_factor * scores[src] / out_degree[src]
        scores = new_scores

    return scores


def normalize_scores(scores: dict[str, float]) -> dict[str, int]:
    """Min-max scale raw scores to integers in [0, 100].

    When every score is equal the range is taken as 1, so all nodes get 0.
    """
    if not scores:
        return {}
    max_score = max(scores.values())
    min_score = min(scores.values())
    spread = (max_score - min_score) or 1.0
    return {
        path: _round_half_up((score - min_score) / spread * 100)
        for path, score in scores.items()
    }


def compute_importance(
    nodes: list[Node],
    graph: nx.MultiDiGraph,
    damping_factor: float = DEFAULT_DAMPING_FACTOR,
    iterations: int = DEFAULT_ITERATIONS,
) -> None:
    """Score `nodes` in place from the internal-edge multigraph."""
    if not nodes:
        return

    order = [node.path for node in nodes]
    normalized = normalize_scores(
        pagerank_scores(graph, order, damping_factor, iterations)
    )
    for node in nodes:
        node.importance = normalized[node.path]


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
