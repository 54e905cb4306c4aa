"""Initial node order for crossing minimisation."""

from __future__ import annotations

from collections.abc import Hashable

from sugiyama_layout.graph import Graph


def init_order(g: Graph) -> list[list[Hashable]]:
    """Layering from a depth-first walk over the simple (non-subgraph) nodes.

    Walks start from nodes sorted by rank and follow successors in edge order;
    each node is appended to its rank's layer when first reached. This gives
    trees and most DAGs a crossing-free start.
    """
    visited: set[Hashable] = set()
    simple_nodes = [v for v in g.nodes() if not g.children(v)]
    max_rank = max((g.node(v)["rank"] for v in simple_nodes), default=-1)
    layers: list[list[Hashable]] = [[] for _ in range(max_rank + 1)]

    for start in sorted(simple_nodes, key=lambda v: g.node(v)["rank"]):
        if start in visited:
            continue
        visited.add(start)
        layers[g.node(start)["rank"]].append(start)
        stack = [iter(g.successors(start))]
        while stack:
            for w in stack[-1]:
                if w not in visited:
                    visited.add(w)
                    layers[g.node(w)["rank"]].append(w)
                    stack.append(iter(g.successors(w)))
                    break
            else:
                stack.pop()

    return layers
