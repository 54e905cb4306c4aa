"""Tight spanning tree construction for the network simplex ranker."""

from __future__ import annotations

import networkx as nx

from sugiyama_layout.errors import LayoutError
from sugiyama_layout.graph import EdgeKey, Graph
from sugiyama_layout.rank.util import slack


def feasible_tree(g: Graph) -> nx.Graph:
    """Build a spanning tree of tight edges (slack 0), adjusting ranks as needed.

    Starting from the first node, grow the tree along tight edges. While it
    does not span ``g``, take the incident non-tree edge with the smallest
    slack and shift the whole tree by that slack so the edge becomes tight.

    ``g`` must be connected and already feasibly ranked. The returned tree is
    undirected and its node ids are those of ``g``.
    """
    t = nx.Graph()
    if g.node_count() == 0:
        return t

    size = g.node_count()
    t.add_node(g.nodes()[0])

    while _tight_tree(t, g) < size:
        edge = _find_min_slack_edge(t, g)
        if edge is None:
            raise LayoutError("feasible_tree requires a connected graph")
        delta = slack(g, edge) if edge.v in t else -slack(g, edge)
        for v in t.nodes:
            g.node(v)["rank"] += delta

    return t


def _tight_tree(t: nx.Graph, g: Graph) -> int:
    """Extend ``t`` with every node reachable through tight edges; return its size."""
    for start in list(t.nodes):
        stack = [(start, iter(g.node_edges(start)))]
        while stack:
            v, edges = stack[-1]
            for e in edges:
                w = e.w if v == e.v else e.v
                if w not in t and not slack(g, e):
                    t.add_edge(v, w)
                    stack.append((w, iter(g.node_edges(w))))
                    break
            else:
                stack.pop()
    return t.number_of_nodes()


def _find_min_slack_edge(t: nx.Graph, g: Graph) -> EdgeKey | None:
    """First edge with the least slack among those with exactly one end in ``t``."""
    best: EdgeKey | None = None
    best_slack = float("inf")
    for e in g.edges():
        if (e.v in t) != (e.w in t):
            edge_slack = slack(g, e)
            if edge_slack < best_slack:
                best, best_slack = e, edge_slack
    return best
