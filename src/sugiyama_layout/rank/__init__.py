"""Rank assignment.

Assigns every node an integer ``rank`` such that ``rank(w) - rank(v) >= minlen``
for every edge, with the algorithm chosen by the graph's ``ranker`` option:

- ``network-simplex`` (default): optimal total weighted edge length.
- ``tight-tree``: longest path then a tight spanning tree; faster, not optimal.
- ``longest-path``: fastest; pushes nodes as low as possible.

The input must be acyclic and must not contain compound nodes. Weakly
connected components are ranked independently.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

import networkx as nx

from sugiyama_layout.config import Ranker
from sugiyama_layout.graph import Graph
from sugiyama_layout.rank.feasible_tree import feasible_tree
from sugiyama_layout.rank.network_simplex import network_simplex
from sugiyama_layout.rank.util import longest_path, slack

__all__ = [
    "feasible_tree",
    "longest_path",
    "network_simplex",
    "rank",
    "slack",
]


def _tight_tree_ranker(g: Graph) -> None:
    longest_path(g)
    feasible_tree(g)


_RANKERS: dict[Ranker, Callable[[Graph], None]] = {
    Ranker.NETWORK_SIMPLEX: network_simplex,
    Ranker.TIGHT_TREE: _tight_tree_ranker,
    Ranker.LONGEST_PATH: longest_path,
}


def rank(g: Graph) -> None:
    ranker = Ranker.parse(g.graph.get("ranker"), Ranker.NETWORK_SIMPLEX)
    for component in components(g):
        _RANKERS[ranker](component)


def components(g: Graph) -> Iterator[Graph]:
    """Weakly connected components of ``g`` as graphs sharing its records.

    A connected graph is yielded as is.
    """
    if g.node_count() <= 1 or nx.is_weakly_connected(g.digraph):
        yield g
        return

    for members in nx.weakly_connected_components(g.digraph):
        component = Graph(multigraph=g.is_multigraph()).set_graph(g.graph)
        for v in g.nodes():
            if v in members:
                component.set_node(v, g.node(v))
        for e in g.edges():
            if e.v in members:
                component.set_edge(e.v, e.w, g.edge(e), e.name)
        yield component
