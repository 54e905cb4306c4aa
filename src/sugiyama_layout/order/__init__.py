"""Crossing minimisation.

Assigns every ranked node an ``order``: its position within its rank.

1. Start from a depth-first initial order (``init_order``).
2. Sweep the ranks, alternately downwards (ordering each rank by its
   predecessors) and upwards (by its successors), sorting every rank by
   weighted barycenter with subgraphs kept contiguous (``sort_subgraph``).
   Ties lean left for two sweeps, then right for two.
3. After each sweep, exchange adjacent nodes where that lowers crossings
   (``transpose``), then count crossings (``cross_count``).
4. Keep the best layering seen; stop once ``ORDER_MAX_STALE_SWEEPS`` sweeps
   in a row have not improved it.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable

from sugiyama_layout.config import ORDER_MAX_STALE_SWEEPS
from sugiyama_layout.graph import Graph
from sugiyama_layout.order.add_subgraph_constraints import add_subgraph_constraints
from sugiyama_layout.order.build_layer_graph import build_layer_graph
from sugiyama_layout.order.cross_count import cross_count
from sugiyama_layout.order.init_order import init_order
from sugiyama_layout.order.sort_subgraph import sort_subgraph
from sugiyama_layout.order.transpose import transpose
from sugiyama_layout.util import build_layer_matrix, max_rank

logger = logging.getLogger(__name__)

__all__ = ["cross_count", "init_order", "order"]


def order(
    g: Graph,
    disable_optimal_order_heuristic: bool = False,
    constraints: Iterable[tuple[Hashable, Hashable]] | None = None,
) -> None:
    """Assign ``order`` to every ranked node of ``g``.

    Args:
        g: the layout graph, ranked and normalised (all edges unit length).
        disable_optimal_order_heuristic: keep the initial order, skip sweeps.
        constraints: ``(left, right)`` pairs of nodes on the same rank;
            ``left`` is kept to the left of ``right``.
    """
    top = max_rank(g)
    down_layer_graphs = [build_layer_graph(g, rank, "in_edges") for rank in range(1, top + 1)]
    up_layer_graphs = [build_layer_graph(g, rank, "out_edges") for rank in range(top - 1, -1, -1)]

    layering = init_order(g)
    _assign_order(g, layering)

    if disable_optimal_order_heuristic:
        return

    constraints = list(constraints or [])
    best_cc = float("inf")
    best = layering
    stale = 0
    i = 0

    while stale < ORDER_MAX_STALE_SWEEPS:
        _sweep_layer_graphs(down_layer_graphs if i % 2 else up_layer_graphs, i % 4 >= 2, constraints)

        layering = build_layer_matrix(g)
        transpose(g, layering, constraints)
        cc = cross_count(g, layering)
        if cc < best_cc:
            stale = 0
            best = [list(layer) for layer in layering]
            best_cc = cc
        else:
            stale += 1
        i += 1

    logger.debug("order: %d sweeps, %s crossings", i, best_cc)
    _assign_order(g, best)


def _sweep_layer_graphs(
    layer_graphs: list[Graph],
    bias_right: bool,
    constraints: list[tuple[Hashable, Hashable]],
) -> None:
    cg = Graph()
    for lg in layer_graphs:
        for left, right in constraints:
            cg.set_edge(left, right)

        root = lg.graph["root"]
        sorted_result = sort_subgraph(lg, root, cg, bias_right)
        for i, v in enumerate(sorted_result["vs"]):
            lg.node(v)["order"] = i
        add_subgraph_constraints(lg, cg, sorted_result["vs"])


def _assign_order(g: Graph, layering: list[list[Hashable]]) -> None:
    for layer in layering:
        for i, v in enumerate(layer):
            g.node(v)["order"] = i
