"""Barycenters of movable nodes in a layer graph."""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any

from sugiyama_layout.graph import Graph


def barycenter(g: Graph, movable: list[Hashable]) -> list[dict[str, Any]]:
    """One entry per node: ``{"v": v, "barycenter": ..., "weight": ...}``.

    The barycenter is the weighted mean ``order`` of the node's neighbours on
    the fixed layer. Nodes without weighted neighbours get an entry with
    only ``"v"``.
    """
    entries: list[dict[str, Any]] = []
    for v in movable:
        total = 0
        weight = 0
        for e in g.in_edges(v):
            edge_weight = g.edge(e)["weight"]
            total += edge_weight * g.node(e.v)["order"]
            weight += edge_weight

        if weight:
            entries.append({"v": v, "barycenter": total / weight, "weight": weight})
        else:
            entries.append({"v": v})
    return entries
