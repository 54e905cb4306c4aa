"""Coordinate assignment.

``position`` gives every node of the non-compound view of the layout graph a
``y`` (its rank's offset along the rank axis) and an ``x`` (Brandes-Köpf,
see ``bk``). Ranks are always laid out top to bottom here; ``rankdir`` is
applied afterwards by ``coordinate_system.undo``.
"""

from __future__ import annotations

from sugiyama_layout.graph import Graph
from sugiyama_layout.position.bk import position_x
from sugiyama_layout.util import as_non_compound_graph, build_layer_matrix

__all__ = ["position", "position_x", "position_y"]


def position(g: Graph) -> None:
    g = as_non_compound_graph(g)

    position_y(g)
    for v, x in position_x(g).items():
        g.node(v)["x"] = x


def position_y(g: Graph) -> None:
    """Centre each rank on the tallest node it holds, ``ranksep`` apart."""
    layering = build_layer_matrix(g)
    rank_sep = g.graph["ranksep"]
    prev_y = 0
    for layer in layering:
        max_height = max((g.node(v)["height"] for v in layer), default=0)
        for v in layer:
            g.node(v)["y"] = prev_y + max_height / 2
        prev_y += max_height + rank_sep
