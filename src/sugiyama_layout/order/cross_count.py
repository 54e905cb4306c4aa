"""Weighted edge crossing count between adjacent layers."""

from __future__ import annotations

from collections.abc import Hashable

from sugiyama_layout.graph import Graph


def cross_count(g: Graph, layering: list[list[Hashable]]) -> float:
    """Total weighted crossings of ``layering``.

    Two crossing edges contribute the product of their weights.
    """
    cc: float = 0
    for north, south in zip(layering, layering[1:]):
        cc += _two_layer_cross_count(g, north, south)
    return cc


def _two_layer_cross_count(g: Graph, north_layer: list[Hashable], south_layer: list[Hashable]) -> float:
    # Map south nodes to their position and list the edges ordered by their
    # north end, then their south end.
    south_pos = {v: i for i, v in enumerate(south_layer)}
    south_entries: list[tuple[int, float]] = []
    for v in north_layer:
        entries = [(south_pos[e.w], g.edge(e)["weight"]) for e in g.out_edges(v)]
        entries.sort(key=lambda entry: entry[0])
        south_entries.extend(entries)

    # Accumulator tree (Barth, Jünger, Mutzel 2002): each leaf is a south
    # position, each inner node sums the weights of edges ending below it.
    first_index = 1
    while first_index < len(south_layer):
        first_index <<= 1
    tree_size = 2 * first_index - 1
    first_index -= 1
    tree = [0] * tree_size

    cc: float = 0
    for pos, weight in south_entries:
        index = pos + first_index
        tree[index] += weight
        weight_sum = 0
        while index > 0:
            if index % 2:
                weight_sum += tree[index + 1]
            index = (index - 1) >> 1
            tree[index] += weight
        cc += weight * weight_sum

    return cc
