"""Left and right subgraph borders, one dummy per rank."""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any

from sugiyama_layout.graph import Graph
from sugiyama_layout.util import DummyKind, add_dummy_node


def add_border_segments(g: Graph) -> None:
    """Give every subgraph a ``_bl``/``_br`` border node on each rank it spans.

    The nodes of a side are chained rank to rank with weight-1 edges and
    recorded on the subgraph as ``border_left``/``border_right``, dicts keyed
    by rank. Inner subgraphs are handled before their parents.
    """
    stack = [(v, False) for v in reversed(g.children())]
    while stack:
        v, expanded = stack.pop()
        if not expanded:
            stack.append((v, True))
            stack.extend((child, False) for child in reversed(g.children(v)))
            continue

        node = g.node(v)
        if "min_rank" in node:
            node["border_left"] = {}
            node["border_right"] = {}
            for rank in range(node["min_rank"], node["max_rank"] + 1):
                _add_border_node(g, "border_left", "_bl", v, node, rank)
                _add_border_node(g, "border_right", "_br", v, node, rank)


def _add_border_node(
    g: Graph,
    prop: str,
    prefix: str,
    sg: Hashable,
    sg_node: dict[str, Any],
    rank: int,
) -> None:
    label = {"width": 0, "height": 0, "rank": rank, "border_type": prop}
    prev = sg_node[prop].get(rank - 1)
    curr = add_dummy_node(g, DummyKind.BORDER, label, prefix)
    sg_node[prop][rank] = curr
    g.set_parent(curr, sg)
    if prev is not None:
        g.set_edge(prev, curr, {"weight": 1})
