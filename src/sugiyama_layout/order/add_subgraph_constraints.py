"""Keep sibling subgraphs in the order one sweep found for them."""

from __future__ import annotations

from collections.abc import Hashable

from sugiyama_layout.graph import Graph


def add_subgraph_constraints(g: Graph, cg: Graph, vs: list[Hashable]) -> None:
    """Record in ``cg`` the left-to-right order of subgraphs seen along ``vs``.

    For each node, walk up its ancestors in layer graph ``g``; the first
    ancestor that differs from the previous sibling seen under the same parent
    gets an edge ``previous -> ancestor`` in the constraint graph. Later layers
    then keep those subgraphs in the same order.
    """
    prev: dict[Hashable, Hashable] = {}
    root_prev: Hashable | None = None

    for v in vs:
        child = g.parent(v)
        while child is not None:
            parent = g.parent(child)
            if parent is not None:
                prev_child = prev.get(parent)
                prev[parent] = child
            else:
                prev_child = root_prev
                root_prev = child

            if prev_child is not None and prev_child != child:
                cg.set_edge(prev_child, child)
                break

            child = parent
