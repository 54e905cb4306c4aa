"""Adjacent-exchange refinement after a barycenter sweep."""

from __future__ import annotations

from collections.abc import Hashable, Iterable

from sugiyama_layout.graph import EdgeKey, Graph
from sugiyama_layout.util import DummyKind


def transpose(
    g: Graph,
    layering: list[list[Hashable]],
    constraints: Iterable[tuple[Hashable, Hashable]] = (),
) -> bool:
    """Swap neighbouring nodes while that strictly lowers their crossings.

    Only nodes with the same parent are swapped, never border nodes, and never
    a pair that a ``(left, right)`` constraint fixes. ``layering`` and the
    ``order`` of the swapped nodes are updated in place. Returns whether
    anything moved.
    """
    fixed = set(constraints)
    moved = False

    for layer in layering:
        improved = True
        while improved:
            improved = False
            for i in range(len(layer) - 1):
                v, w = layer[i], layer[i + 1]
                if not _can_swap(g, v, w, fixed):
                    continue
                if _crossings(g, w, v) < _crossings(g, v, w):
                    layer[i], layer[i + 1] = w, v
                    g.node(w)["order"] = i
                    g.node(v)["order"] = i + 1
                    improved = moved = True

    return moved


def _can_swap(g: Graph, v: Hashable, w: Hashable, fixed: set[tuple[Hashable, Hashable]]) -> bool:
    if g.parent(v) != g.parent(w) or (v, w) in fixed:
        return False
    return g.node(v).get("dummy") != DummyKind.BORDER and g.node(w).get("dummy") != DummyKind.BORDER


def _crossings(g: Graph, left: Hashable, right: Hashable) -> float:
    """Weighted crossings between the edges of ``left`` and ``right`` with ``left`` placed first."""
    count: float = 0
    for left_edges, right_edges in (
        (g.in_edges(left), g.in_edges(right)),
        (g.out_edges(left), g.out_edges(right)),
    ):
        for e in left_edges:
            a = g.node(_other_end(e, left))["order"]
            for f in right_edges:
                if a > g.node(_other_end(f, right))["order"]:
                    count += g.edge(e)["weight"] * g.edge(f)["weight"]
    return count


def _other_end(e: EdgeKey, v: Hashable) -> Hashable:
    return e.w if e.v == v else e.v
