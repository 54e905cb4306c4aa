"""Helpers shared by the layout stages."""

from __future__ import annotations

import itertools
import logging
import time as _time
from collections.abc import Callable, Hashable, Iterable
from enum import Enum
from typing import Any, TypeVar

from sugiyama_layout.errors import GeometryError
from sugiyama_layout.graph import Graph

logger = logging.getLogger(__name__)

T = TypeVar("T")

_id_counter = itertools.count(1)


class DummyKind(str, Enum):
    """Role of a node the pipeline inserts and later removes."""

    EDGE = "edge"
    EDGE_LABEL = "edge-label"
    EDGE_PROXY = "edge-proxy"
    BORDER = "border"
    ROOT = "root"


def unique_id(prefix: str) -> str:
    return f"{prefix}{next(_id_counter)}"


def add_dummy_node(g: Graph, kind: DummyKind, attrs: dict[str, Any], prefix: str) -> str:
    """Add a node tagged ``dummy=kind`` under a fresh id starting with ``prefix``."""
    v = unique_id(prefix)
    while g.has_node(v):
        v = unique_id(prefix)
    attrs["dummy"] = kind
    g.set_node(v, attrs)
    return v


def add_border_node(g: Graph, prefix: str, rank: int | None = None, order: int | None = None) -> str:
    node: dict[str, Any] = {"width": 0, "height": 0}
    if rank is not None:
        node["rank"] = rank
        node["order"] = order
    return add_dummy_node(g, DummyKind.BORDER, node, prefix)


def simplify(g: Graph) -> Graph:
    """Collapse parallel edges into one: weights summed, ``minlen`` maximised.

    Node records and the graph record are shared with ``g``.
    """
    simplified = Graph().set_graph(g.graph)
    for v in g.nodes():
        simplified.set_node(v, g.node(v))
    for e in g.edges():
        simple_label = simplified.edge(e.v, e.w) or {"weight": 0, "minlen": 1}
        label = g.edge(e)
        simplified.set_edge(
            e.v,
            e.w,
            {
                "weight": simple_label["weight"] + label["weight"],
                "minlen": max(simple_label["minlen"], label["minlen"]),
            },
        )
    return simplified


def as_non_compound_graph(g: Graph) -> Graph:
    """View of ``g`` without subgraph nodes. Records are shared with ``g``."""
    simplified = Graph(multigraph=g.is_multigraph()).set_graph(g.graph)
    for v in g.nodes():
        if not g.children(v):
            simplified.set_node(v, g.node(v))
    for e in g.edges():
        simplified.set_edge(e.v, e.w, g.edge(e), e.name)
    return simplified


def successor_weights(g: Graph) -> dict[Hashable, dict[Hashable, float]]:
    weights: dict[Hashable, dict[Hashable, float]] = {}
    for v in g.nodes():
        sucs: dict[Hashable, float] = {}
        for e in g.out_edges(v):
            sucs[e.w] = sucs.get(e.w, 0) + g.edge(e)["weight"]
        weights[v] = sucs
    return weights


def predecessor_weights(g: Graph) -> dict[Hashable, dict[Hashable, float]]:
    weights: dict[Hashable, dict[Hashable, float]] = {}
    for v in g.nodes():
        preds: dict[Hashable, float] = {}
        for e in g.in_edges(v):
            preds[e.v] = preds.get(e.v, 0) + g.edge(e)["weight"]
        weights[v] = preds
    return weights


def intersect_rect(rect: dict[str, float], point: dict[str, float]) -> dict[str, float]:
    """Point where the segment from the centre of ``rect`` to ``point`` leaves ``rect``.

    ``rect`` is centred on its ``x``/``y`` with the given ``width``/``height``.

    Raises:
        GeometryError: ``point`` is the centre of ``rect`` (no direction).
    """
    x = rect["x"]
    y = rect["y"]

    dx = point["x"] - x
    dy = point["y"] - y
    w = rect["width"] / 2
    h = rect["height"] / 2

    if not dx and not dy:
        raise GeometryError("Not possible to find intersection inside of the rectangle")

    if dy and (not dx or abs(dy) * w > abs(dx) * h):
        # Top or bottom side.
        if dy < 0:
            h = -h
        sx = h * dx / dy
        sy = h
    else:
        # Left or right side.
        if dx < 0:
            w = -w
        sx = w
        sy = w * dy / dx

    return {"x": x + sx, "y": y + sy}


def max_rank(g: Graph) -> int:
    """Highest ``rank`` in ``g``, or -1 when no node is ranked."""
    ranks = [g.node(v)["rank"] for v in g.nodes() if "rank" in g.node(v)]
    return max(ranks, default=-1)


def build_layer_matrix(g: Graph) -> list[list[Hashable]]:
    """Ranked nodes grouped by ``rank``, each layer sorted by ``order``."""
    layers: list[list[tuple[float, Hashable]]] = [[] for _ in range(max_rank(g) + 1)]
    for v in g.nodes():
        node = g.node(v)
        if "rank" in node:
            layers[node["rank"]].append((node["order"], v))
    return [[v for _, v in sorted(layer, key=lambda item: item[0])] for layer in layers]


def normalize_ranks(g: Graph) -> None:
    """Shift ranks so the smallest is 0."""
    ranks = [g.node(v)["rank"] for v in g.nodes() if "rank" in g.node(v)]
    if not ranks:
        return
    low = min(ranks)
    for v in g.nodes():
        node = g.node(v)
        if "rank" in node:
            node["rank"] -= low


def remove_empty_ranks(g: Graph) -> None:
    """Drop empty ranks, except those on a multiple of ``node_rank_factor``.

    Ranks that are multiples of the factor are the real node ranks produced by
    the nesting graph; the ones in between only exist for subgraph borders.
    """
    ranked = [v for v in g.nodes() if "rank" in g.node(v)]
    if not ranked:
        return
    offset = min(g.node(v)["rank"] for v in ranked)

    layers: dict[int, list[Hashable]] = {}
    for v in ranked:
        layers.setdefault(g.node(v)["rank"] - offset, []).append(v)

    delta = 0
    node_rank_factor = g.graph.get("node_rank_factor", 1)
    for i in range(max(layers) + 1):
        vs = layers.get(i)
        if vs is None and i % node_rank_factor != 0:
            delta -= 1
        elif vs is not None and delta:
            for v in vs:
                g.node(v)["rank"] += delta


def partition(collection: Iterable[T], fn: Callable[[T], bool]) -> tuple[list[T], list[T]]:
    """Split ``collection`` into (matching, not matching), keeping order."""
    lhs: list[T] = []
    rhs: list[T] = []
    for value in collection:
        (lhs if fn(value) else rhs).append(value)
    return lhs, rhs


def time(name: str, fn: Callable[[], T]) -> T:
    """Run ``fn`` and log how long it took at debug level."""
    start = _time.perf_counter()
    try:
        return fn()
    finally:
        logger.debug("%s time: %.3fms", name, (_time.perf_counter() - start) * 1000)


def notime(name: str, fn: Callable[[], T]) -> T:
    return fn()
