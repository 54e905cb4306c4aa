"""Layout pipeline.

``layout`` copies what it needs from the caller's graph into a private layout
graph, runs the stages below on it and writes the results back:

  1. Cycle removal        (acyclic)
  2. Nesting + ranking    (nesting_graph, rank)
  3. Normalisation        (normalize, parent_dummy_chains, border_segments)
  4. Crossing reduction   (order)
  5. Coordinates          (coordinate_system, position)
  6. Routing + clean-up   (normalize.undo, intersections, acyclic.undo)

All dummy nodes, proxy nodes and reversed edges live only in the layout graph.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping
from typing import Any

from sugiyama_layout import acyclic, coordinate_system, nesting_graph, normalize
from sugiyama_layout.acyclic import ReversedEdges
from sugiyama_layout.border_segments import add_border_segments
from sugiyama_layout.config import LayoutConfig, RankDir, canonicalize
from sugiyama_layout.graph import Graph
from sugiyama_layout.order import order
from sugiyama_layout.parent_dummy_chains import parent_dummy_chains
from sugiyama_layout.position import position
from sugiyama_layout.rank import rank
from sugiyama_layout.util import (
    DummyKind,
    add_dummy_node,
    as_non_compound_graph,
    intersect_rect,
    normalize_ranks,
    notime,
    remove_empty_ranks,
    time,
)

logger = logging.getLogger(__name__)

Timer = Callable[[str, Callable[[], Any]], Any]

NODE_NUM_ATTRS = ("width", "height")
NODE_DEFAULTS: dict[str, Any] = {"width": 0, "height": 0}
EDGE_NUM_ATTRS = ("minlen", "weight", "width", "height", "labeloffset")
EDGE_DEFAULTS: dict[str, Any] = {
    "minlen": 1,
    "weight": 1,
    "width": 0,
    "height": 0,
    "labeloffset": 0,
    "labelpos": "c",
}
# Smallest accepted value; anything lower falls back to the default.
EDGE_MINIMUMS: dict[str, float] = {"minlen": 1, "weight": 0}


def layout(graph: Graph, options: Mapping[str, Any] | None = None) -> Graph:
    """Lay out ``graph`` in place and return it.

    Nodes get ``x``, ``y`` (centre) and ``rank``; subgraphs also get
    ``width``/``height``. Edges get ``points`` and, when labelled, the label's
    ``x``/``y``. The graph record gets the drawing's ``width``/``height``.

    Args:
        graph: the graph to lay out. Its records are read case-insensitively.
        options: per-call overrides of the graph options (``rankdir``,
            ``nodesep``, ...) plus ``debug_timing``,
            ``disable_optimal_order_heuristic`` and ``constraints``. They are
            not written back to ``graph.graph``.
    """
    config = LayoutConfig.from_attrs(canonicalize(graph.graph), options)
    timer: Timer = time if config.debug_timing else notime

    def run() -> None:
        layout_graph = timer("  build_layout_graph", lambda: build_layout_graph(graph, config))
        timer("  run_layout", lambda: run_layout(layout_graph, config, timer))
        timer("  update_input_graph", lambda: update_input_graph(graph, layout_graph))

    timer("layout", run)
    return graph


def run_layout(g: Graph, config: LayoutConfig, timer: Timer = notime) -> None:
    timer("    make_space_for_edge_labels", lambda: make_space_for_edge_labels(g))
    timer("    remove_self_edges", lambda: remove_self_edges(g))
    reversed_edges: ReversedEdges = timer("    acyclic", lambda: acyclic.run(g))
    timer("    nesting_graph.run", lambda: nesting_graph.run(g))
    timer("    rank", lambda: rank(as_non_compound_graph(g)))
    timer("    inject_edge_label_proxies", lambda: inject_edge_label_proxies(g))
    timer("    remove_empty_ranks", lambda: remove_empty_ranks(g))
    timer("    nesting_graph.cleanup", lambda: nesting_graph.cleanup(g))
    timer("    normalize_ranks", lambda: normalize_ranks(g))
    timer("    assign_rank_min_max", lambda: assign_rank_min_max(g))
    timer("    remove_edge_label_proxies", lambda: remove_edge_label_proxies(g))
    timer("    normalize.run", lambda: normalize.run(g))
    timer("    parent_dummy_chains", lambda: parent_dummy_chains(g))
    timer("    add_border_segments", lambda: add_border_segments(g))
    timer(
        "    order",
        lambda: order(
            g,
            disable_optimal_order_heuristic=config.disable_optimal_order_heuristic,
            constraints=config.constraints,
        ),
    )
    timer("    coordinate_system.adjust", lambda: coordinate_system.adjust(g))
    timer("    position", lambda: position(g))
    timer("    remove_border_nodes", lambda: nesting_graph.remove_border_nodes(g))
    timer("    normalize.undo", lambda: normalize.undo(g))
    timer("    fixup_edge_label_coords", lambda: fixup_edge_label_coords(g))
    timer("    coordinate_system.undo", lambda: coordinate_system.undo(g))
    timer("    translate_graph", lambda: translate_graph(g))
    timer("    assign_node_intersects", lambda: assign_node_intersects(g))
    timer("    reverse_points", lambda: reverse_points_for_reversed_edges(g, reversed_edges))
    timer("    acyclic.undo", lambda: acyclic.undo(g, reversed_edges))


# ─── Input / output ───────────────────────────────────────────────────────────


def _select_number_attrs(
    attrs: Mapping[str, Any],
    keys: tuple[str, ...],
    minimums: Mapping[str, float] | None = None,
) -> dict[str, Any]:
    selected: dict[str, Any] = {}
    minimums = minimums or {}
    for key in keys:
        value = attrs.get(key)
        if value is None:
            continue
        try:
            number = float(value)
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric %s '%s'", key, value)
            continue
        if not math.isfinite(number):
            logger.warning("Ignoring non-finite %s '%s'", key, value)
            continue
        if key in minimums and number < minimums[key]:
            logger.warning("Ignoring %s '%s' below %s", key, value, minimums[key])
            continue
        if key == "minlen":
            # Ranks are integers.
            selected[key] = math.ceil(number)
        else:
            selected[key] = int(number) if number.is_integer() else number
    return selected


def build_layout_graph(input_graph: Graph, config: LayoutConfig | None = None) -> Graph:
    """Private multigraph holding only the attributes the layout reads.

    Input nodes keep their ids and nesting; pre-set ``rank`` values are not
    copied, so ranks are always computed. Edges into or out of a subgraph are
    left out with a warning and get no ``points``.
    """
    if config is None:
        config = LayoutConfig.from_attrs(canonicalize(input_graph.graph))

    g = Graph(multigraph=True, compound=True).set_graph(config.graph_record())

    for v in input_graph.nodes():
        node = canonicalize(input_graph.node(v))
        g.set_node(v, {**NODE_DEFAULTS, **_select_number_attrs(node, NODE_NUM_ATTRS)})
        g.set_parent(v, input_graph.parent(v))

    for e in input_graph.edges():
        if input_graph.children(e.v) or input_graph.children(e.w):
            logger.warning("Ignoring edge %s -> %s: subgraphs cannot be edge endpoints", e.v, e.w)
            continue
        edge = canonicalize(input_graph.edge(e))
        label = {**EDGE_DEFAULTS, **_select_number_attrs(edge, EDGE_NUM_ATTRS, EDGE_MINIMUMS)}
        if edge.get("labelpos"):
            label["labelpos"] = str(edge["labelpos"]).lower()
        g.set_edge(e.v, e.w, label, e.name)

    return g


def update_input_graph(input_graph: Graph, layout_graph: Graph) -> None:
    """Copy the computed geometry from the layout graph onto the caller's records."""
    for v in input_graph.nodes():
        input_label = input_graph.node(v)
        layout_label = layout_graph.node(v)

        if input_label is not None and layout_label is not None:
            input_label["x"] = layout_label["x"]
            input_label["y"] = layout_label["y"]
            if "rank" in layout_label:
                input_label["rank"] = layout_label["rank"]

            if layout_graph.children(v):
                input_label["width"] = layout_label["width"]
                input_label["height"] = layout_label["height"]

    for e in input_graph.edges():
        input_label = input_graph.edge(e)
        layout_label = layout_graph.edge(e)
        if input_label is None or layout_label is None:
            continue

        input_label["points"] = layout_label["points"]
        if "x" in layout_label:
            input_label["x"] = layout_label["x"]
            input_label["y"] = layout_label["y"]

    input_graph.graph["width"] = layout_graph.graph["width"]
    input_graph.graph["height"] = layout_graph.graph["height"]


# ─── Stages ───────────────────────────────────────────────────────────────────


def make_space_for_edge_labels(g: Graph) -> None:
    """Put a rank between every pair of ranks so edge labels get their own.

    Halving ``ranksep`` keeps the visual distance between real ranks.
    """
    graph = g.graph
    graph["ranksep"] /= 2
    horizontal = RankDir.parse(graph.get("rankdir"), RankDir.TB).is_horizontal

    for e in g.edges():
        edge = g.edge(e)
        edge["minlen"] *= 2
        if edge["labelpos"] != "c":
            if horizontal:
                edge["height"] += edge["labeloffset"]
            else:
                edge["width"] += edge["labeloffset"]


def remove_self_edges(g: Graph) -> None:
    for e in g.edges():
        if e.v == e.w:
            g.remove_edge(e)


def inject_edge_label_proxies(g: Graph) -> None:
    """Mark the middle rank of every labelled edge with a proxy node."""
    for e in g.edges():
        edge = g.edge(e)
        if edge.get("width") and edge.get("height"):
            v = g.node(e.v)
            w = g.node(e.w)
            label = {"rank": (w["rank"] - v["rank"]) // 2 + v["rank"], "e": e}
            add_dummy_node(g, DummyKind.EDGE_PROXY, label, "_ep")


def remove_edge_label_proxies(g: Graph) -> None:
    for v in g.nodes():
        node = g.node(v)
        if node.get("dummy") == DummyKind.EDGE_PROXY:
            g.edge(node["e"])["label_rank"] = node["rank"]
            g.remove_node(v)


def assign_rank_min_max(g: Graph) -> None:
    """Give each subgraph the rank span of its top and bottom border."""
    max_rank = 0
    for v in g.nodes():
        node = g.node(v)
        if "border_top" in node:
            node["min_rank"] = g.node(node["border_top"])["rank"]
            node["max_rank"] = g.node(node["border_bottom"])["rank"]
            max_rank = max(max_rank, node["max_rank"])
    g.graph["max_rank"] = max_rank


def fixup_edge_label_coords(g: Graph) -> None:
    """Move ``l``/``r`` labels beside their edge and drop the offset padding."""
    for e in g.edges():
        edge = g.edge(e)
        if "x" in edge:
            if edge["labelpos"] in ("l", "r"):
                edge["width"] -= edge["labeloffset"]
            if edge["labelpos"] == "l":
                edge["x"] -= edge["width"] / 2 + edge["labeloffset"]
            elif edge["labelpos"] == "r":
                edge["x"] += edge["width"] / 2 + edge["labeloffset"]


def translate_graph(g: Graph) -> None:
    """Shift the drawing so it starts at the margins; set the graph's size."""
    min_x = float("inf")
    max_x: float = 0
    min_y = float("inf")
    max_y: float = 0
    graph_label = g.graph
    margin_x = graph_label.get("marginx", 0)
    margin_y = graph_label.get("marginy", 0)

    def get_extremes(attrs: dict[str, Any]) -> None:
        nonlocal min_x, max_x, min_y, max_y
        x = attrs["x"]
        y = attrs["y"]
        w = attrs["width"]
        h = attrs["height"]
        min_x = min(min_x, x - w / 2)
        max_x = max(max_x, x + w / 2)
        min_y = min(min_y, y - h / 2)
        max_y = max(max_y, y + h / 2)

    for v in g.nodes():
        get_extremes(g.node(v))
    for e in g.edges():
        edge = g.edge(e)
        if "x" in edge:
            get_extremes(edge)

    # Nothing to place.
    if min_x == float("inf"):
        min_x = min_y = 0

    min_x -= margin_x
    min_y -= margin_y

    for v in g.nodes():
        node = g.node(v)
        node["x"] -= min_x
        node["y"] -= min_y

    for e in g.edges():
        edge = g.edge(e)
        for point in edge.get("points", []):
            point["x"] -= min_x
            point["y"] -= min_y
        if "x" in edge:
            edge["x"] -= min_x
        if "y" in edge:
            edge["y"] -= min_y

    graph_label["width"] = max_x - min_x + margin_x
    graph_label["height"] = max_y - min_y + margin_y


def assign_node_intersects(g: Graph) -> None:
    """End every edge's ``points`` on the boundaries of its two nodes."""
    for e in g.edges():
        edge = g.edge(e)
        node_v = g.node(e.v)
        node_w = g.node(e.w)

        if not edge.get("points"):
            edge["points"] = []
            p1 = node_w
            p2 = node_v
        else:
            p1 = edge["points"][0]
            p2 = edge["points"][-1]

        edge["points"].insert(0, _boundary_point(node_v, p1))
        edge["points"].append(_boundary_point(node_w, p2))


def _boundary_point(node: dict[str, Any], point: dict[str, Any]) -> dict[str, float]:
    # A point on the centre gives no direction; the edge ends at the centre.
    if point["x"] == node["x"] and point["y"] == node["y"]:
        return {"x": node["x"], "y": node["y"]}
    return intersect_rect(node, point)


def reverse_points_for_reversed_edges(g: Graph, reversed_edges: ReversedEdges) -> None:
    for e in reversed_edges:
        edge = g.edge(e)
        if edge is not None:
            edge["points"].reverse()
