"""Brandes-Köpf horizontal coordinate assignment.

"Fast and Simple Horizontal Coordinate Assignment" (Brandes, Köpf 2002),
with the corrections from "Erratum: Fast and Simple Horizontal Coordinate
Assignment" (Brandes, Walter, Zink 2020).

Four candidate assignments are computed, aligning each node with the median
of its upper or lower neighbours (``u``/``d``) while scanning from the left or
the right (``l``/``r``). Every candidate is shifted to line up with the
narrowest one, and the final ``x`` is the mean of the two middle candidates,
or a single candidate when the graph pins ``align``.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Hashable

from sugiyama_layout.config import Align
from sugiyama_layout.graph import Graph
from sugiyama_layout.util import DummyKind, build_layer_matrix

Layering = list[list[Hashable]]
Conflicts = set[frozenset]


# ─── Conflicts ────────────────────────────────────────────────────────────────


def find_type1_conflicts(g: Graph, layering: Layering) -> Conflicts:
    """Non-inner segments that cross an inner segment.

    An inner segment joins two dummy nodes. Alignment must not follow a
    segment that crosses one, so long edges stay straight.
    """
    conflicts: Conflicts = set()

    for prev_layer, layer in zip(layering, layering[1:]):
        # Boundaries of the last inner segment seen, as positions in prev_layer.
        k0 = 0
        scan_pos = 0
        prev_layer_length = len(prev_layer)
        last_node = layer[-1] if layer else None

        for i, v in enumerate(layer):
            w = _find_other_inner_segment_node(g, v)
            k1 = g.node(w)["order"] if w is not None else prev_layer_length

            if w is not None or v == last_node:
                for scan_node in layer[scan_pos : i + 1]:
                    for u in g.predecessors(scan_node):
                        u_label = g.node(u)
                        u_pos = u_label["order"]
                        if (u_pos < k0 or k1 < u_pos) and not (
                            u_label.get("dummy") and g.node(scan_node).get("dummy")
                        ):
                            add_conflict(conflicts, u, scan_node)
                scan_pos = i + 1
                k0 = k1

    return conflicts


def find_type2_conflicts(g: Graph, layering: Layering) -> Conflicts:
    """Inner segments that cross the inner segments of a subgraph border."""
    conflicts: Conflicts = set()

    def scan(
        south: list[Hashable],
        south_pos: int,
        south_end: int,
        prev_north_border: int,
        next_north_border: int,
    ) -> None:
        for v in south[south_pos:south_end]:
            if g.node(v).get("dummy"):
                for u in g.predecessors(v):
                    u_node = g.node(u)
                    if u_node.get("dummy") and (
                        u_node["order"] < prev_north_border or u_node["order"] > next_north_border
                    ):
                        add_conflict(conflicts, u, v)

    for north, south in zip(layering, layering[1:]):
        prev_north_pos = -1
        next_north_pos = -1
        south_pos = 0

        for south_lookahead, v in enumerate(south):
            if g.node(v).get("dummy") == DummyKind.BORDER:
                predecessors = g.predecessors(v)
                if predecessors:
                    next_north_pos = g.node(predecessors[0])["order"]
                    scan(south, south_pos, south_lookahead, prev_north_pos, next_north_pos)
                    south_pos = south_lookahead
                    prev_north_pos = next_north_pos

        scan(south, south_pos, len(south), next_north_pos, len(north))

    return conflicts


def _find_other_inner_segment_node(g: Graph, v: Hashable) -> Hashable | None:
    if g.node(v).get("dummy"):
        for u in g.predecessors(v):
            if g.node(u).get("dummy"):
                return u
    return None


def add_conflict(conflicts: Conflicts, v: Hashable, w: Hashable) -> None:
    conflicts.add(frozenset((v, w)))


def has_conflict(conflicts: Conflicts, v: Hashable, w: Hashable) -> bool:
    return frozenset((v, w)) in conflicts


# ─── Alignment ────────────────────────────────────────────────────────────────


def vertical_alignment(
    g: Graph,
    layering: Layering,
    conflicts: Conflicts,
    neighbor_fn: Callable[[Hashable], list[Hashable]],
) -> tuple[dict[Hashable, Hashable], dict[Hashable, Hashable]]:
    """Group nodes into blocks aligned with their median neighbours.

    Returns ``(root, align)``: ``root[v]`` is the top node of ``v``'s block and
    ``align`` links each block member to the next, the last back to the root.
    """
    root: dict[Hashable, Hashable] = {}
    align: dict[Hashable, Hashable] = {}
    pos: dict[Hashable, int] = {}

    # Positions are taken from the layering so it can be scanned right to left
    # by passing reversed layers.
    for layer in layering:
        for order, v in enumerate(layer):
            root[v] = v
            align[v] = v
            pos[v] = order

    for layer in layering:
        prev_idx = -1
        for v in layer:
            ws = neighbor_fn(v)
            if ws:
                ws = sorted(ws, key=lambda w: pos[w])
                mp = (len(ws) - 1) / 2
                for i in range(math.floor(mp), math.ceil(mp) + 1):
                    w = ws[i]
                    if align[v] == v and prev_idx < pos[w] and not has_conflict(conflicts, v, w):
                        align[w] = v
                        align[v] = root[v] = root[w]
                        prev_idx = pos[w]

    return root, align


def horizontal_compaction(
    g: Graph,
    layering: Layering,
    root: dict[Hashable, Hashable],
    align: dict[Hashable, Hashable],
    reverse_sep: bool = False,
) -> dict[Hashable, float]:
    """Place blocks as far left as their separation allows, then pull them right.

    The first pass gives each block the smallest ``x`` its left neighbours
    allow. The second moves blocks right up to their right neighbours, except
    blocks made of a subgraph's trailing border, which would otherwise drag
    the border away from the subgraph's content.
    """
    xs: dict[Hashable, float] = {}
    block_g = build_block_graph(g, layering, root, reverse_sep)
    border_type = "border_left" if reverse_sep else "border_right"

    def iterate(set_xs: Callable[[Hashable], None], next_nodes: Callable[[Hashable], list[Hashable]]) -> None:
        # Iterative DFS: a node is processed once everything it depends on is.
        stack = block_g.nodes()
        visited: set[Hashable] = set()
        while stack:
            elem = stack.pop()
            if elem in visited:
                set_xs(elem)
            else:
                visited.add(elem)
                stack.append(elem)
                stack.extend(next_nodes(elem))

    def pass1(elem: Hashable) -> None:
        xs[elem] = max((xs[e.v] + block_g.edge(e) for e in block_g.in_edges(elem)), default=0)

    def pass2(elem: Hashable) -> None:
        min_x = min((xs[e.w] - block_g.edge(e) for e in block_g.out_edges(elem)), default=float("inf"))
        node = g.node(elem)
        if min_x != float("inf") and node.get("border_type") != border_type:
            xs[elem] = max(xs[elem], min_x)

    iterate(pass1, block_g.predecessors)
    iterate(pass2, block_g.successors)

    # Every block member takes its root's coordinate.
    for v in align:
        xs[v] = xs[root[v]]

    return xs


def build_block_graph(
    g: Graph,
    layering: Layering,
    root: dict[Hashable, Hashable],
    reverse_sep: bool,
) -> Graph:
    """Graph of blocks with an edge per left-right neighbour pair, labelled with the minimum gap."""
    block_graph = Graph()
    sep_fn = sep(g.graph["nodesep"], g.graph["edgesep"], reverse_sep)

    for layer in layering:
        u = None
        for v in layer:
            v_root = root[v]
            block_graph.set_node(v_root)
            if u is not None:
                u_root = root[u]
                prev_max = block_graph.edge(u_root, v_root)
                block_graph.set_edge(u_root, v_root, max(sep_fn(g, v, u), prev_max or 0))
            u = v

    return block_graph


def sep(node_sep: float, edge_sep: float, reverse_sep: bool) -> Callable[[Graph, Hashable, Hashable], float]:
    """Minimum distance between the centres of neighbours ``v`` and ``w``.

    Half of each width plus half of each node's spacing (``edge_sep`` for
    dummies, ``node_sep`` otherwise). A label placed left or right of its edge
    shifts the edge off the label's centre, which moves the gap on that side.
    """

    def sep_fn(g: Graph, v: Hashable, w: Hashable) -> float:
        v_label = g.node(v)
        w_label = g.node(w)
        total: float = 0
        delta: float = 0

        total += v_label["width"] / 2
        if "labelpos" in v_label:
            labelpos = str(v_label["labelpos"]).lower()
            if labelpos == "l":
                delta = -v_label["width"] / 2
            elif labelpos == "r":
                delta = v_label["width"] / 2
        if delta:
            total += delta if reverse_sep else -delta
        delta = 0

        total += (edge_sep if v_label.get("dummy") else node_sep) / 2
        total += (edge_sep if w_label.get("dummy") else node_sep) / 2

        total += w_label["width"] / 2
        if "labelpos" in w_label:
            labelpos = str(w_label["labelpos"]).lower()
            if labelpos == "l":
                delta = w_label["width"] / 2
            elif labelpos == "r":
                delta = -w_label["width"] / 2
        if delta:
            total += delta if reverse_sep else -delta

        return total

    return sep_fn


# ─── Combining the four candidates ────────────────────────────────────────────


def find_smallest_width_alignment(g: Graph, xss: dict[str, dict[Hashable, float]]) -> dict[Hashable, float]:
    def width(xs: dict[Hashable, float]) -> float:
        max_x = float("-inf")
        min_x = float("inf")
        for v, x in xs.items():
            half_width = g.node(v)["width"] / 2
            max_x = max(x + half_width, max_x)
            min_x = min(x - half_width, min_x)
        return max_x - min_x

    return min(xss.values(), key=width)


def align_coordinates(xss: dict[str, dict[Hashable, float]], align_to: dict[Hashable, float]) -> None:
    """Shift each candidate so its left (``*l``) or right (``*r``) edge matches ``align_to``."""
    align_to_vals = align_to.values()
    align_to_min = min(align_to_vals)
    align_to_max = max(align_to_vals)

    for vert in ("u", "d"):
        for horiz in ("l", "r"):
            alignment = vert + horiz
            xs = xss[alignment]
            if xs is align_to:
                continue

            xs_vals = xs.values()
            delta = align_to_min - min(xs_vals) if horiz == "l" else align_to_max - max(xs_vals)
            if delta:
                xss[alignment] = {v: x + delta for v, x in xs.items()}


def balance(xss: dict[str, dict[Hashable, float]], align: Align | None = None) -> dict[Hashable, float]:
    if align is not None:
        return dict(xss[align.value])

    result: dict[Hashable, float] = {}
    for v in xss["ul"]:
        xs = sorted(candidate[v] for candidate in xss.values())
        result[v] = (xs[1] + xs[2]) / 2
    return result


def position_x(g: Graph) -> dict[Hashable, float]:
    """Final ``x`` of every node of the non-compound graph ``g``."""
    layering = build_layer_matrix(g)
    conflicts = find_type1_conflicts(g, layering) | find_type2_conflicts(g, layering)

    xss: dict[str, dict[Hashable, float]] = {}
    for vert in ("u", "d"):
        adjusted_layering = layering if vert == "u" else list(reversed(layering))
        for horiz in ("l", "r"):
            if horiz == "r":
                adjusted_layering = [list(reversed(inner)) for inner in adjusted_layering]

            neighbor_fn = g.predecessors if vert == "u" else g.successors
            root, align = vertical_alignment(g, adjusted_layering, conflicts, neighbor_fn)
            xs = horizontal_compaction(g, adjusted_layering, root, align, horiz == "r")
            if horiz == "r":
                xs = {v: -x for v, x in xs.items()}
            xss[vert + horiz] = xs

    if not xss["ul"]:
        return {}

    smallest_width = find_smallest_width_alignment(g, xss)
    align_coordinates(xss, smallest_width)
    return balance(xss, Align.parse(g.graph.get("align"), None))
