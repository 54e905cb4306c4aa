"""Nesting graph for compound layouts.

Ranking knows nothing about subgraphs, so before ranking every subgraph gets a
top and a bottom border node and edges that force its members between them:

- a dummy root is linked to every top-level node so the graph is connected,
- every original ``minlen`` is multiplied by ``node_sep = 2 * height + 1``
  (``height`` is the nesting depth) so border ranks fit between node ranks,
- the border edges weigh more than all original edges together, which keeps
  subgraphs as short as possible.

``cleanup`` removes the root and the nesting edges once ranks are known. The
graph record keeps ``node_rank_factor`` so ``remove_empty_ranks`` can tell
real node ranks from border-only ones. After positioning,
``remove_border_nodes`` folds the border nodes back into the subgraph box.
"""

from __future__ import annotations

from collections.abc import Hashable

from sugiyama_layout.graph import Graph
from sugiyama_layout.util import DummyKind, add_border_node, add_dummy_node


def run(g: Graph) -> None:
    root = add_dummy_node(g, DummyKind.ROOT, {}, "_root")
    depths = tree_depths(g)
    height = max(depths.values()) - 1
    node_sep = 2 * height + 1

    g.graph["nesting_root"] = root

    for e in g.edges():
        g.edge(e)["minlen"] *= node_sep

    weight = sum(g.edge(e)["weight"] for e in g.edges()) + 1

    for child in g.children():
        _dfs(g, root, node_sep, weight, height, depths, child)

    g.graph["node_rank_factor"] = node_sep


def _dfs(
    g: Graph,
    root: Hashable,
    node_sep: int,
    weight: float,
    height: int,
    depths: dict[Hashable, int],
    v: Hashable,
) -> None:
    children = g.children(v)
    if not children:
        if v != root:
            g.set_edge(root, v, {"weight": 0, "minlen": node_sep})
        return

    top = add_border_node(g, "_bt")
    bottom = add_border_node(g, "_bb")
    label = g.node(v)

    g.set_parent(top, v)
    label["border_top"] = top
    g.set_parent(bottom, v)
    label["border_bottom"] = bottom

    for child in children:
        _dfs(g, root, node_sep, weight, height, depths, child)

        child_node = g.node(child)
        child_top = child_node.get("border_top", child)
        child_bottom = child_node.get("border_bottom", child)
        this_weight = weight if "border_top" in child_node else 2 * weight
        minlen = 1 if child_top != child_bottom else height - depths[v] + 1

        g.set_edge(top, child_top, {"weight": this_weight, "minlen": minlen, "nesting_edge": True})
        g.set_edge(child_bottom, bottom, {"weight": this_weight, "minlen": minlen, "nesting_edge": True})

    if g.parent(v) is None:
        g.set_edge(root, top, {"weight": 0, "minlen": height + depths[v]})


def tree_depths(g: Graph) -> dict[Hashable, int]:
    """Depth of every node in the containment forest (top level is 1)."""
    depths: dict[Hashable, int] = {}
    stack = [(v, 1) for v in reversed(g.children())]
    while stack:
        v, depth = stack.pop()
        depths[v] = depth
        stack.extend((child, depth + 1) for child in reversed(g.children(v)))
    return depths


def cleanup(g: Graph) -> None:
    graph_label = g.graph
    g.remove_node(graph_label.pop("nesting_root"))
    for e in g.edges():
        if g.edge(e).get("nesting_edge"):
            g.remove_edge(e)


def remove_border_nodes(g: Graph) -> None:
    """Size each subgraph from its border nodes, then drop every border node."""
    for v in g.nodes():
        if g.children(v):
            node = g.node(v)
            top = g.node(node["border_top"])
            bottom = g.node(node["border_bottom"])
            left = g.node(node["border_left"][node["max_rank"]])
            right = g.node(node["border_right"][node["max_rank"]])

            node["width"] = abs(right["x"] - left["x"])
            node["height"] = abs(bottom["y"] - top["y"])
            node["x"] = left["x"] + node["width"] / 2
            node["y"] = top["y"] + node["height"] / 2

    for v in g.nodes():
        if g.node(v).get("dummy") == DummyKind.BORDER:
            g.remove_node(v)
