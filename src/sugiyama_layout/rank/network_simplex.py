"""Network simplex ranking.

Finds ranks that minimise ``sum(weight * (rank(w) - rank(v)))`` subject to
``rank(w) - rank(v) >= minlen`` for every edge (Gansner et al., "A Technique
for Drawing Directed Graphs", 1993).

1. Start from a feasible ranking (longest path) and a tight spanning tree.
2. Give every tree edge a cut value: the weight of graph edges crossing the
   cut the tree edge defines, head-component-bound minus tail-component-bound.
3. While a tree edge has a negative cut value, swap it for the non-tree edge
   with the least slack that crosses the same cut, then re-rank from the tree.

Tree nodes carry ``low``/``lim`` postorder numbers and their tree ``parent``
so "is this node below that tree edge" is an O(1) interval test.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any

import networkx as nx

from sugiyama_layout.graph import EdgeKey, Graph
from sugiyama_layout.rank.feasible_tree import feasible_tree
from sugiyama_layout.rank.util import longest_path, slack
from sugiyama_layout.util import simplify


def network_simplex(g: Graph) -> None:
    """Assign an optimal ``rank`` to every node of the connected DAG ``g``."""
    g = simplify(g)
    longest_path(g)
    t = feasible_tree(g)
    if t.number_of_nodes() == 0:
        return
    init_low_lim_values(t)
    init_cut_values(t, g)

    while True:
        e = leave_edge(t)
        if e is None:
            break
        f = enter_edge(t, g, e)
        exchange_edges(t, g, e, f)


# ─── Cut values ───────────────────────────────────────────────────────────────


def init_cut_values(t: nx.Graph, g: Graph) -> None:
    """Compute the cut value of every tree edge, leaves first."""
    root = next(iter(t.nodes))
    vs = list(nx.dfs_postorder_nodes(t, source=root))
    for v in vs[:-1]:
        _assign_cut_value(t, g, v)


def _assign_cut_value(t: nx.Graph, g: Graph, child: Hashable) -> None:
    parent = t.nodes[child]["parent"]
    t.edges[child, parent]["cutvalue"] = calc_cut_value(t, g, child)


def calc_cut_value(t: nx.Graph, g: Graph, child: Hashable) -> float:
    """Cut value of the tree edge between ``child`` and its tree parent.

    Assumes the cut values of the edges from ``child`` to its own tree
    children are already known.
    """
    parent = t.nodes[child]["parent"]
    # True if the graph edge behind the tree edge points child -> parent.
    child_is_tail = True
    graph_edge = g.edge(child, parent)
    if graph_edge is None:
        child_is_tail = False
        graph_edge = g.edge(parent, child)

    cut_value = graph_edge["weight"]

    for e in g.node_edges(child):
        is_out_edge = e.v == child
        other = e.w if is_out_edge else e.v

        if other != parent:
            points_to_head = is_out_edge == child_is_tail
            other_weight = g.edge(e)["weight"]

            cut_value += other_weight if points_to_head else -other_weight
            if t.has_edge(child, other):
                other_cut_value = t.edges[child, other]["cutvalue"]
                cut_value += -other_cut_value if points_to_head else other_cut_value

    return cut_value


# ─── Low/lim numbering ────────────────────────────────────────────────────────


def init_low_lim_values(tree: nx.Graph, root: Hashable | None = None) -> None:
    """Number the tree in postorder from ``root`` (first node by default).

    Each node gets ``lim`` (its postorder number), ``low`` (the smallest
    ``lim`` in its subtree) and ``parent`` (absent on the root).
    """
    if root is None:
        root = next(iter(tree.nodes))

    next_lim = 1
    low: dict[Hashable, int] = {root: next_lim}
    visited = {root}
    stack: list[tuple[Hashable, Hashable | None, Any]] = [(root, None, iter(tree.neighbors(root)))]

    while stack:
        v, parent, neighbors = stack[-1]
        for w in neighbors:
            if w not in visited:
                visited.add(w)
                low[w] = next_lim
                stack.append((w, v, iter(tree.neighbors(w))))
                break
        else:
            stack.pop()
            label = tree.nodes[v]
            label["low"] = low[v]
            label["lim"] = next_lim
            next_lim += 1
            if parent is not None:
                label["parent"] = parent
            else:
                label.pop("parent", None)


def is_descendant(v_label: dict[str, Any], root_label: dict[str, Any]) -> bool:
    """True if the node labelled ``v_label`` is in the subtree of ``root_label``."""
    return root_label["low"] <= v_label["lim"] <= root_label["lim"]


# ─── Pivoting ─────────────────────────────────────────────────────────────────


def leave_edge(tree: nx.Graph) -> tuple[Hashable, Hashable] | None:
    """First tree edge with a negative cut value, if any."""
    for u, v, data in tree.edges(data=True):
        if data["cutvalue"] < 0:
            return u, v
    return None


def enter_edge(t: nx.Graph, g: Graph, edge: tuple[Hashable, Hashable]) -> EdgeKey:
    """Non-tree edge with the least slack crossing the cut defined by ``edge``."""
    v, w = edge

    # The tree is undirected, so orient the edge the way it runs in the graph.
    if not g.has_edge(v, w):
        v, w = w, v

    v_label = t.nodes[v]
    w_label = t.nodes[w]
    tail_label = v_label
    flip = False

    # When the tail is the tree parent, look for edges pointing into the tail's
    # component rather than out of it.
    if v_label["lim"] > w_label["lim"]:
        tail_label = w_label
        flip = True

    candidates = [
        e
        for e in g.edges()
        if flip == is_descendant(t.nodes[e.v], tail_label) and flip != is_descendant(t.nodes[e.w], tail_label)
    ]
    return min(candidates, key=lambda e: slack(g, e))


def exchange_edges(t: nx.Graph, g: Graph, e: tuple[Hashable, Hashable], f: EdgeKey) -> None:
    t.remove_edge(*e)
    t.add_edge(f.v, f.w)
    init_low_lim_values(t)
    init_cut_values(t, g)
    update_ranks(t, g)


def update_ranks(t: nx.Graph, g: Graph) -> None:
    """Re-derive every rank from the root along tight tree edges."""
    root = next(v for v in t.nodes if "parent" not in t.nodes[v])
    for v in list(nx.dfs_preorder_nodes(t, source=root))[1:]:
        parent = t.nodes[v]["parent"]
        edge = g.edge(v, parent)
        flipped = False

        if edge is None:
            edge = g.edge(parent, v)
            flipped = True

        g.node(v)["rank"] = g.node(parent)["rank"] + (edge["minlen"] if flipped else -edge["minlen"])
