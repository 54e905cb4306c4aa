"""Nest edge dummy chains inside the subgraphs they pass through."""

from __future__ import annotations

from collections.abc import Hashable

from sugiyama_layout.graph import Graph


def parent_dummy_chains(g: Graph) -> None:
    """Give every dummy of a chain the parent it lies in at its rank.

    The chain climbs from the edge's tail towards the lowest common ancestor
    of both endpoints while the current subgraph ends above the dummy's rank,
    then descends towards the head once the next subgraph on the path has
    started.
    """
    postorder_nums = _postorder(g)

    for v in g.graph["dummy_chains"]:
        node = g.node(v)
        edge_obj = node["edge_obj"]
        path, lca = _find_path(g, postorder_nums, edge_obj.v, edge_obj.w)
        path_idx = 0
        path_v = path[path_idx]
        ascending = True

        while v != edge_obj.w:
            node = g.node(v)

            if ascending:
                while True:
                    path_v = path[path_idx]
                    if path_v == lca or g.node(path_v)["max_rank"] >= node["rank"]:
                        break
                    path_idx += 1
                if path_v == lca:
                    ascending = False

            if not ascending:
                while path_idx < len(path) - 1 and g.node(path[path_idx + 1])["min_rank"] <= node["rank"]:
                    path_idx += 1
                path_v = path[path_idx]

            g.set_parent(v, path_v)
            v = g.successors(v)[0]


def _find_path(
    g: Graph,
    postorder_nums: dict[Hashable, tuple[int, int]],
    v: Hashable,
    w: Hashable,
) -> tuple[list[Hashable | None], Hashable | None]:
    """Containment path from ``v`` up to the LCA of ``v`` and ``w``, then down to ``w``."""
    v_path: list[Hashable | None] = []
    w_path: list[Hashable | None] = []
    low = min(postorder_nums[v][0], postorder_nums[w][0])
    lim = max(postorder_nums[v][1], postorder_nums[w][1])

    # Climb from v until the ancestor's subtree covers both endpoints.
    parent: Hashable | None = v
    while True:
        parent = g.parent(parent)
        v_path.append(parent)
        if parent is None:
            break
        parent_low, parent_lim = postorder_nums[parent]
        if parent_low <= low and lim <= parent_lim:
            break
    lca = parent

    parent = g.parent(w)
    while parent != lca:
        w_path.append(parent)
        parent = g.parent(parent)

    w_path.reverse()
    return v_path + w_path, lca


def _postorder(g: Graph) -> dict[Hashable, tuple[int, int]]:
    """``(low, lim)`` postorder numbers over the containment forest."""
    result: dict[Hashable, tuple[int, int]] = {}
    lim = 0
    for root in g.children():
        low = {root: lim}
        walk = [(root, iter(g.children(root)))]
        while walk:
            v, children = walk[-1]
            for child in children:
                low[child] = lim
                walk.append((child, iter(g.children(child))))
                break
            else:
                walk.pop()
                result[v] = (low[v], lim)
                lim += 1
    return result
