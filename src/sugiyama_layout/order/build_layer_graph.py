"""Single-rank views of the layout graph used by the ordering sweeps."""

from __future__ import annotations

from collections.abc import Hashable

from sugiyama_layout.graph import Graph
from sugiyama_layout.util import unique_id


def build_layer_graph(g: Graph, rank: int, relationship: str) -> Graph:
    """Build the layer graph for ``rank``.

    The result is compound and holds:

    - every node on ``rank`` and every subgraph spanning it, nested as in
      ``g`` under a fresh root stored as ``graph["root"]``,
    - for each of them, the edges to their neighbours on the adjacent rank,
      taken from ``relationship`` (``"in_edges"`` sweeping down,
      ``"out_edges"`` sweeping up) and pointing into the layer, with parallel
      edges merged into one whose weight is the sum,
    - for subgraphs, a fresh record naming their border nodes on ``rank``.

    Other nodes share their record with ``g``, so writing ``order`` on the
    layer graph updates the layout graph. Edges are assumed to be unit length.
    """
    root = _create_root_node(g)
    result = Graph(compound=True, default_node_label=lambda v: g.node(v)).set_graph({"root": root})
    neighbor_edges = getattr(g, relationship)

    for v in g.nodes():
        node = g.node(v)
        parent = g.parent(v)

        if node.get("rank") == rank or ("min_rank" in node and node["min_rank"] <= rank <= node["max_rank"]):
            result.set_node(v)
            result.set_parent(v, root if parent is None else parent)

            for e in neighbor_edges(v):
                u = e.w if e.v == v else e.v
                edge = result.edge(u, v)
                weight = edge["weight"] if edge is not None else 0
                result.set_edge(u, v, {"weight": g.edge(e)["weight"] + weight})

            if "min_rank" in node:
                result.set_node(
                    v,
                    {
                        "border_left": node["border_left"][rank],
                        "border_right": node["border_right"][rank],
                    },
                )

    return result


def _create_root_node(g: Graph) -> Hashable:
    v = unique_id("_root")
    while g.has_node(v):
        v = unique_id("_root")
    return v
