"""Break long edges into unit-length chains of dummy nodes.

After ``run`` every edge spans exactly one rank. Each chain starts at a dummy
listed in ``g.graph["dummy_chains"]``; its dummies point back at the edge they
replace (``edge_obj``) and share its record (``edge_label``). The dummy on the
edge's ``label_rank`` carries the label's size so positioning reserves room
for it.

``undo`` puts the original edges back once the dummies have coordinates, and
turns those coordinates into the edge's ``points`` and label position.
"""

from __future__ import annotations

from typing import Any

from sugiyama_layout.graph import EdgeKey, Graph
from sugiyama_layout.util import DummyKind, add_dummy_node


def run(g: Graph) -> None:
    g.graph["dummy_chains"] = []
    for e in g.edges():
        _normalize_edge(g, e)


def _normalize_edge(g: Graph, e: EdgeKey) -> None:
    v = e.v
    v_rank = g.node(v)["rank"]
    w = e.w
    w_rank = g.node(w)["rank"]
    edge_label = g.edge(e)
    label_rank = edge_label.get("label_rank")

    if w_rank == v_rank + 1:
        return

    g.remove_edge(e)

    first = True
    for rank in range(v_rank + 1, w_rank):
        edge_label["points"] = []
        attrs: dict[str, Any] = {
            "width": 0,
            "height": 0,
            "edge_label": edge_label,
            "edge_obj": e,
            "rank": rank,
        }
        dummy = add_dummy_node(g, DummyKind.EDGE, attrs, "_d")
        if rank == label_rank:
            attrs["width"] = edge_label["width"]
            attrs["height"] = edge_label["height"]
            attrs["dummy"] = DummyKind.EDGE_LABEL
            attrs["labelpos"] = edge_label["labelpos"]
        g.set_edge(v, dummy, {"weight": edge_label["weight"]}, e.name)
        if first:
            g.graph["dummy_chains"].append(dummy)
            first = False
        v = dummy

    g.set_edge(v, w, {"weight": edge_label["weight"]}, e.name)


def undo(g: Graph) -> None:
    for v in g.graph["dummy_chains"]:
        node = g.node(v)
        orig_label = node["edge_label"]
        edge_obj = node["edge_obj"]
        g.set_edge(edge_obj.v, edge_obj.w, orig_label, edge_obj.name)

        while "dummy" in node:
            w = g.successors(v)[0]
            g.remove_node(v)
            orig_label["points"].append({"x": node["x"], "y": node["y"]})
            if node["dummy"] == DummyKind.EDGE_LABEL:
                orig_label["x"] = node["x"]
                orig_label["y"] = node["y"]
                orig_label["width"] = node["width"]
                orig_label["height"] = node["height"]
            v = w
            node = g.node(v)
