"""Recursive barycenter ordering of one layer graph."""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any

from sugiyama_layout.graph import Graph
from sugiyama_layout.order.barycenter import barycenter
from sugiyama_layout.order.resolve_conflicts import resolve_conflicts
from sugiyama_layout.order.sort import sort


def sort_subgraph(g: Graph, v: Hashable, cg: Graph, bias_right: bool = False) -> dict[str, Any]:
    """Order the children of ``v`` in layer graph ``g``.

    Nested subgraphs are sorted first and then move as one block, positioned
    by the merged barycenter of their members. A subgraph's own left and right
    border nodes are pinned to the ends of its block.
    """
    movable = g.children(v)
    node = g.node(v)
    bl = node.get("border_left") if node else None
    br = node.get("border_right") if node else None
    subgraphs: dict[Hashable, dict[str, Any]] = {}

    if bl is not None:
        movable = [w for w in movable if w != bl and w != br]

    barycenters = barycenter(g, movable)
    for entry in barycenters:
        if g.children(entry["v"]):
            subgraph_result = sort_subgraph(g, entry["v"], cg, bias_right)
            subgraphs[entry["v"]] = subgraph_result
            if subgraph_result.get("barycenter") is not None:
                _merge_barycenters(entry, subgraph_result)

    entries = resolve_conflicts(barycenters, cg)
    _expand_subgraphs(entries, subgraphs)

    result = sort(entries, bias_right)

    if bl is not None:
        result["vs"] = [bl, *result["vs"], br]
        bl_preds = g.predecessors(bl)
        if bl_preds:
            bl_pred = g.node(bl_preds[0])
            br_pred = g.node(g.predecessors(br)[0])
            if result.get("barycenter") is None:
                result["barycenter"] = 0
                result["weight"] = 0
            result["barycenter"] = (result["barycenter"] * result["weight"] + bl_pred["order"] + br_pred["order"]) / (
                result["weight"] + 2
            )
            result["weight"] += 2

    return result


def _expand_subgraphs(entries: list[dict[str, Any]], subgraphs: dict[Hashable, dict[str, Any]]) -> None:
    for entry in entries:
        vs: list[Hashable] = []
        for v in entry["vs"]:
            if v in subgraphs:
                vs.extend(subgraphs[v]["vs"])
            else:
                vs.append(v)
        entry["vs"] = vs


def _merge_barycenters(target: dict[str, Any], other: dict[str, Any]) -> None:
    if target.get("barycenter") is not None:
        weight = target["weight"] + other["weight"]
        target["barycenter"] = (
            (target["barycenter"] * target["weight"] + other["barycenter"] * other["weight"]) / weight
            if weight
            else None
        )
        target["weight"] = weight
    else:
        target["barycenter"] = other["barycenter"]
        target["weight"] = other["weight"]
