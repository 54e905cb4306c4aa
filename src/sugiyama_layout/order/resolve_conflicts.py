"""Reconcile barycenter order with left-to-right constraints.

Given barycenter entries and a constraint graph ``cg`` (an edge ``a -> b``
means ``a`` must end up left of ``b``), entries whose barycenters contradict
a constraint are merged into one entry that keeps the constrained order and
carries the combined weighted barycenter. The result can be sorted freely by
barycenter without violating any constraint.

Based on Forster, "A Fast and Simple Heuristic for Constrained Two-Level
Crossing Reduction", 2004.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any

from sugiyama_layout.graph import Graph


def resolve_conflicts(entries: list[dict[str, Any]], cg: Graph) -> list[dict[str, Any]]:
    mapped: dict[Hashable, dict[str, Any]] = {}
    for i, entry in enumerate(entries):
        tmp: dict[str, Any] = {"indegree": 0, "in": [], "out": [], "vs": [entry["v"]], "i": i}
        if entry.get("barycenter") is not None:
            tmp["barycenter"] = entry["barycenter"]
            tmp["weight"] = entry["weight"]
        mapped[entry["v"]] = tmp

    for e in cg.edges():
        entry_v = mapped.get(e.v)
        entry_w = mapped.get(e.w)
        if entry_v is not None and entry_w is not None:
            entry_w["indegree"] += 1
            entry_v["out"].append(entry_w)

    source_set = [entry for entry in mapped.values() if not entry["indegree"]]
    return _do_resolve_conflicts(source_set)


def _do_resolve_conflicts(source_set: list[dict[str, Any]]) -> list[dict[str, Any]]:
    entries: list[dict[str, Any]] = []

    while source_set:
        entry = source_set.pop()
        entries.append(entry)

        for u_entry in reversed(entry["in"]):
            if u_entry.get("merged"):
                continue
            if (
                u_entry.get("barycenter") is None
                or entry.get("barycenter") is None
                or u_entry["barycenter"] >= entry["barycenter"]
            ):
                _merge_entries(entry, u_entry)

        for w_entry in entry["out"]:
            w_entry["in"].append(entry)
            w_entry["indegree"] -= 1
            if w_entry["indegree"] == 0:
                source_set.append(w_entry)

    result = []
    for entry in entries:
        if entry.get("merged"):
            continue
        kept = {"vs": entry["vs"], "i": entry["i"]}
        if entry.get("barycenter") is not None:
            kept["barycenter"] = entry["barycenter"]
            kept["weight"] = entry["weight"]
        result.append(kept)
    return result


def _merge_entries(target: dict[str, Any], source: dict[str, Any]) -> None:
    total = 0
    weight = 0

    if target.get("weight"):
        total += target["barycenter"] * target["weight"]
        weight += target["weight"]

    if source.get("weight"):
        total += source["barycenter"] * source["weight"]
        weight += source["weight"]

    target["vs"] = source["vs"] + target["vs"]
    target["barycenter"] = total / weight if weight else None
    target["weight"] = weight
    target["i"] = min(source["i"], target["i"])
    source["merged"] = True
