"""Sort resolved entries by barycenter."""

from __future__ import annotations

from typing import Any

from sugiyama_layout.util import partition


def sort(entries: list[dict[str, Any]], bias_right: bool = False) -> dict[str, Any]:
    """Order entries by barycenter, keeping the others at their original index.

    Ties between equal barycenters go to the lower original index, or the
    higher one when ``bias_right`` is set. Returns ``{"vs": [...]}`` plus the
    combined ``barycenter``/``weight`` when any entry had one.
    """
    sortable, unsortable = partition(entries, lambda entry: entry.get("barycenter") is not None)
    unsortable.sort(key=lambda entry: -entry["i"])
    if bias_right:
        sortable.sort(key=lambda entry: (entry["barycenter"], -entry["i"]))
    else:
        sortable.sort(key=lambda entry: (entry["barycenter"], entry["i"]))

    vs: list[list[Any]] = []
    total = 0
    weight = 0
    vs_index = _consume_unsortable(vs, unsortable, 0)

    for entry in sortable:
        vs_index += len(entry["vs"])
        vs.append(entry["vs"])
        total += entry["barycenter"] * entry["weight"]
        weight += entry["weight"]
        vs_index = _consume_unsortable(vs, unsortable, vs_index)

    result: dict[str, Any] = {"vs": [v for chunk in vs for v in chunk]}
    if weight:
        result["barycenter"] = total / weight
        result["weight"] = weight
    return result


def _consume_unsortable(vs: list[list[Any]], unsortable: list[dict[str, Any]], index: int) -> int:
    """Emit unsortable entries (sorted by descending index) whose slot has come up."""
    while unsortable and unsortable[-1]["i"] <= index:
        vs.append(unsortable.pop()["vs"])
        index += 1
    return index
