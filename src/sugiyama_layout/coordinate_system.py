"""Rank direction handling.

The layout stages always work top to bottom. ``adjust`` prepares a graph laid
out left-right (or right-left) by swapping node and label sizes, and ``undo``
maps the finished top-bottom coordinates back into the requested direction.
"""

from __future__ import annotations

from typing import Any

from sugiyama_layout.config import RankDir
from sugiyama_layout.graph import Graph


def _rankdir(g: Graph) -> RankDir:
    return RankDir.parse(g.graph.get("rankdir"), RankDir.TB)


def adjust(g: Graph) -> None:
    if _rankdir(g).is_horizontal:
        _swap_width_height(g)


def undo(g: Graph) -> None:
    rankdir = _rankdir(g)
    if rankdir.is_reversed:
        _reverse_y(g)
    if rankdir.is_horizontal:
        _swap_xy(g)
        _swap_width_height(g)


def _swap_width_height(g: Graph) -> None:
    for v in g.nodes():
        _swap_width_height_one(g.node(v))
    for e in g.edges():
        _swap_width_height_one(g.edge(e))


def _swap_width_height_one(attrs: dict[str, Any]) -> None:
    # Chain and border edges carry no size.
    if "width" in attrs:
        attrs["width"], attrs["height"] = attrs["height"], attrs["width"]


def _reverse_y(g: Graph) -> None:
    for v in g.nodes():
        _reverse_y_one(g.node(v))

    for e in g.edges():
        edge = g.edge(e)
        for point in edge.get("points", []):
            _reverse_y_one(point)
        if "y" in edge:
            _reverse_y_one(edge)


def _reverse_y_one(attrs: dict[str, Any]) -> None:
    attrs["y"] = -attrs["y"]


def _swap_xy(g: Graph) -> None:
    for v in g.nodes():
        _swap_xy_one(g.node(v))

    for e in g.edges():
        edge = g.edge(e)
        for point in edge.get("points", []):
            _swap_xy_one(point)
        if "x" in edge:
            _swap_xy_one(edge)


def _swap_xy_one(attrs: dict[str, Any]) -> None:
    attrs["x"], attrs["y"] = attrs["y"], attrs["x"]
