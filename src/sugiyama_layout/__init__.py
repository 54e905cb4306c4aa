"""sugiyama_layout — layered (Sugiyama-style) layout of directed graphs.

Build a ``Graph``, give nodes a ``width``/``height``, call ``layout`` and read
back ``x``/``y`` on nodes and ``points`` on edges.
"""

from sugiyama_layout.config import Acyclicer, Align, LayoutConfig, Ranker, RankDir
from sugiyama_layout.errors import GeometryError, GraphError, LayoutError
from sugiyama_layout.graph import EdgeKey, Graph
from sugiyama_layout.layout import layout
from sugiyama_layout.util import intersect_rect

__version__ = "0.1.0"

__all__ = [
    "Acyclicer",
    "Align",
    "EdgeKey",
    "GeometryError",
    "Graph",
    "GraphError",
    "LayoutConfig",
    "LayoutError",
    "RankDir",
    "Ranker",
    "intersect_rect",
    "layout",
]
