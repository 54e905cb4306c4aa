"""Graph container for the layout pipeline.

A compound multigraph built on ``networkx.MultiDiGraph``. networkx keeps the
adjacency; this class adds what the layout stages rely on:

- attribute records shared by reference: ``node(v)`` and ``edge(e)`` return the
  same dict on every call, so stages annotate them in place,
- edge identity as ``EdgeKey(v, w, name)`` with a stable global insertion order,
- a parent/child containment forest for compound graphs,
- a default node label factory (used when a node is created implicitly).

Records live under the ``"label"`` attribute of the underlying networkx node or
edge, in the same way the rendering IR keeps its payload under ``"data"``.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from typing import Any, NamedTuple

import networkx as nx

from sugiyama_layout.errors import GraphError

# networkx key used for unnamed edges.
_DEFAULT_KEY = "\x00"

# Parent of every top-level node in a compound graph.
_GRAPH_ROOT = object()


class EdgeKey(NamedTuple):
    """Identity of an edge: endpoints plus its multigraph name (``None`` if unnamed)."""

    v: Hashable
    w: Hashable
    name: Hashable | None = None


def _key(name: Hashable | None) -> Hashable:
    return _DEFAULT_KEY if name is None else name


def _name(key: Hashable) -> Hashable | None:
    return None if key == _DEFAULT_KEY else key


class Graph:
    """Directed graph with optional parallel edges and optional nesting.

    Args:
        multigraph: allow several edges between the same pair of nodes,
            distinguished by ``name``. When false, names are ignored.
        compound: allow nodes to be nested with ``set_parent``.
        default_node_label: factory ``v -> record`` for nodes created without
            an explicit record. Defaults to a fresh empty dict.
    """

    def __init__(
        self,
        multigraph: bool = False,
        compound: bool = False,
        default_node_label: Callable[[Hashable], Any] | None = None,
    ) -> None:
        self._nx: nx.MultiDiGraph = nx.MultiDiGraph()
        self._multigraph = multigraph
        self._compound = compound
        self._default_node_label = default_node_label or (lambda v: {})
        self._edge_order: dict[EdgeKey, None] = {}
        self._parent: dict[Hashable, Any] = {}
        self._children: dict[Any, dict[Hashable, None]] = {_GRAPH_ROOT: {}} if compound else {}

    def __repr__(self) -> str:
        return f"Graph(nodes={self.node_count()}, edges={self.edge_count()}, multigraph={self._multigraph}, compound={self._compound})"

    # ─── Graph-level record ──────────────────────────────────────────────────

    @property
    def graph(self) -> dict[str, Any]:
        """The graph-level attribute record (configuration and outputs)."""
        return self._nx.graph

    def set_graph(self, label: dict[str, Any]) -> Graph:
        self._nx.graph = label
        return self

    @property
    def digraph(self) -> nx.MultiDiGraph:
        """The underlying networkx graph. Treat as read-only."""
        return self._nx

    def is_multigraph(self) -> bool:
        return self._multigraph

    def is_compound(self) -> bool:
        return self._compound

    # ─── Nodes ────────────────────────────────────────────────────────────────

    def node_count(self) -> int:
        return self._nx.number_of_nodes()

    def nodes(self) -> list[Hashable]:
        return list(self._nx.nodes)

    def has_node(self, v: Hashable) -> bool:
        return v in self._nx

    def node(self, v: Hashable) -> Any:
        """Return the record of ``v``, or ``None`` if ``v`` is not in the graph."""
        if v not in self._nx:
            return None
        return self._nx.nodes[v]["label"]

    def set_node(self, v: Hashable, label: Any = None) -> Graph:
        """Add ``v`` or replace its record.

        Without ``label`` an existing node keeps its record and a new node gets
        one from the default label factory.
        """
        if v in self._nx:
            if label is not None:
                self._nx.nodes[v]["label"] = label
            return self

        self._nx.add_node(v, label=self._default_node_label(v) if label is None else label)
        if self._compound:
            self._parent[v] = _GRAPH_ROOT
            self._children[v] = {}
            self._children[_GRAPH_ROOT][v] = None
        return self

    def remove_node(self, v: Hashable) -> Graph:
        """Remove ``v`` with its incident edges; its children move to the top level."""
        if v not in self._nx:
            return self

        for e in self.node_edges(v):
            self._edge_order.pop(e, None)

        if self._compound:
            self._remove_from_parents_child_list(v)
            del self._parent[v]
            for child in list(self._children[v]):
                self.set_parent(child)
            del self._children[v]

        self._nx.remove_node(v)
        return self

    def sources(self) -> list[Hashable]:
        return [v for v in self._nx.nodes if self._nx.in_degree(v) == 0]

    def sinks(self) -> list[Hashable]:
        return [v for v in self._nx.nodes if self._nx.out_degree(v) == 0]

    def predecessors(self, v: Hashable) -> list[Hashable]:
        if v not in self._nx:
            return []
        return list(self._nx.predecessors(v))

    def successors(self, v: Hashable) -> list[Hashable]:
        if v not in self._nx:
            return []
        return list(self._nx.successors(v))

    def neighbors(self, v: Hashable) -> list[Hashable]:
        return list(dict.fromkeys([*self.predecessors(v), *self.successors(v)]))

    # ─── Containment ──────────────────────────────────────────────────────────

    def set_parent(self, v: Hashable, parent: Hashable | None = None) -> Graph:
        """Nest ``v`` under ``parent`` (top level when ``parent`` is ``None``)."""
        if not self._compound:
            raise GraphError("Cannot set parent in a non-compound graph")

        if parent is None:
            parent = _GRAPH_ROOT
        else:
            ancestor: Hashable | None = parent
            while ancestor is not None:
                if ancestor == v:
                    raise GraphError(f"Setting {parent!r} as parent of {v!r} would create a cycle")
                ancestor = self.parent(ancestor)
            self.set_node(parent)

        self.set_node(v)
        self._remove_from_parents_child_list(v)
        self._parent[v] = parent
        self._children[parent][v] = None
        return self

    def _remove_from_parents_child_list(self, v: Hashable) -> None:
        self._children[self._parent[v]].pop(v, None)

    def parent(self, v: Hashable) -> Hashable | None:
        if not self._compound:
            return None
        parent = self._parent.get(v)
        return None if parent is _GRAPH_ROOT else parent

    def children(self, v: Hashable | None = None) -> list[Hashable]:
        """Children of ``v``; the top-level nodes when ``v`` is ``None``."""
        if self._compound:
            children = self._children.get(_GRAPH_ROOT if v is None else v)
            return list(children) if children is not None else []
        if v is None:
            return self.nodes()
        return []

    # ─── Edges ────────────────────────────────────────────────────────────────

    def edge_count(self) -> int:
        return len(self._edge_order)

    def edges(self) -> list[EdgeKey]:
        """All edges in insertion order."""
        return list(self._edge_order)

    def set_edge(self, v: Hashable, w: Hashable, label: Any = None, name: Hashable | None = None) -> Graph:
        """Add the edge ``v -> w`` (creating missing endpoints) or replace its record."""
        if not self._multigraph:
            name = None
        key = _key(name)

        if self._nx.has_edge(v, w, key):
            if label is not None:
                self._nx.edges[v, w, key]["label"] = label
            return self

        self.set_node(v)
        self.set_node(w)
        self._nx.add_edge(v, w, key=key, label={} if label is None else label)
        self._edge_order[EdgeKey(v, w, name)] = None
        return self

    def set_path(self, vs: Iterable[Hashable], label: Any = None) -> Graph:
        vs = list(vs)
        for v, w in zip(vs, vs[1:]):
            self.set_edge(v, w, label)
        return self

    def _resolve(self, v: Hashable | EdgeKey, w: Hashable | None, name: Hashable | None) -> tuple:
        if isinstance(v, EdgeKey):
            v, w, name = v
        if not self._multigraph:
            name = None
        return v, w, _key(name)

    def edge(self, v: Hashable | EdgeKey, w: Hashable | None = None, name: Hashable | None = None) -> Any:
        """Return the record of an edge (by ``EdgeKey`` or endpoints), or ``None``."""
        v, w, key = self._resolve(v, w, name)
        if not self._nx.has_edge(v, w, key):
            return None
        return self._nx.edges[v, w, key]["label"]

    def has_edge(self, v: Hashable | EdgeKey, w: Hashable | None = None, name: Hashable | None = None) -> bool:
        v, w, key = self._resolve(v, w, name)
        return self._nx.has_edge(v, w, key)

    def remove_edge(self, v: Hashable | EdgeKey, w: Hashable | None = None, name: Hashable | None = None) -> Graph:
        v, w, key = self._resolve(v, w, name)
        if self._nx.has_edge(v, w, key):
            self._nx.remove_edge(v, w, key)
            self._edge_order.pop(EdgeKey(v, w, _name(key)), None)
        return self

    def in_edges(self, v: Hashable, u: Hashable | None = None) -> list[EdgeKey]:
        """Edges into ``v``, optionally only those coming from ``u``."""
        if v not in self._nx:
            return []
        return [
            EdgeKey(src, v, _name(key)) for src, _, key in self._nx.in_edges(v, keys=True) if u is None or src == u
        ]

    def out_edges(self, v: Hashable, w: Hashable | None = None) -> list[EdgeKey]:
        """Edges out of ``v``, optionally only those going to ``w``."""
        if v not in self._nx:
            return []
        return [
            EdgeKey(v, tgt, _name(key)) for _, tgt, key in self._nx.out_edges(v, keys=True) if w is None or tgt == w
        ]

    def node_edges(self, v: Hashable, w: Hashable | None = None) -> list[EdgeKey]:
        """In-edges then out-edges of ``v`` (restricted to ``w`` when given)."""
        return self.in_edges(v, w) + self.out_edges(v, w)
