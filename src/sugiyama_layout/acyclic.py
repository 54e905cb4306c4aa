"""Cycle removal.

Every later stage needs a DAG, so ``run`` reverses a feedback arc set in place
and returns the record of what it reversed. ``undo`` consumes that record to
restore the original edge directions and names once coordinates are known.

Two feedback arc set strategies are available:

- ``dfs`` (default): back-edges of a depth-first search in node insertion
  order.
- ``greedy``: weighted greedy-FAS ordering (Eades, Lin, Smyth 1993); edges
  pointing against the ordering are reversed.
"""

from __future__ import annotations

from collections.abc import Hashable

from sugiyama_layout.config import Acyclicer
from sugiyama_layout.graph import EdgeKey, Graph
from sugiyama_layout.util import unique_id

# Reversed edge (as it exists in the layout graph) -> name of the forward edge.
ReversedEdges = dict[EdgeKey, Hashable]


def run(g: Graph) -> ReversedEdges:
    """Reverse a feedback arc set of ``g`` in place and return what was reversed."""
    acyclicer = Acyclicer.parse(g.graph.get("acyclicer"), Acyclicer.DFS)
    fas = greedy_fas(g) if acyclicer is Acyclicer.GREEDY else dfs_fas(g)

    reversed_edges: ReversedEdges = {}
    for e in fas:
        label = g.edge(e)
        g.remove_edge(e)
        name = unique_id("rev")
        g.set_edge(e.w, e.v, label, name)
        reversed_edges[EdgeKey(e.w, e.v, name if g.is_multigraph() else None)] = e.name
    return reversed_edges


def undo(g: Graph, reversed_edges: ReversedEdges) -> None:
    """Flip every edge recorded by ``run`` back to its original direction and name."""
    for e, forward_name in reversed_edges.items():
        label = g.edge(e)
        if label is None:
            continue
        g.remove_edge(e)
        g.set_edge(e.w, e.v, label, forward_name)


def dfs_fas(g: Graph) -> list[EdgeKey]:
    """Back-edges found by an iterative depth-first search."""
    fas: list[EdgeKey] = []
    on_stack: set[Hashable] = set()
    visited: set[Hashable] = set()

    for start in g.nodes():
        if start in visited:
            continue
        visited.add(start)
        on_stack.add(start)
        stack = [(start, iter(g.out_edges(start)))]
        while stack:
            v, edges = stack[-1]
            for e in edges:
                if e.w in on_stack:
                    fas.append(e)
                elif e.w not in visited:
                    visited.add(e.w)
                    on_stack.add(e.w)
                    stack.append((e.w, iter(g.out_edges(e.w))))
                    break
            else:
                on_stack.discard(v)
                stack.pop()

    return fas


def greedy_fas_ordering(g: Graph) -> list[Hashable]:
    """Compute a node ordering using the weighted greedy-FAS heuristic.

    Nodes earlier in the ordering should have outgoing edges going forward.

    - Maintain dynamic weighted in/out degrees updated as nodes are removed.
    - Repeatedly:
        1. Move all sinks (no remaining out-weight) to s2.
        2. Move all sources (no remaining in-weight) to s1.
        3. Of remaining nodes in cycles, pick max (out - in) and add to s1.
    - Final ordering: s1 + reversed(s2).

    Self-loops and zero-weight edges do not count towards the degrees; ties
    go to the node inserted first.
    """
    # Dict keys keep insertion order, which makes tie-breaking deterministic.
    active: dict[Hashable, None] = dict.fromkeys(g.nodes())

    out_weight: dict[Hashable, float] = dict.fromkeys(active, 0)
    in_weight: dict[Hashable, float] = dict.fromkeys(active, 0)
    for e in g.edges():
        if e.v == e.w:
            continue
        weight = g.edge(e)["weight"]
        out_weight[e.v] += weight
        in_weight[e.w] += weight

    def remove(v: Hashable) -> None:
        del active[v]
        for e in g.out_edges(v):
            if e.w in active and e.w != v:
                in_weight[e.w] -= g.edge(e)["weight"]
        for e in g.in_edges(v):
            if e.v in active and e.v != v:
                out_weight[e.v] -= g.edge(e)["weight"]

    s1: list[Hashable] = []
    s2: list[Hashable] = []

    while active:
        changed = True
        while changed:
            changed = False
            sinks = [v for v in active if out_weight[v] == 0]
            for sink in sinks:
                if sink in active:
                    remove(sink)
                    s2.append(sink)
                    changed = True

        changed = True
        while changed:
            changed = False
            sources = [v for v in active if in_weight[v] == 0]
            for source in sources:
                if source in active:
                    remove(source)
                    s1.append(source)
                    changed = True

        if active:
            best = max(active, key=lambda v: out_weight[v] - in_weight[v])
            remove(best)
            s1.append(best)

    s2.reverse()
    s1.extend(s2)
    return s1


def greedy_fas(g: Graph) -> list[EdgeKey]:
    """Edges that point backwards in the greedy-FAS ordering."""
    position = {v: i for i, v in enumerate(greedy_fas_ordering(g))}
    return [e for e in g.edges() if e.v != e.w and position[e.v] > position[e.w]]
