"""Ranking primitives shared by the rankers."""

from __future__ import annotations

from collections.abc import Hashable

from sugiyama_layout.graph import EdgeKey, Graph


def longest_path(g: Graph) -> None:
    """Initial ranking: pull every node as far down as its out-edges allow.

    Sinks get rank 0 and every other node gets ``min(rank(w) - minlen)`` over
    its out-edges, so ranks are zero or negative. The result is feasible but
    not tight; it is a cheap starting point for the tree based rankers.
    Requires a DAG.
    """
    visited: set[Hashable] = set()

    for source in g.sources():
        if source in visited:
            continue
        visited.add(source)
        stack = [(source, iter(g.out_edges(source)))]
        while stack:
            v, edges = stack[-1]
            for e in edges:
                if e.w not in visited:
                    visited.add(e.w)
                    stack.append((e.w, iter(g.out_edges(e.w))))
                    break
            else:
                stack.pop()
                ranks = [g.node(e.w)["rank"] - g.edge(e)["minlen"] for e in g.out_edges(v)]
                g.node(v)["rank"] = min(ranks, default=0)


def slack(g: Graph, e: EdgeKey) -> int:
    """How much longer ``e`` is than its ``minlen``."""
    return g.node(e.w)["rank"] - g.node(e.v)["rank"] - g.edge(e)["minlen"]
