"""Tests for the order package — crossing minimisation."""

from __future__ import annotations

import pytest

from sugiyama_layout.graph import EdgeKey, Graph
from sugiyama_layout.order import cross_count, init_order, order
from sugiyama_layout.order.add_subgraph_constraints import add_subgraph_constraints
from sugiyama_layout.order.barycenter import barycenter
from sugiyama_layout.order.build_layer_graph import build_layer_graph
from sugiyama_layout.order.resolve_conflicts import resolve_conflicts
from sugiyama_layout.order.sort import sort
from sugiyama_layout.order.sort_subgraph import sort_subgraph
from sugiyama_layout.order.transpose import transpose
from sugiyama_layout.util import DummyKind, build_layer_matrix

# ─── Helpers ──────────────────────────────────────────────────────────────────


def add_edge(g: Graph, v, w, weight: int = 1, name=None) -> None:
    g.set_edge(v, w, {"weight": weight}, name)


def add_path(g: Graph, vs: list) -> None:
    for v, w in zip(vs, vs[1:]):
        add_edge(g, v, w)


def set_ranks(g: Graph, ranks: dict) -> None:
    for v, rank in ranks.items():
        g.set_node(v, {"rank": rank})


# ─── cross_count ──────────────────────────────────────────────────────────────


class TestCrossCount:
    def test_empty_layering(self):
        assert cross_count(Graph(), []) == 0

    def test_no_crossing(self):
        g = Graph()
        add_edge(g, "a1", "b1")
        add_edge(g, "a2", "b2")
        assert cross_count(g, [["a1", "a2"], ["b1", "b2"]]) == 0

    def test_single_crossing(self):
        g = Graph()
        add_edge(g, "a1", "b1")
        add_edge(g, "a2", "b2")
        assert cross_count(g, [["a1", "a2"], ["b2", "b1"]]) == 1

    def test_weighted_crossing(self):
        g = Graph()
        add_edge(g, "a1", "b1", weight=2)
        add_edge(g, "a2", "b2", weight=3)
        assert cross_count(g, [["a1", "a2"], ["b2", "b1"]]) == 6

    def test_sums_over_layers(self):
        g = Graph()
        add_path(g, ["a1", "b1", "c1"])
        add_path(g, ["a2", "b2", "c2"])
        assert cross_count(g, [["a1", "a2"], ["b2", "b1"], ["c1", "c2"]]) == 2

    def test_shared_endpoint_is_not_a_crossing(self):
        g = Graph()
        add_path(g, ["a", "b", "c"])
        add_path(g, ["d", "e", "c"])
        add_path(g, ["a", "f", "i"])
        add_edge(g, "a", "e")
        assert cross_count(g, [["a", "d"], ["b", "e", "f"], ["c", "i"]]) == 1
        assert cross_count(g, [["d", "a"], ["e", "b", "f"], ["c", "i"]]) == 0


# ─── init_order ───────────────────────────────────────────────────────────────


class TestInitOrder:
    def test_tree_layers_follow_dfs(self):
        g = Graph(compound=True)
        set_ranks(g, {"a": 0, "b": 1, "c": 2, "d": 2, "e": 1})
        add_path(g, ["a", "b", "c"])
        add_edge(g, "b", "d")
        add_edge(g, "a", "e")
        assert init_order(g) == [["a"], ["b", "e"], ["c", "d"]]

    def test_dag(self):
        g = Graph(compound=True)
        set_ranks(g, {"a": 0, "b": 1, "c": 1, "d": 2})
        add_path(g, ["a", "b", "d"])
        add_path(g, ["a", "c", "d"])
        layering = init_order(g)
        assert layering[0] == ["a"]
        assert sorted(layering[1]) == ["b", "c"]
        assert layering[2] == ["d"]

    def test_skips_subgraph_nodes(self):
        g = Graph(compound=True)
        g.set_node("sg1", {})
        g.set_node("a", {"rank": 0})
        g.set_parent("a", "sg1")
        assert init_order(g) == [["a"]]


# ─── barycenter ───────────────────────────────────────────────────────────────


class TestBarycenter:
    def test_no_predecessors(self):
        g = Graph()
        g.set_node("x", {})
        assert barycenter(g, ["x"]) == [{"v": "x"}]

    def test_sole_predecessor(self):
        g = Graph()
        g.set_node("a", {"order": 2})
        add_edge(g, "a", "x")
        assert barycenter(g, ["x"]) == [{"v": "x", "barycenter": 2, "weight": 1}]

    def test_mean_of_predecessors(self):
        g = Graph()
        g.set_node("a", {"order": 2})
        g.set_node("b", {"order": 4})
        add_edge(g, "a", "x")
        add_edge(g, "b", "x")
        assert barycenter(g, ["x"]) == [{"v": "x", "barycenter": 3, "weight": 2}]

    def test_weighted_mean(self):
        g = Graph()
        g.set_node("a", {"order": 2})
        g.set_node("b", {"order": 4})
        add_edge(g, "a", "x", weight=3)
        add_edge(g, "b", "x", weight=1)
        assert barycenter(g, ["x"]) == [{"v": "x", "barycenter": 2.5, "weight": 4}]

    def test_whole_layer(self):
        g = Graph()
        g.set_node("a", {"order": 1})
        g.set_node("b", {"order": 2})
        g.set_node("c", {"order": 4})
        add_edge(g, "a", "x")
        add_edge(g, "b", "x")
        g.set_node("z", {})
        add_edge(g, "c", "y")
        assert barycenter(g, ["x", "y", "z"]) == [
            {"v": "x", "barycenter": 1.5, "weight": 2},
            {"v": "y", "barycenter": 4, "weight": 1},
            {"v": "z"},
        ]


# ─── resolve_conflicts ────────────────────────────────────────────────────────


def by_vs(entries):
    return sorted(entries, key=lambda entry: entry["vs"])


class TestResolveConflicts:
    def test_no_constraints(self):
        entries = [{"v": "a", "barycenter": 2, "weight": 3}, {"v": "b", "barycenter": 1, "weight": 2}]
        assert by_vs(resolve_conflicts(entries, Graph())) == [
            {"vs": ["a"], "i": 0, "barycenter": 2, "weight": 3},
            {"vs": ["b"], "i": 1, "barycenter": 1, "weight": 2},
        ]

    def test_constraint_agrees_with_barycenters(self):
        cg = Graph()
        cg.set_edge("b", "a")
        entries = [{"v": "a", "barycenter": 2, "weight": 3}, {"v": "b", "barycenter": 1, "weight": 2}]
        assert by_vs(resolve_conflicts(entries, cg)) == [
            {"vs": ["a"], "i": 0, "barycenter": 2, "weight": 3},
            {"vs": ["b"], "i": 1, "barycenter": 1, "weight": 2},
        ]

    def test_conflict_merges_entries(self):
        cg = Graph()
        cg.set_edge("a", "b")
        entries = [{"v": "a", "barycenter": 2, "weight": 3}, {"v": "b", "barycenter": 1, "weight": 2}]
        assert resolve_conflicts(entries, cg) == [
            {"vs": ["a", "b"], "i": 0, "barycenter": (3 * 2 + 2 * 1) / (3 + 2), "weight": 5}
        ]

    def test_conflict_chain(self):
        cg = Graph()
        cg.set_path(["a", "b", "c", "d"])
        entries = [
            {"v": "a", "barycenter": 4, "weight": 1},
            {"v": "b", "barycenter": 3, "weight": 1},
            {"v": "c", "barycenter": 2, "weight": 1},
            {"v": "d", "barycenter": 1, "weight": 1},
        ]
        assert resolve_conflicts(entries, cg) == [
            {"vs": ["a", "b", "c", "d"], "i": 0, "barycenter": 2.5, "weight": 4}
        ]

    def test_several_constraints_on_one_target(self):
        cg = Graph()
        cg.set_edge("a", "c")
        cg.set_edge("b", "c")
        entries = [
            {"v": "a", "barycenter": 4, "weight": 1},
            {"v": "b", "barycenter": 3, "weight": 1},
            {"v": "c", "barycenter": 2, "weight": 1},
        ]
        [result] = resolve_conflicts(entries, cg)
        assert result["vs"].index("c") > result["vs"].index("a")
        assert result["vs"].index("c") > result["vs"].index("b")
        assert result["i"] == 0
        assert result["barycenter"] == 3
        assert result["weight"] == 3

    def test_entry_without_barycenter_untouched(self):
        entries = [{"v": "a"}, {"v": "b", "barycenter": 1, "weight": 2}]
        assert by_vs(resolve_conflicts(entries, Graph())) == [
            {"vs": ["a"], "i": 0},
            {"vs": ["b"], "i": 1, "barycenter": 1, "weight": 2},
        ]

    @pytest.mark.parametrize(
        "constraint,expected_vs",
        [(("b", "a"), ["b", "a"]), (("a", "b"), ["a", "b"])],
    )
    def test_missing_barycenter_always_merges(self, constraint, expected_vs):
        cg = Graph()
        cg.set_edge(*constraint)
        entries = [{"v": "a"}, {"v": "b", "barycenter": 1, "weight": 2}]
        assert resolve_conflicts(entries, cg) == [{"vs": expected_vs, "i": 0, "barycenter": 1, "weight": 2}]

    def test_ignores_unrelated_constraints(self):
        cg = Graph()
        cg.set_edge("c", "d")
        entries = [{"v": "a", "barycenter": 2, "weight": 3}, {"v": "b", "barycenter": 1, "weight": 2}]
        assert by_vs(resolve_conflicts(entries, cg)) == [
            {"vs": ["a"], "i": 0, "barycenter": 2, "weight": 3},
            {"vs": ["b"], "i": 1, "barycenter": 1, "weight": 2},
        ]


# ─── sort ─────────────────────────────────────────────────────────────────────


class TestSort:
    def test_by_barycenter(self):
        entries = [{"vs": ["a"], "i": 0, "barycenter": 2, "weight": 3}, {"vs": ["b"], "i": 1, "barycenter": 1, "weight": 2}]
        assert sort(entries) == {"vs": ["b", "a"], "barycenter": (2 * 3 + 1 * 2) / (3 + 2), "weight": 5}

    def test_merged_entries(self):
        entries = [
            {"vs": ["a", "c", "d"], "i": 0, "barycenter": 2, "weight": 3},
            {"vs": ["b"], "i": 1, "barycenter": 1, "weight": 2},
        ]
        assert sort(entries) == {"vs": ["b", "a", "c", "d"], "barycenter": (2 * 3 + 1 * 2) / (3 + 2), "weight": 5}

    def test_ties_lean_left(self):
        entries = [{"vs": ["a"], "i": 0, "barycenter": 1, "weight": 1}, {"vs": ["b"], "i": 1, "barycenter": 1, "weight": 1}]
        assert sort(entries) == {"vs": ["a", "b"], "barycenter": 1, "weight": 2}

    def test_ties_lean_right_with_bias(self):
        entries = [{"vs": ["a"], "i": 0, "barycenter": 1, "weight": 1}, {"vs": ["b"], "i": 1, "barycenter": 1, "weight": 1}]
        assert sort(entries, bias_right=True) == {"vs": ["b", "a"], "barycenter": 1, "weight": 2}

    def test_unsortable_keep_their_slot(self):
        entries = [
            {"vs": ["a"], "i": 0, "barycenter": 2, "weight": 1},
            {"vs": ["b"], "i": 1, "barycenter": 6, "weight": 1},
            {"vs": ["c"], "i": 2},
            {"vs": ["d"], "i": 3, "barycenter": 3, "weight": 1},
        ]
        assert sort(entries) == {"vs": ["a", "d", "c", "b"], "barycenter": (2 + 6 + 3) / 3, "weight": 3}

    def test_no_barycenters(self):
        entries = [{"vs": ["a"], "i": 0}, {"vs": ["b"], "i": 3}, {"vs": ["c"], "i": 2}, {"vs": ["d"], "i": 1}]
        assert sort(entries) == {"vs": ["a", "d", "c", "b"]}

    def test_zero_barycenter(self):
        entries = [
            {"vs": ["a"], "i": 0, "barycenter": 0, "weight": 1},
            {"vs": ["b"], "i": 3},
            {"vs": ["c"], "i": 2},
            {"vs": ["d"], "i": 1},
        ]
        assert sort(entries) == {"vs": ["a", "d", "c", "b"], "barycenter": 0, "weight": 1}


# ─── sort_subgraph ────────────────────────────────────────────────────────────


@pytest.fixture
def layer_graph():
    g = Graph(compound=True)
    for i in range(5):
        g.set_node(i, {"order": i})
    return g


def nest(g: Graph, parent, vs) -> None:
    for v in vs:
        g.set_parent(v, parent)


class TestSortSubgraph:
    def test_flat_by_barycenter(self, layer_graph):
        g = layer_graph
        add_edge(g, 3, "x")
        add_edge(g, 1, "y", weight=2)
        add_edge(g, 4, "y")
        nest(g, "movable", ["x", "y"])
        assert sort_subgraph(g, "movable", Graph())["vs"] == ["y", "x"]

    def test_node_without_neighbours_keeps_position(self, layer_graph):
        g = layer_graph
        add_edge(g, 3, "x")
        g.set_node("y", {})
        add_edge(g, 1, "z", weight=2)
        add_edge(g, 4, "z")
        nest(g, "movable", ["x", "y", "z"])
        assert sort_subgraph(g, "movable", Graph())["vs"] == ["z", "y", "x"]

    def test_bias_left(self, layer_graph):
        g = layer_graph
        add_edge(g, 1, "x")
        add_edge(g, 1, "y")
        nest(g, "movable", ["x", "y"])
        assert sort_subgraph(g, "movable", Graph())["vs"] == ["x", "y"]

    def test_bias_right(self, layer_graph):
        g = layer_graph
        add_edge(g, 1, "x")
        add_edge(g, 1, "y")
        nest(g, "movable", ["x", "y"])
        assert sort_subgraph(g, "movable", Graph(), bias_right=True)["vs"] == ["y", "x"]

    def test_aggregates_barycenter(self, layer_graph):
        g = layer_graph
        add_edge(g, 3, "x")
        add_edge(g, 1, "y", weight=2)
        add_edge(g, 4, "y")
        nest(g, "movable", ["x", "y"])
        result = sort_subgraph(g, "movable", Graph())
        assert result["barycenter"] == 2.25
        assert result["weight"] == 4

    def test_nested_subgraph_without_barycenter(self, layer_graph):
        g = layer_graph
        for v in ("a", "b", "c"):
            g.set_node(v, {})
        nest(g, "sg1", ["a", "b", "c"])
        add_edge(g, 0, "x")
        add_edge(g, 1, "z")
        add_edge(g, 2, "y")
        nest(g, "movable", ["x", "y", "z", "sg1"])
        assert sort_subgraph(g, "movable", Graph())["vs"] == ["x", "z", "y", "a", "b", "c"]

    def test_nested_subgraph_with_barycenter(self, layer_graph):
        g = layer_graph
        for v in ("a", "b", "c"):
            g.set_node(v, {})
        nest(g, "sg1", ["a", "b", "c"])
        add_edge(g, 0, "a", weight=3)
        add_edge(g, 0, "x")
        add_edge(g, 1, "z")
        add_edge(g, 2, "y")
        nest(g, "movable", ["x", "y", "z", "sg1"])
        assert sort_subgraph(g, "movable", Graph())["vs"] == ["x", "a", "b", "c", "z", "y"]

    def test_nested_subgraph_partly_connected(self, layer_graph):
        g = layer_graph
        for v in ("a", "b", "c"):
            g.set_node(v, {})
        nest(g, "sg1", ["a", "b", "c"])
        add_edge(g, 0, "a")
        add_edge(g, 1, "b")
        add_edge(g, 0, "x")
        add_edge(g, 1, "z")
        nest(g, "movable", ["x", "z", "sg1"])
        assert sort_subgraph(g, "movable", Graph())["vs"] == ["x", "a", "b", "c", "z"]

    def test_borders_pinned_to_ends(self, layer_graph):
        g = layer_graph
        add_edge(g, 0, "x")
        add_edge(g, 1, "y")
        add_edge(g, 2, "z")
        g.set_node("sg1", {"border_left": "bl", "border_right": "br"})
        nest(g, "sg1", ["x", "y", "z", "bl", "br"])
        assert sort_subgraph(g, "sg1", Graph())["vs"] == ["bl", "x", "y", "z", "br"]

    def test_barycenter_from_previous_borders(self, layer_graph):
        g = layer_graph
        g.set_node("bl1", {"order": 0})
        g.set_node("br1", {"order": 1})
        add_edge(g, "bl1", "bl2")
        add_edge(g, "br1", "br2")
        nest(g, "sg", ["bl2", "br2"])
        g.set_node("sg", {"border_left": "bl2", "border_right": "br2"})
        assert sort_subgraph(g, "sg", Graph()) == {"barycenter": 0.5, "weight": 2, "vs": ["bl2", "br2"]}

    def test_respects_constraint_graph(self, layer_graph):
        g = layer_graph
        add_edge(g, 3, "x")
        add_edge(g, 1, "y")
        nest(g, "movable", ["x", "y"])
        cg = Graph()
        cg.set_edge("x", "y")
        assert sort_subgraph(g, "movable", cg)["vs"] == ["x", "y"]


# ─── build_layer_graph ────────────────────────────────────────────────────────


class TestBuildLayerGraph:
    def test_top_level_nodes_under_root(self):
        g = Graph(compound=True)
        set_ranks(g, {"a": 1, "b": 1, "c": 2, "d": 3})
        lg = build_layer_graph(g, 1, "in_edges")
        root = lg.graph["root"]
        assert lg.has_node(root)
        assert lg.children() == [root]
        assert lg.children(root) == ["a", "b"]

    def test_copies_rank_nodes(self):
        g = Graph(compound=True)
        set_ranks(g, {"a": 1, "b": 1, "c": 2, "d": 3})
        assert {"a", "b"} <= set(build_layer_graph(g, 1, "in_edges").nodes())
        assert "c" in build_layer_graph(g, 2, "in_edges").nodes()
        assert "d" in build_layer_graph(g, 3, "in_edges").nodes()

    def test_shares_node_records(self):
        g = Graph(compound=True)
        g.set_node("a", {"foo": 1, "rank": 1})
        g.set_node("b", {"foo": 2, "rank": 2})
        add_edge(g, "a", "b")
        lg = build_layer_graph(g, 2, "in_edges")
        assert lg.node("a")["foo"] == 1
        g.node("a")["foo"] = "updated"
        assert lg.node("a")["foo"] == "updated"
        assert lg.node("b") is g.node("b")

    def test_in_edges(self):
        g = Graph(compound=True)
        set_ranks(g, {"a": 1, "b": 1, "c": 2, "d": 3})
        add_edge(g, "a", "c", weight=2)
        add_edge(g, "b", "c", weight=3)
        add_edge(g, "c", "d", weight=4)
        assert build_layer_graph(g, 1, "in_edges").edge_count() == 0
        lg = build_layer_graph(g, 2, "in_edges")
        assert lg.edge_count() == 2
        assert lg.edge("a", "c") == {"weight": 2}
        assert lg.edge("b", "c") == {"weight": 3}
        lg = build_layer_graph(g, 3, "in_edges")
        assert lg.edge_count() == 1
        assert lg.edge("c", "d") == {"weight": 4}

    def test_out_edges_point_into_layer(self):
        g = Graph(compound=True)
        set_ranks(g, {"a": 1, "b": 1, "c": 2, "d": 3})
        add_edge(g, "a", "c", weight=2)
        add_edge(g, "b", "c", weight=3)
        add_edge(g, "c", "d", weight=4)
        lg = build_layer_graph(g, 1, "out_edges")
        assert lg.edge_count() == 2
        assert lg.edge("c", "a") == {"weight": 2}
        assert lg.edge("c", "b") == {"weight": 3}
        lg = build_layer_graph(g, 2, "out_edges")
        assert lg.edge_count() == 1
        assert lg.edge("d", "c") == {"weight": 4}
        assert build_layer_graph(g, 3, "out_edges").edge_count() == 0

    def test_merges_parallel_edges(self):
        g = Graph(multigraph=True)
        set_ranks(g, {"a": 1, "b": 2})
        add_edge(g, "a", "b", weight=2, name="multi")
        add_edge(g, "a", "b", weight=3)
        assert build_layer_graph(g, 2, "in_edges").edge("a", "b") == {"weight": 5}

    def test_keeps_hierarchy(self):
        g = Graph(compound=True)
        set_ranks(g, {"a": 0, "b": 0, "c": 0})
        g.set_node("sg", {"min_rank": 0, "max_rank": 0, "border_left": {0: "bl"}, "border_right": {0: "br"}})
        nest(g, "sg", ["a", "b"])
        lg = build_layer_graph(g, 0, "in_edges")
        root = lg.graph["root"]
        assert sorted(lg.children(root)) == ["c", "sg"]
        assert lg.parent("a") == "sg"
        assert lg.parent("b") == "sg"
        assert lg.node("sg") == {"border_left": "bl", "border_right": "br"}


# ─── add_subgraph_constraints ─────────────────────────────────────────────────


class TestAddSubgraphConstraints:
    def test_flat_nodes(self):
        g = Graph(compound=True)
        vs = ["a", "b", "c", "d"]
        for v in vs:
            g.set_node(v)
        cg = Graph()
        add_subgraph_constraints(g, cg, vs)
        assert cg.node_count() == 0
        assert cg.edge_count() == 0

    def test_contiguous_subgraph(self):
        g = Graph(compound=True)
        vs = ["a", "b", "c"]
        nest(g, "sg", vs)
        cg = Graph()
        add_subgraph_constraints(g, cg, vs)
        assert cg.edge_count() == 0

    def test_adjacent_different_parents(self):
        g = Graph(compound=True)
        g.set_parent("a", "sg1")
        g.set_parent("b", "sg2")
        cg = Graph()
        add_subgraph_constraints(g, cg, ["a", "b"])
        assert cg.edges() == [EdgeKey("sg1", "sg2")]

    def test_multiple_levels(self):
        g = Graph(compound=True)
        vs = ["a", "b", "c", "d", "e", "f", "g", "h"]
        for v in vs:
            g.set_node(v)
        g.set_parent("b", "sg2")
        g.set_parent("sg2", "sg1")
        g.set_parent("c", "sg1")
        g.set_parent("d", "sg3")
        g.set_parent("sg3", "sg1")
        g.set_parent("f", "sg4")
        g.set_parent("g", "sg5")
        g.set_parent("sg5", "sg4")
        cg = Graph()
        add_subgraph_constraints(g, cg, vs)
        assert sorted((e.v, e.w) for e in cg.edges()) == [("sg1", "sg4"), ("sg2", "sg3")]


# ─── transpose ────────────────────────────────────────────────────────────────


def crossed_graph(compound: bool = False) -> Graph:
    """a, b over c, d with edges a->d and b->c: one crossing."""
    g = Graph(compound=compound)
    g.set_node("a", {"order": 0})
    g.set_node("b", {"order": 1})
    g.set_node("c", {"order": 0})
    g.set_node("d", {"order": 1})
    add_edge(g, "a", "d")
    add_edge(g, "b", "c")
    return g


class TestTranspose:
    def test_swaps_to_remove_crossing(self):
        g = crossed_graph()
        layering = [["a", "b"], ["c", "d"]]
        assert transpose(g, layering) is True
        assert layering == [["b", "a"], ["c", "d"]]
        assert g.node("b")["order"] == 0
        assert g.node("a")["order"] == 1
        assert cross_count(g, layering) == 0

    def test_no_change_without_crossings(self):
        g = crossed_graph()
        layering = [["b", "a"], ["c", "d"]]
        g.node("b")["order"] = 0
        g.node("a")["order"] = 1
        assert transpose(g, layering) is False
        assert layering == [["b", "a"], ["c", "d"]]

    def test_border_nodes_stay(self):
        g = crossed_graph()
        g.node("a")["dummy"] = DummyKind.BORDER
        g.node("d")["dummy"] = DummyKind.BORDER
        layering = [["a", "b"], ["c", "d"]]
        assert transpose(g, layering) is False
        assert layering == [["a", "b"], ["c", "d"]]

    def test_constrained_pairs_stay(self):
        g = crossed_graph()
        layering = [["a", "b"], ["c", "d"]]
        assert transpose(g, layering, [("a", "b"), ("c", "d")]) is False
        assert layering == [["a", "b"], ["c", "d"]]

    def test_different_parents_stay(self):
        g = crossed_graph(compound=True)
        g.set_parent("a", "sg1")
        g.set_parent("b", "sg2")
        g.set_parent("c", "sg1")
        g.set_parent("d", "sg2")
        layering = [["a", "b"], ["c", "d"]]
        assert transpose(g, layering) is False


# ─── order ────────────────────────────────────────────────────────────────────


def crossing_start() -> Graph:
    """Graph whose depth-first initial order has one avoidable crossing."""
    g = Graph(compound=True)
    set_ranks(g, {"a": 0, "b": 0, "d": 1, "c": 1})
    add_edge(g, "a", "d")
    add_edge(g, "a", "c")
    add_edge(g, "b", "d")
    return g


class TestOrder:
    def test_tree_without_crossings(self):
        g = Graph(compound=True)
        set_ranks(g, {"a": 0, "b": 1, "e": 1, "c": 2, "d": 2, "f": 2})
        add_path(g, ["a", "b", "c"])
        add_edge(g, "b", "d")
        add_path(g, ["a", "e", "f"])
        order(g)
        assert cross_count(g, build_layer_matrix(g)) == 0

    def test_removes_crossings(self):
        g = crossing_start()
        assert cross_count(g, init_order(g)) == 1
        order(g)
        assert cross_count(g, build_layer_matrix(g)) == 0

    def test_minimises_diamonds(self):
        g = Graph(compound=True)
        set_ranks(g, {"a": 0, "b": 1, "e": 1, "g": 1, "c": 2, "f": 2, "h": 2, "d": 3})
        add_path(g, ["a", "b", "c", "d"])
        add_path(g, ["a", "e", "f", "d"])
        add_path(g, ["a", "g", "h", "d"])
        order(g)
        assert cross_count(g, build_layer_matrix(g)) == 0

    def test_orders_are_permutations(self):
        g = Graph(compound=True)
        set_ranks(g, {"a": 0, "b": 0, "c": 1, "d": 1, "e": 2, "f": 2})
        add_path(g, ["a", "c", "f"])
        add_path(g, ["b", "d", "e"])
        add_edge(g, "a", "d")
        order(g)
        for layer in build_layer_matrix(g):
            assert sorted(g.node(v)["order"] for v in layer) == list(range(len(layer)))

    def test_heuristic_disabled_keeps_initial_order(self):
        g = crossing_start()
        order(g, disable_optimal_order_heuristic=True)
        assert build_layer_matrix(g) == [["a", "b"], ["d", "c"]]

    def test_constraints_honoured(self):
        g = Graph(compound=True)
        set_ranks(g, {"a": 0, "b": 0, "x": 1})
        add_edge(g, "a", "x")
        add_edge(g, "b", "x")
        order(g, constraints=[("b", "a")])
        assert g.node("b")["order"] < g.node("a")["order"]
