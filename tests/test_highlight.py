from graphexplorer.controller import highlight
from graphexplorer.model.graph import Edge

EDGES = [Edge("a", "n"), Edge("b", "n"), Edge("n", "c"), Edge("x", "y")]


def test_show_dependencies_collects_incoming_sources():
    h = highlight.dependencies("n", EDGES)
    assert h.nodes == {"n", "a", "b"}
    assert h.edges == {"a-n", "b-n"}


def test_show_dependents_collects_outgoing_targets():
    h = highlight.dependents("n", EDGES)
    assert h.nodes == {"n", "c"}
    assert h.edges == {"n-c"}


def test_neighborhood_covers_both_directions():
    h = highlight.neighborhood("n", EDGES)
    assert h.nodes == {"n", "a", "b", "c"}
    assert h.edges == {"a-n", "b-n", "n-c"}


def test_isolated_node_highlights_only_itself():
    h = highlight.neighborhood("lonely", EDGES)
    assert h.nodes == {"lonely"}
    assert h.edges == frozenset()


def test_parallel_edges_collapse_to_one_key():
    h = highlight.dependents("a", [Edge("a", "b", "imports"), Edge("a", "b", "renders")])
    assert h.edges == {"a-b"}


def test_edge_highlight_is_exactly_the_edge():
    h = highlight.edge_highlight(Edge("x", "y"))
    assert h.nodes == {"x", "y"}
    assert h.edges == {"x-y"}


def test_parents_are_distinct_and_ordered():
    edges = [Edge("b", "n"), Edge("a", "n"), Edge("b", "n"), Edge("n", "n")]
    assert highlight.parents("n", edges) == ["b", "a"]
