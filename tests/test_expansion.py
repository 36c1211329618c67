import math

import pytest

from graphexplorer.controller.edge_geometry import is_valid_position, renderable_edges
from graphexplorer.controller.expansion import expand, find_expansion_targets
from graphexplorer.model.geometry_primitives import SENTINEL, Point
from graphexplorer.model.graph import Edge, GraphDocument, Node


def _doc(*nodes: Node, edges=()):
    return GraphDocument(nodes=list(nodes), edges=list(edges))


def test_two_new_neighbours_are_placed_opposite_on_radius():
    doc = _doc(Node("a"), Node("p"), Node("q"), edges=[Edge("a", "p"), Edge("a", "q")])
    anchor_pos = Point(1000, 1000)

    result = expand(doc.get_node("a"), doc, {"a": anchor_pos}, radius=200)

    p, q = result.placed["p"], result.placed["q"]
    assert p.distance_to(anchor_pos) == pytest.approx(200)
    assert q.distance_to(anchor_pos) == pytest.approx(200)
    angle_p = math.atan2(p.y - anchor_pos.y, p.x - anchor_pos.x)
    angle_q = math.atan2(q.y - anchor_pos.y, q.x - anchor_pos.x)
    assert angle_p == pytest.approx(-math.pi / 2)
    assert abs(angle_q - angle_p) == pytest.approx(math.pi)


def test_single_new_neighbour_goes_to_the_right():
    doc = _doc(Node("a"), Node("p"), edges=[Edge("a", "p")])
    result = expand(doc.get_node("a"), doc, {"a": Point(10, 10)})
    assert result.placed["p"].x == pytest.approx(210)
    assert result.placed["p"].y == pytest.approx(10)


def test_existing_positions_are_never_moved():
    doc = _doc(Node("a"), Node("p"), Node("q"), edges=[Edge("a", "p"), Edge("a", "q")])
    positions = {"a": Point(500, 500), "p": Point(42, 42)}

    result = expand(doc.get_node("a"), doc, positions)

    assert set(result.placed) == {"q"}
    assert positions == {"a": Point(500, 500), "p": Point(42, 42)}
    assert result.highlight.nodes == {"a", "p", "q"}
    assert result.highlight.edges == {"a-p", "a-q"}


def test_sentinel_positions_count_as_unplaced():
    doc = _doc(Node("a"), Node("p"), edges=[Edge("a", "p")])
    result = expand(doc.get_node("a"), doc, {"a": Point(100, 100), "p": SENTINEL})
    assert "p" in result.placed


def test_no_placement_without_anchor_position():
    doc = _doc(Node("a"), Node("p"), edges=[Edge("a", "p")])
    result = expand(doc.get_node("a"), doc, {"a": SENTINEL})
    assert result.placed == {}
    assert result.highlight.nodes == {"a", "p"}


def test_expansion_is_idempotent():
    doc = _doc(Node("a"), Node("p"), edges=[Edge("a", "p")])
    positions = {"a": Point(100, 100)}
    first = expand(doc.get_node("a"), doc, positions)
    positions.update(first.placed)

    second = expand(doc.get_node("a"), doc, positions)
    assert second.placed == {}
    assert second.highlight == first.highlight


def test_metadata_hints_are_matched_first_in_list_order():
    anchor = Node("a", metadata={
        "outgoingDependencies": ["Shared", "pkg.Full", "missing"],
        "imports": ["api-client", {"path": "./src/hooks/useAuth"}, {"name": ""}, 42],
    })
    doc = _doc(
        anchor,
        Node("first", name="Shared"),
        Node("second", name="Shared"),
        Node("full", metadata={"fullName": "pkg.Full"}),
        Node("api", title="api-client"),
        Node("auth", metadata={"filePath": "src/hooks/useAuth"}),
    )

    assert find_expansion_targets(anchor, doc) == ["first", "full", "api", "auth"]


def test_edges_to_unknown_nodes_and_self_loops_are_ignored():
    doc = _doc(Node("a"), Node("b"), edges=[Edge("a", "ghost"), Edge("a", "a"), Edge("a", "b")])
    assert find_expansion_targets(doc.get_node("a"), doc) == ["b"]


def test_revealed_node_never_lands_on_the_unplaced_marker():
    doc = _doc(Node("a"), Node("p"), edges=[Edge("a", "p")])
    positions = {"a": Point(-200, 0)}

    result = expand(doc.get_node("a"), doc, positions)
    positions.update(result.placed)

    assert is_valid_position(positions["p"])
    assert positions["p"].distance_to(positions["a"]) == pytest.approx(200, abs=1.0)
    assert renderable_edges(doc.edges, positions) == doc.edges
