import math

import pytest

from graphexplorer.controller.edge_geometry import (
    EdgeSegment, arrow_head, clip_edge, distance_to_segment, is_valid_position,
    node_boundary_point, node_contains, node_footprint, renderable_edges,
)
from graphexplorer.model.geometry_primitives import SENTINEL, Point
from graphexplorer.model.graph import Edge

W, H = 180.0, 90.0


def _on_boundary(p: Point, center: Point) -> bool:
    dx, dy = abs(p.x - center.x), abs(p.y - center.y)
    on_vertical = math.isclose(dx, W / 2, abs_tol=1e-9) and dy <= H / 2 + 1e-9
    on_horizontal = math.isclose(dy, H / 2, abs_tol=1e-9) and dx <= W / 2 + 1e-9
    return on_vertical or on_horizontal


def test_horizontal_pair_spans_exact_gap_without_padding():
    source, target = Point(0, 0), Point(400, 0)
    angle = math.atan2(target.y - source.y, target.x - source.x)

    start = node_boundary_point(source, W, H, angle, padding=0)
    end = node_boundary_point(target, W, H, angle + math.pi, padding=0)

    assert start.x == pytest.approx(90)
    assert end.x == pytest.approx(310)
    assert end.x - start.x == pytest.approx(400 - W)


@pytest.mark.parametrize("angle_deg", range(0, 360, 7))
def test_boundary_point_lies_on_rectangle(angle_deg):
    center = Point(50, -20)
    p = node_boundary_point(center, W, H, math.radians(angle_deg))
    assert _on_boundary(p, center)


def test_padding_pushes_along_ray():
    center = Point(0, 0)
    p = node_boundary_point(center, W, H, 0.0, padding=5)
    assert p == Point(95, 0)
    q = node_boundary_point(center, W, H, math.pi / 2, padding=6)
    assert q.x == pytest.approx(0)
    assert q.y == pytest.approx(51)


def test_clip_edge_leaves_larger_gap_at_target():
    seg = clip_edge(Point(0, 0), Point(400, 0), W, H)
    assert seg.start.x == pytest.approx(95)
    assert seg.end.x == pytest.approx(304)
    assert seg.angle == pytest.approx(0)


def test_clip_edge_requires_larger_target_padding():
    with pytest.raises(ValueError):
        clip_edge(Point(0, 0), Point(400, 0), W, H, source_padding=6, target_padding=6)


def test_arrow_head_tip_at_segment_end():
    seg = clip_edge(Point(0, 0), Point(0, 400), W, H)
    tip, left, right = arrow_head(seg, length=10, width=8)
    assert tip == seg.end
    assert left.y == pytest.approx(seg.end.y - 10)
    assert left.distance_to(right) == pytest.approx(8)


def test_invalid_positions_are_filtered_out():
    positions = {"a": Point(10, 10), "b": Point(200, 10), "c": SENTINEL}
    edges = [Edge("a", "b"), Edge("a", "c"), Edge("a", "unplaced")]

    assert renderable_edges(edges, positions) == [Edge("a", "b")]
    assert not is_valid_position(SENTINEL)
    assert not is_valid_position(None)
    assert not is_valid_position(Point(math.inf, 0))


def test_node_footprint_shrinks_for_dense_graphs():
    assert node_footprint(1.0, 10) == (180, 90)
    assert node_footprint(2.0, 50) == (360, 180)
    w, h = node_footprint(1.0, 150)
    assert (w, h) == (pytest.approx(126), pytest.approx(63))
    assert node_footprint(1.0, 1000) == (pytest.approx(126), pytest.approx(63))
    with pytest.raises(ValueError):
        node_footprint(0.0, 10)


def test_hit_testing_helpers():
    seg = EdgeSegment(Point(0, 0), Point(100, 0), 0.0)
    assert distance_to_segment(Point(50, 7), seg) == pytest.approx(7)
    assert distance_to_segment(Point(-3, 4), seg) == pytest.approx(5)
    assert node_contains(Point(0, 0), W, H, Point(89, 44))
    assert not node_contains(Point(0, 0), W, H, Point(91, 0))
