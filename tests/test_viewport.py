import math

import pytest

from graphexplorer.config import MAX_SCALE, MIN_SCALE
from graphexplorer.model.geometry_primitives import Point, Size
from graphexplorer.model.viewport import (
    ViewportTransform, initial_zoom_scale, virtual_viewport_size, wheel_delta,
)


@pytest.mark.parametrize("start", [
    ViewportTransform(),
    ViewportTransform(120.0, -40.0, 0.35),
    ViewportTransform(-900.0, 300.0, 4.2),
])
@pytest.mark.parametrize("delta", [0.2, -0.2, 0.05, 1.7, -0.09])
def test_zoom_at_point_keeps_pointer_fixed(start, delta):
    pointer = Point(317.0, 211.0)
    before = start.screen_to_graph(pointer)

    after = start.zoom_at_point(pointer, delta).screen_to_graph(pointer)

    assert after.x == pytest.approx(before.x)
    assert after.y == pytest.approx(before.y)


def test_repeated_zoom_saturates_at_bounds():
    t = ViewportTransform()
    anchor = Point(400, 300)
    for _ in range(100):
        t = t.zoom_in(anchor)
        assert t.scale <= MAX_SCALE
    assert t.scale == pytest.approx(MAX_SCALE)

    for _ in range(100):
        t = t.zoom_out(anchor)
        assert t.scale >= MIN_SCALE
    assert t.scale == pytest.approx(MIN_SCALE)


def test_constructor_clamps_and_rejects_invalid_scale():
    assert ViewportTransform(scale=50).scale == MAX_SCALE
    assert ViewportTransform(scale=0.001).scale == MIN_SCALE
    with pytest.raises(ValueError):
        ViewportTransform(scale=0)
    with pytest.raises(ValueError):
        ViewportTransform(scale=math.nan)


def test_graph_screen_conversion_round_trips():
    t = ViewportTransform(35.0, -12.5, 2.5)
    p = Point(123.4, -56.7)
    back = t.screen_to_graph(t.graph_to_screen(p))
    assert back.x == pytest.approx(p.x)
    assert back.y == pytest.approx(p.y)


def test_focus_centres_node_at_target_scale():
    container = Size(800, 600)
    t = ViewportTransform.focus(Point(2500, 1800), 1.5, container)
    assert t.scale == 1.5
    assert t.graph_to_screen(Point(2500, 1800)) == Point(400, 300)


def test_reset_centres_virtual_viewport():
    container = Size(800, 600)
    viewport = Size(5000, 5000)
    t = ViewportTransform.reset(10, container, viewport)
    centre = t.graph_to_screen(viewport.center)
    assert centre.x == pytest.approx(400)
    assert centre.y == pytest.approx(300)
    assert t.scale == initial_zoom_scale(10)


def test_initial_zoom_scale_is_non_increasing():
    scales = [initial_zoom_scale(n) for n in range(0, 500)]
    assert all(a >= b for a, b in zip(scales, scales[1:]))
    assert scales[0] == 1.0
    assert all(MIN_SCALE <= s <= MAX_SCALE for s in scales)


def test_pan_only_moves_translate():
    t = ViewportTransform(10, 20, 2.0).pan(Point(5, 5) - Point(0, 0))
    assert (t.translate_x, t.translate_y, t.scale) == (15, 25, 2.0)


def test_virtual_viewport_size_has_floor():
    assert virtual_viewport_size(Size(800, 600)) == Size(5000, 5000)
    assert virtual_viewport_size(Size(1200, 900)) == Size(6000, 5000)


def test_wheel_delta_per_notch():
    assert wheel_delta(120) == pytest.approx(0.12)
    assert wheel_delta(-240) == pytest.approx(-0.24)
