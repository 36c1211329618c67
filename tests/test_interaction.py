import pytest

from graphexplorer.controller import interaction
from graphexplorer.model.geometry_primitives import Point, Size
from graphexplorer.model.state import HIDDEN_OVERLAY, InteractionMode
from graphexplorer.model.viewport import ViewportTransform


def test_background_pan_follows_pointer():
    t = ViewportTransform(100, 50, 1.0)
    session = interaction.begin_background_pan(Point(300, 300), t)
    assert session.mode == InteractionMode.PANNING_BACKGROUND

    moved = interaction.panned_transform(session, Point(340, 280), t)
    assert (moved.translate_x, moved.translate_y) == (140, 30)


@pytest.mark.parametrize("scale", [0.25, 1.0, 3.0])
def test_node_drag_tracks_pointer_at_any_zoom(scale):
    t = ViewportTransform(-200, 75, scale)
    node = Point(1000, 800)
    grab = t.graph_to_screen(Point(1010, 790))   # grab slightly off-centre
    session = interaction.begin_node_drag("n", grab, node, t)

    pointer = Point(grab.x + 60, grab.y - 30)
    new_position = interaction.dragged_node_position(session, pointer, t)

    assert new_position.x == pytest.approx(node.x + 60 / scale)
    assert new_position.y == pytest.approx(node.y - 30 / scale)


def test_panel_drag_keeps_grab_offset():
    session = interaction.begin_panel_drag("details", Point(120, 40), Point(100, 20))
    assert interaction.dragged_panel_position(session, Point(220, 90)) == Point(200, 70)


def test_click_versus_drag_uses_travel():
    session = interaction.begin_background_pan(Point(0, 0), ViewportTransform())
    assert interaction.is_click(session.moved_to(Point(2, 2)))
    assert not interaction.is_click(session.moved_to(Point(10, 0)).moved_to(Point(1, 0)))


def test_tooltip_needs_more_than_three_nodes():
    assert not interaction.show_tooltip(HIDDEN_OVERLAY, 3).tooltip_visible
    assert interaction.show_tooltip(HIDDEN_OVERLAY, 4).tooltip_visible


def test_menu_and_tooltip_are_exclusive():
    overlay = interaction.show_tooltip(HIDDEN_OVERLAY, 10)
    opened = interaction.toggle_menu(overlay)
    assert opened.menu_visible and not opened.tooltip_visible
    assert not interaction.show_tooltip(opened, 10).tooltip_visible
    assert not interaction.toggle_menu(opened).menu_visible


def test_context_menu_closes_dropdown():
    menu_open = interaction.toggle_menu(HIDDEN_OVERLAY)
    ctx = interaction.open_context_menu(menu_open, Point(50, 60), Size(800, 600))
    assert ctx.context_menu_visible and not ctx.menu_visible
    assert ctx.context_menu_position == Point(50, 60)
    assert interaction.close_menus(ctx) == HIDDEN_OVERLAY


def test_context_menu_is_clamped_inside_viewport():
    viewport = Size(800, 600)
    assert interaction.clamp_context_menu(Point(700, 500), viewport) == Point(590, 240)
    assert interaction.clamp_context_menu(Point(-20, 3), viewport) == Point(10, 10)
    assert interaction.clamp_context_menu(Point(5000, 5000), Size(150, 150)) == Point(10, 10)


def test_details_panel_prefers_right_and_below():
    container = Size(1200, 900)
    assert interaction.details_panel_position(Point(100, 100), container) == Point(120, 120)
    assert interaction.details_panel_position(Point(1100, 800), container) == Point(730, 380)


def test_panel_drag_is_clamped_to_container():
    container = Size(800, 600)
    assert interaction.clamp_panel_drag(Point(-50, 700), container) == Point(0, 300)
    assert interaction.clamp_panel_drag(Point(600, 100), container) == Point(450, 100)
