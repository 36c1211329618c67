"""
Interaction State Machine
=========================
Pure transition functions for pointer gestures and per-node overlays.

Why is this file needed?
------------------------
1. Drag: A pointer-down opens a `DragSession` (background pan, node drag or
   panel drag). Pointer-moves derive new positions from the captured offset,
   and pointer-up closes the session.
2. Overlays: Tooltip, dropdown menu and context menu visibility per node,
   including the clamping of the context menu inside the viewport.
3. Details panel: Where the panel opens next to the selected node and how far
   it may be dragged.

The functions take values and return new values. `GraphController` decides
where the results are stored.

States:
    idle -> panning-background | dragging-node | dragging-panel -> idle
"""
from __future__ import annotations

from dataclasses import replace

from graphexplorer.config import (
    CLICK_TOLERANCE, TOOLTIP_MIN_NODES,
    CONTEXT_MENU_WIDTH, CONTEXT_MENU_HEIGHT, CONTEXT_MENU_MARGIN,
    DETAILS_PANEL_WIDTH, DETAILS_PANEL_HEIGHT, DETAILS_PANEL_DRAG_HEIGHT, DETAILS_PANEL_GAP,
)
from graphexplorer.model.geometry_primitives import Point, Size, Vector
from graphexplorer.model.state import DragSession, InteractionMode, NodeOverlay
from graphexplorer.model.viewport import ViewportTransform


# ------------------------------------------------------------------------------
# Drag sessions
# ------------------------------------------------------------------------------

def begin_background_pan(pointer: Point, transform: ViewportTransform) -> DragSession:
    """Offset is the pointer relative to the current translate (screen space)."""
    offset = Vector(pointer.x - transform.translate_x, pointer.y - transform.translate_y)
    return DragSession(mode=InteractionMode.PANNING_BACKGROUND, offset=offset, origin=pointer)


def begin_node_drag(node_id: str, pointer: Point, node_position: Point, transform: ViewportTransform) -> DragSession:
    """
    Offset is measured in graph space, so the grabbed point stays under the
    pointer at any zoom level.
    """
    offset = transform.screen_to_graph(pointer) - node_position
    return DragSession(mode=InteractionMode.DRAGGING_NODE, offset=offset, origin=pointer, target_id=node_id)


def begin_panel_drag(panel_id: str, pointer: Point, panel_position: Point) -> DragSession:
    return DragSession(
        mode=InteractionMode.DRAGGING_PANEL,
        offset=pointer - panel_position,
        origin=pointer,
        target_id=panel_id,
    )


def panned_transform(session: DragSession, pointer: Point, transform: ViewportTransform) -> ViewportTransform:
    return transform.with_translate(pointer - session.offset)


def dragged_node_position(session: DragSession, pointer: Point, transform: ViewportTransform) -> Point:
    return transform.screen_to_graph(pointer) - session.offset


def dragged_panel_position(session: DragSession, pointer: Point) -> Point:
    return pointer - session.offset


def is_click(session: DragSession, tolerance: float = CLICK_TOLERANCE) -> bool:
    """A press/release pair that never travelled further than `tolerance` pixels."""
    return session.travel <= tolerance


# ------------------------------------------------------------------------------
# Overlays
# ------------------------------------------------------------------------------

def show_tooltip(overlay: NodeOverlay, total_nodes: int) -> NodeOverlay:
    """Tooltips only make sense in a busy view, and never over an open menu."""
    if total_nodes <= TOOLTIP_MIN_NODES or overlay.menu_visible:
        return overlay
    return replace(overlay, tooltip_visible=True)


def hide_tooltip(overlay: NodeOverlay) -> NodeOverlay:
    return replace(overlay, tooltip_visible=False)


def toggle_menu(overlay: NodeOverlay) -> NodeOverlay:
    return replace(
        overlay,
        menu_visible=not overlay.menu_visible,
        tooltip_visible=False,
        context_menu_visible=False,
    )


def clamp_context_menu(
    position: Point,
    viewport: Size,
    menu: Size = Size(CONTEXT_MENU_WIDTH, CONTEXT_MENU_HEIGHT),
    margin: float = CONTEXT_MENU_MARGIN,
) -> Point:
    """
    Keep a menu anchored at `position` fully inside `viewport`.

    Right/bottom overflow pulls the anchor in by the menu footprint plus
    `margin`; the result is never closer than `margin` to the left/top edge.
    """
    x, y = position.x, position.y
    if x + menu.width > viewport.width:
        x = viewport.width - menu.width - margin
    if y + menu.height > viewport.height:
        y = viewport.height - menu.height - margin
    return Point(max(margin, x), max(margin, y))


def open_context_menu(overlay: NodeOverlay, position: Point, viewport: Size) -> NodeOverlay:
    return replace(
        overlay,
        menu_visible=False,
        tooltip_visible=False,
        context_menu_visible=True,
        context_menu_position=clamp_context_menu(position, viewport),
    )


def close_menus(overlay: NodeOverlay) -> NodeOverlay:
    return replace(overlay, menu_visible=False, context_menu_visible=False, context_menu_position=None)


# ------------------------------------------------------------------------------
# Details panel
# ------------------------------------------------------------------------------

def details_panel_position(
    anchor: Point,
    container: Size,
    panel: Size = Size(DETAILS_PANEL_WIDTH, DETAILS_PANEL_HEIGHT),
    gap: float = DETAILS_PANEL_GAP,
) -> Point:
    """
    Initial top-left corner of the details panel for a node at `anchor` (screen).

    Prefers right of / below the node, then left of / above it, and centres on
    an axis where neither side has room. The result keeps `gap` from every
    container edge whenever the container is large enough.
    """
    if container.width - anchor.x >= panel.width + gap:
        x = anchor.x + gap
    elif anchor.x >= panel.width + gap:
        x = anchor.x - panel.width - gap
    else:
        x = max(gap, (container.width - panel.width) / 2)

    if container.height - anchor.y >= panel.height + gap:
        y = anchor.y + gap
    elif anchor.y >= panel.height + gap:
        y = anchor.y - panel.height - gap
    else:
        y = max(gap, (container.height - panel.height) / 2)

    x = max(min(x, container.width - panel.width - gap), gap)
    y = max(min(y, container.height - panel.height - gap), gap)
    return Point(x, y)


def clamp_panel_drag(
    position: Point,
    container: Size,
    panel: Size = Size(DETAILS_PANEL_WIDTH, DETAILS_PANEL_DRAG_HEIGHT),
) -> Point:
    """A dragged panel may touch the container edges but never leave it."""
    x = max(0.0, min(position.x, container.width - panel.width))
    y = max(0.0, min(position.y, container.height - panel.height))
    return Point(x, y)
