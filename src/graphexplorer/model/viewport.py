"""
Viewport Transform
==================
The affine map from graph space to screen space:

    screen = graph * scale + translate

`ViewportTransform` is immutable; every operation returns a new transform, so
the controller can swap it atomically and tests can run without a GUI.
The scale is clamped to [MIN_SCALE, MAX_SCALE] by every operation.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from graphexplorer.config import (
    MIN_SCALE, MAX_SCALE, ZOOM_STEP, WHEEL_ZOOM_PER_UNIT,
    VIRTUAL_VIEWPORT_MULTIPLIER, VIRTUAL_VIEWPORT_MIN,
)
from graphexplorer.model.geometry_primitives import Point, Size, Vector


def clamp_scale(scale: float) -> float:
    return min(max(scale, MIN_SCALE), MAX_SCALE)


def initial_zoom_scale(node_count: int) -> float:
    """
    Starting scale for a graph of `node_count` nodes.

    Non-increasing in `node_count`: denser graphs start further zoomed out.
    """
    if node_count <= 1:
        return 1.0
    return clamp_scale(min(1.0, 1.5 / math.sqrt(node_count)))


def virtual_viewport_size(container: Size) -> Size:
    """Extent of the virtual canvas the layout is centred in."""
    return Size(
        max(container.width * VIRTUAL_VIEWPORT_MULTIPLIER, VIRTUAL_VIEWPORT_MIN),
        max(container.height * VIRTUAL_VIEWPORT_MULTIPLIER, VIRTUAL_VIEWPORT_MIN),
    )


def wheel_delta(angle_delta: float) -> float:
    """Scale delta for a wheel event (120 units per notch)."""
    return angle_delta * WHEEL_ZOOM_PER_UNIT


@dataclass(frozen=True)
class ViewportTransform:
    translate_x: float = 0.0
    translate_y: float = 0.0
    scale: float = 1.0

    def __post_init__(self) -> None:
        if not math.isfinite(self.scale) or self.scale <= 0:
            raise ValueError(f"Scale must be a positive finite number, got {self.scale}.")
        if not (MIN_SCALE <= self.scale <= MAX_SCALE):
            object.__setattr__(self, "scale", clamp_scale(self.scale))

    @property
    def translate(self) -> Vector:
        return Vector(self.translate_x, self.translate_y)

    # ---- coordinate conversion ----

    def graph_to_screen(self, point: Point) -> Point:
        return Point(point.x * self.scale + self.translate_x, point.y * self.scale + self.translate_y)

    def screen_to_graph(self, point: Point) -> Point:
        return Point((point.x - self.translate_x) / self.scale, (point.y - self.translate_y) / self.scale)

    # ---- operations ----

    def zoom_at_point(self, pointer: Point, delta: float) -> ViewportTransform:
        """
        Rescale by `delta` keeping the graph point under `pointer` fixed.

        translate' = pointer - (pointer - translate) * (new_scale / scale)
        """
        new_scale = clamp_scale(self.scale + delta)
        factor = new_scale / self.scale
        return ViewportTransform(
            translate_x=pointer.x - (pointer.x - self.translate_x) * factor,
            translate_y=pointer.y - (pointer.y - self.translate_y) * factor,
            scale=new_scale,
        )

    def zoom_in(self, anchor: Point) -> ViewportTransform:
        return self.zoom_at_point(anchor, ZOOM_STEP)

    def zoom_out(self, anchor: Point) -> ViewportTransform:
        return self.zoom_at_point(anchor, -ZOOM_STEP)

    def pan(self, delta: Vector) -> ViewportTransform:
        return ViewportTransform(self.translate_x + delta.x, self.translate_y + delta.y, self.scale)

    def with_translate(self, translate: Point) -> ViewportTransform:
        return ViewportTransform(translate.x, translate.y, self.scale)

    @classmethod
    def focus(cls, node: Point, target_scale: float, container: Size) -> ViewportTransform:
        """Centre `node` in the container at `target_scale`, whatever the current view."""
        scale = clamp_scale(target_scale)
        center = container.center
        return cls(center.x - node.x * scale, center.y - node.y * scale, scale)

    @classmethod
    def reset(cls, node_count: int, container: Size, viewport: Size) -> ViewportTransform:
        """Centre the whole virtual viewport in the container."""
        scale = initial_zoom_scale(node_count)
        return cls(
            translate_x=container.width / 2 - (viewport.width / 2) * scale,
            translate_y=container.height / 2 - (viewport.height / 2) * scale,
            scale=scale,
        )
