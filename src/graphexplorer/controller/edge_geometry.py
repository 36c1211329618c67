"""
Edge Geometry
=============
Pure functions that turn node centres into drawable edge segments.

Why is this file needed?
------------------------
1. Clipping: Edges are drawn between the rectangular node boundaries, not the
   centres, so arrowheads never disappear under a node body.
2. Validity: Edges whose endpoints have no usable position are filtered out
   before anything is drawn.
3. Hit testing: Distance-to-segment and point-in-node checks used for clicks.

All coordinates are graph space. Nothing here has side effects.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Tuple

from graphexplorer.config import (
    NODE_BASE_WIDTH, NODE_BASE_HEIGHT, DONUT_THRESHOLD,
    DENSE_GRAPH_MIN_ADJUSTMENT, DENSE_GRAPH_DIVISOR,
    EDGE_SOURCE_PADDING, EDGE_TARGET_PADDING, ARROW_LENGTH, ARROW_WIDTH,
)
from graphexplorer.model.geometry_primitives import Point, Vector, SENTINEL
from graphexplorer.model.graph import Edge


@dataclass(frozen=True)
class EdgeSegment:
    start: Point
    end: Point
    angle: float            # direction from source centre to target centre
    edge: Optional[Edge] = None

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)


def node_footprint(size_scale: float = 1.0, node_count: int = 0) -> Tuple[float, float]:
    """
    Width and height of a node body.

    Above DONUT_THRESHOLD nodes the footprint shrinks with the node count, down
    to DENSE_GRAPH_MIN_ADJUSTMENT of the base size.
    """
    if size_scale <= 0:
        raise ValueError(f"Node size scale must be positive, got {size_scale}.")
    adjustment = 1.0
    if node_count > DONUT_THRESHOLD:
        adjustment = max(DENSE_GRAPH_MIN_ADJUSTMENT, 1.0 - node_count / DENSE_GRAPH_DIVISOR)
    factor = size_scale * adjustment
    return NODE_BASE_WIDTH * factor, NODE_BASE_HEIGHT * factor


def node_boundary_point(center: Point, width: float, height: float, angle: float, padding: float = 0.0) -> Point:
    """
    Where the ray from `center` at `angle` leaves the node rectangle, pushed
    outward by `padding` along the ray.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Node footprint must be positive, got {width}x{height}.")

    hw, hh = width / 2.0, height / 2.0
    dx, dy = math.cos(angle), math.sin(angle)

    # Exit through the vertical sides when the ray is "flatter" than the box.
    if abs(dx) / hw >= abs(dy) / hh:
        t = hw / abs(dx)
    else:
        t = hh / abs(dy)

    return center + Vector(dx, dy) * (t + padding)


def clip_edge(
    source: Point,
    target: Point,
    width: float,
    height: float,
    source_padding: float = EDGE_SOURCE_PADDING,
    target_padding: float = EDGE_TARGET_PADDING,
    edge: Optional[Edge] = None,
) -> EdgeSegment:
    """
    Segment between the two node boundaries.

    The target end keeps a larger gap than the source end so the arrowhead has
    room in front of the target body.

    Raises:
        ValueError: If target_padding is not greater than source_padding.
    """
    if target_padding <= source_padding:
        raise ValueError(
            f"Target padding ({target_padding}) must exceed source padding ({source_padding})."
        )

    angle = math.atan2(target.y - source.y, target.x - source.x)
    start = node_boundary_point(source, width, height, angle, source_padding)
    end = node_boundary_point(target, width, height, angle + math.pi, target_padding)
    return EdgeSegment(start=start, end=end, angle=angle, edge=edge)


def arrow_head(segment: EdgeSegment, length: float = ARROW_LENGTH, width: float = ARROW_WIDTH) -> Tuple[Point, Point, Point]:
    """Triangle (tip, left, right) with its tip at the segment end."""
    direction = Vector.from_angle(segment.angle)
    normal = Vector(-direction.y, direction.x)
    base = segment.end - direction * length
    half = width / 2.0
    return segment.end, base + normal * half, base - normal * half


def is_valid_position(point: Optional[Point]) -> bool:
    """A position is usable when it exists, is finite and is not the sentinel."""
    if point is None or point == SENTINEL:
        return False
    return math.isfinite(point.x) and math.isfinite(point.y)


def renderable_edges(edges: Iterable[Edge], positions: Mapping[str, Point]) -> List[Edge]:
    return [
        e for e in edges
        if is_valid_position(positions.get(e.source)) and is_valid_position(positions.get(e.target))
    ]


def distance_to_segment(point: Point, segment: EdgeSegment) -> float:
    ab = segment.end - segment.start
    denom = ab.dot(ab)
    if denom == 0.0:
        return point.distance_to(segment.start)
    t = min(max((point - segment.start).dot(ab) / denom, 0.0), 1.0)
    return point.distance_to(segment.start + ab * t)


def node_contains(center: Point, width: float, height: float, point: Point) -> bool:
    return abs(point.x - center.x) <= width / 2.0 and abs(point.y - center.y) <= height / 2.0
