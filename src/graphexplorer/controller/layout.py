"""
Layout Engine
=============
Deterministic position assignment for an arbitrary node set.

Every layout returns a map covering each node exactly once, with pairwise
distinct positions, and returns the same map for the same input.

Layouts:
    circular: one ellipse inscribed in the target area (n <= 50).
    donut:    concentric rings, substituted for circular when n > 50.
    spiral:   Archimedean spiral, earlier input sits closer to the centre.
    force:    bounded force-directed relaxation, also the fallback.
    tree:     not implemented as such; resolves to circular.
"""
from __future__ import annotations

import logging
import math
from enum import StrEnum
from typing import Dict, Sequence, TYPE_CHECKING

import numpy as np

from graphexplorer.config import (
    DONUT_THRESHOLD, DONUT_INNER_RATIO, DONUT_MAX_NODES_PER_RING,
    SPIRAL_SPACING, FORCE_ITERATIONS, FORCE_MIN_ITERATIONS, FORCE_PAIR_BUDGET, FORCE_CHUNK_ROWS,
    FORCE_MIN_DISTANCE, SENTINEL_NUDGE,
)
from graphexplorer.model.geometry_primitives import SENTINEL, Point, Size, Vector
from graphexplorer.model.graph import Edge, Node

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

PositionMap = Dict[str, Point]

GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))


class LayoutKind(StrEnum):
    CIRCULAR = "circular"
    FORCE = "force"
    TREE = "tree"
    SPIRAL = "spiral"
    DONUT = "donut"

    @classmethod
    def parse(cls, value: str | LayoutKind) -> LayoutKind:
        """Unsupported kinds fall back to force-directed, never an error."""
        try:
            return cls(str(value).lower())
        except ValueError:
            logger.warning(f"Unsupported layout kind '{value}', falling back to '{cls.FORCE}'.")
            return cls.FORCE


def resolve_layout_kind(requested: str | LayoutKind, node_count: int) -> LayoutKind:
    """
    The layout actually computed for a request.

    Tree degrades to circular, and circular becomes donut above the
    DONUT_THRESHOLD so large graphs stay legible.
    """
    kind = LayoutKind.parse(requested)
    if kind == LayoutKind.TREE:
        logger.debug("Tree layout requested, using circular.")
        kind = LayoutKind.CIRCULAR
    if kind == LayoutKind.CIRCULAR and node_count > DONUT_THRESHOLD:
        kind = LayoutKind.DONUT
    return kind


# ------------------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------------------

def _to_position_map(ids: Sequence[str], coords: npt.NDArray[np.float64]) -> PositionMap:
    positions: PositionMap = {}
    for node_id, row in zip(ids, coords):
        point = Point.from_array(row)
        if point == SENTINEL:
            # (0, 0) means "not placed yet" to the renderer
            point = point + Vector(SENTINEL_NUDGE, 0.0)
        positions[node_id] = point
    return positions


def _require_area(size: Size) -> None:
    if not (size.width > 0 and size.height > 0):
        raise ValueError(f"Layout area must be positive, got {size.width}x{size.height}.")


def _unique_ids(nodes: Sequence[Node]) -> list[str]:
    # Preserve first occurrence; the map must cover each node exactly once.
    return list(dict.fromkeys(n.id for n in nodes))


def place_on_circle(
    ids: Sequence[str],
    center: Point,
    radius: float,
    start_angle: float = 0.0,
) -> PositionMap:
    """
    Distribute `ids` evenly on a circle around `center`.

    Args:
        ids: Node ids in placement order.
        center: Circle center.
        radius: Circle radius (must be positive).
        start_angle: Angle of the first node in radians.

    Returns:
        Position map with one entry per id, angle step 2*pi / len(ids).
    """
    if not ids:
        return {}
    if radius <= 0:
        raise ValueError(f"Radius must be positive, got {radius}.")

    step = 2.0 * np.pi / max(len(ids), 1)
    theta = start_angle + step * np.arange(len(ids))
    coords = np.c_[center.x + radius * np.cos(theta), center.y + radius * np.sin(theta)]
    return _to_position_map(ids, coords)


# ------------------------------------------------------------------------------
# Layouts
# ------------------------------------------------------------------------------

def circular_layout(nodes: Sequence[Node], center: Point, size: Size) -> PositionMap:
    """Nodes evenly spaced on the ellipse inscribed in `size`, first node at the top."""
    _require_area(size)
    ids = _unique_ids(nodes)
    n = len(ids)
    if n == 0:
        return {}

    a, b = size.width / 2.0, size.height / 2.0
    theta = -np.pi / 2.0 + 2.0 * np.pi * np.arange(n) / n
    coords = np.c_[center.x + a * np.cos(theta), center.y + b * np.sin(theta)]
    return _to_position_map(ids, coords)


def _ring_capacities(radii: npt.NDArray[np.float64], outer: float) -> npt.NDArray[np.int64]:
    # Capacity proportional to circumference; outer ring holds the maximum.
    caps = np.floor(DONUT_MAX_NODES_PER_RING * radii / outer).astype(np.int64)
    return np.maximum(caps, 1)


def _allocate_to_rings(n: int, radii: npt.NDArray[np.float64], caps: npt.NDArray[np.int64]) -> list[int]:
    """Split `n` nodes across rings proportionally to radius without exceeding capacity."""
    targets = n * radii / radii.sum()
    counts = np.minimum(np.round(targets).astype(np.int64), caps)

    leftover = n - int(counts.sum())
    # Spill outward first: outer rings have the most room.
    order = np.argsort(-radii, kind="stable")
    while leftover > 0:
        for i in order:
            if leftover == 0:
                break
            if counts[i] < caps[i]:
                counts[i] += 1
                leftover -= 1
    while leftover < 0:
        for i in order[::-1]:
            if leftover == 0:
                break
            if counts[i] > 0:
                counts[i] -= 1
                leftover += 1
    return [int(c) for c in counts]


def donut_layout(nodes: Sequence[Node], center: Point, size: Size) -> PositionMap:
    """
    Concentric rings between DONUT_INNER_RATIO * R and R.

    The ring count grows until the rings can hold every node while keeping each
    ring's angular step at or above 2*pi / DONUT_MAX_NODES_PER_RING.
    """
    _require_area(size)
    ids = _unique_ids(nodes)
    n = len(ids)
    if n == 0:
        return {}

    outer = min(size.width, size.height) / 2.0
    inner = outer * DONUT_INNER_RATIO
    aspect = size.height / size.width if size.width > 0 else 1.0

    ring_count = 2 if n > 1 else 1
    while True:
        radii = np.linspace(inner, outer, ring_count) if ring_count > 1 else np.array([outer])
        caps = _ring_capacities(radii, outer)
        if caps.sum() >= n:
            break
        ring_count += 1

    counts = _allocate_to_rings(n, radii, caps)

    coords = np.empty((n, 2), dtype=float)
    cursor = 0
    for ring, (radius, count) in enumerate(zip(radii, counts)):
        if count == 0:
            continue
        step = 2.0 * np.pi / count
        # Stagger alternate rings so neighbours on adjacent rings do not line up.
        offset = -np.pi / 2.0 + (step / 2.0 if ring % 2 else 0.0)
        theta = offset + step * np.arange(count)
        # Stretch horizontally to use a non-square area like the circular layout.
        rx = radius / aspect if aspect < 1.0 else radius
        ry = radius * aspect if aspect > 1.0 else radius
        coords[cursor:cursor + count, 0] = center.x + rx * np.cos(theta)
        coords[cursor:cursor + count, 1] = center.y + ry * np.sin(theta)
        cursor += count

    logger.debug(f"Donut layout: {n} nodes on {ring_count} rings {counts}.")
    return _to_position_map(ids, coords)


def spiral_layout(nodes: Sequence[Node], center: Point, size: Size, spacing: float = SPIRAL_SPACING) -> PositionMap:
    """
    Archimedean spiral r = a + b*theta walking outward from the centre.

    Consecutive nodes are one `spacing` apart along the curve and successive
    turns are one `spacing` apart radially. The whole spiral is scaled down
    uniformly if it would leave the target area.
    """
    _require_area(size)
    ids = _unique_ids(nodes)
    n = len(ids)
    if n == 0:
        return {}

    a = spacing / 2.0
    b = spacing / (2.0 * np.pi)

    theta = np.empty(n, dtype=float)
    theta[0] = 0.0
    for i in range(1, n):
        r_prev = a + b * theta[i - 1]
        theta[i] = theta[i - 1] + spacing / r_prev
    radius = a + b * theta

    limit = min(size.width, size.height) / 2.0
    if radius[-1] > limit > 0:
        radius = radius * (limit / radius[-1])

    coords = np.c_[center.x + radius * np.cos(theta), center.y + radius * np.sin(theta)]
    return _to_position_map(ids, coords)


def _separate_duplicates(coords: npt.NDArray[np.float64], min_gap: float) -> npt.NDArray[np.float64]:
    """Nudge coincident rows apart deterministically (by index) until all rows differ."""
    coords = coords.copy()
    for _ in range(len(coords)):
        _, first_idx, inverse = np.unique(coords, axis=0, return_index=True, return_inverse=True)
        if len(first_idx) == len(coords):
            break
        inverse = np.asarray(inverse).reshape(-1)
        for i in range(len(coords)):
            if first_idx[inverse[i]] != i:
                angle = GOLDEN_ANGLE * i
                coords[i] += min_gap * np.array([np.cos(angle), np.sin(angle)])
    return coords


def force_iterations(node_count: int, requested: int = FORCE_ITERATIONS) -> int:
    """
    Iterations actually run for `node_count` nodes.

    Each iteration costs node_count^2 pair updates; large graphs get fewer
    iterations so the total stays within FORCE_PAIR_BUDGET, but never fewer
    than FORCE_MIN_ITERATIONS (or `requested`, if that is smaller).
    """
    floor = min(requested, FORCE_MIN_ITERATIONS)
    if node_count < 2:
        return floor
    return max(floor, min(requested, FORCE_PAIR_BUDGET // (node_count * node_count)))


def _repulsion(pos: npt.NDArray[np.float64], k_sq: float, chunk: int = FORCE_CHUNK_ROWS) -> npt.NDArray[np.float64]:
    """Sum of k^2 / d repulsive displacements, computed `chunk` rows at a time."""
    n = len(pos)
    disp = np.zeros_like(pos)
    for start in range(0, n, chunk):
        block = pos[start:start + chunk]
        delta = block[:, None, :] - pos[None, :, :]                     # (chunk, n, 2)
        dist_sq = np.einsum("ijk,ijk->ij", delta, delta)
        rows = np.arange(len(block))
        dist_sq[rows, start + rows] = np.inf
        dist_sq = np.maximum(dist_sq, FORCE_MIN_DISTANCE ** 2)
        disp[start:start + chunk] = ((k_sq / dist_sq)[:, :, None] * delta).sum(axis=1)
    return disp


def force_layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    center: Point,
    size: Size,
    iterations: int = FORCE_ITERATIONS,
) -> PositionMap:
    """
    Bounded force-directed relaxation.

    Nodes start on a deterministic sunflower pattern, repel each other with
    k^2 / d and attract along edges with d^2 / k. The step is capped by a
    temperature that cools linearly over the iterations, and positions are
    clipped to the target area after every step. Runtime is bounded by
    `force_iterations`, not by convergence.
    """
    _require_area(size)
    ids = _unique_ids(nodes)
    n = len(ids)
    if n == 0:
        return {}
    origin = center.to_array()
    if n == 1:
        return _to_position_map(ids, origin[None, :])

    index = {node_id: i for i, node_id in enumerate(ids)}
    pairs = np.array(
        [(index[e.source], index[e.target]) for e in edges
         if e.source in index and e.target in index and e.source != e.target],
        dtype=np.int64,
    ).reshape(-1, 2)

    half = np.array([size.width / 2.0, size.height / 2.0])
    area = size.width * size.height
    k = math.sqrt(area / n)

    # Sunflower seeding: distinct, evenly spread and independent of randomness.
    i = np.arange(n)
    seed_r = np.sqrt((i + 0.5) / n) * half.min()
    seed_theta = GOLDEN_ANGLE * i
    pos = np.c_[seed_r * np.cos(seed_theta), seed_r * np.sin(seed_theta)]

    steps = force_iterations(n, iterations)
    if steps < iterations:
        logger.debug(f"Force layout: {n} nodes, running {steps} of {iterations} iterations.")

    temperature = half.min() / 4.0
    for it in range(steps):
        disp = _repulsion(pos, k * k)

        if len(pairs):
            d = pos[pairs[:, 0]] - pos[pairs[:, 1]]
            length = np.maximum(np.linalg.norm(d, axis=-1), FORCE_MIN_DISTANCE)
            pull = (length / k)[:, None] * d                       # |f| = d^2 / k
            np.add.at(disp, pairs[:, 0], -pull)
            np.add.at(disp, pairs[:, 1], pull)

        length = np.maximum(np.linalg.norm(disp, axis=-1), FORCE_MIN_DISTANCE)
        step = temperature * (1.0 - it / steps)
        pos += disp / length[:, None] * np.minimum(length, step)[:, None]
        pos = np.clip(pos, -half, half)

    coords = _separate_duplicates(pos + origin, min_gap=max(k * 0.01, 1.0))
    return _to_position_map(ids, coords)


def compute_layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    center: Point,
    size: Size,
    kind: str | LayoutKind = LayoutKind.CIRCULAR,
) -> PositionMap:
    """
    Dispatch to the layout for `kind`, applying the selection policy.

    Args:
        nodes: Nodes to place.
        edges: Edges (used by the force-directed layout only).
        center: Centre of the target area in graph space.
        size: Width/height of the target area.
        kind: Requested layout kind.

    Returns:
        Position map covering every node exactly once.

    Raises:
        ValueError: If the target area has no width or no height.
    """
    effective = resolve_layout_kind(kind, len(nodes))
    logger.info(f"Computing '{effective}' layout for {len(nodes)} nodes (requested '{kind}').")

    match effective:
        case LayoutKind.CIRCULAR:
            return circular_layout(nodes, center, size)
        case LayoutKind.DONUT:
            return donut_layout(nodes, center, size)
        case LayoutKind.SPIRAL:
            return spiral_layout(nodes, center, size)
        case _:
            return force_layout(nodes, edges, center, size)


def layout_area(viewport: Size, fraction: float) -> tuple[Point, Size]:
    """Centre and extent of the region of the virtual viewport the layout may use."""
    return viewport.center, Size(viewport.width * fraction, viewport.height * fraction)
