"""
Configuration & Constants
=========================
This module serves as the central registry for the numeric constants of the
engine and the user-facing configuration surface.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (zoom limits, node footprint,
   paddings, radii) from being scattered throughout the layout, geometry and
   interaction code.
2. Configuration: It defines `GraphConfig`, the single object a host passes in
   to choose render area, layout kind, node size and theme.

Exports:
    GraphConfig: Render area, layout kind, node size multiplier and theme.
    MIN_SCALE / MAX_SCALE: Clamp range of the viewport scale.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Mapping

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# Viewport
# ------------------------------------------------------------------------------
MIN_SCALE: float = 0.1
MAX_SCALE: float = 5.0
ZOOM_STEP: float = 0.2
WHEEL_ZOOM_PER_UNIT: float = 0.001  # 120 units per wheel notch
FOCUS_SCALE: float = 1.5

# The virtual canvas is much larger than the container so nodes dragged far
# away stay reachable.
VIRTUAL_VIEWPORT_MULTIPLIER: float = 5.0
VIRTUAL_VIEWPORT_MIN: float = 5000.0

# Share of the virtual viewport the layout engine may use.
LAYOUT_AREA_FRACTION: float = 0.6

# ------------------------------------------------------------------------------
# Layout
# ------------------------------------------------------------------------------
DONUT_THRESHOLD: int = 50
DONUT_INNER_RATIO: float = 0.35
DONUT_MAX_NODES_PER_RING: int = 48  # angular step never below 7.5 deg
SPIRAL_SPACING: float = 220.0
FORCE_ITERATIONS: int = 100
FORCE_MIN_ITERATIONS: int = 10
FORCE_PAIR_BUDGET: int = 50_000_000  # pairwise updates per force layout
FORCE_CHUNK_ROWS: int = 256
FORCE_MIN_DISTANCE: float = 1e-3
SENTINEL_NUDGE: float = 1.0  # layouts never emit the unplaced marker

# ------------------------------------------------------------------------------
# Nodes & edges
# ------------------------------------------------------------------------------
NODE_BASE_WIDTH: float = 180.0
NODE_BASE_HEIGHT: float = 90.0
DENSE_GRAPH_MIN_ADJUSTMENT: float = 0.7
DENSE_GRAPH_DIVISOR: float = 300.0

EDGE_SOURCE_PADDING: float = 5.0
EDGE_TARGET_PADDING: float = 6.0  # slightly larger, leaves room for the arrowhead
ARROW_LENGTH: float = 10.0
ARROW_WIDTH: float = 7.0
EDGE_HIT_TOLERANCE: float = 10.0  # screen pixels

# ------------------------------------------------------------------------------
# Interaction
# ------------------------------------------------------------------------------
CLICK_TOLERANCE: float = 3.0  # screen pixels of travel still counted as a click
TOOLTIP_MIN_NODES: int = 3
CONTEXT_MENU_WIDTH: float = 200.0
CONTEXT_MENU_HEIGHT: float = 350.0
CONTEXT_MENU_MARGIN: float = 10.0

DETAILS_PANEL_WIDTH: float = 350.0
DETAILS_PANEL_HEIGHT: float = 400.0
DETAILS_PANEL_DRAG_HEIGHT: float = 300.0  # height kept on screen while dragging
DETAILS_PANEL_GAP: float = 20.0
DETAILS_PANEL_HEADER_HEIGHT: float = 44.0
DETAILS_PANEL_ID: str = "details"

EXPANSION_RADIUS: float = 200.0
EXPANDING_FLAG_MS: int = 500

LAYOUT_KINDS: tuple[str, ...] = ("circular", "force", "tree", "spiral", "donut")
THEMES: tuple[str, ...] = ("light", "dark")


@dataclass
class GraphConfig:
    """
    The configuration surface read at initialization and on every update.

    The theme only changes colours, never geometry.
    """
    width: float = 800.0
    height: float = 600.0
    layout: str = "circular"
    node_size_scale: float = 1.0
    theme: str = "light"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> GraphConfig:
        """
        Build a config from loosely typed host data.

        Unknown keys are ignored and unusable values keep the default; both are
        logged, neither raises.
        """
        config = cls()
        known = {f.name for f in fields(cls)}

        for key, value in data.items():
            if key not in known:
                logger.warning(f"Ignoring unknown config key '{key}'.")
                continue

            if key in ("width", "height", "node_size_scale"):
                try:
                    number = float(value)
                except (TypeError, ValueError):
                    logger.warning(f"Config '{key}' must be numeric, got {value!r}; keeping default.")
                    continue
                if number <= 0:
                    logger.warning(f"Config '{key}' must be positive, got {number}; keeping default.")
                    continue
                setattr(config, key, number)

            elif key == "layout":
                # Unsupported kinds are resolved later by the layout engine.
                config.layout = str(value).lower()

            elif key == "theme":
                theme = str(value).lower()
                if theme not in THEMES:
                    logger.warning(f"Unknown theme '{value}'; keeping '{config.theme}'.")
                    continue
                config.theme = theme

        return config
