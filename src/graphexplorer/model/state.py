"""
View State (Data Model)
=======================
This module defines the mutable view state of a running graph explorer.

Why is this file needed?
------------------------
1. State Management: It holds the position map, the viewport transform, the
   highlight set, the selection, the active drag session and the per-node
   overlays in one place.
2. Decoupling: The canvas reads from this object each frame; only the
   controller writes to it.

Classes:
    HighlightSet: The emphasized subgraph (node ids + edge keys).
    DragSession: Ephemeral pointer capture while a button is held.
    NodeOverlay: Tooltip / menu / context-menu visibility of one node.
    GraphViewState: The main container class.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Dict, Iterable, Optional

from graphexplorer.model.geometry_primitives import Point, Size, Vector
from graphexplorer.model.viewport import ViewportTransform

logger = logging.getLogger(__name__)


class InteractionMode(StrEnum):
    IDLE = "idle"
    PANNING_BACKGROUND = "panning-background"
    DRAGGING_NODE = "dragging-node"
    DRAGGING_PANEL = "dragging-panel"


@dataclass(frozen=True)
class HighlightSet:
    nodes: frozenset[str] = frozenset()
    edges: frozenset[str] = frozenset()

    @classmethod
    def of(cls, nodes: Iterable[str], edges: Iterable[str] = ()) -> HighlightSet:
        return cls(frozenset(nodes), frozenset(edges))

    def is_empty(self) -> bool:
        return not self.nodes and not self.edges


EMPTY_HIGHLIGHT = HighlightSet()


@dataclass(frozen=True)
class DragSession:
    """
    Exists only while a pointer button is held.

    `offset` is the pointer-to-element offset captured at drag start; for node
    drags it is measured in graph space, otherwise in screen space.
    """
    mode: InteractionMode
    offset: Vector
    origin: Point                       # pointer position at drag start (screen)
    target_id: Optional[str] = None     # node id or panel id
    travel: float = 0.0                 # largest pointer distance from origin

    def moved_to(self, pointer: Point) -> DragSession:
        return replace(self, travel=max(self.travel, pointer.distance_to(self.origin)))


@dataclass(frozen=True)
class NodeOverlay:
    tooltip_visible: bool = False
    menu_visible: bool = False
    context_menu_visible: bool = False
    context_menu_position: Optional[Point] = None


HIDDEN_OVERLAY = NodeOverlay()


@dataclass
class GraphViewState:
    """
    Everything the rendering layer reads each frame.
    Pass this instance to the canvas; mutate it only through GraphController.
    """
    container: Size = field(default_factory=lambda: Size(800.0, 600.0))
    viewport: Size = field(default_factory=lambda: Size(5000.0, 5000.0))

    positions: Dict[str, Point] = field(default_factory=dict)
    transform: ViewportTransform = field(default_factory=ViewportTransform)
    highlight: HighlightSet = EMPTY_HIGHLIGHT
    selected_id: Optional[str] = None

    drag: Optional[DragSession] = None
    overlays: Dict[str, NodeOverlay] = field(default_factory=dict)
    panels: Dict[str, Point] = field(default_factory=dict)

    expanding_id: Optional[str] = None
    expanded_sections: set[str] = field(default_factory=set)

    @property
    def mode(self) -> InteractionMode:
        return self.drag.mode if self.drag else InteractionMode.IDLE

    def overlay(self, node_id: str) -> NodeOverlay:
        return self.overlays.get(node_id, HIDDEN_OVERLAY)

    def clear_selection(self) -> None:
        self.selected_id = None
        self.highlight = EMPTY_HIGHLIGHT

    def prune(self, node_ids: set[str]) -> None:
        """Forget every per-node entry whose node is no longer in the data set."""
        stale = [nid for nid in self.positions if nid not in node_ids]
        for nid in stale:
            del self.positions[nid]
        self.overlays = {nid: o for nid, o in self.overlays.items() if nid in node_ids}
        if self.drag and self.drag.mode == InteractionMode.DRAGGING_NODE and self.drag.target_id not in node_ids:
            self.drag = None
        if self.expanding_id not in node_ids:
            self.expanding_id = None
        if stale:
            logger.debug(f"Pruned {len(stale)} stale node positions.")
