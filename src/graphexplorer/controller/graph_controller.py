"""
Graph Controller
================
The single owner of the explorer's view state.

Why is this file needed?
------------------------
1. Orchestration: It feeds data refreshes through the layout engine, routes
   pointer gestures through the interaction state machine and applies the
   results to `GraphViewState`.
2. Consistency: Every public method leaves the state consistent before it
   returns, so whatever the canvas paints next is a complete frame.
3. Host integration: Open/reveal/expand requests go out through the
   `Notifier`, clipboard writes through the injected writers.

The controller has no Qt dependency; the canvas translates Qt events into
these calls and repaints afterwards.
"""
from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional

from graphexplorer.config import (
    GraphConfig, FOCUS_SCALE, LAYOUT_AREA_FRACTION, EDGE_HIT_TOLERANCE, DETAILS_PANEL_ID,
)
from graphexplorer.controller import highlight, interaction
from graphexplorer.controller.edge_geometry import (
    EdgeSegment, clip_edge, distance_to_segment, is_valid_position, node_contains,
    node_footprint, renderable_edges,
)
from graphexplorer.controller.expansion import ExpansionResult, expand
from graphexplorer.controller.layout import LayoutKind, compute_layout, layout_area, resolve_layout_kind
from graphexplorer.controller.notifier import ClipboardWriter, LoggingNotifier, Notifier, copy_import_path
from graphexplorer.model.geometry_primitives import Point, Size, Vector
from graphexplorer.model.graph import Edge, GraphDocument, Node
from graphexplorer.model.state import DragSession, GraphViewState, HighlightSet, InteractionMode
from graphexplorer.model.styles import Theme
from graphexplorer.model.viewport import ViewportTransform, virtual_viewport_size

logger = logging.getLogger(__name__)


class GraphController:
    def __init__(
        self,
        config: Optional[GraphConfig] = None,
        notifier: Optional[Notifier] = None,
        clipboard_writers: Iterable[ClipboardWriter] = (),
    ) -> None:
        self.config = config or GraphConfig()
        self.notifier: Notifier = notifier or LoggingNotifier()
        self.clipboard_writers: List[ClipboardWriter] = list(clipboard_writers)

        self.document = GraphDocument()
        container = Size(self.config.width, self.config.height)
        self.state = GraphViewState(container=container, viewport=virtual_viewport_size(container))

    # ==========================================================================
    # Derived values
    # ==========================================================================

    @property
    def node_count(self) -> int:
        return len(self.document.nodes)

    @property
    def theme(self) -> Theme:
        return Theme.parse(self.config.theme)

    @property
    def effective_layout(self) -> LayoutKind:
        return resolve_layout_kind(self.config.layout, self.node_count)

    def footprint(self) -> tuple[float, float]:
        return node_footprint(self.config.node_size_scale, self.node_count)

    def selected_node(self) -> Optional[Node]:
        if self.state.selected_id is None:
            return None
        return self.document.get_node(self.state.selected_id)

    def placed_nodes(self) -> List[Node]:
        """Nodes with a usable position, in document order."""
        return [n for n in self.document.nodes if is_valid_position(self.state.positions.get(n.id))]

    # ==========================================================================
    # Data & configuration
    # ==========================================================================

    def set_data(self, document: GraphDocument, relayout: bool = True) -> None:
        """
        Replace the graph data.

        Highlight and selection are always cleared and state for vanished ids
        is pruned. With `relayout`, positions are recomputed and the view reset;
        otherwise surviving positions are kept and new nodes stay unplaced
        until a layout or an expansion places them.
        """
        self.document = document
        self.state.clear_selection()
        self.state.prune(document.node_ids)
        if relayout:
            self.apply_layout()
        logger.info(f"Graph data set: {len(document.nodes)} nodes, {len(document.edges)} edges.")

    def apply_layout(self, kind: Optional[str] = None) -> LayoutKind:
        if kind is not None:
            self.config.layout = str(kind).lower()

        center, size = layout_area(self.state.viewport, LAYOUT_AREA_FRACTION)
        self.state.positions = compute_layout(
            self.document.nodes, self.document.edges, center, size, self.config.layout,
        )
        self.state.transform = ViewportTransform.reset(self.node_count, self.state.container, self.state.viewport)
        return self.effective_layout

    def update_config(self, config: GraphConfig) -> None:
        """Apply a new configuration; geometry is only recomputed when it changed."""
        old = self.config
        self.config = config
        if (old.width, old.height) != (config.width, config.height):
            self.resize(config.width, config.height)
        if old.layout != config.layout:
            self.apply_layout()

    def set_theme(self, theme: str) -> None:
        self.config.theme = Theme.parse(theme).value

    def resize(self, width: float, height: float) -> None:
        """
        New container size. The layout is recomputed only when the virtual
        viewport derived from the container changes.
        """
        if width <= 0 or height <= 0:
            logger.debug(f"Ignoring degenerate container size {width}x{height}.")
            return

        self.config.width, self.config.height = float(width), float(height)
        self.state.container = Size(float(width), float(height))
        viewport = virtual_viewport_size(self.state.container)
        if viewport != self.state.viewport:
            self.state.viewport = viewport
            self.apply_layout()

    # ==========================================================================
    # Viewport
    # ==========================================================================

    def zoom_at(self, pointer: Point, delta: float) -> None:
        self.state.transform = self.state.transform.zoom_at_point(pointer, delta)

    def zoom_in(self, anchor: Optional[Point] = None) -> None:
        self.state.transform = self.state.transform.zoom_in(anchor or self.state.container.center)

    def zoom_out(self, anchor: Optional[Point] = None) -> None:
        self.state.transform = self.state.transform.zoom_out(anchor or self.state.container.center)

    def pan_by(self, delta: Vector) -> None:
        self.state.transform = self.state.transform.pan(delta)

    def reset_view(self) -> None:
        self.state.transform = ViewportTransform.reset(self.node_count, self.state.container, self.state.viewport)

    def focus_node(self, node_id: str, scale: float = FOCUS_SCALE) -> bool:
        """Centre the node at a fixed zoom level and select it (highlight untouched)."""
        position = self.state.positions.get(node_id)
        if not is_valid_position(position):
            logger.debug(f"Cannot focus node '{node_id}': no position.")
            return False
        self.state.transform = ViewportTransform.focus(position, scale, self.state.container)
        self._set_selected(node_id)
        return True

    # ==========================================================================
    # Pointer routing
    # ==========================================================================

    def pointer_down_background(self, pointer: Point) -> None:
        self.close_menus()
        self.state.drag = interaction.begin_background_pan(pointer, self.state.transform)

    def pointer_down_node(self, node_id: str, pointer: Point) -> None:
        position = self.state.positions.get(node_id)
        if not is_valid_position(position):
            return
        self.close_menus()
        self.state.drag = interaction.begin_node_drag(node_id, pointer, position, self.state.transform)

    def pointer_down_panel(self, panel_id: str, pointer: Point) -> None:
        position = self.state.panels.get(panel_id)
        if position is None:
            return
        self.state.drag = interaction.begin_panel_drag(panel_id, pointer, position)

    def pointer_move(self, pointer: Point) -> bool:
        """Returns True when the move changed the state (i.e. a drag is active)."""
        session = self.state.drag
        if session is None:
            return False

        session = session.moved_to(pointer)
        self.state.drag = session

        match session.mode:
            case InteractionMode.PANNING_BACKGROUND:
                self.state.transform = interaction.panned_transform(session, pointer, self.state.transform)
            case InteractionMode.DRAGGING_NODE:
                self.state.positions[session.target_id] = interaction.dragged_node_position(
                    session, pointer, self.state.transform,
                )
            case InteractionMode.DRAGGING_PANEL:
                self.state.panels[session.target_id] = interaction.clamp_panel_drag(
                    interaction.dragged_panel_position(session, pointer), self.state.container,
                )
        return True

    def pointer_up(self) -> Optional[DragSession]:
        """
        End the gesture. A press/release without travel counts as a click: on
        a node it selects the node, on the background it clears the selection.
        """
        session = self.state.drag
        self.state.drag = None
        if session is None:
            return None

        if interaction.is_click(session):
            if session.mode == InteractionMode.DRAGGING_NODE:
                self.select_node(session.target_id)
            elif session.mode == InteractionMode.PANNING_BACKGROUND:
                self.click_background()
        return session

    def pointer_leave(self) -> Optional[DragSession]:
        """Cancel the gesture without click semantics."""
        session, self.state.drag = self.state.drag, None
        return session

    # ==========================================================================
    # Selection & highlight
    # ==========================================================================

    def _set_selected(self, node_id: str) -> None:
        self.state.selected_id = node_id
        position = self.state.positions.get(node_id)
        anchor = self.state.transform.graph_to_screen(position) if is_valid_position(position) \
            else self.state.container.center
        self.state.panels[DETAILS_PANEL_ID] = interaction.details_panel_position(anchor, self.state.container)

    def _apply_highlight(self, highlight_set: HighlightSet) -> None:
        # Edges may name nodes that are not loaded; those never enter the highlight.
        self.state.highlight = HighlightSet.of(highlight_set.nodes & self.document.node_ids, highlight_set.edges)

    def _known(self, node_id: str) -> bool:
        if node_id in self.document.node_ids:
            return True
        logger.warning(f"Unknown node id '{node_id}'.")
        return False

    def select_node(self, node_id: str) -> None:
        if not self._known(node_id):
            return
        self._set_selected(node_id)
        self._apply_highlight(highlight.neighborhood(node_id, self.document.edges))

    def show_dependencies(self, node_id: str) -> None:
        if self._known(node_id):
            self._apply_highlight(highlight.dependencies(node_id, self.document.edges))

    def show_dependents(self, node_id: str) -> None:
        if self._known(node_id):
            self._apply_highlight(highlight.dependents(node_id, self.document.edges))

    def go_to_parent(self, node_id: str) -> List[str]:
        """Highlight the node's parents; a unique parent also becomes the selection."""
        if not self._known(node_id):
            return []
        self._apply_highlight(highlight.dependencies(node_id, self.document.edges))
        parents = highlight.parents(node_id, self.document.edges)
        if len(parents) == 1 and parents[0] in self.document.node_ids:
            self._set_selected(parents[0])
        return parents

    def click_edge(self, edge: Edge) -> None:
        self._apply_highlight(highlight.edge_highlight(edge))

    def click_background(self) -> None:
        self.state.clear_selection()
        self.close_menus()

    def close_details(self) -> None:
        self.state.selected_id = None

    def toggle_section(self, section_id: str) -> None:
        sections = self.state.expanded_sections
        if section_id in sections:
            sections.remove(section_id)
        else:
            sections.add(section_id)

    # ==========================================================================
    # Overlays
    # ==========================================================================

    def hover_node(self, node_id: str) -> None:
        self.state.overlays[node_id] = interaction.show_tooltip(self.state.overlay(node_id), self.node_count)

    def unhover_node(self, node_id: str) -> None:
        if node_id in self.state.overlays:
            self.state.overlays[node_id] = interaction.hide_tooltip(self.state.overlays[node_id])

    def toggle_menu(self, node_id: str) -> None:
        self.state.overlays[node_id] = interaction.toggle_menu(self.state.overlay(node_id))

    def open_context_menu(self, node_id: str, pointer: Point) -> Point:
        """Open the node's context menu; returns the clamped anchor."""
        self.close_menus()
        overlay = interaction.open_context_menu(self.state.overlay(node_id), pointer, self.state.container)
        self.state.overlays[node_id] = overlay
        return overlay.context_menu_position

    def close_menus(self, node_id: Optional[str] = None) -> None:
        targets = [node_id] if node_id is not None else list(self.state.overlays)
        for nid in targets:
            if nid in self.state.overlays:
                self.state.overlays[nid] = interaction.close_menus(self.state.overlays[nid])

    # ==========================================================================
    # Host actions
    # ==========================================================================

    def _node_path(self, node_id: str) -> tuple[Optional[Node], str]:
        node = self.document.get_node(node_id)
        if node is None:
            logger.warning(f"Unknown node id '{node_id}'.")
            return None, ""
        return node, node.display_path

    def open_source_file(self, node_id: str) -> bool:
        node, path = self._node_path(node_id)
        if not path:
            logger.info(f"No file path available for node '{node_id}'.")
            return False
        self.notifier.open_source_file(node.id, path)
        return True

    def reveal_in_file_tree(self, node_id: str) -> bool:
        node, path = self._node_path(node_id)
        if not path:
            logger.info(f"No file path available for node '{node_id}'.")
            return False
        self.notifier.reveal_in_file_tree(node.id, path)
        return True

    def expand_node(self, node_id: str) -> Optional[ExpansionResult]:
        """
        Reveal the node's neighbours around it, highlight them and select the node.

        Sets `expanding_id`; the rendering layer clears it with `clear_expanding`
        once the feedback animation is over.
        """
        node, path = self._node_path(node_id)
        if node is None:
            return None

        self.state.expanding_id = node.id
        self.notifier.request_expansion(node.id, path)

        result = expand(node, self.document, self.state.positions)
        self.state.positions.update(result.placed)
        self.state.highlight = result.highlight
        self._set_selected(node.id)
        return result

    def clear_expanding(self) -> None:
        self.state.expanding_id = None

    def copy_import_path(self, node_id: str) -> Optional[str]:
        _, path = self._node_path(node_id)
        if not path:
            logger.info(f"No file path available for node '{node_id}'.")
            return None
        return copy_import_path(path, self.clipboard_writers)

    # ==========================================================================
    # Queries
    # ==========================================================================

    def renderable_segments(self) -> List[EdgeSegment]:
        """Clipped segments for every edge whose endpoints are both placed."""
        width, height = self.footprint()
        positions = self.state.positions
        segments = []
        for e in renderable_edges(self.document.edges, positions):
            source, target = positions[e.source], positions[e.target]
            if source == target:
                continue
            segments.append(clip_edge(source, target, width, height, edge=e))
        return segments

    def node_at(self, screen_point: Point) -> Optional[str]:
        """Topmost node under the point; later nodes are painted on top."""
        point = self.state.transform.screen_to_graph(screen_point)
        width, height = self.footprint()
        for node in reversed(self.placed_nodes()):
            if node_contains(self.state.positions[node.id], width, height, point):
                return node.id
        return None

    def edge_at(self, screen_point: Point, tolerance: float = EDGE_HIT_TOLERANCE) -> Optional[Edge]:
        point = self.state.transform.screen_to_graph(screen_point)
        limit = tolerance / self.state.transform.scale
        best: Optional[Edge] = None
        best_distance = limit
        for segment in self.renderable_segments():
            distance = distance_to_segment(point, segment)
            if distance <= best_distance:
                best, best_distance = segment.edge, distance
        return best

    def node_stats(self) -> Dict[str, Any]:
        types = Counter(n.display_kind for n in self.document.nodes)
        return {"total": self.node_count, "types": dict(types)}
