"""
Graph Canvas (View)
===================
The QPainter surface that draws the graph and feeds pointer input into the
`GraphController`.

Why is this file needed?
------------------------
1. Rendering: Each paint reads the controller's view state and draws edges,
   arrowheads, nodes, tooltips, the details panel and the stats overlay.
2. Input routing: Qt mouse, wheel and context-menu events are translated into
   controller calls (pointer down/move/up, zoom, menus).
3. Host glue: Node menus, clipboard writers and the expanding-node timer live
   here because they need Qt.

Classes:
    GraphCanvas: The interactive widget.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from PySide6.QtCore import QPoint, QPointF, QRectF, Qt, QTimer, Signal
from PySide6.QtGui import (
    QBrush, QClipboard, QColor, QContextMenuEvent, QFont, QFontMetricsF, QGuiApplication,
    QMouseEvent, QPainter, QPaintEvent, QPen, QPolygonF, QResizeEvent, QWheelEvent,
)
from PySide6.QtWidgets import QMenu, QWidget

from graphexplorer.config import (
    DETAILS_PANEL_ID, DETAILS_PANEL_WIDTH, DETAILS_PANEL_HEADER_HEIGHT, EXPANDING_FLAG_MS,
)
from graphexplorer.controller.edge_geometry import arrow_head
from graphexplorer.controller.graph_controller import GraphController
from graphexplorer.controller.notifier import ClipboardWriter
from graphexplorer.model.geometry_primitives import Point
from graphexplorer.model.graph import Node
from graphexplorer.model.styles import EdgeEmphasis, edge_style, node_style, palette
from graphexplorer.model.viewport import wheel_delta

logger = logging.getLogger(__name__)

GRID_SPACING = 20.0
NODE_CORNER_RADIUS = 8.0
MENU_BUTTON_SIZE = 20.0
DIMMED_OPACITY = 0.35
PANEL_ROW_HEIGHT = 24.0
PANEL_PADDING = 12.0


# ------------------------------------------------------------------------------
# Clipboard
# ------------------------------------------------------------------------------

def _write_clipboard(text: str) -> None:
    clipboard = QGuiApplication.clipboard()
    if clipboard is None:
        raise RuntimeError("No system clipboard available.")
    clipboard.setText(text, QClipboard.Mode.Clipboard)


def _write_selection(text: str) -> None:
    clipboard = QGuiApplication.clipboard()
    if clipboard is None or not clipboard.supportsSelection():
        raise RuntimeError("Selection clipboard not supported on this platform.")
    clipboard.setText(text, QClipboard.Mode.Selection)


def qt_clipboard_writers() -> List[ClipboardWriter]:
    """System clipboard first, X11 selection buffer as the fallback."""
    return [_write_clipboard, _write_selection]


def _qpoint(p: Point) -> QPointF:
    return QPointF(p.x, p.y)


def _point(p: QPointF | QPoint) -> Point:
    return Point(float(p.x()), float(p.y()))


class GraphCanvas(QWidget):
    """Custom widget drawing the graph with QPainter."""

    # Emitted after every interaction that changed the view state
    state_changed = Signal()

    def __init__(self, controller: GraphController, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.controller = controller
        self._hovered_id: Optional[str] = None
        # (rect in screen space, region kind, payload) registered while painting the panel
        self._panel_regions: List[Tuple[QRectF, str, Optional[str]]] = []

        self.setMouseTracking(True)
        self.setMinimumSize(400, 300)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

    # ==========================================================================
    # Helpers
    # ==========================================================================

    def _changed(self) -> None:
        self.update()
        self.state_changed.emit()

    def _node_rect(self, center: Point) -> QRectF:
        w, h = self.controller.footprint()
        return QRectF(center.x - w / 2, center.y - h / 2, w, h)

    def _menu_button_rect(self, center: Point) -> QRectF:
        rect = self._node_rect(center)
        return QRectF(rect.right() - MENU_BUTTON_SIZE - 4, rect.top() + 4, MENU_BUTTON_SIZE, MENU_BUTTON_SIZE)

    def _panel_region_at(self, pos: QPointF) -> Optional[Tuple[QRectF, str, Optional[str]]]:
        # Regions are registered back to front; the last match is on top.
        for region in reversed(self._panel_regions):
            if region[0].contains(pos):
                return region
        return None

    # ==========================================================================
    # Painting
    # ==========================================================================

    def paintEvent(self, event: QPaintEvent) -> None:
        theme = self.controller.theme
        colors = palette(theme)
        state = self.controller.state

        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), QColor(colors.background))
        self._draw_grid(painter, QColor(colors.grid))

        if self.controller.document.is_empty():
            painter.setPen(QPen(QColor(colors.text_secondary)))
            painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, "No graph loaded")
            painter.end()
            return

        painter.save()
        painter.translate(state.transform.translate_x, state.transform.translate_y)
        painter.scale(state.transform.scale, state.transform.scale)
        self._draw_edges(painter)
        self._draw_nodes(painter)
        painter.restore()

        self._draw_tooltips(painter)
        self._draw_details_panel(painter)
        self._draw_stats(painter)
        painter.end()

    def _draw_grid(self, painter: QPainter, color: QColor) -> None:
        transform = self.controller.state.transform
        spacing = GRID_SPACING * transform.scale
        if spacing < 6:
            return
        painter.setPen(QPen(color, 1.5))
        x0 = transform.translate_x % spacing
        y0 = transform.translate_y % spacing
        y = y0
        while y < self.height():
            x = x0
            while x < self.width():
                painter.drawPoint(QPointF(x, y))
                x += spacing
            y += spacing

    def _draw_edges(self, painter: QPainter) -> None:
        state = self.controller.state
        theme = self.controller.theme
        selected = state.selected_id

        for segment in self.controller.renderable_segments():
            edge = segment.edge
            if edge.key in state.highlight.edges:
                emphasis = EdgeEmphasis.PATH
            elif selected is not None and edge.touches(selected):
                emphasis = EdgeEmphasis.SELECTED
            else:
                emphasis = EdgeEmphasis.DEFAULT
            style = edge_style(emphasis, theme)
            color = QColor(style.color)

            painter.setPen(QPen(color, style.width))
            painter.drawLine(_qpoint(segment.start), _qpoint(segment.end))

            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QBrush(color))
            painter.drawPolygon(QPolygonF([_qpoint(p) for p in arrow_head(segment)]))
            painter.setBrush(Qt.BrushStyle.NoBrush)

    def _draw_nodes(self, painter: QPainter) -> None:
        state = self.controller.state
        theme = self.controller.theme
        colors = palette(theme)
        dim_others = not state.highlight.is_empty()

        title_font = QFont(self.font())
        title_font.setBold(True)
        title_font.setPointSizeF(10)
        sub_font = QFont(self.font())
        sub_font.setPointSizeF(8)

        for node in self.controller.placed_nodes():
            center = state.positions[node.id]
            rect = self._node_rect(center)
            style = node_style(node.kind, theme)

            painter.setOpacity(DIMMED_OPACITY if dim_others and node.id not in state.highlight.nodes else 1.0)

            border = QColor(style.border)
            border_width = 1.5
            if node.id == state.selected_id:
                border, border_width = QColor(colors.selection_ring), 3.0
            elif node.id in state.highlight.nodes:
                border, border_width = QColor(colors.path_ring), 2.5

            painter.setPen(QPen(border, border_width))
            painter.setBrush(QBrush(QColor(style.fill)))
            painter.drawRoundedRect(rect, NODE_CORNER_RADIUS, NODE_CORNER_RADIUS)

            if node.id == state.expanding_id:
                pen = QPen(QColor(colors.selection_ring), 2.0, Qt.PenStyle.DashLine)
                painter.setPen(pen)
                painter.setBrush(Qt.BrushStyle.NoBrush)
                painter.drawRoundedRect(rect.adjusted(-6, -6, 6, 6), NODE_CORNER_RADIUS, NODE_CORNER_RADIUS)

            text_rect = rect.adjusted(10, 8, -MENU_BUTTON_SIZE - 8, -8)
            painter.setPen(QPen(QColor(style.text)))
            painter.setFont(title_font)
            name = QFontMetricsF(title_font).elidedText(node.display_name, Qt.TextElideMode.ElideRight, text_rect.width())
            painter.drawText(text_rect, Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop, name)

            painter.setFont(sub_font)
            painter.drawText(text_rect, Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignBottom, node.display_kind)

            painter.drawText(self._menu_button_rect(center), Qt.AlignmentFlag.AlignCenter, "⋯")

        painter.setOpacity(1.0)
        painter.setBrush(Qt.BrushStyle.NoBrush)

    def _draw_tooltips(self, painter: QPainter) -> None:
        state = self.controller.state
        colors = palette(self.controller.theme)
        metrics = QFontMetricsF(self.font())

        for node_id, overlay in state.overlays.items():
            if not overlay.tooltip_visible or node_id not in state.positions:
                continue
            node = self.controller.document.get_node(node_id)
            if node is None:
                continue

            lines = [node.display_name, node.display_kind]
            if node.display_path:
                lines.append(node.display_path)
            width = max(metrics.horizontalAdvance(line) for line in lines) + 2 * 8
            height = metrics.height() * len(lines) + 2 * 6

            w, h = self.controller.footprint()
            top_center = state.transform.graph_to_screen(Point(state.positions[node_id].x, state.positions[node_id].y - h / 2))
            rect = QRectF(top_center.x - width / 2, top_center.y - height - 8, width, height)

            painter.setPen(QPen(QColor(colors.panel_border)))
            painter.setBrush(QBrush(QColor(colors.panel)))
            painter.drawRoundedRect(rect, 4, 4)
            painter.setPen(QPen(QColor(colors.text)))
            painter.drawText(rect.adjusted(8, 6, -8, -6), Qt.AlignmentFlag.AlignLeft, "\n".join(lines))
            painter.setBrush(Qt.BrushStyle.NoBrush)

    def _draw_details_panel(self, painter: QPainter) -> None:
        self._panel_regions = []
        node = self.controller.selected_node()
        origin = self.controller.state.panels.get(DETAILS_PANEL_ID)
        if node is None or origin is None:
            return

        colors = palette(self.controller.theme)
        expanded = self.controller.state.expanded_sections
        metrics = QFontMetricsF(self.font())

        rows: List[Tuple[str, str, Optional[str]]] = [("text", node.display_kind, None)]
        if node.display_path:
            rows.append(("text", node.display_path, None))
        if node.sections:
            for section in node.sections:
                marker = "▾" if section.id in expanded else "▸"
                rows.append(("section", f"{marker} {section.title}", section.id))
                if section.id in expanded:
                    rows.extend(("item", f"    {item}", None) for item in section.items)
        else:
            rows.append(("text", "No additional details available", None))

        height = DETAILS_PANEL_HEADER_HEIGHT + len(rows) * PANEL_ROW_HEIGHT + PANEL_ROW_HEIGHT + 3 * PANEL_PADDING
        panel = QRectF(origin.x, origin.y, DETAILS_PANEL_WIDTH, height)
        self._panel_regions.append((panel, "body", None))

        painter.setPen(QPen(QColor(colors.panel_border)))
        painter.setBrush(QBrush(QColor(colors.panel)))
        painter.drawRoundedRect(panel, 8, 8)

        # Header (drag handle) with close button
        header = QRectF(panel.left(), panel.top(), panel.width(), DETAILS_PANEL_HEADER_HEIGHT)
        self._panel_regions.append((header, "header", None))
        title_font = QFont(self.font())
        title_font.setBold(True)
        painter.setFont(title_font)
        painter.setPen(QPen(QColor(colors.text)))
        title_rect = header.adjusted(PANEL_PADDING, 0, -PANEL_PADDING - 24, 0)
        title = QFontMetricsF(title_font).elidedText(node.display_name, Qt.TextElideMode.ElideRight, title_rect.width())
        painter.drawText(title_rect, Qt.AlignmentFlag.AlignVCenter | Qt.AlignmentFlag.AlignLeft, title)
        painter.setFont(self.font())

        close = QRectF(header.right() - PANEL_PADDING - 20, header.center().y() - 10, 20, 20)
        painter.drawText(close, Qt.AlignmentFlag.AlignCenter, "×")
        self._panel_regions.append((close, "close", None))
        painter.setPen(QPen(QColor(colors.panel_border)))
        painter.drawLine(header.bottomLeft(), header.bottomRight())

        y = header.bottom() + PANEL_PADDING
        for kind, text, payload in rows:
            row = QRectF(panel.left() + PANEL_PADDING, y, panel.width() - 2 * PANEL_PADDING, PANEL_ROW_HEIGHT)
            painter.setPen(QPen(QColor(colors.text if kind == "section" else colors.text_secondary)))
            elided = metrics.elidedText(text, Qt.TextElideMode.ElideMiddle, row.width())
            painter.drawText(row, Qt.AlignmentFlag.AlignVCenter | Qt.AlignmentFlag.AlignLeft, elided)
            if kind == "section":
                self._panel_regions.append((row, "section", payload))
            y += PANEL_ROW_HEIGHT

        # Footer buttons
        y += PANEL_PADDING
        half = (panel.width() - 3 * PANEL_PADDING) / 2
        for i, (label, action) in enumerate((("Dependencies", "dependencies"), ("Dependents", "dependents"))):
            button = QRectF(panel.left() + PANEL_PADDING + i * (half + PANEL_PADDING), y, half, PANEL_ROW_HEIGHT)
            painter.setPen(QPen(QColor(colors.panel_border)))
            painter.setBrush(QBrush(QColor(colors.grid)))
            painter.drawRoundedRect(button, 4, 4)
            painter.setPen(QPen(QColor(colors.text)))
            painter.drawText(button, Qt.AlignmentFlag.AlignCenter, label)
            self._panel_regions.append((button, action, node.id))
        painter.setBrush(Qt.BrushStyle.NoBrush)

    def _draw_stats(self, painter: QPainter) -> None:
        colors = palette(self.controller.theme)
        stats = self.controller.node_stats()
        lines = [f"Nodes: {stats['total']}"]
        lines += [f"  {kind}: {count}" for kind, count in sorted(stats["types"].items())]
        lines.append(f"Zoom: {self.controller.state.transform.scale:.0%}")

        metrics = QFontMetricsF(self.font())
        width = max(metrics.horizontalAdvance(line) for line in lines) + 16
        height = metrics.height() * len(lines) + 12
        rect = QRectF(10, self.height() - height - 10, width, height)

        painter.setPen(QPen(QColor(colors.panel_border)))
        painter.setBrush(QBrush(QColor(colors.panel)))
        painter.drawRoundedRect(rect, 6, 6)
        painter.setPen(QPen(QColor(colors.text_secondary)))
        painter.drawText(rect.adjusted(8, 6, -8, -6), Qt.AlignmentFlag.AlignLeft, "\n".join(lines))
        painter.setBrush(Qt.BrushStyle.NoBrush)

    # ==========================================================================
    # Menus
    # ==========================================================================

    def _build_node_menu(self, node: Node) -> QMenu:
        c = self.controller
        menu = QMenu(self)
        entries: List[Tuple[str, Callable[[], object]]] = [
            ("Focus View on Node", lambda: c.focus_node(node.id)),
            ("Open in Source File", lambda: c.open_source_file(node.id)),
            ("Reveal in File Tree", lambda: c.reveal_in_file_tree(node.id)),
            ("Expand", lambda: self.expand_node(node.id)),
            ("Go to Parent", lambda: c.go_to_parent(node.id)),
            ("Copy Import Path", lambda: c.copy_import_path(node.id)),
        ]
        for label, callback in entries:
            action = menu.addAction(label)
            action.triggered.connect(lambda _=False, cb=callback: self._run(cb))
            if label in ("Open in Source File", "Reveal in File Tree", "Copy Import Path"):
                action.setEnabled(bool(node.display_path))

        menu.addSeparator()
        for label, callback in (
            ("View Details", lambda: c.select_node(node.id)),
            ("Show Dependencies", lambda: c.show_dependencies(node.id)),
            ("Show Dependents", lambda: c.show_dependents(node.id)),
        ):
            action = menu.addAction(label)
            action.triggered.connect(lambda _=False, cb=callback: self._run(cb))
        return menu

    def _run(self, callback: Callable[[], object]) -> None:
        callback()
        self._changed()

    def _open_dropdown(self, node_id: str) -> None:
        node = self.controller.document.get_node(node_id)
        if node is None:
            return
        self.controller.toggle_menu(node_id)
        self.update()
        anchor = self._menu_button_rect(self.controller.state.positions[node_id]).bottomLeft()
        screen = self.controller.state.transform.graph_to_screen(_point(anchor))
        self._build_node_menu(node).exec(self.mapToGlobal(QPoint(int(screen.x), int(screen.y))))
        self.controller.close_menus(node_id)
        self._changed()

    def expand_node(self, node_id: str) -> None:
        if self.controller.expand_node(node_id) is not None:
            QTimer.singleShot(EXPANDING_FLAG_MS, self._clear_expanding)

    def _clear_expanding(self) -> None:
        self.controller.clear_expanding()
        self.update()

    # ==========================================================================
    # Events
    # ==========================================================================

    def resizeEvent(self, event: QResizeEvent) -> None:
        self.controller.resize(event.size().width(), event.size().height())
        super().resizeEvent(event)

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return

        pos = event.position()
        pointer = _point(pos)
        c = self.controller

        region = self._panel_region_at(pos)
        if region is not None:
            _, kind, payload = region
            match kind:
                case "close":
                    c.close_details()
                case "header":
                    c.pointer_down_panel(DETAILS_PANEL_ID, pointer)
                case "section":
                    c.toggle_section(payload)
                case "dependencies":
                    c.show_dependencies(payload)
                case "dependents":
                    c.show_dependents(payload)
            self._changed()
            event.accept()
            return

        node_id = c.node_at(pointer)
        if node_id is not None:
            graph_point = c.state.transform.screen_to_graph(pointer)
            if self._menu_button_rect(c.state.positions[node_id]).contains(_qpoint(graph_point)):
                self._open_dropdown(node_id)
            else:
                c.pointer_down_node(node_id, pointer)
            event.accept()
            return

        edge = c.edge_at(pointer)
        if edge is not None:
            c.click_edge(edge)
            self._changed()
            event.accept()
            return

        c.pointer_down_background(pointer)
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        pointer = _point(event.position())
        c = self.controller

        if c.pointer_move(pointer):
            self.update()
            event.accept()
            return

        node_id = c.node_at(pointer)
        if node_id != self._hovered_id:
            if self._hovered_id is not None:
                c.unhover_node(self._hovered_id)
            if node_id is not None:
                c.hover_node(node_id)
            self._hovered_id = node_id
            self.setCursor(Qt.CursorShape.PointingHandCursor if node_id else Qt.CursorShape.ArrowCursor)
            self.update()
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.MouseButton.LeftButton and self.controller.pointer_up() is not None:
            self._changed()
        super().mouseReleaseEvent(event)

    def leaveEvent(self, event) -> None:
        self.controller.pointer_leave()
        if self._hovered_id is not None:
            self.controller.unhover_node(self._hovered_id)
            self._hovered_id = None
        self.update()
        super().leaveEvent(event)

    def wheelEvent(self, event: QWheelEvent) -> None:
        self.controller.zoom_at(_point(event.position()), wheel_delta(event.angleDelta().y()))
        self._changed()
        event.accept()

    def contextMenuEvent(self, event: QContextMenuEvent) -> None:
        node_id = self.controller.node_at(_point(event.pos()))
        node = self.controller.document.get_node(node_id) if node_id else None
        if node is None:
            return

        anchor = self.controller.open_context_menu(node.id, _point(event.pos()))
        self.update()
        self._build_node_menu(node).exec(self.mapToGlobal(QPoint(int(anchor.x), int(anchor.y))))
        self.controller.close_menus(node.id)
        self._changed()
        event.accept()
