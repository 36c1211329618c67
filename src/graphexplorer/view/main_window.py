"""
Main Application Window
=======================
The primary GUI container that holds the Menu Bar, Toolbar, the Graph Canvas
and the Status Bar.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects global actions (File -> Open, zoom, layout, theme) to
   the `GraphController` and keeps the status bar in sync with it.
"""
import logging
import os
from typing import Optional

from PySide6.QtCore import QUrl
from PySide6.QtGui import QAction, QDesktopServices, QKeySequence
from PySide6.QtWidgets import QComboBox, QFileDialog, QLabel, QMainWindow, QMessageBox, QToolBar

from graphexplorer.config import LAYOUT_KINDS, THEMES
from graphexplorer.controller.graph_controller import GraphController
from graphexplorer.model.io import read_graph_file
from graphexplorer.view.graph_canvas import GraphCanvas
from graphexplorer.view.qt_notifier import QtNotifier

logger = logging.getLogger(__name__)

VISIBLE_APP_NAME = "Graph Explorer"


class MainWindow(QMainWindow):
    def __init__(self, controller: GraphController) -> None:
        super().__init__()
        self.controller: GraphController = controller
        self.current_file: Optional[str] = None

        self.update_window_title()
        self.resize(int(controller.config.width), int(controller.config.height))

        # --- CENTRAL CANVAS ---
        self.canvas = GraphCanvas(controller, self)
        self.setCentralWidget(self.canvas)

        # --- ACTIONS, MENUS & TOOLBAR ---
        self._create_actions()
        self._create_menus()
        self._create_toolbar()

        # --- STATUS BAR ---
        self.status_label = QLabel()
        self.statusBar().addPermanentWidget(self.status_label)

        # --- SIGNAL CONNECTIONS ---
        self.canvas.state_changed.connect(self.update_status)

        self.update_status()

    def _create_actions(self) -> None:
        self.act_open = QAction("Open...", self)
        self.act_open.setShortcut(QKeySequence.StandardKey.Open)
        self.act_open.triggered.connect(self.on_file_open)

        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)

        self.act_zoom_in = QAction("Zoom In", self)
        self.act_zoom_in.setShortcut(QKeySequence.StandardKey.ZoomIn)
        self.act_zoom_in.triggered.connect(lambda: self._apply(self.controller.zoom_in))

        self.act_zoom_out = QAction("Zoom Out", self)
        self.act_zoom_out.setShortcut(QKeySequence.StandardKey.ZoomOut)
        self.act_zoom_out.triggered.connect(lambda: self._apply(self.controller.zoom_out))

        self.act_reset = QAction("Reset View", self)
        self.act_reset.setShortcut("Ctrl+0")
        self.act_reset.triggered.connect(lambda: self._apply(self.controller.reset_view))

    def _create_menus(self) -> None:
        file_menu = self.menuBar().addMenu("File")
        file_menu.addAction(self.act_open)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

        view_menu = self.menuBar().addMenu("View")
        view_menu.addAction(self.act_zoom_in)
        view_menu.addAction(self.act_zoom_out)
        view_menu.addAction(self.act_reset)

    def _create_toolbar(self) -> None:
        toolbar = QToolBar("Graph", self)
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        toolbar.addAction(self.act_zoom_in)
        toolbar.addAction(self.act_zoom_out)
        toolbar.addAction(self.act_reset)
        toolbar.addSeparator()

        toolbar.addWidget(QLabel(" Layout: "))
        self.layout_combo = QComboBox()
        self.layout_combo.addItems(list(LAYOUT_KINDS))
        index = self.layout_combo.findText(self.controller.config.layout)
        self.layout_combo.setCurrentIndex(max(index, 0))
        self.layout_combo.currentTextChanged.connect(self.on_layout_changed)
        toolbar.addWidget(self.layout_combo)

        toolbar.addWidget(QLabel(" Theme: "))
        self.theme_combo = QComboBox()
        self.theme_combo.addItems(list(THEMES))
        self.theme_combo.setCurrentText(self.controller.theme.value)
        self.theme_combo.currentTextChanged.connect(self.on_theme_changed)
        toolbar.addWidget(self.theme_combo)

    # ==========================================================================
    # Slots
    # ==========================================================================

    def _apply(self, operation) -> None:
        operation()
        self.canvas.update()
        self.update_status()

    def load_file(self, filepath: str) -> bool:
        try:
            document = read_graph_file(filepath)
        except FileNotFoundError as e:
            QMessageBox.critical(self, "Error", str(e))
            return False

        self.controller.set_data(document)
        self.current_file = filepath
        self.update_window_title()
        self.canvas.update()
        self.update_status()
        if document.is_empty():
            self.statusBar().showMessage(f"No nodes found in {os.path.basename(filepath)}", 5000)
        return True

    def on_file_open(self) -> None:
        filepath, _ = QFileDialog.getOpenFileName(self, "Open Graph", "", "Graph JSON (*.json);;All Files (*)")
        if filepath:
            self.load_file(filepath)

    def on_layout_changed(self, kind: str) -> None:
        effective = self.controller.apply_layout(kind)
        if effective != kind:
            self.statusBar().showMessage(f"Layout '{kind}' rendered as '{effective}'", 5000)
        self.canvas.update()
        self.update_status()

    def on_theme_changed(self, theme: str) -> None:
        self.controller.set_theme(theme)
        self.canvas.update()

    def connect_notifier(self, notifier: QtNotifier) -> None:
        notifier.open_source_file_requested.connect(self.on_open_source_file)
        notifier.reveal_in_file_tree_requested.connect(self.on_reveal_in_file_tree)
        notifier.expansion_requested.connect(
            lambda node_id, _path: self.statusBar().showMessage(f"Expanding '{node_id}'", 3000)
        )

    def _resolve_path(self, file_path: str) -> str:
        # Relative paths in a graph document are relative to the document.
        if os.path.isabs(file_path) or not self.current_file:
            return file_path
        return os.path.join(os.path.dirname(os.path.abspath(self.current_file)), file_path)

    def on_open_source_file(self, node_id: str, file_path: str) -> None:
        path = self._resolve_path(file_path)
        if not os.path.exists(path):
            self.statusBar().showMessage(f"File not found: {file_path}", 5000)
            return
        QDesktopServices.openUrl(QUrl.fromLocalFile(path))

    def on_reveal_in_file_tree(self, node_id: str, file_path: str) -> None:
        directory = os.path.dirname(self._resolve_path(file_path))
        if not os.path.isdir(directory):
            self.statusBar().showMessage(f"Directory not found: {directory}", 5000)
            return
        QDesktopServices.openUrl(QUrl.fromLocalFile(directory))

    def update_status(self) -> None:
        stats = self.controller.node_stats()
        selected = self.controller.selected_node()
        parts = [
            f"Nodes: {stats['total']}",
            f"Edges: {len(self.controller.document.edges)}",
            f"Layout: {self.controller.effective_layout}",
            f"Zoom: {self.controller.state.transform.scale:.0%}",
        ]
        if selected is not None:
            parts.append(f"Selected: {selected.display_name}")
        self.status_label.setText("  |  ".join(parts))

    def update_window_title(self) -> None:
        if self.current_file:
            self.setWindowTitle(f"{VISIBLE_APP_NAME} - {os.path.basename(self.current_file)}")
        else:
            self.setWindowTitle(VISIBLE_APP_NAME)
