import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PySide6.QtWidgets")

from PySide6.QtCore import QPoint, QPointF, Qt  # noqa: E402
from PySide6.QtGui import QGuiApplication, QWheelEvent  # noqa: E402
from PySide6.QtTest import QTest  # noqa: E402

from graphexplorer.config import GraphConfig  # noqa: E402
from graphexplorer.controller.graph_controller import GraphController  # noqa: E402
from graphexplorer.model.graph import GraphDocument  # noqa: E402
from graphexplorer.view import main_window  # noqa: E402
from graphexplorer.view.graph_canvas import GraphCanvas, qt_clipboard_writers  # noqa: E402
from graphexplorer.view.qt_notifier import QtNotifier  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


@pytest.fixture
def canvas(qapp, controller):
    widget = GraphCanvas(controller)
    widget.resize(800, 600)
    widget.show()
    yield widget
    widget.close()
    widget.deleteLater()


def test_paints_loaded_and_empty_graph(canvas, controller):
    assert not canvas.grab().isNull()
    controller.set_data(GraphDocument())
    assert not canvas.grab().isNull()


def test_details_panel_registers_hit_regions(canvas, controller):
    controller.select_node("n")
    canvas.grab()
    kinds = {kind for _, kind, _ in canvas._panel_regions}
    assert {"body", "header", "close", "dependencies", "dependents"} <= kinds


def test_click_on_node_selects_it(canvas, controller):
    controller.focus_node("a")
    controller.close_details()
    emitted = []
    canvas.state_changed.connect(lambda: emitted.append(True))

    QTest.mouseClick(canvas, Qt.MouseButton.LeftButton, Qt.KeyboardModifier.NoModifier, QPoint(400, 300))

    assert controller.state.selected_id == "a"
    assert emitted


def test_wheel_zooms_around_pointer(canvas, controller, qapp):
    before = controller.state.transform.scale
    event = QWheelEvent(
        QPointF(400, 300), QPointF(400, 300), QPoint(0, 0), QPoint(0, 120),
        Qt.MouseButton.NoButton, Qt.KeyboardModifier.NoModifier, Qt.ScrollPhase.NoScrollPhase, False,
    )
    qapp.sendEvent(canvas, event)
    assert controller.state.transform.scale == pytest.approx(before + 0.12)


def test_qt_clipboard_receives_import_path(qapp, controller):
    controller.clipboard_writers = qt_clipboard_writers()
    assert controller.copy_import_path("n") == "@/lib/n"
    assert QGuiApplication.clipboard().text() == "@/lib/n"


def test_qt_notifier_emits_signals(qapp):
    notifier = QtNotifier()
    received = []
    notifier.open_source_file_requested.connect(lambda node_id, path: received.append(("open", node_id, path)))
    notifier.expansion_requested.connect(lambda node_id, path: received.append(("expand", node_id, path)))

    c = GraphController(GraphConfig(), notifier=notifier)
    notifier.open_source_file("n", "/repo/src/n.ts")
    notifier.request_expansion("n", "")

    assert c.notifier is notifier
    assert received == [("open", "n", "/repo/src/n.ts"), ("expand", "n", "")]


def test_main_window_loads_file(qapp, fixtures_dir, monkeypatch):
    errors = []
    monkeypatch.setattr(main_window.QMessageBox, "critical", lambda *args: errors.append(args))

    window = main_window.MainWindow(GraphController(GraphConfig()))
    try:
        assert window.load_file(str(fixtures_dir / "sample_graph.json"))
        assert window.windowTitle() == "Graph Explorer - sample_graph.json"
        assert "Nodes: 6" in window.status_label.text()

        assert not window.load_file(str(fixtures_dir / "missing.json"))
        assert len(errors) == 1
        assert window.current_file.endswith("sample_graph.json")
    finally:
        window.close()
        window.deleteLater()
