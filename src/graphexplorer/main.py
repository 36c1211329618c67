"""
Application Initialization
==========================
This module constructs the MVC (Model-View-Controller) architecture and starts
the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Parses the command line (graph file, layout, theme, log level).
2. Instantiates the GraphController with a Qt notifier and clipboard writers.
3. Instantiates the Main Window (View) and passes the controller into it.
4. Prevents circular import errors by being the orchestrator.
"""
import argparse
import logging
import sys
from typing import Optional, Sequence

from PySide6.QtWidgets import QApplication

from graphexplorer.config import GraphConfig, LAYOUT_KINDS, THEMES
from graphexplorer.controller.graph_controller import GraphController
from graphexplorer.logging_config import setup_logging
from graphexplorer.view.graph_canvas import qt_clipboard_writers
from graphexplorer.view.main_window import MainWindow
from graphexplorer.view.qt_notifier import QtNotifier


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="graphexplorer", description="Interactive dependency graph explorer.")
    parser.add_argument("graph", nargs="?", help="JSON graph document to open.")
    parser.add_argument("--layout", default="circular", choices=LAYOUT_KINDS)
    parser.add_argument("--theme", default="light", choices=THEMES)
    parser.add_argument("--node-size", type=float, default=1.0, dest="node_size_scale")
    parser.add_argument("--log-level", default="info", help="Logging level name (debug, info, warning, ...).")
    parser.add_argument("--debug", action="store_true", help="Shortcut for --log-level debug.")
    parser.add_argument("--log-file", default=None)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=logging.DEBUG if args.debug else args.log_level, log_file=args.log_file)

    # 2. Create the Qt Application
    app = QApplication(sys.argv[:1])
    app.setApplicationName("Graph Explorer")

    # 3. Initialize the Controller
    config = GraphConfig.from_mapping({
        "layout": args.layout,
        "theme": args.theme,
        "node_size_scale": args.node_size_scale,
        "width": 1400,
        "height": 900,
    })
    notifier = QtNotifier()
    controller = GraphController(config, notifier=notifier, clipboard_writers=qt_clipboard_writers())

    # 4. Initialize the Main Window, passing the controller
    window = MainWindow(controller)
    window.connect_notifier(notifier)
    if args.graph:
        window.load_file(args.graph)
    window.show()

    # 5. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
