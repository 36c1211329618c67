from __future__ import annotations

import logging

from PySide6.QtCore import QObject, Signal

logger = logging.getLogger(__name__)


class QtNotifier(QObject):
    """Re-emits host notifications as Qt signals (node_id, file_path)."""
    open_source_file_requested = Signal(str, str)
    reveal_in_file_tree_requested = Signal(str, str)
    expansion_requested = Signal(str, str)

    def open_source_file(self, node_id: str, file_path: str) -> None:
        logger.debug(f"Emitting open_source_file for '{node_id}'.")
        self.open_source_file_requested.emit(node_id, file_path)

    def reveal_in_file_tree(self, node_id: str, file_path: str) -> None:
        logger.debug(f"Emitting reveal_in_file_tree for '{node_id}'.")
        self.reveal_in_file_tree_requested.emit(node_id, file_path)

    def request_expansion(self, node_id: str, file_path: str) -> None:
        logger.debug(f"Emitting request_expansion for '{node_id}'.")
        self.expansion_requested.emit(node_id, file_path)
