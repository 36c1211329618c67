"""
Host Notifications
==================
The single seam through which the engine talks to its host application.

Why is this file needed?
------------------------
1. Decoupling: The controller calls one method per notification kind and
   never awaits an answer. The host decides the transport (Qt signals, IPC,
   plain logging).
2. Import paths: Formatting a node's file path as an import specifier and
   handing it to whichever clipboard is available.

Classes:
    Notifier: Protocol every notifier implements.
    LoggingNotifier: Default implementation, writes each notification to the log.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, Iterable, Optional, Protocol

logger = logging.getLogger(__name__)

ClipboardWriter = Callable[[str], None]

_SOURCE_EXTENSION = re.compile(r"\.(tsx|ts|jsx|js|java|py)$")


class Notifier(Protocol):
    def open_source_file(self, node_id: str, file_path: str) -> None: ...

    def reveal_in_file_tree(self, node_id: str, file_path: str) -> None: ...

    def request_expansion(self, node_id: str, file_path: str) -> None: ...


class LoggingNotifier:
    """Writes every notification to the log and otherwise does nothing."""

    def open_source_file(self, node_id: str, file_path: str) -> None:
        logger.info(f"Request to open source file: {file_path} (node '{node_id}')")

    def reveal_in_file_tree(self, node_id: str, file_path: str) -> None:
        logger.info(f"Request to reveal in file tree: {file_path} (node '{node_id}')")

    def request_expansion(self, node_id: str, file_path: str) -> None:
        logger.info(f"Request to expand node: {node_id}")


def format_import_path(file_path: str) -> str:
    """
    Turn a source file path into an import specifier.

    Examples:
        /repo/src/components/Button.tsx  -> @/components/Button
        web/app/dashboard/page.tsx       -> @/app/dashboard/page
        repo/packages/ui/Button.tsx      -> @org/ui/Button
    """
    path = _SOURCE_EXTENSION.sub("", file_path)
    path = path.replace("\\", "/")
    if path.startswith("/"):
        path = path[1:]

    if "/src/" in path:
        return "@/" + path.split("/src/")[1]

    segments = path.split("/")
    if "/app/" in path or "/pages/" in path:
        index = next(i for i, s in enumerate(segments) if s in ("app", "pages"))
        return "@/" + "/".join(segments[index:])

    if "/packages/" in path or "/libs/" in path:
        index = next(i for i, s in enumerate(segments) if s in ("packages", "libs"))
        if len(segments) > index + 1:
            return "@org/" + "/".join(segments[index + 1:])

    return path


def copy_import_path(file_path: str, writers: Iterable[ClipboardWriter]) -> Optional[str]:
    """
    Format `file_path` and hand it to the first clipboard writer that accepts it.

    Returns:
        The copied import path, or None when no writer succeeded.
    """
    import_path = format_import_path(file_path)
    for writer in writers:
        try:
            writer(import_path)
        except Exception as e:
            logger.warning(f"Clipboard writer {getattr(writer, '__name__', writer)!r} failed: {e}")
            continue
        logger.info(f"Import path copied to clipboard: {import_path}")
        return import_path

    logger.error(f"Failed to copy import path '{import_path}': no clipboard available.")
    return None
