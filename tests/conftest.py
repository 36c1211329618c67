from pathlib import Path
from typing import Callable

import pytest

from graphexplorer.config import GraphConfig
from graphexplorer.controller.graph_controller import GraphController
from graphexplorer.model.graph import Edge, GraphDocument, Node

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class RecordingNotifier:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, str]] = []

    def open_source_file(self, node_id: str, file_path: str) -> None:
        self.calls.append(("open_source_file", node_id, file_path))

    def reveal_in_file_tree(self, node_id: str, file_path: str) -> None:
        self.calls.append(("reveal_in_file_tree", node_id, file_path))

    def request_expansion(self, node_id: str, file_path: str) -> None:
        self.calls.append(("request_expansion", node_id, file_path))


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def make_nodes() -> Callable[[int], list[Node]]:
    def _make(n: int) -> list[Node]:
        return [Node(id=f"n{i}", kind="component", name=f"Node{i}") for i in range(n)]
    return _make


@pytest.fixture
def small_document() -> GraphDocument:
    """A -> N, B -> N, N -> C, plus an isolated D."""
    nodes = [Node(id=i, kind="component", name=i.upper()) for i in ("a", "b", "n", "c", "d")]
    nodes[2] = Node(id="n", kind="module", name="N", path="/repo/src/lib/n.ts")
    edges = [Edge("a", "n"), Edge("b", "n"), Edge("n", "c")]
    return GraphDocument(nodes=nodes, edges=edges)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def controller(small_document: GraphDocument, notifier: RecordingNotifier) -> GraphController:
    c = GraphController(GraphConfig(width=800, height=600), notifier=notifier)
    c.set_data(small_document)
    return c
