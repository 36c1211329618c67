"""
Highlight propagation.

Every function returns a fresh `HighlightSet`; callers replace the active set,
they never union into it.
"""
from __future__ import annotations

from typing import Iterable, List

from graphexplorer.model.graph import Edge
from graphexplorer.model.state import HighlightSet


def neighborhood(node_id: str, edges: Iterable[Edge]) -> HighlightSet:
    """The node, every node adjacent to it in either direction, and the connecting edges."""
    nodes = {node_id}
    keys = set()
    for e in edges:
        if e.touches(node_id):
            nodes.add(e.source)
            nodes.add(e.target)
            keys.add(e.key)
    return HighlightSet.of(nodes, keys)


def dependencies(node_id: str, edges: Iterable[Edge]) -> HighlightSet:
    """The node and the sources of its incoming edges."""
    nodes = {node_id}
    keys = set()
    for e in edges:
        if e.target == node_id:
            nodes.add(e.source)
            keys.add(e.key)
    return HighlightSet.of(nodes, keys)


def dependents(node_id: str, edges: Iterable[Edge]) -> HighlightSet:
    """The node and the targets of its outgoing edges."""
    nodes = {node_id}
    keys = set()
    for e in edges:
        if e.source == node_id:
            nodes.add(e.target)
            keys.add(e.key)
    return HighlightSet.of(nodes, keys)


def edge_highlight(edge: Edge) -> HighlightSet:
    return HighlightSet.of((edge.source, edge.target), (edge.key,))


def parents(node_id: str, edges: Iterable[Edge]) -> List[str]:
    """Distinct sources of the node's incoming edges, in edge order."""
    return list(dict.fromkeys(e.source for e in edges if e.target == node_id and e.source != node_id))

