"""
Graph Document (Data Model)
===========================
Typed representation of the node/edge list supplied by the data loader.

Classes:
    NodeSection: Titled list of detail items attached to a node.
    Node: A software entity (component, module, service, ...).
    Edge: A directed relation between two node ids.
    GraphDocument: The node list, edge list and free-form document metadata.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


def edge_key(source: str, target: str) -> str:
    """Key used for highlight sets; parallel edges collapse onto one key."""
    return f"{source}-{target}"


@dataclass(frozen=True)
class NodeSection:
    """A collapsible group of labelled items shown in the details panel."""
    id: str
    title: str
    items: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Node:
    id: str
    kind: str = "unknown"
    name: Optional[str] = None
    title: Optional[str] = None
    path: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict, hash=False, compare=False)
    sections: Tuple[NodeSection, ...] = field(default=(), compare=False)

    @property
    def display_name(self) -> str:
        return self.name or self.title or f"Node {self.id}"

    @property
    def display_kind(self) -> str:
        return self.kind or "unknown"

    @property
    def display_path(self) -> str:
        """Empty string means "no path to show"."""
        return self.path or self.metadata.get("filePath") or self.metadata.get("path") or ""


@dataclass(frozen=True)
class Edge:
    source: str
    target: str
    kind: str = ""

    @property
    def key(self) -> str:
        return edge_key(self.source, self.target)

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id


@dataclass
class GraphDocument:
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def node_ids(self) -> set[str]:
        return {n.id for n in self.nodes}

    def get_node(self, node_id: str) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def outgoing(self, node_id: str) -> List[Edge]:
        return [e for e in self.edges if e.source == node_id]

    def is_empty(self) -> bool:
        return not self.nodes
