"""
Input Manager (JSON)
Reads graph documents produced by the external data loader.

Malformed input never raises: it degrades to an empty graph (or to the subset
of nodes/edges that could be read) and is reported through the log.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Mapping, Optional

from graphexplorer.model.graph import Edge, GraphDocument, Node, NodeSection

logger = logging.getLogger(__name__)


def _as_id(value: Any) -> Optional[str]:
    """Ids may arrive as strings or numbers; anything else is unusable."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (str, int, float)):
        text = str(value).strip()
        return text or None
    return None


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def _parse_sections(raw: Any, node_id: str) -> tuple[NodeSection, ...]:
    if not isinstance(raw, list):
        return ()

    sections = []
    for i, entry in enumerate(raw):
        if not isinstance(entry, Mapping):
            logger.warning(f"Node '{node_id}': skipping section #{i}, expected an object.")
            continue
        section_id = _as_id(entry.get("id")) or str(i)
        raw_items = entry.get("items")
        items = []
        for item in raw_items if isinstance(raw_items, list) else []:
            if isinstance(item, Mapping):
                label = _as_text(item.get("name", item.get("label", item.get("id"))))
            else:
                label = _as_text(item)
            if label:
                items.append(label)
        sections.append(NodeSection(
            id=section_id,
            title=_as_text(entry.get("title", entry.get("name"))) or section_id,
            items=tuple(items),
        ))
    return tuple(sections)


def _parse_node(raw: Any, index: int) -> Optional[Node]:
    if not isinstance(raw, Mapping):
        logger.warning(f"Skipping node #{index}: expected an object, got {type(raw).__name__}.")
        return None

    node_id = _as_id(raw.get("id"))
    if node_id is None:
        logger.warning(f"Skipping node #{index}: missing 'id'.")
        return None

    metadata = raw.get("metadata")
    if not isinstance(metadata, Mapping):
        metadata = {}

    return Node(
        id=node_id,
        kind=_as_text(raw.get("type", raw.get("kind"))) or "unknown",
        name=_as_text(raw.get("name")),
        title=_as_text(raw.get("title")),
        path=_as_text(raw.get("filepath", raw.get("path"))),
        metadata=dict(metadata),
        sections=_parse_sections(raw.get("sections"), node_id),
    )


def _parse_edge(raw: Any, index: int) -> Optional[Edge]:
    if not isinstance(raw, Mapping):
        logger.warning(f"Skipping edge #{index}: expected an object, got {type(raw).__name__}.")
        return None

    source = _as_id(raw.get("source"))
    target = _as_id(raw.get("target"))
    if source is None or target is None:
        logger.warning(f"Skipping edge #{index}: missing 'source' or 'target'.")
        return None

    return Edge(source=source, target=target, kind=_as_text(raw.get("type", raw.get("kind"))) or "")


def load_graph_document(data: Any) -> GraphDocument:
    """
    Convert loosely typed graph data into a `GraphDocument`.

    Args:
        data: Mapping with a 'nodes' list, an optional 'edges' list and an
              optional 'metadata' mapping.

    Returns:
        The parsed document. Invalid data yields an empty document.
    """
    if not isinstance(data, Mapping) or not isinstance(data.get("nodes"), list):
        logger.error("Invalid graph data format")
        return GraphDocument()

    nodes: list[Node] = []
    seen: set[str] = set()
    for i, raw in enumerate(data["nodes"]):
        node = _parse_node(raw, i)
        if node is None:
            continue
        if node.id in seen:
            logger.warning(f"Skipping duplicate node id '{node.id}'.")
            continue
        seen.add(node.id)
        nodes.append(node)

    edges: list[Edge] = []
    raw_edges = data.get("edges", [])
    if not isinstance(raw_edges, list):
        logger.warning("Graph 'edges' is not a list; ignoring it.")
        raw_edges = []
    for i, raw in enumerate(raw_edges):
        edge = _parse_edge(raw, i)
        if edge is not None:
            edges.append(edge)

    metadata = data.get("metadata")
    document = GraphDocument(
        nodes=nodes,
        edges=edges,
        metadata=dict(metadata) if isinstance(metadata, Mapping) else {},
    )
    logger.debug(f"Loaded graph document with {len(nodes)} nodes and {len(edges)} edges.")
    return document


def read_graph_file(filepath: str) -> GraphDocument:
    """
    Read a JSON graph document from disk.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    logger.info(f"Loading graph from: {filepath}")
    if not os.path.exists(filepath):
        msg = f"Graph file '{filepath}' does not exist."
        logger.error(msg)
        raise FileNotFoundError(msg)

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"Could not parse graph file '{filepath}': {e}")
        return GraphDocument()

    return load_graph_document(data)
