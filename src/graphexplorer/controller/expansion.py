"""
Expansion Engine
================
Reveals the neighbours of one node without disturbing the existing layout.

Why is this file needed?
------------------------
1. Discovery: Neighbours come from formal outgoing edges and from adjacency
   hints in the node metadata (`outgoingDependencies`, `imports`).
2. Placement: Neighbours that have no usable position are placed on a circle
   around the anchor. Positions that already exist are never moved.
3. Highlight: The anchor and everything it reaches become the highlight set.

Metadata hints are matched against the node list; when several nodes match one
hint, the first one in node-list order wins.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from graphexplorer.config import EXPANSION_RADIUS
from graphexplorer.controller.edge_geometry import is_valid_position
from graphexplorer.controller.layout import place_on_circle
from graphexplorer.model.geometry_primitives import Point
from graphexplorer.model.graph import GraphDocument, Node, edge_key
from graphexplorer.model.state import HighlightSet

logger = logging.getLogger(__name__)


@dataclass
class ExpansionResult:
    discovered: List[str] = field(default_factory=list)
    placed: Dict[str, Point] = field(default_factory=dict)
    highlight: HighlightSet = field(default_factory=HighlightSet)


def _match_dependency(hint: str, nodes: Sequence[Node]) -> Optional[Node]:
    for n in nodes:
        if hint in (n.id, n.name, n.title) or n.metadata.get("fullName") == hint:
            return n
    return None


def _import_name(entry: Any) -> Optional[str]:
    if isinstance(entry, str):
        return entry or None
    if isinstance(entry, Mapping):
        value = entry.get("name") or entry.get("path")
        return str(value) if value else None
    return None


def _match_import(import_name: str, nodes: Sequence[Node]) -> Optional[Node]:
    for n in nodes:
        if import_name in (n.id, n.name, n.title):
            return n
        file_path = n.metadata.get("filePath")
        if isinstance(file_path, str) and file_path and file_path in import_name:
            return n
    return None


def find_expansion_targets(anchor: Node, document: GraphDocument) -> List[str]:
    """
    Ids reachable from `anchor` in one step, in first-seen order.

    Only ids present in the document's node list are returned, and never the
    anchor itself.
    """
    known = document.node_ids
    found: Dict[str, None] = {}

    def add(node_id: str) -> None:
        if node_id in known and node_id != anchor.id:
            found.setdefault(node_id, None)

    for e in document.outgoing(anchor.id):
        add(e.target)

    hints = anchor.metadata.get("outgoingDependencies")
    if isinstance(hints, list):
        for hint in hints:
            if not isinstance(hint, str):
                continue
            match = _match_dependency(hint, document.nodes)
            if match is not None:
                add(match.id)

    imports = anchor.metadata.get("imports")
    if isinstance(imports, list):
        for entry in imports:
            name = _import_name(entry)
            if name is None:
                continue
            match = _match_import(name, document.nodes)
            if match is not None:
                add(match.id)

    return list(found)


def expand(
    anchor: Node,
    document: GraphDocument,
    positions: Mapping[str, Point],
    radius: float = EXPANSION_RADIUS,
) -> ExpansionResult:
    """
    Compute the effect of expanding `anchor`.

    The input position map is not modified; `placed` holds only the new
    entries. Placement is skipped when the anchor has no valid position.
    """
    discovered = find_expansion_targets(anchor, document)
    to_reveal = [nid for nid in discovered if not is_valid_position(positions.get(nid))]

    placed: Dict[str, Point] = {}
    anchor_position = positions.get(anchor.id)
    if to_reveal:
        if is_valid_position(anchor_position):
            start = 0.0 if len(to_reveal) == 1 else -math.pi / 2
            placed = place_on_circle(to_reveal, anchor_position, radius, start)
            logger.info(f"Revealed {len(placed)} hidden dependencies for node: {anchor.display_name}")
        else:
            logger.debug(f"Node '{anchor.id}' has no position; skipping placement of {len(to_reveal)} nodes.")

    highlight = HighlightSet.of(
        [anchor.id, *discovered],
        [edge_key(anchor.id, nid) for nid in discovered],
    )
    return ExpansionResult(discovered=discovered, placed=placed, highlight=highlight)
