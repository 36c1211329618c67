"""Node and edge styling (kind x theme -> style descriptor)."""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Dict


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def parse(cls, value: str) -> Theme:
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.LIGHT


class NodeKind(StrEnum):
    COMPONENT = "component"
    HOOK = "hook"
    SERVICE = "service"
    CONTEXT = "context"
    MODULE = "module"
    UNKNOWN = "unknown"

    @classmethod
    def from_label(cls, label: str) -> NodeKind:
        """Free-form kind labels map onto the enum; anything else is UNKNOWN."""
        try:
            return cls(str(label).strip().lower())
        except ValueError:
            return cls.UNKNOWN


class EdgeEmphasis(StrEnum):
    DEFAULT = "default"
    SELECTED = "selected"      # touches the selected node
    PATH = "path"              # member of the highlight set


@dataclass(frozen=True)
class NodeStyle:
    fill: str
    border: str
    text: str


@dataclass(frozen=True)
class EdgeStyle:
    color: str
    width: float


@dataclass(frozen=True)
class CanvasPalette:
    background: str
    grid: str
    text: str
    text_secondary: str
    panel: str
    panel_border: str
    selection_ring: str
    path_ring: str


# Adding a kind means adding a row here, nothing else.
NODE_STYLES: Dict[Theme, Dict[NodeKind, NodeStyle]] = {
    Theme.LIGHT: {
        NodeKind.COMPONENT: NodeStyle(fill="#DBEAFE", border="#3B82F6", text="#111827"),
        NodeKind.HOOK: NodeStyle(fill="#F3E8FF", border="#A855F7", text="#111827"),
        NodeKind.SERVICE: NodeStyle(fill="#DCFCE7", border="#22C55E", text="#111827"),
        NodeKind.CONTEXT: NodeStyle(fill="#FEF9C3", border="#EAB308", text="#111827"),
        NodeKind.MODULE: NodeStyle(fill="#FFEDD5", border="#F97316", text="#111827"),
        NodeKind.UNKNOWN: NodeStyle(fill="#F3F4F6", border="#6B7280", text="#111827"),
    },
    Theme.DARK: {
        NodeKind.COMPONENT: NodeStyle(fill="#1E3A8A", border="#60A5FA", text="#F9FAFB"),
        NodeKind.HOOK: NodeStyle(fill="#581C87", border="#C084FC", text="#F9FAFB"),
        NodeKind.SERVICE: NodeStyle(fill="#14532D", border="#4ADE80", text="#F9FAFB"),
        NodeKind.CONTEXT: NodeStyle(fill="#713F12", border="#FACC15", text="#F9FAFB"),
        NodeKind.MODULE: NodeStyle(fill="#7C2D12", border="#FB923C", text="#F9FAFB"),
        NodeKind.UNKNOWN: NodeStyle(fill="#374151", border="#9CA3AF", text="#F9FAFB"),
    },
}

EDGE_STYLES: Dict[Theme, Dict[EdgeEmphasis, EdgeStyle]] = {
    Theme.LIGHT: {
        EdgeEmphasis.DEFAULT: EdgeStyle(color="#D1D5DB", width=1.5),
        EdgeEmphasis.SELECTED: EdgeStyle(color="#3B82F6", width=2.0),
        EdgeEmphasis.PATH: EdgeStyle(color="#22C55E", width=2.5),
    },
    Theme.DARK: {
        EdgeEmphasis.DEFAULT: EdgeStyle(color="#4B5563", width=1.5),
        EdgeEmphasis.SELECTED: EdgeStyle(color="#3B82F6", width=2.0),
        EdgeEmphasis.PATH: EdgeStyle(color="#22C55E", width=2.5),
    },
}

PALETTES: Dict[Theme, CanvasPalette] = {
    Theme.LIGHT: CanvasPalette(
        background="#FFFFFF", grid="#E5E7EB", text="#111827", text_secondary="#4B5563",
        panel="#FFFFFF", panel_border="#F3F4F6", selection_ring="#3B82F6", path_ring="#22C55E",
    ),
    Theme.DARK: CanvasPalette(
        background="#111827", grid="#333333", text="#FFFFFF", text_secondary="#D1D5DB",
        panel="#1F2937", panel_border="#374151", selection_ring="#3B82F6", path_ring="#22C55E",
    ),
}


def node_style(kind: str, theme: Theme = Theme.LIGHT) -> NodeStyle:
    return NODE_STYLES[theme][NodeKind.from_label(kind)]


def edge_style(emphasis: EdgeEmphasis, theme: Theme = Theme.LIGHT) -> EdgeStyle:
    return EDGE_STYLES[theme][emphasis]


def palette(theme: Theme = Theme.LIGHT) -> CanvasPalette:
    return PALETTES[theme]
