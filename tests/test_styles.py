import pytest

from graphexplorer.model.styles import (
    EDGE_STYLES, NODE_STYLES, EdgeEmphasis, NodeKind, Theme, edge_style, node_style, palette,
)


@pytest.mark.parametrize("theme", list(Theme))
def test_every_kind_and_emphasis_has_a_style(theme):
    assert set(NODE_STYLES[theme]) == set(NodeKind)
    assert set(EDGE_STYLES[theme]) == set(EdgeEmphasis)
    assert palette(theme).background


def test_unknown_kind_uses_fallback_style():
    assert node_style("widget") == node_style("unknown")
    assert node_style("") == NODE_STYLES[Theme.LIGHT][NodeKind.UNKNOWN]


def test_kind_labels_are_case_insensitive():
    assert NodeKind.from_label(" Hook ") == NodeKind.HOOK
    assert node_style("SERVICE", Theme.DARK) == NODE_STYLES[Theme.DARK][NodeKind.SERVICE]


def test_theme_parse_falls_back_to_light():
    assert Theme.parse("DARK") == Theme.DARK
    assert Theme.parse("sepia") == Theme.LIGHT


def test_theme_changes_colours_only():
    light = edge_style(EdgeEmphasis.PATH, Theme.LIGHT)
    dark = edge_style(EdgeEmphasis.PATH, Theme.DARK)
    assert light.width == dark.width
    assert edge_style(EdgeEmphasis.PATH).width > edge_style(EdgeEmphasis.DEFAULT).width
