import json

import pytest

from graphexplorer.model.graph import NodeSection
from graphexplorer.model.io import load_graph_document, read_graph_file


@pytest.fixture
def sample(fixtures_dir):
    return read_graph_file(str(fixtures_dir / "sample_graph.json"))


def test_sample_graph_nodes(sample):
    assert [n.id for n in sample.nodes] == ["app", "header", "auth", "api", "theme", "7"]
    assert sample.get_node("7").kind == "module"
    assert sample.get_node("7").display_path == "packages/ui/Button.tsx"
    assert sample.get_node("theme").display_name == "Node theme"
    assert sample.get_node("api").display_name == "api-client"
    assert sample.metadata == {"generator": "fixture"}


def test_sample_graph_edges_skip_incomplete(sample):
    assert [(e.source, e.target) for e in sample.edges] == [
        ("app", "header"), ("header", "theme"), ("auth", "api"), ("7", "header"),
    ]
    assert sample.edges[0].kind == "renders"


def test_sample_graph_sections(sample):
    assert sample.get_node("header").sections == (
        NodeSection(id="props", title="Props", items=("title", "onMenu")),
    )
    assert sample.get_node("app").sections == ()


def test_metadata_file_path_is_used_as_display_path(sample):
    assert sample.get_node("auth").display_path == "src/hooks/useAuth.ts"


@pytest.mark.parametrize("data", [None, [], "nodes", {"nodes": "x"}, {"edges": []}])
def test_invalid_data_yields_empty_document(data):
    document = load_graph_document(data)
    assert document.is_empty()
    assert document.edges == []


def test_duplicate_ids_keep_first():
    document = load_graph_document({"nodes": [{"id": "a", "name": "first"}, {"id": "a", "name": "second"}]})
    assert len(document.nodes) == 1
    assert document.nodes[0].name == "first"


def test_non_list_edges_are_ignored():
    document = load_graph_document({"nodes": [{"id": "a"}], "edges": {"source": "a"}})
    assert document.edges == []
    assert len(document.nodes) == 1


def test_malformed_sections_are_skipped():
    document = load_graph_document({"nodes": [{
        "id": "a",
        "sections": ["oops", {"name": "State", "items": "not a list"}, {"id": "x", "items": [{"label": "l"}, ""]}],
    }]})
    assert document.nodes[0].sections == (
        NodeSection(id="1", title="State"),
        NodeSection(id="x", title="x", items=("l",)),
    )


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_graph_file(str(tmp_path / "missing.json"))


def test_unparseable_file_yields_empty_document(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    assert read_graph_file(str(path)).is_empty()


def test_round_trip_from_disk(tmp_path):
    path = tmp_path / "graph.json"
    path.write_text(json.dumps({"nodes": [{"id": 1}, {"id": 2}], "edges": [{"source": 1, "target": 2}]}))
    document = read_graph_file(str(path))
    assert document.node_ids == {"1", "2"}
    assert document.outgoing("1")[0].target == "2"
