# tests/core/graph/test_graph_model.py
"""
Testes do modelo semântico do grafo de pipeline.

Os testes asseguram que:
- o tipo do vértice é sempre derivado da configuração
- ids de vértice são únicos e arestas só referenciam vértices existentes
- remover um vértice remove em cascata as arestas incidentes
- a igualdade ignora posições, ids de aresta e ordem
"""

import pytest

from pipeforge.core.exceptions import (
    DuplicateVertexError,
    NotFoundError,
    TemplateNotFoundError,
    VertexNotFoundError,
)
from pipeforge.core.graph.model import Edge, PipelineGraph, Vertex, VertexKind, derive_vertex_kind
from pipeforge.core.graph.templates import unique_vertex_id, vertex_from_template


@pytest.mark.parametrize(
    "config, kind",
    [
        ({}, VertexKind.UNCLASSIFIED),
        (None, VertexKind.UNCLASSIFIED),
        ({"source": {"generator": {}}}, VertexKind.SOURCE),
        ({"sink": {"log": {}}}, VertexKind.SINK),
        ({"udf": {"builtin": {"name": "cat"}}}, VertexKind.TRANSFORM),
        ({"source": {}, "sink": {}}, VertexKind.SOURCE),
    ],
)
def test_derive_vertex_kind(config, kind):
    assert derive_vertex_kind(config) == kind


def test_kind_follows_config_updates(sample_graph):
    sample_graph.update_config("B", {"sink": {"log": {}}})
    assert sample_graph.get_vertex("B").kind == VertexKind.SINK
    assert [v.id for v in sample_graph.of_kind(VertexKind.SINK)] == ["B", "C"]


def test_duplicate_vertex_is_rejected(sample_graph):
    with pytest.raises(DuplicateVertexError):
        sample_graph.add_vertex(Vertex("A", {}))


def test_edge_to_unknown_vertex_is_rejected(sample_graph):
    with pytest.raises(VertexNotFoundError):
        sample_graph.connect("A", "Z")
    assert len(sample_graph.edges) == 2


def test_remove_vertex_cascades_edges(sample_graph):
    sample_graph.remove_vertex("B")
    assert sample_graph.vertex_ids == ["A", "C"]
    assert sample_graph.edges == []


def test_edge_ids_are_generated_and_unique(sample_graph):
    ids = [e.id for e in sample_graph.edges]
    assert ids == ["e-0", "e-1"]
    sample_graph.disconnect("e-0")
    new = sample_graph.connect("A", "C")
    assert new.id not in {e.id for e in sample_graph.edges if e is not new}


def test_missing_edge_operations_raise(sample_graph):
    with pytest.raises(NotFoundError):
        sample_graph.disconnect("e-99")
    with pytest.raises(NotFoundError):
        sample_graph.set_edge_conditions("e-99", {"tags": {}})


def test_set_edge_conditions(sample_graph):
    edge = sample_graph.set_edge_conditions("e-1", {"tags": {"operator": "or", "values": ["even"]}})
    assert edge.conditions == {"tags": {"operator": "or", "values": ["even"]}}


def test_equality_ignores_presentation_and_order():
    g1 = PipelineGraph(
        vertices=[Vertex("A", {"source": {}}, (0, 0)), Vertex("B", {"sink": {}})],
        edges=[Edge("A", "B", {"tags": {"values": ["x"]}}, id="e-7")],
    )
    g2 = PipelineGraph(
        vertices=[Vertex("B", {"sink": {}}, (10, 10)), Vertex("A", {"source": {}})],
        edges=[Edge("A", "B", {"tags": {"values": ["x"]}})],
    )
    assert g1 == g2
    g2.set_edge_conditions(g2.edges[0].id, None)
    assert g1 != g2


def test_copy_is_independent(sample_graph):
    clone = sample_graph.copy()
    assert clone == sample_graph
    clone.update_config("A", {"source": {"kafka": {}}})
    assert clone != sample_graph


def test_edge_from_wrapped_unwraps_once():
    edge = Edge.from_wrapped("A", "B", {"conditions": {"conditions": {"tags": {"values": ["x"]}}}})
    assert edge.conditions == {"tags": {"values": ["x"]}}
    assert Edge.from_wrapped("A", "B").conditions is None
    assert Edge.from_wrapped("A", "B", {"conditions": {"tags": {}}}).conditions == {"tags": {}}


def test_unique_vertex_id():
    assert unique_vertex_id([], "cat-udf") == "cat-udf"
    assert unique_vertex_id(["cat-udf"], "cat-udf") == "cat-udf-1"
    assert unique_vertex_id(["cat-udf", "cat-udf-1"], "cat-udf") == "cat-udf-2"


def test_vertex_from_template():
    graph = PipelineGraph()
    first = vertex_from_template(graph, "log-sink", position=(1, 2))
    second = vertex_from_template(graph, "log-sink")
    assert (first.id, second.id) == ("log-sink", "log-sink-1")
    assert first.kind == VertexKind.SINK
    assert first.position == (1, 2)
    # templates são copiados, nunca compartilhados
    first.config["sink"]["log"]["level"] = "debug"
    assert second.config == {"sink": {"log": {}}}


def test_vertex_from_unknown_template_is_typed_not_found():
    graph = PipelineGraph()
    with pytest.raises(TemplateNotFoundError) as exc:
        vertex_from_template(graph, "unknown")
    assert isinstance(exc.value, NotFoundError)
    assert exc.value.details["template"] == "unknown"
    assert "log-sink" in exc.value.details["available"]
    assert len(graph) == 0
