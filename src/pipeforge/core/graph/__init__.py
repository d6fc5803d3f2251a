# src/pipeforge/core/graph/__init__.py
"""Grafo de pipeline: vértices, arestas, classificação estrutural e templates."""

from .model import Edge, PipelineGraph, Vertex, VertexKind, derive_vertex_kind
from .templates import VERTEX_TEMPLATES, unique_vertex_id, vertex_from_template

__all__ = [
    "Edge",
    "PipelineGraph",
    "Vertex",
    "VertexKind",
    "derive_vertex_kind",
    "VERTEX_TEMPLATES",
    "unique_vertex_id",
    "vertex_from_template",
]
