# src/pipeforge/core/graph/model.py
"""
Modelo semântico do grafo de pipeline.

O grafo é uma arena plana: vértices indexados por id (ordem de inserção
preservada) e arestas que referenciam vértices apenas por id. Não há
posse embutida entre objetos, o que mantém o modelo livre de ciclos de
referência.

Invariantes:
    - ids de vértice são únicos no grafo
    - toda aresta referencia vértices existentes
    - `Vertex.kind` é sempre derivado da configuração, nunca armazenado

Posição visual (`Vertex.position`) e id de aresta (`Edge.id`) são
atributos de apresentação: não participam da igualdade.
"""

from __future__ import annotations

import json
from copy import deepcopy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pipeforge.core.exceptions import DuplicateVertexError, NotFoundError, VertexNotFoundError


class VertexKind(str, Enum):
    """
    Classificação estrutural de um vértice.

    - SOURCE: configuração com chave `source`
    - SINK: configuração com chave `sink`
    - TRANSFORM: qualquer outra configuração não vazia (udf, builtin, ...)
    - UNCLASSIFIED: vértice ainda sem configuração

    `source` tem precedência sobre `sink` quando ambas aparecem.
    """

    SOURCE = "source"
    TRANSFORM = "transform"
    SINK = "sink"
    UNCLASSIFIED = "unclassified"


def derive_vertex_kind(config: Optional[Dict[str, Any]]) -> VertexKind:
    if not config:
        return VertexKind.UNCLASSIFIED
    if "source" in config:
        return VertexKind.SOURCE
    if "sink" in config:
        return VertexKind.SINK
    return VertexKind.TRANSFORM


@dataclass
class Vertex:
    id: str
    config: Dict[str, Any] = field(default_factory=dict)
    position: Optional[Tuple[float, float]] = field(default=None, compare=False)

    @property
    def kind(self) -> VertexKind:
        return derive_vertex_kind(self.config)


@dataclass
class Edge:
    source: str
    target: str
    conditions: Any = None
    id: Optional[str] = field(default=None, compare=False)

    @classmethod
    def from_wrapped(
        cls,
        source: str,
        target: str,
        data: Optional[Dict[str, Any]] = None,
        id: Optional[str] = None,
    ) -> "Edge":
        """Cria uma aresta a partir dos dados auxiliares de um editor visual.

        Editores guardam as condições como `{"conditions": {"conditions": X}}`;
        apenas `X` (o payload do documento) é mantido na aresta.
        """
        conditions = None
        wrapper = (data or {}).get("conditions")
        if isinstance(wrapper, dict) and "conditions" in wrapper:
            conditions = wrapper["conditions"]
        elif wrapper is not None:
            conditions = wrapper
        return cls(source=source, target=target, conditions=conditions, id=id)


class PipelineGraph:
    """
    Grafo dirigido de vértices (sources, transforms, sinks) e arestas.

    Operações de mutação preservam os invariantes do grafo:
    `add_vertex` recusa ids repetidos, `connect` recusa ids desconhecidos e
    `remove_vertex` remove em cascata as arestas incidentes.
    """

    def __init__(self, vertices: Optional[List[Vertex]] = None, edges: Optional[List[Edge]] = None):
        self._vertices: Dict[str, Vertex] = {}
        self._edges: List[Edge] = []
        for vertex in vertices or []:
            self.add_vertex(vertex)
        for edge in edges or []:
            self.add_edge(edge)

    # ------------------------------------------------------------------
    # Vértices
    # ------------------------------------------------------------------
    @property
    def vertices(self) -> List[Vertex]:
        return list(self._vertices.values())

    @property
    def vertex_ids(self) -> List[str]:
        return list(self._vertices)

    def has_vertex(self, vertex_id: str) -> bool:
        return vertex_id in self._vertices

    def get_vertex(self, vertex_id: str) -> Vertex:
        if vertex_id not in self._vertices:
            raise VertexNotFoundError(
                f"Vértice não encontrado: {vertex_id}", details={"vertex_id": vertex_id}
            )
        return self._vertices[vertex_id]

    def add_vertex(self, vertex: Vertex) -> Vertex:
        if vertex.id in self._vertices:
            raise DuplicateVertexError(
                f"Vértice duplicado: {vertex.id}", details={"vertex_id": vertex.id}
            )
        self._vertices[vertex.id] = vertex
        return vertex

    def update_config(self, vertex_id: str, config: Dict[str, Any]) -> Vertex:
        vertex = self.get_vertex(vertex_id)
        vertex.config = deepcopy(config)
        return vertex

    def remove_vertex(self, vertex_id: str) -> Vertex:
        vertex = self.get_vertex(vertex_id)
        del self._vertices[vertex_id]
        self._edges = [
            e for e in self._edges if e.source != vertex_id and e.target != vertex_id
        ]
        return vertex

    def of_kind(self, kind: VertexKind) -> List[Vertex]:
        return [v for v in self._vertices.values() if v.kind == kind]

    # ------------------------------------------------------------------
    # Arestas
    # ------------------------------------------------------------------
    @property
    def edges(self) -> List[Edge]:
        return list(self._edges)

    def add_edge(self, edge: Edge) -> Edge:
        for endpoint in (edge.source, edge.target):
            if endpoint not in self._vertices:
                raise VertexNotFoundError(
                    f"Aresta referencia vértice inexistente: {endpoint}",
                    details={"source": edge.source, "target": edge.target},
                )
        if edge.id is None:
            edge.id = self._next_edge_id()
        self._edges.append(edge)
        return edge

    def connect(self, source: str, target: str, conditions: Any = None) -> Edge:
        return self.add_edge(Edge(source=source, target=target, conditions=conditions))

    def disconnect(self, edge_id: str) -> Edge:
        for idx, edge in enumerate(self._edges):
            if edge.id == edge_id:
                return self._edges.pop(idx)
        raise NotFoundError(f"Aresta não encontrada: {edge_id}", details={"edge_id": edge_id})

    def set_edge_conditions(self, edge_id: str, conditions: Any) -> Edge:
        for edge in self._edges:
            if edge.id == edge_id:
                edge.conditions = conditions
                return edge
        raise NotFoundError(f"Aresta não encontrada: {edge_id}", details={"edge_id": edge_id})

    def _next_edge_id(self) -> str:
        taken = {e.id for e in self._edges}
        idx = len(self._edges)
        while f"e-{idx}" in taken:
            idx += 1
        return f"e-{idx}"

    # ------------------------------------------------------------------
    # Utilitários
    # ------------------------------------------------------------------
    def __iter__(self) -> Iterator[Vertex]:
        return iter(self._vertices.values())

    def __len__(self) -> int:
        return len(self._vertices)

    def __eq__(self, other: object) -> bool:
        """Igualdade semântica: vértices (ids + configs) e conectividade + condições.

        A ordem de vértices e de arestas não importa; ids sintéticos e posições são ignorados.
        """
        if not isinstance(other, PipelineGraph):
            return NotImplemented
        mine = {v.id: v.config for v in self._vertices.values()}
        theirs = {v.id: v.config for v in other._vertices.values()}
        if mine != theirs:
            return False
        return _edge_multiset(self._edges) == _edge_multiset(other._edges)

    def copy(self) -> "PipelineGraph":
        return PipelineGraph(
            vertices=[Vertex(v.id, deepcopy(v.config), v.position) for v in self._vertices.values()],
            edges=[Edge(e.source, e.target, deepcopy(e.conditions), e.id) for e in self._edges],
        )

    def __repr__(self) -> str:
        return f"PipelineGraph(vertices={self.vertex_ids!r}, edges={len(self._edges)})"


def _edge_multiset(edges: List[Edge]) -> List[Tuple[str, str, str]]:
    # conditions podem ser dicts (não hasheáveis): compara via JSON canônico
    return sorted(
        (e.source, e.target, json.dumps(e.conditions, sort_keys=True, default=str))
        for e in edges
    )
