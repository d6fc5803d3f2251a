# src/pipeforge/core/serializer/pipeline_yaml.py
"""
Serializer declarativo do pipeline (YAML).

Este módulo traduz, nos dois sentidos, o grafo semântico
(`PipelineGraph`) e o documento declarativo consumido por ferramentas
externas:

    apiVersion: numaflow.numaproj.io/v1alpha1
    kind: Pipeline
    metadata:
      name: <pipeline-name>
    spec:
      vertices:
        - name: in
          source: {...}
      edges:
        - from: in
          to: out
          conditions: {...}      # opcional

Decisões arquiteturais:
    - Exportação em duas etapas: `export_pipeline` usa um placeholder em
      `metadata.name`; o nome real só entra em `name_pipeline`, no
      momento da exportação final (download). Assim a mesma estrutura pode
      ser pré-visualizada antes de ser nomeada.
    - A ordem das chaves é preservada (`sort_keys=False`) para que
      reexportações de dados inalterados produzam diffs estáveis.
    - O registro de vértice é `{"name": id, **config}`; um `name` dentro
      da config é sobrescrito pelo id do vértice.
    - `Edge.conditions` guarda exatamente o payload do documento; não há
      embrulho adicional em nenhuma direção.
    - O tipo do vértice nunca é serializado: é sempre rederivado da
      configuração.

Lei de round-trip:
    `import_pipeline(export_pipeline(G)).graph == G` (vértices, configs,
    conectividade e condições). Ids sintéticos de aresta e posições de
    layout não fazem parte do estado semântico.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml  # PyYAML

from pipeforge.core.config.loader import EngineSettings
from pipeforge.core.errors import pipeline_malformed
from pipeforge.core.exceptions import MalformedPipelineError
from pipeforge.core.graph.model import Edge, PipelineGraph, Vertex, VertexKind


PIPELINE_KIND = "Pipeline"


@dataclass
class ImportedPipeline:
    """
    Resultado de `import_pipeline`.

    Campos:
    - graph: grafo reconstruído (com posições de layout por faixa)
    - name: `metadata.name` do documento, quando presente
    - dropped_edges: registros de aresta descartados por referenciarem
      vértices inexistentes
    """

    graph: PipelineGraph
    name: Optional[str] = None
    dropped_edges: List[Dict[str, Any]] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

def vertex_record(vertex: Vertex) -> Dict[str, Any]:
    record: Dict[str, Any] = {"name": vertex.id}
    for key, value in (vertex.config or {}).items():
        if key == "name":
            continue
        record[key] = deepcopy(value)
    return record


def edge_record(edge: Edge) -> Dict[str, Any]:
    record: Dict[str, Any] = {"from": edge.source, "to": edge.target}
    if edge.conditions is not None:
        record["conditions"] = deepcopy(edge.conditions)
    return record


def build_pipeline_document(
    graph: PipelineGraph,
    *,
    settings: Optional[EngineSettings] = None,
) -> Dict[str, Any]:
    """
    Constrói o envelope declarativo do pipeline (com placeholder de nome).

    Arestas que referenciam vértices ausentes nunca são emitidas.

    Args:
        graph (PipelineGraph): Grafo semântico.
        settings (Optional[EngineSettings]): apiVersion e placeholder.

    Returns:
        Dict[str, Any]: Documento pronto para `yaml.safe_dump`.
    """
    settings = settings or EngineSettings()
    known = set(graph.vertex_ids)
    return {
        "apiVersion": settings.api_version,
        "kind": PIPELINE_KIND,
        "metadata": {"name": settings.name_placeholder},
        "spec": {
            "vertices": [vertex_record(v) for v in graph.vertices],
            "edges": [
                edge_record(e)
                for e in graph.edges
                if e.source in known and e.target in known
            ],
        },
    }


def dump_document(document: Dict[str, Any]) -> str:
    return yaml.safe_dump(
        document,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


def export_pipeline(graph: PipelineGraph, *, settings: Optional[EngineSettings] = None) -> str:
    """Exporta o grafo para texto YAML (nome ainda como placeholder)."""
    return dump_document(build_pipeline_document(graph, settings=settings))


def name_pipeline(pipeline: str, name: str) -> str:
    """
    Substitui `metadata.name` no texto exportado (exportação final).

    Apenas `metadata.name` é alterado; a ordem das demais chaves é
    preservada.

    Raises:
        MalformedPipelineError: Se o texto não for um documento de pipeline.
    """
    document = _parse_document(pipeline)
    metadata = document.get("metadata")
    if not isinstance(metadata, dict):
        metadata = {}
    metadata["name"] = name
    if "metadata" in document:
        document["metadata"] = metadata
    else:
        document = _insert_after(document, "kind", "metadata", metadata)
    return dump_document(document)


def _insert_after(document: Dict[str, Any], anchor: str, key: str, value: Any) -> Dict[str, Any]:
    if anchor not in document:
        return {**document, key: value}
    out: Dict[str, Any] = {}
    for k, v in document.items():
        out[k] = v
        if k == anchor:
            out[key] = value
    return out


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------

def _malformed(message: str, reason: str, **details: Any) -> MalformedPipelineError:
    payload = pipeline_malformed(reason=reason)
    return MalformedPipelineError(message, details={**payload.details, **details}, hint=payload.hint)


def _parse_document(text: str) -> Dict[str, Any]:
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise _malformed("YAML de pipeline inválido", str(exc)) from exc
    if not isinstance(document, dict):
        raise _malformed(
            "Documento de pipeline deve ser um mapa",
            "root is not a mapping",
            root_type=type(document).__name__,
        )
    return document


def _row_key(kind: VertexKind) -> str:
    if kind == VertexKind.SOURCE:
        return "source"
    if kind == VertexKind.SINK:
        return "sink"
    return "transform"


def _endpoint(value: Any) -> str:
    return "" if value is None else str(value)


def import_pipeline(text: str, *, settings: Optional[EngineSettings] = None) -> ImportedPipeline:
    """
    Reconstrói o grafo a partir do documento declarativo.

    Layout padrão (apresentação): três faixas horizontais: sources no
    topo, transforms no meio e sinks embaixo, com espaçamento horizontal
    fixo. A faixa é apenas posição inicial; nada dela é persistido.

    Arestas recebem ids sintéticos sequenciais (`e-0`, `e-1`, ...) na
    ordem do documento, inclusive as descartadas, e `conditions` é
    preservado como veio.

    Args:
        text (str): Documento YAML.
        settings (Optional[EngineSettings]): parâmetros de layout.

    Returns:
        ImportedPipeline: grafo, nome declarado e arestas descartadas.

    Raises:
        MalformedPipelineError: YAML inválido, raiz não-mapa, ausência de
            `spec.vertices`, vértice sem `name` ou nomes duplicados.
    """
    settings = settings or EngineSettings()
    document = _parse_document(text)

    spec = document.get("spec")
    if not isinstance(spec, dict) or spec.get("vertices") is None:
        raise _malformed("Invalid pipeline YAML: missing spec.vertices", "missing spec.vertices")
    raw_vertices = spec["vertices"]
    if not isinstance(raw_vertices, list):
        raise _malformed("spec.vertices deve ser uma lista", "spec.vertices is not a list")

    rows: Dict[str, List[Vertex]] = {"source": [], "transform": [], "sink": []}
    seen = set()
    for idx, record in enumerate(raw_vertices):
        if not isinstance(record, dict) or record.get("name") in (None, ""):
            raise _malformed(f"Vértice sem nome na posição {idx}", "vertex without name", index=idx)
        name = str(record["name"])
        if name in seen:
            raise _malformed(f"Vértice duplicado: {name}", "duplicate vertex name", name=name)
        seen.add(name)
        config = {k: deepcopy(v) for k, v in record.items() if k != "name"}
        vertex = Vertex(id=name, config=config)
        rows[_row_key(vertex.kind)].append(vertex)

    graph = PipelineGraph()
    for row, members in rows.items():
        y = settings.row_y[row]
        for index, vertex in enumerate(members):
            vertex.position = (index * settings.x_pitch + settings.x_offset, y)
            graph.add_vertex(vertex)

    dropped: List[Dict[str, Any]] = []
    for idx, record in enumerate(spec.get("edges") or []):
        if not isinstance(record, dict):
            raise _malformed(f"Aresta inválida na posição {idx}", "edge is not a mapping", index=idx)
        source, target = _endpoint(record.get("from")), _endpoint(record.get("to"))
        if not graph.has_vertex(source) or not graph.has_vertex(target):
            dropped.append(dict(record))
            continue
        graph.add_edge(
            Edge(
                source=source,
                target=target,
                conditions=deepcopy(record.get("conditions")),
                id=f"e-{idx}",
            )
        )

    metadata = document.get("metadata")
    name = metadata.get("name") if isinstance(metadata, dict) else None
    return ImportedPipeline(graph=graph, name=name, dropped_edges=dropped)
