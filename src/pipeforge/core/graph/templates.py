# src/pipeforge/core/graph/templates.py
"""
Templates de vértices e geração de ids únicos.

Um editor visual cria vértices a partir de templates (arrastar e soltar).
O id do novo vértice é derivado do nome do template e nunca colide com
ids existentes no grafo.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, Iterable, Optional, Tuple

from pipeforge.core.exceptions import TemplateNotFoundError

from .model import PipelineGraph, Vertex


VERTEX_TEMPLATES: Dict[str, Dict[str, Any]] = {
    "generator-source": {
        "source": {"generator": {"rpu": 5, "duration": "1s"}},
    },
    "cat-udf": {
        "udf": {"builtin": {"name": "cat"}},
    },
    "log-sink": {
        "sink": {"log": {}},
    },
}


def unique_vertex_id(existing: Iterable[str], base: str) -> str:
    """Retorna `base`, ou `base-1`, `base-2`, ... se já estiver em uso."""
    taken = set(existing)
    if base not in taken:
        return base
    n = 1
    while f"{base}-{n}" in taken:
        n += 1
    return f"{base}-{n}"


def vertex_from_template(
    graph: PipelineGraph,
    template: str,
    *,
    position: Optional[Tuple[float, float]] = None,
    templates: Optional[Dict[str, Dict[str, Any]]] = None,
) -> Vertex:
    """Instancia um template como novo vértice do grafo.

    Raises:
        TemplateNotFoundError: Se o template não existir.
    """
    catalog = templates if templates is not None else VERTEX_TEMPLATES
    if template not in catalog:
        raise TemplateNotFoundError(
            f"Template desconhecido: {template}",
            details={"template": template, "available": sorted(catalog)},
        )
    config = deepcopy(catalog[template])
    vertex = Vertex(id=unique_vertex_id(graph.vertex_ids, template), config=config, position=position)
    return graph.add_vertex(vertex)
