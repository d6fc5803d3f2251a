# src/pipeforge/core/project/structure.py
"""
Directory Structure Builder: materialização determinística do projeto.

Expande um `Project` na árvore lógica de arquivos exportada/versionada,
como um mapa plano e ordenado de caminho relativo → conteúdo.

Regras (nesta ordem):
    1. `pipeline.yaml` = texto do pipeline (ou vazio)
    2. `requirements.txt` = manifest de dependências
    3. por script: `scripts/<fs>.py` e `dockerfiles/<fs>/Dockerfile`;
       o nome do script é marcado como processado
    4. entradas de `manifests["dockerfiles"]` → `dockerfiles/<chave>` e de
       `manifests["manifests"]` → `manifests/<chave>`, somente se a chave
       não pertencer a um script processado: chave igual ao nome do script
       (ou à forma sanitizada) e, em `dockerfiles`, também `<fs>/Dockerfile`;
       chaves aninhadas como `even-odd/values.yaml` são sempre mantidas
    5. valores estruturados passam adiante como estruturados; texto como
       texto (serializar é responsabilidade de quem grava bytes,
       ver `render_file_content`)

Decisões arquiteturais:
    - Um artefato fornecido à mão nunca sobrescreve nem duplica o artefato
      gerado para o mesmo script
    - Coleções ausentes são tratadas como vazias; o builder só devolve
      None quando o próprio projeto é None
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional, Set

import yaml  # PyYAML

from pipeforge.artifacts.generators import (
    DEFAULT_NAMESPACE,
    generate_build_file,
    generate_dependency_manifest,
    generate_deployment_manifests,
)
from pipeforge.core.naming import build_file_key, owns_key, script_file_name

from .model import DOCKERFILES, MANIFESTS, Project


PIPELINE_FILE = "pipeline.yaml"
DEPENDENCY_FILE = "requirements.txt"


def _owned(namespace: str, key: str, processed: Set[str]) -> bool:
    for name in processed:
        if owns_key(name, key):
            return True
        if namespace == DOCKERFILES and key == build_file_key(name):
            return True
    return False


def build_directory_structure(
    project: Optional[Project],
    *,
    include_deployments: bool = False,
    namespace: str = DEFAULT_NAMESPACE,
    pipeline_file: str = PIPELINE_FILE,
) -> Optional[Dict[str, Any]]:
    """
    Constrói a estrutura de diretórios completa do projeto.

    Args:
        project (Optional[Project]): Projeto a materializar.
        include_deployments (bool): Inclui descritores Deployment/Service
            gerados para cada script em `manifests/`.
        namespace (str): Namespace dos descritores gerados.
        pipeline_file (str): Nome do arquivo do pipeline declarativo.

    Returns:
        Optional[Dict[str, Any]]: caminho relativo → conteúdo (texto ou
        estruturado), ou None para projeto None.
    """
    if project is None:
        return None

    structure: Dict[str, Any] = {
        pipeline_file: project.pipeline or "",
        DEPENDENCY_FILE: generate_dependency_manifest(),
    }

    processed: Set[str] = set()
    scripts = project.scripts or {}
    for name, script in scripts.items():
        structure[f"scripts/{script_file_name(name)}"] = script.body
        structure[f"{DOCKERFILES}/{build_file_key(name)}"] = generate_build_file(name)
        processed.add(name)

    for key, content in project.manifest_entries(DOCKERFILES).items():
        if not _owned(DOCKERFILES, key, processed):
            structure[f"{DOCKERFILES}/{key}"] = content

    custom_manifests = project.manifest_entries(MANIFESTS)
    for key, content in custom_manifests.items():
        if not _owned(MANIFESTS, key, processed):
            structure[f"{MANIFESTS}/{key}"] = content

    if include_deployments:
        for name in scripts:
            for file_name, descriptor in generate_deployment_manifests(name, namespace).items():
                structure.setdefault(f"{MANIFESTS}/{file_name}", descriptor)

    return structure


def render_file_content(path: str, content: Any) -> bytes:
    """
    Serializa o conteúdo de uma entrada da estrutura para bytes.

    - bytes passam intactos
    - texto é codificado em UTF-8
    - estruturado vira JSON (para `.json`) ou YAML (demais extensões),
      sempre com ordem de chaves preservada
    """
    if isinstance(content, (bytes, bytearray)):
        return bytes(content)
    if isinstance(content, str):
        return content.encode("utf-8")
    if content is None:
        return b""
    if path.lower().endswith(".json"):
        return json.dumps(content, ensure_ascii=False, indent=2).encode("utf-8")
    return yaml.safe_dump(content, sort_keys=False, allow_unicode=True).encode("utf-8")
