# src/pipeforge/core/project/model.py
"""
Modelo de projeto (repositório) do pipeforge.

Um `Project` é a unidade de persistência e de histórico: o texto do
pipeline declarativo, os scripts de transformação, os artefatos
fornecidos à mão (Dockerfiles e manifests) e os timestamps de ciclo de
vida.

Registro persistido (estável entre leituras e escritas):

    {
        "name": "demo",
        "pipeline": "apiVersion: ...",        # ou null
        "scripts": {"even-odd": {"type": "map", "data": "..."}},
        "manifests": {"dockerfiles": {...}, "manifests": {...}},
        "createdAt": "2026-01-16T12:00:00+00:00",
        "lastModified": "2026-01-16T12:00:00+00:00"
    }

Decisões arquiteturais:
    - O nome do script é a chave de endereçamento; renomear é sempre
      remover + inserir, nunca mutar a chave no lugar
    - O nome do projeto é imutável após a criação
    - `from_dict` aceita formatos legados (script como string pura,
      `dockerfiles` no topo do registro, manifests sem namespace)
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Optional

from pipeforge.core.exceptions import DuplicateScriptError, ScriptNotFoundError
from pipeforge.core.traceability.event_log import ensure_utc, iso_utc, utc_now


DOCKERFILES = "dockerfiles"
MANIFESTS = "manifests"
NAMESPACES = (DOCKERFILES, MANIFESTS)


class ScriptType(str, Enum):
    MAP = "map"
    REDUCE = "reduce"


@dataclass
class Script:
    name: str
    type: ScriptType = ScriptType.MAP
    body: str = ""

    def to_record(self) -> Dict[str, Any]:
        return {"type": self.type.value, "data": self.body}

    @classmethod
    def from_record(cls, name: str, record: Any) -> "Script":
        if isinstance(record, str):
            return cls(name=name, type=ScriptType.MAP, body=record)
        record = record or {}
        return cls(
            name=name,
            type=ScriptType(record.get("type") or ScriptType.MAP.value),
            body=record.get("data") or "",
        )


def _empty_manifests() -> Dict[str, Dict[str, Any]]:
    return {DOCKERFILES: {}, MANIFESTS: {}}


def parse_timestamp(value: Any, default: datetime) -> datetime:
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str) and value:
        return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    return default


@dataclass
class Project:
    """
    Projeto de pipeline (aka repositório).

    Campos:
    - name: identidade imutável
    - pipeline: texto YAML do pipeline, ou None antes da primeira exportação
    - scripts: nome → Script
    - manifests: namespace (`dockerfiles`, `manifests`) → chave → conteúdo
      (texto ou estruturado)
    - created_at / last_modified: timestamps UTC
    """

    name: str
    pipeline: Optional[str] = None
    scripts: Dict[str, Script] = field(default_factory=dict)
    manifests: Dict[str, Dict[str, Any]] = field(default_factory=_empty_manifests)
    created_at: datetime = field(default_factory=utc_now)
    last_modified: datetime = field(default_factory=utc_now)

    @classmethod
    def create(cls, name: str, *, clock: Callable[[], datetime] = utc_now) -> "Project":
        """Inicializa um projeto vazio (pipeline vazio, sem scripts)."""
        now = ensure_utc(clock())
        return cls(name=name, created_at=now, last_modified=now)

    # ------------------------------------------------------------------
    # Scripts
    # ------------------------------------------------------------------
    def add_script(self, script: Script, *, replace: bool = True) -> Script:
        if not replace and script.name in self.scripts:
            raise DuplicateScriptError(
                f"Script duplicado: {script.name}", details={"script": script.name}
            )
        self.scripts[script.name] = script
        return script

    def get_script(self, name: str) -> Script:
        if name not in self.scripts:
            raise ScriptNotFoundError(f"Script não encontrado: {name}", details={"script": name})
        return self.scripts[name]

    def remove_script(self, name: str) -> Script:
        script = self.get_script(name)
        del self.scripts[name]
        return script

    def rename_script(self, old_name: str, new_name: str, *, body: Optional[str] = None) -> Script:
        """Renomeia (e opcionalmente edita) um script: remove + insere."""
        current = self.get_script(old_name)
        if new_name != old_name and new_name in self.scripts:
            raise DuplicateScriptError(
                f"Script duplicado: {new_name}", details={"script": new_name}
            )
        self.remove_script(old_name)
        renamed = Script(
            name=new_name,
            type=current.type,
            body=current.body if body is None else body,
        )
        self.scripts[new_name] = renamed
        return renamed

    # ------------------------------------------------------------------
    # Manifests
    # ------------------------------------------------------------------
    def add_manifest(self, key: str, content: Any, *, namespace: str = MANIFESTS) -> None:
        if namespace not in NAMESPACES:
            raise ValueError(f"Namespace de manifest inválido: {namespace}")
        self.manifests.setdefault(namespace, {})[key] = deepcopy(content)

    def manifest_entries(self, namespace: str) -> Dict[str, Any]:
        return dict((self.manifests or {}).get(namespace) or {})

    # ------------------------------------------------------------------
    # Serialização
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "pipeline": self.pipeline,
            "scripts": {name: s.to_record() for name, s in self.scripts.items()},
            "manifests": {ns: deepcopy(self.manifest_entries(ns)) for ns in NAMESPACES},
            "createdAt": iso_utc(self.created_at),
            "lastModified": iso_utc(self.last_modified),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        now = utc_now()
        created = parse_timestamp(data.get("createdAt"), now)
        scripts = {
            name: Script.from_record(name, record)
            for name, record in (data.get("scripts") or {}).items()
        }

        raw = data.get("manifests") or {}
        manifests = _empty_manifests()
        if raw and set(raw) <= set(NAMESPACES) and all(isinstance(v, dict) for v in raw.values()):
            for ns in NAMESPACES:
                manifests[ns].update(deepcopy(raw.get(ns) or {}))
        else:
            manifests[MANIFESTS].update(deepcopy(raw))
        for key, content in (data.get(DOCKERFILES) or {}).items():
            manifests[DOCKERFILES].setdefault(key, content)

        return cls(
            name=data["name"],
            pipeline=data.get("pipeline"),
            scripts=scripts,
            manifests=manifests,
            created_at=created,
            last_modified=parse_timestamp(data.get("lastModified"), created),
        )
