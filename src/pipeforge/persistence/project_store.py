# src/pipeforge/persistence/project_store.py
"""Persistência canônica de projetos (v1).

A Project Store guarda registros completos de projeto, endereçados pelo
nome (identidade imutável), sobrevivendo entre sessões.

Decisões (v1):
- Formato: JSON (um arquivo por projeto)
- Caminho determinístico: `<root>/<nome url-quoted>.json`
- Escrita atômica: arquivo temporário no mesmo diretório + `os.replace`
- Eventos `project_saved` / `project_deleted` registrados no Event Log
  (quando fornecido)

Limites explícitos:
- Sem atualizações parciais: `save` sempre grava o registro inteiro
- Sem concorrência otimista: saves concorrentes são last-write-wins
- Erros de I/O (`OSError`) propagam sem tradução
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union
from urllib.parse import quote, unquote

from pipeforge.core.config.loader import EngineSettings
from pipeforge.core.errors import duplicate_project
from pipeforge.core.exceptions import DuplicateProjectError, StoreClosedError
from pipeforge.core.project.model import Project, parse_timestamp
from pipeforge.core.traceability.event_log import EventLog, ensure_utc, iso_utc, utc_now


RECORD_SUFFIX = ".json"


@dataclass(frozen=True)
class ProjectSummary:
    """Resumo (v1) de um projeto persistido, para listagem."""

    name: str
    created_at: datetime
    last_modified: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "createdAt": iso_utc(self.created_at),
            "lastModified": iso_utc(self.last_modified),
        }


class ProjectStore:
    """Store canônica (v1) de projetos nomeados."""

    def __init__(
        self,
        root: Union[str, Path],
        *,
        clock: Callable[[], datetime] = utc_now,
        event_log: Optional[EventLog] = None,
    ):
        self.root = Path(root)
        self._clock = clock
        self.event_log = event_log
        self._open = False

    @classmethod
    def from_settings(
        cls,
        settings: Optional[EngineSettings] = None,
        *,
        clock: Callable[[], datetime] = utc_now,
        event_log: Optional[EventLog] = None,
    ) -> "ProjectStore":
        """Store enraizada em `settings.store_root` (config `store.root`)."""
        settings = settings or EngineSettings()
        return cls(settings.store_root, clock=clock, event_log=event_log)

    # ------------------------------------------------------------------
    # Ciclo de vida
    # ------------------------------------------------------------------
    def open(self) -> "ProjectStore":
        self.root.mkdir(parents=True, exist_ok=True)
        self._open = True
        return self

    def close(self) -> None:
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def __enter__(self) -> "ProjectStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _ensure_open(self) -> None:
        if not self._open:
            raise StoreClosedError(
                "Project Store fechada",
                details={"root": str(self.root)},
                hint="Chame `open()` (ou use a store como context manager) antes de operar.",
            )

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------
    def record_path(self, name: str) -> Path:
        """Retorna o caminho determinístico do registro de um projeto."""
        return self.root / f"{quote(name, safe='')}{RECORD_SUFFIX}"

    # ------------------------------------------------------------------
    # Persist / Load
    # ------------------------------------------------------------------
    def save(self, project: Project) -> Project:
        """Upsert do registro completo, com `last_modified = agora`."""
        self._ensure_open()
        if not project.name:
            raise ValueError("Projeto sem nome não pode ser persistido")

        project.last_modified = ensure_utc(self._clock())
        path = self.record_path(project.name)
        self._write_atomic(path, project.to_dict())

        self._record_event(
            "project_saved",
            f"Projeto salvo: {project.name}",
            {"name": project.name, "path": path.name},
        )
        return project

    def create(self, name: str) -> Project:
        """
        Cria e persiste um projeto vazio.

        Raises:
            DuplicateProjectError: Se já existir um projeto com este nome.
        """
        self._ensure_open()
        if self.record_path(name).exists():
            payload = duplicate_project(name=name)
            raise DuplicateProjectError(
                f"Projeto já existe: {name}", details=payload.details, hint=payload.hint
            )
        project = Project.create(name, clock=self._clock)
        return self.save(project)

    def load(self, name: str) -> Optional[Project]:
        """Carrega um projeto pelo nome; None quando não existe."""
        self._ensure_open()
        path = self.record_path(name)
        if not path.exists():
            return None
        return Project.from_dict(self._read(path))

    def exists(self, name: str) -> bool:
        self._ensure_open()
        return self.record_path(name).exists()

    def list(self) -> List[ProjectSummary]:
        """Resumo de todos os projetos persistidos (ordenado por nome)."""
        self._ensure_open()
        summaries: List[ProjectSummary] = []
        for path in sorted(self.root.glob(f"*{RECORD_SUFFIX}")):
            data = self._read(path)
            created = parse_timestamp(data.get("createdAt"), utc_now())
            summaries.append(
                ProjectSummary(
                    name=data.get("name") or unquote(path.stem),
                    created_at=created,
                    last_modified=parse_timestamp(data.get("lastModified"), created),
                )
            )
        return summaries

    def delete(self, name: str) -> bool:
        """Remove o registro; retorna False quando o projeto não existia."""
        self._ensure_open()
        path = self.record_path(name)
        if not path.exists():
            return False
        path.unlink()
        self._record_event("project_deleted", f"Projeto removido: {name}", {"name": name})
        return True

    # ------------------------------------------------------------------
    # Internos
    # ------------------------------------------------------------------
    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        return json.loads(path.read_text(encoding="utf-8"))

    @staticmethod
    def _write_atomic(path: Path, record: Dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=".tmp-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(record, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def _record_event(self, event_type: str, message: str, payload: Dict[str, Any]) -> None:
        if self.event_log is not None:
            self.event_log.log(event_type=event_type, message=message, payload=payload)
