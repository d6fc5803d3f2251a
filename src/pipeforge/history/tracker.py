# src/pipeforge/history/tracker.py
"""
Version History Tracker: histórico linear endereçado por conteúdo.

Envolve o filesystem virtual com semântica de snapshot/commit:

    blob   = sha256(bytes do arquivo)
    tree   = {caminho absoluto: blob_id}
    commit = {tree, parent, author, timestamp, message}
    id     = sha256(JSON canônico do commit)

Fluxo de `commit(project, message)`:
    1. ressincroniza o filesystem a partir do projeto
    2. o stage parte da árvore do head; caminhos que sumiram da árvore de
       trabalho saem do stage
    3. cada arquivo da árvore de trabalho é preparado individualmente;
       falhas viram `PartialStageFailure` (registrada como `StageFailure`
       e evento `stage_failed`) e o caminho mantém a versão do head
    4. matriz de status (head / workdir / stage) para todo caminho
    5. nenhum caminho diferente do head → no-op (head inalterado)

Invariantes:
    - Commits formam uma lista simplesmente encadeada (sem branches)
    - Commits são imutáveis; head só avança ao final de um commit bem
      sucedido
    - Autor fixo do sistema (configurável via settings, nunca por chamada)
    - `commit` não é reentrante: uma segunda chamada concorrente levanta
      `CommitInProgressError`

Limites explícitos:
    - Sem branches, merges ou remotos
    - Sem cancelamento de commit em andamento
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from pipeforge.core.config.hashing import compute_canonical_hash, compute_content_hash
from pipeforge.core.config.loader import EngineSettings
from pipeforge.core.errors import payload_from_exception, stage_failed
from pipeforge.core.exceptions import (
    CommitInProgressError,
    CommitNotFoundError,
    HistoryNotInitializedError,
    PartialStageFailure,
    PathNotFoundError,
)
from pipeforge.core.project.model import Project
from pipeforge.core.traceability.event_log import EventLog, iso_utc, utc_now
from pipeforge.vfs.memory_fs import VirtualFileSystem, normalize_path


@dataclass(frozen=True)
class Commit:
    """Snapshot imutável da árvore materializada do projeto."""

    id: str
    message: str
    author_name: str
    author_email: str
    timestamp: str
    parent: Optional[str]
    tree: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "message": self.message,
            "author": {"name": self.author_name, "email": self.author_email},
            "timestamp": self.timestamp,
            "parent": self.parent,
            "tree": dict(self.tree),
        }


@dataclass(frozen=True)
class StageFailure:
    path: str
    exc_type: str
    exc_message: str

    def to_exception(self) -> PartialStageFailure:
        payload = stage_failed(path=self.path, exc_type=self.exc_type, exc_message=self.exc_message)
        return PartialStageFailure(payload.message, details=payload.details, hint=payload.hint)


@dataclass
class StageReport:
    """Resultado do staging de um commit (sucessos, remoções e falhas)."""

    staged: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    failures: List[StageFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass(frozen=True)
class CommitOutcome:
    committed: bool
    head: str
    report: StageReport


@dataclass(frozen=True)
class StatusEntry:
    """
    Linha da matriz de status de um caminho.

    Cada coluna é o blob_id naquele estado, ou None quando o caminho não
    existe (ou não pôde ser lido) no estado.
    """

    path: str
    head: Optional[str]
    workdir: Optional[str]
    stage: Optional[str]

    @property
    def staged_change(self) -> bool:
        return self.stage != self.head

    @property
    def unstaged_change(self) -> bool:
        return self.workdir != self.stage


@dataclass(frozen=True)
class TreeDiff:
    added: List[str]
    removed: List[str]
    modified: List[str]

    @property
    def empty(self) -> bool:
        return not (self.added or self.removed or self.modified)


class VersionHistoryTracker:
    """Histórico de versões de um projeto sobre um filesystem virtual próprio."""

    def __init__(
        self,
        fs: Optional[VirtualFileSystem] = None,
        *,
        settings: Optional[EngineSettings] = None,
        author: Optional[Tuple[str, str]] = None,
        clock: Callable[[], datetime] = utc_now,
        event_log: Optional[EventLog] = None,
    ):
        self._settings = settings or EngineSettings()
        self._fs = fs if fs is not None else VirtualFileSystem()
        self._author = author or self._settings.author
        self._clock = clock
        self.event_log = event_log if event_log is not None else EventLog(clock=clock)

        self._blobs: Dict[str, bytes] = {}
        self._commits: Dict[str, Commit] = {}
        self._index: Dict[str, str] = {}
        self._head: Optional[str] = None
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Estado
    # ------------------------------------------------------------------
    @property
    def fs(self) -> VirtualFileSystem:
        return self._fs

    @property
    def head(self) -> Optional[str]:
        return self._head

    @property
    def is_initialized(self) -> bool:
        return self._head is not None

    @property
    def author(self) -> Tuple[str, str]:
        return self._author

    # ------------------------------------------------------------------
    # Operações de histórico
    # ------------------------------------------------------------------
    def initialize(self, project: Project) -> Commit:
        """
        Cria o primeiro commit do histórico, incondicionalmente.

        Reinicializar um tracker descarta o histórico anterior.
        """
        self._acquire()
        try:
            return self._initialize(project)
        finally:
            self._lock.release()

    def commit(self, project: Project, message: str) -> CommitOutcome:
        """
        Ressincroniza, prepara e versiona a árvore do projeto.

        Returns:
            CommitOutcome: `committed=False` quando nada mudou (head inalterado).

        Raises:
            HistoryNotInitializedError: Se `initialize` ainda não foi chamado.
            CommitInProgressError: Se outro commit estiver em andamento.
            PathConflictError: Se a estrutura do projeto não puder ser
                materializada (filesystem e head permanecem inalterados).
        """
        self._acquire()
        try:
            return self._commit(project, message)
        finally:
            self._lock.release()

    def _initialize(self, project: Project) -> Commit:
        self._blobs.clear()
        self._commits.clear()
        self._head = None
        self._index = {}

        self._sync(project)
        report = self._stage_working_tree()
        commit = self._create_commit(self._settings.initial_message, parent=None)

        self.event_log.log(
            event_type="history_initialized",
            message="Histórico inicializado",
            payload={
                "project": project.name,
                "commit": commit.id,
                "files": len(commit.tree),
                "stage_failures": len(report.failures),
            },
        )
        return commit

    def _commit(self, project: Project, message: str) -> CommitOutcome:
        if self._head is None:
            raise HistoryNotInitializedError(
                "Histórico não inicializado",
                details={"project": project.name},
                hint="Chame `initialize(project)` antes do primeiro commit.",
            )

        head = self._commits[self._head]
        self._index = dict(head.tree)
        self._sync(project)
        report = self._stage_working_tree()

        if not any(entry.staged_change for entry in self._status_rows(head)):
            self.event_log.log(
                event_type="commit_skipped",
                message="Nenhuma alteração desde o head",
                payload={"project": project.name, "head": head.id},
            )
            return CommitOutcome(committed=False, head=head.id, report=report)

        commit = self._create_commit(message, parent=head.id)
        self.event_log.log(
            event_type="commit_created",
            message=message,
            payload={
                "project": project.name,
                "commit": commit.id,
                "parent": head.id,
                "staged": len(report.staged),
                "removed": len(report.removed),
                "stage_failures": len(report.failures),
            },
        )
        return CommitOutcome(committed=True, head=commit.id, report=report)

    def update(self, project: Project, message: str) -> CommitOutcome:
        """Inicializa o histórico na primeira chamada; nas demais, faz commit."""
        if self._head is None:
            commit = self.initialize(project)
            return CommitOutcome(
                committed=True,
                head=commit.id,
                report=StageReport(staged=sorted(commit.tree)),
            )
        return self.commit(project, message)

    # ------------------------------------------------------------------
    # Consulta
    # ------------------------------------------------------------------
    def get_commit(self, commit_id: str) -> Commit:
        if commit_id not in self._commits:
            raise CommitNotFoundError(
                f"Commit não encontrado: {commit_id}", details={"commit": commit_id}
            )
        return self._commits[commit_id]

    def log(self) -> List[Commit]:
        """Commits do head até a raiz."""
        out: List[Commit] = []
        current = self._head
        while current is not None:
            commit = self._commits[current]
            out.append(commit)
            current = commit.parent
        return out

    def tree(self, commit_id: str) -> Dict[str, str]:
        return dict(self.get_commit(commit_id).tree)

    def read_file(self, commit_id: str, path: str) -> bytes:
        tree = self.get_commit(commit_id).tree
        p = normalize_path(path)
        if p not in tree:
            raise PathNotFoundError(
                f"Caminho ausente no commit: {p}", details={"path": p, "commit": commit_id}
            )
        return self._blobs[tree[p]]

    def diff(self, old_id: str, new_id: str) -> TreeDiff:
        old, new = self.tree(old_id), self.tree(new_id)
        return TreeDiff(
            added=sorted(p for p in new if p not in old),
            removed=sorted(p for p in old if p not in new),
            modified=sorted(p for p in new if p in old and new[p] != old[p]),
        )

    def status(self) -> List[StatusEntry]:
        """Matriz de status atual (head / árvore de trabalho / stage)."""
        head = self._commits[self._head] if self._head is not None else None
        return self._status_rows(head)

    # ------------------------------------------------------------------
    # Internos
    # ------------------------------------------------------------------
    def _acquire(self) -> None:
        if not self._lock.acquire(blocking=False):
            raise CommitInProgressError(
                "Já existe um commit em andamento",
                hint="Aguarde a conclusão do commit anterior.",
            )

    def _sync(self, project: Project) -> None:
        self._fs.sync_from_project(
            project,
            include_deployments=self._settings.include_deployments,
            namespace=self._settings.namespace,
            pipeline_file=self._settings.pipeline_file,
        )

    def _stage_working_tree(self) -> StageReport:
        report = StageReport()
        working = list(self._fs.walk_files())

        present = set(working)
        for path in sorted(self._index):
            if path not in present:
                del self._index[path]
                report.removed.append(path)

        for path in working:
            try:
                data = self._fs.read(path)
                blob_id = compute_content_hash(data)
            except Exception as exc:
                failure = StageFailure(path=path, exc_type=type(exc).__name__, exc_message=str(exc))
                report.failures.append(failure)
                self.event_log.warning(
                    event_type="stage_failed",
                    message=f"Falha ao preparar {path}",
                    payload=payload_from_exception(failure.to_exception()).to_dict(),
                )
                continue
            self._blobs.setdefault(blob_id, data)
            self._index[path] = blob_id
            report.staged.append(path)
        return report

    def _status_rows(self, head: Optional[Commit]) -> List[StatusEntry]:
        head_tree = head.tree if head is not None else {}
        workdir = {p: compute_content_hash(b) for p, b in self._fs.snapshot().items()}
        paths = sorted(set(head_tree) | set(workdir) | set(self._index))
        return [
            StatusEntry(
                path=p,
                head=head_tree.get(p),
                workdir=workdir.get(p),
                stage=self._index.get(p),
            )
            for p in paths
        ]

    def _create_commit(self, message: str, *, parent: Optional[str]) -> Commit:
        name, email = self._author
        tree = dict(sorted(self._index.items()))
        record = {
            "tree": tree,
            "parent": parent,
            "author": {"name": name, "email": email},
            "timestamp": iso_utc(self._clock()),
            "message": message,
        }
        commit = Commit(
            id=compute_canonical_hash(record),
            message=message,
            author_name=name,
            author_email=email,
            timestamp=record["timestamp"],
            parent=parent,
            tree=tree,
        )
        self._commits[commit.id] = commit
        self._head = commit.id
        return commit
