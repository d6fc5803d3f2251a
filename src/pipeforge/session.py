# src/pipeforge/session.py
"""
Sessão de edição do pipeforge.

A sessão orquestra o fluxo completo do motor para exatamente um projeto
ativo:

    grafo em memória → serializer → directory builder → filesystem
    virtual → commit no histórico → registro na Project Store

Decisões arquiteturais:
    - No máximo um projeto ativo; abrir outro substitui o atual
    - Falhas de importação do pipeline nunca deixam a sessão pela metade:
      o estado anterior é preservado e o evento `pipeline_import_failed`
      é registrado antes da exceção propagar
    - Mutações de scripts e manifests sincronizam imediatamente (commit +
      save); edições do grafo só são versionadas em `export_pipeline`
    - Uma mutação cuja estrutura não pode ser materializada
      (`PathConflictError`) é desfeita no projeto ativo e registrada como
      `sync_failed`; histórico e store permanecem como estavam
    - Cada projeto aberto recebe um tracker (e um filesystem) próprio;
      nenhum estado mutável é compartilhado entre projetos
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from pipeforge.core.config.loader import EngineSettings
from pipeforge.core.errors import payload_from_exception, project_not_found
from pipeforge.core.exceptions import (
    MalformedPipelineError,
    NoActiveProjectError,
    PathConflictError,
    ProjectNotFoundError,
)
from pipeforge.core.graph.model import Edge, PipelineGraph, Vertex
from pipeforge.core.graph.templates import vertex_from_template
from pipeforge.core.project.model import MANIFESTS, Project, Script, ScriptType
from pipeforge.core.serializer.pipeline_yaml import (
    ImportedPipeline,
    export_pipeline,
    import_pipeline,
    name_pipeline,
)
from pipeforge.core.traceability.event_log import EventLog, utc_now
from pipeforge.history.tracker import CommitOutcome, VersionHistoryTracker
from pipeforge.persistence.project_store import ProjectStore, ProjectSummary


DEFAULT_COMMIT_MESSAGE = "Update repository"


class ProjectSession:
    """Sessão com um único projeto ativo, seu grafo de trabalho e histórico."""

    def __init__(
        self,
        store: ProjectStore,
        settings: Optional[EngineSettings] = None,
        *,
        clock: Callable[[], datetime] = utc_now,
        event_log: Optional[EventLog] = None,
    ):
        self.store = store
        self.settings = settings or EngineSettings()
        self._clock = clock
        if event_log is None:
            event_log = store.event_log if store.event_log is not None else EventLog(clock=clock)
        self.event_log = event_log

        self._project: Optional[Project] = None
        self._tracker: Optional[VersionHistoryTracker] = None
        self.graph = PipelineGraph()
        self.dropped_edges: List[Dict[str, Any]] = []

    # ------------------------------------------------------------------
    # Estado
    # ------------------------------------------------------------------
    @property
    def is_open(self) -> bool:
        return self._project is not None

    @property
    def project(self) -> Project:
        if self._project is None:
            raise NoActiveProjectError(
                "Nenhum projeto ativo",
                hint="Inicialize ou abra um projeto antes de editar.",
            )
        return self._project

    @property
    def tracker(self) -> VersionHistoryTracker:
        if self._tracker is None:
            raise NoActiveProjectError("Nenhum projeto ativo")
        return self._tracker

    def _new_tracker(self) -> VersionHistoryTracker:
        return VersionHistoryTracker(
            settings=self.settings,
            clock=self._clock,
            event_log=self.event_log,
        )

    # ------------------------------------------------------------------
    # Ciclo de vida de projetos
    # ------------------------------------------------------------------
    def list_projects(self) -> List[ProjectSummary]:
        return sorted(self.store.list(), key=lambda s: s.last_modified, reverse=True)

    def initialize_project(self, name: str) -> Project:
        """Cria, versiona e persiste um projeto vazio, tornando-o ativo."""
        project = self.store.create(name)
        tracker = self._new_tracker()
        tracker.initialize(project)

        self._activate(project, tracker, PipelineGraph(), [])
        self.event_log.log(
            event_type="project_opened",
            message=f"Projeto inicializado: {name}",
            payload={"name": name, "created": True, "head": tracker.head},
        )
        return project

    def open_project(self, name: str) -> Project:
        """
        Abre um projeto persistido: importa o pipeline e reconstrói o histórico.

        Raises:
            ProjectNotFoundError: Se o projeto não existir na store.
            MalformedPipelineError: Se o pipeline salvo não puder ser importado
                (a sessão permanece como estava).
        """
        project = self.store.load(name)
        if project is None:
            payload = project_not_found(name=name)
            raise ProjectNotFoundError(
                f"Projeto não encontrado: {name}", details=payload.details, hint=payload.hint
            )

        graph, dropped = PipelineGraph(), []
        if project.pipeline:
            imported = self._import(project.pipeline, source=name)
            graph, dropped = imported.graph, imported.dropped_edges

        tracker = self._new_tracker()
        tracker.initialize(project)

        self._activate(project, tracker, graph, dropped)
        self.event_log.log(
            event_type="project_opened",
            message=f"Projeto aberto: {name}",
            payload={
                "name": name,
                "created": False,
                "head": tracker.head,
                "vertices": len(graph),
                "scripts": len(project.scripts),
            },
        )
        return project

    def close_project(self) -> None:
        if self._project is None:
            return
        name = self._project.name
        self._activate(None, None, PipelineGraph(), [])
        self.event_log.log(
            event_type="project_closed",
            message=f"Projeto fechado: {name}",
            payload={"name": name},
        )

    def delete_project(self, name: str) -> bool:
        """Remove um projeto da store; fecha a sessão se ele estiver ativo."""
        if self._project is not None and self._project.name == name:
            self.close_project()
        return self.store.delete(name)

    def _activate(
        self,
        project: Optional[Project],
        tracker: Optional[VersionHistoryTracker],
        graph: PipelineGraph,
        dropped: List[Dict[str, Any]],
    ) -> None:
        self._project = project
        self._tracker = tracker
        self.graph = graph
        self.dropped_edges = dropped

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    def _import(self, text: str, *, source: Optional[str] = None) -> ImportedPipeline:
        try:
            return import_pipeline(text, settings=self.settings)
        except MalformedPipelineError as exc:
            payload = payload_from_exception(exc).to_dict()
            payload["details"]["source"] = source
            self.event_log.warning(
                event_type="pipeline_import_failed",
                message="Falha ao importar pipeline",
                payload=payload,
            )
            raise

    def import_pipeline_text(self, text: str) -> ImportedPipeline:
        """Substitui o grafo de trabalho pelo documento (apenas em caso de sucesso)."""
        imported = self._import(text, source="import")
        self.graph = imported.graph
        self.dropped_edges = imported.dropped_edges
        return imported

    def export_pipeline(
        self,
        pipeline_name: Optional[str] = None,
        *,
        message: Optional[str] = None,
    ) -> str:
        """
        Exporta o grafo de trabalho para o projeto ativo.

        Com `pipeline_name`, o placeholder de `metadata.name` é substituído
        (exportação final). O texto resultante vira o pipeline do projeto,
        que é versionado e persistido.
        """
        text = export_pipeline(self.graph, settings=self.settings)
        if pipeline_name:
            text = name_pipeline(text, pipeline_name)

        def _set_pipeline(project: Project) -> None:
            project.pipeline = text

        self._apply(_set_pipeline, message or "Update pipeline")
        return text

    # ------------------------------------------------------------------
    # Scripts e manifests
    # ------------------------------------------------------------------
    def add_script(
        self,
        name: str,
        body: str,
        script_type: ScriptType = ScriptType.MAP,
    ) -> Script:
        script = Script(name=name, type=ScriptType(script_type), body=body)
        return self._apply(lambda project: project.add_script(script), f"Add script {name}")

    def edit_script(self, name: str, new_name: Optional[str] = None, body: Optional[str] = None) -> Script:
        """Edita (e opcionalmente renomeia) um script; renomear é remover + inserir."""
        target = new_name or name
        return self._apply(
            lambda project: project.rename_script(name, target, body=body),
            f"Update script {target}",
        )

    def remove_script(self, name: str) -> Script:
        return self._apply(lambda project: project.remove_script(name), f"Remove script {name}")

    def add_manifest(self, name: str, content: Any, namespace: str = MANIFESTS) -> None:
        self._apply(
            lambda project: project.add_manifest(name, content, namespace=namespace),
            f"Add {namespace}/{name}",
        )

    def _apply(self, change: Callable[[Project], Any], message: str) -> Any:
        project = self.project
        backup = project.to_dict()
        result = change(project)
        try:
            self.sync(message)
        except PathConflictError as exc:
            self._project = Project.from_dict(backup)
            self.event_log.warning(
                event_type="sync_failed",
                message=f"Alteração desfeita: {message}",
                payload=payload_from_exception(exc).to_dict(),
            )
            raise
        return result

    def sync(self, message: str = DEFAULT_COMMIT_MESSAGE) -> CommitOutcome:
        """Versiona o estado atual do projeto ativo e o persiste na store."""
        project = self.project
        outcome = self.tracker.update(project, message)
        self.store.save(project)
        return outcome

    # ------------------------------------------------------------------
    # Grafo de trabalho
    # ------------------------------------------------------------------
    def add_vertex_from_template(
        self,
        template: str,
        *,
        position: Optional[Tuple[float, float]] = None,
    ) -> Vertex:
        return vertex_from_template(self.graph, template, position=position)

    def update_vertex_config(self, vertex_id: str, config: Dict[str, Any]) -> Vertex:
        return self.graph.update_config(vertex_id, config)

    def remove_vertex(self, vertex_id: str) -> Vertex:
        return self.graph.remove_vertex(vertex_id)

    def connect(self, source: str, target: str, conditions: Any = None) -> Edge:
        return self.graph.connect(source, target, conditions)

    def disconnect(self, edge_id: str) -> Edge:
        return self.graph.disconnect(edge_id)

    def set_edge_conditions(self, edge_id: str, conditions: Any) -> Edge:
        return self.graph.set_edge_conditions(edge_id, conditions)
