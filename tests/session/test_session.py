# tests/session/test_session.py
"""
Testes da sessão de edição (fluxo completo do motor).

Os testes asseguram que:
- inicializar um projeto o persiste e cria o primeiro commit
- exportar o pipeline nomeia, versiona e persiste o documento
- abrir um projeto reconstrói grafo, scripts e histórico
- falhas de importação preservam o estado anterior da sessão
- edições de scripts e manifests sincronizam imediatamente
"""

import pytest
import yaml

from pipeforge.core.exceptions import (
    DuplicateProjectError,
    MalformedPipelineError,
    NoActiveProjectError,
    PathConflictError,
    ProjectNotFoundError,
)
from pipeforge.core.graph.model import VertexKind
from pipeforge.core.project.model import DOCKERFILES, ScriptType
from pipeforge.persistence.project_store import ProjectStore
from pipeforge.session import ProjectSession


@pytest.fixture
def session(tmp_path, clock):
    store = ProjectStore(tmp_path / "projects", clock=clock).open()
    yield ProjectSession(store, clock=clock)
    store.close()


def _build_pipeline(session):
    source = session.add_vertex_from_template("generator-source")
    udf = session.add_vertex_from_template("cat-udf")
    sink = session.add_vertex_from_template("log-sink")
    session.connect(source.id, udf.id)
    session.connect(udf.id, sink.id, {"tags": {"operator": "or", "values": ["even"]}})


def test_requires_active_project(session):
    assert not session.is_open
    with pytest.raises(NoActiveProjectError):
        session.project
    with pytest.raises(NoActiveProjectError):
        session.add_script("x", "pass\n")


def test_initialize_project(session):
    project = session.initialize_project("demo")
    assert session.is_open
    assert session.store.exists("demo")
    assert len(session.tracker.log()) == 1
    assert project.pipeline is None
    with pytest.raises(DuplicateProjectError):
        session.initialize_project("demo")


def test_export_names_commits_and_saves(session, clock):
    session.initialize_project("demo")
    _build_pipeline(session)

    clock.advance()
    text = session.export_pipeline("even-odd-pipeline")
    doc = yaml.safe_load(text)
    assert doc["metadata"]["name"] == "even-odd-pipeline"
    assert [v["name"] for v in doc["spec"]["vertices"]] == ["generator-source", "cat-udf", "log-sink"]

    assert session.store.load("demo").pipeline == text
    assert len(session.tracker.log()) == 2
    assert session.tracker.read_file(session.tracker.head, "/pipeline.yaml") == text.encode("utf-8")


def test_export_without_name_keeps_placeholder(session):
    session.initialize_project("demo")
    text = session.export_pipeline()
    assert yaml.safe_load(text)["metadata"]["name"] == "<pipeline-name>"


def test_open_project_rebuilds_state(session, clock):
    session.initialize_project("demo")
    _build_pipeline(session)
    session.add_script("even-odd", "print('x')\n")
    session.export_pipeline("p")
    expected_graph = session.graph.copy()
    session.close_project()
    assert not session.is_open

    project = session.open_project("demo")
    assert session.graph == expected_graph
    assert session.graph.get_vertex("log-sink").kind == VertexKind.SINK
    assert project.scripts["even-odd"].body == "print('x')\n"
    assert "/scripts/even-odd.py" in session.tracker.tree(session.tracker.head)
    events = [e["event_type"] for e in session.event_log.events]
    assert events[-2:] == ["history_initialized", "project_opened"]
    assert "project_closed" in events


def test_open_missing_project(session):
    with pytest.raises(ProjectNotFoundError):
        session.open_project("ghost")


def test_failed_open_keeps_current_project(session):
    session.initialize_project("broken")
    session.project.pipeline = "spec: {}\n"
    session.store.save(session.project)

    session.initialize_project("good")
    _build_pipeline(session)
    graph_before = session.graph.copy()

    with pytest.raises(MalformedPipelineError):
        session.open_project("broken")
    assert session.project.name == "good"
    assert session.graph == graph_before

    [event] = session.event_log.of_type("pipeline_import_failed")
    assert event["level"] == "WARNING"
    assert event["payload"]["type"] == "MALFORMED_PIPELINE"
    assert event["payload"]["details"]["source"] == "broken"


def test_import_pipeline_text_replaces_graph_only_on_success(session):
    session.initialize_project("demo")
    _build_pipeline(session)
    before = session.graph.copy()

    with pytest.raises(MalformedPipelineError):
        session.import_pipeline_text("not: [valid")
    assert session.graph == before

    imported = session.import_pipeline_text(
        "spec:\n  vertices:\n    - name: in\n      source: {}\n  edges:\n    - from: in\n      to: ghost\n"
    )
    assert session.graph.vertex_ids == ["in"]
    assert session.dropped_edges == imported.dropped_edges == [{"from": "in", "to": "ghost"}]


def test_script_edits_sync_immediately(session):
    session.initialize_project("demo")
    session.add_script("counter", "pass\n", ScriptType.REDUCE)
    head_after_add = session.tracker.head
    assert session.store.load("demo").scripts["counter"].type == ScriptType.REDUCE

    renamed = session.edit_script("counter", "tally", body="print(1)\n")
    assert renamed.name == "tally"
    tree = session.tracker.tree(session.tracker.head)
    assert "/scripts/tally.py" in tree and "/scripts/counter.py" not in tree
    assert session.tracker.get_commit(session.tracker.head).parent == head_after_add

    session.remove_script("tally")
    assert session.store.load("demo").scripts == {}


def test_add_manifest(session):
    session.initialize_project("demo")
    session.add_manifest("base/Dockerfile", "FROM scratch\n", namespace=DOCKERFILES)
    session.add_manifest("shared.yaml", {"kind": "ConfigMap"})

    tree = session.tracker.tree(session.tracker.head)
    assert "/dockerfiles/base/Dockerfile" in tree
    assert session.tracker.read_file(session.tracker.head, "/manifests/shared.yaml") == b"kind: ConfigMap\n"


def test_conflicting_manifest_is_rolled_back(session):
    session.initialize_project("demo")
    session.add_manifest("x/y.yaml", {"kind": "ConfigMap"})
    head = session.tracker.head

    with pytest.raises(PathConflictError):
        session.add_manifest("x", {"kind": "Secret"})

    assert session.tracker.head == head
    assert "x" not in session.project.manifest_entries("manifests")
    assert "x" not in session.store.load("demo").manifest_entries("manifests")
    [warning] = session.event_log.of_type("sync_failed")
    assert warning["payload"]["type"] == "PATH_CONFLICT"

    # a sessão continua utilizável após o rollback
    session.add_manifest("z.yaml", {"kind": "ConfigMap"})
    assert "/manifests/z.yaml" in session.tracker.tree(session.tracker.head)


def test_graph_helpers(session):
    session.initialize_project("demo")
    _build_pipeline(session)
    edge = session.graph.edges[1]
    session.set_edge_conditions(edge.id, None)
    assert session.graph.edges[1].conditions is None
    session.disconnect(edge.id)
    assert len(session.graph.edges) == 1
    session.update_vertex_config("cat-udf", {"udf": {"builtin": {"name": "filter"}}})
    session.remove_vertex("cat-udf")
    assert session.graph.vertex_ids == ["generator-source", "log-sink"]
    assert session.graph.edges == []


def test_delete_active_project_closes_session(session):
    session.initialize_project("demo")
    assert session.delete_project("demo") is True
    assert not session.is_open
    assert session.list_projects() == []
