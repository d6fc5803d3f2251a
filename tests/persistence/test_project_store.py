# tests/persistence/test_project_store.py
"""
Testes da Project Store.

Os testes asseguram que:
- save é um upsert do registro completo com `last_modified = agora`
- create rejeita nomes duplicados
- delete + list + load refletem a remoção
- nomes arbitrários são mapeados para arquivos seguros
- operações em store fechada são rejeitadas
"""

import json

import pytest

from pipeforge.core.config.loader import EngineSettings
from pipeforge.core.exceptions import DuplicateProjectError, StoreClosedError
from pipeforge.core.project.model import Project, Script
from pipeforge.core.traceability.event_log import EventLog
from pipeforge.persistence.project_store import ProjectStore


@pytest.fixture
def store(tmp_path, clock):
    with ProjectStore(tmp_path / "projects", clock=clock, event_log=EventLog(clock=clock)) as s:
        yield s


def test_save_and_load_round_trip(store, clock, even_odd_project):
    even_odd_project.pipeline = "kind: Pipeline\n"
    clock.advance(60)
    store.save(even_odd_project)

    loaded = store.load("demo")
    assert loaded == even_odd_project
    assert loaded.last_modified == clock.now
    assert loaded.created_at < loaded.last_modified


def test_record_format_on_disk(store, even_odd_project):
    store.save(even_odd_project)
    record = json.loads(store.record_path("demo").read_text(encoding="utf-8"))
    assert set(record) == {"name", "pipeline", "scripts", "manifests", "createdAt", "lastModified"}
    assert record["scripts"]["even-odd"]["type"] == "map"


def test_save_is_upsert(store, even_odd_project):
    store.save(even_odd_project)
    even_odd_project.add_script(Script(name="counter"))
    store.save(even_odd_project)
    assert set(store.load("demo").scripts) == {"even-odd", "counter"}
    assert [s.name for s in store.list()] == ["demo"]


def test_create_rejects_duplicates(store):
    project = store.create("demo")
    assert isinstance(project, Project)
    assert store.exists("demo")
    with pytest.raises(DuplicateProjectError) as exc:
        store.create("demo")
    assert exc.value.details == {"name": "demo"}


def test_delete_then_list_and_load(store, clock):
    store.create("alpha")
    store.create("beta")
    assert store.delete("alpha") is True

    assert [s.name for s in store.list()] == ["beta"]
    assert store.load("alpha") is None
    assert store.delete("alpha") is False
    assert [e["payload"]["name"] for e in store.event_log.of_type("project_deleted")] == ["alpha"]


def test_list_summaries(store, clock):
    store.create("alpha")
    clock.advance(10)
    store.create("beta")
    summaries = {s.name: s for s in store.list()}
    assert summaries["beta"].created_at > summaries["alpha"].created_at
    assert summaries["alpha"].to_dict()["createdAt"] == "2026-01-16T12:00:00+00:00"


def test_unsafe_names_map_to_safe_files(store):
    store.create("../etc/passwd")
    store.create("my project")
    files = sorted(p.name for p in store.root.iterdir())
    assert all("/" not in name for name in files)
    assert {s.name for s in store.list()} == {"../etc/passwd", "my project"}
    assert store.load("../etc/passwd").name == "../etc/passwd"


def test_no_temp_files_left_behind(store, even_odd_project):
    store.save(even_odd_project)
    store.save(even_odd_project)
    assert [p.name for p in store.root.iterdir()] == ["demo.json"]


def test_closed_store_rejects_operations(tmp_path, even_odd_project):
    store = ProjectStore(tmp_path)
    with pytest.raises(StoreClosedError):
        store.save(even_odd_project)
    store.open()
    store.save(even_odd_project)
    store.close()
    for op in (store.list, lambda: store.load("demo"), lambda: store.delete("demo")):
        with pytest.raises(StoreClosedError):
            op()


def test_save_records_event(store, even_odd_project):
    store.save(even_odd_project)
    [event] = store.event_log.of_type("project_saved")
    assert event["payload"] == {"name": "demo", "path": "demo.json"}


def test_store_rooted_in_settings(tmp_path, clock):
    settings = EngineSettings.from_config({"store": {"root": str(tmp_path / "from-config")}})
    with ProjectStore.from_settings(settings, clock=clock) as store:
        store.create("demo")
        assert store.root == tmp_path / "from-config"
        assert (tmp_path / "from-config" / "demo.json").exists()
