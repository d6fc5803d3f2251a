# tests/core/traceability/test_event_log.py
"""
Testes do Event Log.

Os testes asseguram que:
- eventos são adicionados somente por chamadas explícitas
- a ordem de inserção é preservada
- timestamps são UTC em ISO 8601
- a persistência em JSON é um round-trip
"""

from datetime import datetime, timedelta, timezone

import pytest

from pipeforge.core.traceability.event_log import (
    INFO,
    WARNING,
    EventLog,
    ensure_utc,
    load_event_log,
    save_event_log,
)


def test_events_are_ordered_and_explicit(clock):
    log = EventLog(clock=clock)
    assert log.events == []

    log.log(event_type="commit_created", message="first", payload={"commit": "a"})
    clock.advance()
    log.warning(event_type="stage_failed", message="second")

    assert [e["event_type"] for e in log.events] == ["commit_created", "stage_failed"]
    assert [e["level"] for e in log.events] == [INFO, WARNING]
    assert log.events[0]["timestamp"] == "2026-01-16T12:00:00+00:00"
    assert "payload" not in log.events[1]
    assert log.warnings() == [log.events[1]]


def test_ensure_utc():
    naive = datetime(2026, 1, 1, 9, 0)
    assert ensure_utc(naive).tzinfo == timezone.utc
    local = datetime(2026, 1, 1, 9, 0, tzinfo=timezone(timedelta(hours=-3)))
    assert ensure_utc(local) == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


def test_save_and_load_round_trip(tmp_path, clock):
    log = EventLog(clock=clock)
    log.log(event_type="project_saved", message="ok", payload={"name": "demo"})
    path = tmp_path / "logs" / "events.json"
    save_event_log(log, path)
    assert load_event_log(path).events == log.events


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_event_log(tmp_path / "missing.json")
