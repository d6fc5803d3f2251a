# src/pipeforge/core/traceability/event_log.py
"""
Event Log: rastreabilidade do motor de projetos.

O Event Log é a camada de logging do pipeforge: uma lista ordenada de
eventos estruturados, emitidos explicitamente por histórico, store e
sessão. Não há handlers globais; quem precisa observar o motor injeta
um `EventLog` e o inspeciona (ou persiste em JSON).

Formato de um evento:
    {
        "event_type": "commit_created",
        "level": "INFO",
        "message": "...",
        "timestamp": "2026-01-16T12:00:00+00:00",
        "payload": {...}          # opcional
    }

Princípios fundamentais:
    - Nenhum evento é emitido implicitamente
    - A ordem da lista reflete a ordem de chamada
    - Timestamps são sempre UTC (timezone-aware, ISO 8601)
    - A estrutura é serializável e reconstruível (round-trip)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional


INFO = "INFO"
WARNING = "WARNING"
ERROR = "ERROR"


def ensure_utc(dt: datetime) -> datetime:
    """
    Normaliza um timestamp para timezone-aware em UTC.

    Timestamps timezone-naive são assumidos como UTC; timestamps com
    timezone são convertidos.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def iso_utc(dt: datetime) -> str:
    return ensure_utc(dt).isoformat()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class EventLog:
    """
    Log estruturado e ordenado de eventos do motor.

    Campos:
    - events: eventos na ordem de emissão
    - clock: fonte de tempo (injetável para testes determinísticos)
    """

    events: List[Dict[str, Any]] = field(default_factory=list)
    clock: Callable[[], datetime] = field(default=utc_now, repr=False, compare=False)

    def log(
        self,
        *,
        event_type: str,
        message: str,
        level: str = INFO,
        payload: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        event: Dict[str, Any] = {
            "event_type": event_type,
            "level": level,
            "message": message,
            "timestamp": iso_utc(self.clock()),
        }
        if payload is not None:
            event["payload"] = payload
        self.events.append(event)
        return event

    def warning(self, *, event_type: str, message: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.log(event_type=event_type, message=message, level=WARNING, payload=payload)

    def of_type(self, event_type: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e.get("event_type") == event_type]

    def warnings(self) -> List[Dict[str, Any]]:
        return [e for e in self.events if e.get("level") == WARNING]

    def to_dict(self) -> Dict[str, Any]:
        return {"events": [dict(e) for e in self.events]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EventLog":
        return cls(events=[dict(e) for e in (data.get("events", []) or [])])


def save_event_log(log: EventLog, path: Path) -> None:
    """
    Persiste o Event Log em JSON determinístico.

    O diretório de destino é criado quando necessário. A ordem dos
    eventos é preservada; apenas as chaves de cada evento são ordenadas.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(log.to_dict(), ensure_ascii=False, indent=2, sort_keys=True),
        encoding="utf-8",
    )


def load_event_log(path: Path) -> EventLog:
    """Restaura um Event Log salvo por `save_event_log`.

    Raises:
        FileNotFoundError: Se o arquivo não existir.
        json.JSONDecodeError: Em caso de JSON inválido.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    return EventLog.from_dict(data)
