# src/pipeforge/core/traceability/__init__.py
"""
Pacote de rastreabilidade do pipeforge (Event Log).

API pública exposta:
    - EventLog        → lista ordenada de eventos estruturados
    - save_event_log  → persistência em JSON
    - load_event_log  → restauração determinística
    - utc_now         → fonte de tempo canônica (UTC)
"""

from .event_log import (
    ERROR,
    INFO,
    WARNING,
    EventLog,
    load_event_log,
    save_event_log,
    utc_now,
)

__all__ = [
    "ERROR",
    "INFO",
    "WARNING",
    "EventLog",
    "load_event_log",
    "save_event_log",
    "utc_now",
]
