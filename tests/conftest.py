# tests/conftest.py
"""
Fixtures compartilhados para testes do pipeforge.

Este módulo define fixtures reutilizáveis que fornecem:
- relógio fixo e avançável (histórico e store determinísticos)
- grafo mínimo source → udf → sink
- projeto com um script de transformação (`even-odd`)
- documentos de configuração em YAML

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Dados retornados são determinísticos e isolados
    - I/O real apenas via `tmp_path` (store), nunca no diretório do projeto

Limites explícitos:
    - Não substituir testes de integração
    - Não conter lógica condicional complexa
"""

from datetime import datetime, timedelta, timezone

import pytest

from pipeforge.core.graph.model import PipelineGraph, Vertex
from pipeforge.core.project.model import Project, Script, ScriptType


EVEN_ODD_BODY = '''from pynumaflow.mapper import Messages, Message, Datum, MapServer


def my_handler(keys: list[str], datum: Datum) -> Messages:
    return Messages(Message(datum.value, keys=keys))


if __name__ == "__main__":
    MapServer(my_handler).start()
'''


class FixedClock:
    """Relógio determinístico: cada chamada devolve o instante atual."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int = 1) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 1, 16, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def sample_graph() -> PipelineGraph:
    graph = PipelineGraph(
        vertices=[
            Vertex("A", {"source": {"generator": {}}}),
            Vertex("B", {"udf": {"container": {"image": "x:latest"}}}),
            Vertex("C", {"sink": {"log": {}}}),
        ]
    )
    graph.connect("A", "B")
    graph.connect("B", "C")
    return graph


@pytest.fixture
def even_odd_project(clock) -> Project:
    project = Project.create("demo", clock=clock)
    project.add_script(Script(name="even-odd", type=ScriptType.MAP, body=EVEN_ODD_BODY))
    return project


@pytest.fixture
def engine_defaults_yaml() -> str:
    return """
pipeline:
  api_version: numaflow.numaproj.io/v1alpha1
  name_placeholder: "<pipeline-name>"
layout:
  x_pitch: 200
  rows:
    source: 50
    transform: 250
    sink: 450
history:
  author:
    name: Numaflow GUI
    email: gui@numaflow.local
"""


@pytest.fixture
def engine_local_yaml() -> str:
    return """
layout:
  x_pitch: 150
history:
  author:
    name: Pipeline Bot
"""
