# src/pipeforge/core/errors.py
"""
pipeforge — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros do pipeforge.
Erros são artefatos de domínio e fazem parte do contrato operacional do
motor de projetos, devendo ser:

- explícitos
- serializáveis
- rastreáveis
- acionáveis

Os payloads daqui são a forma com que falhas entram no Event Log
(ex.: `stage_failed` durante um commit, `pipeline_import_failed` ao abrir
um projeto). Exceções tipadas vivem em `core.exceptions`.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from .exceptions import PipeforgeException


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro do pipeforge.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Filesystem / Histórico
PATH_NOT_FOUND = "PATH_NOT_FOUND"
PARTIAL_STAGE_FAILURE = "PARTIAL_STAGE_FAILURE"

# Documento declarativo
MALFORMED_PIPELINE = "MALFORMED_PIPELINE"

# Store / Sessão
PROJECT_NOT_FOUND = "PROJECT_NOT_FOUND"
DUPLICATE_PROJECT = "DUPLICATE_PROJECT"

# Falha não catalogada
UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


# ---------------------------------------------------------------------------
# Helpers de fábrica
# ---------------------------------------------------------------------------

def stage_failed(
    *,
    path: str,
    exc_type: Optional[str] = None,
    exc_message: Optional[str] = None,
    hint: str = "O arquivo foi ignorado neste commit; os demais caminhos foram versionados normalmente.",
) -> ErrorPayload:
    return ErrorPayload(
        type=PARTIAL_STAGE_FAILURE,
        message="Falha ao preparar arquivo para commit",
        details={
            "path": path,
            "exc_type": exc_type,
            "exc_message": exc_message,
        },
        hint=hint,
    )


def pipeline_malformed(
    *,
    reason: str,
    source: Optional[str] = None,
    hint: str = "Verifique se o documento possui `spec.vertices` e se cada vértice declara `name`.",
) -> ErrorPayload:
    return ErrorPayload(
        type=MALFORMED_PIPELINE,
        message="Documento de pipeline inválido",
        details={"reason": reason, "source": source},
        hint=hint,
    )


def project_not_found(
    *,
    name: str,
    hint: str = "Liste os projetos persistidos e confira o nome informado.",
) -> ErrorPayload:
    return ErrorPayload(
        type=PROJECT_NOT_FOUND,
        message="Projeto não encontrado na store",
        details={"name": name},
        hint=hint,
    )


def duplicate_project(
    *,
    name: str,
    hint: str = "Escolha outro nome ou abra o projeto existente.",
) -> ErrorPayload:
    return ErrorPayload(
        type=DUPLICATE_PROJECT,
        message="Já existe um projeto com este nome",
        details={"name": name},
        hint=hint,
    )


def payload_from_exception(exc: BaseException) -> ErrorPayload:
    """Converte uma exceção em payload serializável.

    Exceções tipadas do pipeforge preservam código, detalhes e hint;
    qualquer outra exceção é encapsulada como `UNEXPECTED_ERROR`.
    """
    if isinstance(exc, PipeforgeException):
        return ErrorPayload(
            type=exc.error_type,
            message=exc.message,
            details=dict(exc.details),
            hint=exc.hint,
        )
    return ErrorPayload(
        type=UNEXPECTED_ERROR,
        message="Falha inesperada",
        details={"exc_type": type(exc).__name__, "exc_message": str(exc)},
        hint=None,
    )
