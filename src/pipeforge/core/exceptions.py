# src/pipeforge/core/exceptions.py
"""
pipeforge — Canonical Exceptions (v1)

Este módulo define as exceções tipadas internas do pipeforge.

Objetivo:
- Permitir que serializer, filesystem virtual, histórico e store levantem
  exceções semânticas tipadas
- Facilitar o mapeamento determinístico para `ErrorPayload`
- Evitar ValueError/RuntimeError genéricos em guardrails críticos

Taxonomia (v1):
- NotFoundError        → caminho, projeto, script, vértice ou template ausente
- MalformedInputError  → documento declarativo inválido
- DuplicateNameError   → colisão de identidade (projeto, vértice, script)
- PartialStageFailure  → falha não fatal de staging (capturada, nunca propagada)
- PathConflictError    → mesmo caminho como arquivo e como diretório

Regras:
- Exceções carregam apenas dados estruturados (serializáveis) em `details`.
- Mensagem curta e humana.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True, eq=False)
class PipeforgeException(Exception):
    """Base class para exceções internas do pipeforge.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Não embedar stack trace em payloads de erro
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    # código estável usado pelo catálogo de `core.errors`
    error_type = "PIPEFORGE_ERROR"

    def __str__(self) -> str:  # pragma: no cover
        return self.message


# ---------------------------------------------------------------------------
# NotFound
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class NotFoundError(PipeforgeException):
    """Recurso endereçado (caminho, projeto, script, vértice) não existe."""

    error_type = "NOT_FOUND"


@dataclass(frozen=True, eq=False)
class PathNotFoundError(NotFoundError):
    """Caminho ausente no filesystem virtual."""

    error_type = "PATH_NOT_FOUND"


@dataclass(frozen=True, eq=False)
class ProjectNotFoundError(NotFoundError):
    """Projeto ausente na Project Store."""

    error_type = "PROJECT_NOT_FOUND"


@dataclass(frozen=True, eq=False)
class ScriptNotFoundError(NotFoundError):
    """Script ausente no projeto."""

    error_type = "SCRIPT_NOT_FOUND"


@dataclass(frozen=True, eq=False)
class VertexNotFoundError(NotFoundError):
    """Vértice ausente no grafo do pipeline."""

    error_type = "VERTEX_NOT_FOUND"


@dataclass(frozen=True, eq=False)
class CommitNotFoundError(NotFoundError):
    """Commit ausente no histórico."""

    error_type = "COMMIT_NOT_FOUND"


@dataclass(frozen=True, eq=False)
class TemplateNotFoundError(NotFoundError):
    """Template de vértice ausente no catálogo."""

    error_type = "TEMPLATE_NOT_FOUND"


# ---------------------------------------------------------------------------
# MalformedInput
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class MalformedInputError(PipeforgeException):
    """Entrada textual não pôde ser interpretada."""

    error_type = "MALFORMED_INPUT"


@dataclass(frozen=True, eq=False)
class MalformedPipelineError(MalformedInputError):
    """Documento de pipeline não parseia ou não possui a estrutura exigida."""

    error_type = "MALFORMED_PIPELINE"


# ---------------------------------------------------------------------------
# DuplicateName
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class DuplicateNameError(PipeforgeException):
    """Identidade já registrada."""

    error_type = "DUPLICATE_NAME"


@dataclass(frozen=True, eq=False)
class DuplicateProjectError(DuplicateNameError):
    """Já existe um projeto persistido com o mesmo nome."""

    error_type = "DUPLICATE_PROJECT"


@dataclass(frozen=True, eq=False)
class DuplicateVertexError(DuplicateNameError):
    """Já existe um vértice com o mesmo id no grafo."""

    error_type = "DUPLICATE_VERTEX"


@dataclass(frozen=True, eq=False)
class DuplicateScriptError(DuplicateNameError):
    """Já existe um script com o mesmo nome no projeto."""

    error_type = "DUPLICATE_SCRIPT"


# ---------------------------------------------------------------------------
# Histórico / Filesystem / Store
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class PartialStageFailure(PipeforgeException):
    """Falha de staging de um único arquivo (não fatal, capturada no commit)."""

    error_type = "PARTIAL_STAGE_FAILURE"


@dataclass(frozen=True, eq=False)
class CommitInProgressError(PipeforgeException):
    """Um commit já está em andamento para o mesmo histórico."""

    error_type = "COMMIT_IN_PROGRESS"


@dataclass(frozen=True, eq=False)
class HistoryNotInitializedError(PipeforgeException):
    """Operação de histórico exige um commit inicial."""

    error_type = "HISTORY_NOT_INITIALIZED"


@dataclass(frozen=True, eq=False)
class PathConflictError(PipeforgeException):
    """Um caminho seria arquivo e diretório ao mesmo tempo."""

    error_type = "PATH_CONFLICT"


@dataclass(frozen=True, eq=False)
class DirectoryNotEmptyError(PipeforgeException):
    """Remoção não recursiva de diretório com filhos."""

    error_type = "DIRECTORY_NOT_EMPTY"


@dataclass(frozen=True, eq=False)
class StoreClosedError(PipeforgeException):
    """Operação sobre uma Project Store fechada."""

    error_type = "STORE_CLOSED"


@dataclass(frozen=True, eq=False)
class NoActiveProjectError(PipeforgeException):
    """Operação de sessão exige um projeto ativo."""

    error_type = "NO_ACTIVE_PROJECT"
