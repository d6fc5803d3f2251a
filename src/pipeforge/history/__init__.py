# src/pipeforge/history/__init__.py
"""Histórico de versões endereçado por conteúdo sobre o filesystem virtual."""

from .tracker import (
    Commit,
    CommitOutcome,
    StageFailure,
    StageReport,
    StatusEntry,
    TreeDiff,
    VersionHistoryTracker,
)

__all__ = [
    "Commit",
    "CommitOutcome",
    "StageFailure",
    "StageReport",
    "StatusEntry",
    "TreeDiff",
    "VersionHistoryTracker",
]
