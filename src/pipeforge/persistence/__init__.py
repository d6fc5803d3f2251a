# src/pipeforge/persistence/__init__.py
"""Persistência durável de projetos nomeados."""

from .project_store import ProjectStore, ProjectSummary

__all__ = ["ProjectStore", "ProjectSummary"]
