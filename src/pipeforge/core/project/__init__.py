# src/pipeforge/core/project/__init__.py
"""Projeto (repositório): modelo persistível e materialização em árvore de arquivos."""

from .model import DOCKERFILES, MANIFESTS, Project, Script, ScriptType
from .structure import (
    DEPENDENCY_FILE,
    PIPELINE_FILE,
    build_directory_structure,
    render_file_content,
)

__all__ = [
    "DOCKERFILES",
    "MANIFESTS",
    "Project",
    "Script",
    "ScriptType",
    "DEPENDENCY_FILE",
    "PIPELINE_FILE",
    "build_directory_structure",
    "render_file_content",
]
