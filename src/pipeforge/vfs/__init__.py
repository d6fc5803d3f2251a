# src/pipeforge/vfs/__init__.py
"""Filesystem virtual em memória (substrato do histórico de versões)."""

from .memory_fs import DIRECTORY, FILE, ROOT, FileStat, VirtualFileSystem, normalize_path

__all__ = [
    "DIRECTORY",
    "FILE",
    "ROOT",
    "FileStat",
    "VirtualFileSystem",
    "normalize_path",
]
