# src/pipeforge/vfs/memory_fs.py
"""
Filesystem virtual em memória.

Substrato do histórico de versões: um mapa de caminho absoluto
normalizado → bytes, mais um conjunto de diretórios.

Invariantes:
    - Todo caminho armazenado é normalizado (`normalize_path`)
    - Os diretórios ancestrais de um arquivo sempre existem: `write`
      sintetiza a cadeia completa, sem exigir `mkdir` prévio
    - A raiz `/` sempre existe e nunca é removida
    - Um caminho é arquivo ou diretório, nunca ambos: `write` e `mkdir`
      recusam caminhos cujo ancestral seja um arquivo (`PathConflictError`)

Decisões arquiteturais:
    - `sync_from_project` é uma ressincronização total (limpa e reescreve
      a árvore a partir do builder), nunca um diff incremental; a estrutura
      inteira é renderizada e validada antes de a árvore ser limpa
    - O filesystem pertence exclusivamente ao seu tracker de histórico;
      nenhum outro componente o muta
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Container, Dict, Iterator, List, Optional, Set, Union

from pipeforge.core.exceptions import DirectoryNotEmptyError, PathConflictError, PathNotFoundError
from pipeforge.core.project.model import Project
from pipeforge.core.project.structure import (
    PIPELINE_FILE,
    build_directory_structure,
    render_file_content,
)
from pipeforge.artifacts.generators import DEFAULT_NAMESPACE


ROOT = "/"

FILE = "file"
DIRECTORY = "dir"


def normalize_path(path: str) -> str:
    """
    Normaliza um caminho para a forma canônica absoluta.

    Regras:
        - `\\` vira `/`
        - prefixo `./` é removido
        - força `/` inicial
        - remove `/` final (exceto na raiz)
    """
    normalized = (path or "").replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    if not normalized.startswith("/"):
        normalized = "/" + normalized
    while "//" in normalized:
        normalized = normalized.replace("//", "/")
    if len(normalized) > 1 and normalized.endswith("/"):
        normalized = normalized.rstrip("/") or ROOT
    return normalized


def _parent(path: str) -> str:
    head = path.rsplit("/", 1)[0]
    return head or ROOT


def _ancestors(path: str) -> List[str]:
    out: List[str] = []
    current = _parent(path)
    while current != ROOT:
        out.append(current)
        current = _parent(current)
    return out


def _check_ancestors(path: str, files: Container[str]) -> None:
    """Levanta `PathConflictError` se algum ancestral de `path` for arquivo."""
    for ancestor in _ancestors(path):
        if ancestor in files:
            raise PathConflictError(
                f"Ancestral é um arquivo: {ancestor}",
                details={"path": path, "file": ancestor},
            )


@dataclass(frozen=True)
class FileStat:
    path: str
    type: str
    size: int = 0

    @property
    def is_file(self) -> bool:
        return self.type == FILE

    @property
    def is_dir(self) -> bool:
        return self.type == DIRECTORY


class VirtualFileSystem:
    """Árvore hierárquica de arquivos em memória."""

    def __init__(self) -> None:
        self._files: Dict[str, bytes] = {}
        self._dirs: Set[str] = {ROOT}

    # ------------------------------------------------------------------
    # Consulta
    # ------------------------------------------------------------------
    def exists(self, path: str) -> bool:
        p = normalize_path(path)
        return p in self._files or p in self._dirs

    def read(self, path: str) -> bytes:
        p = normalize_path(path)
        if p not in self._files:
            raise PathNotFoundError(f"Arquivo não encontrado: {p}", details={"path": p})
        return self._files[p]

    def stat(self, path: str) -> FileStat:
        p = normalize_path(path)
        if p in self._files:
            return FileStat(path=p, type=FILE, size=len(self._files[p]))
        if p in self._dirs:
            return FileStat(path=p, type=DIRECTORY)
        raise PathNotFoundError(f"Caminho não encontrado: {p}", details={"path": p})

    def list(self, path: str = ROOT) -> List[str]:
        """
        Lista os filhos imediatos de um diretório, em ordem alfabética.

        Diretórios são sufixados com `/` para distingui-los de arquivos.
        """
        p = normalize_path(path)
        if p not in self._dirs:
            raise PathNotFoundError(f"Diretório não encontrado: {p}", details={"path": p})
        children = set()
        for f in self._files:
            if f != p and _parent(f) == p:
                children.add(f.rsplit("/", 1)[1])
        for d in self._dirs:
            if d != ROOT and d != p and _parent(d) == p:
                children.add(d.rsplit("/", 1)[1] + "/")
        return sorted(children)

    def walk_files(self, path: str = ROOT) -> Iterator[str]:
        """Enumera recursivamente os arquivos sob `path` (ordem alfabética)."""
        p = normalize_path(path)
        if p not in self._dirs:
            raise PathNotFoundError(f"Diretório não encontrado: {p}", details={"path": p})
        prefix = ROOT if p == ROOT else p + "/"
        for f in sorted(self._files):
            if f.startswith(prefix):
                yield f

    def snapshot(self) -> Dict[str, bytes]:
        return dict(self._files)

    # ------------------------------------------------------------------
    # Mutação
    # ------------------------------------------------------------------
    def mkdir(self, path: str) -> None:
        p = normalize_path(path)
        if p in self._files:
            raise PathConflictError(f"Caminho já é um arquivo: {p}", details={"path": p})
        _check_ancestors(p, self._files)
        self._dirs.add(p)
        self._dirs.update(_ancestors(p))

    def write(self, path: str, data: Union[str, bytes]) -> None:
        p = normalize_path(path)
        if p in self._dirs:
            raise PathConflictError(f"Caminho já é um diretório: {p}", details={"path": p})
        _check_ancestors(p, self._files)
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._dirs.update(_ancestors(p))
        self._files[p] = bytes(data)

    def remove(self, path: str) -> None:
        p = normalize_path(path)
        if p not in self._files:
            raise PathNotFoundError(f"Arquivo não encontrado: {p}", details={"path": p})
        del self._files[p]

    def remove_dir(self, path: str, *, recursive: bool = False) -> None:
        p = normalize_path(path)
        if p not in self._dirs:
            raise PathNotFoundError(f"Diretório não encontrado: {p}", details={"path": p})
        if p == ROOT:
            raise DirectoryNotEmptyError(
                "A raiz não pode ser removida", details={"path": p}
            )
        prefix = p + "/"
        nested_files = [f for f in self._files if f.startswith(prefix)]
        nested_dirs = [d for d in self._dirs if d.startswith(prefix)]
        if (nested_files or nested_dirs) and not recursive:
            raise DirectoryNotEmptyError(
                f"Diretório não vazio: {p}",
                details={"path": p, "entries": len(nested_files) + len(nested_dirs)},
            )
        for f in nested_files:
            del self._files[f]
        for d in nested_dirs:
            self._dirs.discard(d)
        self._dirs.discard(p)

    def clear(self) -> None:
        self._files.clear()
        self._dirs = {ROOT}

    # ------------------------------------------------------------------
    # Sincronização
    # ------------------------------------------------------------------
    def sync_from_project(
        self,
        project: Optional[Project],
        *,
        include_deployments: bool = False,
        namespace: str = DEFAULT_NAMESPACE,
        pipeline_file: str = PIPELINE_FILE,
    ) -> List[str]:
        """
        Substitui todo o conteúdo da árvore pela estrutura do projeto.

        A estrutura é renderizada e validada por inteiro antes de a árvore
        ser limpa: em caso de erro a árvore anterior permanece intacta.

        Returns:
            List[str]: caminhos absolutos escritos, na ordem do builder.

        Raises:
            PathConflictError: Se um caminho da estrutura for ancestral de
                outro (ex.: `manifests/x` e `manifests/x/y.yaml`).
        """
        structure = build_directory_structure(
            project,
            include_deployments=include_deployments,
            namespace=namespace,
            pipeline_file=pipeline_file,
        ) or {}
        rendered: Dict[str, bytes] = {}
        for rel_path, content in structure.items():
            rendered[normalize_path(rel_path)] = render_file_content(rel_path, content)
        for p in rendered:
            _check_ancestors(p, rendered)

        self.clear()
        for p, data in rendered.items():
            self.write(p, data)
        return list(rendered)

    def __len__(self) -> int:
        return len(self._files)

    def __repr__(self) -> str:
        return f"VirtualFileSystem(files={len(self._files)}, dirs={len(self._dirs)})"
