# src/pipeforge/core/config/loader.py
"""
Loader canônico de configuração do pipeforge.

A configuração efetiva é resolvida a partir de:
    - defaults embutidos (`DEFAULT_CONFIG`) ou um arquivo de defaults
    - um arquivo local de overrides (opcional)

Responsabilidades do módulo:
    - Carregar arquivos de configuração em YAML ou JSON
    - Validar requisitos estruturais mínimos (tipo raiz)
    - Resolver a configuração final via deep-merge determinístico
    - Expor a configuração tipada (`EngineSettings`) consumida por
      serializer, builder, histórico e store

Invariantes:
    - O resultado é sempre um dicionário puro (`dict`)
    - Overrides nunca mutam os defaults

Limites explícitos:
    - Não parametriza os templates de artefatos gerados (Dockerfile,
      requirements.txt); eles são fixos por contrato
"""

from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
import json

import yaml  # PyYAML

from .merge import deep_merge
from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)


DEFAULT_CONFIG: Dict[str, Any] = {
    "pipeline": {
        "api_version": "numaflow.numaproj.io/v1alpha1",
        "file_name": "pipeline.yaml",
        "name_placeholder": "<pipeline-name>",
    },
    "layout": {
        "x_pitch": 200,
        "x_offset": 100,
        "rows": {"source": 50, "transform": 250, "sink": 450},
    },
    "history": {
        "author": {"name": "Numaflow GUI", "email": "gui@numaflow.local"},
        "initial_message": "Initial commit",
    },
    "store": {
        "root": ".pipeforge/projects",
    },
    "deployment": {
        "namespace": "default",
        "include_manifests": False,
    },
}


def _load_file(path: Path) -> Dict[str, Any]:
    """
    Carrega um arquivo de configuração e valida sua estrutura básica.

    Decisões arquiteturais:
        - O arquivo deve existir no momento do carregamento
        - Arquivos vazios são interpretados como dicionários vazios
        - Formatos não suportados geram erro explícito

    Args:
        path (Path): Caminho para o arquivo de configuração.

    Returns:
        Dict[str, Any]: Conteúdo do arquivo carregado como dicionário.

    Raises:
        DefaultsNotFoundError: Se o arquivo não existir.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo raiz não for um dicionário.
    """
    if not path.exists():
        raise DefaultsNotFoundError(f"Arquivo de configuração não encontrado: {path}")

    suffix = path.suffix.lower()

    if suffix in {".yaml", ".yml"}:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

    elif suffix == ".json":
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)

    else:
        raise UnsupportedConfigFormatError(f"Formato não suportado: {path.suffix}")

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise InvalidConfigRootTypeError(
            f"Config root deve ser dict, recebido: {type(data).__name__}"
        )

    return data


def load_config(
    *,
    defaults_path: Optional[str] = None,
    local_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Carrega e resolve a configuração efetiva do motor.

    Política de resolução:
        - Sem `defaults_path`, a base é `DEFAULT_CONFIG`
        - Com `defaults_path`, o arquivo é mesclado sobre `DEFAULT_CONFIG`
          e precisa existir
        - O arquivo local é opcional; ausente, é ignorado
        - Quando presente, o local sempre tem prioridade

    Args:
        defaults_path (Optional[str]): Arquivo de defaults do projeto.
        local_path (Optional[str]): Arquivo opcional de overrides locais.

    Returns:
        Dict[str, Any]: Configuração final resolvida.

    Raises:
        DefaultsNotFoundError: Se `defaults_path` for informado e não existir.
        UnsupportedConfigFormatError: Se o formato do arquivo não for suportado.
        InvalidConfigRootTypeError: Se o conteúdo não for um dicionário.
        ConfigTypeConflictError: Se ocorrer conflito estrutural durante o merge.
    """

    effective = deepcopy(DEFAULT_CONFIG)

    if defaults_path is not None:
        effective = deep_merge(effective, _load_file(Path(defaults_path)))

    if local_path is not None:
        local_file = Path(local_path)
        if local_file.exists():
            effective = deep_merge(effective, _load_file(local_file))

    return effective


@dataclass(frozen=True)
class EngineSettings:
    """Visão tipada da configuração efetiva."""

    api_version: str = "numaflow.numaproj.io/v1alpha1"
    pipeline_file: str = "pipeline.yaml"
    name_placeholder: str = "<pipeline-name>"
    x_pitch: float = 200
    x_offset: float = 100
    row_y: Dict[str, float] = field(
        default_factory=lambda: {"source": 50, "transform": 250, "sink": 450}
    )
    author_name: str = "Numaflow GUI"
    author_email: str = "gui@numaflow.local"
    initial_message: str = "Initial commit"
    store_root: str = ".pipeforge/projects"
    namespace: str = "default"
    include_deployments: bool = False

    @property
    def author(self) -> Tuple[str, str]:
        return self.author_name, self.author_email

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "EngineSettings":
        cfg = deep_merge(DEFAULT_CONFIG, config or {})
        pipeline = cfg["pipeline"]
        layout = cfg["layout"]
        history = cfg["history"]
        deployment = cfg["deployment"]
        return cls(
            api_version=str(pipeline["api_version"]),
            pipeline_file=str(pipeline["file_name"]),
            name_placeholder=str(pipeline["name_placeholder"]),
            x_pitch=layout["x_pitch"],
            x_offset=layout["x_offset"],
            row_y=dict(layout["rows"]),
            author_name=str(history["author"]["name"]),
            author_email=str(history["author"]["email"]),
            initial_message=str(history["initial_message"]),
            store_root=str(cfg["store"]["root"]),
            namespace=str(deployment["namespace"]),
            include_deployments=bool(deployment["include_manifests"]),
        )
