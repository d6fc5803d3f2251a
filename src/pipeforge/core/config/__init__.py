# src/pipeforge/core/config/__init__.py

"""
Camada de configuração do pipeforge.

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Resolução de configuração final via deep-merge determinístico
    - Hashing canônico (configuração e conteúdo versionado)
    - Visão tipada da configuração (`EngineSettings`)
"""

from .errors import (
    ConfigError,
    ConfigTypeConflictError,
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .hashing import (
    canonical_json,
    compute_canonical_hash,
    compute_config_hash,
    compute_content_hash,
)
from .loader import DEFAULT_CONFIG, EngineSettings, load_config
from .merge import deep_merge

__all__ = [
    "ConfigError",
    "ConfigTypeConflictError",
    "DefaultsNotFoundError",
    "InvalidConfigRootTypeError",
    "UnsupportedConfigFormatError",
    "canonical_json",
    "compute_canonical_hash",
    "compute_config_hash",
    "compute_content_hash",
    "DEFAULT_CONFIG",
    "EngineSettings",
    "load_config",
    "deep_merge",
]
