# src/pipeforge/core/config/errors.py
"""
Exceções canônicas da camada de configuração do pipeforge.

As exceções aqui definidas representam violações estruturais da
configuração do motor (arquivo ausente, formato desconhecido, raiz que não
é mapa, conflito de tipos no merge). Erros de domínio do motor vivem em
`core.exceptions`.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
"""


class ConfigError(Exception):
    """
    Exceção base para erros relacionados à configuração do pipeforge.

    Permite captura genérica de erros de configuração, distinta das falhas
    de serializer, histórico ou store.
    """


class DefaultsNotFoundError(ConfigError):
    """
    Arquivo de defaults informado explicitamente não existe.

    Quando nenhum arquivo é informado os defaults embutidos
    (`DEFAULT_CONFIG`) são usados; um caminho explícito inexistente,
    porém, é erro.
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Formato do arquivo de configuração não suportado.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """Conteúdo raiz da configuração não é um dicionário (`dict`)."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"layout": {"x_pitch": 200}}
        - override: {"layout": "compact"}
    """
