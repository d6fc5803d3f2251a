# src/pipeforge/core/config/merge.py
"""
Deep-merge de configuração do pipeforge.

Resolve a configuração efetiva a partir dos defaults embutidos (ou de um
arquivo de defaults) e de um override local explícito.

Política de merge (v1):
    - dict → merge recursivo por chave
    - list → sobrescrita total (sem merge elemento a elemento)
    - escalar → sobrescrita direta
    - conflito de tipos → erro estrutural explícito

Invariantes:
    - Nenhum input é mutado
    - Chaves não sobrescritas são preservadas
    - Conflitos estruturais interrompem o merge
"""

from copy import deepcopy
from typing import Any, Dict

from .errors import ConfigTypeConflictError


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Realiza um deep-merge determinístico entre dois dicionários de configuração.

    Exemplo:
        base:     {"layout": {"x_pitch": 200, "x_offset": 100}}
        override: {"layout": {"x_pitch": 240}}
        result:   {"layout": {"x_pitch": 240, "x_offset": 100}}

    Args:
        base (Dict[str, Any]): Configuração base (ex.: DEFAULT_CONFIG).
        override (Dict[str, Any]): Overrides explícitos.

    Returns:
        Dict[str, Any]: Novo dicionário resultante do merge.

    Raises:
        ConfigTypeConflictError: Se a mesma chave tiver tipos incompatíveis.
    """

    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts no nível raiz, recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, override_value in override.items():
        if key not in result:
            result[key] = deepcopy(override_value)
            continue

        base_value = result[key]

        # dict -> merge recursivo
        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(base_value, override_value)
            continue

        # list -> sobrescrita total
        if isinstance(override_value, list):
            result[key] = deepcopy(override_value)
            continue

        # int sobrescrito por float (ex.: pitch 200 -> 212.5) não é conflito
        numeric = (int, float)
        if (
            isinstance(base_value, numeric)
            and isinstance(override_value, numeric)
            and not isinstance(base_value, bool)
            and not isinstance(override_value, bool)
        ):
            result[key] = override_value
            continue

        if base_value is not None and type(base_value) is not type(override_value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{key}': "
                f"{type(base_value).__name__} vs {type(override_value).__name__}"
            )

        result[key] = deepcopy(override_value)

    return result
