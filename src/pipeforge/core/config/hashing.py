# src/pipeforge/core/config/hashing.py
"""
Hashing canônico do pipeforge.

Este módulo concentra a política de identidade por conteúdo usada em dois
lugares:
    - configuração efetiva (`compute_config_hash`)
    - versionamento endereçado por conteúdo do histórico
      (`compute_content_hash` para blobs, `compute_canonical_hash` para
      árvores e commits)

Política (v1):
    - Serialização JSON canônica (chaves ordenadas, separadores compactos)
    - Codificação UTF-8
    - SHA-256, hexadecimal de 64 caracteres

Invariantes:
    - Estruturas equivalentes produzem o mesmo hash
    - Nenhuma mutação ocorre sobre o input
"""


import json
import hashlib
from typing import Any, Dict


def canonical_json(value: Any) -> str:
    """Serialização JSON canônica (ordem de chaves estável, sem espaços)."""
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def compute_canonical_hash(value: Any) -> str:
    """SHA-256 da serialização canônica de uma estrutura JSON-compatível."""
    return hashlib.sha256(canonical_json(value).encode("utf-8")).hexdigest()


def compute_content_hash(data: bytes) -> str:
    """SHA-256 do conteúdo bruto de um arquivo (identidade de blob)."""
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError(f"Conteúdo para hashing deve ser bytes, recebido: {type(data).__name__}")
    return hashlib.sha256(bytes(data)).hexdigest()


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera um hash determinístico da configuração efetiva.

    Args:
        config (Dict[str, Any]): Configuração resolvida.

    Returns:
        str: Hash SHA-256 hexadecimal da configuração.

    Raises:
        TypeError: Se o objeto fornecido não for um dicionário.
    """

    if not isinstance(config, dict):
        raise TypeError(
            f"Config para hashing deve ser dict, recebido: {type(config).__name__}"
        )

    return compute_canonical_hash(config)
