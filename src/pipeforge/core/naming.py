# src/pipeforge/core/naming.py
"""
Sanitização de identificadores do pipeforge.

Um script possui uma única identidade canônica (o nome escolhido pelo
usuário). Todas as formas derivadas são calculadas sob demanda a partir
dela e nunca armazenadas:

    - nome de arquivo (`[A-Za-z0-9_-]`, inválidos → `_`)
    - nome de recurso de deployment/imagem (inválidos → `-`)

As funções são puras e totais: entrada vazia produz string vazia e
entrada só com caracteres inválidos produz apenas separadores.
"""

from __future__ import annotations

import re

_INVALID = re.compile(r"[^A-Za-z0-9_-]")

SCRIPT_EXTENSION = ".py"
BUILD_FILE = "Dockerfile"


def sanitize_filesystem_name(raw: str) -> str:
    """Substitui todo caractere fora de `[A-Za-z0-9_-]` por `_`.

    >>> sanitize_filesystem_name("my script!")
    'my_script_'
    """
    return _INVALID.sub("_", raw)


def sanitize_resource_name(raw: str) -> str:
    """Como `sanitize_filesystem_name`, mas com `-` (recursos não aceitam `_` aqui)."""
    return _INVALID.sub("-", raw)


def script_file_name(script_name: str) -> str:
    return sanitize_filesystem_name(script_name) + SCRIPT_EXTENSION


def image_reference(script_name: str) -> str:
    return f"{sanitize_resource_name(script_name)}:latest"


def build_file_key(script_name: str) -> str:
    """Chave (relativa a `dockerfiles/`) do build file gerado para um script."""
    return f"{sanitize_filesystem_name(script_name)}/{BUILD_FILE}"


def owns_key(script_name: str, key: str) -> bool:
    """Indica se uma chave de manifest é o próprio nome de um script.

    A comparação é exata, contra o nome canônico ou sua forma sanitizada;
    chaves aninhadas (`even-odd/values.yaml`) nunca pertencem ao script.
    """
    return key in {script_name, sanitize_filesystem_name(script_name)}
