# tests/core/config/test_hashing.py
"""
Testes do hashing canônico (configuração e conteúdo versionado).

Os testes asseguram que:
- o hash é determinístico e independe da ordem das chaves
- o hash corresponde ao SHA-256 do JSON canônico
- alterações de conteúdo alteram o hash
- entradas com tipo errado são rejeitadas explicitamente
"""

import hashlib
import json

import pytest

from pipeforge.core.config.hashing import (
    canonical_json,
    compute_canonical_hash,
    compute_config_hash,
    compute_content_hash,
)


def test_hash_is_deterministic():
    a = {"pipeline": {"file_name": "pipeline.yaml"}, "layout": {"x_pitch": 200}}
    b = {"layout": {"x_pitch": 200}, "pipeline": {"file_name": "pipeline.yaml"}}
    h1 = compute_config_hash(a)
    h2 = compute_config_hash(b)
    assert h1 == h2
    assert isinstance(h1, str)
    assert len(h1) == 64


def test_hash_matches_sha256_of_canonical_json():
    cfg = {"b": [1, 2], "a": {"z": "ç", "y": None}}
    expected = hashlib.sha256(
        json.dumps(cfg, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    ).hexdigest()
    assert canonical_json(cfg) == '{"a":{"y":null,"z":"ç"},"b":[1,2]}'
    assert compute_config_hash(cfg) == expected
    assert compute_canonical_hash(cfg) == expected


def test_hash_changes_on_override():
    base = {"layout": {"x_pitch": 200}}
    changed = {"layout": {"x_pitch": 201}}
    assert compute_config_hash(base) != compute_config_hash(changed)


def test_content_hash_is_sha256_of_bytes():
    data = b"pynumaflow>=1.0.0\n"
    assert compute_content_hash(data) == hashlib.sha256(data).hexdigest()
    assert compute_content_hash(bytearray(data)) == compute_content_hash(data)


def test_wrong_input_types_are_rejected():
    with pytest.raises(TypeError):
        compute_content_hash("texto")  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        compute_config_hash(["not", "a", "dict"])  # type: ignore[arg-type]
