# tests/core/config/test_hashing.py
"""
Testes do hash canônico de configuração.

Invariantes:
    - Mesma estrutura (em qualquer ordem de chaves) → mesmo hash
    - Qualquer alteração de valor → hash diferente
    - Saída SHA-256 hexadecimal (64 caracteres)
"""

import pytest

from dagcut.core.config.hashing import compute_config_hash


def test_hash_is_order_independent():
    a = {"planner": {"workflow_cv": True, "strict_registration": False}}
    b = {"planner": {"strict_registration": False, "workflow_cv": True}}
    assert compute_config_hash(a) == compute_config_hash(b)


def test_hash_changes_with_values():
    a = {"planner": {"workflow_cv": True}}
    b = {"planner": {"workflow_cv": False}}
    assert compute_config_hash(a) != compute_config_hash(b)


def test_hash_format():
    h = compute_config_hash({})
    assert len(h) == 64
    assert all(c in "0123456789abcdef" for c in h)


def test_hash_requires_dict():
    with pytest.raises(TypeError):
        compute_config_hash([("planner", {})])
