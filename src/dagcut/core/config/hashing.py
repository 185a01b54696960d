# src/dagcut/core/config/hashing.py
"""
Hash canônico da configuração efetiva do planner.

O hash identifica estruturalmente a configuração usada em um planejamento
e é anexado aos eventos do `PlanContext`, permitindo comparar planos
gerados sob configurações diferentes.

Política (v1):
    - JSON canônico (chaves ordenadas, separadores compactos, UTF-8)
    - SHA-256, saída hexadecimal de 64 caracteres
"""

import hashlib
import json
from typing import Any, Dict


def compute_config_hash(config: Dict[str, Any]) -> str:
    """
    Gera o hash SHA-256 determinístico de uma configuração.

    Configurações estruturalmente equivalentes (mesmas chaves e valores,
    em qualquer ordem) produzem o mesmo hash.

    Raises:
        TypeError: Se o objeto fornecido não for um dicionário.
    """
    if not isinstance(config, dict):
        raise TypeError(
            f"Config para hashing deve ser dict, recebido: {type(config).__name__}"
        )

    canonical_json = json.dumps(
        config,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )

    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()
