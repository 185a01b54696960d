# src/dagcut/core/config/merge.py
"""
Deep-merge de configuração (defaults + overrides locais).

Política de merge (v1):
    - dict → merge recursivo por chave
    - list → sobrescrita total (sem merge elemento a elemento)
    - escalar → sobrescrita direta
    - conflito de tipos → erro estrutural explícito

O merge é puramente funcional: nenhum input é mutado.
"""

from copy import deepcopy
from typing import Any, Dict, List, Optional

from .errors import ConfigTypeConflictError


def deep_merge(
    base: Dict[str, Any],
    override: Dict[str, Any],
    _path: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Combina `base` e `override` em um novo dicionário.

    Decisões arquiteturais:
        - Overrides sempre vencem em escalares e listas
        - Conflitos estruturais são falha fatal, indicando o caminho
          completo da chave (ex.: `planner.workflow_cv`)

    Args:
        base (Dict[str, Any]): Configuração base (ex.: defaults).
        override (Dict[str, Any]): Overrides explícitos.

    Returns:
        Dict[str, Any]: Nova configuração resultante do deep-merge.

    Raises:
        ConfigTypeConflictError: Se ocorrer conflito de tipo entre base e override.
    """
    path = list(_path or [])

    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"Deep-merge requer dicts em '{'.'.join(path) or '<root>'}', recebido: "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = deepcopy(base)

    for key, override_value in override.items():
        if key not in result:
            result[key] = deepcopy(override_value)
            continue

        base_value = result[key]
        key_path = path + [str(key)]

        if isinstance(base_value, dict) and isinstance(override_value, dict):
            result[key] = deep_merge(base_value, override_value, key_path)
            continue

        if isinstance(override_value, list):
            result[key] = deepcopy(override_value)
            continue

        # None no override desliga explicitamente a chave
        if override_value is None:
            result[key] = None
            continue

        if base_value is not None and type(base_value) is not type(override_value):
            raise ConfigTypeConflictError(
                f"Conflito de tipo na chave '{'.'.join(key_path)}': "
                f"{type(base_value).__name__} vs {type(override_value).__name__}"
            )

        result[key] = deepcopy(override_value)

    return result
