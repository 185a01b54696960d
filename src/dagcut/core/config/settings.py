# src/dagcut/core/config/settings.py
"""
Leitura tipada da seção `planner` da configuração.

Config esperada (exemplo):

planner:
  workflow_cv: true           # corta o DAG em torno do Model Selector
  strict_registration: false  # exige que todo stage alcançável esteja registrado

Chaves ausentes assumem os defaults abaixo. Chaves desconhecidas ou com
tipo errado são erro de configuração (nenhuma coerção é aplicada).
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

from dagcut.core.exceptions import PlannerConfigurationError


PLANNER_SECTION = "planner"


@dataclass(frozen=True)
class PlannerSettings:
    """Opções efetivas do planner."""

    workflow_cv: bool = True
    strict_registration: bool = False

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]]) -> "PlannerSettings":
        section = (config or {}).get(PLANNER_SECTION, {})
        if section is None:
            section = {}
        if not isinstance(section, Mapping):
            raise PlannerConfigurationError(
                message=f"Seção '{PLANNER_SECTION}' deve ser um mapa",
                details={"received": type(section).__name__},
            )

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(section) - known)
        if unknown:
            raise PlannerConfigurationError(
                message=f"Chaves desconhecidas em '{PLANNER_SECTION}': {', '.join(unknown)}",
                details={"unknown_keys": unknown, "allowed_keys": sorted(known)},
            )

        values: Dict[str, Any] = {}
        for key, value in section.items():
            if not isinstance(value, bool):
                raise PlannerConfigurationError(
                    message=f"'{PLANNER_SECTION}.{key}' deve ser booleano",
                    details={"key": key, "received": type(value).__name__},
                )
            values[key] = value

        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
