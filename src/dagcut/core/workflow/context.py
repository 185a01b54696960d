"""
Contexto de planejamento compartilhado.

Este módulo define o `PlanContext`, a estrutura que acompanha uma chamada
do planner e acumula, de forma explícita:
    - identidade do planejamento (plan_id, created_at)
    - configuração resolvida e seu hash canônico
    - eventos de log estruturados por componente
    - warnings não fatais por componente

Princípios fundamentais:
    - Isolamento por planejamento (cada chamada possui seu próprio contexto)
    - Logs são eventos estruturados, não texto livre
    - Ausência de estado global compartilhado

Invariantes:
    - Eventos sempre incluem `plan_id` e `component`
    - Warnings são agrupados por `component`
    - O contexto é o único objeto mutado durante o planejamento

Limites explícitos:
    - Não planeja nem corta o DAG
    - Não persiste eventos
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from dagcut.core.config.hashing import compute_config_hash


GRAPH_BUILDER = "graph_builder"
DAG_CUTTER = "dag_cutter"
FIT_PLANNER = "fit_planner"


@dataclass
class PlanContext:
    """
    Contexto de uma chamada de planejamento.

    Componentes do planner registram aqui o que decidiram (stages
    retidos, Model Selector encontrado, stages podados), permitindo
    inspeção posterior sem acoplar o planner a um backend de logging.
    """
    plan_id: str
    created_at: datetime
    config: Dict[str, Any] = field(default_factory=dict)
    meta: Dict[str, Any] = field(default_factory=dict)

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    @classmethod
    def create(cls, config: Optional[Dict[str, Any]] = None, **meta: Any) -> "PlanContext":
        cfg = dict(config or {})
        meta.setdefault("config_hash", compute_config_hash(cfg))
        return cls(
            plan_id=uuid.uuid4().hex,
            created_at=datetime.now(timezone.utc),
            config=cfg,
            meta=meta,
        )

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, component: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "plan_id": self.plan_id,
            "component": component,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        self.events.append(event)

    def add_warning(self, *, component: str, message: str) -> None:
        if component not in self.warnings:
            self.warnings[component] = []
        self.warnings[component].append(message)

    def events_for(self, component: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e["component"] == component]
