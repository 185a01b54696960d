"""
dagcut — Canonical Exceptions (v1)

Este módulo define as exceções tipadas do planner do dagcut.

Objetivo:
- Permitir que Graph Builder, DAG Cutter e Workflow levantem exceções
  semânticas tipadas
- Facilitar o mapeamento determinístico para ErrorPayload
- Evitar ValueError/RuntimeError genéricos em guardrails estruturais

Regras:
- Exceções carregam apenas dados estruturados (serializáveis).
- `details["stages"]` lista os nomes dos stages implicados, quando houver.
- Todo erro do planner é fatal: não há retry nem resultado parcial.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class DagcutException(Exception):
    """Base class para exceções internas do dagcut.

    Importante:
    - Sempre carregar dados estruturados em `details`
    - Mensagem deve ser curta e humana
    """

    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None
    decision_required: bool = False

    def __str__(self) -> str:
        return self.message

    @property
    def stages(self) -> List[str]:
        return list(self.details.get("stages", []) or [])


# ---------------------------------------------------------------------------
# Grafo (estrutura do workflow)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GraphError(DagcutException):
    """Violação estrutural do grafo de stages/features."""


@dataclass(frozen=True)
class CycleDetectedError(GraphError):
    """O grafo produtor/consumidor contém um ciclo."""


@dataclass(frozen=True)
class UnknownStageError(GraphError):
    """Stage alcançável não faz parte do snapshot/registro do workflow."""


@dataclass(frozen=True)
class DuplicateStageNameError(GraphError):
    """Dois stages distintos compartilham o mesmo nome."""


# ---------------------------------------------------------------------------
# Planejamento (corte do DAG)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlanError(DagcutException):
    """Workflow estruturalmente válido, mas impossível de planejar."""


@dataclass(frozen=True)
class MultipleModelSelectorsError(PlanError):
    """Mais de um stage de seleção de modelo no workflow."""


# ---------------------------------------------------------------------------
# Configuração
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlannerConfigurationError(DagcutException):
    """Seção `planner` da configuração inválida ou inconsistente."""


def cycle_detected(stage_names: List[str]) -> CycleDetectedError:
    return CycleDetectedError(
        message=f"Cycle detected in stage graph: {' -> '.join(stage_names)}",
        details={"stages": list(stage_names)},
        hint="Revise os set_input do workflow: nenhum stage pode consumir (direta ou indiretamente) a própria saída.",
    )


def multiple_model_selectors(stage_names: List[str]) -> MultipleModelSelectorsError:
    return MultipleModelSelectorsError(
        message=(
            f"Workflow can contain at most 1 Model Selector. "
            f"Found {len(stage_names)} Model Selectors : {','.join(stage_names)}"
        ),
        details={"stages": list(stage_names), "count": len(stage_names)},
        hint="Mantenha um único stage de seleção de modelo; converta os demais em estimators comuns.",
    )
