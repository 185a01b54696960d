# src/dagcut/core/planner/fit_plan.py
"""
Plano de ajuste (fit) completo de um workflow.

Combina Graph Builder e DAG Cutter no plano que o engine de execução
externo consome:

    1. `compute_once`: camadas calculadas uma única vez antes da CV
    2. `per_fold`: camadas recalculadas dentro de cada fold
    3. Model Selector
    4. `remaining`: demais stages do DAG mínimo (o próprio Model Selector,
       seus descendentes e ramos não relacionados), com distâncias
       relativas às result features

Config esperada (exemplo):

planner:
  workflow_cv: true
  strict_registration: false

Com `workflow_cv: false` o corte ainda é executado (a regra de um único
Model Selector continua valendo), mas os grupos saem vazios e todos os
stages ficam em `remaining`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from dagcut.core.config.settings import PlannerSettings
from dagcut.core.errors import exception_to_error
from dagcut.core.exceptions import DagcutException
from dagcut.core.workflow.context import FIT_PLANNER, PlanContext
from dagcut.core.workflow.registry import Workflow, WorkflowGraph
from dagcut.core.workflow.types import CutResult, Layer, Stage, StagesDAG

from .cutter import cut_dag
from .graph import build_dag


@dataclass(frozen=True)
class FitPlan:
    """Plano completo: corte em torno do Model Selector + camadas restantes."""

    cut: CutResult
    remaining: StagesDAG
    workflow_cv: bool

    @property
    def model_selector(self) -> Optional[Stage]:
        return self.cut.model_selector

    def stages(self) -> List[Stage]:
        return self.cut.stages() + [s for layer in self.remaining for s in layer.stages]

    def to_dict(self) -> Dict[str, Any]:
        out = self.cut.to_dict()
        out["remaining"] = [layer.pairs() for layer in self.remaining]
        out["workflow_cv"] = self.workflow_cv
        return out


def _without(layers: StagesDAG, excluded: set) -> StagesDAG:
    kept = (
        Layer(distance=layer.distance, stages=tuple(s for s in layer.stages if s not in excluded))
        for layer in layers
    )
    return tuple(layer for layer in kept if layer.stages)


def plan_fit(
    workflow: Union[Workflow, WorkflowGraph],
    *,
    settings: Optional[PlannerSettings] = None,
    ctx: Optional[PlanContext] = None,
) -> FitPlan:
    """
    Produz o `FitPlan` de um workflow.

    Settings são resolvidos nesta ordem: argumento explícito, seção
    `planner` de `ctx.config`, defaults de `PlannerSettings`.

    Em caso de falha, um evento ERROR com o `ErrorPayload` serializado é
    registrado no contexto e a exceção é propagada sem plano parcial.
    """
    try:
        resolved = settings or PlannerSettings.from_config(ctx.config if ctx is not None else None)

        if isinstance(workflow, Workflow):
            graph = workflow.snapshot(strict=resolved.strict_registration)
        else:
            graph = workflow

        cut = cut_dag(graph, ctx=ctx)
        if not resolved.workflow_cv:
            cut = CutResult(model_selector=cut.model_selector)

        remaining = _without(build_dag(graph), set(cut.stages()))

    except DagcutException as exc:
        if ctx is not None:
            ctx.log(
                component=FIT_PLANNER,
                level="ERROR",
                message=str(exc),
                error=exception_to_error(exc).to_dict(),
            )
        raise

    plan = FitPlan(cut=cut, remaining=remaining, workflow_cv=resolved.workflow_cv)
    if ctx is not None:
        ctx.log(
            component=FIT_PLANNER,
            level="INFO",
            message="fit plan ready",
            settings=resolved.to_dict(),
            **plan.to_dict(),
        )
    return plan
