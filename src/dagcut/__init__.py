"""
dagcut — planner de execução para workflows de feature engineering e
ajuste de modelos.

Um workflow é um DAG de stages ligados por features. Antes da execução o
dagcut:
    - descobre os stages necessários para produzir as result features
    - localiza o único stage de seleção de modelo (se houver)
    - separa os stages que o alimentam entre recalculados por fold e
      calculados uma única vez

Uso típico:

    from dagcut import Feature, Stage, StageKind, Workflow, cut_dag

    label = Feature.raw("label", "real", is_response=True)
    features = Feature.raw("features", "vector")
    lda = Stage("lda", StageKind.ESTIMATOR).set_input(features)
    selector = Stage("selector", StageKind.MODEL_SELECTOR).set_input(label, lda.get_output())

    graph = Workflow().set_result_features(selector.get_output()).snapshot()
    model_selector, compute_once, per_fold = cut_dag(graph)
"""

from .core.config.settings import PlannerSettings
from .core.exceptions import (
    CycleDetectedError,
    DagcutException,
    DuplicateStageNameError,
    GraphError,
    MultipleModelSelectorsError,
    PlanError,
    PlannerConfigurationError,
    UnknownStageError,
)
from .core.planner.cutter import cut_dag
from .core.planner.fit_plan import FitPlan, plan_fit
from .core.planner.graph import build_dag
from .core.workflow.context import PlanContext
from .core.workflow.registry import Workflow, WorkflowGraph
from .core.workflow.types import CutResult, Feature, Layer, Stage, StageKind

__all__ = [
    "build_dag",
    "cut_dag",
    "plan_fit",
    "CutResult",
    "CycleDetectedError",
    "DagcutException",
    "DuplicateStageNameError",
    "Feature",
    "FitPlan",
    "GraphError",
    "Layer",
    "MultipleModelSelectorsError",
    "PlanContext",
    "PlanError",
    "PlannerConfigurationError",
    "PlannerSettings",
    "Stage",
    "StageKind",
    "UnknownStageError",
    "Workflow",
    "WorkflowGraph",
]
