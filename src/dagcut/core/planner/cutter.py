# src/dagcut/core/planner/cutter.py
"""
DAG Cutter do dagcut.

Este módulo localiza o stage de seleção de modelo (Model Selector) de um
workflow e divide os stages que o alimentam em dois grupos:

    - per-fold: dependem conjuntamente de label e de preditores (ex.:
      seleção de features guiada pelo label, sanity checks) e precisam
      ser recalculados em cada split de validação cruzada
    - compute-once: dependem apenas de preditores ou apenas de labels;
      sua saída é idêntica entre folds e é calculada uma única vez

Algoritmo:
    1. Graph Builder sobre as result features → conjunto de ancestrais S
    2. M = stages de S que são Model Selector; |M| > 1 é erro fatal,
       |M| = 0 devolve um corte vazio
    3. Distâncias recalculadas com o Model Selector como raiz (distância 0),
       retendo apenas seus ancestrais próprios; ramos que não o alimentam
       são podados silenciosamente
    4. Classificação pela linhagem de features de cada stage
    5. Um conjunto de Layers por grupo, em ordem decrescente de distância

Invariantes:
    - Cada stage retido aparece em exatamente um grupo, uma única vez
    - O corte é tudo-ou-nada: resultado completo ou exceção
    - Chamadas repetidas sobre o mesmo snapshot produzem resultados iguais

Limites explícitos:
    - Não executa stages nem folds
    - Não decide a estratégia de validação cruzada
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from dagcut.core.exceptions import multiple_model_selectors
from dagcut.core.workflow.context import DAG_CUTTER, GRAPH_BUILDER, PlanContext
from dagcut.core.workflow.registry import WorkflowGraph
from dagcut.core.workflow.types import CutResult, Feature, Stage

from .graph import InputsOf, ancestor_distances, collect_stages, group_layers


LineageFlags = Tuple[bool, bool]  # (has_response, has_predictor)


def lineage_flags(stages: Sequence[Stage], inputs_of: InputsOf) -> Dict[Stage, LineageFlags]:
    """
    Calcula, para cada stage, que tipos de feature existem em sua linhagem.

    A linhagem de um stage é o conjunto transitivo de features alcançáveis
    para trás a partir de suas entradas (as próprias entradas inclusas).
    `stages` deve estar em ordem topológica e fechado sob ancestralidade.

    Se uma feature derivada é response é recalculado aqui a partir de
    `inputs_of` (as entradas congeladas no snapshot), nunca lido do estado
    vivo do stage produtor.
    """
    flags: Dict[Stage, LineageFlags] = {}
    response_outputs: Dict[Stage, bool] = {}

    def is_response(f: Feature) -> bool:
        if f.producer is None:
            return f.is_response
        return response_outputs[f.producer]

    for stage in stages:
        inputs = inputs_of(stage)
        has_response = has_predictor = False
        for f in inputs:
            if is_response(f):
                has_response = True
            else:
                has_predictor = True
            if f.producer is not None:
                upstream_response, upstream_predictor = flags[f.producer]
                has_response = has_response or upstream_response
                has_predictor = has_predictor or upstream_predictor
        flags[stage] = (has_response, has_predictor)
        response_outputs[stage] = bool(inputs) and all(is_response(f) for f in inputs)
    return flags


def is_mixed(stage: Stage, graph: WorkflowGraph) -> bool:
    """True quando a linhagem de `stage` combina features response e não-response."""
    stages = collect_stages(graph.inputs_of(stage), graph.inputs_of) + [stage]
    has_response, has_predictor = lineage_flags(stages, graph.inputs_of)[stage]
    return has_response and has_predictor


def find_model_selector(stages: Sequence[Stage]) -> Optional[Stage]:
    """
    Localiza o único Model Selector entre `stages`.

    Raises:
        MultipleModelSelectorsError: Se houver mais de um Model Selector,
            em paralelo ou em sequência.
    """
    selectors = [s for s in stages if s.is_model_selector]
    if len(selectors) > 1:
        raise multiple_model_selectors([s.name for s in selectors])
    return selectors[0] if selectors else None


def cut_dag(
    graph: WorkflowGraph,
    result_features: Optional[Sequence[Feature]] = None,
    *,
    ctx: Optional[PlanContext] = None,
) -> CutResult:
    """
    Corta o DAG em torno do Model Selector.

    Args:
        graph: Snapshot do workflow.
        result_features: Features solicitadas (default: as do snapshot).
        ctx: Contexto opcional que recebe eventos e warnings do corte.

    Returns:
        CutResult: `(model_selector, compute_once, per_fold)`.

    Raises:
        CycleDetectedError: Se houver ciclo no grafo alcançável.
        MultipleModelSelectorsError: Se houver mais de um Model Selector.
        UnknownStageError: Se um stage alcançável não pertencer ao snapshot.
    """
    features = tuple(graph.result_features if result_features is None else result_features)
    stages = collect_stages(features, graph.inputs_of)

    if ctx is not None:
        ctx.log(
            component=GRAPH_BUILDER,
            level="INFO",
            message="stages collected",
            result_features=[f.name for f in features],
            stages=[s.name for s in stages],
        )

    selector = find_model_selector(stages)
    if selector is None:
        if ctx is not None:
            ctx.log(component=DAG_CUTTER, level="INFO", message="no model selector, nothing to cut")
        return CutResult()

    distances = ancestor_distances(graph, selector)
    ordered = [s for s in stages if s in distances]
    flags = lineage_flags(ordered, graph.inputs_of)

    compute_once: Dict[Stage, int] = {}
    per_fold: Dict[Stage, int] = {}
    for stage in ordered:
        has_response, has_predictor = flags[stage]
        target = per_fold if has_response and has_predictor else compute_once
        target[stage] = distances[stage]

    result = CutResult(
        model_selector=selector,
        compute_once=group_layers(compute_once, graph.order_of),
        per_fold=group_layers(per_fold, graph.order_of),
    )

    if ctx is not None:
        pruned: List[str] = [s.name for s in stages if s not in distances and s is not selector]
        if pruned:
            ctx.add_warning(
                component=DAG_CUTTER,
                message=f"stages not related to model selection were pruned: {', '.join(pruned)}",
            )
        ctx.log(
            component=DAG_CUTTER,
            level="INFO",
            message="dag cut",
            pruned=pruned,
            **result.to_dict(),
        )

    return result
