# src/dagcut/core/planner/graph.py
"""
Graph Builder do dagcut.

Este módulo reconstrói, a partir de um conjunto de features solicitadas,
o DAG mínimo de stages necessário para produzi-las, e anota cada stage
com sua distância até a raiz.

O Graph Builder opera exclusivamente em nível estrutural, analisando:
    - links produtor/entrada (feature → stage produtor → entradas → ...)
    - formação de ciclos
    - comprimento do caminho mais longo até a raiz

Princípios fundamentais:
    - O grafo produtor/consumidor deve ser acíclico
    - A saída é determinística para a mesma entrada
    - Consumidores são um índice derivado por chamada, nunca um link guardado

Decisões arquiteturais:
    - Travessia DFS iterativa (sem limite de recursão)
    - Distância = caminho mais longo em saltos de stage (não o mais curto)
    - Empates dentro de um Layer seguem a ordem de inserção no workflow
    - Ciclos são tratados como falha fatal

Invariantes:
    - Cada stage alcançável aparece exatamente uma vez
    - Layers saem em ordem estritamente decrescente de distância
    - Nenhum Stage ou Feature é mutado

Limites explícitos:
    - Não identifica o Model Selector (ver `cutter`)
    - Não executa stages
    - Não decide políticas de execução
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Set,
    Tuple,
)

from dagcut.core.exceptions import cycle_detected
from dagcut.core.workflow.types import Feature, Layer, Stage, StagesDAG

if TYPE_CHECKING:
    from dagcut.core.workflow.registry import WorkflowGraph


InputsOf = Callable[[Stage], Sequence[Feature]]

_VISITING = 1
_DONE = 2


def _parent_stages(stage: Stage, inputs_of: InputsOf) -> List[Stage]:
    parents: List[Stage] = []
    for f in inputs_of(stage):
        p = f.producer
        if p is not None and p not in parents:
            parents.append(p)
    return parents


def collect_stages(features: Iterable[Feature], inputs_of: InputsOf) -> List[Stage]:
    """
    Coleta os stages alcançáveis a partir de `features` seguindo produtores.

    A travessia parte de cada feature (na ordem dada), visita o stage
    produtor e, recursivamente, os produtores de suas entradas (na ordem
    declarada). Features raw encerram o caminho.

    Returns:
        List[Stage]: Stages alcançáveis em ordem topológica (antecessores
        antes de seus consumidores), cada um exatamente uma vez.

    Raises:
        CycleDetectedError: Se um stage for alcançável a partir da própria saída.
    """
    state: Dict[Stage, int] = {}
    order: List[Stage] = []

    for feature in features:
        root = feature.producer
        if root is None or root in state:
            continue

        state[root] = _VISITING
        stack = [(root, iter(_parent_stages(root, inputs_of)))]

        while stack:
            stage, parents = stack[-1]
            for parent in parents:
                seen = state.get(parent)
                if seen is None:
                    state[parent] = _VISITING
                    stack.append((parent, iter(_parent_stages(parent, inputs_of))))
                    break
                if seen == _VISITING:
                    path = [s for s, _ in stack]
                    cycle = path[path.index(parent):] + [parent]
                    raise cycle_detected([s.name for s in cycle])
            else:
                stack.pop()
                state[stage] = _DONE
                order.append(stage)

    return order


@dataclass(frozen=True)
class ConsumerIndex:
    """
    Índice derivado de consumidores, restrito a um conjunto de stages.

    - `consumers`: feature → stages que a consomem
    - `downstream`: stage produtor → stages que consomem alguma de suas saídas
    """

    consumers: Mapping[Feature, Tuple[Stage, ...]]
    downstream: Mapping[Stage, Tuple[Stage, ...]]

    @classmethod
    def build(cls, stages: Sequence[Stage], inputs_of: InputsOf) -> "ConsumerIndex":
        by_feature: Dict[Feature, List[Stage]] = {}
        by_producer: Dict[Stage, List[Stage]] = {}
        for stage in stages:
            for f in inputs_of(stage):
                bucket = by_feature.setdefault(f, [])
                if stage not in bucket:
                    bucket.append(stage)
                if f.producer is not None:
                    children = by_producer.setdefault(f.producer, [])
                    if stage not in children:
                        children.append(stage)
        return cls(
            consumers={f: tuple(s) for f, s in by_feature.items()},
            downstream={p: tuple(s) for p, s in by_producer.items()},
        )

    def of(self, feature: Feature) -> Tuple[Stage, ...]:
        return self.consumers.get(feature, ())

    def downstream_of(self, stage: Stage) -> Tuple[Stage, ...]:
        return self.downstream.get(stage, ())


def compute_distances(
    stages: Sequence[Stage],
    roots: Iterable[Stage],
    inputs_of: InputsOf,
) -> Dict[Stage, int]:
    """
    Calcula a distância (caminho mais longo) de cada stage até as raízes.

    `stages` deve estar em ordem topológica (saída de `collect_stages`).
    Percorre de trás para frente (sumidouros primeiro):

        d(s) = max(0 se s é raiz, 1 + d(c) para cada consumidor retido c)

    Consumidores fora de `stages` são ignorados.
    """
    root_set: Set[Stage] = set(roots)
    retained: Set[Stage] = set(stages)
    index = ConsumerIndex.build(stages, inputs_of)

    distances: Dict[Stage, int] = {}
    for stage in reversed(stages):
        candidates = [0] if stage in root_set else []
        for consumer in index.downstream_of(stage):
            if consumer in retained:
                candidates.append(distances[consumer] + 1)
        distances[stage] = max(candidates) if candidates else 0

    return distances


def group_layers(
    distances: Mapping[Stage, int],
    order_key: Callable[[Stage], int],
) -> StagesDAG:
    """
    Agrupa stages de mesma distância em Layers.

    Layers saem em ordem estritamente decrescente de distância; dentro de
    um Layer os stages seguem `order_key` (ordem de inserção no workflow).
    """
    by_distance: Dict[int, List[Stage]] = {}
    for stage, distance in distances.items():
        by_distance.setdefault(distance, []).append(stage)

    return tuple(
        Layer(distance=d, stages=tuple(sorted(by_distance[d], key=order_key)))
        for d in sorted(by_distance, reverse=True)
    )


def build_dag(
    graph: "WorkflowGraph",
    result_features: Optional[Sequence[Feature]] = None,
) -> StagesDAG:
    """
    Reconstrói o DAG mínimo que produz as result features.

    Stages que produzem diretamente uma feature solicitada têm distância 0.

    Args:
        graph: Snapshot do workflow.
        result_features: Features solicitadas (default: as do snapshot).

    Returns:
        StagesDAG: Layers em ordem decrescente de distância.

    Raises:
        CycleDetectedError: Se houver ciclo no grafo alcançável.
        UnknownStageError: Se um stage alcançável não pertencer ao snapshot.
    """
    features = tuple(graph.result_features if result_features is None else result_features)
    stages = collect_stages(features, graph.inputs_of)
    roots = [f.producer for f in features if f.producer is not None]
    distances = compute_distances(stages, roots, graph.inputs_of)
    return group_layers(distances, graph.order_of)


def ancestor_distances(graph: "WorkflowGraph", stage: Stage) -> Dict[Stage, int]:
    """
    Distâncias dos ancestrais próprios de `stage`, com `stage` como raiz (distância 0).

    O próprio `stage` não aparece no resultado; stages em ramos que não
    alimentam `stage` também não.
    """
    stages = collect_stages(graph.inputs_of(stage), graph.inputs_of) + [stage]
    distances = compute_distances(stages, [stage], graph.inputs_of)
    distances.pop(stage, None)
    return distances
