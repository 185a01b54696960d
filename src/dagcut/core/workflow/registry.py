"""
Registro do workflow e snapshot imutável do grafo.

Este módulo define:
    - `Workflow`: registro ordenado de stages e das result features,
      usado durante a montagem do workflow
    - `WorkflowGraph`: snapshot imutável consumido pelo planner

O snapshot congela as entradas de cada stage no momento em que é criado,
de modo que todo o estado de planejamento fica local a uma chamada e
independente de alterações posteriores na montagem.

Responsabilidades do módulo:
    - Validar nomes de stage (não vazios, únicos)
    - Preservar a ordem de registro, usada como critério de desempate
    - Descobrir stages alcançáveis a partir das result features
    - Rejeitar, em modo estrito, stages alcançáveis não registrados

Decisões arquiteturais:
    - Stages registrados vêm primeiro, na ordem de registro
    - Stages descobertos e não registrados vêm depois, por ordem de criação
    - Ciclos são detectados já no snapshot (falha fatal)

Invariantes:
    - Cada nome de stage identifica exatamente um Stage no snapshot
    - O snapshot nunca é alterado após criado

Limites explícitos:
    - Não calcula distâncias nem camadas (ver `dagcut.core.planner`)
    - Não executa stages
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from dagcut.core.exceptions import DuplicateStageNameError, UnknownStageError
from dagcut.core.planner.graph import collect_stages

from .types import Feature, Stage


def _live_inputs(stage: Stage) -> Tuple[Feature, ...]:
    return stage.inputs


@dataclass(frozen=True)
class WorkflowGraph:
    """
    Snapshot imutável de um workflow pronto para planejamento.

    Campos:
        - stages: todos os stages conhecidos, em ordem de desempate
        - result_features: features solicitadas como saída do workflow
        - edges: entradas congeladas de cada stage
    """
    stages: Tuple[Stage, ...]
    result_features: Tuple[Feature, ...]
    edges: Mapping[Stage, Tuple[Feature, ...]] = field(repr=False)
    _order: Mapping[Stage, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "stages", tuple(self.stages))
        object.__setattr__(self, "result_features", tuple(self.result_features))
        object.__setattr__(self, "edges", MappingProxyType(dict(self.edges)))
        object.__setattr__(
            self, "_order", MappingProxyType({s: i for i, s in enumerate(self.stages)})
        )

    @classmethod
    def from_result_features(cls, *features: Feature) -> "WorkflowGraph":
        return Workflow().set_result_features(*features).snapshot()

    def inputs_of(self, stage: Stage) -> Tuple[Feature, ...]:
        try:
            return self.edges[stage]
        except KeyError:
            raise UnknownStageError(
                message=f"Stage '{stage.name}' is not part of the workflow snapshot",
                details={"stages": [stage.name]},
                hint="Gere um novo snapshot após alterar o workflow.",
            ) from None

    def order_of(self, stage: Stage) -> int:
        try:
            return self._order[stage]
        except KeyError:
            raise UnknownStageError(
                message=f"Stage '{stage.name}' is not part of the workflow snapshot",
                details={"stages": [stage.name]},
            ) from None

    def stage(self, name: str) -> Stage:
        for s in self.stages:
            if s.name == name:
                return s
        raise KeyError(name)


@dataclass
class Workflow:
    """
    Registro canônico de um workflow em montagem.

    Uso típico:

        wf = Workflow().add_stages(lda, checker, selector)
        wf.set_result_features(prediction)
        graph = wf.snapshot()
    """

    _stages: Dict[str, Stage] = field(default_factory=dict, init=False, repr=False)
    _order: List[str] = field(default_factory=list, init=False, repr=False)
    _result_features: Tuple[Feature, ...] = field(default=(), init=False)

    def add_stage(self, stage: Stage) -> "Workflow":
        name = getattr(stage, "name", None)
        if not isinstance(name, str) or not name.strip():
            raise ValueError("stage.name must be a non-empty string")

        if name in self._stages:
            raise DuplicateStageNameError(
                message=f"Duplicate stage name: {name}",
                details={"stages": [name]},
            )

        self._stages[name] = stage
        self._order.append(name)
        return self

    def add_stages(self, *stages: Stage) -> "Workflow":
        for stage in stages:
            self.add_stage(stage)
        return self

    def set_result_features(self, *features: Feature) -> "Workflow":
        for f in features:
            if not isinstance(f, Feature):
                raise TypeError(f"result features must be Feature, received {type(f).__name__}")
        self._result_features = tuple(features)
        return self

    def stages(self) -> List[Stage]:
        return [self._stages[name] for name in self._order]

    def result_features(self) -> Tuple[Feature, ...]:
        return self._result_features

    def snapshot(self, *, strict: bool = False) -> WorkflowGraph:
        """
        Congela o workflow em um `WorkflowGraph`.

        Raises:
            CycleDetectedError: Se o grafo alcançável contiver um ciclo.
            UnknownStageError: Em modo estrito, se houver stage alcançável não registrado.
            DuplicateStageNameError: Se dois stages distintos tiverem o mesmo nome.
        """
        registered = self.stages()
        known = set(registered)
        reachable = collect_stages(self._result_features, _live_inputs)
        discovered = sorted((s for s in reachable if s not in known), key=lambda s: s.seq)

        if strict and discovered:
            names = [s.name for s in discovered]
            raise UnknownStageError(
                message=f"Stages reachable from result features but not registered: {', '.join(names)}",
                details={"stages": names},
                hint="Registre os stages com Workflow.add_stage ou desative planner.strict_registration.",
            )

        ordered = registered + discovered
        by_name: Dict[str, Stage] = {}
        for s in ordered:
            other = by_name.setdefault(s.name, s)
            if other is not s:
                raise DuplicateStageNameError(
                    message=f"Duplicate stage name: {s.name}",
                    details={"stages": [s.name]},
                )

        return WorkflowGraph(
            stages=tuple(ordered),
            result_features=self._result_features,
            edges={s: tuple(s.inputs) for s in ordered},
        )
