"""
Tipos canônicos do workflow do dagcut.

Este módulo define o modelo de dados sobre o qual o planner opera:
stages (nós de computação), features (artefatos tipados trocados entre
stages) e as estruturas derivadas produzidas pelo planejamento.

Componentes principais:
    - StageKind → tag do tipo de stage (transformer, estimator, model_selector)
    - Feature   → artefato nomeado e tipado, produzido por no máximo um Stage
    - Stage     → nó de computação com entradas e saídas ordenadas
    - Layer     → conjunto de stages independentes com a mesma distância
    - CutResult → Model Selector + camadas compute-once e per-fold

Princípios fundamentais:
    - Features não guardam consumidores: o índice de consumidores é
      derivado a cada chamada do planner
    - `is_model_selector` é um predicado sobre a tag, não dispatch virtual
    - O planner apenas lê Stages e Features, nunca os altera

Invariantes:
    - Cada Feature derivada possui exatamente um produtor
    - Features raw (lidas dos dados) não possuem produtor
    - Layer e CutResult são imutáveis

Limites explícitos:
    - Não executa stages (a `operation` é opaca ao planner)
    - Não valida unicidade de nomes (responsabilidade do `Workflow`)
    - Não persiste stages treinados
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple


_STAGE_SEQUENCE = itertools.count()

COMPUTE_ONCE = "compute_once"
PER_FOLD = "per_fold"
MODEL_SELECTOR = "model_selector"


class StageKind(str, Enum):
    """
    Tag semântica de um Stage.

    Tipos definidos:
        - TRANSFORMER: transformação pura, sem estado entre invocações
        - ESTIMATOR: precisa ser ajustado (fit) antes do uso
        - MODEL_SELECTOR: estimator distinguido responsável pela seleção
          automática de modelo/hiperparâmetros (no máximo um por workflow)

    Os valores são strings para facilitar serialização e relatórios.
    """
    TRANSFORMER = "transformer"
    ESTIMATOR = "estimator"
    MODEL_SELECTOR = "model_selector"


@dataclass(frozen=True, eq=False)
class Feature:
    """
    Artefato de dados nomeado e tipado.

    Campos:
        - name: nome da feature
        - value_type: tag declarada do tipo de valor (ex.: "real", "vector")
        - response: marca uma feature raw como label/target supervisionado
        - producer: Stage que produz a feature (None para features raw)

    Igualdade é por identidade: duas features com o mesmo nome continuam
    sendo artefatos distintos.

    `is_response` de uma feature derivada nunca é armazenado: é lido das
    entradas atuais do produtor, de modo que religar o stage com
    `set_input` após ler suas saídas continua consistente.
    """
    name: str
    value_type: str = "any"
    response: bool = False
    producer: Optional["Stage"] = field(default=None, repr=False)

    @classmethod
    def raw(cls, name: str, value_type: str = "any", *, is_response: bool = False) -> "Feature":
        if not isinstance(name, str) or not name.strip():
            raise ValueError("feature.name must be a non-empty string")
        return cls(name=name, value_type=value_type, response=is_response)

    @property
    def is_raw(self) -> bool:
        return self.producer is None

    @property
    def is_response(self) -> bool:
        if self.producer is None:
            return self.response
        return self.producer.outputs_are_response

    def with_response(self, is_response: bool = True) -> "Feature":
        """Cópia de uma feature raw com outra marcação de response."""
        if not self.is_raw:
            raise ValueError(
                f"Feature '{self.name}' is produced by stage '{self.producer.name}' "
                "and cannot be copied"
            )
        return replace(self, response=is_response)


@dataclass(eq=False)
class Stage:
    """
    Nó de computação do workflow.

    Um Stage consome Features (`inputs`) e produz Features (`get_outputs`).
    Entradas são definidas durante a montagem do workflow com
    `set_input(...)`; saídas são criadas uma única vez, na primeira leitura.

    Quando `kind` não é informado, é inferido a partir de `operation`
    (ver `sklearn_kinds.infer_stage_kind`).

    Uma saída é response quando o stage possui entradas e todas elas são
    response (ex.: normalização do label).
    """
    name: str
    kind: Optional[StageKind] = None
    operation: Any = field(default=None, repr=False)
    params: Dict[str, Any] = field(default_factory=dict)
    output_names: Tuple[str, ...] = ("output",)
    output_type: str = "any"
    inputs: Tuple[Feature, ...] = field(default=(), init=False)
    seq: int = field(default_factory=lambda: next(_STAGE_SEQUENCE), init=False, repr=False)
    _outputs: Optional[Tuple[Feature, ...]] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("stage.name must be a non-empty string")
        if self.kind is None:
            from .sklearn_kinds import infer_stage_kind

            self.kind = infer_stage_kind(self.operation)
        else:
            self.kind = StageKind(self.kind)
        self.output_names = tuple(self.output_names)
        if not self.output_names:
            raise ValueError(f"stage '{self.name}' must declare at least one output")

    @property
    def is_model_selector(self) -> bool:
        return self.kind is StageKind.MODEL_SELECTOR

    @property
    def outputs_are_response(self) -> bool:
        return bool(self.inputs) and all(f.is_response for f in self.inputs)

    def set_input(self, *features: Feature) -> "Stage":
        for f in features:
            if not isinstance(f, Feature):
                raise TypeError(
                    f"stage '{self.name}' inputs must be Feature, received {type(f).__name__}"
                )
        self.inputs = tuple(features)
        return self

    def get_outputs(self) -> Tuple[Feature, ...]:
        if self._outputs is None:
            self._outputs = tuple(
                Feature(
                    name=f"{self.name}_{out}",
                    value_type=self.output_type,
                    producer=self,
                )
                for out in self.output_names
            )
        return self._outputs

    def get_output(self) -> Feature:
        return self.get_outputs()[0]


@dataclass(frozen=True)
class Layer:
    """
    Stages mutuamente independentes que compartilham a mesma distância.

    Iterar um Layer produz pares `(stage, distance)`; o engine externo pode
    executar todos os stages de um Layer em paralelo.
    """
    distance: int
    stages: Tuple[Stage, ...]

    def __iter__(self) -> Iterator[Tuple[Stage, int]]:
        for stage in self.stages:
            yield stage, self.distance

    def __len__(self) -> int:
        return len(self.stages)

    def names(self) -> List[str]:
        return [s.name for s in self.stages]

    def pairs(self) -> List[Tuple[str, int]]:
        return [(s.name, self.distance) for s in self.stages]


StagesDAG = Tuple[Layer, ...]


@dataclass(frozen=True)
class CutResult:
    """
    Resultado do corte do DAG em torno do Model Selector.

    Campos:
        - model_selector: Stage de seleção de modelo (None quando ausente)
        - compute_once: camadas de stages invariantes entre folds
        - per_fold: camadas de stages recalculados em cada fold

    Invariantes:
        - Sem Model Selector, ambas as sequências são vazias
        - Cada stage aparece em exatamente uma sequência, uma única vez
        - Em cada sequência, as distâncias são estritamente decrescentes

    Pode ser desempacotado como `(model_selector, compute_once, per_fold)`.
    """
    model_selector: Optional[Stage] = None
    compute_once: StagesDAG = ()
    per_fold: StagesDAG = ()

    def __iter__(self) -> Iterator[Any]:
        yield self.model_selector
        yield self.compute_once
        yield self.per_fold

    def stages(self) -> List[Stage]:
        return [s for layer in self.compute_once + self.per_fold for s in layer.stages]

    def group_of(self, stage: Stage) -> Optional[str]:
        if stage is self.model_selector:
            return MODEL_SELECTOR
        for group, layers in ((COMPUTE_ONCE, self.compute_once), (PER_FOLD, self.per_fold)):
            if any(stage in layer.stages for layer in layers):
                return group
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model_selector": self.model_selector.name if self.model_selector else None,
            COMPUTE_ONCE: [layer.pairs() for layer in self.compute_once],
            PER_FOLD: [layer.pairs() for layer in self.per_fold],
        }

    def to_frame(self):
        """Tabela (pandas) com uma linha por stage planejado, Model Selector incluso."""
        import pandas as pd  # type: ignore

        rows: List[Dict[str, Any]] = []
        for group, layers in ((COMPUTE_ONCE, self.compute_once), (PER_FOLD, self.per_fold)):
            for layer in layers:
                for stage, distance in layer:
                    rows.append({
                        "stage": stage.name,
                        "kind": stage.kind.value,
                        "group": group,
                        "distance": distance,
                    })
        if self.model_selector is not None:
            rows.append({
                "stage": self.model_selector.name,
                "kind": self.model_selector.kind.value,
                "group": MODEL_SELECTOR,
                "distance": 0,
            })
        return pd.DataFrame(rows, columns=["stage", "kind", "group", "distance"])
