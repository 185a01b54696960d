"""
dagcut — Canonical Error Structures (v1)

Este módulo define o padrão canônico de erros do dagcut.
Erros são artefatos de domínio e fazem parte do contrato entre o planner
e o engine de execução externo, devendo ser:

- explícitos
- serializáveis
- rastreáveis
- acionáveis

Nenhuma decisão implícita é permitida.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from .exceptions import (
    CycleDetectedError,
    DagcutException,
    DuplicateStageNameError,
    MultipleModelSelectorsError,
    PlannerConfigurationError,
    UnknownStageError,
)


# ---------------------------------------------------------------------------
# Payload canônico
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro do dagcut.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    - decision_required: indica se o planejamento está bloqueado aguardando decisão humana
    """

    type: str
    message: str
    details: Dict[str, Any]
    hint: Optional[str] = None
    decision_required: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Retorna representação serializável do erro."""
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

# Grafo
DAG_CYCLE_DETECTED = "DAG_CYCLE_DETECTED"
DAG_UNKNOWN_STAGE = "DAG_UNKNOWN_STAGE"
DAG_DUPLICATE_STAGE_NAME = "DAG_DUPLICATE_STAGE_NAME"

# Planejamento
PLAN_MULTIPLE_MODEL_SELECTORS = "PLAN_MULTIPLE_MODEL_SELECTORS"

# Configuração / inesperado
PLANNER_CONFIGURATION_ERROR = "PLANNER_CONFIGURATION_ERROR"
PLANNER_UNEXPECTED_ERROR = "PLANNER_UNEXPECTED_ERROR"

_TYPE_BY_EXCEPTION = (
    (CycleDetectedError, DAG_CYCLE_DETECTED),
    (UnknownStageError, DAG_UNKNOWN_STAGE),
    (DuplicateStageNameError, DAG_DUPLICATE_STAGE_NAME),
    (MultipleModelSelectorsError, PLAN_MULTIPLE_MODEL_SELECTORS),
    (PlannerConfigurationError, PLANNER_CONFIGURATION_ERROR),
)


def exception_to_error(exc: Exception) -> ErrorPayload:
    """Converte exceções em ErrorPayload (serializável, acionável).

    Regras:
    - DagcutException: código estável pelo tipo da exceção, preservando
      message/details/hint/decision_required.
    - Outras exceções: encapsular como PLANNER_UNEXPECTED_ERROR sem expor stack trace.
    """
    if isinstance(exc, DagcutException):
        code = exc.__class__.__name__
        for exc_type, type_code in _TYPE_BY_EXCEPTION:
            if isinstance(exc, exc_type):
                code = type_code
                break
        return ErrorPayload(
            type=code,
            message=str(exc) or "Erro de planejamento",
            details=dict(exc.details or {}),
            hint=exc.hint,
            decision_required=bool(exc.decision_required),
        )

    return ErrorPayload(
        type=PLANNER_UNEXPECTED_ERROR,
        message=str(exc) or "Erro inesperado durante o planejamento",
        details={"exception_class": exc.__class__.__name__},
        hint="Verifique a definição do workflow e a configuração do planner",
    )
