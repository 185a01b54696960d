"""Inferência de `StageKind` a partir do objeto de computação do stage.

Regras (v1), avaliadas em ordem:
- None ou callable simples (função)           → transformer
- sklearn GridSearchCV / RandomizedSearchCV   → model_selector
- sklearn `FunctionTransformer`               → transformer (sem estado)
- objeto com `fit`                            → estimator
- objeto com `transform` e sem `fit`          → transformer

Objetos que não se encaixam em nenhuma regra são rejeitados: o kind deve
então ser declarado explicitamente no Stage.
"""

from __future__ import annotations

import inspect
from typing import Any

from .types import StageKind


def _is_search_cv(operation: Any) -> bool:
    from sklearn.model_selection import GridSearchCV, RandomizedSearchCV  # type: ignore

    return isinstance(operation, (GridSearchCV, RandomizedSearchCV))


def _is_function_transformer(operation: Any) -> bool:
    from sklearn.preprocessing import FunctionTransformer  # type: ignore

    return isinstance(operation, FunctionTransformer)


def infer_stage_kind(operation: Any) -> StageKind:
    if operation is None or inspect.isroutine(operation):
        return StageKind.TRANSFORMER

    if _is_search_cv(operation):
        return StageKind.MODEL_SELECTOR

    if _is_function_transformer(operation):
        return StageKind.TRANSFORMER

    if callable(getattr(operation, "fit", None)):
        return StageKind.ESTIMATOR

    if callable(getattr(operation, "transform", None)):
        return StageKind.TRANSFORMER

    raise TypeError(
        f"Cannot infer stage kind from {type(operation).__name__}; declare kind explicitly"
    )
