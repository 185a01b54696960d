# tests/core/workflow/test_types.py
"""
Testes dos tipos canônicos do workflow (Feature, Stage, Layer, CutResult).

Os testes asseguram que:
- features raw não possuem produtor
- saídas de um stage são criadas uma única vez e apontam para o produtor
- a marcação de response é propagada apenas quando todas as entradas são response
- CutResult é desempacotável e serializável (dict e DataFrame)
"""

import pytest

from dagcut.core.workflow.types import (
    CutResult,
    Feature,
    Layer,
    Stage,
    StageKind,
)


def test_raw_feature_has_no_producer():
    f = Feature.raw("age", "real")
    assert f.is_raw
    assert f.producer is None
    assert f.is_response is False


def test_raw_feature_requires_name():
    with pytest.raises(ValueError):
        Feature.raw("  ")


def test_features_compare_by_identity():
    assert Feature.raw("x") != Feature.raw("x")


def test_with_response_copies_raw_feature():
    f = Feature.raw("target", "real")
    label = f.with_response()
    assert label.is_response is True
    assert label is not f
    assert f.is_response is False


def test_with_response_rejects_derived_feature(features):
    out = Stage("scale", StageKind.TRANSFORMER).set_input(features).get_output()
    with pytest.raises(ValueError):
        out.with_response()


def test_stage_outputs_are_created_once(features):
    stage = Stage("lda", StageKind.ESTIMATOR, output_names=("a", "b")).set_input(features)
    outputs = stage.get_outputs()

    assert stage.get_outputs() is outputs
    assert [f.name for f in outputs] == ["lda_a", "lda_b"]
    assert all(f.producer is stage for f in outputs)
    assert stage.get_output() is outputs[0]


def test_output_is_response_only_when_all_inputs_are_responses(label, label2, features):
    normalized = Stage("z", StageKind.ESTIMATOR).set_input(label).get_output()
    both = Stage("combine", StageKind.TRANSFORMER).set_input(label, label2).get_output()
    mixed = Stage("mix", StageKind.TRANSFORMER).set_input(label, features).get_output()
    source = Stage("source", StageKind.TRANSFORMER).get_output()

    assert normalized.is_response is True
    assert both.is_response is True
    assert mixed.is_response is False
    assert source.is_response is False


def test_set_input_rejects_non_features():
    with pytest.raises(TypeError):
        Stage("bad", StageKind.TRANSFORMER).set_input("label")


def test_stage_requires_name_and_outputs():
    with pytest.raises(ValueError):
        Stage("", StageKind.TRANSFORMER)
    with pytest.raises(ValueError):
        Stage("no_outputs", StageKind.TRANSFORMER, output_names=())


def test_stage_kind_accepts_string_tag():
    stage = Stage("ms", "model_selector")
    assert stage.kind is StageKind.MODEL_SELECTOR
    assert stage.is_model_selector


def test_stages_with_same_name_are_distinct_objects():
    a1 = Stage("a", StageKind.TRANSFORMER)
    a2 = Stage("a", StageKind.TRANSFORMER)
    assert a1 != a2
    assert a1.seq < a2.seq


def test_layer_pairs_and_names():
    a = Stage("a", StageKind.TRANSFORMER)
    b = Stage("b", StageKind.TRANSFORMER)
    layer = Layer(distance=2, stages=(a, b))

    assert list(layer) == [(a, 2), (b, 2)]
    assert layer.names() == ["a", "b"]
    assert layer.pairs() == [("a", 2), ("b", 2)]


def test_empty_cut_result_unpacks():
    ms, once, per_fold = CutResult()
    assert (ms, once, per_fold) == (None, (), ())
    assert CutResult().to_dict() == {"model_selector": None, "compute_once": [], "per_fold": []}


def test_cut_result_to_frame():
    """
    Verifica a exportação do corte como tabela pandas.

    Invariantes:
        - Uma linha por stage planejado
        - O Model Selector aparece com distância 0 e grupo próprio
    """
    pytest.importorskip("pandas")

    lda = Stage("lda", StageKind.ESTIMATOR)
    checker = Stage("checker", StageKind.ESTIMATOR)
    ms = Stage("ms", StageKind.MODEL_SELECTOR)
    cut = CutResult(
        model_selector=ms,
        compute_once=(Layer(2, (lda,)),),
        per_fold=(Layer(1, (checker,)),),
    )

    df = cut.to_frame()
    assert list(df.columns) == ["stage", "kind", "group", "distance"]
    assert df.to_dict(orient="records") == [
        {"stage": "lda", "kind": "estimator", "group": "compute_once", "distance": 2},
        {"stage": "checker", "kind": "estimator", "group": "per_fold", "distance": 1},
        {"stage": "ms", "kind": "model_selector", "group": "model_selector", "distance": 0},
    ]


def test_empty_cut_result_to_frame_has_columns():
    pytest.importorskip("pandas")
    df = CutResult().to_frame()
    assert df.empty
    assert list(df.columns) == ["stage", "kind", "group", "distance"]


def test_output_response_follows_current_inputs(label, features):
    stage = Stage("z", StageKind.ESTIMATOR)
    out = stage.get_output()
    assert out.is_response is False

    stage.set_input(label)
    assert out.is_response is True

    stage.set_input(label, features)
    assert out.is_response is False
    assert stage.get_output() is out
