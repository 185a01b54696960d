# tests/conftest.py
"""
Fixtures compartilhados para testes do dagcut.

Este módulo define fixtures reutilizáveis que fornecem:
- configurações mínimas e determinísticas do planner
- features raw (label, label2, features) no formato usado pelos workflows
- contexto de planejamento controlado (PlanContext)

Decisões arquiteturais:
    - Fixtures são mantidas simples e explícitas
    - Cada teste recebe features novas (sem estado compartilhado)
    - Imports do core são realizados de forma lazy para
      melhorar a clareza de erros durante falhas

Invariantes:
    - Nenhuma fixture realiza I/O
    - Nenhuma fixture executa computação numérica de stages

Limites explícitos:
    - Não substituir testes de integração
    - Não acoplar testes a operações reais de scikit-learn
"""

import pytest
from datetime import datetime, timezone


# =====================================================
# Config fixtures
# =====================================================

@pytest.fixture
def planner_defaults_yaml() -> str:
    """
    YAML de defaults semelhante a `config/planner.defaults.yaml`.

    Fornecido como string para que cada teste decida onde gravá-lo
    (via `tmp_path`).
    """
    return """\
planner:
  workflow_cv: true
  strict_registration: false
"""


@pytest.fixture
def planner_local_yaml() -> str:
    """YAML de override local: desliga a CV em nível de workflow."""
    return """\
planner:
  workflow_cv: false
"""


# =====================================================
# Workflow fixtures (features raw + contexto)
# =====================================================

@pytest.fixture
def label():
    from dagcut.core.workflow.types import Feature

    return Feature.raw("label", "real_nn", is_response=True)


@pytest.fixture
def label2():
    from dagcut.core.workflow.types import Feature

    return Feature.raw("label2", "real_nn", is_response=True)


@pytest.fixture
def features():
    from dagcut.core.workflow.types import Feature

    return Feature.raw("features", "vector")


@pytest.fixture
def plan_ctx():
    """
    PlanContext determinístico para testes.

    `plan_id` e `created_at` são fixos; a configuração é vazia, de modo
    que `PlannerSettings` assume seus defaults.

    Returns:
        PlanContext: Contexto isolado e previsível.
    """
    from dagcut.core.workflow.context import PlanContext

    return PlanContext(
        plan_id="plan-test-001",
        created_at=datetime(2026, 1, 16, 0, 0, 0, tzinfo=timezone.utc),
        config={},
        meta={"source": "pytest"},
    )
