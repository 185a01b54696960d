# tests/core/config/test_loader.py
"""
Testes do carregador de configuração (load_config).

Os testes asseguram que:
- o arquivo defaults é obrigatório
- o arquivo local é opcional
- formatos não suportados são rejeitados
- estruturas inválidas são detectadas precocemente
- a configuração final é corretamente resolvida

Decisões arquiteturais:
    - Defaults representam a base canônica do planner
    - Configuração local atua apenas como override explícito
    - Erros estruturais são tratados como falhas fatais

Limites explícitos:
    - Não valida hashing de configuração
    - Não valida a semântica da seção `planner` (ver test_settings.py)
"""

import pytest
from pathlib import Path

try:
    from dagcut.core.config.loader import load_config
    from dagcut.core.config.errors import (
        ConfigTypeConflictError,
        DefaultsNotFoundError,
        InvalidConfigRootTypeError,
        UnsupportedConfigFormatError,
    )
except Exception as e:  # noqa: BLE001
    load_config = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require_imports():
    """
    Garante que o loader de configuração e suas exceções tipadas estejam
    disponíveis para os testes.

    Decisões arquiteturais:
        - Falha antecipada e explícita quando contratos do loader estão ausentes
        - Evita falhas indiretas ou mensagens pouco informativas nos testes

    Limites explícitos:
        - Não valida comportamento do `load_config`
    """
    if _IMPORT_ERR is not None:
        pytest.fail(
            "Missing loader/errors modules. Implement:\n"
            "- src/dagcut/core/config/loader.py (load_config)\n"
            "- src/dagcut/core/config/errors.py (typed exceptions)\n"
            f"Import error: {_IMPORT_ERR}"
        )


def test_missing_defaults_raises(tmp_path: Path):
    """
    Verifica que a ausência do arquivo defaults é tratada como erro fatal.

    Invariantes:
        - A exceção utilizada é específica (`DefaultsNotFoundError`)
        - Nenhuma configuração parcial é retornada
    """
    _require_imports()
    missing = tmp_path / "defaults.yaml"

    with pytest.raises(DefaultsNotFoundError):
        load_config(defaults_path=str(missing), local_path=None)


def test_missing_local_is_ok(tmp_path: Path, planner_defaults_yaml):
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text(planner_defaults_yaml, encoding="utf-8")

    out = load_config(defaults_path=str(defaults), local_path=str(tmp_path / "local.yaml"))
    assert out == {"planner": {"workflow_cv": True, "strict_registration": False}}


def test_load_defaults_and_local(tmp_path: Path, planner_defaults_yaml, planner_local_yaml):
    """
    Verifica o merge defaults + local.

    Invariantes:
        - Overrides locais têm precedência sobre defaults
        - Chaves não sobrescritas permanecem inalteradas
    """
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    local = tmp_path / "local.yaml"
    defaults.write_text(planner_defaults_yaml, encoding="utf-8")
    local.write_text(planner_local_yaml, encoding="utf-8")

    out = load_config(defaults_path=str(defaults), local_path=str(local))
    assert out["planner"]["workflow_cv"] is False
    assert out["planner"]["strict_registration"] is False


def test_json_local_override(tmp_path: Path, planner_defaults_yaml):
    _require_imports()
    defaults = tmp_path / "defaults.yml"
    local = tmp_path / "local.json"
    defaults.write_text(planner_defaults_yaml, encoding="utf-8")
    local.write_text('{"planner": {"strict_registration": true}}', encoding="utf-8")

    out = load_config(defaults_path=str(defaults), local_path=str(local))
    assert out["planner"] == {"workflow_cv": True, "strict_registration": True}


def test_empty_file_is_empty_dict(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text("", encoding="utf-8")

    assert load_config(defaults_path=str(defaults)) == {}


def test_unsupported_format_raises(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.toml"
    defaults.write_text("[planner]\nworkflow_cv = true\n", encoding="utf-8")

    with pytest.raises(UnsupportedConfigFormatError):
        load_config(defaults_path=str(defaults))


def test_root_must_be_mapping(tmp_path: Path):
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    defaults.write_text("- planner\n- workflow_cv\n", encoding="utf-8")

    with pytest.raises(InvalidConfigRootTypeError):
        load_config(defaults_path=str(defaults))


def test_type_conflict_in_local_override(tmp_path: Path, planner_defaults_yaml):
    _require_imports()
    defaults = tmp_path / "defaults.yaml"
    local = tmp_path / "local.yaml"
    defaults.write_text(planner_defaults_yaml, encoding="utf-8")
    local.write_text("planner: off_please\n", encoding="utf-8")

    with pytest.raises(ConfigTypeConflictError):
        load_config(defaults_path=str(defaults), local_path=str(local))


def test_shipped_defaults_file_loads():
    """O arquivo `config/planner.defaults.yaml` do repositório é válido."""
    _require_imports()
    root = Path(__file__).resolve().parents[3]
    out = load_config(defaults_path=str(root / "config" / "planner.defaults.yaml"))
    assert out["planner"]["workflow_cv"] is True
