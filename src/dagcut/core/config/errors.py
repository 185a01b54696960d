# src/dagcut/core/config/errors.py
"""
Exceções da camada de configuração do dagcut.

Representam falhas estruturais ao carregar e resolver a configuração do
planner (arquivos ausentes, formatos desconhecidos, raiz inválida,
conflitos de merge). Não representam erros de planejamento do DAG:
esses vivem em `dagcut.core.exceptions`.

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
    - Nenhuma delas é recuperável pelo planner
"""


class ConfigError(Exception):
    """Exceção base para erros de carregamento/resolução de configuração."""


class DefaultsNotFoundError(ConfigError):
    """
    Arquivo de defaults ausente no caminho informado.

    O arquivo de defaults é obrigatório: sem ele não existe configuração
    efetiva do planner. O loader não tenta inferir nem criar defaults.
    """


class UnsupportedConfigFormatError(ConfigError):
    """
    Extensão de arquivo de configuração não suportada.

    Formatos suportados (v1):
        - YAML (.yaml, .yml)
        - JSON (.json)
    """


class InvalidConfigRootTypeError(ConfigError):
    """Conteúdo raiz da configuração não é um mapa (`dict`)."""


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge.

    Exemplo de conflito:
        - base:     {"planner": {"workflow_cv": true}}
        - override: {"planner": "off"}

    Nenhum merge parcial é produzido e nenhuma coerção é tentada.
    """
