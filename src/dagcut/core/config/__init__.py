# src/dagcut/core/config/__init__.py
"""
Camada de configuração do dagcut.

Responsabilidades do pacote:
    - Carregamento de arquivos de configuração (defaults + overrides locais)
    - Resolução da configuração final via deep-merge determinístico
    - Hash canônico para rastreabilidade dos planos
    - Leitura tipada da seção `planner` (`PlannerSettings`)

Princípios fundamentais:
    - Configuração não contém lógica de planejamento
    - Overrides são sempre explícitos
    - A mesma entrada sempre produz a mesma configuração final
"""

from .hashing import compute_config_hash
from .loader import load_config
from .merge import deep_merge
from .settings import PlannerSettings

__all__ = ["compute_config_hash", "deep_merge", "load_config", "PlannerSettings"]
