"""
Core do dagcut.

Componentes principais:
    - config    → resolução de configuração (merge, hashing, PlannerSettings)
    - workflow  → Stage, Feature, Layer, Workflow, snapshot e PlanContext
    - planner   → Graph Builder, DAG Cutter e FitPlan

Princípios fundamentais:
    - O planner é puro e síncrono: lê o grafo, nunca o altera
    - Todo estado de planejamento é local a uma chamada
    - Erros estruturais são fatais e tipados

Limites explícitos:
    - Não executa stages nem folds de validação cruzada
    - Não persiste stages treinados
"""
