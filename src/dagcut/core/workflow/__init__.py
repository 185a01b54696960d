"""
Modelo de dados do workflow.

    - types         → StageKind, Feature, Stage, Layer, CutResult
    - sklearn_kinds → inferência de StageKind a partir de objetos scikit-learn
    - registry      → Workflow (montagem) e WorkflowGraph (snapshot imutável)
    - context       → PlanContext (eventos e warnings estruturados)

Stages e features são construídos durante a montagem do workflow, antes do
planejamento; o planner apenas os lê.
"""
