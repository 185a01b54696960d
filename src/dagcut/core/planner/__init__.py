"""
Planner do dagcut.

    - graph    → Graph Builder: DAG mínimo, distâncias e Layers
    - cutter   → DAG Cutter: Model Selector + grupos compute-once / per-fold
    - fit_plan → plano completo consumido pelo engine de execução externo

Planejamento e execução são responsabilidades separadas: este pacote só
produz estruturas derivadas (distâncias, Layers, cortes).
"""
