# src/pipeforge/core/__init__.py
"""
Core do pipeforge.

Reúne as peças puras (sem I/O) do motor:
    - config       → resolução de configuração (merge, hashing, settings)
    - graph        → modelo semântico do pipeline
    - serializer   → documento declarativo do pipeline
    - project      → modelo de projeto e materialização em árvore
    - traceability → Event Log
    - errors / exceptions → taxonomia de falhas e payloads serializáveis

Princípios fundamentais:
    - Nenhuma decisão silenciosa: todo comportamento é explícito e testado
    - Funções de derivação (nomes, artefatos, estrutura) são puras
"""
