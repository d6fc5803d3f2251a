# src/pipeforge/__init__.py
"""
pipeforge: motor de projeto/repositório de pipelines de dados.

Este pacote raiz define o namespace público do pipeforge: o motor que
mantém o modelo semântico de um projeto de pipeline, traduz esse modelo
para o documento declarativo (YAML), materializa o projeto em uma árvore
de arquivos determinística, versiona essa árvore e persiste projetos
nomeados entre sessões.

Arquitetura em alto nível:
    - core.config       → carregamento, merge e hashing de configuração
    - core.graph        → grafo de vértices/arestas e templates
    - core.serializer   → export/import do documento declarativo
    - core.project      → modelo de projeto e directory structure builder
    - core.traceability → Event Log estruturado
    - artifacts         → Dockerfile, requirements e descritores de deployment
    - vfs               → filesystem virtual em memória
    - history           → histórico de versões endereçado por conteúdo
    - persistence       → Project Store durável
    - session           → orquestração de um projeto ativo

Limites explícitos:
    - Não renderiza nem posiciona o grafo (apenas layout inicial de import)
    - Não constrói nem publica imagens de container
"""

from .session import ProjectSession

__all__ = ["ProjectSession"]
