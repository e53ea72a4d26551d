# src/shipinator/__init__.py
"""
Shipinator: declaração e validação de pipelines de build/test/deploy.

Arquitetura em alto nível:
    - core.pipeline → documento de pipeline (schema, parse estrito, validação)
    - core.config   → configuração de runtime em camadas (defaults → arquivo → ambiente)
    - cli           → ponto de entrada de linha de comando

Limites explícitos:
    - Não executa steps de build/test/deploy
    - Não armazena artefatos
    - Não aplica manifests Kubernetes
"""

__version__ = "0.1.0"
