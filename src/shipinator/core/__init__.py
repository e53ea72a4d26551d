# src/shipinator/core/__init__.py
"""
Core do Shipinator.

Componentes principais:
    - pipeline → schema, parsing estrito e validação do `.shipinator.yaml`
    - config   → resolução em camadas da configuração de runtime
    - logging  → configuração do logging de processo
    - errors   → payloads canônicos de erro para o operador

Ambos os componentes são folhas: executam uma vez, de forma síncrona, na
inicialização, e produzem valores imutáveis consumidos pelo resto do sistema
(servidor HTTP, pool de banco, executor de pipeline).
"""
