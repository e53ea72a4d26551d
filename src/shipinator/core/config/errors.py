# src/shipinator/core/config/errors.py
"""
Exceções canônicas da camada de configuração de runtime do Shipinator.

Este módulo define a hierarquia oficial de exceções utilizadas durante
a leitura das fontes (arquivo, ambiente), o merge em camadas e a
verificação pós-merge da configuração.

Princípios fundamentais:
    - Exceções são tipadas e semânticas
    - Todas são fatais para a inicialização do processo
    - Nenhuma configuração parcial ou degradada é devolvida

Invariantes:
    - Todas as exceções de configuração herdam de `ConfigError`
"""

from __future__ import annotations


class ConfigError(Exception):
    """
    Exceção base para erros relacionados à configuração de runtime.

    Permite captura genérica na inicialização do processo, que deve
    recusar-se a iniciar diante de qualquer subclasse.
    """


class ConfigSourceError(ConfigError):
    """
    Fonte explicitamente solicitada não pôde ser lida.

    Exemplo: caminho passado via `--config` que não existe.

    Limites explícitos:
        - Fontes implícitas ausentes (descoberta de arquivo) não são erro
    """


class ConfigParseError(ConfigError):
    """
    Conteúdo da fonte não é YAML válido ou tem a forma errada
    (raiz não-mapping, seção `db` escalar, valor composto onde se espera texto).
    """


class ConfigTypeConflictError(ConfigError):
    """
    Conflito de tipos durante o deep-merge entre camadas.

    Exemplo de conflito:
        - base:     {"db": {"host": "localhost"}}
        - override: {"db": "postgres://..."}

    Invariantes:
        - Nenhum merge parcial é produzido em caso de conflito
    """


class MissingRequiredSettingError(ConfigError):
    """
    Chave obrigatória permanece vazia após o merge de todas as camadas.

    Hoje apenas `db.name` não possui default e é obrigatória.
    """

    def __init__(self, key: str):
        super().__init__(f"{key} is required")
        self.key = key


class InvalidLogLevelError(ConfigError):
    """`log_level` não corresponde a um nível conhecido."""

    def __init__(self, value: str):
        super().__init__(f"invalid log level: {value!r}")
        self.value = value
