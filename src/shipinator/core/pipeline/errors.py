"""Erros canônicos do domínio de Pipeline (Shipinator).

O documento de pipeline (`.shipinator.yaml`) é uma entrada crítica: nenhum
consumidor deve receber um documento parcial. Falhas de leitura, parsing e
validação produzem erros explícitos e estáveis.
"""

from __future__ import annotations

from typing import Optional


class PipelineError(Exception):
    """Erro base do domínio de pipeline."""


class PipelineSourceError(PipelineError):
    """Arquivo do pipeline não existe ou não pode ser lido."""


class PipelineParseError(PipelineError):
    """YAML malformado, tipo de campo incorreto ou campo desconhecido no schema."""


class PipelineValidationError(PipelineError):
    """Documento bem formado, mas viola uma regra estrutural.

    `field_path` identifica o campo ofensor, ex.: ``build.steps[1].outputs[0].path``.
    """

    def __init__(self, message: str, *, field_path: Optional[str] = None):
        super().__init__(message)
        self.field_path = field_path
