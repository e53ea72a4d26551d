"""
Shipinator: Canonical Error Payloads (v1)

Este módulo converte as exceções tipadas do core (pipeline e configuração)
em payloads serializáveis para o operador: código estável, mensagem curta,
detalhes estruturados e dica de correção.

Nenhuma decisão implícita é permitida: exceções fora do catálogo não são
convertidas.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from .config.errors import (
    ConfigParseError,
    ConfigSourceError,
    ConfigTypeConflictError,
    InvalidLogLevelError,
    MissingRequiredSettingError,
)
from .pipeline.errors import (
    PipelineParseError,
    PipelineSourceError,
    PipelineValidationError,
)


@dataclass(frozen=True)
class ErrorPayload:
    """
    Payload canônico de erro.

    Campos:
    - type: código estável do erro (não é texto livre)
    - message: mensagem curta, humana e objetiva
    - details: dados estruturados relevantes para diagnóstico
    - hint: ação sugerida ao operador (onde corrigir)
    """

    type: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    hint: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Catálogo canônico de tipos de erro (v1)
# ---------------------------------------------------------------------------

PIPELINE_PARSE_ERROR = "PIPELINE_PARSE_ERROR"
PIPELINE_VALIDATION_ERROR = "PIPELINE_VALIDATION_ERROR"
PIPELINE_SOURCE_ERROR = "PIPELINE_SOURCE_ERROR"

CONFIG_PARSE_ERROR = "CONFIG_PARSE_ERROR"
CONFIG_SOURCE_ERROR = "CONFIG_SOURCE_ERROR"
CONFIG_REQUIRED_SETTING_MISSING = "CONFIG_REQUIRED_SETTING_MISSING"
CONFIG_INVALID_LOG_LEVEL = "CONFIG_INVALID_LOG_LEVEL"


def error_payload(exc: Exception) -> ErrorPayload:
    """Mapeia uma exceção do core para seu payload canônico.

    Raises:
        TypeError: se a exceção não pertence ao catálogo.
    """
    message = str(exc)

    if isinstance(exc, PipelineValidationError):
        return ErrorPayload(
            type=PIPELINE_VALIDATION_ERROR,
            message=message,
            details={"field_path": exc.field_path},
            hint="Corrija o campo indicado no documento de pipeline.",
        )
    if isinstance(exc, PipelineParseError):
        return ErrorPayload(
            type=PIPELINE_PARSE_ERROR,
            message=message,
            hint="Verifique a sintaxe YAML e os nomes de campos (campos desconhecidos são rejeitados).",
        )
    if isinstance(exc, PipelineSourceError):
        return ErrorPayload(
            type=PIPELINE_SOURCE_ERROR,
            message=message,
            hint="Confira o caminho do arquivo de pipeline.",
        )

    if isinstance(exc, MissingRequiredSettingError):
        return ErrorPayload(
            type=CONFIG_REQUIRED_SETTING_MISSING,
            message=message,
            details={"key": exc.key},
            hint=f"Defina '{exc.key}' no arquivo de configuração ou via ambiente.",
        )
    if isinstance(exc, InvalidLogLevelError):
        return ErrorPayload(
            type=CONFIG_INVALID_LOG_LEVEL,
            message=message,
            details={"value": exc.value},
            hint="Use um de: debug, info, warn, error.",
        )
    if isinstance(exc, (ConfigParseError, ConfigTypeConflictError)):
        return ErrorPayload(
            type=CONFIG_PARSE_ERROR,
            message=message,
            hint="Verifique a sintaxe YAML e a forma das seções do arquivo de configuração.",
        )
    if isinstance(exc, ConfigSourceError):
        return ErrorPayload(
            type=CONFIG_SOURCE_ERROR,
            message=message,
            hint="Confira o caminho passado em --config.",
        )

    raise TypeError(f"unmapped error: {type(exc).__name__}")
