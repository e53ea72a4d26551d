"""
Logging de processo do Shipinator.

Configurado uma única vez na inicialização, depois que a configuração de
runtime foi resolvida (o nível vem de `log_level`). Campos estruturados são
passados via `extra=` e renderizados como `key=value` (texto) ou como
chaves do objeto JSON.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Any, Dict, Optional

from .config.errors import InvalidLogLevelError

LOGGER_NAME = "shipinator"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

_RESERVED = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "taskName"}


def parse_log_level(text: str) -> int:
    """Converte `log_level` (debug, info, warn, error) no nível do `logging`."""
    level = _LEVELS.get(str(text).strip().lower())
    if level is None:
        raise InvalidLogLevelError(text)
    return level


def _extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED}


class TextFormatter(logging.Formatter):
    """`time level logger message key=value ...`"""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = " ".join(f"{k}={v}" for k, v in _extras(record).items())
        return f"{line} {fields}" if fields else line


class JSONFormatter(logging.Formatter):
    """Um objeto JSON por linha."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        log_data.update(_extras(record))
        return json.dumps(log_data, default=str)


def configure_logging(
    level: str = "info",
    *,
    stream: Optional[IO[str]] = None,
    fmt: str = "text",
) -> logging.Logger:
    """
    Configura o logger `shipinator` com um único handler.

    Raises:
        InvalidLogLevelError: se `level` não for reconhecido.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(parse_log_level(level))
    logger.handlers.clear()

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(JSONFormatter() if fmt == "json" else TextFormatter())
    logger.addHandler(handler)
    logger.propagate = False
    return logger
