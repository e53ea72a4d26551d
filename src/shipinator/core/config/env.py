# src/shipinator/core/config/env.py
"""
Camada de ambiente da configuração de runtime.

Cada chave de `RUNTIME_KEYS` é vinculada explicitamente a uma variável:

    db.ssl_mode  → SHIPINATOR_DB_SSL_MODE
    log_level    → SHIPINATOR_LOG_LEVEL

O binding é feito para todas as chaves, inclusive as aninhadas, de modo
que um override de ambiente vale mesmo quando a chave não existe no arquivo.

Variáveis definidas com valor vazio não sobrescrevem camadas inferiores.
"""

from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional

from .schema import RUNTIME_KEYS, ConfigLayer, set_key

ENV_PREFIX = "SHIPINATOR"


def env_var_name(key: str, prefix: str = ENV_PREFIX) -> str:
    """Nome da variável de ambiente para uma chave pontilhada."""
    name = key.upper().replace(".", "_").replace("-", "_")
    return f"{prefix}_{name}" if prefix else name


def read_env_layer(environ: Optional[Mapping[str, str]] = None, *, prefix: str = ENV_PREFIX) -> ConfigLayer:
    """Constrói a camada `env` a partir de `environ` (default: `os.environ`)."""
    if environ is None:
        environ = os.environ

    values: Dict[str, Any] = {}
    for key in RUNTIME_KEYS:
        value = environ.get(env_var_name(key, prefix))
        if value:
            set_key(values, key, value)
    return ConfigLayer(name="env", values=values)
