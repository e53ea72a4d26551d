# src/shipinator/core/config/hashing.py
"""
Hashing canônico da configuração de runtime.

O hash identifica a configuração efetiva na linha de log de inicialização.
É calculado sobre a forma mascarada (`RuntimeConfig.redacted`): a senha do
banco nunca participa do valor registrado.

Política de hashing (v1):
    - JSON canônico (sort_keys, separadores compactos, UTF-8)
    - SHA-256, string hexadecimal de 64 caracteres
"""

import hashlib
import json

from .schema import RuntimeConfig


def compute_config_hash(config: RuntimeConfig) -> str:
    """Gera um hash determinístico da configuração efetiva."""

    if not isinstance(config, RuntimeConfig):
        raise TypeError(
            f"config must be a RuntimeConfig, got {type(config).__name__}"
        )

    canonical_json = json.dumps(
        config.redacted(),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )

    return hashlib.sha256(canonical_json.encode("utf-8")).hexdigest()
