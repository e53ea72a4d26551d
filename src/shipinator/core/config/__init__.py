# src/shipinator/core/config/__init__.py
"""
Camada de configuração de runtime do Shipinator.

Este pacote resolve a configuração do processo a partir de camadas
ordenadas (defaults → arquivo → ambiente), com merge chave a chave e
verificação das chaves obrigatórias após o merge.

Limites explícitos:
    - Não abre conexões com o banco
    - Não recarrega configuração em tempo de execução
"""

from .errors import (  # noqa: F401
    ConfigError,
    ConfigParseError,
    ConfigSourceError,
    ConfigTypeConflictError,
    InvalidLogLevelError,
    MissingRequiredSettingError,
)
from .env import ENV_PREFIX, env_var_name, read_env_layer  # noqa: F401
from .hashing import compute_config_hash  # noqa: F401
from .loader import (  # noqa: F401
    DEFAULT_SEARCH_DIRS,
    defaults_layer,
    discover_config_file,
    load_runtime_config,
    read_config_file,
    resolve_layers,
)
from .merge import deep_merge  # noqa: F401
from .schema import (  # noqa: F401
    DEFAULTS,
    RUNTIME_KEYS,
    ConfigLayer,
    DBConfig,
    RuntimeConfig,
    normalize_layer,
)
