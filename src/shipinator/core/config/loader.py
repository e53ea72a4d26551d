# src/shipinator/core/config/loader.py
"""
Resolver canônico da configuração de runtime do Shipinator.

A configuração é resolvida a partir de uma lista ordenada de camadas,
da menor para a maior precedência:

    1. defaults  (sempre presente)
    2. file      (opcional; explícito via `config_path` ou descoberto)
    3. env       (variáveis `SHIPINATOR_*`)

Cada camada sobrescreve as anteriores chave a chave via `deep_merge`.
Após o merge, as chaves obrigatórias (`db.name`) são verificadas.

Política de arquivo:
    - caminho explícito ausente ou ilegível → ConfigSourceError
    - sem caminho explícito: busca `config.yaml`/`config.yml` em `.` e
      depois em `/etc/shipinator`; nada encontrado não é erro

Invariantes:
    - Nenhuma configuração parcial é devolvida
    - `resolve_layers` é puro: não acessa disco nem ambiente
    - Nenhum estado global é mantido
"""

from __future__ import annotations

import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import yaml  # PyYAML

from .env import read_env_layer
from .errors import ConfigParseError, ConfigSourceError, MissingRequiredSettingError
from .merge import deep_merge
from .schema import (
    DEFAULTS,
    REQUIRED_KEYS,
    RUNTIME_KEYS,
    ConfigLayer,
    RuntimeConfig,
    get_key,
    normalize_layer,
    set_key,
)

logger = logging.getLogger(__name__)

CONFIG_NAME = "config"
CONFIG_EXTENSIONS = (".yaml", ".yml")
DEFAULT_SEARCH_DIRS = (".", "/etc/shipinator")


def defaults_layer() -> ConfigLayer:
    return ConfigLayer(name="defaults", values=deepcopy(DEFAULTS))


def discover_config_file(search_dirs: Iterable[Union[str, Path]] = DEFAULT_SEARCH_DIRS) -> Optional[Path]:
    """Primeiro `config.yaml`/`config.yml` existente, na ordem dos diretórios."""
    for directory in search_dirs:
        for ext in CONFIG_EXTENSIONS:
            candidate = Path(directory) / f"{CONFIG_NAME}{ext}"
            if candidate.is_file():
                return candidate
    return None


def read_config_file(path: Union[str, Path]) -> ConfigLayer:
    """
    Lê um arquivo de configuração YAML como camada normalizada.

    Arquivo vazio equivale a uma camada vazia.

    Raises:
        ConfigSourceError: arquivo ausente ou ilegível.
        ConfigParseError: YAML inválido ou forma incorreta.
    """
    p = Path(path)
    try:
        raw = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigSourceError(f"reading config {p}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"parsing config {p}: {e}") from e

    if data is None:
        data = {}

    return ConfigLayer(name=f"file:{p}", values=normalize_layer(data, source=str(p)))


def _leaf_keys(values: Mapping[str, Any]) -> List[str]:
    return [key for key in RUNTIME_KEYS if get_key(values, key) is not None]


def resolve_layers(layers: Sequence[ConfigLayer]) -> RuntimeConfig:
    """
    Faz o merge das camadas (a última vence, por chave) e verifica o resultado.

    Chaves ausentes de todas as camadas resultam em texto vazio.

    Raises:
        ConfigParseError: camada com forma inválida.
        ConfigTypeConflictError: conflito estrutural no merge.
        MissingRequiredSettingError: chave obrigatória vazia após o merge.
    """
    effective: Dict[str, Any] = {}
    for layer in layers:
        values = normalize_layer(layer.values, source=layer.name)
        effective = deep_merge(effective, values)
        logger.debug("config layer applied", extra={"layer": layer.name, "keys": _leaf_keys(values)})

    for key in RUNTIME_KEYS:
        if get_key(effective, key) is None:
            set_key(effective, key, "")

    for key in REQUIRED_KEYS:
        if not get_key(effective, key):
            raise MissingRequiredSettingError(key)

    return RuntimeConfig.from_dict(effective)


def load_runtime_config(
    config_path: Optional[Union[str, Path]] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
    search_dirs: Iterable[Union[str, Path]] = DEFAULT_SEARCH_DIRS,
) -> RuntimeConfig:
    """
    Resolve a configuração de runtime: defaults → arquivo → ambiente.

    Args:
        config_path: arquivo explícito; quando vazio, usa descoberta.
        environ: mapping de ambiente (default: `os.environ`).
        search_dirs: diretórios da descoberta, em ordem.

    Raises:
        ConfigError: qualquer subclasse; fatal para a inicialização.
    """
    layers = [defaults_layer()]

    if config_path:
        layers.append(read_config_file(config_path))
    else:
        search_dirs = list(search_dirs)
        found = discover_config_file(search_dirs)
        if found is None:
            logger.debug("no config file found", extra={"search_dirs": [str(d) for d in search_dirs]})
        else:
            layers.append(read_config_file(found))

    layers.append(read_env_layer(environ))
    return resolve_layers(layers)
