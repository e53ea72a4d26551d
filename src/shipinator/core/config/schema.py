# src/shipinator/core/config/schema.py
"""
Schema da configuração de runtime do Shipinator.

Define:
    - os defaults canônicos (camada de menor precedência)
    - a lista explícita de chaves-folha (`RUNTIME_KEYS`), usada tanto para
      normalizar camadas quanto para o binding de variáveis de ambiente
    - os tipos imutáveis `RuntimeConfig` e `DBConfig`

Formato do arquivo (YAML):

    listen_addr: ":8080"
    db: {host, port, user, password, name, ssl_mode}
    artifact_path: /var/lib/shipinator/artifacts
    kubeconfig: ~/.kube/config
    log_level: info

Todas as chaves são opcionais no arquivo; apenas `db.name` precisa estar
preenchida após o merge de todas as camadas.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import ConfigParseError

logger = logging.getLogger(__name__)


DEFAULTS: Dict[str, Any] = {
    "listen_addr": ":8080",
    "artifact_path": "/var/lib/shipinator/artifacts",
    "kubeconfig": "",
    "log_level": "info",
    "db": {
        "host": "localhost",
        "port": "5432",
        "user": "postgres",
        "password": "postgres",
        "name": "",
        "ssl_mode": "disable",
    },
}

RUNTIME_KEYS: Tuple[str, ...] = (
    "listen_addr",
    "artifact_path",
    "kubeconfig",
    "log_level",
    "db.host",
    "db.port",
    "db.user",
    "db.password",
    "db.name",
    "db.ssl_mode",
)

REQUIRED_KEYS: Tuple[str, ...] = ("db.name",)

_SECTIONS = frozenset(key.split(".", 1)[0] for key in RUNTIME_KEYS if "." in key)

_REDACTED = "********"


@dataclass(frozen=True)
class ConfigLayer:
    """Uma fonte nomeada de configuração (ex.: defaults, file, env)."""

    name: str
    values: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: str
    user: str
    password: str
    name: str
    ssl_mode: str

    def postgres_params(self) -> Dict[str, str]:
        """Parâmetros no formato esperado por drivers PostgreSQL (libpq)."""
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "dbname": self.name,
            "sslmode": self.ssl_mode,
        }

    def dsn(self) -> str:
        """Connection string libpq no formato `key=value`."""
        parts = []
        for key, value in self.postgres_params().items():
            if value == "":
                continue
            escaped = value.replace("\\", "\\\\").replace("'", "\\'")
            if escaped != value or " " in value:
                escaped = f"'{escaped}'"
            parts.append(f"{key}={escaped}")
        return " ".join(parts)

    def to_dict(self) -> Dict[str, str]:
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "name": self.name,
            "ssl_mode": self.ssl_mode,
        }


@dataclass(frozen=True)
class RuntimeConfig:
    """Configuração efetiva do processo. Construída uma vez na inicialização."""

    listen_addr: str
    artifact_path: str
    kubeconfig: str
    log_level: str
    db: DBConfig

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RuntimeConfig":
        db = data["db"]
        return cls(
            listen_addr=data["listen_addr"],
            artifact_path=data["artifact_path"],
            kubeconfig=data["kubeconfig"],
            log_level=data["log_level"],
            db=DBConfig(
                host=db["host"],
                port=db["port"],
                user=db["user"],
                password=db["password"],
                name=db["name"],
                ssl_mode=db["ssl_mode"],
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "listen_addr": self.listen_addr,
            "db": self.db.to_dict(),
            "artifact_path": self.artifact_path,
            "kubeconfig": self.kubeconfig,
            "log_level": self.log_level,
        }

    def redacted(self) -> Dict[str, Any]:
        """Igual a `to_dict`, com `db.password` mascarada."""
        out = self.to_dict()
        if out["db"]["password"]:
            out["db"]["password"] = _REDACTED
        return out


def get_key(data: Mapping[str, Any], key: str) -> Optional[Any]:
    """Lê uma chave pontilhada (`db.name`) de um mapping aninhado."""
    node: Any = data
    for part in key.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return None
        node = node[part]
    return node


def set_key(data: Dict[str, Any], key: str, value: Any) -> None:
    """Escreve uma chave pontilhada, criando as seções intermediárias."""
    *sections, leaf = key.split(".")
    node = data
    for part in sections:
        node = node.setdefault(part, {})
    node[leaf] = value


def _to_text(value: Any, key: str, source: str) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise ConfigParseError(f"{source}: {key} must be a scalar, got {type(value).__name__}")


def _unknown_keys(values: Mapping[str, Any], prefix: str = "") -> list:
    unknown = []
    for raw_key, value in values.items():
        key = f"{prefix}{raw_key}"
        if key in RUNTIME_KEYS:
            continue
        if not prefix and key in _SECTIONS and isinstance(value, Mapping):
            unknown.extend(_unknown_keys(value, prefix=f"{key}."))
            continue
        if not prefix and key in _SECTIONS and value is None:
            continue
        unknown.append(key)
    return unknown


def normalize_layer(values: Any, *, source: str) -> Dict[str, Any]:
    """
    Reduz uma camada bruta às chaves conhecidas, com valores textuais.

    Regras:
        - apenas chaves de `RUNTIME_KEYS` são mantidas
        - chaves desconhecidas são descartadas com warning
        - `null` equivale a chave ausente
        - int/float/bool viram texto (`port: 5432` → "5432")
        - seção que não é mapping, ou valor composto numa folha → erro

    Raises:
        ConfigParseError: se a forma da camada for inválida.
    """
    if not isinstance(values, Mapping):
        raise ConfigParseError(
            f"{source}: config root must be a mapping, got {type(values).__name__}"
        )

    for section in sorted(_SECTIONS):
        raw = values.get(section)
        if raw is not None and not isinstance(raw, Mapping):
            raise ConfigParseError(
                f"{source}: {section} must be a mapping, got {type(raw).__name__}"
            )

    unknown = _unknown_keys(values)
    if unknown:
        logger.warning("ignoring unknown config keys", extra={"source": source, "keys": unknown})

    out: Dict[str, Any] = {}
    for key in RUNTIME_KEYS:
        value = get_key(values, key)
        if value is None:
            continue
        set_key(out, key, _to_text(value, key, source))
    return out
