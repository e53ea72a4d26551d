# src/shipinator/core/config/merge.py
"""
Utilitário canônico de deep-merge de configuração.

Política de merge (v1):
    - dict → merge recursivo por chave
    - list → sobrescrita total (sem merge elemento a elemento)
    - escalar → sobrescrita direta
    - conflito de tipos → erro estrutural explícito

Alcance:
    Via `resolve_layers`, toda camada já passou por `normalize_layer`: as
    folhas são texto e as seções são dicts. Nesse caminho só os ramos
    dict/escalar são exercitados. Os ramos de lista e de conflito de tipos
    valem para chamadores diretos de `deep_merge` (cobertos em test_merge.py).

Invariantes:
    - A mesma entrada sempre produz a mesma saída
    - Nenhum input é mutado
    - Chaves não sobrescritas são preservadas
"""

from copy import deepcopy
from typing import Any, Dict, Mapping

from .errors import ConfigTypeConflictError


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any], *, _path: str = "") -> Dict[str, Any]:
    """
    Realiza um deep-merge determinístico entre dois dicionários de configuração.

    A camada `override` tem precedência chave a chave (não documento a
    documento): uma camada que define apenas `db.name` sobrescreve somente
    `db.name`, preservando `db.host` e demais chaves da base.

    Args:
        base: Camada de menor precedência.
        override: Camada de maior precedência.

    Returns:
        Dict[str, Any]: Novo dicionário resultante.

    Raises:
        ConfigTypeConflictError: Se uma chave tiver tipos incompatíveis entre as camadas.
    """

    if not isinstance(base, Mapping) or not isinstance(override, Mapping):
        raise ConfigTypeConflictError(
            f"deep-merge requires mappings at {_path or 'root'}, got "
            f"{type(base).__name__} vs {type(override).__name__}"
        )

    result: Dict[str, Any] = {k: deepcopy(v) for k, v in base.items()}

    for key, override_value in override.items():
        key_path = f"{_path}.{key}" if _path else str(key)

        if key not in result:
            result[key] = deepcopy(override_value)
            continue

        base_value = result[key]

        # dict -> merge recursivo
        if isinstance(base_value, Mapping) and isinstance(override_value, Mapping):
            result[key] = deep_merge(base_value, override_value, _path=key_path)
            continue

        # list -> sobrescrita total
        if isinstance(override_value, list):
            result[key] = deepcopy(override_value)
            continue

        # conflito de tipo
        if type(base_value) is not type(override_value):
            raise ConfigTypeConflictError(
                f"type conflict at '{key_path}': "
                f"{type(base_value).__name__} vs {type(override_value).__name__}"
            )

        # escalar -> sobrescrita
        result[key] = deepcopy(override_value)

    return result
