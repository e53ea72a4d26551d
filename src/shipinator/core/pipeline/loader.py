"""Loader canônico do documento de pipeline (YAML).

Notas:
- Parse, decodificação estrita e validação acontecem sempre juntos:
  nenhum chamador recebe um documento não validado.
- Apenas o primeiro (e único) documento YAML do stream é aceito.
- Escalares simples permanecem texto: `namespace: no` é "no", `name: 1.10`
  é "1.10". Só `null` (e `~`, vazio) é resolvido implicitamente.
- Chave repetida num mesmo mapping é erro de parse, nunca "última vence".
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Any, Set, Union

import yaml

from .errors import PipelineParseError, PipelineSourceError
from .schema import PipelineDocument, parse_pipeline, validate_pipeline

logger = logging.getLogger(__name__)

_KEPT_RESOLVERS = ("tag:yaml.org,2002:null", "tag:yaml.org,2002:merge")


class _PipelineLoader(yaml.SafeLoader):
    """SafeLoader sem coerção implícita de escalares (bool/int/float/date)."""


_PipelineLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag in _KEPT_RESOLVERS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _child_path(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _reject_duplicate_keys(node: yaml.Node, path: str, seen: Set[int]) -> None:
    if id(node) in seen:
        return
    seen.add(id(node))

    if isinstance(node, yaml.MappingNode):
        keys: Set[str] = set()
        for key_node, value_node in node.value:
            key = str(key_node.value) if isinstance(key_node, yaml.ScalarNode) else "?"
            if isinstance(key_node, yaml.ScalarNode):
                if key in keys:
                    line = key_node.start_mark.line + 1
                    raise PipelineParseError(f"duplicate field {_child_path(path, key)!r} (line {line})")
                keys.add(key)
            _reject_duplicate_keys(value_node, _child_path(path, key), seen)
    elif isinstance(node, yaml.SequenceNode):
        for i, item in enumerate(node.value):
            _reject_duplicate_keys(item, f"{path}[{i}]", seen)


def _safe_load(source: Union[str, bytes, IO[str], IO[bytes]]) -> Any:
    loader = _PipelineLoader(source)
    try:
        node = loader.get_single_node()
        if node is None:
            return None
        _reject_duplicate_keys(node, "", set())
        return loader.construct_document(node)
    finally:
        loader.dispose()


def load_pipeline(source: Union[str, bytes, IO[str], IO[bytes]]) -> PipelineDocument:
    """Carrega, decodifica e valida um documento de pipeline.

    Args:
        source: texto YAML, bytes ou stream aberto.

    Raises:
        PipelineParseError: YAML inválido, documento vazio, raiz não-mapping,
            campo desconhecido ou repetido, tipo incorreto.
        PipelineValidationError: documento viola regras estruturais.
    """
    try:
        data = _safe_load(source)
    except yaml.YAMLError as e:
        raise PipelineParseError(f"parsing pipeline: {e}") from e

    if data is None:
        # YAML vazio -> None
        raise PipelineParseError("pipeline document is empty")

    doc = validate_pipeline(parse_pipeline(data))
    logger.debug("pipeline loaded", extra={"sections": doc.sections})
    return doc


def load_pipeline_file(path: Union[str, Path]) -> PipelineDocument:
    """Lê e valida um arquivo `.shipinator.yaml`.

    Raises:
        PipelineSourceError: arquivo ausente ou ilegível.
        PipelineParseError / PipelineValidationError: ver `load_pipeline`.
    """
    p = Path(path)
    try:
        raw = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise PipelineSourceError(f"opening pipeline file {p}: {e}") from e
    return load_pipeline(raw)


def dump_pipeline(doc: PipelineDocument) -> str:
    """Serializa o documento de volta para YAML (ordem de campos preservada)."""
    return yaml.safe_dump(doc.to_dict(), sort_keys=False, default_flow_style=False)
