"""Hashing canônico do documento de pipeline.

O hash identifica o documento validado para o executor (futuro) e para
registro em log.

Decisão: o hash é calculado a partir de JSON canônico (sort_keys, separators).
"""

from __future__ import annotations

import hashlib
import json

from .schema import PipelineDocument


def compute_pipeline_hash(doc: PipelineDocument) -> str:
    """Computa SHA-256 do documento em formato canônico."""
    canonical = json.dumps(doc.to_dict(), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
