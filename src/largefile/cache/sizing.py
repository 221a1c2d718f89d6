"""Approximate serialized size of cached values.

Sizes are measured the way the value goes over the wire: compact JSON,
UTF-8 encoded. Dataclasses, pydantic models, enums, datetimes and tuples are
converted first so results and plain dicts estimate the same.
"""

from __future__ import annotations

import dataclasses
import json
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel

DEFAULT_ESTIMATE_BYTES = 1024
"""Returned for values that cannot be serialized."""

# Compact JSON separators, matching what tool responses actually send.
_COMPACT: tuple[str, str] = (",", ":")


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        to_dict = getattr(value, "to_dict", None)
        if callable(to_dict):
            return to_dict()
        return {f.name: _jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(v) for v in value]
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def estimate_size(value: Any) -> int:
    """Estimate the serialized byte size of value.

    Deterministic for a given value. Never raises: anything that cannot be
    serialized (cycles, exotic objects) returns DEFAULT_ESTIMATE_BYTES.
    """
    try:
        encoded = json.dumps(_jsonable(value), separators=_COMPACT, ensure_ascii=False)
    except (TypeError, ValueError, RecursionError):
        return DEFAULT_ESTIMATE_BYTES
    return len(encoded.encode("utf-8", errors="replace"))
