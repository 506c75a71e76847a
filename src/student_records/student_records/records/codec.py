from __future__ import annotations

import json
from typing import Any, Callable, Iterable, Mapping, Tuple, TypeVar

T = TypeVar("T")


def encode_collection(items: Iterable[Any]) -> bytes:
    """Serialize a whole collection; every entity provides ``to_dict``."""

    return json.dumps([item.to_dict() for item in items], ensure_ascii=False, indent=2).encode("utf-8")


def decode_collection(raw: bytes, factory: Callable[[Mapping[str, Any]], T]) -> Tuple[T, ...]:
    """Inverse of :func:`encode_collection`.

    Raises ``ValueError`` (or ``KeyError``/``TypeError`` from the factory) on malformed input.
    """

    data = json.loads(raw.decode("utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array, got {type(data).__name__}")
    return tuple(factory(item) for item in data)
