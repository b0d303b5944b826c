"""JSON text codec for stored values.

Only values that survive the trip unchanged are accepted: mapping keys must
be strings and floats must be finite.
"""

from __future__ import annotations

import json
import typing as t

from ttl_store.errors import DecodeError, EncodeError


def encode(value: t.Any, key: t.Optional[str] = None) -> str:
    _check_mapping_keys(value, key)
    try:
        return json.dumps(value, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise EncodeError(key, str(exc)) from exc


def decode(text: t.Optional[str], key: t.Optional[str] = None) -> t.Any:
    if text is None:
        raise DecodeError(key, "no value stored")
    try:
        return json.loads(text)
    except ValueError as exc:
        raise DecodeError(key, str(exc)) from exc


def _check_mapping_keys(value: t.Any, key: t.Optional[str]) -> None:
    # json.dumps would silently turn 1, 1.5, True and None keys into strings
    pending = [value]
    seen: t.Set[int] = set()
    while pending:
        item = pending.pop()
        if isinstance(item, (dict, list, tuple)):
            # circular containers are left for json.dumps to reject
            if id(item) in seen:
                continue
            seen.add(id(item))
        if isinstance(item, dict):
            for name, child in item.items():
                if not isinstance(name, str):
                    raise EncodeError(key, f"mapping key {name!r} is not a string")
                pending.append(child)
        elif isinstance(item, (list, tuple)):
            pending.extend(item)
