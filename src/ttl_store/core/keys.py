from __future__ import annotations

import typing as t

from ttl_store.errors import InvalidKeyError


def validate_key(key: t.Any) -> str:
    """Coerce a key to its stored string form.

    Strings pass through and integers become their decimal form. Booleans are
    rejected even though they subclass int.
    """
    if isinstance(key, str):
        return key
    if isinstance(key, int) and not isinstance(key, bool):
        return str(key)
    raise InvalidKeyError(key)
