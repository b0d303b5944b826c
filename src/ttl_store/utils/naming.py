from __future__ import annotations

import re

from ttl_store.errors import InvalidTableNameError

_SAFE_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_SEPARATORS = str.maketrans({"-": "_", ".": "_", " ": "_"})


def sanitize_table_name(name: str) -> str:
    """Map a free-text store name onto a SQL table identifier.

    A leading digit gets a `_` prefix and `-`, `.` and spaces become `_`:

    >>> sanitize_table_name("3-my.store")
    '_3_my_store'

    Anything still outside [A-Za-z0-9_] afterwards is rejected.
    """
    if name[:1].isdigit():
        name = "_" + name
    name = name.translate(_SEPARATORS)
    if not _SAFE_IDENTIFIER.fullmatch(name):
        raise InvalidTableNameError(name)
    return name
