"""ttl_store

A persistent key-value store with per-key expiration, backed by a single
relational table (SQLite by default, through SQLAlchemy).

Expired entries are removed lazily on read or in bulk with `Store.clean()`.
"""

from .core import NEVER, Entry, Store
from .errors import (
    DecodeError,
    EncodeError,
    InvalidKeyError,
    InvalidTableNameError,
    SerializationError,
    StorageError,
    StoreError,
    WrongTypeError,
)
from .storage import InMemoryStorage, SQLStorage, StorageAdapter
from .utils import StorageConfig, StoreConfig, sanitize_table_name

__all__ = [
    "Store",
    "Entry",
    "NEVER",
    "StorageAdapter",
    "SQLStorage",
    "InMemoryStorage",
    "StoreConfig",
    "StorageConfig",
    "sanitize_table_name",
    "StoreError",
    "InvalidKeyError",
    "InvalidTableNameError",
    "SerializationError",
    "EncodeError",
    "DecodeError",
    "WrongTypeError",
    "StorageError",
]

__version__ = "0.1.0"
