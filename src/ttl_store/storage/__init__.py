from .base import InMemoryStorage, StorageAdapter
from .sql_adapter import SQLStorage

__all__ = ["StorageAdapter", "InMemoryStorage", "SQLStorage"]
