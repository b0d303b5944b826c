"""Configuration and naming helpers."""

from .config import StorageConfig, StoreConfig
from .naming import sanitize_table_name

__all__ = [
    "StorageConfig",
    "StoreConfig",
    "sanitize_table_name",
]
