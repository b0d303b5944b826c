"""Core module for ttl_store: entry model, key rules, codec and the Store."""

from .models import NEVER, NO_EXPIRY, Entry, expiry_from_ttl, is_expired
from .keys import validate_key
from .store import Store

__all__ = [
    "Store",
    # Models
    "Entry",
    "NEVER",
    "NO_EXPIRY",
    "expiry_from_ttl",
    "is_expired",
    # Keys
    "validate_key",
]
