from __future__ import annotations

import contextlib
import logging
import math
import threading
import time
import typing as t

from ttl_store.errors import StorageError, WrongTypeError
from ttl_store.monitoring.metrics import (
    store_expired_total,
    store_operation_latency_seconds,
    store_operations_total,
)
from ttl_store.storage import InMemoryStorage, SQLStorage, StorageAdapter
from ttl_store.utils.config import StoreConfig
from ttl_store.utils.naming import sanitize_table_name

from . import codec
from .keys import validate_key
from .models import NEVER, NO_EXPIRY, Entry, expiry_from_ttl

_logger = logging.getLogger(__name__)

Clock = t.Callable[[], float]


class Store:
    """Persistent key-value store with per-key expiration.

    Expired entries are removed lazily by whichever read finds them, or in
    bulk by `clean()`. Nothing sweeps in the background.

    All operations on one instance are serialized by an internal lock, and the
    read-modify-write operations (incr/decr, rpush/lpush/lset) run inside a
    single storage transaction. Separate instances or processes sharing one
    database file are not coordinated.
    """

    def __init__(
        self,
        name: str = "store",
        path: str = "db.sqlite",
        *,
        storage: t.Optional[StorageAdapter] = None,
        clock: Clock = time.time,
        preserve_ttl: bool = True,
    ) -> None:
        self.table_name = sanitize_table_name(name)
        if storage is None:
            storage = SQLStorage(self.table_name, f"sqlite:///{path}")
        self._storage = storage
        self._clock = clock
        self._preserve_ttl = preserve_ttl
        self._lock = threading.RLock()
        self._storage.create_table()

    @classmethod
    def from_config(cls, config: StoreConfig, *, clock: Clock = time.time) -> "Store":
        storage_config = config.storage
        storage: StorageAdapter
        if storage_config.type == "memory":
            storage = InMemoryStorage()
        elif storage_config.type == "sql":
            storage = SQLStorage(
                sanitize_table_name(config.name),
                storage_config.database_url(),
                echo=storage_config.echo,
            )
        else:
            raise StorageError(f"Unknown storage type {storage_config.type!r}")
        return cls(config.name, storage=storage, clock=clock, preserve_ttl=config.preserve_ttl)

    def __enter__(self) -> "Store":
        return self

    def __exit__(self, *exc_info: t.Any) -> None:
        self.close()

    def close(self) -> None:
        self._storage.close()

    # -- internals --

    @contextlib.contextmanager
    def _operation(self, name: str) -> t.Iterator[None]:
        store_operations_total.inc(op=name)
        with self._lock, store_operation_latency_seconds.time(op=name):
            yield

    @contextlib.contextmanager
    def _read_modify_write(self, name: str) -> t.Iterator[None]:
        with self._operation(name), self._storage.atomic():
            yield

    def _expire(self, entry: Entry) -> None:
        self._storage.delete(entry.key)
        store_expired_total.inc(reason="lazy")
        _logger.debug("Deleted expired key %s from %s", entry.key, self.table_name)

    def _load_live(self, key: str) -> t.Optional[Entry]:
        entry = self._storage.fetch(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            self._expire(entry)
            return None
        return entry

    def _scan(self, validate: bool) -> t.List[Entry]:
        entries = self._storage.fetch_all()
        if not validate:
            return entries
        now = self._clock()
        live: t.List[Entry] = []
        for entry in entries:
            if entry.is_expired(now):
                self._expire(entry)
            else:
                live.append(entry)
        return live

    def _rewrite(self, key: str, value: t.Any, previous: t.Optional[Entry]) -> None:
        exp = NO_EXPIRY
        if self._preserve_ttl and previous is not None:
            exp = previous.exp
        self._storage.upsert(Entry(key, codec.encode(value, key), exp))

    def _load_list(self, key: str) -> t.Tuple[t.Optional[Entry], t.List[t.Any]]:
        entry = self._load_live(key)
        if entry is None:
            return None, []
        value = entry.load()
        if not isinstance(value, list):
            raise WrongTypeError(key, "list", value)
        return entry, value

    # -- key/value/expiry --

    def get(self, key: t.Union[str, int], default: t.Any = False) -> t.Any:
        """Return the value stored at key, or `default` if absent or expired.

        An expired entry is deleted as part of the lookup.
        """
        key = validate_key(key)
        with self._operation("get"):
            entry = self._load_live(key)
            return default if entry is None else entry.load()

    def set(self, key: t.Union[str, int], value: t.Any, ttl: t.Any = NEVER) -> "Store":
        """Store value at key, replacing any previous entry and its expiry.

        `ttl` is a number of seconds from now; NEVER, None or any non-numeric
        value stores the entry without expiry.
        """
        key = validate_key(key)
        text = codec.encode(value, key)
        with self._operation("set"):
            self._storage.upsert(Entry(key, text, expiry_from_ttl(ttl, self._clock())))
        return self

    def delete(self, key: t.Union[str, int]) -> "Store":
        key = validate_key(key)
        with self._operation("delete"):
            self._storage.delete(key)
        return self

    del_ = delete

    def delete_all(self) -> "Store":
        with self._operation("delete_all"):
            self._storage.delete_all()
        _logger.info("Deleted all entries from %s", self.table_name)
        return self

    def clean(self) -> int:
        """Delete every expired entry in one statement; return how many."""
        with self._operation("clean"):
            removed = self._storage.delete_expired(self._clock())
        store_expired_total.inc(removed, reason="sweep")
        _logger.info("Swept %d expired entries from %s", removed, self.table_name)
        return removed

    def exists(self, key: t.Union[str, int]) -> bool:
        key = validate_key(key)
        with self._operation("exists"):
            return self._load_live(key) is not None

    def ttl(self, key: t.Union[str, int]) -> t.Optional[int]:
        """Seconds left before key expires, -1 if it never does, None if absent."""
        key = validate_key(key)
        with self._operation("ttl"):
            entry = self._load_live(key)
            if entry is None:
                return None
            if entry.exp == NO_EXPIRY:
                return -1
            return math.ceil(entry.exp - self._clock())

    # -- enumeration --

    def keys_count(self) -> int:
        """Number of stored entries, expired ones included."""
        with self._operation("keys_count"):
            return self._storage.count()

    def get_all(self, validate: bool = True) -> t.List[Entry]:
        """Return all rows with their raw serialized values.

        With `validate`, expired rows are deleted and left out; without it
        every row is returned and nothing is deleted.
        """
        with self._operation("get_all"), self._storage.atomic():
            return self._scan(validate)

    def keys(self, validate: bool = True) -> t.List[str]:
        with self._operation("keys"), self._storage.atomic():
            return [entry.key for entry in self._scan(validate)]

    # -- counters --

    def incr(self, key: t.Union[str, int], by: int = 1) -> int:
        key = validate_key(key)
        with self._read_modify_write("incr"):
            entry = self._load_live(key)
            current = 0 if entry is None else _as_int(key, entry.load())
            result = current + by
            self._rewrite(key, result, entry)
        return result

    def decr(self, key: t.Union[str, int], by: int = 1) -> int:
        return self.incr(key, -by)

    # -- lists --

    def count(self, key: t.Union[str, int]) -> int:
        """Number of elements in the list or mapping at key; 0 for anything else."""
        key = validate_key(key)
        with self._operation("count"):
            entry = self._load_live(key)
            value = None if entry is None else entry.load()
        return len(value) if isinstance(value, (list, dict)) else 0

    def rpush(self, key: t.Union[str, int], value: t.Any) -> int:
        key = validate_key(key)
        with self._read_modify_write("rpush"):
            entry, items = self._load_list(key)
            items.append(value)
            self._rewrite(key, items, entry)
        return len(items)

    def lpush(self, key: t.Union[str, int], value: t.Any) -> int:
        key = validate_key(key)
        with self._read_modify_write("lpush"):
            entry, items = self._load_list(key)
            items.insert(0, value)
            self._rewrite(key, items, entry)
        return len(items)

    def lset(self, key: t.Union[str, int], idx: int, value: t.Any) -> bool:
        key = validate_key(key)
        with self._read_modify_write("lset"):
            entry, items = self._load_list(key)
            pos = _resolve_index(idx, len(items))
            if pos is None:
                return False
            items[pos] = value
            self._rewrite(key, items, entry)
        return True

    def lindex(self, key: t.Union[str, int], idx: int) -> t.Any:
        key = validate_key(key)
        with self._operation("lindex"):
            _, items = self._load_list(key)
        pos = _resolve_index(idx, len(items))
        return None if pos is None else items[pos]


def _resolve_index(idx: int, length: int) -> t.Optional[int]:
    # negative indexes count back from the end
    if idx < 0:
        idx = length - abs(idx)
    if 0 <= idx < length:
        return idx
    return None


def _as_int(key: str, value: t.Any) -> int:
    if value is None:
        return 0
    if isinstance(value, (bool, int)):
        return int(value)
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise WrongTypeError(key, "integer", value) from None
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    raise WrongTypeError(key, "integer", value)
