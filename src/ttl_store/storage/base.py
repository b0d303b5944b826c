from __future__ import annotations

import contextlib
import typing as t
from abc import ABC, abstractmethod

from ..core.models import Entry


class StorageAdapter(ABC):
    """Table of (key, value, exp) rows.

    Adapters know nothing about expiry policy beyond `delete_expired`; the
    Store decides what is live. Adapters are not thread-safe on their own.
    """

    @abstractmethod
    def create_table(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def fetch(self, key: str) -> t.Optional[Entry]:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def fetch_all(self) -> t.List[Entry]:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def upsert(self, entry: Entry) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def delete_all(self) -> None:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def delete_expired(self, now: float) -> int:  # pragma: no cover - interface
        raise NotImplementedError

    @abstractmethod
    def count(self) -> int:  # pragma: no cover - interface
        raise NotImplementedError

    @contextlib.contextmanager
    def atomic(self) -> t.Iterator[None]:
        """Group the calls made inside the block into one unit of work."""
        yield

    def close(self) -> None:
        return None


class InMemoryStorage(StorageAdapter):
    """A dict-backed adapter for dev/test.

    Not durable, but implements the same interface as SQLStorage.
    """

    def __init__(self) -> None:
        self._rows: t.Dict[str, Entry] = {}

    def create_table(self) -> None:
        return None

    def fetch(self, key: str) -> t.Optional[Entry]:
        return self._rows.get(key)

    def fetch_all(self) -> t.List[Entry]:
        return list(self._rows.values())

    def upsert(self, entry: Entry) -> None:
        self._rows[entry.key] = entry

    def delete(self, key: str) -> None:
        self._rows.pop(key, None)

    def delete_all(self) -> None:
        self._rows.clear()

    def delete_expired(self, now: float) -> int:
        expired = [key for key, entry in self._rows.items() if entry.is_expired(now)]
        for key in expired:
            del self._rows[key]
        return len(expired)

    def count(self) -> int:
        return len(self._rows)
