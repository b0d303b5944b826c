"""Error hierarchy for ttl_store.

Every error raised by the store on purpose inherits from StoreError. Errors
coming from the database engine itself are not wrapped.
"""

from __future__ import annotations

import typing as t


class StoreError(Exception):
    """Base error for all ttl_store exceptions."""

    def __init__(self, message: str, code: str = "STORE_ERROR") -> None:
        self.code = code
        super().__init__(message)


class InvalidKeyError(StoreError):
    """Key is neither a string nor an integer."""

    def __init__(self, key: t.Any) -> None:
        self.key = key
        super().__init__(
            f"Expected string as key, got {type(key).__name__}",
            code="INVALID_KEY",
        )


class InvalidTableNameError(StoreError):
    """Table name is not a safe SQL identifier after sanitization."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Invalid table name: {name!r}", code="INVALID_TABLE_NAME")


# -- Serialization errors --


class SerializationError(StoreError):
    """A value could not be converted to or from its stored text form."""


class EncodeError(SerializationError):
    def __init__(self, key: t.Optional[str], reason: str) -> None:
        self.key = key
        super().__init__(f"Cannot encode value for key {key!r}: {reason}", code="ENCODE_FAILED")


class DecodeError(SerializationError):
    def __init__(self, key: t.Optional[str], reason: str) -> None:
        self.key = key
        super().__init__(f"Corrupt value stored at key {key!r}: {reason}", code="DECODE_FAILED")


# -- Operation errors --


class WrongTypeError(StoreError):
    """A counter or list operation hit a value of an incompatible type."""

    def __init__(self, key: str, expected: str, actual: t.Any) -> None:
        self.key = key
        self.expected = expected
        super().__init__(
            f"Value at key {key!r} is {type(actual).__name__}, expected {expected}",
            code="WRONG_TYPE",
        )


class StorageError(StoreError):
    """The storage adapter cannot serve the request."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="STORAGE")
