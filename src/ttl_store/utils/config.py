from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class StorageConfig:
    type: str = "sql"  # sql | memory
    path: str = "db.sqlite"
    url: Optional[str] = None  # SQLAlchemy URL (sqlite or postgresql); overrides path
    echo: bool = False

    def database_url(self) -> str:
        if self.url:
            return self.url
        return f"sqlite:///{self.path}"


@dataclass
class StoreConfig:
    name: str = "store"
    storage: StorageConfig = dataclasses.field(default_factory=StorageConfig)
    # keep an entry's expiry when incr/decr/rpush/lpush/lset rewrite it
    preserve_ttl: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StoreConfig":
        values = {k: v for k, v in data.items() if k != "storage"}
        return cls(storage=StorageConfig(**data.get("storage", {})), **values)
