"""Unit tests for configuration dataclasses."""

import pytest

from ttl_store.core.store import Store
from ttl_store.errors import StorageError
from ttl_store.storage import InMemoryStorage, SQLStorage
from ttl_store.utils.config import StorageConfig, StoreConfig


class TestStoreConfig:
    def test_defaults(self):
        config = StoreConfig()

        assert config.name == "store"
        assert config.preserve_ttl is True
        assert config.storage.type == "sql"
        assert config.storage.database_url() == "sqlite:///db.sqlite"

    def test_from_dict(self):
        config = StoreConfig.from_dict(
            {
                "name": "sessions",
                "preserve_ttl": False,
                "storage": {"type": "memory"},
            }
        )

        assert config.name == "sessions"
        assert config.preserve_ttl is False
        assert config.storage == StorageConfig(type="memory")

    def test_from_dict_unknown_key(self):
        with pytest.raises(TypeError):
            StoreConfig.from_dict({"storage": {"hostname": "x"}})

    def test_url_overrides_path(self):
        storage = StorageConfig(path="ignored.sqlite", url="sqlite:///:memory:")
        assert storage.database_url() == "sqlite:///:memory:"


class TestStoreFromConfig:
    def test_memory_storage(self):
        store = Store.from_config(StoreConfig.from_dict({"name": "1-cache", "storage": {"type": "memory"}}))

        assert store.table_name == "_1_cache"
        assert isinstance(store._storage, InMemoryStorage)

    def test_sqlite_storage(self, tmp_path):
        config = StoreConfig(name="cfg", storage=StorageConfig(path=str(tmp_path / "cfg.sqlite")))

        with Store.from_config(config) as store:
            store.set("key", [1, 2])
            assert isinstance(store._storage, SQLStorage)
            assert store._storage.table.name == "cfg"
            assert store.get("key") == [1, 2]

    def test_preserve_ttl_flag_is_passed(self, clock):
        config = StoreConfig.from_dict({"preserve_ttl": False, "storage": {"type": "memory"}})
        store = Store.from_config(config, clock=clock)

        store.set("hits", 1, 10)
        store.incr("hits")

        assert store.ttl("hits") == -1

    def test_sql_storage_from_url(self):
        """The sql type takes its backend from the URL, not from the type name."""
        config = StoreConfig.from_dict({"storage": {"type": "sql", "url": "sqlite:///:memory:"}})

        with Store.from_config(config) as store:
            store.set("key", "value")
            assert isinstance(store._storage, SQLStorage)
            assert store._storage.engine.url.get_backend_name() == "sqlite"
            assert store.get("key") == "value"

    @pytest.mark.parametrize("storage_type", ["mongodb", "sqlite"])
    def test_unknown_storage_type(self, storage_type):
        with pytest.raises(StorageError):
            Store.from_config(StoreConfig(storage=StorageConfig(type=storage_type)))
