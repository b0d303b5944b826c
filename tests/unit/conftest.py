"""Shared fixtures for unit tests."""

from __future__ import annotations

import pytest

from ttl_store.core.store import Store
from ttl_store.monitoring import metrics
from ttl_store.storage import InMemoryStorage, SQLStorage

START = 1_700_000_000.0


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, now: float = START) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_metrics():
    """Metrics are module globals; start every test from zero."""
    for metric in (
        metrics.store_operations_total,
        metrics.store_expired_total,
        metrics.store_operation_latency_seconds,
    ):
        metric.reset()
    yield


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(params=["sqlite", "memory"])
def storage(request, tmp_path):
    """Each store test runs against a SQLite file and the in-memory adapter."""
    if request.param == "sqlite":
        adapter = SQLStorage("test_store", f"sqlite:///{tmp_path / 'store.sqlite'}")
    else:
        adapter = InMemoryStorage()
    yield adapter
    adapter.close()


@pytest.fixture
def store(storage, clock):
    return Store("test-store", storage=storage, clock=clock)
