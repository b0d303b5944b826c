from __future__ import annotations

import contextlib
import time
import typing as t
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


@dataclass
class Counter:
    name: str
    help: str
    values: Dict[Tuple, float] = field(default_factory=dict)

    def inc(self, value: float = 1.0, **labels: Any) -> None:
        key = tuple(sorted(labels.items()))
        self.values[key] = self.values.get(key, 0.0) + value

    def get(self, **labels: Any) -> float:
        return self.values.get(tuple(sorted(labels.items())), 0.0)

    def reset(self) -> None:
        self.values.clear()


@dataclass
class Histogram:
    name: str
    help: str
    buckets: List[float]
    counts: Dict[Tuple, List[int]] = field(default_factory=dict)

    def observe(self, val: float, **labels: Any) -> None:
        key = tuple(sorted(labels.items()))
        if key not in self.counts:
            self.counts[key] = [0 for _ in self.buckets]
        for i, b in enumerate(self.buckets):
            if val <= b:
                self.counts[key][i] += 1
                break

    @contextlib.contextmanager
    def time(self, **labels: Any) -> t.Iterator[None]:
        started = time.perf_counter()
        try:
            yield
        finally:
            self.observe(time.perf_counter() - started, **labels)

    def reset(self) -> None:
        self.counts.clear()


# Predefined metrics
store_operations_total = Counter("store_operations_total", "Store operations by name")
store_expired_total = Counter("store_expired_total", "Expired entries removed, by lazy read or sweep")
store_operation_latency_seconds = Histogram(
    "store_operation_latency_seconds",
    "Store operation latency",
    buckets=[0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)
