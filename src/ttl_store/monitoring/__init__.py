from .metrics import (
    Counter,
    Histogram,
    store_expired_total,
    store_operation_latency_seconds,
    store_operations_total,
)

__all__ = [
    "Counter",
    "Histogram",
    "store_operations_total",
    "store_expired_total",
    "store_operation_latency_seconds",
]
