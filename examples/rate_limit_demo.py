#!/usr/bin/env python3
"""Fixed-window rate limiting on top of incr and per-key expiry.

Counters keep the expiry of their window because incr preserves an entry's
ttl. Run it twice within a minute to see the window carry over between
processes.
"""

import time

import click

from ttl_store import Store


def allow(store: Store, client: str, limit: int, window: int) -> bool:
    bucket = f"hits:{client}:{int(time.time()) // window}"
    if not store.exists(bucket):
        store.set(bucket, 0, window)
    return store.incr(bucket) <= limit


@click.command()
@click.option("--path", default="ratelimit.sqlite", help="SQLite database file")
@click.option("--client", default="demo-client", help="Client identifier")
@click.option("--requests", "n_requests", default=15, type=int, help="Requests to simulate")
@click.option("--limit", default=10, type=int, help="Requests allowed per window")
@click.option("--window", default=60, type=int, help="Window length in seconds")
def main(path: str, client: str, n_requests: int, limit: int, window: int) -> None:
    with Store("rate-limits", path) as store:
        for i in range(n_requests):
            verdict = "allowed" if allow(store, client, limit, window) else "throttled"
            print(f"request {i + 1:02d}: {verdict}")
        removed = store.clean()
        print(f"swept {removed} old windows")


if __name__ == "__main__":
    main()
