#!/usr/bin/env python3

import json
import time
from typing import Optional

import click

from ttl_store import Store


def _now() -> str:
    return time.strftime("%H:%M:%S")


def _describe_expiry(exp: int) -> str:
    if exp == 0:
        return "never"
    left = exp - int(time.time())
    if left <= 0:
        return "expired"
    return f"in {left}s"


def show(store: Store, validate: bool) -> None:
    entries = store.get_all(validate=validate)
    print(f"\n[{_now()}] table={store.table_name} rows={store.keys_count()}")
    if not entries:
        print("  No entries found.")
    for idx, entry in enumerate(sorted(entries, key=lambda e: e.key), start=1):
        preview = entry.value if len(entry.value) <= 60 else entry.value[:57] + "..."
        print(f"  [{idx:02d}] {entry.key:<24} expires={_describe_expiry(entry.exp):<10} {preview}")


def sweep(store: Store, interval: float) -> None:
    while True:
        removed = store.clean()
        print(f"[{_now()}] swept {removed} expired entries, {store.keys_count()} left")
        try:
            time.sleep(interval)
        except KeyboardInterrupt:
            break


@click.command()
@click.option("--name", default="store", help="Store (table) name")
@click.option("--path", default="db.sqlite", help="SQLite database file")
@click.option("--all-rows", is_flag=True, help="List expired rows too, without deleting them")
@click.option("--sweep-every", default=None, type=float, help="Run clean() every N seconds until interrupted")
@click.option("--get", "get_key", default=None, help="Print the decoded value of one key")
@click.option("--clear", is_flag=True, help="Delete every entry in the store")
def main(name: str, path: str, all_rows: bool, sweep_every: Optional[float], get_key: Optional[str], clear: bool) -> None:
    with Store(name, path) as store:
        if clear:
            store.delete_all()
            print("Cleared all entries from:", store.table_name)
            return
        if get_key is not None:
            print(json.dumps(store.get(get_key, None), indent=2))
            return
        if sweep_every is not None:
            sweep(store, sweep_every)
            return
        show(store, validate=not all_rows)


if __name__ == "__main__":
    main()
