"""A value that readers take snapshots of while a writer replaces it."""

from __future__ import annotations

import argparse
import threading
import time
from typing import Any


class SnapshotManager:
    """Holds a value; readers get the current value, writers swap in a new one."""

    def __init__(self, value: Any) -> None:
        self._state_lock = threading.Lock()
        self._value = value

    def read(self) -> Any:
        """Return the value held at this moment."""
        with self._state_lock:
            return self._value

    def update(self, value: Any) -> None:
        """Replace the held value."""
        self.read()
        with self._state_lock:
            self._value = value


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Read a value while it is updated.")
    parser.add_argument("--reads", type=int, default=60)
    parser.add_argument("--updates", type=int, default=30)
    parser.add_argument("--interval", type=float, default=0.2, help="seconds between reads")
    args = parser.parse_args(argv)

    mgr = SnapshotManager(1)

    def reader() -> None:
        for _ in range(args.reads):
            print(f"th1: {mgr.read()}")
            time.sleep(args.interval)

    def writer() -> None:
        for i in range(args.updates):
            mgr.update(i)
            time.sleep(args.interval * 2)

    threads = [threading.Thread(target=reader), threading.Thread(target=writer)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())