"""A queue of versions that releases old versions once nothing else holds them."""

from __future__ import annotations

import argparse
import sys
import threading
from collections import deque
from typing import Any


def _front_refcount(queue: deque) -> int:
    return sys.getrefcount(queue[0])


# References to the front item that exist only because the queue holds it
# and because it is being inspected.
_QUEUE_ONLY = _front_refcount(deque([object()]))


class Versions:
    """Keeps pushed versions in order and tracks a sequence number.

    A version at the head of the queue is released by
    :meth:`pop_deleted_versions` once the queue holds the only reference
    to it, so each version should be a distinct object.
    """

    def __init__(self, begin_seq: int) -> None:
        self._queue: deque[Any] = deque()
        self._seq = begin_seq
        self._lock = threading.Lock()

    def push(self, item: Any) -> None:
        """Append a new version and advance the sequence number."""
        with self._lock:
            self._queue.append(item)
            self._seq += 1

    def current(self) -> Any:
        """Return the newest version, or None if there is none."""
        with self._lock:
            return self._queue[-1] if self._queue else None

    def pop_deleted_versions(self) -> list:
        """Remove and return the oldest versions that nothing else references."""
        deleted = []
        with self._lock:
            while self._queue and _front_refcount(self._queue) <= _QUEUE_ONLY:
                deleted.append(self._queue.popleft())
        return deleted

    def current_seq(self) -> int:
        """Return the current sequence number."""
        with self._lock:
            return self._seq


class _Item(int):
    """An int that is always a fresh object, so it can be tracked."""

    __slots__ = ()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Show versions being released.")
    parser.add_argument("--count", type=int, default=10, help="versions to push")
    args = parser.parse_args(argv)

    held = [_Item(i) for i in range(args.count)]
    versions = Versions(0)
    for item in held:
        versions.push(item)
    del item

    current = versions.current()
    print(f"current: {current}")

    del held
    print(f"deleted versions: {versions.pop_deleted_versions()}")

    del current
    print(f"deleted versions: {versions.pop_deleted_versions()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())