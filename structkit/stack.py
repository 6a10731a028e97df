"""A last-in, first-out stack that many threads may share."""

from __future__ import annotations

import argparse
import threading
from typing import Any, NamedTuple


class _Node(NamedTuple):
    elem: Any
    next: _Node | None


class TreiberStack:
    """A thread-safe stack built from immutable linked nodes."""

    def __init__(self) -> None:
        self._head: _Node | None = None
        self._lock = threading.Lock()

    def _compare_exchange(self, expected: _Node | None, new: _Node | None) -> bool:
        with self._lock:
            if self._head is not expected:
                return False
            self._head = new
            return True

    def push(self, elem: Any) -> None:
        """Put ``elem`` on top of the stack."""
        while True:
            head = self._head
            if self._compare_exchange(head, _Node(elem, head)):
                return

    def pop(self) -> Any:
        """Take the top element off the stack; return None if it is empty."""
        while True:
            head = self._head
            if head is None:
                return None
            if self._compare_exchange(head, head.next):
                return head.elem

    def is_empty(self) -> bool:
        """Return whether the stack holds no elements."""
        return self._head is None

    def __repr__(self) -> str:
        items = []
        node = self._head
        while node is not None:
            items.append(node.elem)
            node = node.next
        return f"TreiberStack({items!r})"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Push from several threads, then drain.")
    parser.add_argument("--threads", type=int, default=4)
    parser.add_argument("--per-thread", type=int, default=25)
    args = parser.parse_args(argv)

    stack = TreiberStack()
    total = args.threads * args.per_thread

    def worker(i: int) -> None:
        for j in range(args.per_thread):
            stack.push(i * args.per_thread + j)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(args.threads)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    results = []
    for _ in range(total):
        value = stack.pop()
        if value is not None:
            results.append(value)
    results.sort()

    if results != list(range(total)) or not stack.is_empty():
        raise RuntimeError("stack lost or duplicated elements")
    print(f"popped {len(results)} elements")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())