"""An ordered set kept as a skip list, with a cursor for walking it."""

from __future__ import annotations

import random
import threading
from collections.abc import Iterator
from typing import Any

MAX_HEIGHT = 12
_BRANCHING = 4
_NODE_HEADER = 16
_POINTER_SIZE = 8


class DefaultAllocator:
    """Records the memory handed out to nodes and reports the total."""

    def __init__(self) -> None:
        self._sizes: list[int] = []
        self._total = 0
        self._lock = threading.Lock()

    def allocate(self, size: int) -> int:
        """Reserve ``size`` bytes and return the index of the allocation."""
        if size < 0:
            raise ValueError("allocation size must not be negative")
        with self._lock:
            self._sizes.append(size)
            self._total += size
            return len(self._sizes) - 1

    def mem_usage(self) -> int:
        """Return the number of bytes reserved so far."""
        with self._lock:
            return self._total

    def __repr__(self) -> str:
        return f"DefaultAllocator(mem_usage={self.mem_usage()})"


class _Node:
    __slots__ = ("key", "next")

    def __init__(self, key: Any, height: int) -> None:
        self.key = key
        self.next: list[_Node | None] = [None] * height


def _node_size(height: int) -> int:
    return _NODE_HEADER + height * _POINTER_SIZE


class SkipList:
    """A sorted collection of distinct, mutually comparable keys."""

    def __init__(self, allocator: DefaultAllocator | None = None) -> None:
        self._allocator = allocator if allocator is not None else DefaultAllocator()
        self._allocator.allocate(_node_size(MAX_HEIGHT))
        self._head = _Node(None, MAX_HEIGHT)
        self._max_height = 1
        self._rng = random.Random()
        self._write_lock = threading.Lock()

    def _random_height(self) -> int:
        height = 1
        while height < MAX_HEIGHT and self._rng.randrange(_BRANCHING) == 0:
            height += 1
        return height

    def _find_greater_or_equal(self, key: Any, prev: list[_Node] | None = None) -> _Node | None:
        cur = self._head
        level = self._max_height - 1
        while True:
            nxt = cur.next[level]
            if nxt is not None and nxt.key < key:
                cur = nxt
                continue
            if prev is not None:
                prev[level] = cur
            if level == 0:
                return nxt
            level -= 1

    def _find_less_than(self, key: Any) -> _Node:
        cur = self._head
        level = self._max_height - 1
        while True:
            nxt = cur.next[level]
            if nxt is None or nxt.key >= key:
                if level == 0:
                    return cur
                level -= 1
            else:
                cur = nxt

    def _find_last(self) -> _Node:
        cur = self._head
        level = self._max_height - 1
        while True:
            nxt = cur.next[level]
            if nxt is not None:
                cur = nxt
            elif level == 0:
                return cur
            else:
                level -= 1

    def insert(self, key: Any) -> None:
        """Add ``key``; raise ValueError if it is already present."""
        with self._write_lock:
            prev = [self._head] * MAX_HEIGHT
            found = self._find_greater_or_equal(key, prev)
            if found is not None and found.key == key:
                raise ValueError(f"key already present: {key!r}")

            height = self._random_height()
            if height > self._max_height:
                self._max_height = height

            self._allocator.allocate(_node_size(height))
            node = _Node(key, height)
            for level in range(height):
                node.next[level] = prev[level].next[level]
                prev[level].next[level] = node

    def contains(self, key: Any) -> bool:
        """Return whether ``key`` is in the list."""
        node = self._find_greater_or_equal(key)
        return node is not None and node.key == key

    def mem_usage(self) -> int:
        """Return the bytes reserved by the list's allocator."""
        return self._allocator.mem_usage()

    def __iter__(self) -> Iterator[Any]:
        node = self._head.next[0]
        while node is not None:
            yield node.key
            node = node.next[0]

    def __repr__(self) -> str:
        return f"SkipList(mem_usage={self.mem_usage()}, keys={list(self)!r})"


class Iter:
    """A cursor over a skip list that can seek and step both ways."""

    def __init__(self, skiplist: SkipList) -> None:
        self._list = skiplist
        self._node: _Node | None = None

    def _key_of(self, node: _Node | None) -> Any:
        if node is None or node is self._list._head:
            return None
        return node.key

    def peek(self) -> Any:
        """Return the key under the cursor, or None when it is not valid."""
        return self._key_of(self._node)

    def is_valid(self) -> bool:
        """Return whether the cursor rests on a key."""
        return self._node is not None and self._node is not self._list._head

    def next(self) -> Any:
        """Return the key under the cursor and move to the following one."""
        if not self.is_valid():
            return None
        cur = self._node
        self._node = cur.next[0]
        return cur.key

    def prev(self) -> Any:
        """Return the key under the cursor and move to the preceding one."""
        if not self.is_valid():
            return None
        key = self._node.key
        self._node = self._list._find_less_than(key)
        return key

    def seek_to_first(self) -> Any:
        """Move to the smallest key and return it."""
        self._node = self._list._head.next[0]
        return self.peek()

    def seek_to_last(self) -> Any:
        """Move to the largest key and return it."""
        self._node = self._list._find_last()
        return self.peek()

    def seek(self, target: Any) -> Any:
        """Move to the first key not less than ``target`` and return it."""
        self._node = self._list._find_greater_or_equal(target)
        return self.peek()