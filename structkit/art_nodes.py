"""Nodes of an adaptive radix tree: leaves and the four internal node sizes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from bisect import bisect_right
from collections.abc import Iterator
from typing import ClassVar, Union

MAX_PREFIX_SIZE = 10
_EMPTY = 0xFF


def _check_byte(byte: int) -> int:
    if not 0 <= byte <= 0xFF:
        raise ValueError(f"child key must be a byte, got {byte!r}")
    return byte


class LeafNode:
    """Holds one key and its value."""

    __slots__ = ("key", "value")

    def __init__(self, key: bytes, value: bytes) -> None:
        self.key = bytes(key)
        self.value = bytes(value)

    def __repr__(self) -> str:
        return f"LeafNode(key={self.key!r}, value={self.value!r})"

    def longest_common_prefix(self, key: bytes, start: int) -> int:
        """Return how many bytes from ``start`` on this leaf's key shares with ``key``."""
        i = start
        limit = min(len(self.key), len(key))
        while i < limit and self.key[i] == key[i]:
            i += 1
        return max(i - start, 0)


Node = Union[LeafNode, "InternalNode"]


class InternalNode(ABC):
    """Base of the internal nodes.

    ``prefix`` stores at most ``MAX_PREFIX_SIZE`` bytes of the compressed
    path; ``prefix_len`` is its full length, which may be longer (the rest is
    recovered from a leaf below the node).
    """

    CAPACITY: ClassVar[int]
    MAX_PREFIX_SIZE: ClassVar[int] = MAX_PREFIX_SIZE
    _GROWS_TO: ClassVar[type[InternalNode] | None] = None

    def __init__(self, prefix: bytes = b"", prefix_len: int | None = None) -> None:
        prefix = bytes(prefix)
        if len(prefix) > MAX_PREFIX_SIZE:
            raise ValueError(f"prefix longer than {MAX_PREFIX_SIZE} bytes")
        if prefix_len is None:
            prefix_len = len(prefix)
        if prefix_len < len(prefix):
            raise ValueError("prefix_len is shorter than the stored prefix")
        self.prefix = prefix
        self.prefix_len = prefix_len

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(prefix={self.prefix!r}, "
            f"prefix_len={self.prefix_len}, children={len(self)})"
        )

    @abstractmethod
    def __len__(self) -> int:
        """Return the number of children."""

    @abstractmethod
    def _store(self, byte: int, child: Node) -> None:
        """Place a new child; the caller has checked room and uniqueness."""

    @abstractmethod
    def get_child(self, byte: int) -> Node | None:
        """Return the child under ``byte``, or None."""

    @abstractmethod
    def set_child(self, byte: int, child: Node) -> None:
        """Replace the existing child under ``byte``; raise KeyError if there is none."""

    @abstractmethod
    def children(self) -> Iterator[tuple[int, Node]]:
        """Yield ``(byte, child)`` pairs in ascending byte order."""

    def check_prefix(self, key: bytes) -> int:
        """Return how many leading bytes of the stored prefix match ``key``."""
        i = 0
        for a, b in zip(self.prefix, key):
            if a != b:
                break
            i += 1
        return i

    def is_full(self) -> bool:
        """Return whether no further child fits."""
        return len(self) >= self.CAPACITY

    def add_child(self, byte: int, child: Node) -> None:
        """Add ``child`` under a byte that has no child yet."""
        _check_byte(byte)
        if self.is_full():
            raise ValueError(f"{type(self).__name__} is full")
        if self.get_child(byte) is not None:
            raise ValueError(f"a child already exists for byte {byte}")
        self._store(byte, child)

    def grow(self) -> InternalNode:
        """Return a node of the next size with the same prefix and children."""
        if self._GROWS_TO is None:
            raise ValueError(f"{type(self).__name__} cannot grow")
        bigger = self._GROWS_TO(self.prefix, self.prefix_len)
        for byte, child in self.children():
            bigger._store(byte, child)
        return bigger


class _SortedNode(InternalNode):
    """Keeps keys sorted in a small array, searched linearly."""

    def __init__(self, prefix: bytes = b"", prefix_len: int | None = None) -> None:
        super().__init__(prefix, prefix_len)
        self._keys: list[int] = []
        self._children: list[Node] = []

    def __len__(self) -> int:
        return len(self._keys)

    def _store(self, byte: int, child: Node) -> None:
        pos = bisect_right(self._keys, byte)
        self._keys.insert(pos, byte)
        self._children.insert(pos, child)

    def _position(self, byte: int) -> int | None:
        try:
            return self._keys.index(byte)
        except ValueError:
            return None

    def get_child(self, byte: int) -> Node | None:
        pos = self._position(_check_byte(byte))
        return None if pos is None else self._children[pos]

    def set_child(self, byte: int, child: Node) -> None:
        pos = self._position(_check_byte(byte))
        if pos is None:
            raise KeyError(byte)
        self._children[pos] = child

    def children(self) -> Iterator[tuple[int, Node]]:
        return iter(list(zip(self._keys, self._children)))


class Node256(InternalNode):
    """One slot for every possible byte."""

    CAPACITY = 256

    def __init__(self, prefix: bytes = b"", prefix_len: int | None = None) -> None:
        super().__init__(prefix, prefix_len)
        self._slots: list[Node | None] = [None] * 256
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def _store(self, byte: int, child: Node) -> None:
        self._slots[byte] = child
        self._count += 1

    def get_child(self, byte: int) -> Node | None:
        return self._slots[_check_byte(byte)]

    def set_child(self, byte: int, child: Node) -> None:
        if self._slots[_check_byte(byte)] is None:
            raise KeyError(byte)
        self._slots[byte] = child

    def children(self) -> Iterator[tuple[int, Node]]:
        return ((b, c) for b, c in enumerate(self._slots) if c is not None)


class Node48(InternalNode):
    """A 256-entry index into 48 child slots."""

    CAPACITY = 48
    _GROWS_TO = Node256

    def __init__(self, prefix: bytes = b"", prefix_len: int | None = None) -> None:
        super().__init__(prefix, prefix_len)
        self._index = bytearray([_EMPTY]) * 256
        self._slots: list[Node] = []

    def __len__(self) -> int:
        return len(self._slots)

    def _store(self, byte: int, child: Node) -> None:
        self._index[byte] = len(self._slots)
        self._slots.append(child)

    def get_child(self, byte: int) -> Node | None:
        pos = self._index[_check_byte(byte)]
        return None if pos == _EMPTY else self._slots[pos]

    def set_child(self, byte: int, child: Node) -> None:
        pos = self._index[_check_byte(byte)]
        if pos == _EMPTY:
            raise KeyError(byte)
        self._slots[pos] = child

    def children(self) -> Iterator[tuple[int, Node]]:
        return (
            (b, self._slots[pos]) for b, pos in enumerate(self._index) if pos != _EMPTY
        )


class Node16(_SortedNode):
    """Up to sixteen children in sorted order."""

    CAPACITY = 16
    _GROWS_TO = Node48


class Node4(_SortedNode):
    """Up to four children in sorted order."""

    CAPACITY = 4
    _GROWS_TO = Node16


def find_min_leaf(node: Node | None) -> LeafNode | None:
    """Return the leaf with the smallest key below ``node``, or None."""
    while isinstance(node, InternalNode):
        node = next((child for _, child in node.children()), None)
    return node