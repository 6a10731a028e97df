"""An adaptive radix tree mapping byte-string keys to byte-string values."""

from __future__ import annotations

from structkit.art_nodes import (
    MAX_PREFIX_SIZE,
    InternalNode,
    LeafNode,
    Node,
    Node4,
    find_min_leaf,
)


class Art:
    """A map from byte strings to byte strings stored as an adaptive radix tree.

    Keys must be non-empty, distinct, and no key may be a prefix of another.
    """

    def __init__(self) -> None:
        self._root: Node | None = None
        self._len = 0

    def __len__(self) -> int:
        return self._len

    def __repr__(self) -> str:
        return f"Art(len={self._len})"

    def get(self, key: bytes) -> bytes | None:
        """Return the value stored under ``key``, or None."""
        key = bytes(key)
        node = self._root
        depth = 0
        while node is not None:
            if isinstance(node, LeafNode):
                return node.value if node.key == key else None
            stored = node.prefix
            if key[depth : depth + len(stored)] != stored:
                return None
            depth += node.prefix_len
            if depth >= len(key):
                return None
            node = node.get_child(key[depth])
            depth += 1
        return None

    def insert(self, key: bytes, value: bytes) -> None:
        """Store ``value`` under a new ``key``.

        Raise ValueError if the key is empty, already present, or a prefix of
        (or prefixed by) a key already stored.
        """
        key = bytes(key)
        value = bytes(value)
        if not key:
            raise ValueError("key must not be empty")

        if self._root is None:
            self._root = LeafNode(key, value)
            self._len += 1
            return

        parent: InternalNode | None = None
        parent_byte = 0
        node: Node = self._root
        depth = 0

        while True:
            if isinstance(node, LeafNode):
                if node.key == key:
                    raise ValueError(f"key already exists: {key!r}")
                common = node.longest_common_prefix(key, depth)
                split = depth + common
                if split >= len(key) or split >= len(node.key):
                    raise ValueError("a key may not be a prefix of another key")
                branch = Node4(key[depth : depth + min(common, MAX_PREFIX_SIZE)], common)
                branch.add_child(node.key[split], node)
                branch.add_child(key[split], LeafNode(key, value))
                self._replace(parent, parent_byte, branch)
                self._len += 1
                return

            if node.prefix_len:
                diff = self._prefix_mismatch(node, key, depth)
                if diff < node.prefix_len:
                    if depth + diff >= len(key):
                        raise ValueError("a key may not be a prefix of another key")
                    self._split_prefix(parent, parent_byte, node, key, value, depth, diff)
                    self._len += 1
                    return
                depth += node.prefix_len

            if depth >= len(key):
                raise ValueError("a key may not be a prefix of another key")

            byte = key[depth]
            child = node.get_child(byte)
            if child is not None:
                parent, parent_byte, node = node, byte, child
                depth += 1
                continue

            if node.is_full():
                grown = node.grow()
                self._replace(parent, parent_byte, grown)
                node = grown
            node.add_child(byte, LeafNode(key, value))
            self._len += 1
            return

    def _replace(self, parent: InternalNode | None, byte: int, node: Node) -> None:
        if parent is None:
            self._root = node
        else:
            parent.set_child(byte, node)

    def _split_prefix(
        self,
        parent: InternalNode | None,
        parent_byte: int,
        node: InternalNode,
        key: bytes,
        value: bytes,
        depth: int,
        diff: int,
    ) -> None:
        branch = Node4(node.prefix[: min(diff, MAX_PREFIX_SIZE)], diff)
        if node.prefix_len <= MAX_PREFIX_SIZE:
            branch.add_child(node.prefix[diff], node)
            node.prefix = node.prefix[diff + 1 :]
            node.prefix_len -= diff + 1
        else:
            leaf = find_min_leaf(node)
            if leaf is None:
                raise RuntimeError("internal node has no leaf below it")
            branch.add_child(leaf.key[depth + diff], node)
            node.prefix_len -= diff + 1
            start = depth + diff + 1
            node.prefix = leaf.key[start : start + min(node.prefix_len, MAX_PREFIX_SIZE)]
        branch.add_child(key[depth + diff], LeafNode(key, value))
        self._replace(parent, parent_byte, branch)

    @staticmethod
    def _prefix_mismatch(node: InternalNode, key: bytes, depth: int) -> int:
        limit = min(MAX_PREFIX_SIZE, node.prefix_len, max(len(key) - depth, 0))
        i = 0
        while i < limit:
            if node.prefix[i] != key[depth + i]:
                return i
            i += 1

        if node.prefix_len > MAX_PREFIX_SIZE:
            leaf = find_min_leaf(node)
            if leaf is None:
                raise RuntimeError("internal node has no leaf below it")
            limit = min(len(leaf.key), len(key), depth + node.prefix_len) - depth
            while i < limit:
                if leaf.key[depth + i] != key[depth + i]:
                    return i
                i += 1
        return i