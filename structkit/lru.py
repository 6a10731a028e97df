"""Charge-bounded LRU caches, plain and sharded."""

from __future__ import annotations

import threading
from collections import OrderedDict
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class _Entry:
    value: Any
    charge: int


class LruCache:
    """A thread-safe LRU cache whose entries each carry a charge.

    When the total charge exceeds the capacity, the least recently used
    entries are evicted.
    """

    def __init__(self, cap: int) -> None:
        self._cap = cap
        self._entries: OrderedDict[Hashable, _Entry] = OrderedDict()
        self._usage = 0
        self._lock = threading.Lock()

    def insert(self, key: Hashable, value: Any, charge: int) -> Any:
        """Store ``value`` under ``key``; return the value it replaced, if any."""
        if self._cap == 0:
            return None

        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                old = entry.value
                entry.value = value
                self._usage += charge - entry.charge
                entry.charge = charge
                self._entries.move_to_end(key)
            else:
                self._entries[key] = _Entry(value, charge)
                self._usage += charge
                old = None

            while self._usage > self._cap and self._entries:
                _, evicted = self._entries.popitem(last=False)
                self._usage -= evicted.charge

            return old

    def get(self, key: Hashable) -> Any:
        """Return the value for ``key`` and mark it recently used, or None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            self._entries.move_to_end(key)
            return entry.value

    def erase(self, key: Hashable) -> Any:
        """Remove ``key`` and return its value, or None if it was absent."""
        with self._lock:
            entry = self._entries.pop(key, None)
            if entry is None:
                return None
            self._usage -= entry.charge
            return entry.value

    def total_charge(self) -> int:
        """Return the sum of the charges of the entries held."""
        return self._usage


class ShardedLruCache:
    """Spreads keys over several independent LRU caches by hash."""

    def __init__(self, shards: int, per_cap: int) -> None:
        if shards <= 0:
            raise ValueError("a sharded cache needs at least one shard")
        self._caches = tuple(LruCache(per_cap) for _ in range(shards))

    def _cache_for(self, key: Hashable) -> LruCache:
        return self._caches[hash(key) % len(self._caches)]

    def insert(self, key: Hashable, value: Any, charge: int) -> Any:
        """Store ``value`` under ``key`` in its shard; return the replaced value."""
        return self._cache_for(key).insert(key, value, charge)

    def get(self, key: Hashable) -> Any:
        """Return the value for ``key``, or None."""
        return self._cache_for(key).get(key)

    def erase(self, key: Hashable) -> Any:
        """Remove ``key`` and return its value, or None."""
        return self._cache_for(key).erase(key)

    def total_charge(self) -> int:
        """Return the total charge over all shards."""
        return sum(cache.total_charge() for cache in self._caches)