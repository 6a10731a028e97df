"""In-memory and thread-safe data structures: Bloom filters, LRU caches, a skip list, a stack, optimistic locks, a background-writer map and an adaptive radix tree."""

__version__ = "0.1.0"