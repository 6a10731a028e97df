# structkit

In-memory data structures. Most of them are safe to share between threads.
The package uses only the standard library.

| Module | What it holds |
| --- | --- |
| `structkit.bloom` | `BloomBuilder`, `may_contain`, `bloom_hash`: Bloom filters stored as byte strings |
| `structkit.find` | `linear_find`, `binary_find`, `simd_find`: finding a byte in a sequence |
| `structkit.lru` | `LruCache`, `ShardedLruCache`: LRU caches bounded by total charge |
| `structkit.versions` | `Versions`: a queue that releases versions nothing else refers to |
| `structkit.snapshot` | `SnapshotManager`: a value that readers read while a writer replaces it |
| `structkit.skiplist` | `SkipList`, `Iter`, `DefaultAllocator`: an ordered set with a seekable cursor |
| `structkit.stack` | `TreiberStack`: a thread-safe LIFO stack |
| `structkit.optlock` | `OptLock` and `RestartLock`: optimistic, version-stamped locks |
| `structkit.worker` | `MiniWorker`: a key-value map whose writes go through a background thread |
| `structkit.art_nodes`, `structkit.art` | `Art`: an adaptive radix tree, and its nodes `Node4`, `Node16`, `Node48`, `Node256`, `LeafNode` |

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Usage

### Bloom filter

`BloomBuilder(bits_per_key).build(keys)` returns a filter as `bytes`. Keys may be
bytes or str. The last byte of the filter holds the number of probes.
`may_contain` returns `False` only when a key is certainly absent.

```python
from structkit.bloom import BloomBuilder, may_contain

bloom_filter = BloomBuilder(10).build([b"key1", b"key2"])
assert may_contain(bloom_filter, b"key1")
```

### Finding a byte

`linear_find` and `simd_find` return the first index of a value, or `None`.
`simd_find` scans in 32-byte blocks. `binary_find` expects a sorted sequence.

```python
from structkit.find import binary_find, linear_find

data = bytes(range(256))
assert linear_find(data, 128) == 128
assert binary_find(data, 128) == 128
```

### LRU cache

Each entry carries a charge. When the total charge goes above the capacity,
the least recently used entries are evicted. `insert` returns the value it
replaced. `get` and `erase` return `None` for a missing key. A cache with
capacity 0 stores nothing. `ShardedLruCache(shards, per_cap)` spreads keys over
several caches by `hash(key)`.

```python
from structkit.lru import LruCache

cache = LruCache(2)
cache.insert("a", 1, 1)
cache.insert("b", 2, 1)
cache.insert("c", 3, 1)      # evicts "a"
assert cache.get("a") is None
assert cache.total_charge() == 2
```

### Versions and snapshots

`Versions(begin_seq)` keeps pushed items in order. Each `push` advances
`current_seq()`. `pop_deleted_versions()` removes versions from the front of the
queue for as long as the queue holds the only reference to them. Push distinct
objects.

`SnapshotManager(value)` has `read()` and `update(value)`, and both are guarded by
a lock.

### Skip list

`SkipList.insert` raises `ValueError` for a key that is already present.
Iterating a `SkipList` yields its keys in order. An `Iter` cursor supports
`seek_to_first`, `seek_to_last`, `seek(target)`, `peek`, `next`, `prev` and
`is_valid`. `mem_usage()` reports the bytes that the allocator has recorded for
nodes.

```python
from structkit.skiplist import DefaultAllocator, Iter, SkipList

skiplist = SkipList(DefaultAllocator())
for i in range(10):
    skiplist.insert(i)

it = Iter(skiplist)
assert it.seek(5) == 5
assert list(skiplist) == list(range(10))
```

### Stack

```python
from structkit.stack import TreiberStack

stack = TreiberStack()
stack.push(1)
stack.push(2)
assert stack.pop() == 2
```

`pop()` returns `None` when the stack is empty.

### Optimistic locks

`OptLock.read()` returns a guard that records the version. Call its
`check_version()` after reading `guard.value`: it raises `VersionMismatch` if a
writer got in between. `OptLock.write()` returns a guard with a settable `.value`.
Call `release()` on it or use it as a context manager. When the lock cannot be
taken, `read()` and `write()` raise `Locked`, `Obsoleted` or `VersionMismatch`,
all subclasses of `OptLockError`.

```python
from structkit.optlock import OptLock

lock = OptLock(0)
with lock.write() as guard:
    guard.value += 1
reader = lock.read()
assert reader.value == 1
reader.check_version()
```

`RestartLock` waits while a writer holds it and raises `Restart` on change. It
offers `read_lock_or_restart()`, `write_lock_or_restart()`,
`ReadGuard.check_or_restart()`, `ReadGuard.upgrade_to_write_lock_or_restart()`,
`WriteGuard.write_unlock()` and `WriteGuard.write_unlock_obsolete()`.

### Worker

`MiniWorker` reads directly from its map. `put` and `delete` are applied by a
writer thread, and the call waits until the change is done. After `close()`,
every call raises `WorkerClosedError`. The worker is also a context manager.

```python
from structkit.worker import MiniWorker

with MiniWorker() as worker:
    worker.put(b"hello", b"world")
    assert worker.get(b"hello") == b"world"
```

### Adaptive radix tree

```python
from structkit.art import Art

tree = Art()
tree.insert(b"hello", b"world")
assert tree.get(b"hello") == b"world"
assert len(tree) == 1
```

`Art.insert` raises `ValueError` in three cases:

- the key is empty;
- the key is already present;
- the key is a prefix of a stored key, or a stored key is a prefix of it.

## Demo commands

Each command runs a short demonstration:

```
structkit-versions [--count N]
structkit-snapshot [--reads N] [--updates N] [--interval SECONDS]
structkit-stack [--threads N] [--per-thread N]
structkit-worker [--key KEY] [--value VALUE]
```

## What it does not do

- Everything lives in memory. Nothing is saved to disk.
- `Art` and `SkipList` have no deletion, and `Art` cannot replace a value once it is stored.
- The filters from `BloomBuilder` are plain `bytes`. Storing them is up to you.