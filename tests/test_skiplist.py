import random

import pytest

from structkit.skiplist import DefaultAllocator, Iter, SkipList


def _filled(n):
    skl = SkipList(DefaultAllocator())
    for i in range(n):
        skl.insert(i)
    return skl


def test_insert_some():
    skl = _filled(1000)
    for i in range(1000):
        assert skl.contains(i)
    assert not skl.contains(1000)
    assert not skl.contains(-1)


def test_iterator():
    skl = _filled(1000)
    it = Iter(skl)
    it.seek_to_last()
    it.seek_to_first()
    for i in range(1000):
        assert it.peek() == i
        it.next()
    assert not it.is_valid()

    for i in range(1000):
        it.seek(i)
        assert it.peek() == i


def test_duplicate_insert_raises():
    skl = SkipList()
    skl.insert(5)
    with pytest.raises(ValueError):
        skl.insert(5)


def test_iteration_is_sorted():
    keys = random.Random(7).sample(range(10_000), 500)
    skl = SkipList()
    for k in keys:
        skl.insert(k)
    assert list(skl) == sorted(keys)


def test_empty_list_cursor():
    skl = SkipList()
    it = Iter(skl)
    assert it.peek() is None
    assert it.seek_to_first() is None
    assert it.seek_to_last() is None
    assert not it.is_valid()
    assert it.next() is None
    assert it.prev() is None
    assert list(skl) == []


def test_seek_between_and_past_keys():
    skl = SkipList()
    for k in (10, 20, 30):
        skl.insert(k)
    it = Iter(skl)
    assert it.seek(15) == 20
    assert it.seek(0) == 10
    assert it.seek(31) is None
    assert not it.is_valid()


def test_seek_to_last_and_prev():
    skl = _filled(50)
    it = Iter(skl)
    assert it.seek_to_last() == 49
    seen = []
    while it.is_valid():
        seen.append(it.prev())
    assert seen == list(range(49, -1, -1))


def test_next_returns_current_then_advances():
    skl = _filled(3)
    it = Iter(skl)
    it.seek_to_first()
    assert it.next() == 0
    assert it.peek() == 1


def test_mem_usage_grows_with_inserts():
    allocator = DefaultAllocator()
    skl = SkipList(allocator)
    before = skl.mem_usage()
    assert before > 0
    skl.insert("a")
    after_one = skl.mem_usage()
    assert after_one > before
    skl.insert("b")
    assert skl.mem_usage() > after_one
    assert allocator.mem_usage() == skl.mem_usage()


def test_allocator_sums_sizes():
    allocator = DefaultAllocator()
    assert allocator.allocate(10) == 0
    assert allocator.allocate(6) == 1
    assert allocator.mem_usage() == 16


def test_allocator_rejects_negative_size():
    with pytest.raises(ValueError):
        DefaultAllocator().allocate(-1)


def test_string_keys():
    skl = SkipList()
    for word in ("pear", "apple", "fig"):
        skl.insert(word)
    assert list(skl) == ["apple", "fig", "pear"]
    assert skl.contains("fig")
    assert not skl.contains("kiwi")