import random

import pytest

from structkit.art import Art


def test_insert_and_get():
    art = Art()
    art.insert(b"hello", b"world")
    assert art.get(b"hello") == b"world"


def test_missing_key_returns_none():
    art = Art()
    assert art.get(b"hello") is None
    art.insert(b"hello", b"world")
    assert art.get(b"help!") is None
    assert art.get(b"hel") is None


def test_len_counts_inserts():
    art = Art()
    assert len(art) == 0
    art.insert(b"abc", b"1")
    art.insert(b"abd", b"2")
    art.insert(b"xyz", b"3")
    assert len(art) == 3


def test_shared_prefix_split():
    art = Art()
    art.insert(b"abc1", b"one")
    art.insert(b"abc2", b"two")
    art.insert(b"ab33", b"three")
    art.insert(b"zzzz", b"four")
    assert art.get(b"abc1") == b"one"
    assert art.get(b"abc2") == b"two"
    assert art.get(b"ab33") == b"three"
    assert art.get(b"zzzz") == b"four"
    assert art.get(b"abc3") is None


def test_long_prefix_split():
    base = b"a" * 20
    art = Art()
    art.insert(base + b"x", b"1")
    art.insert(base + b"y", b"2")
    art.insert(b"a" * 5 + b"z", b"3")
    art.insert(b"a" * 15 + b"q", b"4")
    assert art.get(base + b"x") == b"1"
    assert art.get(base + b"y") == b"2"
    assert art.get(b"a" * 5 + b"z") == b"3"
    assert art.get(b"a" * 15 + b"q") == b"4"
    assert art.get(b"a" * 5) is None
    assert art.get(b"a" * 12 + b"x") is None


def test_nodes_grow_to_full_fanout():
    art = Art()
    for i in range(256):
        art.insert(bytes([i, 7]), bytes([i]))
    assert len(art) == 256
    for i in range(256):
        assert art.get(bytes([i, 7])) == bytes([i])
    assert art.get(bytes([3, 8])) is None


def test_random_keys_match_dict():
    rng = random.Random(1234)
    expected = {}
    while len(expected) < 2000:
        key = bytes(rng.randrange(4) for _ in range(8))
        expected[key] = bytes(rng.randrange(256) for _ in range(4))
    art = Art()
    for key, value in expected.items():
        art.insert(key, value)
    assert len(art) == len(expected)
    for key, value in expected.items():
        assert art.get(key) == value
    for _ in range(200):
        probe = bytes(rng.randrange(4, 8) for _ in range(8))
        assert art.get(probe) is None


def test_duplicate_key_raises():
    art = Art()
    art.insert(b"hello", b"world")
    with pytest.raises(ValueError):
        art.insert(b"hello", b"again")
    assert art.get(b"hello") == b"world"
    assert len(art) == 1


def test_empty_key_raises():
    art = Art()
    with pytest.raises(ValueError):
        art.insert(b"", b"value")
    assert len(art) == 0


def test_prefix_key_raises():
    art = Art()
    art.insert(b"hello", b"world")
    with pytest.raises(ValueError):
        art.insert(b"hell", b"x")
    with pytest.raises(ValueError):
        art.insert(b"hello!", b"x")
    assert art.get(b"hello") == b"world"
    assert len(art) == 1


def test_prefix_of_compressed_path_raises_without_damage():
    art = Art()
    art.insert(b"a" * 20 + b"x", b"1")
    art.insert(b"a" * 20 + b"y", b"2")
    with pytest.raises(ValueError):
        art.insert(b"a" * 8, b"3")
    assert art.get(b"a" * 20 + b"x") == b"1"
    assert art.get(b"a" * 20 + b"y") == b"2"
    assert len(art) == 2