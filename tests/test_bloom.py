import pytest

from structkit.bloom import BloomBuilder, bloom_hash, may_contain


def test_empty_should_not_found():
    builder = BloomBuilder(10)
    bloom_filter = builder.build([])

    assert not may_contain(bloom_filter, b"key1")
    assert not may_contain(bloom_filter, b"key2")
    assert not may_contain(bloom_filter, b"empty")


def test_must_contain():
    builder = BloomBuilder(10)
    bloom_filter = builder.build([b"key1", b"key2"])

    assert may_contain(bloom_filter, b"key1")
    assert may_contain(bloom_filter, b"key2")


def test_may_contains():
    builder = BloomBuilder(10)

    mediocre = 0
    good = 0
    for length in [1, 10, 100, 1000, 10000]:
        keys = [str(i).encode() for i in range(length)]
        bloom_filter = builder.build(keys)

        for key in keys:
            assert may_contain(bloom_filter, key), key

        hits = sum(
            1
            for i in range(10000)
            if may_contain(bloom_filter, str(i + 1000000000).encode())
        )
        rate = hits / 10000.0
        assert rate < 0.02, (rate, length)

        if rate > 0.125:
            mediocre += 1
        else:
            good += 1

    assert mediocre * 5 < good


def test_empty_filter_layout():
    builder = BloomBuilder(10)
    bloom_filter = builder.build([])
    assert len(bloom_filter) == 9
    assert bloom_filter[-1] == builder.k_num
    assert bloom_filter[:-1] == bytes(8)


@pytest.mark.parametrize("bits_per_key, expected", [(0, 1), (1, 1), (10, 6), (100, 30)])
def test_probe_count_is_clamped(bits_per_key, expected):
    assert BloomBuilder(bits_per_key).k_num == expected


def test_empty_bytes_is_not_a_filter():
    assert may_contain(b"", b"key1") is False


def test_reserved_probe_count_matches_everything():
    bloom_filter = bytes(8) + bytes([31])
    assert may_contain(bloom_filter, b"anything") is True


def test_hash_is_32_bit_and_deterministic():
    for key in [b"", b"a", b"ab", b"abc", b"abcd", b"abcde", b"hello world"]:
        value = bloom_hash(key)
        assert 0 <= value <= 0xFFFFFFFF
        assert value == bloom_hash(key)


def test_str_and_bytes_hash_alike():
    assert bloom_hash("key1") == bloom_hash(b"key1")
    builder = BloomBuilder(10)
    bloom_filter = builder.build(["key1"])
    assert may_contain(bloom_filter, b"key1")