"""Bloom filters serialised as byte strings, with the probe count in the last byte."""

from __future__ import annotations

import struct
from collections.abc import Iterable, Iterator

_MASK = 0xFFFFFFFF
_M = 0xC6A4A793
_SEED = 0xC6A4A793
_MAX_PROBES = 30
_MIN_BITS = 64


def _as_bytes(data: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def bloom_hash(data: bytes | bytearray | memoryview | str) -> int:
    """Return the 32-bit hash used to place a key in a filter."""
    buf = _as_bytes(data)
    size = len(buf)
    h = (_SEED ^ (_M * size)) & _MASK

    whole = size - size % 4
    for (word,) in struct.iter_unpack("<I", buf[:whole]):
        h = ((h + word) * _M) & _MASK
        h ^= h >> 16

    tail = buf[whole:]
    if len(tail) >= 3:
        h = (h + (tail[2] << 16)) & _MASK
    if len(tail) >= 2:
        h = (h + (tail[1] << 8)) & _MASK
    if tail:
        h = ((h + tail[0]) * _M) & _MASK
        h ^= h >> 24
    return h


def _bit_positions(key, bits: int, probes: int) -> Iterator[int]:
    h = bloom_hash(key)
    delta = ((h >> 17) | (h << 15)) & _MASK
    for _ in range(probes):
        yield h % bits
        h = (h + delta) & _MASK


class BloomBuilder:
    """Builds filters that use a fixed number of bits per key."""

    __slots__ = ("bits_per_key", "k_num")

    def __init__(self, bits_per_key: int) -> None:
        self.bits_per_key = bits_per_key
        # ln(2) * (m / n) probes, kept within [1, 30].
        self.k_num = min(max(int(bits_per_key * 0.69), 1), _MAX_PROBES)

    def __repr__(self) -> str:
        return f"BloomBuilder(bits_per_key={self.bits_per_key}, k_num={self.k_num})"

    def build(self, keys: Iterable) -> bytes:
        """Return a filter holding every key in ``keys``."""
        keys = list(keys)
        bits = max(len(keys) * self.bits_per_key, _MIN_BITS)
        size = (bits + 7) // 8
        bits = size * 8

        bloom_filter = bytearray(size + 1)
        bloom_filter[size] = self.k_num
        for key in keys:
            for pos in _bit_positions(key, bits, self.k_num):
                bloom_filter[pos // 8] |= 1 << (pos % 8)
        return bytes(bloom_filter)


def may_contain(bloom_filter: bytes | bytearray, key) -> bool:
    """Return False if ``key`` is certainly absent from ``bloom_filter``."""
    if len(bloom_filter) < 1:
        return False

    probes = bloom_filter[-1]
    if probes > _MAX_PROBES:
        # Reserved for other encodings: treat as a match.
        return True

    bits = (len(bloom_filter) - 1) * 8
    return all(
        bloom_filter[pos // 8] & (1 << (pos % 8))
        for pos in _bit_positions(key, bits, probes)
    )