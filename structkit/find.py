"""Three ways of finding a byte in a byte sequence."""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Sequence

_LANES = 32


def simd_find(arr: bytes | bytearray | Sequence[int], target: int) -> int | None:
    """Return the first index of ``target``, scanning 32-byte blocks at a time."""
    data = bytes(arr)
    for start in range(0, len(data), _LANES):
        offset = data[start : start + _LANES].find(target)
        if offset != -1:
            return start + offset
    return None


def binary_find(arr: Sequence[int], target: int) -> int | None:
    """Return an index of ``target`` in the sorted ``arr``, or None."""
    pos = bisect_left(arr, target)
    if pos < len(arr) and arr[pos] == target:
        return pos
    return None


def linear_find(arr: Sequence[int], target: int) -> int | None:
    """Return the first index of ``target``, or None."""
    return next((i for i, e in enumerate(arr) if e == target), None)