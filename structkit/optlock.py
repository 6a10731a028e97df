"""Optimistic, version-stamped locks.

The version word packs a counter with two flag bits: bit 1 marks the lock
as held by a writer, bit 0 marks the protected data as obsolete. Readers
never block writers. They record the version they saw and validate it
afterwards.
"""

from __future__ import annotations

import threading
import time
from typing import Any

_OBSOLETE = 0b01
_LOCKED = 0b10


def _is_obsolete(version: int) -> bool:
    return version & _OBSOLETE != 0


def _is_locked(version: int) -> bool:
    return version & _LOCKED != 0


class _VersionWord:
    """An integer with atomic load, compare-and-swap and add."""

    __slots__ = ("_value", "_lock")

    def __init__(self, value: int = 0) -> None:
        self._value = value
        self._lock = threading.Lock()

    def load(self) -> int:
        return self._value

    def compare_exchange(self, expected: int, new: int) -> bool:
        with self._lock:
            if self._value != expected:
                return False
            self._value = new
            return True

    def fetch_add(self, delta: int) -> int:
        with self._lock:
            old = self._value
            self._value = old + delta
            return old

    def fetch_or(self, bits: int) -> int:
        with self._lock:
            old = self._value
            self._value = old | bits
            return old


class OptLockError(Exception):
    """Base class for failures of an optimistic lock operation."""


class VersionMismatch(OptLockError):
    """The version changed since it was read."""


class Locked(OptLockError):
    """A writer holds the lock."""


class Obsoleted(OptLockError):
    """The protected data has been marked obsolete."""


class OptLock:
    """Protects a value with an optimistic version lock."""

    def __init__(self, data: Any) -> None:
        self._data = data
        self._version = _VersionWord()

    def __repr__(self) -> str:
        return f"OptLock(data={self._data!r}, version={self._version.load()})"

    def _check_version(self) -> int:
        version = self._version.load()
        if _is_obsolete(version):
            raise Obsoleted("the data is obsolete")
        if _is_locked(version):
            raise Locked("the lock is held by a writer")
        return version

    def read(self) -> OptReadGuard:
        """Start an optimistic read; validate it later with ``check_version``."""
        return OptReadGuard(self, self._check_version())

    def write(self) -> OptWriteGuard:
        """Take the write lock, or raise if it cannot be taken right now."""
        version = self._check_version()
        if not self._version.compare_exchange(version, version + _LOCKED):
            raise VersionMismatch("the version changed while locking")
        return OptWriteGuard(self)

    def mark_obsolete(self) -> None:
        """Mark the data obsolete; later reads and writes fail."""
        self._version.fetch_or(_OBSOLETE)

    def into_inner(self) -> Any:
        """Return the protected value."""
        return self._data


class OptReadGuard:
    """An optimistic view of the value at a recorded version."""

    __slots__ = ("_lock", "_version")

    def __init__(self, lock: OptLock, version: int) -> None:
        self._lock = lock
        self._version = version

    @property
    def value(self) -> Any:
        return self._lock._data

    def check_version(self) -> None:
        """Raise if the value may have changed since the read started."""
        if self._lock._check_version() != self._version:
            raise VersionMismatch("the version changed during the read")


class OptWriteGuard:
    """Exclusive access to the value; releasing it bumps the version."""

    __slots__ = ("_lock", "_released")

    def __init__(self, lock: OptLock) -> None:
        self._lock = lock
        self._released = False

    def _ensure_held(self) -> None:
        if self._released:
            raise RuntimeError("the write guard has been released")

    @property
    def value(self) -> Any:
        self._ensure_held()
        return self._lock._data

    @value.setter
    def value(self, new: Any) -> None:
        self._ensure_held()
        self._lock._data = new

    def release(self) -> None:
        """Release the lock and advance the version. Safe to call twice."""
        if self._released:
            return
        self._released = True
        self._lock._version.fetch_add(_LOCKED)

    def __enter__(self) -> OptWriteGuard:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


class Restart(Exception):
    """The operation saw a concurrent change and must start again."""


class RestartLock:
    """An optimistic lock whose readers wait out writers and restart on change."""

    def __init__(self, data: Any) -> None:
        self._data = data
        self._version = _VersionWord()

    def __repr__(self) -> str:
        return f"RestartLock(data={self._data!r}, version={self._version.load()})"

    @property
    def value(self) -> Any:
        return self._data

    def read_lock_or_restart(self) -> ReadGuard:
        """Wait until no writer holds the lock and record the version."""
        version = self._version.load()
        while _is_locked(version):
            if _is_obsolete(version):
                raise Restart("the data is obsolete")
            time.sleep(0)
            version = self._version.load()
        if _is_obsolete(version):
            raise Restart("the data is obsolete")
        return ReadGuard(self, version)

    def write_lock_or_restart(self) -> WriteGuard:
        """Take the write lock, retrying while other writers race for it."""
        while True:
            guard = self.read_lock_or_restart()
            try:
                return guard.upgrade_to_write_lock_or_restart()
            except Restart:
                continue


class ReadGuard:
    """A version recorded by a reader of a :class:`RestartLock`."""

    __slots__ = ("_lock", "version")

    def __init__(self, lock: RestartLock, version: int) -> None:
        self._lock = lock
        self.version = version

    @property
    def value(self) -> Any:
        return self._lock._data

    def read_unlock_or_restart(self, version: int) -> None:
        """Raise Restart unless the lock's version still equals ``version``."""
        if self._lock._version.load() != version:
            raise Restart("the version changed")

    def check_or_restart(self) -> None:
        """Raise Restart if the lock changed since this guard was taken."""
        self.read_unlock_or_restart(self.version)

    def upgrade_to_write_lock_or_restart(self) -> WriteGuard:
        """Turn this read into the write lock, or raise Restart."""
        if not self._lock._version.compare_exchange(self.version, self.version + _LOCKED):
            raise Restart("the version changed before upgrading")
        return WriteGuard(self._lock)


class WriteGuard:
    """Exclusive access to the value of a :class:`RestartLock`."""

    __slots__ = ("_lock", "_released")

    def __init__(self, lock: RestartLock) -> None:
        self._lock = lock
        self._released = False

    def _ensure_held(self) -> None:
        if self._released:
            raise RuntimeError("the write guard has been released")

    @property
    def value(self) -> Any:
        self._ensure_held()
        return self._lock._data

    @value.setter
    def value(self, new: Any) -> None:
        self._ensure_held()
        self._lock._data = new

    def write_unlock(self) -> None:
        """Release the lock and advance the version."""
        self._ensure_held()
        self._released = True
        self._lock._version.fetch_add(_LOCKED)

    def write_unlock_obsolete(self) -> None:
        """Release the lock and mark the data obsolete."""
        self._ensure_held()
        self._released = True
        self._lock._version.fetch_add(_LOCKED | _OBSOLETE)

    def __enter__(self) -> WriteGuard:
        return self

    def __exit__(self, *exc_info: object) -> None:
        if not self._released:
            self.write_unlock()