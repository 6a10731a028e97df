import threading

import pytest

from structkit.optlock import (
    Locked,
    Obsoleted,
    OptLock,
    OptLockError,
    Restart,
    RestartLock,
    VersionMismatch,
)

ONE_LOOP = 2000
THREADS = 10


def test_multi_threads():
    lock = OptLock(0)

    def work():
        for _ in range(ONE_LOOP):
            while True:
                try:
                    guard = lock.write()
                except OptLockError:
                    continue
                with guard:
                    guard.value += 1
                break

    threads = [threading.Thread(target=work) for _ in range(THREADS)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    read_guard = lock.read()
    assert read_guard.value == ONE_LOOP * THREADS
    read_guard.check_version()
    assert lock.into_inner() == ONE_LOOP * THREADS


def test_wait_release_write_lock():
    lock = OptLock(0)
    w = lock.write()
    with pytest.raises(Locked):
        lock.read()
    w.release()

    r = lock.read()
    assert r.value == 0


def test_read_guard_sees_writer_change():
    lock = OptLock(1)
    r = lock.read()
    with lock.write() as w:
        w.value = 5
    with pytest.raises(VersionMismatch):
        r.check_version()
    assert lock.read().value == 5


def test_read_guard_check_while_locked():
    lock = OptLock("a")
    r = lock.read()
    w = lock.write()
    with pytest.raises(Locked):
        r.check_version()
    w.release()


def test_second_writer_is_refused():
    lock = OptLock(0)
    with lock.write():
        with pytest.raises(Locked):
            lock.write()
    with lock.write() as w:
        w.value = 3
    assert lock.into_inner() == 3


def test_obsolete_lock_refuses_access():
    lock = OptLock([1, 2])
    lock.mark_obsolete()
    with pytest.raises(Obsoleted):
        lock.read()
    with pytest.raises(Obsoleted):
        lock.write()
    assert lock.into_inner() == [1, 2]


def test_released_write_guard_cannot_be_used():
    lock = OptLock(0)
    w = lock.write()
    w.release()
    w.release()
    with pytest.raises(RuntimeError):
        w.value = 1
    assert lock.read().value == 0


def test_restart_lock_write_and_read():
    lock = RestartLock(10)
    guard = lock.write_lock_or_restart()
    guard.value = 11
    guard.write_unlock()
    r = lock.read_lock_or_restart()
    assert r.value == 11
    r.check_or_restart()


def test_restart_lock_reader_restarts_after_write():
    lock = RestartLock(0)
    r = lock.read_lock_or_restart()
    old_version = r.version
    with lock.write_lock_or_restart() as w:
        w.value = 1
    with pytest.raises(Restart):
        r.check_or_restart()
    with pytest.raises(Restart):
        r.upgrade_to_write_lock_or_restart()
    fresh = lock.read_lock_or_restart()
    assert fresh.version > old_version
    fresh.read_unlock_or_restart(fresh.version)
    with pytest.raises(Restart):
        fresh.read_unlock_or_restart(old_version)


def test_restart_lock_upgrade():
    lock = RestartLock("x")
    r = lock.read_lock_or_restart()
    w = r.upgrade_to_write_lock_or_restart()
    w.value = "y"
    w.write_unlock()
    assert lock.value == "y"


def test_restart_lock_obsolete():
    lock = RestartLock(0)
    w = lock.write_lock_or_restart()
    w.write_unlock_obsolete()
    with pytest.raises(Restart):
        lock.read_lock_or_restart()
    with pytest.raises(Restart):
        lock.write_lock_or_restart()


def test_restart_lock_concurrent_increments():
    lock = RestartLock(0)

    def work():
        for _ in range(500):
            with lock.write_lock_or_restart() as w:
                w.value += 1

    threads = [threading.Thread(target=work) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert lock.read_lock_or_restart().value == 2000