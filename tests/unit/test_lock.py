import os
import threading
import time

import pytest

from rollover.core.errors import LockError
from rollover.lock import RunLock


def _stale_file(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("999999999")
    old = time.time() - 60
    os.utime(path, (old, old))


def test_acquire_and_release(tmp_rollover_dir):
    path = tmp_rollover_dir / "run.lock"
    lock = RunLock(path)

    assert lock.try_acquire(0)
    assert path.read_text() == str(os.getpid())

    lock.release()
    assert path.read_text() == ""


def test_second_instance_is_deferred(tmp_rollover_dir):
    path = tmp_rollover_dir / "run.lock"
    first = RunLock(path)
    second = RunLock(path, poll_seconds=0.01)

    assert first.try_acquire(0)
    started = time.monotonic()
    assert not second.try_acquire(50)
    assert time.monotonic() - started >= 0.05
    assert path.read_text() == str(os.getpid())

    first.release()
    assert second.try_acquire(0)
    second.release()


def test_release_is_idempotent(tmp_rollover_dir):
    lock = RunLock(tmp_rollover_dir / "run.lock")
    lock.release()
    assert lock.try_acquire(0)
    lock.release()
    lock.release()


def test_double_acquire_raises(tmp_rollover_dir):
    lock = RunLock(tmp_rollover_dir / "run.lock")
    assert lock.try_acquire(0)
    with pytest.raises(LockError):
        lock.try_acquire(0)
    lock.release()


def test_leftover_file_from_dead_run_is_reclaimed(tmp_rollover_dir):
    path = tmp_rollover_dir / "run.lock"
    _stale_file(path)

    lock = RunLock(path)
    assert lock.try_acquire(0)
    assert path.read_text() == str(os.getpid())
    lock.release()


def test_held_lock_is_respected_whatever_the_file_says(tmp_rollover_dir):
    path = tmp_rollover_dir / "run.lock"
    first = RunLock(path)
    assert first.try_acquire(0)
    _stale_file(path)

    assert not RunLock(path).try_acquire(0)
    first.release()


def test_racing_reclaims_of_a_stale_file_yield_one_holder(tmp_rollover_dir):
    path = tmp_rollover_dir / "run.lock"
    _stale_file(path)
    locks = {name: RunLock(path) for name in ("a", "b", "c", "d")}
    barrier = threading.Barrier(len(locks))
    acquired = {}

    def contend(name):
        barrier.wait()
        acquired[name] = locks[name].try_acquire(0)

    threads = [threading.Thread(target=contend, args=(name,)) for name in locks]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sum(acquired.values()) == 1
    for lock in locks.values():
        lock.release()
