import fcntl
import os
import time
from pathlib import Path
from typing import IO

from . import config
from .core.errors import LockError

POLL_SECONDS = 0.5


class RunLock:
    """Single-instance lock: an exclusive flock on a pid file.

    The kernel drops the flock when its holder exits, so a file left behind by a
    crashed run never blocks the next one. The file is never unlinked.
    """

    def __init__(self, path: Path | None = None, poll_seconds: float = POLL_SECONDS):
        self.path = path if path else config.LOCK_PATH
        self.poll_seconds = poll_seconds
        self.held = False
        self._fd: IO[str] | None = None

    def _try_lock(self) -> bool:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # no truncation before the lock is ours
        fd = open(os.open(self.path, os.O_RDWR | os.O_CREAT, 0o644), "r+")
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            fd.close()
            return False
        fd.seek(0)
        fd.truncate()
        fd.write(str(os.getpid()))
        fd.flush()
        self._fd = fd
        return True

    def try_acquire(self, timeout_ms: int) -> bool:
        if self.held:
            raise LockError(f"lock {self.path} already held by this process")
        deadline = time.monotonic() + timeout_ms / 1000
        while True:
            if self._try_lock():
                self.held = True
                return True
            if time.monotonic() >= deadline:
                return False
            time.sleep(self.poll_seconds)

    def release(self) -> None:
        if not self.held:
            return
        self.held = False
        fd, self._fd = self._fd, None
        if fd is None:
            return
        try:
            fd.seek(0)
            fd.truncate()
            fcntl.flock(fd, fcntl.LOCK_UN)
        finally:
            fd.close()
