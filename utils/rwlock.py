"""Reader/writer lock used to guard the credential document"""

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator


class ReadWriteLock:
    """Readers share the lock, a writer excludes readers and other writers.

    Writers are preferred: once a writer is waiting, new readers block until it
    has finished, so a steady stream of reads cannot starve a save.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self):
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self):
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self):
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self):
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_lock(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_lock(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


# One lock per credential document, shared by every store in the process
_LOCKS_LOCK = threading.Lock()
_DOCUMENT_LOCKS: Dict[Path, ReadWriteLock] = {}


def get_document_lock(path: Path) -> ReadWriteLock:
    """Get the process-wide reader/writer lock for a document path

    Args:
        path: Path of the guarded file

    Returns:
        The lock shared by all users of that path
    """
    key = Path(path).expanduser().resolve()
    with _LOCKS_LOCK:
        lock = _DOCUMENT_LOCKS.get(key)
        if lock is None:
            lock = ReadWriteLock()
            _DOCUMENT_LOCKS[key] = lock
        return lock
