"""Shared helpers for the JSON-file repositories.

Each repository keeps one JSON array in one file.  Writes go through a
uniquely named temporary file and ``os.replace`` so readers never see a
half-written file.  Read-modify-write cycles hold a ``StoreLock``: a
thread lock shared by every repository in the process plus a
``<file>.lock`` file lock shared with every other process using the
same data directory.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path

from filelock import FileLock

_locks: dict[Path, StoreLock] = {}
_locks_guard = threading.Lock()


class StoreLock:
    """Reentrant lock over one JSON file, across threads and processes."""

    def __init__(self, file_path: Path) -> None:
        self._thread_lock = threading.RLock()
        self._file_lock = FileLock(str(file_path) + ".lock")

    def __enter__(self) -> StoreLock:
        self._thread_lock.acquire()
        try:
            self._file_lock.acquire()
        except BaseException:
            self._thread_lock.release()
            raise
        return self

    def __exit__(self, *exc_info) -> None:
        try:
            self._file_lock.release()
        finally:
            self._thread_lock.release()


def lock_for(file_path: Path) -> StoreLock:
    key = file_path.resolve()
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = StoreLock(key)
        return lock


def ensure_file(file_path: Path, lock: StoreLock) -> None:
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with lock:
        if not file_path.exists():
            persist_raw(file_path, [])


def load_raw(file_path: Path) -> list[dict]:
    return json.loads(file_path.read_text(encoding="utf-8"))


def persist_raw(file_path: Path, records: list[dict]) -> None:
    with tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=file_path.parent,
        prefix=file_path.name + ".",
        suffix=".tmp",
        delete=False,
    ) as tmp:
        tmp.write(json.dumps(records, indent=2) + "\n")
    try:
        os.replace(tmp.name, file_path)
    except OSError:
        os.unlink(tmp.name)
        raise
