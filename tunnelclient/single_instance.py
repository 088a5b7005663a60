"""Detection of another running instance through a named lock file."""

from __future__ import annotations

import re
import tempfile
import time
from pathlib import Path

from filelock import FileLock, Timeout

_ATTEMPTS = 4
_RETRY_STEP_SECONDS = 0.1


class SingleInstance:
    """Holds a named, process-wide lock for as long as the object is open.

    Acquisition is retried a few times with growing delays, because the
    previous instance may still be shutting down after a self-upgrade.
    """

    def __init__(self, name: str, lock_dir: str | Path | None = None) -> None:
        directory = Path(lock_dir) if lock_dir is not None else Path(tempfile.gettempdir())
        directory.mkdir(parents=True, exist_ok=True)
        safe_name = re.sub(r"[^A-Za-z0-9._-]", "_", name) or "instance"
        self.name = name
        self.lock_path = directory / f"{safe_name}.lock"
        self._lock: FileLock | None = FileLock(str(self.lock_path))
        self._another_running = True

        for attempt in range(_ATTEMPTS):
            time.sleep(attempt * _RETRY_STEP_SECONDS)
            try:
                self._lock.acquire(timeout=0)
            except Timeout:
                continue
            self._another_running = False
            break

    def is_another_instance_running(self) -> bool:
        """True if the lock was already held by another instance."""
        return self._another_running

    def close(self) -> None:
        """Release the lock if this instance holds it."""
        if self._lock is None:
            return
        if not self._another_running and self._lock.is_locked:
            self._lock.release()
        self._lock = None

    def __enter__(self) -> "SingleInstance":
        return self

    def __exit__(self, *args) -> None:
        self.close()