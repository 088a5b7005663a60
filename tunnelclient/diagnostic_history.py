"""Timestamped diagnostic entries collected for feedback reports."""

from __future__ import annotations

import copy
import json
import logging
import threading
from datetime import datetime, timezone
from typing import Any

_log = logging.getLogger(__name__)

TIMESTAMP_KEY = "timestamp!!timestamp"


def _iso8601_now() -> str:
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


class DiagnosticHistory:
    """A thread-safe list of diagnostic entries."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: list[dict[str, Any]] = []

    def add(self, message: str, data: Any) -> dict[str, Any]:
        """Record ``data`` under ``message`` and return the stored entry."""
        entry = {
            TIMESTAMP_KEY: _iso8601_now(),
            "msg": message,
            "data": copy.deepcopy(data),
        }
        _log.debug("%s", json.dumps(entry, separators=(",", ":")))
        with self._lock:
            self._entries.append(entry)
        return copy.deepcopy(entry)

    def add_json(self, message: str, json_string: str | None) -> dict[str, Any] | None:
        """Record a stringified JSON value; None records a null value.

        Returns the stored entry, or None if the string is not valid JSON.
        """
        if json_string is None:
            return self.add(message, None)
        try:
            value = json.loads(json_string)
        except json.JSONDecodeError:
            return None
        return self.add(message, value)

    def snapshot(self) -> list[dict[str, Any]]:
        """Return an independent copy of all recorded entries."""
        with self._lock:
            return copy.deepcopy(self._entries)


_default_history = DiagnosticHistory()


def add_diagnostic_info(message: str, data: Any) -> dict[str, Any]:
    """Record an entry in the process-wide diagnostic history."""
    return _default_history.add(message, data)


def add_diagnostic_info_json(message: str, json_string: str | None) -> dict[str, Any] | None:
    """Record a stringified JSON value in the process-wide diagnostic history."""
    return _default_history.add_json(message, json_string)


def get_diagnostic_history() -> list[dict[str, Any]]:
    """Return a copy of the process-wide diagnostic history."""
    return _default_history.snapshot()