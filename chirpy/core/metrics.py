"""Fileserver hit counter shown on the admin metrics page."""
from __future__ import annotations

import threading


class HitCounter:
    def __init__(self) -> None:
        self._hits = 0
        self._lock = threading.Lock()

    def increment(self) -> None:
        with self._lock:
            self._hits += 1

    def reset(self) -> None:
        with self._lock:
            self._hits = 0

    @property
    def value(self) -> int:
        with self._lock:
            return self._hits
