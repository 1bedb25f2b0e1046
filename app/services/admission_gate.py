from __future__ import annotations

import threading


class AdmissionGate:
    """Counting gate capping how many callers run a section at once."""

    def __init__(self, limit: int) -> None:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        self.limit = limit
        self._semaphore = threading.Semaphore(limit)
        self._lock = threading.Lock()
        self.in_flight = 0
        self.peak_in_flight = 0

    def acquire(self) -> None:
        self._semaphore.acquire()
        with self._lock:
            self.in_flight += 1
            self.peak_in_flight = max(self.peak_in_flight, self.in_flight)

    def release(self) -> None:
        with self._lock:
            if self.in_flight == 0:
                raise RuntimeError("release without acquire")
            self.in_flight -= 1
        self._semaphore.release()

    def __enter__(self) -> "AdmissionGate":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
