"""Cooperative cancellation hook for callers blocked on job completion."""

from __future__ import annotations

import threading


class CancellationToken:
    """Thread-safe flag a caller sets to stop waiting for a submitted job.

    Requesting cancellation only ends the wait; the submitted job keeps its
    engine-side state.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancellation_request(self) -> None:
        self._event.set()

    def cancellation_is_requested(self) -> bool:
        return self._event.is_set()

    def cancellation_wait(self, timeout_seconds: float | None = None) -> bool:
        """Block until cancellation is requested or the timeout elapses.

        Returns:
            bool: True when cancellation was requested.
        """

        return self._event.wait(timeout_seconds)
