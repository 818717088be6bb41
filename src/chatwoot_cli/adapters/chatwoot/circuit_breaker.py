from __future__ import annotations

import threading
import time
from collections.abc import Callable

DEFAULT_THRESHOLD = 5
DEFAULT_RESET_SECONDS = 30.0


class CircuitBreaker:
    """
    Tracks consecutive server failures across requests of one client.

    closed -> open after `threshold` failures; once `reset_seconds` have passed since the last
    failure the breaker turns half-open and lets probe requests through. A failed probe re-opens
    it (restarting the timer), a successful one closes it.
    """

    def __init__(
        self,
        *,
        threshold: int = DEFAULT_THRESHOLD,
        reset_seconds: float = DEFAULT_RESET_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.threshold = threshold
        self.reset_seconds = reset_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._failures = 0
        self._last_failure: float | None = None
        self._open = False
        self._half_open = False

    @property
    def failures(self) -> int:
        with self._lock:
            return self._failures

    def record_success(self) -> None:
        with self._lock:
            self._failures = 0
            self._open = False
            self._half_open = False

    def record_failure(self) -> bool:
        """Count a failure; returns True when this failure opened (or re-opened) the circuit."""
        with self._lock:
            self._failures += 1
            self._last_failure = self._clock()

            if self._half_open:
                self._half_open = False
                return True

            threshold = self.threshold if self.threshold > 0 else DEFAULT_THRESHOLD
            if self._failures >= threshold and not self._open:
                self._open = True
                return True
            return False

    def is_open(self) -> bool:
        """True when requests must be rejected without being sent."""
        with self._lock:
            if not self._open or self._half_open:
                return False

            reset_seconds = self.reset_seconds if self.reset_seconds > 0 else DEFAULT_RESET_SECONDS
            last = self._last_failure if self._last_failure is not None else self._clock()
            if self._clock() - last >= reset_seconds:
                self._half_open = True
                return False
            return True

    def reset(self) -> None:
        with self._lock:
            self._failures = 0
            self._open = False
            self._half_open = False
            self._last_failure = None
