"""Client-side request rate limiting.

The remote API allows 20 requests per second per token; exceeding it yields
``429`` responses.  A single :class:`RateLimiter` is shared by every request of
a run (variables and workspace discovery alike).
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)

DEFAULT_RATE = 20
DEFAULT_PER = 1.0

# Absorbs float drift after sleeping exactly ``retry_after``.
_EPSILON = 1e-9


class RateLimiter:
    """Token bucket allowing *rate* operations per *per* seconds.

    The bucket starts full and refills continuously.  ``clock`` and ``sleep``
    are injectable so tests can drive time deterministically.
    """

    def __init__(
        self,
        rate: int = DEFAULT_RATE,
        per: float = DEFAULT_PER,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if rate <= 0:
            raise ValueError(f"rate must be positive, got {rate}")
        if per <= 0:
            raise ValueError(f"per must be positive, got {per}")
        self._capacity = float(rate)
        self._fill_rate = rate / per
        self._clock = clock
        self._sleep = sleep
        self._tokens = self._capacity
        self._last = clock()
        self._lock = threading.Lock()

    @classmethod
    def unlimited(cls) -> RateLimiter:
        """A limiter that never refuses (useful for tests and local mocks)."""
        return _Unlimited()

    @property
    def rate(self) -> float:
        """Sustained rate in operations per second."""
        return self._fill_rate

    def _refill(self, now: float) -> None:
        elapsed = max(0.0, now - self._last)
        self._tokens = min(self._capacity, self._tokens + elapsed * self._fill_rate)
        self._last = now

    def acquire(self) -> tuple[bool, float]:
        """Try to take one token without blocking.

        Returns:
            ``(True, 0.0)`` if a token was consumed, otherwise ``(False, retry_after)``
            where *retry_after* is the minimum wait in seconds before one is available.
        """
        with self._lock:
            self._refill(self._clock())
            if self._tokens + _EPSILON >= 1.0:
                self._tokens = max(0.0, self._tokens - 1.0)
                return True, 0.0
            return False, (1.0 - self._tokens) / self._fill_rate

    def wait(self) -> int:
        """Block until a token is available and consume it.

        A refused acquisition only delays the caller; it is never an error.
        Returns the number of backoff suspensions that were needed.
        """
        backoffs = 0
        while True:
            ok, retry_after = self.acquire()
            if ok:
                return backoffs
            backoffs += 1
            logger.debug("Rate limit reached, backing off %.3fs", retry_after)
            self._sleep(retry_after)


class _Unlimited(RateLimiter):
    def __init__(self) -> None:
        super().__init__(rate=1, per=1.0)

    @property
    def rate(self) -> float:
        return math.inf

    def acquire(self) -> tuple[bool, float]:
        return True, 0.0
