"""
Token Bucket Rate Limiter
Keeps the TDX client under the service's request budget
"""

import time
from typing import Callable, Optional

import structlog

logger = structlog.get_logger()


class TokenBucket:
    """
    Fixed-capacity token bucket that refills all at once.

    - Starts empty, so the first consume() triggers the initial refill
    - Every request takes one token
    - Once `window_seconds` have passed since the last refill, tokens jump
      back to `capacity` (never a partial refill)
    """

    POLL_INTERVAL = 0.5

    def __init__(
        self,
        capacity: int = 50,
        window_seconds: float = 60.0,
        poll_interval: float = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        on_refill_check: Optional[Callable[[], None]] = None,
    ):
        """
        Args:
            capacity: Tokens available per window
            window_seconds: Time between refills
            poll_interval: Sleep between refill checks while empty
            clock: Monotonic time source
            sleep: Blocking sleep function
            on_refill_check: Hook called on every refill check
        """
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self.window_seconds = window_seconds
        self.poll_interval = self.POLL_INTERVAL if poll_interval is None else poll_interval
        self.tokens = 0
        self.last_refill_at: Optional[float] = None
        self.on_refill_check = on_refill_check
        self._clock = clock
        self._sleep = sleep

    def refill_if_due(self) -> bool:
        """Refill to capacity if no refill happened yet or the window has elapsed"""
        if self.on_refill_check is not None:
            self.on_refill_check()

        now = self._clock()
        if self.last_refill_at is None or now - self.last_refill_at >= self.window_seconds:
            self.tokens = self.capacity
            self.last_refill_at = now
            logger.debug("Refilled API tokens", tokens=self.tokens)
            return True
        return False

    def consume(self) -> None:
        """Take one token, blocking until a refill when the bucket is empty"""
        self.refill_if_due()
        if self.tokens < 1:
            logger.info("API tokens exhausted, waiting for refill",
                        wait=round(self.seconds_until_refill(), 1))
        while self.tokens < 1:
            self._sleep(self.poll_interval)
            self.refill_if_due()
        self.tokens -= 1

    def seconds_until_refill(self) -> float:
        """Seconds left in the current window (0 if a refill is due)"""
        if self.last_refill_at is None:
            return 0.0
        remaining = self.window_seconds - (self._clock() - self.last_refill_at)
        return max(remaining, 0.0)
