"""Thread-safe token rate limiter for API calls."""

from __future__ import annotations

import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable


@dataclass
class RateLimiter:
    """
    Token-based rate limiter over a sliding one-minute window.

    Each acquisition is remembered with its timestamp; once the tokens spent
    in the last ``window`` seconds would exceed the budget, ``acquire`` sleeps
    until enough of them have aged out.
    """

    tokens_per_minute: int = 180_000
    window: float = 60.0
    clock: Callable[[], float] = time.monotonic
    sleep: Callable[[float], None] = time.sleep
    _spent: deque = field(default_factory=deque, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)

    def _expire(self, now: float) -> None:
        while self._spent and now - self._spent[0][0] >= self.window:
            self._spent.popleft()

    def _used(self) -> int:
        return sum(tokens for _, tokens in self._spent)

    def acquire(self, tokens: int) -> float:
        """
        Acquire tokens, blocking if the rate limit would be exceeded.

        A request larger than the whole budget waits for an empty window and
        then goes through alone.

        Args:
            tokens: Number of tokens to acquire.

        Returns:
            Seconds spent waiting.
        """
        waited = 0.0
        with self._lock:
            now = self.clock()
            self._expire(now)
            while self._spent and self._used() + tokens > self.tokens_per_minute:
                delay = max(0.0, self.window - (now - self._spent[0][0]))
                self.sleep(delay)
                waited += delay
                now = self.clock()
                self._expire(now)
            self._spent.append((now, tokens))
        return waited

    @property
    def tokens_remaining(self) -> int:
        """Get remaining tokens in current window."""
        with self._lock:
            self._expire(self.clock())
            return max(0, self.tokens_per_minute - self._used())
