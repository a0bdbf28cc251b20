from __future__ import annotations

import time

from app.services.olt.exceptions import PollTimeout


class Deadline:
    """Absolute time budget for one request."""

    def __init__(self, seconds: float, clock=time.monotonic):
        self._clock = clock
        self.seconds = seconds
        self._expires_at = clock() + seconds

    def remaining(self) -> float:
        return max(self._expires_at - self._clock(), 0.0)

    @property
    def expired(self) -> bool:
        return self._clock() >= self._expires_at

    def check(self, operation: str = "poll") -> None:
        if self.expired:
            raise PollTimeout(f"request deadline of {self.seconds}s expired during {operation}")
