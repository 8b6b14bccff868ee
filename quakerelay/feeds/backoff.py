"""Exponential reconnect backoff."""

from __future__ import annotations


class ReconnectBackoff:
    """Doubling delay from *base_secs*, capped at *cap_secs*.

    Usage::

        backoff = ReconnectBackoff(5.0, 30.0)
        backoff.next_delay()  # 5.0
        backoff.next_delay()  # 10.0
        backoff.reset()
    """

    def __init__(self, base_secs: float, cap_secs: float) -> None:
        if base_secs <= 0 or cap_secs < base_secs:
            raise ValueError("require 0 < base_secs <= cap_secs")
        self._base = base_secs
        self._cap = cap_secs
        self._attempts = 0

    @property
    def attempts(self) -> int:
        return self._attempts

    def delay_for(self, attempt: int) -> float:
        # Exponent clamped so large attempt counts cannot overflow.
        return min(self._base * (2 ** min(attempt, 32)), self._cap)

    def next_delay(self) -> float:
        """Return the delay for the current attempt and advance the counter."""
        delay = self.delay_for(self._attempts)
        self._attempts += 1
        return delay

    def reset(self) -> None:
        self._attempts = 0
