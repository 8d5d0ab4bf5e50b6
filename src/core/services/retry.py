"""Retry bookkeeping for remote model calls.

The gateway does not loop ad hoc: it drives a `RetryState` that knows how many
attempts were made, what the last failure was and how long to wait before the
next attempt. Keeping this separate from the timer lets tests check the
schedule without sleeping.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RetryState:
    """Attempt counter with exponential backoff (`base ** attempt` seconds).

    With the defaults (3 attempts, base 2.0) a persistently failing call waits
    2s after the first failure and 4s after the second, then gives up.
    """

    max_attempts: int = 3
    backoff_base: float = 2.0
    attempt: int = 0
    last_error: BaseException | None = None

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

    @property
    def exhausted(self) -> bool:
        return self.attempt >= self.max_attempts

    @property
    def next_delay(self) -> float | None:
        """Wait before the next attempt, or None when the budget is spent."""

        if self.attempt == 0 or self.exhausted:
            return None
        return self.backoff_base ** self.attempt

    def record_failure(self, error: BaseException) -> float | None:
        """Count a failed attempt and return the wait before retrying."""

        self.attempt += 1
        self.last_error = error
        return self.next_delay
