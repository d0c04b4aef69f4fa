"""Defines common Value Objects used across different domain contexts.

These objects represent simple values like subject identifiers, API paths
and retry configuration, ensuring consistency and type safety.
"""

from dataclasses import dataclass
from typing import NewType

# === Core Value Objects ===

# Using NewType for semantic clarity, although they are strings at runtime.
SubjectId = NewType("SubjectId", str)        # User or product identifier
Endpoint = NewType("Endpoint", str)          # API path relative to the base URL, e.g. '/recommendations/user'
ResponseBody = NewType("ResponseBody", str)  # Raw (undecoded) response text


@dataclass(frozen=True)
class RetryPolicy:
    """Value Object representing retry backoff configuration.

    Created once at startup and shared read-only by every in-flight call.

    Attributes:
        max_attempts: Total number of attempts, including the first one.
        initial_delay: Seconds to wait after the first failed attempt.
        multiplier: Factor applied to the delay after each further failure.
    """

    max_attempts: int = 3
    initial_delay: float = 1.0
    multiplier: float = 2.0

    def __post_init__(self) -> None:
        if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int):
            raise ValueError(f"max_attempts must be an integer, got {self.max_attempts!r}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.initial_delay < 0:
            raise ValueError(f"initial_delay must be >= 0, got {self.initial_delay}")
        if self.multiplier < 1:
            raise ValueError(f"multiplier must be >= 1, got {self.multiplier}")

    def delay_after(self, attempt: int) -> float:
        """Returns the backoff (seconds) to wait after the given failed attempt (1-based)."""
        if attempt < 1:
            raise ValueError(f"attempt numbers start at 1, got {attempt}")
        return self.initial_delay * (self.multiplier ** (attempt - 1))

    def has_attempts_left(self, attempt: int) -> bool:
        return attempt < self.max_attempts
