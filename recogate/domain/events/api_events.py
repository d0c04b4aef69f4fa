"""Domain Events related to recommendation API calls and resilience.

Emitted by the gateway for every attempt, retry and fallback decision so that
callers can observe what happened without it leaking into return values.
"""

from dataclasses import dataclass, field
import time
from typing import Optional


@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass


@dataclass
class FetchInitiated(DomainEvent):
    """Event triggered when an attempt is about to be sent."""
    endpoint: str
    subject_id: str
    attempt_number: int
    timestamp: float = field(default_factory=time.time)


@dataclass
class FetchSucceeded(DomainEvent):
    """Event triggered when an attempt returns a parsed result."""
    endpoint: str
    attempt_number: int
    latency_ms: float
    result_count: int
    timestamp: float = field(default_factory=time.time)


@dataclass
class AttemptFailed(DomainEvent):
    """Event triggered when a single attempt is classified as a failure."""
    endpoint: str
    attempt_number: int
    retryable: bool
    error_type: str
    error_message: str
    status_code: Optional[int] = None
    timestamp: float = field(default_factory=time.time)


@dataclass
class RetryScheduled(DomainEvent):
    """Event triggered when a retry is scheduled for a failed attempt."""
    endpoint: str
    attempt_number: int  # The attempt that is about to be made
    delay_seconds: float
    timestamp: float = field(default_factory=time.time)


@dataclass
class FallbackReturned(DomainEvent):
    """Event triggered when the gateway gives up and returns an empty result."""
    endpoint: str
    reason: str  # 'retries_exhausted', 'fatal_failure' or 'deadline_exceeded'
    attempts: int
    error_message: Optional[str] = None
    timestamp: float = field(default_factory=time.time)
