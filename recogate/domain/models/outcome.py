"""Attempt outcomes: the tagged union the gateway's retry loop branches on.

Exceptions never cross the retry loop; each attempt is folded into exactly one
of `Success`, `RetryableFailure` or `FatalFailure`.
"""

from dataclasses import dataclass
from typing import Optional, Union

from recogate.domain.models.recommendation import RecommendationResult


@dataclass(frozen=True)
class Success:
    result: RecommendationResult


@dataclass(frozen=True)
class _Failure:
    cause: BaseException
    status_code: Optional[int] = None
    body: Optional[str] = None

    @property
    def description(self) -> str:
        if self.status_code is not None:
            return f"HTTP {self.status_code} - {self.body or '<empty body>'}"
        return f"{type(self.cause).__name__}: {self.cause}"


@dataclass(frozen=True)
class RetryableFailure(_Failure):
    """Transient failure: connectivity, timeouts, 5xx or 429."""


@dataclass(frozen=True)
class FatalFailure(_Failure):
    """Failure that will not go away on retry: 4xx or a corrupt response."""


AttemptOutcome = Union[Success, RetryableFailure, FatalFailure]
