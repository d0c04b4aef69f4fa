"""Recommendation Gateway: resilient access to the remote recommendation API.

Sends a user- or product-based request through the transport port, classifies
each attempt, retries transient failures with exponential backoff and, once
retries are exhausted or a failure is fatal, falls back to an empty result.

Only precondition violations (`InvalidRequestError`) are raised to callers.
Fatal failures (4xx other than 429, corrupt bodies) are suppressed into an
empty result as well, so "no recommendations" and "the call failed" look the
same from the return value; the logs and diagnostic events tell them apart.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from recogate.core.classification import classify_error, classify_response
from recogate.core.wire import build_payload, endpoint_for
from recogate.domain.errors import InvalidRequestError
from recogate.domain.events.api_events import (
    AttemptFailed,
    DomainEvent,
    FallbackReturned,
    FetchInitiated,
    FetchSucceeded,
    RetryScheduled,
)
from recogate.domain.interfaces.transport import Transport
from recogate.domain.models.common import Endpoint, RetryPolicy
from recogate.domain.models.outcome import AttemptOutcome, FatalFailure, RetryableFailure, Success
from recogate.domain.models.recommendation import (
    DEFAULT_MAX_LIMIT,
    EMPTY_RESULT,
    RecommendationRequest,
    RecommendationResult,
    SubjectKind,
)

logger = logging.getLogger(__name__)

EventListener = Callable[[DomainEvent], None]
SleepFunc = Callable[[float], Awaitable[Any]]

# Fallback reasons reported in FallbackReturned events
REASON_RETRIES_EXHAUSTED = "retries_exhausted"
REASON_FATAL_FAILURE = "fatal_failure"
REASON_DEADLINE_EXCEEDED = "deadline_exceeded"


@dataclass
class _CallState:
    """Per-call bookkeeping. Never shared between calls."""
    endpoint: Endpoint
    attempt: int = 0
    last_error: Optional[str] = None


class RecommendationGateway:
    """Fetches recommendations with bounded retries and an empty-result fallback."""

    def __init__(
        self,
        transport: Transport,
        retry_policy: Optional[RetryPolicy] = None,
        max_limit: int = DEFAULT_MAX_LIMIT,
        event_listener: Optional[EventListener] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        """Initializes the RecommendationGateway.

        Args:
            transport: Transport used to reach the remote API. Must be safe for
                concurrent use.
            retry_policy: Immutable retry configuration (defaults to 3 attempts,
                1s initial backoff, multiplier 2).
            max_limit: Largest `limit` a request may ask for.
            event_listener: Optional callable receiving every diagnostic event.
            sleep: Coroutine function used for the backoff wait.

        Raises:
            ValueError: If max_limit is not a positive integer.
        """
        if isinstance(max_limit, bool) or not isinstance(max_limit, int) or max_limit < 1:
            raise ValueError(f"max_limit must be a positive integer, got {max_limit!r}")

        self.transport = transport
        self.retry_policy = retry_policy or RetryPolicy()
        self.max_limit = max_limit
        self.event_listener = event_listener
        self._sleep = sleep

        logger.info(
            f"RecommendationGateway initialized: max_attempts={self.retry_policy.max_attempts}, "
            f"initial_backoff={self.retry_policy.initial_delay}s, "
            f"multiplier={self.retry_policy.multiplier}, max_limit={self.max_limit}"
        )

    # --- Public API ---

    async def get_user_recommendations(self, user_id: str, limit: int) -> RecommendationResult:
        """Retrieves personalized recommendations for a user."""
        return await self.fetch(RecommendationRequest.for_user(user_id, limit))

    async def get_product_recommendations(self, product_id: str, limit: int) -> RecommendationResult:
        """Retrieves recommendations related to a product."""
        return await self.fetch(RecommendationRequest.for_product(product_id, limit))

    async def fetch(
        self, request: RecommendationRequest, deadline: Optional[float] = None
    ) -> RecommendationResult:
        """Fetches recommendations for a request.

        Args:
            request: The user- or product-based request.
            deadline: Optional total time budget in seconds covering every
                attempt and every backoff wait. When it runs out the in-flight
                attempt is cancelled and the empty fallback is returned.

        Returns:
            The recommendations, or an empty tuple when the service could not
            provide them (retries exhausted, fatal failure, deadline exceeded).

        Raises:
            InvalidRequestError: If the request violates its preconditions. No
                network call is made in that case.
        """
        self._validate(request)
        if deadline is not None and deadline <= 0:
            raise InvalidRequestError(f"deadline must be positive, got {deadline}")

        state = _CallState(endpoint=endpoint_for(request))
        payload = build_payload(request)
        logger.debug(
            f"Fetching {request.kind.value} recommendations for id={request.subject_id}, "
            f"limit={request.limit}"
        )

        if deadline is None:
            return await self._run(request, payload, state, budget_end=None)

        budget_end = asyncio.get_running_loop().time() + deadline
        try:
            return await asyncio.wait_for(
                self._run(request, payload, state, budget_end=budget_end), timeout=deadline
            )
        except asyncio.TimeoutError:
            return self._fallback(state, REASON_DEADLINE_EXCEEDED)

    # --- Retry loop ---

    async def _run(
        self,
        request: RecommendationRequest,
        payload: Dict[str, Any],
        state: _CallState,
        budget_end: Optional[float],
    ) -> RecommendationResult:
        policy = self.retry_policy
        while True:
            state.attempt += 1
            outcome = await self._attempt(request, payload, state)

            if isinstance(outcome, Success):
                return outcome.result

            state.last_error = outcome.description
            self._dispatch(AttemptFailed(
                endpoint=state.endpoint,
                attempt_number=state.attempt,
                retryable=isinstance(outcome, RetryableFailure),
                error_type=type(outcome.cause).__name__,
                error_message=str(outcome.cause),
                status_code=outcome.status_code,
            ))

            if isinstance(outcome, FatalFailure):
                logger.error(
                    f"Non-retryable failure calling {state.endpoint} on attempt "
                    f"{state.attempt}: {outcome.description}"
                )
                return self._fallback(state, REASON_FATAL_FAILURE)

            if not policy.has_attempts_left(state.attempt):
                logger.error(
                    f"Max attempts ({policy.max_attempts}) reached for {state.endpoint}. "
                    f"Last error: {outcome.description}"
                )
                return self._fallback(state, REASON_RETRIES_EXHAUSTED)

            delay = policy.delay_after(state.attempt)
            if budget_end is not None and asyncio.get_running_loop().time() + delay >= budget_end:
                logger.warning(
                    f"Backoff of {delay:.2f}s for {state.endpoint} would exceed the caller's "
                    f"deadline; not retrying."
                )
                return self._fallback(state, REASON_DEADLINE_EXCEEDED)

            logger.warning(
                f"Retryable error calling {state.endpoint} on attempt "
                f"{state.attempt}/{policy.max_attempts}: {outcome.description}. "
                f"Waiting {delay:.2f}s..."
            )
            self._dispatch(RetryScheduled(
                endpoint=state.endpoint, attempt_number=state.attempt + 1, delay_seconds=delay
            ))
            await self._sleep(delay)

    async def _attempt(
        self, request: RecommendationRequest, payload: Dict[str, Any], state: _CallState
    ) -> AttemptOutcome:
        """Performs one transport call and folds the result into an outcome."""
        self._dispatch(FetchInitiated(
            endpoint=state.endpoint, subject_id=request.subject_id, attempt_number=state.attempt
        ))
        start_time = time.perf_counter()
        try:
            response = await self.transport.send(state.endpoint, payload)
        except Exception as e:
            return classify_error(e)

        outcome = classify_response(response)
        if isinstance(outcome, Success):
            latency_ms = (time.perf_counter() - start_time) * 1000
            logger.debug(
                f"Received {len(outcome.result)} recommendations from {state.endpoint} "
                f"in {latency_ms:.2f}ms (attempt {state.attempt})"
            )
            self._dispatch(FetchSucceeded(
                endpoint=state.endpoint,
                attempt_number=state.attempt,
                latency_ms=latency_ms,
                result_count=len(outcome.result),
            ))
        return outcome

    # --- Helpers ---

    def _fallback(self, state: _CallState, reason: str) -> RecommendationResult:
        logger.warning(
            f"Returning empty recommendations for {state.endpoint} after {state.attempt} "
            f"attempt(s) ({reason}): {state.last_error or 'no error recorded'}"
        )
        self._dispatch(FallbackReturned(
            endpoint=state.endpoint,
            reason=reason,
            attempts=state.attempt,
            error_message=state.last_error,
        ))
        return EMPTY_RESULT

    def _validate(self, request: Any) -> None:
        if not isinstance(request, RecommendationRequest):
            raise InvalidRequestError(
                f"Expected a RecommendationRequest, got {type(request).__name__}"
            )
        if not isinstance(request.kind, SubjectKind):
            raise InvalidRequestError(f"Unknown request kind: {request.kind!r}")
        if not isinstance(request.subject_id, str) or not request.subject_id.strip():
            raise InvalidRequestError(f"{request.kind.value} id must be a non-empty string")
        limit = request.limit
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise InvalidRequestError(f"limit must be an integer, got {limit!r}")
        if not 1 <= limit <= self.max_limit:
            raise InvalidRequestError(
                f"limit must be between 1 and {self.max_limit}, got {limit}"
            )

    def _dispatch(self, event: DomainEvent) -> None:
        logger.debug(f"EVENT: {event}")
        if self.event_listener is None:
            return
        try:
            self.event_listener(event)
        except Exception as e:
            logger.error(f"Event listener failed for {type(event).__name__}: {e}", exc_info=True)
