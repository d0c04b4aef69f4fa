"""Classification of a single attempt into an AttemptOutcome.

Pure functions: given what the transport produced, decide whether the attempt
succeeded, may be retried, or failed for good.
"""

from recogate.core.wire import parse_recommendations
from recogate.domain.errors import HttpStatusError, MalformedResponseError
from recogate.domain.interfaces.transport import TransportResponse
from recogate.domain.models.outcome import AttemptOutcome, FatalFailure, RetryableFailure, Success

TOO_MANY_REQUESTS = 429


def is_retryable_status(status_code: int) -> bool:
    """Server-side errors and rate limiting are worth another try."""
    return status_code >= 500 or status_code == TOO_MANY_REQUESTS


def classify_response(response: TransportResponse) -> AttemptOutcome:
    """Classifies a 2xx response by attempting to decode its body."""
    try:
        return Success(parse_recommendations(response.body))
    except MalformedResponseError as e:
        # A corrupt body is never retried and never treated as an empty success.
        return FatalFailure(cause=e, status_code=None, body=response.body)


def classify_error(error: Exception) -> AttemptOutcome:
    """Classifies an exception raised by the transport.

    `asyncio.CancelledError` is a BaseException and never reaches this point.
    """
    if isinstance(error, HttpStatusError):
        failure_type = RetryableFailure if is_retryable_status(error.status_code) else FatalFailure
        return failure_type(cause=error, status_code=error.status_code, body=error.body)
    # NoResponseError, and anything else the transport let through, is treated
    # like a connectivity problem.
    return RetryableFailure(cause=error)
