"""Exception types shared across the recogate layers.

Only `InvalidRequestError` and `ConfigurationError` ever reach callers of the
gateway. Transport and parsing errors are captured and turned into attempt
outcomes inside the gateway.
"""

from typing import Optional


class RecogateError(Exception):
    """Base class for all recogate errors."""


class InvalidRequestError(RecogateError, ValueError):
    """Raised when a recommendation request violates its preconditions."""


class ConfigurationError(RecogateError):
    """Raised when gateway settings are missing or invalid."""


class TransportError(RecogateError):
    """Base class for failures reported by a transport."""


class NoResponseError(TransportError):
    """No response was received (connection refused, timeout, DNS failure...)."""


class HttpStatusError(TransportError):
    """The remote service answered with a non-2xx status."""

    def __init__(self, status_code: int, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}: {body or '<empty body>'}")


class MalformedResponseError(RecogateError):
    """A 2xx response body could not be parsed into recommendations."""

    def __init__(self, message: str, body: Optional[str] = None):
        self.body = body
        super().__init__(message)
