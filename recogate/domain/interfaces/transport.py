"""Interface for the outbound transport used to reach the recommendation API.

The gateway only depends on this narrow contract, never on a specific HTTP
library.
"""

import abc
from dataclasses import dataclass
from typing import Any, Dict

from recogate.domain.models.common import Endpoint, ResponseBody


@dataclass(frozen=True)
class TransportResponse:
    """A 2xx response as received from the remote service."""

    status_code: int
    body: ResponseBody


class Transport(abc.ABC):
    """Abstract Base Class for sending a JSON payload to an API endpoint."""

    @abc.abstractmethod
    async def send(self, endpoint: Endpoint, payload: Dict[str, Any]) -> TransportResponse:
        """Sends the payload to the endpoint asynchronously.

        Implementations must be safe for concurrent use and must let
        `asyncio.CancelledError` propagate untouched.

        Args:
            endpoint: Path relative to the configured base URL.
            payload: JSON-serializable request body.

        Returns:
            The TransportResponse for any 2xx status.

        Raises:
            NoResponseError: If no response was received at all.
            HttpStatusError: If the service answered with a non-2xx status.
        """
        pass

    async def aclose(self) -> None:
        """Releases any pooled resources. Default is a no-op."""
        return None
