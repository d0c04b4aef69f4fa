"""Concrete implementation of the Transport interface using httpx.

Hides the specifics of the HTTP client library: base URL, authentication
header, timeouts and connection pooling. Translates httpx failures into the
domain's transport errors.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from recogate.domain.errors import HttpStatusError, NoResponseError
from recogate.domain.interfaces.transport import Transport, TransportResponse
from recogate.domain.models.common import Endpoint, ResponseBody

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-API-Key"
DEFAULT_TIMEOUT_S = 10.0


class HttpxTransport(Transport):
    """Sends JSON POST requests over one pooled httpx.AsyncClient."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initializes the transport.

        Args:
            base_url: Root URL of the recommendation API.
            api_key: Key sent in the X-API-Key header of every request.
            timeout_s: Per-request timeout in seconds.
            client: Pre-built client (mainly for tests). Its base URL and headers
                are used as-is; the transport still closes it on aclose().
        """
        if not base_url:
            raise ValueError("Recommendation API base URL not provided.")
        if not api_key:
            raise ValueError("Recommendation API key not provided.")

        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Content-Type": "application/json",
                API_KEY_HEADER: api_key,
            },
            timeout=timeout_s,
        )
        logger.info(f"HttpxTransport initialized with API URL: {self.base_url}")

    async def send(self, endpoint: Endpoint, payload: Dict[str, Any]) -> TransportResponse:
        logger.debug(f"POST {endpoint} payload={payload}")
        try:
            response = await self._client.post(endpoint, json=payload)
        except httpx.TimeoutException as e:
            raise NoResponseError(f"Timed out calling {endpoint}: {e}") from e
        except httpx.TransportError as e:
            raise NoResponseError(f"No response from {endpoint}: {type(e).__name__} - {e}") from e

        body = ResponseBody(response.text)
        if not response.is_success:
            logger.debug(f"POST {endpoint} answered {response.status_code}")
            raise HttpStatusError(response.status_code, body)
        return TransportResponse(status_code=response.status_code, body=body)

    async def aclose(self) -> None:
        await self._client.aclose()
        logger.debug("HttpxTransport closed.")

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
