"""HTTP client for the outbound-call provider."""

import logging
from typing import Any

import httpx

from domain.entities import CallOutcome

logger = logging.getLogger(__name__)


class OutboundCallClient:
    """Places outbound phone calls through an HTTP endpoint.

    Never raises on downstream failures: every attempt is reported as a
    CallOutcome so callers can treat it as a normal result.
    """

    def __init__(
        self,
        url: str | None,
        api_key: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize outbound call client.

        Args:
            url: Endpoint that accepts call requests, None when not configured
            api_key: Optional API key sent as a bearer token
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.url = url
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._client = httpx.AsyncClient(
            headers=headers, timeout=timeout, transport=transport
        )

    async def place_call(self, body: dict[str, Any]) -> CallOutcome:
        """POST a call request and describe what happened.

        Args:
            body: JSON body sent to the provider

        Returns:
            CallOutcome: ok flag, HTTP status (0 on transport errors) and the
                decoded response body or error text
        """
        if not self.url:
            logger.warning("Outbound call requested but no call endpoint configured")
            return CallOutcome(
                ok=False, status=503, response="Outbound calling is not configured"
            )

        try:
            response = await self._client.post(self.url, json=body)
        except httpx.HTTPError as e:
            logger.error(f"Outbound call request failed: {e}")
            return CallOutcome(ok=False, status=0, response=str(e))

        try:
            content: Any = response.json()
        except ValueError:
            content = response.text

        if response.is_success:
            logger.info(f"Outbound call accepted with status {response.status_code}")
        else:
            logger.warning(
                f"Outbound call rejected with status {response.status_code}"
            )
        return CallOutcome(
            ok=response.is_success, status=response.status_code, response=content
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
        logger.info("Outbound call client closed")
