"""HTTP client for the persona (personalization) context API."""

import logging

import httpx
from async_lru import alru_cache
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from domain.entities import ChatContext, ChatMessage
from domain.exceptions import PersonaUnavailableError

logger = logging.getLogger(__name__)


class _PersonaPayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    system_prompt: str = Field(..., min_length=1)
    messages: list[ChatMessage] = Field(default_factory=list)
    max_tokens: int | None = None


class PersonaClient:
    """Fetches personalized system prompts.

    Successful lookups are memoized per (user_id, task, max_tokens); failures
    are never cached.
    """

    def __init__(
        self,
        base_url: str | None,
        api_key: str | None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize persona client.

        Args:
            base_url: Base URL of the persona API, None when not configured
            api_key: API key sent as a bearer token
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.configured = bool(base_url and api_key)
        self._client: httpx.AsyncClient | None = None
        if self.configured:
            self._client = httpx.AsyncClient(
                base_url=base_url or "",
                headers={"Authorization": f"Bearer {api_key}"},
                timeout=timeout,
                transport=transport,
            )
            logger.info(f"Persona client initialized: {base_url}")
        else:
            logger.info("Persona client not configured, fallback prompts only")

    @alru_cache(maxsize=256, ttl=600)
    async def get_context(
        self, user_id: str, task: str = "chat", max_tokens: int = 2000
    ) -> ChatContext:
        """Fetch the context of a user for a task.

        Raises:
            PersonaUnavailableError: Client unconfigured, request failed or
                the payload is malformed
        """
        if self._client is None:
            raise PersonaUnavailableError("Persona API not configured")

        try:
            response = await self._client.post(
                "/context",
                json={"userId": user_id, "task": task, "maxTokens": max_tokens},
            )
            response.raise_for_status()
            payload = _PersonaPayload.model_validate(response.json())
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            raise PersonaUnavailableError(str(e)) from e

        return ChatContext(
            system_prompt=payload.system_prompt,
            messages=payload.messages,
            max_tokens=payload.max_tokens or max_tokens,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            logger.info("Persona client closed")
