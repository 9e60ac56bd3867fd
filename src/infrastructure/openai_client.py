"""OpenAI client wrapper with tool-calling support."""

import logging
from dataclasses import dataclass, field
from typing import Any

from openai import AsyncOpenAI
from openai.types.chat import ChatCompletion, ChatCompletionToolParam

from domain.entities import ChatMessage

logger = logging.getLogger(__name__)


@dataclass
class CompletionResult:
    """Assistant message of a completion plus the raw response payload."""

    message: ChatMessage
    raw: dict[str, Any] = field(default_factory=dict)


class OpenAIClient:
    """Wrapper for OpenAI async client with tool-calling capabilities.

    Constructed once per process and shared by every request.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        timeout: int = 60,
        max_retries: int = 0,
    ) -> None:
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key
            base_url: Base URL for API (supports OpenRouter, Ollama)
            model: Default model, used when a request does not name one
            timeout: Request timeout in seconds
            max_retries: Transport-level retry attempts
        """
        self.model = model
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
        )
        logger.info(
            f"OpenAI client initialized with model: {model}, base_url: {base_url}"
        )

    async def complete(
        self,
        transcript: list[ChatMessage],
        tools: list[ChatCompletionToolParam] | None = None,
        temperature: float = 0.2,
        model: str | None = None,
    ) -> CompletionResult:
        """Request one completion for the full transcript.

        Args:
            transcript: Conversation so far, replayed verbatim
            tools: Tool definitions advertised to the model
            temperature: Sampling temperature (0-2)
            model: Model name overriding the default one

        Returns:
            CompletionResult: First choice as a ChatMessage and the raw response

        Raises:
            openai.APIError: Provider failures are propagated unchanged
        """
        kwargs: dict[str, Any] = {
            "model": model or self.model,
            "messages": [message.to_payload() for message in transcript],
            "temperature": temperature,
        }

        if tools:
            kwargs["tools"] = tools
            kwargs["tool_choice"] = "auto"

        logger.debug(
            f"Creating chat completion with {len(transcript)} messages "
            f"and {len(tools or [])} tools"
        )

        try:
            response: ChatCompletion = await self.client.chat.completions.create(
                **kwargs
            )
        except Exception as e:
            logger.error(f"Error creating chat completion: {e}")
            raise

        logger.debug(f"Chat completion successful: {response.id}")
        return CompletionResult(
            message=ChatMessage.from_completion(response.choices[0].message),
            raw=response.model_dump(mode="json"),
        )

    async def close(self) -> None:
        """Close the OpenAI client."""
        await self.client.close()
        logger.info("OpenAI client closed")
