"""Context resolver producing system prompts for new conversations."""

import logging

from domain.entities import ChatContext
from domain.exceptions import PersonaUnavailableError
from infrastructure.persona_client import PersonaClient

logger = logging.getLogger(__name__)

BASE_PROMPT = (
    "You are an assistant that would help people identify negotiation partners"
)


class ContextResolver:
    """Resolves a personalized system prompt, falling back to a fixed one."""

    def __init__(self, persona_client: PersonaClient) -> None:
        self.persona_client = persona_client

    @staticmethod
    def fallback(
        user_id: str | None = None, task: str = "chat", max_tokens: int = 2000
    ) -> ChatContext:
        """Deterministic context used whenever personalization is unavailable."""
        personalized = ""
        if user_id:
            personalized = f" You are conversing with user {user_id}. Task: {task}."
        return ChatContext(
            system_prompt=f"{BASE_PROMPT}.{personalized}".strip(),
            messages=[],
            max_tokens=max_tokens,
        )

    async def resolve(
        self,
        user_id: str | None = None,
        task: str = "chat",
        max_tokens: int = 2000,
    ) -> ChatContext:
        """Resolve the context of a conversation. Never raises.

        Args:
            user_id: User identifier, if known
            task: Task label
            max_tokens: Token budget for the personalized context

        Returns:
            ChatContext: Personalized context or the fallback one
        """
        if not user_id:
            return self.fallback(None, task, max_tokens)

        try:
            context = await self.persona_client.get_context(user_id, task, max_tokens)
        except PersonaUnavailableError as e:
            logger.warning(f"Personalization unavailable for user {user_id}: {e}")
            return self.fallback(user_id, task, max_tokens)
        except Exception as e:
            logger.error(
                f"Unexpected personalization failure for user {user_id}: {e}",
                exc_info=True,
            )
            return self.fallback(user_id, task, max_tokens)

        logger.info(f"Resolved personalized context for user {user_id}")
        return context
