"""Conversation service composing context, history and the completion driver."""

import logging

from domain.entities import ChatMessage, ConversationTurn
from logic.chat.driver import CompletionDriver
from logic.context import ContextResolver
from logic.history import HistoryStore

logger = logging.getLogger(__name__)


class ConversationService:
    """Turns one user message into an assistant reply for a chat."""

    def __init__(
        self,
        history_store: HistoryStore,
        context_resolver: ContextResolver,
        driver: CompletionDriver,
        context_max_tokens: int = 2000,
    ) -> None:
        """Initialize conversation service.

        Args:
            history_store: Store of chat transcripts
            context_resolver: Resolver of opening system prompts
            driver: Completion driver running the tool loop
            context_max_tokens: Token budget requested for personalized context
        """
        self.history_store = history_store
        self.context_resolver = context_resolver
        self.driver = driver
        self.context_max_tokens = context_max_tokens

    async def _open_transcript(
        self, user_id: str | None, task: str
    ) -> list[ChatMessage]:
        context = await self.context_resolver.resolve(
            user_id=user_id, task=task, max_tokens=self.context_max_tokens
        )
        return [
            ChatMessage.system(context.system_prompt),
            *(message.model_copy(deep=True) for message in context.messages),
        ]

    async def process_message(
        self,
        message: str,
        chat_id: str | None = None,
        user_id: str | None = None,
        task: str = "chat",
        model: str | None = None,
    ) -> ConversationTurn:
        """Process a user message and generate the reply, running tools as needed.

        A chat without stored history (new, missing or unreadable) is opened
        with a freshly resolved context.

        Args:
            message: User message content
            chat_id: Existing chat id; a new one is generated when omitted
            user_id: User id used for personalization
            task: Task label used for personalization
            model: Optional model override

        Returns:
            ConversationTurn: Chat id, full transcript and raw final response
        """
        if not chat_id:
            chat_id = self.history_store.new_id()
            logger.info(f"Starting new chat {chat_id}")
            transcript: list[ChatMessage] = []
        else:
            transcript = await self.history_store.load(chat_id)

        if not transcript:
            transcript = await self._open_transcript(user_id, task)

        transcript.append(ChatMessage.user(message))

        try:
            result = await self.driver.run(transcript, model=model)
        except Exception as e:
            logger.error(f"Error processing message in chat {chat_id}: {e}")
            raise

        await self.history_store.save(chat_id, result.transcript)

        return ConversationTurn(
            chat_id=chat_id,
            messages=result.transcript,
            response=result.response,
        )

    async def get_transcript(self, chat_id: str) -> list[ChatMessage]:
        """Get the stored transcript of a chat (empty when unknown)."""
        return await self.history_store.load(chat_id)
