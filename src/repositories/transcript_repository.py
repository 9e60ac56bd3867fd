"""Transcript repository for database operations on chat transcripts."""

import json
import logging

from pydantic import TypeAdapter
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities import ChatMessage
from infrastructure.models import ChatTranscriptModel

logger = logging.getLogger(__name__)

_transcript_adapter = TypeAdapter(list[ChatMessage])


class TranscriptRepository:
    """Repository for chat transcripts using SQLAlchemy ORM.

    A chat id maps to exactly one row holding the whole transcript as a JSON
    array. All methods accept an AsyncSession to support transactions.
    """

    async def get(
        self, session: AsyncSession, chat_id: str
    ) -> list[ChatMessage] | None:
        """Get the stored transcript of a chat.

        Args:
            session: SQLAlchemy async session
            chat_id: Chat identifier

        Returns:
            list[ChatMessage] | None: Transcript if stored, None otherwise

        Raises:
            pydantic.ValidationError: Stored JSON is corrupt
        """
        stmt = select(ChatTranscriptModel.messages).where(
            ChatTranscriptModel.chat_id == chat_id
        )
        result = await session.execute(stmt)
        raw = result.scalar_one_or_none()

        if raw is None:
            return None

        return _transcript_adapter.validate_json(raw)

    async def upsert(
        self,
        session: AsyncSession,
        chat_id: str,
        messages: list[ChatMessage],
    ) -> None:
        """Replace the stored transcript of a chat.

        Args:
            session: SQLAlchemy async session (can be part of a transaction)
            chat_id: Chat identifier
            messages: Complete transcript to store
        """
        serialized = json.dumps(
            [message.to_payload() for message in messages], ensure_ascii=False
        )

        db_transcript = await session.get(ChatTranscriptModel, chat_id)
        if db_transcript is None:
            session.add(ChatTranscriptModel(chat_id=chat_id, messages=serialized))
        else:
            db_transcript.messages = serialized
        await session.flush()

        logger.info(f"Stored {len(messages)} messages for chat {chat_id}")
