"""Chat history store keyed by chat identifier."""

import logging
import uuid

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from domain.entities import ChatMessage
from infrastructure.database import DatabaseManager
from repositories.transcript_repository import TranscriptRepository

logger = logging.getLogger(__name__)


class HistoryStore:
    """Durable mapping from chat id to an ordered message transcript.

    Storage is provisioned on first access. Concurrent turns on the same chat
    are not serialized: the last save wins.
    """

    def __init__(
        self, database: DatabaseManager, transcript_repo: TranscriptRepository
    ) -> None:
        """Initialize history store.

        Args:
            database: Database holding the transcripts table
            transcript_repo: Transcript repository instance
        """
        self.database = database
        self.transcript_repo = transcript_repo

    @staticmethod
    def new_id() -> str:
        """Generate a new chat id (random, not checked against storage)."""
        return uuid.uuid4().hex

    async def load(self, chat_id: str) -> list[ChatMessage]:
        """Load the transcript of a chat.

        Missing, corrupt or unreadable transcripts all load as an empty list.

        Args:
            chat_id: Chat identifier

        Returns:
            list[ChatMessage]: Stored transcript, possibly empty
        """
        try:
            await self.database.ensure_schema()
            async with self.database.async_session_maker() as db_session:
                messages = await self.transcript_repo.get(db_session, chat_id)
        except ValidationError as e:
            logger.warning(
                f"Corrupt transcript for chat {chat_id}, starting empty: "
                f"{e.error_count()} errors"
            )
            return []
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Unreadable transcript for chat {chat_id}: {e}")
            return []

        if messages is None:
            logger.debug(f"No transcript stored for chat {chat_id}")
            return []

        logger.info(f"Loaded {len(messages)} messages for chat {chat_id}")
        return messages

    async def save(self, chat_id: str, transcript: list[ChatMessage]) -> None:
        """Overwrite the stored transcript of a chat with the given one.

        Args:
            chat_id: Chat identifier
            transcript: Complete, up-to-date transcript
        """
        await self.database.ensure_schema()
        async with self.database.async_session_maker() as db_session:
            try:
                await self.transcript_repo.upsert(db_session, chat_id, transcript)
                await db_session.commit()
            except Exception:
                await db_session.rollback()
                raise
