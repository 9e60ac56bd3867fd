"""Tests for the chat history store."""

import os

import pytest
from sqlalchemy import text

from domain.entities import ChatMessage
from infrastructure.models import ChatTranscriptModel
from logic.history import HistoryStore
from helpers import tool_call


async def _store_raw(history_store: HistoryStore, chat_id: str, raw: str) -> None:
    await history_store.database.ensure_schema()
    async with history_store.database.async_session_maker() as db_session:
        db_session.add(ChatTranscriptModel(chat_id=chat_id, messages=raw))
        await db_session.commit()


@pytest.mark.asyncio
async def test_load_unknown_chat_is_empty(history_store: HistoryStore):
    """Loading a chat that was never saved yields an empty transcript."""
    assert await history_store.load("does-not-exist") == []


@pytest.mark.asyncio
async def test_storage_is_provisioned_lazily(history_store: HistoryStore, settings):
    """The database file appears only once the store is first used."""
    db_path = settings.database_url.split("///")[1]
    assert not os.path.exists(os.path.dirname(db_path))

    await history_store.load("anything")
    await history_store.load("anything-else")

    assert os.path.exists(db_path)


@pytest.mark.asyncio
async def test_save_then_load_round_trip(history_store: HistoryStore):
    """A saved transcript, tool messages included, loads back unchanged."""
    transcript = [
        ChatMessage.system("You are helpful."),
        ChatMessage.user("What time is it?"),
        ChatMessage(
            role="assistant",
            content=None,
            tool_calls=[tool_call("call_1", "get_current_time", {})],
        ),
        ChatMessage.tool("call_1", '{"iso": "2024-01-01T00:00:00.000+00:00"}'),
        ChatMessage.assistant("It is midnight."),
    ]

    await history_store.save("chat-1", transcript)

    assert await history_store.load("chat-1") == transcript


@pytest.mark.asyncio
async def test_save_overwrites_previous_transcript(history_store: HistoryStore):
    """Save replaces the stored transcript instead of appending to it."""
    await history_store.save("chat-1", [ChatMessage.user("first")])
    await history_store.save("chat-1", [ChatMessage.user("second")])

    loaded = await history_store.load("chat-1")

    assert [message.content for message in loaded] == ["second"]


@pytest.mark.asyncio
async def test_transcripts_are_isolated_per_chat(history_store: HistoryStore):
    await history_store.save("chat-a", [ChatMessage.user("a")])
    await history_store.save("chat-b", [ChatMessage.user("b")])

    assert (await history_store.load("chat-a"))[0].content == "a"
    assert (await history_store.load("chat-b"))[0].content == "b"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        '{"role": "user"}',
        '[{"role": "robot", "content": "hi"}]',
    ],
)
async def test_corrupt_transcript_loads_as_empty(history_store: HistoryStore, raw: str):
    """Unparseable or wrongly shaped state is treated as no history."""
    await _store_raw(history_store, "broken", raw)

    assert await history_store.load("broken") == []


@pytest.mark.asyncio
async def test_unreadable_storage_loads_as_empty(history_store: HistoryStore):
    """A database error while reading is treated as no history."""
    await history_store.database.ensure_schema()
    async with history_store.database.engine.begin() as conn:
        await conn.execute(text("DROP TABLE chat_transcripts"))

    assert await history_store.load("chat-1") == []


def test_new_ids_are_unique():
    ids = {HistoryStore.new_id() for _ in range(1000)}

    assert len(ids) == 1000
    assert all(isinstance(chat_id, str) and chat_id for chat_id in ids)
