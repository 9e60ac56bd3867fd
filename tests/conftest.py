"""Pytest configuration and shared fixtures."""

import os
from typing import AsyncGenerator

os.environ.setdefault("OPENAI_API_KEY", "test-key")

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from api.app import AppBuilder
from config import Settings
from helpers import FakeCompletionClient
from infrastructure.call_client import OutboundCallClient
from infrastructure.database import DatabaseManager
from infrastructure.models import Base, WarehouseBase
from infrastructure.persona_client import PersonaClient
from logic.common import VendorWarehouse
from logic.history import HistoryStore
from logic.tools import build_default_registry
from repositories.transcript_repository import TranscriptRepository
from repositories.vendor_repository import VendorRepository


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing every database at the test's temporary directory."""
    return Settings(
        openai_api_key="test-key",
        database_url=f"sqlite+aiosqlite:///{tmp_path}/history/chats.db",
        warehouse_database_url=f"sqlite+aiosqlite:///{tmp_path}/warehouse.db",
        outbound_call_url="https://calls.test/v1/outbound",
        agent_max_iterations=4,
    )


@pytest_asyncio.fixture
async def history_db(settings: Settings) -> AsyncGenerator[DatabaseManager, None]:
    """History database, schema created lazily by the store."""
    database = DatabaseManager(settings.database_url, Base.metadata)
    yield database
    await database.close()


@pytest_asyncio.fixture
async def warehouse_db(settings: Settings) -> AsyncGenerator[DatabaseManager, None]:
    """Warehouse database receiving generated vendors."""
    database = DatabaseManager(settings.warehouse_database_url, WarehouseBase.metadata)
    yield database
    await database.close()


@pytest.fixture
def history_store(history_db: DatabaseManager) -> HistoryStore:
    return HistoryStore(history_db, TranscriptRepository())


@pytest.fixture
def call_requests() -> list[httpx.Request]:
    """Requests received by the fake outbound-call provider."""
    return []


@pytest_asyncio.fixture
async def call_client(
    settings: Settings, call_requests: list[httpx.Request]
) -> AsyncGenerator[OutboundCallClient, None]:
    def handler(request: httpx.Request) -> httpx.Response:
        call_requests.append(request)
        return httpx.Response(201, json={"callId": "call-123", "status": "queued"})

    client = OutboundCallClient(
        url=settings.outbound_call_url, transport=httpx.MockTransport(handler)
    )
    yield client
    await client.close()


@pytest.fixture
def fake_llm() -> FakeCompletionClient:
    """Scripted completion provider; tests append replies to ``script``."""
    return FakeCompletionClient()


@pytest_asyncio.fixture
async def app_builder(
    settings: Settings,
    history_db: DatabaseManager,
    warehouse_db: DatabaseManager,
    call_client: OutboundCallClient,
    fake_llm: FakeCompletionClient,
) -> AppBuilder:
    """App builder wired with test resources instead of real capabilities."""
    builder = AppBuilder(settings)
    builder._history_db = history_db
    builder._warehouse_db = warehouse_db
    builder._openai_client = fake_llm  # type: ignore[assignment]
    builder._persona_client = PersonaClient(base_url=None, api_key=None)
    builder._call_client = call_client
    builder._tool_registry = build_default_registry(
        VendorWarehouse(warehouse_db, VendorRepository()), call_client
    )
    return builder


@pytest_asyncio.fixture
async def client(app_builder: AppBuilder) -> AsyncGenerator[AsyncClient, None]:
    """Create an HTTP client for testing with initialized app."""
    async with AsyncClient(
        transport=ASGITransport(app=app_builder.app, raise_app_exceptions=False),
        base_url="http://test",
    ) as ac:
        yield ac
