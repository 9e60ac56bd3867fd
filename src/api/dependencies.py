"""Dependency injection placeholders for FastAPI.

These functions are overridden by AppBuilder at runtime.
Services use these via Depends() for automatic dependency injection.
"""

from typing import Annotated

from fastapi import Depends

from config import Settings
from infrastructure.database import DatabaseManager
from infrastructure.openai_client import OpenAIClient
from infrastructure.persona_client import PersonaClient
from logic.chat import CompletionDriver, ConversationService
from logic.context import ContextResolver
from logic.history import HistoryStore
from logic.tools import ToolRegistry
from repositories.transcript_repository import TranscriptRepository


# Placeholder dependencies - will be overridden by AppBuilder
def get_settings() -> Settings:
    """Application settings dependency.

    This is a placeholder that will be overridden by AppBuilder.

    Raises:
        NotImplementedError: If called before AppBuilder initialization
    """
    raise NotImplementedError("Settings not initialized. Use AppBuilder.")


def get_history_database() -> DatabaseManager:
    """History database dependency.

    This is a placeholder that will be overridden by AppBuilder.

    Raises:
        NotImplementedError: If called before AppBuilder initialization
    """
    raise NotImplementedError("History database not initialized. Use AppBuilder.")


def get_openai_client() -> OpenAIClient:
    """OpenAI client dependency.

    This is a placeholder that will be overridden by AppBuilder.

    Raises:
        NotImplementedError: If called before AppBuilder initialization
    """
    raise NotImplementedError("OpenAI client not initialized. Use AppBuilder.")


def get_persona_client() -> PersonaClient:
    """Persona client dependency.

    This is a placeholder that will be overridden by AppBuilder.

    Raises:
        NotImplementedError: If called before AppBuilder initialization
    """
    raise NotImplementedError("Persona client not initialized. Use AppBuilder.")


def get_tool_registry() -> ToolRegistry:
    """Tool registry dependency.

    This is a placeholder that will be overridden by AppBuilder.

    Raises:
        NotImplementedError: If called before AppBuilder initialization
    """
    raise NotImplementedError("Tool registry not initialized. Use AppBuilder.")


def get_transcript_repository() -> TranscriptRepository:
    """Transcript repository dependency."""
    return TranscriptRepository()


def get_history_store(
    database: Annotated[DatabaseManager, Depends(get_history_database)],
    transcript_repo: Annotated[TranscriptRepository, Depends(get_transcript_repository)],
) -> HistoryStore:
    """History store dependency."""
    return HistoryStore(database=database, transcript_repo=transcript_repo)


def get_context_resolver(
    persona_client: Annotated[PersonaClient, Depends(get_persona_client)],
) -> ContextResolver:
    """Context resolver dependency."""
    return ContextResolver(persona_client)


def get_completion_driver(
    openai_client: Annotated[OpenAIClient, Depends(get_openai_client)],
    tool_registry: Annotated[ToolRegistry, Depends(get_tool_registry)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CompletionDriver:
    """Completion driver dependency.

    Args:
        openai_client: OpenAI client (injected)
        tool_registry: Tool registry (injected)
        settings: Application settings (injected)

    Returns:
        CompletionDriver: Driver bounded by the configured iteration cap
    """
    return CompletionDriver(
        completion_client=openai_client,
        tool_registry=tool_registry,
        max_iterations=settings.agent_max_iterations,
        temperature=settings.agent_temperature,
    )


def get_conversation_service(
    history_store: Annotated[HistoryStore, Depends(get_history_store)],
    context_resolver: Annotated[ContextResolver, Depends(get_context_resolver)],
    driver: Annotated[CompletionDriver, Depends(get_completion_driver)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ConversationService:
    """Conversation service dependency.

    Use with FastAPI Depends():
        service: ConversationService = Depends(get_conversation_service)

    Args:
        history_store: History store (injected)
        context_resolver: Context resolver (injected)
        driver: Completion driver (injected)
        settings: Application settings (injected)

    Returns:
        ConversationService: Conversation service instance
    """
    return ConversationService(
        history_store=history_store,
        context_resolver=context_resolver,
        driver=driver,
        context_max_tokens=settings.context_max_tokens,
    )
