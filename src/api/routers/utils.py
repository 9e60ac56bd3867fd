"""Utility functions for API routers.

This module contains reusable helper functions following DRY and SOLID principles.
"""

import json
import logging
from typing import Any

from fastapi import HTTPException, status
from openai import APIStatusError

from domain.entities import ChatMessage

logger = logging.getLogger(__name__)


def handle_router_error(
    operation: str, identifier: str, error: Exception
) -> HTTPException:
    """Handle router errors with consistent logging and HTTP responses.

    Provider errors keep the status code reported by the provider; anything
    else becomes a 500.

    Args:
        operation: Description of the operation (e.g., "processing message")
        identifier: Resource identifier (e.g., chat_id)
        error: The exception that occurred

    Returns:
        HTTPException: Formatted HTTP exception
    """
    if isinstance(error, APIStatusError):
        logger.error(
            f"Provider error {operation} {identifier}: "
            f"{error.status_code} {error.message}"
        )
        return HTTPException(status_code=error.status_code, detail=error.message)

    logger.error(f"Error {operation} {identifier}: {error}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(error) or "Unexpected error",
    )


def convert_messages_to_payloads(messages: list[ChatMessage]) -> list[dict[str, Any]]:
    """Convert transcript entries to their wire format.

    Args:
        messages: Transcript entries

    Returns:
        list[dict]: Messages in chat completions format
    """
    return [message.to_payload() for message in messages]


def create_sse_event(event: str, data: dict[str, Any]) -> dict[str, str]:
    """Create a Server-Sent Event (SSE) formatted event.

    Args:
        event: Event type (e.g., "message", "error", "typing")
        data: Event data to be JSON serialized

    Returns:
        dict: SSE event dictionary with 'event' and 'data' keys
    """
    return {
        "event": event,
        "data": json.dumps(data, ensure_ascii=False),
    }


def create_error_event(error: str, chat_id: str | None) -> dict[str, str]:
    """Create an SSE error event.

    Args:
        error: Error message
        chat_id: Chat identifier, if already known

    Returns:
        dict: SSE error event
    """
    return create_sse_event(
        event="error",
        data={"error": error, "chatId": chat_id},
    )
