"""Chat messaging API endpoints with SSE support."""

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sse_starlette.sse import EventSourceResponse

from api.dependencies import get_conversation_service
from api.routers.utils import (
    convert_messages_to_payloads,
    create_error_event,
    create_sse_event,
    handle_router_error,
)
from domain.schemas import ChatRequest, ChatResponse, ErrorResponse, TranscriptResponse
from logic.chat import ConversationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/chat", tags=["chat"])

# Streamed turns outlive their client connection; keep references until done
_running_turns: set[asyncio.Task] = set()

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def _handle_turn_completion(task: asyncio.Task, chat_id: str) -> None:
    """Release a finished streamed turn and log how it ended."""
    _running_turns.discard(task)
    if task.cancelled():
        logger.warning(f"Streamed turn for chat {chat_id} was cancelled")
        return
    exception = task.exception()
    if exception is not None:
        logger.error(f"Streamed turn for chat {chat_id} failed: {exception}")


@router.post(
    "",
    response_model=ChatResponse,
    responses=ERROR_RESPONSES,
    summary="Chat completion with optional function calling",
    description=(
        "Send one user message and receive the assistant's final message after "
        "any tool calls. Omit chatId to start a new conversation."
    ),
)
async def send_message(
    request: ChatRequest,
    conversation_service: Annotated[
        ConversationService, Depends(get_conversation_service)
    ],
) -> ChatResponse:
    """Send a message and get the AI response with the full transcript."""
    try:
        turn = await conversation_service.process_message(
            message=request.message,
            chat_id=request.chat_id,
            user_id=request.user_id,
            task=request.task,
            model=request.model,
        )
    except Exception as e:
        raise handle_router_error(
            "processing message for chat", request.chat_id or "new", e
        )

    return ChatResponse(
        chat_id=turn.chat_id,
        messages=convert_messages_to_payloads(turn.messages),
        response=turn.response,
    )


@router.post(
    "/stream",
    summary="Send a message with SSE streaming",
    description=(
        "Send a user message and receive the new transcript entries via "
        "Server-Sent Events"
    ),
)
async def send_message_stream(
    request: ChatRequest,
    conversation_service: Annotated[
        ConversationService, Depends(get_conversation_service)
    ],
) -> EventSourceResponse:
    """Send a message and stream the new transcript entries via SSE.

    The turn runs in its own task, so a client disconnect stops the event
    stream but not the turn: tools already started finish and the transcript
    is still saved.
    """
    chat_id = request.chat_id or conversation_service.history_store.new_id()
    turn_task = asyncio.create_task(
        conversation_service.process_message(
            message=request.message,
            chat_id=chat_id,
            user_id=request.user_id,
            task=request.task,
            model=request.model,
        )
    )
    _running_turns.add(turn_task)
    turn_task.add_done_callback(lambda t: _handle_turn_completion(t, chat_id))

    async def event_generator():
        """Generate SSE events for the chat turn."""
        try:
            yield create_sse_event("typing", {"chatId": chat_id, "typing": True})

            turn = await asyncio.shield(turn_task)

            # Only the entries appended by this turn, starting at the user message
            start = max(
                index
                for index, message in enumerate(turn.messages)
                if message.role == "user"
            )
            for message in turn.messages[start:]:
                yield create_sse_event(
                    "message", {"chatId": chat_id, **message.to_payload()}
                )

            yield create_sse_event(
                "done",
                {"chatId": chat_id, "total": len(turn.messages)},
            )

        except Exception as e:
            logger.error(f"Error in SSE stream for chat {chat_id}: {e}")
            yield create_error_event(str(e), chat_id)

    return EventSourceResponse(event_generator())


@router.get(
    "/{chat_id}/messages",
    response_model=TranscriptResponse,
    summary="Get message history",
    description="Retrieve the stored transcript of a chat (empty when unknown)",
)
async def get_message_history(
    chat_id: Annotated[str, Path(description="Chat identifier")],
    conversation_service: Annotated[
        ConversationService, Depends(get_conversation_service)
    ],
) -> TranscriptResponse:
    """Get all messages stored for a chat."""
    messages = await conversation_service.get_transcript(chat_id)
    return TranscriptResponse(
        chat_id=chat_id,
        messages=convert_messages_to_payloads(messages),
        total=len(messages),
    )
