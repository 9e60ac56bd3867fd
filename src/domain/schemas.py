"""API request and response schemas."""

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema exposing camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Request Schemas
class ChatRequest(CamelModel):
    """Request to send one user message."""

    model: str | None = Field(None, description="Model name override")
    message: str = Field(..., min_length=1, description="User message content")
    chat_id: str | None = Field(
        None, description="Existing conversation id; omit to start a new chat"
    )
    user_id: str | None = Field(None, description="User id used for personalization")
    task: str = Field("chat", description="Task label used for personalization")


# Response Schemas
class ChatResponse(CamelModel):
    """Response containing the full transcript of a conversation turn."""

    chat_id: str
    messages: list[dict[str, Any]] = Field(
        ..., description="Full transcript including any tool messages"
    )
    response: dict[str, Any] = Field(
        ..., description="Raw API response from the final completion call"
    )


class TranscriptResponse(CamelModel):
    """Response containing a stored transcript."""

    chat_id: str
    messages: list[dict[str, Any]]
    total: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy"]
    version: str = "0.1.0"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ErrorResponse(BaseModel):
    """Error response."""

    error: str
