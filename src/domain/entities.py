"""Domain entities representing core business objects."""

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from openai.types.chat import ChatCompletionMessage


class FunctionCall(BaseModel):
    """Function name and JSON-encoded arguments requested by the model."""

    name: str | None = None
    arguments: str | None = None


class ToolCallRequest(BaseModel):
    """Represents a tool call from the LLM."""

    model_config = ConfigDict(extra="ignore")

    id: str
    type: Literal["function"] = "function"
    function: FunctionCall = Field(default_factory=FunctionCall)


class ChatMessage(BaseModel):
    """Represents one entry of a chat transcript."""

    model_config = ConfigDict(extra="ignore")

    role: Literal["system", "user", "assistant", "tool"]
    content: str | None = None
    tool_calls: list[ToolCallRequest] | None = None
    tool_call_id: str | None = None

    @property
    def requested_tools(self) -> list[ToolCallRequest]:
        """Tool calls carried by an assistant message (empty otherwise)."""
        return self.tool_calls or []

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the chat completions wire format.

        Optional fields are omitted when unset; ``content`` is always present.
        """
        payload = self.model_dump(exclude_none=True)
        payload.setdefault("content", None)
        return payload

    @classmethod
    def system(cls, content: str) -> "ChatMessage":
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str) -> "ChatMessage":
        return cls(role="assistant", content=content)

    @classmethod
    def tool(cls, tool_call_id: str, content: str) -> "ChatMessage":
        return cls(role="tool", tool_call_id=tool_call_id, content=content)

    @classmethod
    def from_completion(cls, message: "ChatCompletionMessage") -> "ChatMessage":
        """Create entity from an OpenAI completion message."""
        tool_calls = [
            ToolCallRequest.model_validate(tc.model_dump())
            for tc in message.tool_calls or []
        ]
        return cls(
            role="assistant",
            content=message.content,
            tool_calls=tool_calls or None,
        )


class ChatContext(BaseModel):
    """System prompt and seed messages that open a new conversation."""

    system_prompt: str
    messages: list[ChatMessage] = Field(default_factory=list)
    max_tokens: int = 2000


class VendorRecord(BaseModel):
    """A generated negotiation partner."""

    id: str
    name: str
    industry: str
    location: str
    speciality: str
    phone: str
    email: str
    rating: float


class CallOutcome(BaseModel):
    """Result of an outbound vendor call request."""

    ok: bool
    status: int
    response: Any = None


class ConversationTurn(BaseModel):
    """Outcome of one processed user message."""

    chat_id: str
    messages: list[ChatMessage]
    response: dict[str, Any] = Field(default_factory=dict)
