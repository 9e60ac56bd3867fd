"""Test doubles and message builders shared by the test modules."""

import asyncio
import json
from typing import Any

from domain.entities import ChatMessage, FunctionCall, ToolCallRequest
from infrastructure.openai_client import CompletionResult


def assistant_reply(content: str) -> ChatMessage:
    """Plain assistant answer."""
    return ChatMessage.assistant(content)


def tool_call(call_id: str, name: str | None, arguments: Any = None) -> ToolCallRequest:
    """Tool call request; dict arguments are JSON encoded, strings kept raw."""
    if isinstance(arguments, dict):
        arguments = json.dumps(arguments)
    return ToolCallRequest(
        id=call_id, function=FunctionCall(name=name, arguments=arguments)
    )


def tool_call_reply(*calls: ToolCallRequest) -> ChatMessage:
    """Assistant message requesting tool calls."""
    return ChatMessage(role="assistant", content=None, tool_calls=list(calls))


class FakeCompletionClient:
    """Completion provider replaying a scripted list of assistant messages."""

    def __init__(self, script: list[ChatMessage | Exception] | None = None) -> None:
        self.script = list(script or [])
        self.calls: list[dict[str, Any]] = []

    async def complete(
        self,
        transcript: list[ChatMessage],
        tools: list[Any] | None = None,
        temperature: float = 0.2,
        model: str | None = None,
    ) -> CompletionResult:
        self.calls.append(
            {
                "transcript": [message.model_copy(deep=True) for message in transcript],
                "tools": tools,
                "temperature": temperature,
                "model": model,
            }
        )
        if not self.script:
            raise AssertionError("Completion requested beyond the scripted replies")
        step = self.script.pop(0)
        if isinstance(step, Exception):
            raise step
        return CompletionResult(
            message=step.model_copy(deep=True),
            raw={
                "id": f"chatcmpl-{len(self.calls)}",
                "object": "chat.completion",
                "model": model or "fake-model",
            },
        )

    async def close(self) -> None:
        pass


class GatedCompletionClient(FakeCompletionClient):
    """Scripted provider that holds every completion until ``release`` is set."""

    def __init__(self, script: list[ChatMessage | Exception] | None = None) -> None:
        super().__init__(script)
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def complete(self, transcript, tools=None, temperature=0.2, model=None):
        self.started.set()
        await self.release.wait()
        return await super().complete(transcript, tools, temperature, model)
