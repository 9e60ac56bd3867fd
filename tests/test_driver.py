"""Tests for the tool-calling completion driver."""

import json

import pytest

from domain.entities import ChatMessage
from domain.exceptions import ToolCallError, UnknownToolError
from helpers import FakeCompletionClient, assistant_reply, tool_call, tool_call_reply
from logic.chat import CompletionDriver
from logic.chat.driver import MAX_ITERATIONS_MESSAGE
from logic.tools import ToolRegistry
from logic.tools.utilities import build_utility_tools


@pytest.fixture
def registry() -> ToolRegistry:
    return ToolRegistry(build_utility_tools())


def opening() -> list[ChatMessage]:
    return [ChatMessage.system("You are helpful."), ChatMessage.user("Hi there")]


@pytest.mark.asyncio
async def test_plain_answer_appends_one_message(registry: ToolRegistry):
    llm = FakeCompletionClient([assistant_reply("Hello!")])
    driver = CompletionDriver(llm, registry)
    transcript = opening()

    result = await driver.run(transcript)

    assert result.transcript == [*opening(), assistant_reply("Hello!")]
    assert result.response["id"] == "chatcmpl-1"
    assert result.iterations == 1
    assert not result.exhausted


@pytest.mark.asyncio
async def test_completion_request_shape(registry: ToolRegistry):
    llm = FakeCompletionClient([assistant_reply("Hello!")])
    driver = CompletionDriver(llm, registry, temperature=0.2)

    await driver.run(opening(), model="gpt-4o")

    call = llm.calls[0]
    assert call["model"] == "gpt-4o"
    assert call["temperature"] == 0.2
    assert [spec["function"]["name"] for spec in call["tools"]] == registry.names


@pytest.mark.asyncio
async def test_tool_results_follow_request_order(registry: ToolRegistry):
    """N tool calls produce N tool messages, in order, before the next call."""
    llm = FakeCompletionClient(
        [
            tool_call_reply(
                tool_call("call_a", "get_current_weather", {"location": "Berlin"}),
                tool_call("call_b", "get_current_time", {"timezone": "CET"}),
                tool_call("call_c", "get_current_weather", {"location": "Oslo", "unit": "f"}),
            ),
            assistant_reply("Sunny everywhere."),
        ]
    )
    driver = CompletionDriver(llm, registry)

    result = await driver.run(opening())

    second_request = llm.calls[1]["transcript"]
    tool_messages = [m for m in second_request if m.role == "tool"]
    assert [m.tool_call_id for m in tool_messages] == ["call_a", "call_b", "call_c"]
    assert second_request[-3:] == tool_messages
    assert json.loads(tool_messages[1].content)["timezone"] == "CET"
    assert json.loads(tool_messages[2].content)["unit"] == "f"

    assert [m.role for m in result.transcript] == [
        "system", "user", "assistant", "tool", "tool", "tool", "assistant",
    ]
    assert result.transcript[-1].content == "Sunny everywhere."
    assert result.response["id"] == "chatcmpl-2"


@pytest.mark.asyncio
async def test_multiple_tool_rounds(registry: ToolRegistry):
    llm = FakeCompletionClient(
        [
            tool_call_reply(tool_call("call_1", "get_current_time", {})),
            tool_call_reply(tool_call("call_2", "get_current_weather", {"location": "Rome"})),
            assistant_reply("Done."),
        ]
    )

    result = await CompletionDriver(llm, registry).run(opening())

    assert result.iterations == 3
    assert [m.tool_call_id for m in result.transcript if m.role == "tool"] == [
        "call_1",
        "call_2",
    ]


@pytest.mark.asyncio
async def test_invalid_tool_arguments_do_not_abort(registry: ToolRegistry):
    llm = FakeCompletionClient(
        [
            tool_call_reply(tool_call("call_1", "get_current_weather", "not-json")),
            assistant_reply("Which city?"),
        ]
    )

    result = await CompletionDriver(llm, registry).run(opening())

    tool_message = result.transcript[3]
    assert tool_message.role == "tool"
    assert "error" in json.loads(tool_message.content)
    assert result.transcript[-1].content == "Which city?"


@pytest.mark.asyncio
async def test_unknown_tool_aborts_the_run(registry: ToolRegistry):
    llm = FakeCompletionClient(
        [tool_call_reply(tool_call("call_1", "delete_everything", {}))]
    )

    with pytest.raises(UnknownToolError):
        await CompletionDriver(llm, registry).run(opening())
    assert len(llm.calls) == 1


@pytest.mark.asyncio
async def test_unnamed_tool_aborts_the_run(registry: ToolRegistry):
    llm = FakeCompletionClient([tool_call_reply(tool_call("call_1", None, {}))])

    with pytest.raises(ToolCallError):
        await CompletionDriver(llm, registry).run(opening())


@pytest.mark.asyncio
async def test_iteration_cap_stops_endless_tool_requests(registry: ToolRegistry):
    llm = FakeCompletionClient(
        [
            tool_call_reply(tool_call(f"call_{i}", "get_current_time", {}))
            for i in range(3)
        ]
    )

    result = await CompletionDriver(llm, registry, max_iterations=3).run(opening())

    assert len(llm.calls) == 3
    assert result.exhausted
    assert result.transcript[-1] == ChatMessage.assistant(MAX_ITERATIONS_MESSAGE)
    assert result.transcript[-2].role == "tool"


def test_iteration_cap_must_be_positive(registry: ToolRegistry):
    with pytest.raises(ValueError):
        CompletionDriver(FakeCompletionClient(), registry, max_iterations=0)


@pytest.mark.asyncio
async def test_provider_errors_propagate(registry: ToolRegistry):
    llm = FakeCompletionClient([RuntimeError("provider down")])

    with pytest.raises(RuntimeError, match="provider down"):
        await CompletionDriver(llm, registry).run(opening())
