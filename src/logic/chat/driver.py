"""Completion driver: the tool-calling protocol loop.

The loop is an explicit state machine::

    AWAITING_COMPLETION --tool calls--> EXECUTING_TOOLS --> AWAITING_COMPLETION
    AWAITING_COMPLETION --plain answer--> DONE

Tool calls of one assistant turn run sequentially in request order and each
appends exactly one tool message before the next completion is requested.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from openai.types.chat import ChatCompletionToolParam

from domain.entities import ChatMessage, ToolCallRequest
from infrastructure.openai_client import CompletionResult
from logic.tools import ToolRegistry

logger = logging.getLogger(__name__)

MAX_ITERATIONS_MESSAGE = (
    "I apologize, but I could not finish processing your request. "
    "Please try again."
)


class CompletionProvider(Protocol):
    async def complete(
        self,
        transcript: list[ChatMessage],
        tools: list[ChatCompletionToolParam] | None = None,
        temperature: float = 0.2,
        model: str | None = None,
    ) -> CompletionResult: ...


class DriverState(enum.Enum):
    AWAITING_COMPLETION = "awaiting_completion"
    EXECUTING_TOOLS = "executing_tools"
    DONE = "done"


@dataclass
class DriverResult:
    """Transcript after the loop plus the last raw completion response."""

    transcript: list[ChatMessage]
    response: dict[str, Any] = field(default_factory=dict)
    iterations: int = 0
    exhausted: bool = False


class CompletionDriver:
    """Runs completions and tool calls until the model answers in plain text."""

    def __init__(
        self,
        completion_client: CompletionProvider,
        tool_registry: ToolRegistry,
        max_iterations: int = 8,
        temperature: float = 0.2,
    ) -> None:
        """Initialize completion driver.

        Args:
            completion_client: Provider of chat completions
            tool_registry: Tools advertised to and executed for the model
            max_iterations: Maximum completions requested per run
            temperature: Sampling temperature of every completion
        """
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        self.completion_client = completion_client
        self.tool_registry = tool_registry
        self.max_iterations = max_iterations
        self.temperature = temperature

    async def run(
        self, transcript: list[ChatMessage], model: str | None = None
    ) -> DriverResult:
        """Run the protocol loop on a transcript.

        The given list is extended in place with every assistant and tool
        message produced along the way.

        Args:
            transcript: Conversation ending with the new user message
            model: Optional model override

        Returns:
            DriverResult: Final transcript and last raw completion

        Raises:
            ToolCallError: The model requested an unknown or unnamed tool
            openai.APIError: The completion provider failed
        """
        tools = self.tool_registry.to_specs()
        state = DriverState.AWAITING_COMPLETION
        result = DriverResult(transcript=transcript)
        pending: list[ToolCallRequest] = []

        while state is not DriverState.DONE:
            if state is DriverState.AWAITING_COMPLETION:
                if result.iterations >= self.max_iterations:
                    logger.warning(
                        f"Max iterations ({self.max_iterations}) reached, "
                        "stopping tool loop"
                    )
                    transcript.append(ChatMessage.assistant(MAX_ITERATIONS_MESSAGE))
                    result.exhausted = True
                    state = DriverState.DONE
                    continue

                result.iterations += 1
                logger.debug(
                    f"Agent iteration {result.iterations}/{self.max_iterations}"
                )
                completion = await self.completion_client.complete(
                    transcript,
                    tools=tools,
                    temperature=self.temperature,
                    model=model,
                )
                result.response = completion.raw
                transcript.append(completion.message)

                pending = completion.message.requested_tools
                if pending:
                    state = DriverState.EXECUTING_TOOLS
                else:
                    state = DriverState.DONE

            elif state is DriverState.EXECUTING_TOOLS:
                logger.info(f"LLM requested {len(pending)} tool calls")
                for tool_call in pending:
                    content = await self.tool_registry.execute_tool_call(tool_call)
                    transcript.append(ChatMessage.tool(tool_call.id, content))
                pending = []
                state = DriverState.AWAITING_COMPLETION

        logger.info(f"Agent produced final response after {result.iterations} calls")
        return result
