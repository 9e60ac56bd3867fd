"""Tool registry: definitions, schema generation, and dispatch."""

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from openai.types.chat import ChatCompletionToolParam
from pydantic import BaseModel, ValidationError

from domain.entities import ToolCallRequest
from domain.exceptions import ToolArgumentsError, ToolCallError, UnknownToolError

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Any], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class ToolDef:
    """A tool advertised to the model.

    The parameter schema is derived from ``arguments_model`` so validation and
    the advertised schema cannot drift apart.
    """

    name: str
    description: str
    arguments_model: type[BaseModel]
    handler: ToolHandler

    @property
    def parameters(self) -> dict[str, Any]:
        return self.arguments_model.model_json_schema()

    def to_spec(self) -> ChatCompletionToolParam:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }

    async def execute(self, arguments: dict[str, Any]) -> Any:
        """Validate arguments and run the handler.

        Raises:
            ToolArgumentsError: Arguments do not satisfy the schema
        """
        try:
            parsed = self.arguments_model.model_validate(arguments)
        except ValidationError as e:
            raise ToolArgumentsError(
                self.name, e.errors(include_url=False, include_context=False)
            ) from e
        return await self.handler(parsed)


def parse_arguments(raw_arguments: str | None) -> dict[str, Any]:
    """Decode JSON tool arguments; anything but a JSON object becomes {}."""
    if not raw_arguments:
        return {}
    try:
        arguments = json.loads(raw_arguments)
    except json.JSONDecodeError as e:
        logger.warning(f"Malformed tool arguments treated as empty: {e}")
        return {}
    if not isinstance(arguments, dict):
        logger.warning("Non-object tool arguments treated as empty")
        return {}
    return arguments


def serialize_result(result: Any) -> str:
    """Serialize any tool result to a JSON string."""
    if isinstance(result, BaseModel):
        result = result.model_dump(mode="json")
    elif isinstance(result, list):
        result = [
            item.model_dump(mode="json") if isinstance(item, BaseModel) else item
            for item in result
        ]
    return json.dumps(result, ensure_ascii=False, default=str)


class ToolRegistry:
    """Mapping from tool name to its definition."""

    def __init__(self, tools: list[ToolDef] | None = None) -> None:
        self._tools: dict[str, ToolDef] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: ToolDef) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool

    def get(self, name: str) -> ToolDef | None:
        return self._tools.get(name)

    @property
    def names(self) -> list[str]:
        return list(self._tools)

    def to_specs(self) -> list[ChatCompletionToolParam]:
        """Tool definitions in the chat completions format."""
        return [tool.to_spec() for tool in self._tools.values()]

    async def execute_tool_call(self, tool_call: ToolCallRequest) -> str:
        """Execute one tool call requested by the model.

        Argument validation failures come back as an error-shaped result so
        the model can correct itself.

        Args:
            tool_call: Tool call request from the model

        Returns:
            str: JSON-encoded tool result

        Raises:
            ToolCallError: The call has no function name
            UnknownToolError: No tool is registered under that name
        """
        name = tool_call.function.name
        if not name:
            raise ToolCallError("Tool call missing function name")

        tool = self._tools.get(name)
        if tool is None:
            logger.error(f"Unknown tool requested: {name}")
            raise UnknownToolError(name)

        arguments = parse_arguments(tool_call.function.arguments)
        logger.info(f"Executing tool: {name} with args: {arguments}")

        try:
            result = await tool.execute(arguments)
        except ToolArgumentsError as e:
            logger.warning(f"{e}: {e.details}")
            result = {"error": str(e), "details": e.details}

        return serialize_result(result)
