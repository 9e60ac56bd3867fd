"""Domain exceptions raised by the conversation core."""

from typing import Any


class ToolCallError(Exception):
    """Raised when a tool call request violates the tool-calling protocol."""


class UnknownToolError(ToolCallError):
    """Raised when the model requests a tool that is not registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ToolArgumentsError(Exception):
    """Raised by a tool when its arguments do not satisfy its schema."""

    def __init__(self, tool_name: str, details: list[dict[str, Any]]) -> None:
        self.tool_name = tool_name
        self.details = details
        super().__init__(f"Invalid arguments for tool '{tool_name}'")


class WarehouseUnavailableError(Exception):
    """Raised when the vendor warehouse is not configured."""


class PersonaUnavailableError(Exception):
    """Raised when the persona context API cannot provide a context."""
