"""Chat logic module.

This module contains the tool-calling completion driver and the conversation
service that wires context resolution, history and the driver together.
"""

from logic.chat.driver import (
    CompletionDriver,
    CompletionProvider,
    DriverResult,
    DriverState,
)
from logic.chat.service import ConversationService

__all__ = [
    "CompletionDriver",
    "CompletionProvider",
    "ConversationService",
    "DriverResult",
    "DriverState",
]
