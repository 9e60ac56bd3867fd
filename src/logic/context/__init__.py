"""Context logic module.

This module resolves the system prompt that opens a new conversation.
"""

from logic.context.resolver import BASE_PROMPT, ContextResolver

__all__ = ["BASE_PROMPT", "ContextResolver"]
