"""Tools logic module.

This module contains the tool catalog advertised to the model, argument
validation and tool execution.
"""

from logic.tools.catalog import build_default_registry
from logic.tools.registry import ToolDef, ToolRegistry

__all__ = ["ToolDef", "ToolRegistry", "build_default_registry"]
