"""
Forum Tools - Tool Use System
Tool schemas and the executor that runs them.

Usage:
    from tools import get_tool_definitions, get_tool_executor

    tools = get_tool_definitions()
    result = get_tool_executor().execute("mediavida_page", {"url": url, "page": 2}, "toolu_01")
    if result.is_error:
        ...
"""

from tools.definitions import get_tool_definitions
from tools.executor import ToolExecutor, ToolResult, get_tool_executor

__all__ = ["get_tool_definitions", "ToolExecutor", "ToolResult", "get_tool_executor"]
