"""
LLM Contract Helpers

The chat transport itself lives outside this backend. What lives here is the
contract with the model: the system prompt, the emit_chart_actions tool
definition, the chart context block and the parser for tool call arguments.
"""

from tradecraft.services.llm.prompts import (
    EMIT_CHART_ACTIONS_TOOL_NAME,
    SYSTEM_PROMPT,
    build_chart_context_block,
    build_emit_chart_actions_tool,
)
from tradecraft.services.llm.lessons import STARTER_LESSONS, get_starter_lesson
from tradecraft.services.llm.tool_calls import ToolCallResult, parse_tool_call_arguments

__all__ = [
    "EMIT_CHART_ACTIONS_TOOL_NAME",
    "SYSTEM_PROMPT",
    "build_chart_context_block",
    "build_emit_chart_actions_tool",
    "STARTER_LESSONS",
    "get_starter_lesson",
    "ToolCallResult",
    "parse_tool_call_arguments",
]
