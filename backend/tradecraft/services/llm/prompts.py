"""
LLM Prompt Templates & Tool Definition

The chart assistant talks to the chart only through the `emit_chart_actions`
tool. Its parameter schema is generated from the command models, so the
tool definition and the validator can never drift apart.

CRITICAL RULES (enforced in the system prompt):
- Education only, never buy/sell advice
- Demonstrate every concept on the chart
- Offer lesson options for further exploration
"""

import copy
import json
from typing import Any

from tradecraft.schemas.chart import VisualizationState, chart_command_adapter

# =============================================================================
# SYSTEM PROMPT
# =============================================================================

SYSTEM_PROMPT = """You are Tradecraft, an expert trading education assistant. Your role is to teach trading concepts through interactive chart demonstrations.

## Core Principles:
1. **Educational Focus**: Explain concepts clearly for beginners and intermediate traders
2. **Interactive Learning**: Always use chart actions to demonstrate concepts visually
3. **No Financial Advice**: Never give buy/sell recommendations. Focus on education only.
4. **Real Examples**: Reference the actual chart data to illustrate concepts

## When explaining indicators (MACD, RSI, EMA):
1. First, add the indicator to the chart using emit_chart_actions
2. Explain what the indicator measures and how to interpret it
3. Describe common patterns and signals
4. Provide interactive lesson options for deeper exploration

## Chart Actions You Can Use:
- ADD_INDICATOR: Add MACD, RSI, or EMA to the chart
- HIGHLIGHT_POINTS: Mark specific candles or indicator values
- HIGHLIGHT_REGION: Highlight a time range
- ADD_ANNOTATION: Add text labels to specific points
- FOCUS_RANGE: Zoom to a specific time window
- CLEAR_HIGHLIGHTS: Remove all highlights
- CLEAR_INDICATORS: Remove all indicators

## Response Format:
1. Provide a clear text explanation
2. Call emit_chart_actions to update the chart
3. Include lessonOptions for interactive exploration

Remember: You're teaching, not advising. Help users understand concepts, not make trading decisions."""

CHART_CONTEXT_TEMPLATE = """

[Current Chart Context]
Symbol: {symbol}
Timeframe: {timeframe}
Active Indicators: {indicators}
Visible Range: {visible_range}
"""

EMIT_CHART_ACTIONS_TOOL_NAME = "emit_chart_actions"


# =============================================================================
# TOOL DEFINITION
# =============================================================================


def build_emit_chart_actions_tool() -> dict[str, Any]:
    """OpenAI-style function tool for emitting chart commands and lessons."""
    command_schema = copy.deepcopy(chart_command_adapter.json_schema(by_alias=True))
    # $refs point at the document root, so definitions move up to `parameters`
    definitions = command_schema.pop("$defs", {})

    parameters: dict[str, Any] = {
        "type": "object",
        "properties": {
            "actions": {
                "type": "array",
                "description": "List of chart actions to execute",
                "items": command_schema,
            },
            "lessonOptions": {
                "type": "array",
                "description": "Interactive lesson options that the user can click to explore further",
                "items": {
                    "type": "object",
                    "properties": {
                        "id": {"type": "string"},
                        "title": {"type": "string"},
                        "description": {"type": "string"},
                        "actions": {"type": "array", "items": command_schema},
                    },
                    "required": ["id", "title", "actions"],
                },
            },
        },
        "required": ["actions"],
    }
    if definitions:
        parameters["$defs"] = definitions

    return {
        "type": "function",
        "function": {
            "name": EMIT_CHART_ACTIONS_TOOL_NAME,
            "description": (
                "Emit chart actions to update the chart visualization. Use this to add "
                "indicators, highlight points, focus on specific time ranges, or annotate the chart."
            ),
            "parameters": parameters,
        },
    }


# =============================================================================
# CHART CONTEXT
# =============================================================================


def build_chart_context_block(state: VisualizationState) -> str:
    """Context appended to the latest user message."""
    if state.indicators:
        indicators = ", ".join(
            f"{config.name.value}({json.dumps(config.params, separators=(',', ':'))})"
            for config in state.indicators
        )
    else:
        indicators = "None"

    if state.visible_from is not None and state.visible_to is not None:
        visible_range = f"{state.visible_from} - {state.visible_to}"
    else:
        visible_range = "Full history"

    return CHART_CONTEXT_TEMPLATE.format(
        symbol=state.symbol,
        timeframe=state.timeframe.value,
        indicators=indicators,
        visible_range=visible_range,
    )
