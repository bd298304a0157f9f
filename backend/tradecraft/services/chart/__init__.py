"""
Chart Command Service

CONTRACT:
    Input:  ChartBatch (VisualizationState + untrusted command payloads)
    Output: BatchResult (new VisualizationState + validation report)

RESPONSIBILITIES:
    - Validate LLM-generated commands against the closed command schema
    - Apply commands sequentially to the chart state
    - Reload candles on symbol/timeframe changes
    - Keep one state per chart session, queueing concurrent batches

The validator is the only trust boundary: payloads are never executed or
interpreted beyond the schema.
"""

from tradecraft.services.chart.validator import (
    CommandRejectedError,
    ValidationReport,
    parse_lesson_options,
    validate_command,
    validate_commands,
)
from tradecraft.services.chart.interface import BatchResult, ChartBatch, ChartEngineInterface
from tradecraft.services.chart.engine import ChartCommandEngine, reduce_state
from tradecraft.services.chart.session import (
    ChartSession,
    ChartSessionStore,
    SessionNotFoundError,
    create_default_state,
    get_session_store,
)

__all__ = [
    # Validator
    "CommandRejectedError",
    "ValidationReport",
    "parse_lesson_options",
    "validate_command",
    "validate_commands",
    # Engine
    "BatchResult",
    "ChartBatch",
    "ChartEngineInterface",
    "ChartCommandEngine",
    "reduce_state",
    # Sessions
    "ChartSession",
    "ChartSessionStore",
    "SessionNotFoundError",
    "create_default_state",
    "get_session_store",
]
