"""
Tradecraft Schema Contracts

This module defines all JSON contracts between system components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from tradecraft.schemas.market import (
    Candle,
    MarketDataResponse,
    Timeframe,
)
from tradecraft.schemas.chart import (
    Annotation,
    ChartCommand,
    CommandRejection,
    HighlightPoint,
    HighlightRegion,
    IndicatorConfig,
    IndicatorType,
    LessonOption,
    PaneType,
    TimeRange,
    VisualizationState,
    chart_command_adapter,
)
from tradecraft.schemas.indicators import (
    ChartSeriesOutput,
    ChartSeriesRequest,
    CrossoverEvent,
    CrossoverType,
    EMASeries,
    EventSource,
    IndicatorEvents,
    MACDSeries,
    RSISeries,
)

__all__ = [
    # Market
    "Candle",
    "MarketDataResponse",
    "Timeframe",
    # Chart
    "Annotation",
    "ChartCommand",
    "CommandRejection",
    "HighlightPoint",
    "HighlightRegion",
    "IndicatorConfig",
    "IndicatorType",
    "LessonOption",
    "PaneType",
    "TimeRange",
    "VisualizationState",
    "chart_command_adapter",
    # Indicators
    "ChartSeriesOutput",
    "ChartSeriesRequest",
    "CrossoverEvent",
    "CrossoverType",
    "EMASeries",
    "EventSource",
    "IndicatorEvents",
    "MACDSeries",
    "RSISeries",
]
