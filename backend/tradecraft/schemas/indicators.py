"""
CONTRACT 3: Indicator Series

Input: ChartSeriesRequest (candles + active indicator configs)
Output: ChartSeriesOutput

Every derived series is index-aligned with the candle list it was computed
from; `None` marks the warm-up region. Pure Python/NumPy - NO LLM involvement.
"""

from enum import Enum
from typing import Optional
from pydantic import Field

from tradecraft.schemas.chart import ChartModel, IndicatorConfig, Number
from tradecraft.schemas.market import Candle


DerivedSeries = list[Optional[float]]


# =============================================================================
# ENUMS
# =============================================================================


class CrossoverType(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"


class EventSource(str, Enum):
    MACD_SIGNAL = "MACD_SIGNAL"
    MACD_ZERO_LINE = "MACD_ZERO_LINE"
    RSI_OVERBOUGHT = "RSI_OVERBOUGHT"
    RSI_OVERSOLD = "RSI_OVERSOLD"
    PRICE_EMA = "PRICE_EMA"


# =============================================================================
# INPUT: ChartSeriesRequest
# =============================================================================


class ChartSeriesRequest(ChartModel):
    """
    Request for derived series.
    Sent by: API / chart session
    Received by: Indicator Service
    """

    candles: list[Candle]
    indicators: list[IndicatorConfig] = Field(default_factory=list)


# =============================================================================
# OUTPUT: Series Components
# =============================================================================


class CrossoverEvent(ChartModel):
    """Discrete crossing between two adjacent samples."""

    time: Number
    type: CrossoverType


class IndicatorEvents(ChartModel):
    """All events of one kind, in time order."""

    source: EventSource
    events: list[CrossoverEvent] = Field(default_factory=list)


class EMASeries(ChartModel):
    period: int
    values: DerivedSeries


class MACDSeries(ChartModel):
    fast: int
    slow: int
    signal_period: int
    macd: DerivedSeries
    signal: DerivedSeries
    histogram: DerivedSeries


class RSISeries(ChartModel):
    period: int
    values: DerivedSeries
    overbought: float = 70.0
    oversold: float = 30.0


# =============================================================================
# OUTPUT: ChartSeriesOutput (Complete Response)
# =============================================================================


class ChartSeriesOutput(ChartModel):
    """
    Derived series for every visible indicator.
    Returned by: Indicator Service
    Consumed by: Rendering layer
    """

    times: list[int] = Field(default_factory=list)
    ema: Optional[EMASeries] = None
    macd: Optional[MACDSeries] = None
    rsi: Optional[RSISeries] = None
    events: list[IndicatorEvents] = Field(default_factory=list)
