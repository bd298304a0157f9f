"""
CONTRACT 1: Market Data

Input: symbol + timeframe (+ optional bounds)
Output: MarketDataResponse

Candles are produced by a candle source (Binance, mock) and are read-only
to the chart engine.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class Timeframe(str, Enum):
    H1 = "1h"
    H4 = "4h"
    D1 = "1d"


# =============================================================================
# CANDLES
# =============================================================================


class Candle(BaseModel):
    """
    Single candlestick.

    `time` is the candle open time in epoch seconds. Within one series
    candles are ordered by strictly increasing `time`.
    """

    time: int
    open: float
    high: float
    low: float
    close: float
    volume: Optional[float] = None


class MarketDataResponse(BaseModel):
    """Candles for one symbol/timeframe."""

    symbol: str
    timeframe: str
    candles: list[Candle] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "symbol": "BTCUSDT",
                "timeframe": "1d",
                "candles": [
                    {
                        "time": 1704067200,
                        "open": 42283.58,
                        "high": 44184.1,
                        "low": 42180.77,
                        "close": 44179.55,
                        "volume": 27174.29,
                    }
                ],
            }
        }
