"""
Market Data Service

CONTRACT:
    Input:  symbol, timeframe, limit (+ optional start/end seconds)
    Output: list[Candle]

RESPONSIBILITIES:
    - Fetch candles from Binance (with endpoint fallback)
    - Normalize klines to the Candle schema
    - Provide deterministic mock candles for development

NO LLM INVOLVEMENT - Pure data fetching and transformation.
"""

import logging
from typing import Optional

from tradecraft.core.config import settings
from tradecraft.services.market_data.interface import CandleFetchError, CandleSourceInterface
from tradecraft.services.market_data.binance_adapter import BinanceCandleSource
from tradecraft.services.market_data.mock_data import MockCandleSource

logger = logging.getLogger(__name__)

_candle_source: Optional[CandleSourceInterface] = None


def get_candle_source() -> CandleSourceInterface:
    """Get or create the configured candle source."""
    global _candle_source
    if _candle_source is None:
        if settings.use_mock_data:
            logger.info("Using mock candle source")
            _candle_source = MockCandleSource()
        else:
            _candle_source = BinanceCandleSource()
    return _candle_source


async def close_candle_source() -> None:
    """Close the candle source connections, if one was created."""
    global _candle_source
    if _candle_source is not None:
        await _candle_source.close()
        _candle_source = None


__all__ = [
    "CandleFetchError",
    "CandleSourceInterface",
    "BinanceCandleSource",
    "MockCandleSource",
    "get_candle_source",
    "close_candle_source",
]
