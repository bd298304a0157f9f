"""
Mock Candle Generator

Generates realistic mock candles for development and testing.
Prices are a seeded random walk: the same symbol/timeframe always yields
the same price path.
"""

import random
import time as time_module
import zlib
from typing import Optional

from tradecraft.schemas.market import Candle
from tradecraft.services.market_data.interface import CandleSourceInterface


# Base prices for common symbols
SYMBOL_BASE_PRICES = {
    "BTCUSDT": 42000.0,
    "ETHUSDT": 2300.0,
    "BNBUSDT": 310.0,
    "SOLUSDT": 100.0,
    "XRPUSDT": 0.6,
}

# Timeframe to seconds
TIMEFRAME_SECONDS = {
    "1h": 3_600,
    "4h": 14_400,
    "1d": 86_400,
}


def get_base_price(symbol: str) -> float:
    """Get base price for a symbol."""
    return SYMBOL_BASE_PRICES.get(symbol.upper(), 100.0)


def generate_mock_candles(
    symbol: str,
    timeframe: str,
    limit: int,
    end: Optional[float] = None,
) -> list[Candle]:
    """Generate `limit` mock candles ending at `end` (default: now)."""
    interval = TIMEFRAME_SECONDS.get(timeframe, TIMEFRAME_SECONDS["1d"])
    rng = random.Random(zlib.crc32(f"{symbol.upper()}:{timeframe}".encode()))

    if end is None:
        end = time_module.time()
    last_open = int(end) // interval * interval
    timestamp = last_open - interval * (limit - 1)

    price = get_base_price(symbol)
    volatility = price * 0.02  # 2% volatility

    candles = []
    for _ in range(limit):
        # Random walk
        change = (rng.random() - 0.5) * volatility

        open_price = price
        close_price = max(open_price + change, volatility * 0.1)
        high_price = max(open_price, close_price) + rng.random() * volatility * 0.5
        low_price = max(min(open_price, close_price) - rng.random() * volatility * 0.5, 0.0)

        candles.append(
            Candle(
                time=timestamp,
                open=round(open_price, 4),
                high=round(high_price, 4),
                low=round(low_price, 4),
                close=round(close_price, 4),
                volume=round(rng.uniform(100.0, 5_000.0), 2),
            )
        )

        price = close_price
        timestamp += interval

    return candles


class MockCandleSource(CandleSourceInterface):
    """Offline candle source backed by generate_mock_candles."""

    @property
    def name(self) -> str:
        return "MockCandleSource"

    async def fetch_candles(
        self,
        symbol: str,
        timeframe: str,
        limit: int = 500,
        start: Optional[float] = None,
        end: Optional[float] = None,
    ) -> list[Candle]:
        return generate_mock_candles(symbol, timeframe, max(1, limit), end)

    async def health_check(self) -> bool:
        return True
