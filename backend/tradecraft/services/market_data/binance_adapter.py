"""
Binance Candle Adapter

Fetches REAL candles from the Binance public klines endpoint.
Base URLs are tried in order until one answers.
"""

import asyncio
import logging
from typing import Any, Optional, Sequence

import aiohttp

from tradecraft.core.config import settings
from tradecraft.schemas.market import Candle
from tradecraft.services.market_data.interface import CandleFetchError, CandleSourceInterface

logger = logging.getLogger(__name__)


# Timeframe mapping to Binance interval format
INTERVAL_MAP = {
    "1h": "1h",
    "4h": "4h",
    "1d": "1d",
}

MAX_KLINES_LIMIT = 1000


def parse_kline(kline: Sequence[Any]) -> Candle:
    """
    Convert one Binance kline row to a Candle.

    Row layout: [open_time_ms, open, high, low, close, volume, ...] with
    prices and volume as decimal strings.
    """
    return Candle(
        time=int(kline[0]) // 1000,
        open=float(kline[1]),
        high=float(kline[2]),
        low=float(kline[3]),
        close=float(kline[4]),
        volume=float(kline[5]),
    )


def build_klines_params(
    symbol: str,
    timeframe: str,
    limit: int,
    start: Optional[float] = None,
    end: Optional[float] = None,
) -> dict[str, Any]:
    """Query parameters for /klines. Bounds are seconds, Binance wants ms."""
    params: dict[str, Any] = {
        "symbol": symbol.upper().strip(),
        "interval": INTERVAL_MAP.get(timeframe, "1d"),
        "limit": max(1, min(int(limit), MAX_KLINES_LIMIT)),
    }
    if start is not None:
        params["startTime"] = int(start * 1000)
    if end is not None:
        params["endTime"] = int(end * 1000)
    return params


class BinanceCandleSource(CandleSourceInterface):
    """Binance spot klines with endpoint fallback."""

    def __init__(
        self,
        base_urls: Optional[Sequence[str]] = None,
        timeout: Optional[float] = None,
    ):
        self._base_urls = list(base_urls or settings.binance_base_urls)
        self._timeout = timeout if timeout is not None else settings.candle_fetch_timeout
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def name(self) -> str:
        return "BinanceCandleSource"

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout),
                headers={"User-Agent": "Tradecraft/1.0"},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def fetch_candles(
        self,
        symbol: str,
        timeframe: str,
        limit: int = 500,
        start: Optional[float] = None,
        end: Optional[float] = None,
    ) -> list[Candle]:
        params = build_klines_params(symbol, timeframe, limit, start, end)
        session = await self._ensure_session()
        last_error: Optional[str] = None

        for base_url in self._base_urls:
            try:
                logger.info(f"Fetching {params['symbol']} {params['interval']} klines from {base_url}")

                async with session.get(f"{base_url}/klines", params=params) as resp:
                    if resp.status != 200:
                        error_text = await resp.text()
                        logger.warning(f"{base_url} failed: {resp.status} - {error_text[:200]}")
                        last_error = f"Binance API error: {resp.status}"
                        continue

                    data = await resp.json()

                candles = [parse_kline(row) for row in data]
                logger.info(f"Got {len(candles)} candles for {params['symbol']} from {base_url}")
                return candles

            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.warning(f"{base_url} request error: {e}")
                last_error = str(e) or type(e).__name__
            except (ValueError, TypeError, IndexError) as e:
                logger.warning(f"{base_url} returned malformed klines: {e}")
                last_error = f"Malformed klines: {e}"

        logger.error(f"All Binance endpoints failed for {params['symbol']}: {last_error}")
        raise CandleFetchError(
            self.name,
            "Failed to fetch market data from all endpoints",
            {"symbol": params["symbol"], "interval": params["interval"], "last_error": last_error},
        )

    async def health_check(self) -> bool:
        """Ping the first reachable endpoint."""
        session = await self._ensure_session()
        for base_url in self._base_urls:
            try:
                async with session.get(f"{base_url}/ping") as resp:
                    if resp.status == 200:
                        return True
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.debug(f"Binance ping failed for {base_url}: {e}")
        return False
