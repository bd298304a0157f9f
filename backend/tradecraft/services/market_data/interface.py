"""
Candle Source Interface

Defines the contract for fetching raw candles.
"""

from abc import ABC, abstractmethod
from typing import Optional

from tradecraft.schemas.market import Candle
from tradecraft.services.base import ExternalAPIError


class CandleFetchError(ExternalAPIError):
    """Candles could not be fetched from any endpoint."""
    pass


class CandleSourceInterface(ABC):
    """
    Candle Source Contract.

    INPUT:
        - symbol: e.g. "BTCUSDT"
        - timeframe: "1h" / "4h" / "1d" (sources fall back to "1d")
        - limit: maximum number of candles
        - start/end: optional bounds in epoch seconds, passed through as-is

    OUTPUT: list[Candle], ordered by strictly increasing time

    RAISES: CandleFetchError
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Source name for logging."""
        pass

    @abstractmethod
    async def fetch_candles(
        self,
        symbol: str,
        timeframe: str,
        limit: int = 500,
        start: Optional[float] = None,
        end: Optional[float] = None,
    ) -> list[Candle]:
        """Fetch candles for a symbol/timeframe."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check connectivity to the source."""
        pass

    async def close(self) -> None:
        """Release any held connections."""
        return None
