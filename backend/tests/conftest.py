# tests/conftest.py
import pytest

from tradecraft.schemas.chart import VisualizationState
from tradecraft.schemas.market import Candle, Timeframe
from tradecraft.services.market_data.interface import CandleFetchError, CandleSourceInterface
from tradecraft.services.market_data.mock_data import generate_mock_candles


def make_candles(closes, start=1_700_000_000, step=86_400):
    """Candles with the given closes at evenly spaced times."""
    return [
        Candle(time=start + i * step, open=c, high=c + 1, low=c - 1, close=c, volume=1000.0)
        for i, c in enumerate(closes)
    ]


class FakeCandleSource(CandleSourceInterface):
    """Records every fetch and serves deterministic candles per symbol."""

    def __init__(self, candles_by_symbol=None):
        self.candles_by_symbol = candles_by_symbol or {}
        self.calls = []

    @property
    def name(self) -> str:
        return "FakeCandleSource"

    async def fetch_candles(self, symbol, timeframe, limit=500, start=None, end=None):
        self.calls.append(
            {"symbol": symbol, "timeframe": timeframe, "limit": limit, "start": start, "end": end}
        )
        if symbol in self.candles_by_symbol:
            return list(self.candles_by_symbol[symbol])
        return generate_mock_candles(symbol, timeframe, min(limit, 120))

    async def health_check(self) -> bool:
        return True


class FailingCandleSource(FakeCandleSource):
    """Every fetch fails after being recorded."""

    @property
    def name(self) -> str:
        return "FailingCandleSource"

    async def fetch_candles(self, symbol, timeframe, limit=500, start=None, end=None):
        self.calls.append(
            {"symbol": symbol, "timeframe": timeframe, "limit": limit, "start": start, "end": end}
        )
        raise CandleFetchError(self.name, "Failed to fetch market data from all endpoints")

    async def health_check(self) -> bool:
        return False


@pytest.fixture
def sample_candles():
    """60 daily candles with a rise, a fall and a recovery."""
    closes = (
        [100 + i for i in range(20)]
        + [119 - 2 * i for i in range(20)]
        + [81 + 1.5 * i for i in range(20)]
    )
    return make_candles(closes)


@pytest.fixture
def btc_candles():
    return make_candles([40_000 + 100 * i for i in range(50)])


@pytest.fixture
def eth_candles():
    return make_candles([2_000 + 5 * i for i in range(50)])


@pytest.fixture
def fake_source(btc_candles, eth_candles):
    return FakeCandleSource({"BTCUSDT": btc_candles, "ETHUSDT": eth_candles})


@pytest.fixture
def failing_source():
    return FailingCandleSource()


@pytest.fixture
def base_state(btc_candles):
    return VisualizationState(symbol="BTCUSDT", timeframe=Timeframe.D1, candles=btc_candles)
