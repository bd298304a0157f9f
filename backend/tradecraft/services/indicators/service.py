"""
Indicator Engine Service Implementation

Calculates derived series and crossover events from candle closes.
NO LLM INVOLVEMENT - Pure Python/NumPy calculations.
"""

import logging
from typing import Optional, Sequence

import numpy as np

from tradecraft.schemas.chart import (
    DEFAULT_INDICATOR_PARAMS,
    IndicatorConfig,
    IndicatorType,
    VisualizationState,
)
from tradecraft.schemas.indicators import (
    ChartSeriesOutput,
    ChartSeriesRequest,
    EMASeries,
    EventSource,
    IndicatorEvents,
    MACDSeries,
    RSISeries,
)
from tradecraft.schemas.market import Candle
from tradecraft.services.indicators.interface import IndicatorServiceInterface
from tradecraft.services.indicators.calculations import ema, macd, rsi, to_series
from tradecraft.services.indicators.events import (
    find_crossovers,
    find_level_crossovers,
    find_zero_line_crossovers,
)

logger = logging.getLogger(__name__)

RSI_OVERBOUGHT = 70.0
RSI_OVERSOLD = 30.0


def resolve_period(params: dict, key: str, default: int) -> int:
    """
    Read an integer period from indicator params.

    Missing or non-positive values fall back to `default`; fractional
    values are truncated.
    """
    value = params.get(key)
    if value is None:
        return default
    period = int(value)
    return period if period >= 1 else default


def _closes_and_times(candles: Sequence[Candle]) -> tuple[np.ndarray, list[int]]:
    closes = np.array([c.close for c in candles], dtype=float)
    times = [c.time for c in candles]
    return closes, times


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Computes EMA, MACD and RSI series for the active chart indicators.
    All calculations are deterministic and reproducible.
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    async def execute(self, input_data: ChartSeriesRequest) -> ChartSeriesOutput:
        """Calculate series for every visible indicator."""
        return self.calculate_series(input_data.candles, input_data.indicators)

    async def calculate_for_state(self, state: VisualizationState) -> ChartSeriesOutput:
        return self.calculate_series(state.candles, state.indicators)

    def calculate_series(
        self,
        candles: Sequence[Candle],
        indicators: Sequence[IndicatorConfig],
    ) -> ChartSeriesOutput:
        closes, times = _closes_and_times(candles)

        # One config per indicator; later entries win
        active: dict[IndicatorType, IndicatorConfig] = {}
        for config in indicators:
            if config.visible:
                active[config.name] = config

        ema_series: Optional[EMASeries] = None
        macd_series: Optional[MACDSeries] = None
        rsi_series: Optional[RSISeries] = None
        events: list[IndicatorEvents] = []

        if IndicatorType.EMA in active:
            ema_series, ema_events = self._calculate_ema(closes, times, active[IndicatorType.EMA])
            events.extend(ema_events)

        if IndicatorType.MACD in active:
            macd_series, macd_events = self._calculate_macd(closes, times, active[IndicatorType.MACD])
            events.extend(macd_events)

        if IndicatorType.RSI in active:
            rsi_series, rsi_events = self._calculate_rsi(closes, times, active[IndicatorType.RSI])
            events.extend(rsi_events)

        logger.debug(
            f"Calculated {len(active)} indicator(s) over {len(candles)} candles"
        )

        return ChartSeriesOutput(
            times=times,
            ema=ema_series,
            macd=macd_series,
            rsi=rsi_series,
            events=events,
        )

    def _calculate_ema(
        self, closes: np.ndarray, times: list[int], config: IndicatorConfig
    ) -> tuple[EMASeries, list[IndicatorEvents]]:
        defaults = DEFAULT_INDICATOR_PARAMS[IndicatorType.EMA]
        period = resolve_period(config.params, "period", defaults["period"])

        values = ema(closes, period)

        series = EMASeries(period=period, values=to_series(values))
        events = [
            IndicatorEvents(
                source=EventSource.PRICE_EMA,
                events=find_crossovers(closes, values, times),
            )
        ]
        return series, events

    def _calculate_macd(
        self, closes: np.ndarray, times: list[int], config: IndicatorConfig
    ) -> tuple[MACDSeries, list[IndicatorEvents]]:
        defaults = DEFAULT_INDICATOR_PARAMS[IndicatorType.MACD]
        fast = resolve_period(config.params, "fast", defaults["fast"])
        slow = resolve_period(config.params, "slow", defaults["slow"])
        signal = resolve_period(config.params, "signal", defaults["signal"])

        macd_line, signal_line, histogram = macd(closes, fast, slow, signal)

        series = MACDSeries(
            fast=fast,
            slow=slow,
            signal_period=signal,
            macd=to_series(macd_line),
            signal=to_series(signal_line),
            histogram=to_series(histogram),
        )
        events = [
            IndicatorEvents(
                source=EventSource.MACD_SIGNAL,
                events=find_crossovers(macd_line, signal_line, times),
            ),
            IndicatorEvents(
                source=EventSource.MACD_ZERO_LINE,
                events=find_zero_line_crossovers(macd_line, times),
            ),
        ]
        return series, events

    def _calculate_rsi(
        self, closes: np.ndarray, times: list[int], config: IndicatorConfig
    ) -> tuple[RSISeries, list[IndicatorEvents]]:
        defaults = DEFAULT_INDICATOR_PARAMS[IndicatorType.RSI]
        period = resolve_period(config.params, "period", defaults["period"])

        values = rsi(closes, period)

        series = RSISeries(
            period=period,
            values=to_series(values),
            overbought=RSI_OVERBOUGHT,
            oversold=RSI_OVERSOLD,
        )
        events = [
            IndicatorEvents(
                source=EventSource.RSI_OVERBOUGHT,
                events=find_level_crossovers(values, RSI_OVERBOUGHT, times),
            ),
            IndicatorEvents(
                source=EventSource.RSI_OVERSOLD,
                events=find_level_crossovers(values, RSI_OVERSOLD, times),
            ),
        ]
        return series, events

    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        return True


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService()
    return _service_instance
