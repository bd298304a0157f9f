"""
Indicator Engine Service

CONTRACT:
    Input:  ChartSeriesRequest (candles + active indicator configs)
    Output: ChartSeriesOutput

RESPONSIBILITIES:
    - Calculate EMA, MACD and RSI series aligned with the candles
    - Detect signal-line, zero-line and level crossovers

PURE PYTHON - No LLM involvement.
Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from tradecraft.services.indicators.interface import IndicatorServiceInterface
from tradecraft.services.indicators.service import IndicatorService, get_indicator_service

__all__ = [
    "IndicatorServiceInterface",
    "IndicatorService",
    "get_indicator_service",
]
