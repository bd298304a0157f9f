"""
Technical Indicator Calculations

Pure Python/NumPy implementations of technical indicators.
NO LLM INVOLVEMENT - All math is deterministic.

Every function returns an array of the same length as its input, with NaN
marking the warm-up region. Insufficient input never raises.
"""

from typing import Optional, Sequence, Union

import numpy as np

ArrayLike = Union[np.ndarray, Sequence[float]]


def _as_array(data: ArrayLike) -> np.ndarray:
    return np.asarray(data, dtype=float)


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def ema(data: ArrayLike, period: int) -> np.ndarray:
    """
    Exponential Moving Average.

    Seeded with the simple mean of the first `period` values at index
    `period - 1`; NaN before that.
    """
    data = _as_array(data)
    result = np.full(len(data), np.nan)
    if period < 1 or len(data) < period:
        return result

    multiplier = 2 / (period + 1)

    # Start with SMA
    result[period - 1] = np.sum(data[:period]) / period

    # Calculate EMA
    for i in range(period, len(data)):
        result[i] = (data[i] - result[i - 1]) * multiplier + result[i - 1]

    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def rsi(closes: ArrayLike, period: int = 14) -> np.ndarray:
    """Relative Strength Index (Wilder smoothing)."""
    closes = _as_array(closes)
    result = np.full(len(closes), np.nan)
    if period < 1 or len(closes) < period + 1:
        return result

    # Calculate price changes
    deltas = np.diff(closes)

    # Separate gains and losses
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    # First average
    avg_gain = np.sum(gains[:period]) / period
    avg_loss = np.sum(losses[:period]) / period

    result[period] = _rsi_value(avg_gain, avg_loss)

    # Subsequent RSI values using smoothed averages
    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        result[i + 1] = _rsi_value(avg_gain, avg_loss)

    return result


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def macd(
    closes: ArrayLike,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    MACD (Moving Average Convergence Divergence).

    The signal line is an EMA over the defined MACD samples only, so its
    warm-up starts at the first defined MACD value rather than index 0.

    Returns: (macd_line, signal_line, histogram)
    """
    closes = _as_array(closes)
    fast_ema = ema(closes, fast_period)
    slow_ema = ema(closes, slow_period)

    # NaN wherever either EMA is undefined
    macd_line = fast_ema - slow_ema

    # Index table: compacted position -> original position
    defined_idx = np.flatnonzero(~np.isnan(macd_line))
    compact_signal = ema(macd_line[defined_idx], signal_period)

    signal_line = np.full(len(closes), np.nan)
    signal_line[defined_idx] = compact_signal

    # Histogram
    histogram = macd_line - signal_line

    return macd_line, signal_line, histogram


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def get_last_valid(arr: ArrayLike) -> Optional[float]:
    """Get last non-NaN value from array."""
    arr = _as_array(arr)
    valid = arr[~np.isnan(arr)]
    return float(valid[-1]) if len(valid) > 0 else None


def first_valid_index(arr: ArrayLike) -> Optional[int]:
    """Index of the first non-NaN value, or None if there is none."""
    defined = np.flatnonzero(~np.isnan(_as_array(arr)))
    return int(defined[0]) if len(defined) > 0 else None


def to_series(arr: ArrayLike) -> list[Optional[float]]:
    """Convert a NaN-padded array to the wire shape (None for undefined)."""
    return [None if np.isnan(v) else float(v) for v in _as_array(arr)]
