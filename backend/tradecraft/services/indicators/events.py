"""
Crossover Event Detection

Turns two aligned derived series (or one series and a constant level) into
discrete bullish/bearish crossing events.
"""

import math
from typing import Optional, Sequence, Union

import numpy as np

from tradecraft.schemas.indicators import CrossoverEvent, CrossoverType

Sample = Optional[float]
SeriesLike = Union[np.ndarray, Sequence[Sample]]


def _is_undefined(value: Sample) -> bool:
    return value is None or math.isnan(value)


def _classify(prev_a: float, prev_b: float, curr_a: float, curr_b: float) -> Optional[CrossoverType]:
    # Inclusive on the previous sample, strict on the current one
    if prev_a <= prev_b and curr_a > curr_b:
        return CrossoverType.BULLISH
    if prev_a >= prev_b and curr_a < curr_b:
        return CrossoverType.BEARISH
    return None


def find_crossovers(
    series_a: SeriesLike,
    series_b: Union[SeriesLike, float],
    times: Sequence[float],
) -> list[CrossoverEvent]:
    """
    Find points where `series_a` crosses `series_b`.

    Bullish when A moves from <= B to > B, bearish when A moves from >= B
    to < B. Any adjacent pair touching an undefined sample is skipped.
    `series_b` may be a constant. Iterates the common prefix of the inputs.
    """
    if isinstance(series_b, (int, float)):
        series_b = [float(series_b)] * len(series_a)

    length = min(len(series_a), len(series_b), len(times))
    events: list[CrossoverEvent] = []

    for i in range(1, length):
        prev_a, curr_a = series_a[i - 1], series_a[i]
        prev_b, curr_b = series_b[i - 1], series_b[i]

        if any(_is_undefined(v) for v in (prev_a, curr_a, prev_b, curr_b)):
            continue

        crossover = _classify(prev_a, prev_b, curr_a, curr_b)
        if crossover is not None:
            time = times[i]
            if isinstance(time, np.generic):
                time = time.item()
            events.append(CrossoverEvent(time=time, type=crossover))

    return events


def find_level_crossovers(
    series: SeriesLike, level: float, times: Sequence[float]
) -> list[CrossoverEvent]:
    """Crossings of a constant level (e.g. RSI 70/30)."""
    return find_crossovers(series, float(level), times)


def find_zero_line_crossovers(
    series: SeriesLike, times: Sequence[float]
) -> list[CrossoverEvent]:
    """Crossings of the zero line (e.g. MACD line)."""
    return find_level_crossovers(series, 0.0, times)
