# tests/test_calculations.py
import math

import numpy as np
import pytest

from tradecraft.services.indicators.calculations import (
    ema,
    first_valid_index,
    get_last_valid,
    macd,
    rsi,
    to_series,
)


class TestEMA:
    def test_seed_is_simple_mean(self):
        result = to_series(ema(list(range(1, 11)), 3))

        assert result[0] is None
        assert result[1] is None
        assert result[2] == 2.0
        assert result[3] == 3.0

    def test_length_matches_input(self):
        data = np.linspace(10, 20, 37)
        assert len(ema(data, 5)) == 37

    @pytest.mark.parametrize("n,k", [(10, 1), (10, 3), (30, 10), (10, 10)])
    def test_defined_count(self, n, k):
        values = ema(np.arange(n, dtype=float), k)
        assert np.count_nonzero(~np.isnan(values)) == n - k + 1
        assert first_valid_index(values) == k - 1

    def test_short_input_is_all_undefined(self):
        assert to_series(ema([1.0, 2.0], 3)) == [None, None]

    def test_empty_input(self):
        assert len(ema([], 3)) == 0

    def test_non_positive_period_is_all_undefined(self):
        assert all(np.isnan(ema([1.0, 2.0, 3.0], 0)))

    def test_constant_series_is_constant(self):
        values = ema([5.0] * 20, 7)
        assert np.allclose(values[6:], 5.0)


class TestRSI:
    def test_first_value_at_period(self):
        closes = [44, 44.3, 44.1, 43.6, 44.3, 44.8, 45.1, 45.4, 45.8, 46.1]
        values = rsi(closes, 5)

        assert first_valid_index(values) == 5
        assert np.count_nonzero(~np.isnan(values)) == len(closes) - 5

    def test_bounded(self, sample_candles):
        values = rsi([c.close for c in sample_candles], 14)
        defined = values[~np.isnan(values)]

        assert len(defined) > 0
        assert np.all(defined >= 0)
        assert np.all(defined <= 100)

    def test_constant_series_is_100(self):
        values = rsi([10.0] * 20, 14)
        assert values[14] == 100.0
        assert values[-1] == 100.0

    def test_strictly_rising_is_100(self):
        values = rsi(np.arange(1, 31, dtype=float), 14)
        assert get_last_valid(values) == 100.0

    def test_strictly_falling_is_0(self):
        values = rsi(np.arange(30, 0, -1, dtype=float), 14)
        assert get_last_valid(values) == 0.0

    def test_short_input_is_all_undefined(self):
        # RSI needs period + 1 closes
        assert to_series(rsi([1.0] * 14, 14)) == [None] * 14


class TestMACD:
    def test_lengths_match_input(self, sample_candles):
        closes = [c.close for c in sample_candles]
        macd_line, signal_line, histogram = macd(closes, 12, 26, 9)

        assert len(macd_line) == len(closes)
        assert len(signal_line) == len(closes)
        assert len(histogram) == len(closes)

    def test_signal_warmup_starts_at_first_macd_value(self):
        closes = np.linspace(1, 40, 40) + np.sin(np.arange(40))
        macd_line, signal_line, histogram = macd(closes, 3, 5, 4)

        first_macd = first_valid_index(macd_line)
        assert first_macd == 4
        assert first_valid_index(signal_line) == first_macd + 4 - 1
        assert first_valid_index(histogram) == first_valid_index(signal_line)

    def test_default_periods_on_long_series(self, sample_candles):
        closes = [c.close for c in sample_candles]
        macd_line, signal_line, _ = macd(closes)

        assert first_valid_index(macd_line) == 25
        assert first_valid_index(signal_line) == 33

    def test_histogram_is_difference(self, sample_candles):
        closes = [c.close for c in sample_candles]
        macd_line, signal_line, histogram = macd(closes, 12, 26, 9)

        defined = ~np.isnan(histogram)
        assert np.allclose(histogram[defined], macd_line[defined] - signal_line[defined])

    def test_short_input_is_all_undefined(self):
        macd_line, signal_line, histogram = macd([1.0] * 10, 12, 26, 9)

        assert np.all(np.isnan(macd_line))
        assert np.all(np.isnan(signal_line))
        assert np.all(np.isnan(histogram))

    def test_not_enough_macd_values_for_signal(self):
        # 27 closes: MACD defined at indices 25 and 26 only
        _, signal_line, _ = macd(np.arange(27, dtype=float), 12, 26, 9)
        assert np.all(np.isnan(signal_line))


class TestUtilities:
    def test_to_series_maps_nan_to_none(self):
        assert to_series(np.array([np.nan, 1.5, np.nan, 2.0])) == [None, 1.5, None, 2.0]

    def test_get_last_valid(self):
        assert get_last_valid([1.0, 2.0, math.nan]) == 2.0
        assert get_last_valid([math.nan]) is None

    def test_first_valid_index_all_undefined(self):
        assert first_valid_index([math.nan, math.nan]) is None
