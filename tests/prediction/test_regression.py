"""Tests for the linear-regression predictor"""

from datetime import datetime, timedelta, timezone

import pytest

from swing_app.config.defaults import RegressionParams
from swing_app.data.models import Bar, PriceSeries
from swing_app.models.signals import VolatilityRegime
from swing_app.prediction.regression import RegressionPredictor, fit_linear_regression, z_score_for

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def constant_bars(wicks):
    """Bars closing at 100 with the given wick per bar"""
    return [
        Bar(ts=START + timedelta(days=i), open=100.0, high=100.0 + w, low=100.0 - w, close=100.0, volume=1000.0)
        for i, w in enumerate(wicks)
    ]


def surging_bars(build):
    """Slow climb with the last five bars widened to push the regime high"""
    bars = build([100.0 + i * 0.1 for i in range(60)], wick=0.05)
    return bars[:-5] + [
        Bar(ts=b.ts, open=b.open, high=b.high + 3.0, low=b.low - 3.0, close=b.close, volume=b.volume)
        for b in bars[-5:]
    ]


class TestLinearRegression:
    """Test OLS fitting"""

    def test_perfect_line(self):
        """Test an exact line is recovered"""
        line = fit_linear_regression([1.0, 2.0, 3.0, 4.0, 5.0])
        assert line.slope == pytest.approx(1.0)
        assert line.intercept == pytest.approx(1.0)
        assert line.r_squared == pytest.approx(1.0)
        assert line.value_at_end == pytest.approx(5.0)

    def test_constant_values(self):
        """Test zero variance gives a flat line with zero r-squared"""
        line = fit_linear_regression([3.0] * 10)
        assert line.slope == pytest.approx(0.0)
        assert line.r_squared == 0.0
        assert line.variance == 0.0

    def test_single_value(self):
        """Test one value fits a flat line through it"""
        line = fit_linear_regression([7.0])
        assert line.slope == 0.0
        assert line.intercept == 7.0
        assert line.count == 1

    def test_population_statistics(self):
        """Test stdev and variance use the population formula"""
        line = fit_linear_regression([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0])
        assert line.variance == pytest.approx(4.0)
        assert line.stdev == pytest.approx(2.0)


class TestZScores:
    """Test confidence level mapping"""

    @pytest.mark.parametrize("level,expected", [
        (0.99, 2.58),
        (0.95, 1.96),
        (0.90, 1.645),
        (0.68, 1.0),
    ])
    def test_z_score_for(self, level, expected):
        """Test supported confidence levels"""
        assert z_score_for(level) == expected


class TestRegressionPredictor:
    """Test projection, bands and volatility adjustment"""

    def test_rising_projection(self, rising_bars):
        """Test a steady advance projects slope * bars beyond the fitted end"""
        projection = RegressionPredictor().project(rising_bars)

        assert projection.slope == pytest.approx(1.0)
        assert projection.regression_value == pytest.approx(159.0)
        assert projection.projected_price == pytest.approx(169.0)
        assert projection.r_squared == pytest.approx(1.0)
        assert projection.volatility_regime == VolatilityRegime.NORMAL
        assert projection.volatility_adjusted_price == pytest.approx(169.0)

    def test_band_width_formula(self, rising_bars):
        """Test error = stdev * sqrt(1 + 1/n + bars^2 / variance) scaled by z"""
        projection = RegressionPredictor().project(rising_bars)

        variance = (20 ** 2 - 1) / 12.0
        expected = variance ** 0.5 * (1 + 1 / 20 + 100 / variance) ** 0.5
        assert projection.upper_band - projection.projected_price == pytest.approx(expected)
        assert projection.projected_price - projection.lower_band == pytest.approx(expected)

    def test_wider_band_at_higher_confidence(self, rising_bars):
        """Test the band scales with the z-score"""
        narrow = RegressionPredictor(RegressionParams(confidence_level=0.68)).project(rising_bars)
        wide = RegressionPredictor(RegressionParams(confidence_level=0.95)).project(rising_bars)
        narrow_width = narrow.upper_band - narrow.lower_band
        wide_width = wide.upper_band - wide.lower_band
        assert wide_width == pytest.approx(narrow_width * 1.96)

    def test_falling_projection(self, falling_bars):
        """Test a decline projects lower"""
        projection = RegressionPredictor().project(falling_bars)
        assert projection.slope < 0
        assert projection.volatility_adjusted_price < falling_bars[-1].close

    def test_flat_projection_for_single_bar(self, rising_bars):
        """Test fewer than two closes gives a flat projection at price"""
        projection = RegressionPredictor().project(rising_bars[:1])
        assert projection.slope == 0.0
        assert projection.projected_price == rising_bars[0].close
        assert projection.upper_band == projection.lower_band

    def test_high_volatility_regime(self):
        """Test a recent ATR surge is classified high"""
        bars = constant_bars([0.25] * 55 + [3.0] * 5)
        regime, ratio = RegressionPredictor().volatility_regime(PriceSeries.from_bars(bars))
        assert regime == VolatilityRegime.HIGH
        assert ratio > 1.2

    def test_low_volatility_regime(self):
        """Test a recent ATR collapse is classified low"""
        bars = constant_bars([2.0] * 45 + [0.1] * 15)
        regime, ratio = RegressionPredictor().volatility_regime(PriceSeries.from_bars(bars))
        assert regime == VolatilityRegime.LOW
        assert ratio < 0.8

    def test_adjustment_scales_deviation(self, bar_factory):
        """Test high-volatility regimes amplify the projected move by 1.2x"""
        bars = surging_bars(bar_factory)
        projection = RegressionPredictor().project(bars)
        price = bars[-1].close
        assert projection.volatility_regime == VolatilityRegime.HIGH
        assert projection.volatility_adjusted_price - price == pytest.approx(
            (projection.projected_price - price) * 1.2
        )

    def test_adjustment_factor_independent_of_threshold(self, bar_factory):
        """Test the amplification follows high_vol_factor, not the detection threshold"""
        bars = surging_bars(bar_factory)
        price = bars[-1].close
        params = RegressionParams(high_vol_factor=1.5, low_vol_threshold=0.5)
        projection = RegressionPredictor(params).project(bars)

        assert projection.volatility_regime == VolatilityRegime.HIGH
        assert projection.volatility_adjusted_price - price == pytest.approx(
            (projection.projected_price - price) * 1.5
        )
