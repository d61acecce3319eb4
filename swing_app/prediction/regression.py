"""
Linear-regression price projection with volatility-regime adjustment.

An OLS line is fitted over the trailing closes and extended forward. The
confidence band widens with forecast distance, and the projection is
amplified in high-volatility regimes and dampened in quiet ones.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from ..config.defaults import IndicatorParams, RegressionParams
from ..data.models import Bar, PriceSeries
from ..indicators.volatility import calculate_atr
from ..models.signals import RegressionProjection, VolatilityRegime

# Two-sided z-scores for the supported confidence levels
Z_SCORES = (
    (0.99, 2.58),
    (0.95, 1.96),
    (0.90, 1.645),
)
DEFAULT_Z = 1.0                          # ~68%


def z_score_for(confidence_level: float) -> float:
    for level, z in Z_SCORES:
        if confidence_level >= level:
            return z
    return DEFAULT_Z


@dataclass(frozen=True)
class RegressionLine:
    slope: float
    intercept: float
    r_squared: float
    stdev: float
    variance: float
    count: int

    def value_at(self, x: float) -> float:
        return self.intercept + self.slope * x

    @property
    def value_at_end(self) -> float:
        return self.value_at(self.count - 1)


def fit_linear_regression(values: Sequence[float]) -> RegressionLine:
    """
    Ordinary least squares over x = 0..n-1

    ``stdev`` and ``variance`` are the population statistics of the values.
    A single value fits a flat line through it.
    """
    n = len(values)
    if n == 0:
        return RegressionLine(0.0, 0.0, 0.0, 0.0, 0.0, 0)

    mean_y = sum(values) / n
    variance = sum((v - mean_y) ** 2 for v in values) / n
    if n == 1:
        return RegressionLine(0.0, mean_y, 0.0, 0.0, 0.0, 1)

    mean_x = (n - 1) / 2.0
    sxx = sum((x - mean_x) ** 2 for x in range(n))
    sxy = sum((x - mean_x) * (y - mean_y) for x, y in enumerate(values))
    slope = sxy / sxx
    intercept = mean_y - slope * mean_x

    ss_total = variance * n
    ss_residual = sum((y - (intercept + slope * x)) ** 2 for x, y in enumerate(values))
    r_squared = 1.0 - ss_residual / ss_total if ss_total > 0 else 0.0

    return RegressionLine(
        slope=slope,
        intercept=intercept,
        r_squared=r_squared,
        stdev=math.sqrt(variance),
        variance=variance,
        count=n,
    )


class RegressionPredictor:
    """Projects price ``prediction_bars`` ahead from the trailing regression window"""

    def __init__(self, params: Optional[RegressionParams] = None, atr_period: int = IndicatorParams.atr_period):
        self.params = params or RegressionParams()
        self.atr_period = atr_period

    def project(self, bars: Union[Sequence[Bar], PriceSeries],
                current_price: Optional[float] = None) -> RegressionProjection:
        series = bars if isinstance(bars, PriceSeries) else PriceSeries.from_bars(bars)
        p = self.params
        price = current_price if current_price is not None else (series.last_close if len(series) else 0.0)

        line = fit_linear_regression(series.closes[-p.regression_length:])
        if line.count < 2:
            return RegressionProjection(
                slope=0.0,
                intercept=price,
                r_squared=0.0,
                regression_value=price,
                projected_price=price,
                upper_band=price,
                lower_band=price,
                confidence_level=p.confidence_level,
                prediction_bars=p.prediction_bars,
                volatility_regime=VolatilityRegime.NORMAL,
                volatility_ratio=1.0,
                volatility_adjusted_price=price,
            )

        regression_value = line.value_at_end
        projected = regression_value + line.slope * p.prediction_bars

        variance = line.variance if line.variance > 0 else 1.0
        error = line.stdev * math.sqrt(1 + 1 / line.count + p.prediction_bars ** 2 / variance)
        margin = error * z_score_for(p.confidence_level)

        regime, ratio = self.volatility_regime(series)
        if regime == VolatilityRegime.HIGH:
            factor = p.high_vol_factor
        elif regime == VolatilityRegime.LOW:
            factor = p.low_vol_factor
        else:
            factor = 1.0
        adjusted = price + (projected - price) * factor

        return RegressionProjection(
            slope=line.slope,
            intercept=line.intercept,
            r_squared=line.r_squared,
            regression_value=regression_value,
            projected_price=projected,
            upper_band=projected + margin,
            lower_band=projected - margin,
            confidence_level=p.confidence_level,
            prediction_bars=p.prediction_bars,
            volatility_regime=regime,
            volatility_ratio=ratio,
            volatility_adjusted_price=adjusted,
        )

    def volatility_regime(self, series: PriceSeries) -> tuple[VolatilityRegime, float]:
        """
        Compare current ATR with its average over the trailing
        ``atr_average_window`` bar positions

        Returns the regime and the current/average ratio (1.0 when either
        side is unavailable).
        """
        period = self.atr_period
        n = len(series)
        current = calculate_atr(series.highs, series.lows, series.closes, period)
        if current <= 0:
            return VolatilityRegime.NORMAL, 1.0

        start = max(period + 1, n - self.params.atr_average_window + 1)
        history = [
            calculate_atr(series.highs[:end], series.lows[:end], series.closes[:end], period)
            for end in range(start, n + 1)
        ]
        if not history:
            return VolatilityRegime.NORMAL, 1.0

        average = sum(history) / len(history)
        if average <= 0:
            return VolatilityRegime.NORMAL, 1.0

        ratio = current / average
        if ratio > self.params.high_vol_threshold:
            return VolatilityRegime.HIGH, ratio
        if ratio < self.params.low_vol_threshold:
            return VolatilityRegime.LOW, ratio
        return VolatilityRegime.NORMAL, ratio
