"""Indicator calculator coordinating every indicator for one bar window"""

import math
from typing import Optional, Sequence, Union

from ..config.defaults import IndicatorParams
from ..data.models import Bar, PriceSeries
from ..errors import IndicatorCalculationError, MalformedDataError, MissingDataError
from ..models.indicators import IndicatorSnapshot
from .levels import fibonacci_levels, pivot_points
from .momentum import analyze_momentum, detect_rsi_divergence, macd, rsi, stochastic, williams_r
from .moving_averages import ema, sma
from .trend import adx
from .volatility import analyze_atr, bollinger_bands
from .volume import vwap


class IndicatorCalculator:
    """
    Builds an IndicatorSnapshot from a bar history

    Individual indicators never raise on short history; they fall back to
    their documented neutral values. The calculator only rejects empty input
    and an invalid current price, and wraps unexpected failures in
    IndicatorCalculationError.
    """

    def __init__(self, params: Optional[IndicatorParams] = None):
        self.params = params or IndicatorParams()

    def calculate(self, bars: Union[Sequence[Bar], PriceSeries],
                  current_price: Optional[float] = None) -> IndicatorSnapshot:
        series = bars if isinstance(bars, PriceSeries) else PriceSeries.from_bars(bars)

        if len(series) == 0:
            raise MissingDataError("Bars are required for indicator calculation", data_type="bars")

        price = series.last_close if current_price is None else current_price
        self._validate_price(price)

        try:
            return self._calculate(series, price)
        except (ArithmeticError, ValueError, IndexError, TypeError) as e:
            raise IndicatorCalculationError(
                f"Indicator calculation failed: {e}",
                metric_name="snapshot",
                calculation_input={"bar_count": len(series), "current_price": price},
            ) from e

    def _calculate(self, series: PriceSeries, price: float) -> IndicatorSnapshot:
        p = self.params
        highs, lows, closes, volumes = series.highs, series.lows, series.closes, series.volumes

        return IndicatorSnapshot(
            bar_count=len(series),
            current_price=price,
            sma20=sma(closes, p.sma_short),
            sma50=sma(closes, p.sma_medium),
            sma200=sma(closes, p.sma_long) if len(closes) >= p.sma_long else None,
            ema12=ema(closes, p.macd_fast),
            ema26=ema(closes, p.macd_slow),
            rsi=rsi(closes, p.rsi_period),
            macd=macd(closes, p.macd_fast, p.macd_slow, p.macd_signal),
            bollinger=bollinger_bands(closes, p.bollinger_period, p.bollinger_std, p.squeeze_ratio),
            atr=analyze_atr(highs, lows, closes, price, p.atr_period),
            stochastic=stochastic(highs, lows, closes, p.stochastic_k, p.stochastic_d),
            williams_r=williams_r(highs, lows, closes, p.williams_period),
            adx=adx(highs, lows, closes, p.adx_period),
            vwap=vwap(highs, lows, closes, volumes, price),
            fibonacci=fibonacci_levels(highs, lows, p.fib_lookback),
            pivots=pivot_points(highs, lows, closes),
            divergence=detect_rsi_divergence(highs, lows, closes, p.rsi_period, p.divergence_lookback),
            momentum=analyze_momentum(closes, 5, p.roc_period),
        )

    def _validate_price(self, price: float) -> None:
        if not isinstance(price, (int, float)) or not math.isfinite(price) or price <= 0:
            raise MalformedDataError(
                f"Current price must be a positive finite number, got {price!r}",
                raw_data=repr(price),
                expected_format="positive float",
            )

    def get_warmup_period(self) -> int:
        """Bars needed before every indicator leaves its fallback"""
        p = self.params
        return max(p.macd_slow + p.macd_signal, 2 * p.adx_period, p.sma_medium,
                   p.rsi_period + p.divergence_lookback)
