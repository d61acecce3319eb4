"""Indicator library: pure functions over OHLCV columns"""

from .calculator import IndicatorCalculator
from .levels import fibonacci_levels, pivot_points, support_resistance
from .momentum import (
    analyze_momentum,
    detect_rsi_divergence,
    macd,
    rate_of_change,
    rsi,
    rsi_series,
    stochastic,
    williams_r,
)
from .moving_averages import detect_ma_crossover, ema, ema_series, sma
from .trend import adx, analyze_trend
from .volatility import (
    analyze_atr,
    atr_stop_levels,
    bollinger_bands,
    calculate_atr,
    calculate_natr,
    calculate_true_range,
)
from .volume import analyze_volume, calculate_rvol, volume_price_trend, vwap

__all__ = [
    "IndicatorCalculator",
    "fibonacci_levels",
    "pivot_points",
    "support_resistance",
    "analyze_momentum",
    "detect_rsi_divergence",
    "macd",
    "rate_of_change",
    "rsi",
    "rsi_series",
    "stochastic",
    "williams_r",
    "detect_ma_crossover",
    "ema",
    "ema_series",
    "sma",
    "adx",
    "analyze_trend",
    "analyze_atr",
    "atr_stop_levels",
    "bollinger_bands",
    "calculate_atr",
    "calculate_natr",
    "calculate_true_range",
    "analyze_volume",
    "calculate_rvol",
    "volume_price_trend",
    "vwap",
]
