"""Simple and exponential moving averages"""

from typing import Optional, Sequence

from ..models.indicators import MovingAverageSignal


def sma(values: Sequence[float], period: int) -> float:
    """
    Simple moving average of the trailing ``period`` values

    Returns the last value when the series is shorter than ``period``
    and 0.0 for an empty series.
    """
    if not values:
        return 0.0
    if len(values) < period:
        return float(values[-1])

    window = values[-period:]
    return sum(window) / period


def ema_series(values: Sequence[float], period: int) -> list[float]:
    """
    EMA values from index ``period - 1`` onward

    Seeded with the simple average of the first ``period`` values, then
    ema = (value - ema) * (2 / (period + 1)) + ema.

    Returns:
        List of len(values) - period + 1 values, empty if the series is too short
    """
    if period <= 0 or len(values) < period:
        return []

    multiplier = 2.0 / (period + 1)
    current = sum(values[:period]) / period
    series = [current]
    for value in values[period:]:
        current = (value - current) * multiplier + current
        series.append(current)
    return series


def ema(values: Sequence[float], period: int) -> float:
    """Latest EMA value, falling back to the last input when history is short"""
    if not values:
        return 0.0

    series = ema_series(values, period)
    if not series:
        return float(values[-1])
    return series[-1]


def detect_ma_crossover(closes: Sequence[float], short_period: int = 20,
                        long_period: int = 50, current_price: Optional[float] = None) -> MovingAverageSignal:
    """
    Crossover events on the latest bar

    Checked in order: golden/death cross of the short and medium SMAs, then
    price crossing the short SMA (previous close on one side of the previous
    short SMA, current price on the other). Without a crossover the signal is
    bullish when price > short SMA > medium SMA and bearish for the mirror
    ordering.
    """
    sma_short = sma(closes, short_period)
    sma_long = sma(closes, long_period)
    price = current_price if current_price is not None else (closes[-1] if closes else 0.0)

    golden_cross = False
    death_cross = False
    price_cross = None
    if len(closes) > long_period:
        prev_short = sma(closes[:-1], short_period)
        prev_long = sma(closes[:-1], long_period)
        golden_cross = prev_short <= prev_long and sma_short > sma_long
        death_cross = prev_short >= prev_long and sma_short < sma_long

        prev_close = closes[-2]
        if prev_close < prev_short and price > sma_short:
            price_cross = "above"
        elif prev_close > prev_short and price < sma_short:
            price_cross = "below"

    if golden_cross:
        signal = "golden_cross"
    elif death_cross:
        signal = "death_cross"
    elif price_cross is not None:
        signal = f"price_cross_{price_cross}"
    elif price > sma_short > sma_long:
        signal = "bullish"
    elif price < sma_short < sma_long:
        signal = "bearish"
    else:
        signal = "neutral"

    return MovingAverageSignal(
        sma_short=sma_short,
        sma_medium=sma_long,
        golden_cross=golden_cross,
        death_cross=death_cross,
        price_cross=price_cross,
        signal=signal,
    )
