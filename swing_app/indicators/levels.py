"""Price levels: Fibonacci retracements, classic pivots and cluster support/resistance"""

from typing import Sequence

from ..models.indicators import FibonacciLevels, PivotPoints, SupportResistance

RETRACEMENT_RATIOS = (0.0, 0.236, 0.382, 0.5, 0.618, 0.786, 1.0)
EXTENSION_RATIOS = (1.272, 1.618)


def _ratio_key(ratio: float) -> str:
    return f"{ratio * 100:.1f}"


def fibonacci_levels(highs: Sequence[float], lows: Sequence[float], lookback: int = 20) -> FibonacciLevels:
    """
    Retracements measured down from the trailing swing high and extensions
    projected up from the swing low

    Keys are percentages as strings, e.g. "61.8".
    """
    if not highs or not lows:
        return FibonacciLevels(high=0.0, low=0.0)

    high = max(highs[-lookback:])
    low = min(lows[-lookback:])
    diff = high - low

    return FibonacciLevels(
        high=high,
        low=low,
        retracements={_ratio_key(r): high - diff * r for r in RETRACEMENT_RATIOS},
        extensions={_ratio_key(r): low + diff * r for r in EXTENSION_RATIOS},
    )


def pivot_points(highs: Sequence[float], lows: Sequence[float], closes: Sequence[float]) -> PivotPoints:
    """Classic floor pivots from the prior bar (the only bar when just one exists)"""
    index = -2 if len(closes) >= 2 else -1
    high = highs[index]
    low = lows[index]
    close = closes[index]

    pivot = (high + low + close) / 3.0
    return PivotPoints(
        pivot=pivot,
        r1=2 * pivot - low,
        r2=pivot + (high - low),
        r3=high + 2 * (pivot - low),
        s1=2 * pivot - high,
        s2=pivot - (high - low),
        s3=low - 2 * (high - pivot),
    )


def support_resistance(highs: Sequence[float], lows: Sequence[float], closes: Sequence[float],
                       current_price: float, buckets: int = 20, top_levels: int = 6) -> SupportResistance:
    """
    Support and resistance from price clustering

    Highs, lows and closes are histogrammed into ``buckets`` equal price
    bands; the ``top_levels`` most visited band centres become levels.
    Nearest support falls back to 95% of price and nearest resistance to
    105% when no level lies on that side.
    """
    prices = list(highs) + list(lows) + list(closes)
    fallback_support = current_price * 0.95
    fallback_resistance = current_price * 1.05
    if not prices:
        return SupportResistance((), (), fallback_support, fallback_resistance)

    lowest = min(prices)
    highest = max(prices)
    bucket_size = (highest - lowest) / buckets
    if bucket_size <= 0:
        return SupportResistance((), (), fallback_support, fallback_resistance)

    counts = [0] * buckets
    for price in prices:
        index = min(int((price - lowest) / bucket_size), buckets - 1)
        counts[index] += 1

    ranked = sorted(range(buckets), key=lambda i: counts[i], reverse=True)
    levels = [lowest + (i + 0.5) * bucket_size for i in ranked[:top_levels] if counts[i] > 0]

    supports = tuple(sorted((lvl for lvl in levels if lvl < current_price), reverse=True))
    resistances = tuple(sorted(lvl for lvl in levels if lvl > current_price))

    return SupportResistance(
        supports=supports,
        resistances=resistances,
        nearest_support=supports[0] if supports else fallback_support,
        nearest_resistance=resistances[0] if resistances else fallback_resistance,
    )
