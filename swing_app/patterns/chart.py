"""
Chart pattern detectors over trailing price windows.

Tolerances are empirical and come from PatternParams. Every detector is
independent and returns a PatternMatch or None.
"""

from typing import Optional

from ..config.defaults import PatternParams
from ..data.models import PriceSeries
from ..models.patterns import PatternClass, PatternKind, PatternMatch, PatternStrength

DOUBLE_WINDOW = 30
FLAG_POLE_BARS = 10
FLAG_BARS = 10


def _match(name: str, pattern_class: PatternClass, strength: PatternStrength,
           confidence: float, multiplier: float, description: str) -> PatternMatch:
    return PatternMatch(
        name=name,
        pattern_class=pattern_class,
        strength=strength,
        confidence=confidence,
        target_multiplier=multiplier,
        kind=PatternKind.CHART,
        description=description,
    )


def detect_double_bottom(series: PriceSeries, current_price: float,
                         params: PatternParams = PatternParams()) -> Optional[PatternMatch]:
    """
    Two lows within ``double_tolerance`` of each other in the last 30 bars
    (first in bars 5-14, second in bars 20-27) with price recovered by
    ``double_confirm_pct`` from the second low
    """
    if len(series) < DOUBLE_WINDOW:
        return None

    lows = series.lows[-DOUBLE_WINDOW:]
    first_low = min(lows[5:15])
    second_low = min(lows[20:28])
    if first_low <= 0:
        return None

    if (abs(first_low - second_low) / first_low < params.double_tolerance
            and current_price > second_low * (1 + params.double_confirm_pct)):
        return _match("Double Bottom", PatternClass.BULLISH, PatternStrength.STRONG, 75, 1.08,
                      f"Twin lows near {min(first_low, second_low):.2f} with recovery")
    return None


def detect_double_top(series: PriceSeries, current_price: float,
                      params: PatternParams = PatternParams()) -> Optional[PatternMatch]:
    """Mirror of the double bottom on highs"""
    if len(series) < DOUBLE_WINDOW:
        return None

    highs = series.highs[-DOUBLE_WINDOW:]
    first_high = max(highs[5:15])
    second_high = max(highs[20:28])
    if first_high <= 0:
        return None

    if (abs(first_high - second_high) / first_high < params.double_tolerance
            and current_price < second_high * (1 - params.double_confirm_pct)):
        return _match("Double Top", PatternClass.BEARISH, PatternStrength.STRONG, 72, 0.92,
                      f"Twin highs near {max(first_high, second_high):.2f} with rejection")
    return None


def detect_bullish_flag(series: PriceSeries, current_price: float,
                        params: PatternParams = PatternParams()) -> Optional[PatternMatch]:
    """
    Pole of at least ``flag_min_pole_move`` over bars -20..-11, then a tight
    flat-to-declining channel over the last 10 closes with price holding
    near the channel top
    """
    if len(series) < FLAG_POLE_BARS + FLAG_BARS:
        return None

    closes = series.closes
    pole = closes[-(FLAG_POLE_BARS + FLAG_BARS):-FLAG_BARS]
    flag = closes[-FLAG_BARS:]
    if pole[0] <= 0 or flag[0] <= 0:
        return None

    pole_gain = (pole[-1] - pole[0]) / pole[0]
    flag_high = max(flag)
    flag_low = min(flag)
    flag_range = (flag_high - flag_low) / flag_high
    flag_slope = (flag[-1] - flag[0]) / flag[0]

    if (pole_gain >= params.flag_min_pole_move
            and flag_range < params.flag_max_range
            and -0.05 < flag_slope <= 0
            and current_price > flag_high * 0.98):
        strength = PatternStrength.STRONG if pole_gain > 0.1 else PatternStrength.MODERATE
        return _match("Bullish Flag", PatternClass.BULLISH, strength, 78, 1 + pole_gain,
                      f"{pole_gain * 100:.1f}% pole followed by {flag_range * 100:.1f}% consolidation")
    return None


def detect_bearish_flag(series: PriceSeries, current_price: float,
                        params: PatternParams = PatternParams()) -> Optional[PatternMatch]:
    """Mirror of the bullish flag: a falling pole then a flat-to-rising channel"""
    if len(series) < FLAG_POLE_BARS + FLAG_BARS:
        return None

    closes = series.closes
    pole = closes[-(FLAG_POLE_BARS + FLAG_BARS):-FLAG_BARS]
    flag = closes[-FLAG_BARS:]
    if pole[0] <= 0 or flag[0] <= 0:
        return None

    pole_loss = (pole[0] - pole[-1]) / pole[0]
    flag_high = max(flag)
    flag_low = min(flag)
    flag_range = (flag_high - flag_low) / flag_high
    flag_slope = (flag[-1] - flag[0]) / flag[0]

    if (pole_loss >= params.flag_min_pole_move
            and flag_range < params.flag_max_range
            and 0 <= flag_slope < 0.05
            and current_price < flag_low * 1.02):
        strength = PatternStrength.STRONG if pole_loss > 0.1 else PatternStrength.MODERATE
        return _match("Bearish Flag", PatternClass.BEARISH, strength, 74, 1 - pole_loss,
                      f"{pole_loss * 100:.1f}% drop followed by {flag_range * 100:.1f}% consolidation")
    return None


def detect_ascending_triangle(series: PriceSeries, current_price: float,
                              params: PatternParams = PatternParams()) -> Optional[PatternMatch]:
    """
    Flat resistance touched at least 3 times within ``triangle_band_pct``
    plus rising lows (compared every 5 bars, at least twice) with price
    pressing the resistance
    """
    lookback = params.triangle_lookback
    if len(series) < lookback:
        return None

    highs = series.highs[-lookback:]
    lows = series.lows[-lookback:]
    resistance = max(highs)

    touches = sum(1 for h in highs if h > resistance * (1 - params.triangle_band_pct))
    rising_lows = sum(1 for i in range(5, lookback, 5) if lows[i] > lows[i - 5])

    if touches >= 3 and rising_lows >= 2 and current_price > resistance * 0.97:
        return _match("Ascending Triangle", PatternClass.BULLISH, PatternStrength.MODERATE, 70, 1.06,
                      f"Flat resistance near {resistance:.2f} with higher lows")
    return None


def detect_descending_triangle(series: PriceSeries, current_price: float,
                               params: PatternParams = PatternParams()) -> Optional[PatternMatch]:
    """Mirror of the ascending triangle: flat support with lower highs"""
    lookback = params.triangle_lookback
    if len(series) < lookback:
        return None

    highs = series.highs[-lookback:]
    lows = series.lows[-lookback:]
    support = min(lows)

    touches = sum(1 for low in lows if low < support * (1 + params.triangle_band_pct))
    falling_highs = sum(1 for i in range(5, lookback, 5) if highs[i] < highs[i - 5])

    if touches >= 3 and falling_highs >= 2 and current_price < support * 1.03:
        return _match("Descending Triangle", PatternClass.BEARISH, PatternStrength.MODERATE, 68, 0.94,
                      f"Flat support near {support:.2f} with lower highs")
    return None


def detect_breakout(series: PriceSeries, current_price: float,
                    params: PatternParams = PatternParams()) -> Optional[PatternMatch]:
    """
    Price clearing the range of bars -25..-6 by ``breakout_margin``

    The most recent bars are excluded so the range is the one being broken.
    """
    lookback = params.breakout_lookback
    exclude = params.breakout_exclude_recent
    if len(series) < lookback:
        return None

    range_high = max(series.highs[-lookback:-exclude])
    range_low = min(series.lows[-lookback:-exclude])

    if current_price > range_high * (1 + params.breakout_margin):
        return _match("Bullish Breakout", PatternClass.BULLISH, PatternStrength.STRONG, 80, 1.08,
                      f"Price cleared {range_high:.2f} resistance")
    if current_price < range_low * (1 - params.breakout_margin):
        return _match("Bearish Breakdown", PatternClass.BEARISH, PatternStrength.STRONG, 75, 0.92,
                      f"Price lost {range_low:.2f} support")
    return None
