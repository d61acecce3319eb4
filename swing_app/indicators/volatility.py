"""ATR (Average True Range), NATR and Bollinger Band calculations"""

import math
from typing import Optional, Sequence

from ..data.models import Bar
from ..models.indicators import ATRResult, BollingerResult
from .moving_averages import sma


def calculate_true_range(current: Bar, previous: Optional[Bar] = None) -> float:
    """
    Calculate True Range for a single bar

    TR = max(high - low, abs(high - prev_close), abs(low - prev_close))

    Args:
        current: Current bar
        previous: Previous bar (None for first bar)

    Returns:
        True Range value
    """
    if previous is None:
        return current.high - current.low

    return true_range(current.high, current.low, previous.close)


def true_range(high: float, low: float, prev_close: float) -> float:
    return max(high - low, abs(high - prev_close), abs(low - prev_close))


def true_ranges(highs: Sequence[float], lows: Sequence[float], closes: Sequence[float]) -> list[float]:
    """True Range for every bar that has a previous close"""
    return [true_range(highs[i], lows[i], closes[i - 1]) for i in range(1, len(closes))]


def calculate_atr(highs: Sequence[float], lows: Sequence[float], closes: Sequence[float],
                  period: int = 14) -> float:
    """
    Average True Range as the simple mean of the last ``period`` true ranges

    Returns:
        ATR value, 0.0 with fewer than period + 1 closes
    """
    if len(closes) < period + 1:
        return 0.0

    recent = true_ranges(highs[-(period + 1):], lows[-(period + 1):], closes[-(period + 1):])
    return sum(recent) / period


def calculate_natr(atr: float, current_price: float) -> float:
    """
    Calculate Normalized Average True Range

    NATR = 100 * ATR / current_price

    Returns:
        NATR percentage value, 0.0 for a non-positive price
    """
    if current_price <= 0:
        return 0.0

    return 100.0 * atr / current_price


def analyze_atr(highs: Sequence[float], lows: Sequence[float], closes: Sequence[float],
                current_price: float, period: int = 14) -> ATRResult:
    """ATR with percent-of-price and a volatility bucket (>3% high, >1.5% medium)"""
    value = calculate_atr(highs, lows, closes, period)
    percent = calculate_natr(value, current_price)

    if percent > 3.0:
        level = "high"
    elif percent > 1.5:
        level = "medium"
    else:
        level = "low"

    return ATRResult(value=value, percent_of_price=percent, volatility_level=level)


def atr_stop_levels(entry: float, atr: float, direction: str = "bullish") -> dict[str, float]:
    """
    ATR stop and target ladder around an entry

    Stops at 1.5x (tight), 2x (normal) and 3x (wide) ATR; targets at 2x,
    3x and 4x ATR, on the side implied by ``direction``.
    """
    sign = 1.0 if direction == "bullish" else -1.0
    return {
        "stop_tight": entry - sign * 1.5 * atr,
        "stop_normal": entry - sign * 2.0 * atr,
        "stop_wide": entry - sign * 3.0 * atr,
        "target_1": entry + sign * 2.0 * atr,
        "target_2": entry + sign * 3.0 * atr,
        "target_3": entry + sign * 4.0 * atr,
    }


def _population_stdev(values: Sequence[float], mean: float) -> float:
    return math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))


def _band_width(window: Sequence[float], num_std: float) -> float:
    middle = sum(window) / len(window)
    if middle <= 0:
        return 0.0
    spread = 2.0 * num_std * _population_stdev(window, middle)
    return spread / middle


def bollinger_bands(closes: Sequence[float], period: int = 20, num_std: float = 2.0,
                    squeeze_ratio: float = 0.7) -> BollingerResult:
    """
    Bollinger Bands with width, clamped position and squeeze detection

    Width = (upper - lower) / middle. Squeeze is flagged when the current
    width is below ``squeeze_ratio`` times the average width of the earlier
    windows. With fewer than ``period`` closes the bands fall back to +/-2%
    around the last price.
    """
    if not closes:
        return BollingerResult(upper=0.0, middle=0.0, lower=0.0, width=0.0, position=0.5)

    price = closes[-1]
    if len(closes) < period:
        return BollingerResult(
            upper=price * 1.02,
            middle=price,
            lower=price * 0.98,
            width=0.04,
            position=0.5,
        )

    window = closes[-period:]
    middle = sma(closes, period)
    deviation = _population_stdev(window, middle)
    upper = middle + num_std * deviation
    lower = middle - num_std * deviation

    band = upper - lower
    position = (price - lower) / band if band > 0 else 0.5
    position = min(1.0, max(0.0, position))
    width = band / middle if middle > 0 else 0.0

    widths = [_band_width(closes[i - period:i], num_std) for i in range(period, len(closes))]
    average_width = sum(widths) / len(widths) if widths else 0.0
    squeeze = average_width > 0 and width < squeeze_ratio * average_width

    if position <= 0.05:
        signal = "bullish"              # Lower band touch, reversal
    elif position >= 0.95:
        signal = "bearish"              # Upper band touch, reversal
    elif position > 0.7:
        signal = "bullish"              # Riding the upper half
    elif position < 0.3:
        signal = "bearish"
    else:
        signal = "neutral"

    if width > 0.06:
        volatility = "high"
    elif width < 0.03:
        volatility = "low"
    else:
        volatility = "normal"

    return BollingerResult(
        upper=upper,
        middle=middle,
        lower=lower,
        width=width,
        position=position,
        squeeze=squeeze,
        signal=signal,
        volatility=volatility,
    )
