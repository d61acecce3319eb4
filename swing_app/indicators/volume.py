"""Volume indicators: RVOL, VWAP, Volume-Price Trend and volume analysis"""

from typing import Optional, Sequence

from ..models.indicators import VolumeAnalysis, VWAPResult


def calculate_rvol(current_volume: float, volume_history: Sequence[float], period: int = 20) -> Optional[float]:
    """
    Calculate Relative Volume (RVOL)

    RVOL = current_volume / SMA(volume_history)

    Args:
        current_volume: Current bar volume
        volume_history: Historical volume values (excluding current)
        period: Lookback period for average (default 20)

    Returns:
        RVOL value or None if insufficient data
    """
    if len(volume_history) < period:
        return None

    recent_volumes = volume_history[-period:]
    volume_average = sum(recent_volumes) / len(recent_volumes)

    if volume_average <= 0:
        return None

    return current_volume / volume_average


def vwap(highs: Sequence[float], lows: Sequence[float], closes: Sequence[float],
         volumes: Sequence[float], current_price: float) -> VWAPResult:
    """
    Volume-weighted average of typical price over the supplied window

    Deviation beyond +2% is overbought, beyond -2% oversold; otherwise the
    signal follows the side of VWAP the price is on. Zero total volume
    returns VWAP = current price with a neutral signal.
    """
    total_volume = sum(volumes)
    if total_volume <= 0:
        return VWAPResult(value=current_price, deviation_percent=0.0)

    weighted = sum((h + l + c) / 3.0 * v for h, l, c, v in zip(highs, lows, closes, volumes))
    value = weighted / total_volume
    deviation = (current_price - value) / value * 100.0 if value > 0 else 0.0

    if deviation > 2:
        signal = "overbought"
    elif deviation < -2:
        signal = "oversold"
    elif current_price > value:
        signal = "bullish"
    elif current_price < value:
        signal = "bearish"
    else:
        signal = "neutral"

    return VWAPResult(value=value, deviation_percent=deviation, signal=signal)


def volume_price_trend(closes: Sequence[float], volumes: Sequence[float]) -> list[float]:
    """Cumulative Volume-Price Trend, starting at 0 on the first bar"""
    if not closes:
        return []

    series = [0.0]
    for i in range(1, len(closes)):
        prev = closes[i - 1]
        change = (closes[i] - prev) / prev if prev else 0.0
        series.append(series[-1] + volumes[i] * change)
    return series


def analyze_volume(closes: Sequence[float], volumes: Sequence[float], period: int = 20) -> VolumeAnalysis:
    """
    Volume confirmation of the recent price move

    Compares the latest and 5-bar average volume with the ``period``-bar
    average, and VPT with its own ``period``-bar mean.
    """
    if len(volumes) < 2:
        return VolumeAnalysis(volume_ratio=1.0, recent_volume_ratio=1.0, price_change_percent=0.0)

    window = volumes[-period:]
    average = sum(window) / len(window)
    recent = volumes[-5:]
    if average > 0:
        volume_ratio = volumes[-1] / average
        recent_ratio = (sum(recent) / len(recent)) / average
    else:
        volume_ratio = 1.0
        recent_ratio = 1.0

    price_change = 0.0
    if len(closes) > 5 and closes[-6] > 0:
        price_change = (closes[-1] - closes[-6]) / closes[-6] * 100.0

    vpt = volume_price_trend(closes, volumes)
    vpt_window = vpt[-period:]
    vpt_mean = sum(vpt_window) / len(vpt_window)
    if vpt[-1] > vpt_mean:
        vpt_trend = "rising"
    elif vpt[-1] < vpt_mean:
        vpt_trend = "falling"
    else:
        vpt_trend = "flat"

    if volume_ratio > 1.5 and price_change > 2:
        signal = "bullish"              # Strong buying
    elif volume_ratio > 1.5 and price_change < -2:
        signal = "bearish"              # Strong selling
    elif volume_ratio < 0.5:
        signal = "neutral"              # Low participation
    elif recent_ratio > 1.2:
        signal = "bullish" if price_change > 0 else "bearish"
    else:
        signal = "neutral"

    return VolumeAnalysis(
        volume_ratio=volume_ratio,
        recent_volume_ratio=recent_ratio,
        price_change_percent=price_change,
        vpt_trend=vpt_trend,
        signal=signal,
    )
