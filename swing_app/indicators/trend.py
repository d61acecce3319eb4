"""Trend strength and direction: ADX and multi-average trend analysis"""

from typing import Sequence

from ..models.indicators import ADXResult, TrendAnalysis
from .moving_averages import sma
from .volatility import true_range


def adx(highs: Sequence[float], lows: Sequence[float], closes: Sequence[float],
        period: int = 14) -> ADXResult:
    """
    Directional movement index over the trailing ``period`` bars

    This is a single-period approximation: +DM, -DM and TR are summed over
    one window and ADX is reported as that window's DX rather than a
    Wilder-smoothed average of DX values.

    Needs 2 * period bars, otherwise returns zeros. Zero TR or DI sums
    yield zero outputs.
    """
    n = len(closes)
    if n < 2 * period:
        return ADXResult(value=0.0, di_plus=0.0, di_minus=0.0)

    plus_dm_sum = 0.0
    minus_dm_sum = 0.0
    tr_sum = 0.0
    for i in range(n - period, n):
        up_move = highs[i] - highs[i - 1]
        down_move = lows[i - 1] - lows[i]
        if up_move > down_move and up_move > 0:
            plus_dm_sum += up_move
        if down_move > up_move and down_move > 0:
            minus_dm_sum += down_move
        tr_sum += true_range(highs[i], lows[i], closes[i - 1])

    if tr_sum <= 0:
        return ADXResult(value=0.0, di_plus=0.0, di_minus=0.0)

    di_plus = plus_dm_sum / tr_sum * 100.0
    di_minus = minus_dm_sum / tr_sum * 100.0
    di_total = di_plus + di_minus
    value = abs(di_plus - di_minus) / di_total * 100.0 if di_total > 0 else 0.0

    if value > 35:
        strength = "very_strong"
    elif value > 25:
        strength = "strong"
    elif value > 20:
        strength = "moderate"
    else:
        strength = "weak"

    direction = "neutral"
    if value > 20:
        if di_plus > di_minus:
            direction = "bullish"
        elif di_minus > di_plus:
            direction = "bearish"

    return ADXResult(
        value=value,
        di_plus=di_plus,
        di_minus=di_minus,
        strength=strength,
        direction=direction,
    )


def _percent_change(closes: Sequence[float], bars: int) -> float:
    if len(closes) <= bars or closes[-bars - 1] == 0:
        return 0.0
    base = closes[-bars - 1]
    return (closes[-1] - base) / base * 100.0


def analyze_trend(closes: Sequence[float]) -> TrendAnalysis:
    """
    Point-based trend vote

    Price against SMA5 (1 point), SMA20 (2) and SMA50 (2), SMA5 vs SMA20 (1),
    SMA20 vs SMA50 (1), 5-bar momentum beyond 2% (1) and 20-bar momentum
    beyond 5% (2). Each comparison awards its points to one side; the trend
    is bullish above a 65% bullish share and bearish below 35%.
    """
    current = closes[-1] if closes else 0.0
    sma5 = sma(closes, 5)
    sma20 = sma(closes, 20)
    sma50 = sma(closes, 50)
    momentum5 = _percent_change(closes, 5)
    momentum20 = _percent_change(closes, 20)

    bullish = 0
    bearish = 0

    for average, points in ((sma5, 1), (sma20, 2), (sma50, 2)):
        if current > average:
            bullish += points
        else:
            bearish += points

    if sma5 > sma20:
        bullish += 1
    else:
        bearish += 1

    if sma20 > sma50:
        bullish += 1
    else:
        bearish += 1

    if momentum5 > 2:
        bullish += 1
    elif momentum5 < -2:
        bearish += 1

    if momentum20 > 5:
        bullish += 2
    elif momentum20 < -5:
        bearish += 2

    ratio = bullish / (bullish + bearish)
    if ratio > 0.65:
        direction = "bullish"
    elif ratio < 0.35:
        direction = "bearish"
    else:
        direction = "neutral"

    return TrendAnalysis(
        direction=direction,
        strength=abs(ratio - 0.5) * 200.0,
        bullish_points=bullish,
        bearish_points=bearish,
        sma5=sma5,
        sma20=sma20,
        sma50=sma50,
        momentum5=momentum5,
        momentum20=momentum20,
    )
