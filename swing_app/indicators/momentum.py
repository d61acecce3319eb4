"""
Momentum oscillators: RSI, MACD, Stochastic, Williams %R and rate of change.

Every function degrades to a documented neutral value when history is
shorter than its window and guards all zero denominators.
"""

from typing import Optional, Sequence

from ..models.indicators import (
    DivergenceResult,
    MACDResult,
    MomentumResult,
    StochasticResult,
    WilliamsResult,
)
from .moving_averages import ema_series

# Magnitudes below this are treated as zero for crossover and bias decisions
EPSILON = 1e-9


def rsi(closes: Sequence[float], period: int = 14) -> float:
    """
    Relative Strength Index over the trailing ``period`` deltas

    Returns 50.0 with fewer than period + 1 closes and 100.0 when the
    average loss is zero.
    """
    if len(closes) < period + 1:
        return 50.0

    window = closes[-(period + 1):]
    gains = 0.0
    losses = 0.0
    for prev, curr in zip(window, window[1:]):
        change = curr - prev
        if change > 0:
            gains += change
        else:
            losses -= change

    avg_gain = gains / period
    avg_loss = losses / period
    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1.0 + rs))


def rsi_series(closes: Sequence[float], period: int = 14) -> list[float]:
    """RSI evaluated at every bar that has a full window"""
    return [rsi(closes[:end], period) for end in range(period + 1, len(closes) + 1)]


def macd(closes: Sequence[float], fast: int = 12, slow: int = 26,
         signal_period: int = 9) -> MACDResult:
    """
    MACD line, signal line and histogram with trend labels

    Needs at least slow + signal_period closes; otherwise returns zeros with
    a neutral trend. Trend resolution order: a crossover on the latest bar,
    then zero-line bias qualified by the histogram sign.
    """
    if len(closes) < slow + signal_period:
        return MACDResult(line=0.0, signal=0.0, histogram=0.0)

    fast_series = ema_series(closes, fast)
    slow_series = ema_series(closes, slow)
    # Align both series on the first bar where the slow EMA exists
    macd_series = [f - s for f, s in zip(fast_series[slow - fast:], slow_series)]
    signal_series = ema_series(macd_series, signal_period)

    line = macd_series[-1]
    signal = signal_series[-1]
    histogram = line - signal
    prev_line = macd_series[-2]
    prev_signal = signal_series[-2]
    prev_histogram = prev_line - prev_signal

    crossover = None
    if prev_histogram < -EPSILON and histogram > EPSILON:
        crossover = "bullish"
        trend = "bullish"
    elif prev_histogram > EPSILON and histogram < -EPSILON:
        crossover = "bearish"
        trend = "bearish"
    elif line > EPSILON:
        trend = "bullish" if histogram >= -EPSILON else "weakening_bullish"
    elif line < -EPSILON:
        trend = "bearish" if histogram <= EPSILON else "weakening_bearish"
    else:
        trend = "neutral"

    if histogram > prev_histogram + EPSILON:
        momentum = "accelerating"
    elif histogram < prev_histogram - EPSILON:
        momentum = "decelerating"
    else:
        momentum = "flat"

    return MACDResult(
        line=line,
        signal=signal,
        histogram=histogram,
        trend=trend,
        crossover=crossover,
        histogram_growing=abs(histogram) > abs(prev_histogram) + EPSILON,
        momentum=momentum,
    )


def _percent_k(highs: Sequence[float], lows: Sequence[float], closes: Sequence[float],
               end: int, period: int) -> float:
    highest = max(highs[end - period:end])
    lowest = min(lows[end - period:end])
    price_range = highest - lowest
    if price_range <= 0:
        return 50.0
    return (closes[end - 1] - lowest) / price_range * 100.0


def stochastic(highs: Sequence[float], lows: Sequence[float], closes: Sequence[float],
               k_period: int = 14, d_period: int = 3) -> StochasticResult:
    """
    Stochastic oscillator %K with %D as the SMA of the last ``d_period`` %K values

    Returns k = d = 50 when history is shorter than ``k_period``; a zero
    high-low range yields %K = 50.
    """
    n = len(closes)
    if n < k_period:
        return StochasticResult(k=50.0, d=50.0)

    count = min(d_period + 1, n - k_period + 1)
    k_values = [_percent_k(highs, lows, closes, end, k_period) for end in range(n - count + 1, n + 1)]

    k = k_values[-1]
    recent = k_values[-d_period:]
    d = sum(recent) / len(recent)

    prev_k: Optional[float] = None
    prev_d: Optional[float] = None
    if len(k_values) > d_period:
        prev_k = k_values[-2]
        previous = k_values[-d_period - 1:-1]
        prev_d = sum(previous) / len(previous)

    if k > 80:
        zone = "overbought"
    elif k < 20:
        zone = "oversold"
    else:
        zone = "neutral"

    if k < 20 and d < 20:
        signal = "bullish"
    elif k > 80 and d > 80:
        signal = "bearish"
    elif prev_k is not None and prev_k < prev_d and k > d:
        signal = "bullish"
    elif prev_k is not None and prev_k > prev_d and k < d:
        signal = "bearish"
    else:
        signal = "neutral"

    return StochasticResult(k=k, d=d, zone=zone, signal=signal)


def williams_r(highs: Sequence[float], lows: Sequence[float], closes: Sequence[float],
               period: int = 14) -> WilliamsResult:
    """Williams %R in [-100, 0]; -50 when history is short or the range is zero"""
    if len(closes) < period:
        return WilliamsResult(value=-50.0)

    highest = max(highs[-period:])
    lowest = min(lows[-period:])
    price_range = highest - lowest
    if price_range <= 0:
        return WilliamsResult(value=-50.0)

    value = (highest - closes[-1]) / price_range * -100.0
    if value > -20:
        zone = "overbought"
    elif value < -80:
        zone = "oversold"
    else:
        zone = "neutral"
    return WilliamsResult(value=value, zone=zone)


def rate_of_change(closes: Sequence[float], period: int = 10) -> float:
    """Percent change over ``period`` bars, 0.0 when history is short"""
    if len(closes) <= period or closes[-period - 1] == 0:
        return 0.0
    base = closes[-period - 1]
    return (closes[-1] - base) / base * 100.0


def analyze_momentum(closes: Sequence[float], short_period: int = 5,
                     medium_period: int = 10, long_period: int = 20) -> MomentumResult:
    """
    Rate-of-change momentum with acceleration

    Score = 0.5 * short ROC + 0.3 * medium ROC + 0.2 * long ROC. Acceleration
    compares the latest short ROC with the short ROC one short period earlier.
    """
    roc_short = rate_of_change(closes, short_period)
    roc_medium = rate_of_change(closes, medium_period)
    roc_long = rate_of_change(closes, long_period)
    previous_short = rate_of_change(closes[:-short_period], short_period) if len(closes) > short_period else 0.0
    acceleration = roc_short - previous_short
    score = 0.5 * roc_short + 0.3 * roc_medium + 0.2 * roc_long

    if score > 1.0:
        label = "accelerating_bullish" if acceleration > 0 else "bullish"
    elif score < -1.0:
        label = "accelerating_bearish" if acceleration < 0 else "bearish"
    else:
        label = "neutral"

    return MomentumResult(
        roc_short=roc_short,
        roc_medium=roc_medium,
        roc_long=roc_long,
        acceleration=acceleration,
        score=score,
        label=label,
    )


def detect_rsi_divergence(highs: Sequence[float], lows: Sequence[float], closes: Sequence[float],
                          period: int = 14, lookback: int = 10) -> DivergenceResult:
    """
    Price/RSI divergence over the last ``lookback`` bars

    Bearish: price makes a higher high while RSI makes a lower high from
    above 60. Bullish: price makes a lower low while RSI makes a higher low
    from below 40.
    """
    if lookback < 2 or len(closes) < period + lookback:
        return DivergenceResult()

    rsi_values = rsi_series(closes, period)[-lookback:]
    recent_highs = highs[-lookback:]
    recent_lows = lows[-lookback:]

    prior_rsi_high = max(rsi_values[:-1])
    prior_rsi_low = min(rsi_values[:-1])

    if (recent_highs[-1] > max(recent_highs[:-1])
            and rsi_values[-1] < prior_rsi_high
            and prior_rsi_high > 60):
        return DivergenceResult(
            kind="bearish",
            description=f"Price higher high with RSI lower high ({rsi_values[-1]:.1f} < {prior_rsi_high:.1f})",
        )

    if (recent_lows[-1] < min(recent_lows[:-1])
            and rsi_values[-1] > prior_rsi_low
            and prior_rsi_low < 40):
        return DivergenceResult(
            kind="bullish",
            description=f"Price lower low with RSI higher low ({rsi_values[-1]:.1f} > {prior_rsi_low:.1f})",
        )

    return DivergenceResult()
