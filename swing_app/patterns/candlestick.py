"""
Candlestick pattern detectors.

Each detector looks at the tail of a short bar window (the window supplies
prior-trend context) and returns a PatternMatch or None.
"""

from typing import Optional, Sequence

from ..data.models import Bar
from ..models.patterns import PatternClass, PatternKind, PatternMatch, PatternStrength
from .candle_structure import analyze_candle_structure


def _match(name: str, pattern_class: PatternClass, strength: PatternStrength,
           confidence: float, multiplier: float, description: str) -> PatternMatch:
    return PatternMatch(
        name=name,
        pattern_class=pattern_class,
        strength=strength,
        confidence=confidence,
        target_multiplier=multiplier,
        kind=PatternKind.CANDLESTICK,
        description=description,
    )


def _declined(bars: Sequence[Bar]) -> bool:
    return bars[0].close > bars[-1].close


def _advanced(bars: Sequence[Bar]) -> bool:
    return bars[0].close < bars[-1].close


def detect_hammer(bars: Sequence[Bar]) -> Optional[PatternMatch]:
    """Long lower shadow, small upper shadow, after a decline"""
    if len(bars) < 2:
        return None
    c = analyze_candle_structure(bars[-1])
    if (c.body_size > 0 and c.lower_shadow > 2 * c.body_size
            and c.upper_shadow < c.body_size and _declined(bars)):
        return _match("Hammer", PatternClass.BULLISH, PatternStrength.MODERATE, 65, 1.04,
                      "Buyers rejected lower prices after a decline")
    return None


def detect_inverted_hammer(bars: Sequence[Bar]) -> Optional[PatternMatch]:
    """Long upper shadow, small lower shadow, after a decline"""
    if len(bars) < 2:
        return None
    c = analyze_candle_structure(bars[-1])
    if (c.body_size > 0 and c.upper_shadow > 2 * c.body_size
            and c.lower_shadow < c.body_size and _declined(bars)):
        return _match("Inverted Hammer", PatternClass.BULLISH, PatternStrength.WEAK, 60, 1.03,
                      "Probe higher after a decline")
    return None


def detect_shooting_star(bars: Sequence[Bar]) -> Optional[PatternMatch]:
    """Long upper shadow, small lower shadow, after an advance"""
    if len(bars) < 2:
        return None
    c = analyze_candle_structure(bars[-1])
    if (c.body_size > 0 and c.upper_shadow > 2 * c.body_size
            and c.lower_shadow < c.body_size and _advanced(bars)):
        return _match("Shooting Star", PatternClass.BEARISH, PatternStrength.MODERATE, 65, 0.96,
                      "Sellers rejected higher prices after an advance")
    return None


def detect_bullish_engulfing(bars: Sequence[Bar]) -> Optional[PatternMatch]:
    if len(bars) < 2:
        return None
    prev, last = bars[-2], bars[-1]
    if (prev.close < prev.open and last.close > last.open
            and last.open < prev.close and last.close > prev.open):
        return _match("Bullish Engulfing", PatternClass.BULLISH, PatternStrength.STRONG, 72, 1.05,
                      "Bullish body engulfs the prior bearish body")
    return None


def detect_bearish_engulfing(bars: Sequence[Bar]) -> Optional[PatternMatch]:
    if len(bars) < 2:
        return None
    prev, last = bars[-2], bars[-1]
    if (prev.close > prev.open and last.close < last.open
            and last.open > prev.close and last.close < prev.open):
        return _match("Bearish Engulfing", PatternClass.BEARISH, PatternStrength.STRONG, 70, 0.95,
                      "Bearish body engulfs the prior bullish body")
    return None


def detect_doji(bars: Sequence[Bar], doji_threshold: float = 0.1) -> Optional[PatternMatch]:
    """Body under ``doji_threshold`` of the range"""
    if not bars:
        return None
    if analyze_candle_structure(bars[-1], doji_threshold).is_doji:
        return _match("Doji", PatternClass.NEUTRAL, PatternStrength.WEAK, 55, 1.0,
                      "Indecision: open and close nearly equal")
    return None


def detect_morning_star(bars: Sequence[Bar]) -> Optional[PatternMatch]:
    """Large bearish bar, small-bodied pause, bullish close above the first bar's midpoint"""
    if len(bars) < 3:
        return None
    first, second, third = (analyze_candle_structure(b) for b in bars[-3:])
    first_bar, third_bar = bars[-3], bars[-1]
    if (first.is_bear and second.body_size < first.body_size * 0.3 and third.is_bull
            and third_bar.close > (first_bar.open + first_bar.close) / 2):
        return _match("Morning Star", PatternClass.BULLISH, PatternStrength.STRONG, 75, 1.06,
                      "Three-bar bullish reversal")
    return None


def detect_evening_star(bars: Sequence[Bar]) -> Optional[PatternMatch]:
    """Large bullish bar, small-bodied pause, bearish close below the first bar's midpoint"""
    if len(bars) < 3:
        return None
    first, second, third = (analyze_candle_structure(b) for b in bars[-3:])
    first_bar, third_bar = bars[-3], bars[-1]
    if (first.is_bull and second.body_size < first.body_size * 0.3 and third.is_bear
            and third_bar.close < (first_bar.open + first_bar.close) / 2):
        return _match("Evening Star", PatternClass.BEARISH, PatternStrength.STRONG, 73, 0.94,
                      "Three-bar bearish reversal")
    return None
