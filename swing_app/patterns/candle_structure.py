"""Candle structure analysis shared by the candlestick detectors"""

from dataclasses import dataclass

from ..data.models import Bar


@dataclass(frozen=True)
class CandleStructure:
    """Candle structure analysis results"""
    range_value: float
    body: float                 # Signed: close - open
    upper_shadow: float
    lower_shadow: float
    body_pct: float
    upper_pct: float
    lower_pct: float
    is_bull: bool
    is_bear: bool
    is_doji: bool

    @property
    def body_size(self) -> float:
        return abs(self.body)


def analyze_candle_structure(bar: Bar, doji_threshold: float = 0.1) -> CandleStructure:
    """
    Analyze candle structure components

    Args:
        bar: Bar to analyze
        doji_threshold: Body share of the range below which the bar is a doji

    Returns:
        CandleStructure with all analysis components
    """
    range_value = bar.high - bar.low
    body = bar.close - bar.open
    upper_shadow = bar.high - max(bar.open, bar.close)
    lower_shadow = min(bar.open, bar.close) - bar.low

    # Zero-range bars have no meaningful proportions
    if range_value > 0:
        body_pct = abs(body) / range_value
        upper_pct = upper_shadow / range_value
        lower_pct = lower_shadow / range_value
    else:
        body_pct = 0.0
        upper_pct = 0.0
        lower_pct = 0.0

    return CandleStructure(
        range_value=range_value,
        body=body,
        upper_shadow=upper_shadow,
        lower_shadow=lower_shadow,
        body_pct=body_pct,
        upper_pct=upper_pct,
        lower_pct=lower_pct,
        is_bull=bar.close > bar.open,
        is_bear=bar.close < bar.open,
        is_doji=range_value > 0 and body_pct < doji_threshold,
    )
