"""Pattern detector running every chart and candlestick predicate over a bar window"""

from typing import Callable, Optional, Sequence

import structlog

from ..config.defaults import IndicatorParams, PatternParams
from ..data.models import Bar, PriceSeries
from ..indicators.levels import support_resistance
from ..indicators.moving_averages import detect_ma_crossover
from ..indicators.trend import analyze_trend
from ..indicators.volume import analyze_volume
from ..models.patterns import PatternMatch, PatternScan
from . import candlestick, chart

logger = structlog.get_logger(__name__)

ChartDetector = Callable[[PriceSeries, float, PatternParams], Optional[PatternMatch]]
CandleDetector = Callable[[Sequence[Bar]], Optional[PatternMatch]]

CHART_DETECTORS: tuple[ChartDetector, ...] = (
    chart.detect_double_bottom,
    chart.detect_double_top,
    chart.detect_bullish_flag,
    chart.detect_bearish_flag,
    chart.detect_ascending_triangle,
    chart.detect_descending_triangle,
    chart.detect_breakout,
)

CANDLE_DETECTORS: tuple[CandleDetector, ...] = (
    candlestick.detect_hammer,
    candlestick.detect_inverted_hammer,
    candlestick.detect_shooting_star,
    candlestick.detect_bullish_engulfing,
    candlestick.detect_bearish_engulfing,
    candlestick.detect_morning_star,
    candlestick.detect_evening_star,
)


class PatternDetector:
    """
    Scans a bar history for chart and candlestick patterns

    Chart detectors need ``chart_min_bars`` bars; candlestick detectors look
    at the last ``candlestick_window`` bars. All detectors are independent,
    so several may fire on the same window.
    """

    def __init__(self, params: Optional[PatternParams] = None,
                 indicator_params: Optional[IndicatorParams] = None):
        self.params = params or PatternParams()
        self.indicator_params = indicator_params or IndicatorParams()

    def detect(self, bars: Sequence[Bar], current_price: Optional[float] = None) -> list[PatternMatch]:
        """Run every detector and return the matches in detector order"""
        if not bars:
            return []

        series = PriceSeries.from_bars(bars)
        price = series.last_close if current_price is None else current_price
        matches: list[PatternMatch] = []

        if len(series) >= self.params.chart_min_bars:
            for detector in CHART_DETECTORS:
                match = detector(series, price, self.params)
                if match is not None:
                    matches.append(match)

        window = bars[-self.params.candlestick_window:]
        for candle_detector in CANDLE_DETECTORS:
            match = candle_detector(window)
            if match is not None:
                matches.append(match)

        doji = candlestick.detect_doji(window, self.params.doji_threshold)
        if doji is not None:
            matches.append(doji)

        return matches

    def scan(self, bars: Sequence[Bar], current_price: Optional[float] = None) -> PatternScan:
        """Detect patterns and attach the structure context they were found in"""
        series = PriceSeries.from_bars(bars)
        price = current_price
        if price is None:
            price = series.last_close if bars else 0.0

        matches = tuple(self.detect(bars, price))
        levels = support_resistance(
            series.highs, series.lows, series.closes, price,
            buckets=self.params.sr_buckets,
            top_levels=self.params.sr_top_levels,
        )
        trend = analyze_trend(series.closes)
        moving_averages = detect_ma_crossover(
            series.closes, self.indicator_params.sma_short, self.indicator_params.sma_medium, price
        )
        volume = analyze_volume(series.closes, series.volumes, self.indicator_params.volume_period)

        scan = PatternScan(
            matches=matches,
            support_resistance=levels,
            trend=trend,
            moving_averages=moving_averages,
            volume=volume,
            summary=self._summarize(matches, trend.direction, levels.nearest_support,
                                    levels.nearest_resistance),
        )

        logger.debug(
            "Pattern scan complete",
            bar_count=len(bars),
            patterns=[m.name for m in matches],
            trend=trend.direction,
        )
        return scan

    @staticmethod
    def _summarize(matches: Sequence[PatternMatch], trend: str, support: float, resistance: float) -> str:
        if matches:
            names = ", ".join(m.name for m in matches)
            head = f"{len(matches)} pattern{'s' if len(matches) != 1 else ''} ({names})"
        else:
            head = "No patterns"
        return f"{head}; trend {trend}; support {support:.2f} / resistance {resistance:.2f}"
