"""Chart and candlestick pattern detection"""

from .candle_structure import CandleStructure, analyze_candle_structure
from .detector import PatternDetector

__all__ = ["CandleStructure", "analyze_candle_structure", "PatternDetector"]
