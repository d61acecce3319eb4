"""Data models for pattern detection"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

from .indicators import MovingAverageSignal, SupportResistance, TrendAnalysis, VolumeAnalysis


class PatternClass(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class PatternStrength(str, Enum):
    WEAK = "weak"
    MODERATE = "moderate"
    STRONG = "strong"


class PatternKind(str, Enum):
    CHART = "chart"
    CANDLESTICK = "candlestick"


@dataclass(frozen=True)
class PatternMatch:
    """A single detected pattern"""
    name: str
    pattern_class: PatternClass
    strength: PatternStrength
    confidence: float                    # 55-80 weight fed to the scorer
    target_multiplier: float             # Suggested target relative to current price
    kind: PatternKind = PatternKind.CHART
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["pattern_class"] = self.pattern_class.value
        data["strength"] = self.strength.value
        data["kind"] = self.kind.value
        return data


@dataclass(frozen=True)
class PatternScan:
    """All pattern matches for a window plus the structure context they were found in"""
    matches: tuple[PatternMatch, ...]
    support_resistance: SupportResistance
    trend: TrendAnalysis
    moving_averages: MovingAverageSignal
    volume: VolumeAnalysis
    summary: str

    def by_class(self, pattern_class: PatternClass) -> list[PatternMatch]:
        return [m for m in self.matches if m.pattern_class == pattern_class]

    def names(self) -> list[str]:
        return [m.name for m in self.matches]

    def to_dict(self) -> dict[str, Any]:
        return {
            "matches": [m.to_dict() for m in self.matches],
            "support_resistance": asdict(self.support_resistance),
            "trend": asdict(self.trend),
            "moving_averages": asdict(self.moving_averages),
            "volume": asdict(self.volume),
            "summary": self.summary,
        }
