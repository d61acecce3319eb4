"""Immutable result models shared across the scoring pipeline"""

from .indicators import IndicatorSnapshot
from .patterns import PatternClass, PatternKind, PatternMatch, PatternScan, PatternStrength
from .signals import (
    AnalysisReport,
    AnalysisStatus,
    CompositeSignal,
    ContributingSignal,
    Direction,
    GateResult,
    RegressionProjection,
    TradeSetup,
    VolatilityRegime,
)

__all__ = [
    "IndicatorSnapshot",
    "PatternClass",
    "PatternKind",
    "PatternMatch",
    "PatternScan",
    "PatternStrength",
    "AnalysisReport",
    "AnalysisStatus",
    "CompositeSignal",
    "ContributingSignal",
    "Direction",
    "GateResult",
    "RegressionProjection",
    "TradeSetup",
    "VolatilityRegime",
]
