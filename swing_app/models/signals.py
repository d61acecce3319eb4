"""Data models for projections, composite signals, trade setups and gate results"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Optional

from .indicators import IndicatorSnapshot
from .patterns import PatternScan


class Direction(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class VolatilityRegime(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


class AnalysisStatus(str, Enum):
    ANALYZED = "analyzed"
    INSUFFICIENT_DATA = "insufficient_data"
    INVALID_DATA = "invalid_data"


@dataclass(frozen=True)
class RegressionProjection:
    """Linear trend projection with a confidence band and volatility adjustment"""
    slope: float
    intercept: float
    r_squared: float
    regression_value: float              # Fitted value at the last bar
    projected_price: float
    upper_band: float
    lower_band: float
    confidence_level: float
    prediction_bars: int
    volatility_regime: VolatilityRegime
    volatility_ratio: float              # Current ATR / trailing average ATR
    volatility_adjusted_price: float

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["volatility_regime"] = self.volatility_regime.value
        return data


@dataclass(frozen=True)
class ContributingSignal:
    """One scored input to the composite decision"""
    source: str
    label: str
    weight: float
    direction: Direction

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "label": self.label,
            "weight": self.weight,
            "direction": self.direction.value,
        }


@dataclass(frozen=True)
class CompositeSignal:
    """Weighted directional call for one symbol under one strategy profile"""
    symbol: str
    strategy_id: str
    direction: Direction
    score: float
    bullish_score: float
    bearish_score: float
    alignment_count: int
    conviction: float
    quality_score: float
    atr_percent: float
    current_price: float
    contributing_signals: tuple[ContributingSignal, ...] = ()

    @property
    def is_actionable(self) -> bool:
        return self.direction != Direction.NEUTRAL

    def sources_for(self, direction: Direction) -> list[str]:
        seen: list[str] = []
        for contribution in self.contributing_signals:
            if contribution.direction == direction and contribution.source not in seen:
                seen.append(contribution.source)
        return seen

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "strategy_id": self.strategy_id,
            "direction": self.direction.value,
            "score": self.score,
            "bullish_score": self.bullish_score,
            "bearish_score": self.bearish_score,
            "alignment_count": self.alignment_count,
            "conviction": self.conviction,
            "quality_score": self.quality_score,
            "atr_percent": self.atr_percent,
            "current_price": self.current_price,
            "contributing_signals": [c.to_dict() for c in self.contributing_signals],
        }


@dataclass(frozen=True)
class TradeSetup:
    """
    Entry, stop and target levels with fixed-fractional sizing.

    Bullish: stop_loss < entry < target. Bearish: target < entry < stop_loss.
    A neutral setup is flat (all three equal, size 0).
    """
    direction: Direction
    entry: float
    target: float
    stop_loss: float
    risk_per_unit: float
    reward_per_unit: float
    risk_reward_ratio: float
    position_size: int
    capital: float
    capital_at_risk: float
    capital_at_risk_percent: float
    target_extended: bool = False

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["direction"] = self.direction.value
        return data


@dataclass(frozen=True)
class GateResult:
    """Quality gate outcome; rejected signals keep their score for ranking and review"""
    accepted: bool
    signal: CompositeSignal
    trade_setup: TradeSetup
    skip_reason: Optional[str] = None
    failed_checks: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "accepted": self.accepted,
            "skip_reason": self.skip_reason,
            "failed_checks": list(self.failed_checks),
            "signal": self.signal.to_dict(),
            "trade_setup": self.trade_setup.to_dict(),
        }


@dataclass(frozen=True)
class AnalysisReport:
    """Result of a full analyze() run with diagnostics"""
    symbol: str
    strategy_id: str
    status: AnalysisStatus
    gate_result: Optional[GateResult] = None
    indicators: Optional[IndicatorSnapshot] = None
    patterns: Optional[PatternScan] = None
    projection: Optional[RegressionProjection] = None
    message: Optional[str] = None
    profile_substituted: bool = False

    @property
    def accepted(self) -> bool:
        return self.gate_result is not None and self.gate_result.accepted

    @property
    def signal(self) -> Optional[CompositeSignal]:
        return self.gate_result.signal if self.gate_result else None

    @property
    def trade_setup(self) -> Optional[TradeSetup]:
        return self.gate_result.trade_setup if self.gate_result else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "strategy_id": self.strategy_id,
            "status": self.status.value,
            "message": self.message,
            "profile_substituted": self.profile_substituted,
            "gate_result": self.gate_result.to_dict() if self.gate_result else None,
            "indicators": self.indicators.to_dict() if self.indicators else None,
            "patterns": self.patterns.to_dict() if self.patterns else None,
            "projection": self.projection.to_dict() if self.projection else None,
        }
