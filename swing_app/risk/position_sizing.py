"""
Fixed-fractional position sizing and trade risk assessment.

Sizing risks a fixed share of capital per trade; risk scoring grades a
finished trade setup on capital at risk, reward:risk, loss depth and stop
distance.
"""

import math
from dataclasses import dataclass
from typing import Any

from ..models.signals import Direction, TradeSetup


@dataclass(frozen=True)
class RiskAssessment:
    """Graded risk of a trade setup (0-100, higher is riskier)"""
    score: int
    level: str                           # low, moderate, high
    loss_percent: float
    recommendation: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "level": self.level,
            "loss_percent": self.loss_percent,
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class TrailingStop:
    stop: float
    profit_locked: float
    profit_locked_percent: float


def calculate_position_size(capital: float, risk_percent: float, risk_per_unit: float) -> int:
    """
    Units to buy so that hitting the stop loses ``risk_percent`` of capital

    Always at least one unit when there is positive risk; zero when the
    per-unit risk is not positive (no valid stop).
    """
    if risk_per_unit <= 0 or capital <= 0:
        return 0
    budget = capital * risk_percent / 100.0
    return max(1, math.floor(budget / risk_per_unit))


def risk_score(capital_at_risk_percent: float, risk_reward_ratio: float,
               loss_percent: float, distance_to_stop_percent: float) -> int:
    score = 0

    # Capital at risk (5-40)
    if capital_at_risk_percent > 5:
        score += 40
    elif capital_at_risk_percent > 3:
        score += 25
    elif capital_at_risk_percent > 2:
        score += 15
    else:
        score += 5

    # Reward:risk penalty (0-30)
    if risk_reward_ratio < 1:
        score += 30
    elif risk_reward_ratio < 1.5:
        score += 20
    elif risk_reward_ratio < 2:
        score += 10

    # Loss depth (5-20)
    if loss_percent > 5:
        score += 20
    elif loss_percent > 3:
        score += 10
    else:
        score += 5

    # Tight stops get shaken out (0-10)
    if distance_to_stop_percent < 1:
        score += 10
    elif distance_to_stop_percent < 2:
        score += 5

    return min(100, score)


def risk_level(score: int) -> str:
    if score >= 70:
        return "high"
    if score >= 40:
        return "moderate"
    return "low"


def _recommendation(score: int, risk_reward_ratio: float) -> str:
    if score > 70:
        return "High risk trade, consider reducing size or passing"
    if risk_reward_ratio < 1.5:
        return "Unfavorable risk:reward, look for a better setup"
    if score < 40 and risk_reward_ratio >= 2:
        return "Good risk profile"
    return "Acceptable risk, manage position carefully"


def assess_trade_risk(setup: TradeSetup) -> RiskAssessment:
    """Grade a trade setup; flat setups are reported as low risk with no loss"""
    if setup.direction == Direction.NEUTRAL or setup.entry <= 0:
        return RiskAssessment(score=0, level="low", loss_percent=0.0,
                              recommendation="No position")

    loss_percent = abs(setup.entry - setup.stop_loss) / setup.entry * 100.0
    score = risk_score(
        capital_at_risk_percent=setup.capital_at_risk_percent,
        risk_reward_ratio=setup.risk_reward_ratio,
        loss_percent=loss_percent,
        distance_to_stop_percent=loss_percent,
    )
    return RiskAssessment(
        score=score,
        level=risk_level(score),
        loss_percent=round(loss_percent, 2),
        recommendation=_recommendation(score, setup.risk_reward_ratio),
    )


def trailing_stop(direction: Direction, entry: float, current_price: float, atr: float,
                  current_stop: float, multiplier: float = 2.0) -> TrailingStop:
    """
    Ratchet a stop ``multiplier`` ATRs behind the current price

    The stop only ever moves in the trade's favour: up for bullish trades,
    down for bearish ones.
    """
    stop = current_stop
    if direction == Direction.BULLISH:
        stop = max(current_stop, current_price - multiplier * atr)
        locked = stop - entry
    elif direction == Direction.BEARISH:
        stop = min(current_stop, current_price + multiplier * atr)
        locked = entry - stop
    else:
        locked = 0.0

    return TrailingStop(
        stop=round(stop, 2),
        profit_locked=round(locked, 2),
        profit_locked_percent=round(locked / entry * 100.0, 2) if entry > 0 else 0.0,
    )
