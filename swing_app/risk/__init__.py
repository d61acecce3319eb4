"""Trade setup derivation, position sizing and risk grading"""

from .position_sizing import (
    RiskAssessment,
    TrailingStop,
    assess_trade_risk,
    calculate_position_size,
    risk_level,
    risk_score,
    trailing_stop,
)
from .trade_setup import TradeSetupCalculator

__all__ = [
    "RiskAssessment",
    "TrailingStop",
    "TradeSetupCalculator",
    "assess_trade_risk",
    "calculate_position_size",
    "risk_level",
    "risk_score",
    "trailing_stop",
]
