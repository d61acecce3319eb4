"""Entry, stop, target and size derivation for a scored signal"""

from typing import Optional

import structlog

from ..config.defaults import TradeSetupParams
from ..config.strategies import StrategyProfile
from ..models.indicators import SupportResistance
from ..models.signals import CompositeSignal, Direction, RegressionProjection, TradeSetup
from .position_sizing import calculate_position_size

logger = structlog.get_logger(__name__)

# Bearish targets never go below 1% of entry
MIN_TARGET_FRACTION = 0.01


class TradeSetupCalculator:
    """
    Builds a TradeSetup from a composite signal and market structure.

    Entry is the current price. The stop is the less aggressive of a
    structure stop (just beyond the nearest support/resistance) and an ATR
    stop. The target is the most ambitious of the nearest opposing level,
    a minimum reward:risk multiple and the volatility-adjusted projection.
    A target short of the profile's minimum reward:risk is pushed out; the
    stop is never tightened.
    """

    def __init__(self, params: Optional[TradeSetupParams] = None):
        self.params = params or TradeSetupParams()

    def build(
        self,
        signal: CompositeSignal,
        profile: StrategyProfile,
        current_price: float,
        atr: float,
        levels: SupportResistance,
        projection: Optional[RegressionProjection] = None,
        capital: Optional[float] = None,
        risk_percent: Optional[float] = None,
    ) -> TradeSetup:
        capital = self.params.default_capital if capital is None else capital
        risk_percent = self.params.max_risk_percent if risk_percent is None else risk_percent
        entry = current_price

        if signal.direction == Direction.BULLISH:
            stop, target, extended = self._bullish_levels(entry, atr, levels, projection, profile)
        elif signal.direction == Direction.BEARISH:
            stop, target, extended = self._bearish_levels(entry, atr, levels, projection, profile)
        else:
            return self.flat_setup(entry, capital)

        risk = abs(entry - stop)
        reward = abs(target - entry)
        size = calculate_position_size(capital, risk_percent, risk)
        capital_at_risk = size * risk

        setup = TradeSetup(
            direction=signal.direction,
            entry=entry,
            target=target,
            stop_loss=stop,
            risk_per_unit=risk,
            reward_per_unit=reward,
            risk_reward_ratio=round(reward / risk, 4) if risk > 0 else 0.0,
            position_size=size,
            capital=capital,
            capital_at_risk=capital_at_risk,
            capital_at_risk_percent=capital_at_risk / capital * 100.0 if capital > 0 else 0.0,
            target_extended=extended,
        )

        logger.debug(
            "Trade setup built",
            symbol=signal.symbol,
            strategy_id=profile.id,
            direction=signal.direction.value,
            entry=entry,
            stop_loss=stop,
            target=target,
            risk_reward_ratio=setup.risk_reward_ratio,
            position_size=size,
            target_extended=extended,
        )
        return setup

    @staticmethod
    def flat_setup(price: float, capital: float) -> TradeSetup:
        """No-trade setup for neutral signals"""
        return TradeSetup(
            direction=Direction.NEUTRAL,
            entry=price,
            target=price,
            stop_loss=price,
            risk_per_unit=0.0,
            reward_per_unit=0.0,
            risk_reward_ratio=0.0,
            position_size=0,
            capital=capital,
            capital_at_risk=0.0,
            capital_at_risk_percent=0.0,
        )

    def _bullish_levels(self, entry: float, atr: float, levels: SupportResistance,
                        projection: Optional[RegressionProjection],
                        profile: StrategyProfile) -> tuple[float, float, bool]:
        p = self.params
        stop = entry
        if atr > 0:
            stop = max(levels.nearest_support - p.structure_buffer_atr * atr,
                       entry - p.atr_multiplier * atr)
        if atr <= 0 or stop >= entry:
            stop = entry * (1 - profile.stop_loss_percent / 100.0)

        risk = entry - stop
        candidates = [levels.nearest_resistance, entry + p.risk_reward_minimum * risk]
        if projection is not None:
            candidates.append(projection.volatility_adjusted_price)
        target = max(candidates)

        extended = False
        if (target - entry) / risk < profile.min_risk_reward:
            target = entry + profile.min_risk_reward * risk
            extended = True
        return stop, target, extended

    def _bearish_levels(self, entry: float, atr: float, levels: SupportResistance,
                        projection: Optional[RegressionProjection],
                        profile: StrategyProfile) -> tuple[float, float, bool]:
        p = self.params
        stop = entry
        if atr > 0:
            stop = min(levels.nearest_resistance + p.structure_buffer_atr * atr,
                       entry + p.atr_multiplier * atr)
        if atr <= 0 or stop <= entry:
            stop = entry * (1 + profile.stop_loss_percent / 100.0)

        risk = stop - entry
        floor = entry * MIN_TARGET_FRACTION
        candidates = [levels.nearest_support, entry - p.risk_reward_minimum * risk]
        if projection is not None:
            candidates.append(projection.volatility_adjusted_price)
        target = max(min(candidates), floor)

        extended = False
        if (entry - target) / risk < profile.min_risk_reward:
            target = max(entry - profile.min_risk_reward * risk, floor)
            extended = True
        return stop, target, extended
