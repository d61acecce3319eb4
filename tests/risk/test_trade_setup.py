"""Tests for trade setup derivation"""

from dataclasses import replace

import pytest

from swing_app.config.defaults import TradeSetupParams
from swing_app.config.strategies import StrategyRegistry
from swing_app.models.indicators import SupportResistance
from swing_app.models.signals import CompositeSignal, Direction, RegressionProjection, VolatilityRegime
from swing_app.risk.trade_setup import TradeSetupCalculator


def signal_for(direction, price=100.0):
    return CompositeSignal(
        symbol="TEST", strategy_id="swing", direction=direction, score=80.0,
        bullish_score=80.0, bearish_score=10.0, alignment_count=4, conviction=70.0,
        quality_score=75.0, atr_percent=2.0, current_price=price,
    )


def levels(support, resistance):
    return SupportResistance(supports=(support,), resistances=(resistance,),
                             nearest_support=support, nearest_resistance=resistance)


def projection_at(price):
    return RegressionProjection(
        slope=1.0, intercept=90.0, r_squared=0.9, regression_value=100.0, projected_price=price,
        upper_band=price + 2, lower_band=price - 2, confidence_level=0.95, prediction_bars=5,
        volatility_regime=VolatilityRegime.NORMAL, volatility_ratio=1.0,
        volatility_adjusted_price=price,
    )


@pytest.fixture
def swing():
    return StrategyRegistry.with_defaults().get("swing")


class TestBullishSetup:
    """Test long setups"""

    def test_structure_and_atr_stop(self, swing):
        """Test the looser of structure and ATR stops with target at resistance"""
        setup = TradeSetupCalculator().build(signal_for(Direction.BULLISH), swing, 100.0, 2.0,
                                             levels(95.0, 110.0))

        assert setup.stop_loss == pytest.approx(97.0)
        assert setup.target == pytest.approx(110.0)
        assert setup.risk_reward_ratio == pytest.approx(3.3333)
        assert setup.position_size == 666
        assert setup.capital_at_risk == pytest.approx(1998.0)
        assert setup.capital_at_risk_percent == pytest.approx(1.998)
        assert setup.target_extended is False
        assert setup.stop_loss < setup.entry < setup.target

    def test_target_extended_to_minimum(self, swing):
        """Test a close resistance pushes the target out to the profile minimum"""
        setup = TradeSetupCalculator().build(signal_for(Direction.BULLISH), swing, 100.0, 2.0,
                                             levels(95.0, 102.0))

        assert setup.target == pytest.approx(106.0)
        assert setup.target_extended is True
        assert setup.risk_reward_ratio == pytest.approx(2.0)
        # Extension never tightens the stop
        assert setup.stop_loss == pytest.approx(97.0)

    def test_projection_can_lift_target(self, swing):
        """Test a higher volatility-adjusted projection becomes the target"""
        setup = TradeSetupCalculator().build(signal_for(Direction.BULLISH), swing, 100.0, 2.0,
                                             levels(95.0, 110.0), projection=projection_at(115.0))
        assert setup.target == pytest.approx(115.0)
        assert setup.risk_reward_ratio == pytest.approx(5.0)

    def test_zero_atr_uses_percent_stop(self, swing):
        """Test the profile stop percent when ATR is unavailable"""
        setup = TradeSetupCalculator().build(signal_for(Direction.BULLISH), swing, 100.0, 0.0,
                                             levels(95.0, 110.0))
        assert setup.stop_loss == pytest.approx(97.0)
        assert setup.risk_per_unit == pytest.approx(3.0)

    def test_support_above_entry_uses_percent_stop(self, swing):
        """Test an invalid structure stop falls back to the percent stop"""
        setup = TradeSetupCalculator().build(signal_for(Direction.BULLISH), swing, 100.0, 0.1,
                                             levels(101.0, 110.0))
        assert setup.stop_loss == pytest.approx(97.0)

    def test_capital_and_risk_overrides(self, swing):
        """Test per-call capital and risk percent"""
        setup = TradeSetupCalculator().build(signal_for(Direction.BULLISH), swing, 100.0, 2.0,
                                             levels(95.0, 110.0), capital=10000.0, risk_percent=1.0)
        assert setup.capital == 10000.0
        assert setup.position_size == 33
        assert setup.capital_at_risk_percent == pytest.approx(0.99)

    def test_params_change_stop(self, swing):
        """Test a wider ATR multiplier loosens the stop"""
        calculator = TradeSetupCalculator(replace(TradeSetupParams(), atr_multiplier=3.0))
        setup = calculator.build(signal_for(Direction.BULLISH), swing, 100.0, 2.0, levels(90.0, 120.0))
        assert setup.stop_loss == pytest.approx(94.0)


class TestBearishSetup:
    """Test short setups"""

    def test_mirror_levels(self, swing):
        """Test stop above resistance and target extended below support"""
        setup = TradeSetupCalculator().build(signal_for(Direction.BEARISH), swing, 100.0, 2.0,
                                             levels(95.0, 103.0))

        assert setup.stop_loss == pytest.approx(103.0)
        assert setup.target == pytest.approx(94.0)
        assert setup.target_extended is True
        assert setup.target < setup.entry < setup.stop_loss

    def test_target_floor(self, swing):
        """Test a bearish target never goes below 1% of entry"""
        setup = TradeSetupCalculator().build(signal_for(Direction.BEARISH, 10.0), swing, 10.0, 10.0,
                                             levels(9.5, 10.5))

        assert setup.stop_loss == pytest.approx(15.5)
        assert setup.target == pytest.approx(0.1)
        assert setup.risk_reward_ratio == pytest.approx(1.8)
        assert setup.target > 0


class TestNeutralSetup:
    """Test no-trade setups"""

    def test_flat(self, swing):
        """Test neutral signals get a zero-size flat setup"""
        setup = TradeSetupCalculator().build(signal_for(Direction.NEUTRAL), swing, 100.0, 2.0,
                                             levels(95.0, 110.0))

        assert setup.direction == Direction.NEUTRAL
        assert setup.entry == setup.stop_loss == setup.target == 100.0
        assert setup.position_size == 0
        assert setup.risk_reward_ratio == 0.0
        assert setup.to_dict()["direction"] == "neutral"
