"""Tests for position sizing, risk grading and trailing stops"""

import pytest

from swing_app.models.signals import Direction, TradeSetup
from swing_app.risk.position_sizing import (
    assess_trade_risk,
    calculate_position_size,
    risk_level,
    risk_score,
    trailing_stop,
)


def long_setup(**overrides):
    fields = dict(
        direction=Direction.BULLISH, entry=100.0, target=110.0, stop_loss=97.0,
        risk_per_unit=3.0, reward_per_unit=10.0, risk_reward_ratio=3.3333, position_size=666,
        capital=100000.0, capital_at_risk=1998.0, capital_at_risk_percent=1.998,
    )
    fields.update(overrides)
    return TradeSetup(**fields)


class TestPositionSize:
    """Test fixed-fractional sizing"""

    def test_fraction_of_capital(self):
        """Test size risks the configured share of capital"""
        assert calculate_position_size(100000.0, 2.0, 3.0) == 666

    def test_minimum_one_unit(self):
        """Test a budget smaller than one unit's risk still buys one"""
        assert calculate_position_size(1000.0, 2.0, 50.0) == 1

    def test_no_risk_no_size(self):
        """Test zero or negative risk per unit"""
        assert calculate_position_size(100000.0, 2.0, 0.0) == 0
        assert calculate_position_size(100000.0, 2.0, -1.0) == 0

    def test_no_capital(self):
        """Test zero capital"""
        assert calculate_position_size(0.0, 2.0, 3.0) == 0


class TestRiskScore:
    """Test risk grading"""

    def test_low(self):
        """Test a conservative trade"""
        score = risk_score(1.0, 3.0, 2.0, 2.0)
        assert score == 10
        assert risk_level(score) == "low"

    def test_moderate(self):
        """Test middling capital at risk with a thin reward"""
        score = risk_score(3.5, 1.2, 2.0, 2.0)
        assert score == 50
        assert risk_level(score) == "moderate"

    def test_high_capped(self):
        """Test every penalty at once caps at 100"""
        score = risk_score(6.0, 0.5, 6.0, 0.5)
        assert score == 100
        assert risk_level(score) == "high"

    def test_assess_setup(self):
        """Test grading a built setup"""
        assessment = assess_trade_risk(long_setup())

        assert assessment.score == 10
        assert assessment.level == "low"
        assert assessment.loss_percent == pytest.approx(3.0)
        assert assessment.recommendation == "Good risk profile"

    def test_assess_poor_reward(self):
        """Test a thin reward is flagged"""
        assessment = assess_trade_risk(long_setup(risk_reward_ratio=1.2))
        assert assessment.recommendation == "Unfavorable risk:reward, look for a better setup"

    def test_assess_neutral(self):
        """Test flat setups carry no risk"""
        flat = long_setup(direction=Direction.NEUTRAL, target=100.0, stop_loss=100.0, position_size=0)
        assessment = assess_trade_risk(flat)
        assert assessment.score == 0
        assert assessment.recommendation == "No position"
        assert assessment.to_dict()["level"] == "low"


class TestTrailingStop:
    """Test stop ratcheting"""

    def test_bullish_ratchets_up(self):
        """Test the stop follows price two ATRs behind"""
        result = trailing_stop(Direction.BULLISH, 100.0, 110.0, 2.0, 97.0)
        assert result.stop == 106.0
        assert result.profit_locked == 6.0
        assert result.profit_locked_percent == 6.0

    def test_bearish_ratchets_down(self):
        """Test the mirror for shorts"""
        result = trailing_stop(Direction.BEARISH, 100.0, 90.0, 2.0, 103.0)
        assert result.stop == 94.0
        assert result.profit_locked == 6.0

    def test_never_loosens(self):
        """Test a pullback keeps the existing stop"""
        result = trailing_stop(Direction.BULLISH, 100.0, 100.0, 2.0, 97.0)
        assert result.stop == 97.0
        assert result.profit_locked == -3.0

    def test_custom_multiplier(self):
        """Test a tighter trail"""
        assert trailing_stop(Direction.BULLISH, 100.0, 110.0, 2.0, 97.0, multiplier=1.0).stop == 108.0
