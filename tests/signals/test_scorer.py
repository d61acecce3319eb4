"""Tests for the composite weighted scorer"""

from dataclasses import replace

import pytest

from swing_app.config.strategies import StrategyRegistry
from swing_app.indicators.calculator import IndicatorCalculator
from swing_app.models.indicators import DivergenceResult
from swing_app.models.patterns import PatternClass, PatternMatch, PatternStrength
from swing_app.models.signals import Direction
from swing_app.patterns.detector import PatternDetector
from swing_app.prediction.regression import RegressionPredictor
from swing_app.signals.scorer import CompositeScorer


@pytest.fixture
def swing():
    return StrategyRegistry.with_defaults().get("swing")


@pytest.fixture
def blank(flat_bars):
    """Scorer inputs with every vote neutralized"""
    snapshot = IndicatorCalculator().calculate(flat_bars)
    scan = PatternDetector().scan(flat_bars)
    projection = RegressionPredictor().project(flat_bars)
    price = snapshot.current_price

    snapshot = replace(
        snapshot,
        rsi=50.0,
        sma20=price,
        sma50=price,
        sma200=None,
        macd=replace(snapshot.macd, trend="neutral"),
        stochastic=replace(snapshot.stochastic, signal="neutral"),
        bollinger=replace(snapshot.bollinger, signal="neutral", squeeze=False),
        adx=replace(snapshot.adx, value=10.0, direction="neutral"),
        vwap=replace(snapshot.vwap, signal="neutral"),
        divergence=DivergenceResult(),
    )
    scan = replace(scan, matches=(), trend=replace(scan.trend, direction="neutral"))
    projection = replace(projection, slope=0.0, volatility_adjusted_price=price)
    return snapshot, scan, projection


def match(name, pattern_class, confidence):
    return PatternMatch(name=name, pattern_class=pattern_class, strength=PatternStrength.MODERATE,
                        confidence=confidence, target_multiplier=1.05)


def sources(signal, direction):
    return [c.source for c in signal.contributing_signals if c.direction == direction]


class TestCompositeScorer:
    """Test vote accumulation and direction"""

    def test_no_votes_is_neutral_floor_score(self, blank, swing):
        """Test an empty vote yields a neutral signal at the score floor"""
        snapshot, scan, projection = blank
        signal = CompositeScorer().score("TEST", snapshot, scan, projection, swing)

        assert signal.direction == Direction.NEUTRAL
        assert signal.score == 30.0
        assert signal.bullish_score == 0.0
        assert signal.bearish_score == 0.0
        assert signal.alignment_count == 0
        assert signal.quality_score == 0.0
        assert signal.is_actionable is False

    def test_adx_weak_is_informational(self, blank, swing):
        """Test a weak ADX is listed with zero weight and no direction"""
        snapshot, scan, projection = blank
        signal = CompositeScorer().score("TEST", snapshot, scan, projection, swing)
        weak = [c for c in signal.contributing_signals if c.source == "adx_weak"]
        assert len(weak) == 1
        assert weak[0].weight == 0.0
        assert weak[0].direction == Direction.NEUTRAL

    def test_bullish_votes(self, blank, swing):
        """Test MACD and MA alignment carry a bullish call"""
        snapshot, scan, projection = blank
        price = snapshot.current_price
        snapshot = replace(snapshot, macd=replace(snapshot.macd, trend="bullish"),
                           sma20=price - 1, sma50=price - 2)
        signal = CompositeScorer().score("TEST", snapshot, scan, projection, swing)

        assert signal.direction == Direction.BULLISH
        assert signal.bullish_score == pytest.approx(30.0)
        assert signal.alignment_count == 2
        assert signal.conviction == pytest.approx(30.0)
        assert sorted(sources(signal, Direction.BULLISH)) == ["ma_alignment", "macd"]

    def test_weakening_macd_not_scored(self, blank, swing):
        """Test zero-line bias without a confirmed trend does not vote"""
        snapshot, scan, projection = blank
        snapshot = replace(snapshot, macd=replace(snapshot.macd, trend="weakening_bullish"))
        signal = CompositeScorer().score("TEST", snapshot, scan, projection, swing)
        assert "macd" not in [c.source for c in signal.contributing_signals]

    def test_gap_within_margin_is_neutral(self, blank, swing):
        """Test a lead of exactly the neutral margin is still no-trade"""
        snapshot, scan, projection = blank
        snapshot = replace(snapshot, stochastic=replace(snapshot.stochastic, signal="bullish"))
        signal = CompositeScorer().score("TEST", snapshot, scan, projection, swing)
        assert signal.bullish_score == pytest.approx(10.0)
        assert signal.direction == Direction.NEUTRAL

    @pytest.mark.parametrize("value,direction,weight", [
        (25.0, Direction.BULLISH, 12.0),
        (35.0, Direction.BULLISH, 6.0),
        (65.0, Direction.BEARISH, 6.0),
        (75.0, Direction.BEARISH, 12.0),
    ])
    def test_rsi_zones(self, blank, swing, value, direction, weight):
        """Test full weight at extremes and half weight in the outer zones"""
        snapshot, scan, projection = blank
        signal = CompositeScorer().score("TEST", replace(snapshot, rsi=value), scan, projection, swing)
        rsi_votes = [c for c in signal.contributing_signals if c.source == "rsi"]
        assert len(rsi_votes) == 1
        assert rsi_votes[0].direction == direction
        assert rsi_votes[0].weight == pytest.approx(weight)

    def test_bearish_votes(self, blank, swing):
        """Test overbought RSI, price below VWAP and bearish divergence"""
        snapshot, scan, projection = blank
        snapshot = replace(
            snapshot,
            rsi=75.0,
            vwap=replace(snapshot.vwap, signal="bearish"),
            divergence=DivergenceResult(kind="bearish", description="Lower RSI high"),
        )
        signal = CompositeScorer().score("TEST", snapshot, scan, projection, swing)

        assert signal.direction == Direction.BEARISH
        assert signal.bearish_score == pytest.approx(25.0)
        assert signal.score == 30.0
        assert signal.alignment_count == 3

    def test_stretched_vwap_not_scored(self, blank, swing):
        """Test overbought/oversold VWAP readings do not vote"""
        snapshot, scan, projection = blank
        snapshot = replace(snapshot, vwap=replace(snapshot.vwap, signal="overbought"))
        signal = CompositeScorer().score("TEST", snapshot, scan, projection, swing)
        assert "vwap" not in [c.source for c in signal.contributing_signals]

    def test_strong_adx_votes_with_direction(self, blank, swing):
        """Test ADX above 25 votes its direction and replaces the weak marker"""
        snapshot, scan, projection = blank
        snapshot = replace(snapshot, adx=replace(snapshot.adx, value=30.0, direction="bearish"))
        signal = CompositeScorer().score("TEST", snapshot, scan, projection, swing)
        names = [c.source for c in signal.contributing_signals]
        assert "adx" in names
        assert "adx_weak" not in names
        assert signal.bearish_score == pytest.approx(10.0)

    def test_long_term_trend(self, blank, swing):
        """Test price against SMA200"""
        snapshot, scan, projection = blank
        snapshot = replace(snapshot, sma200=snapshot.current_price * 0.9)
        signal = CompositeScorer().score("TEST", snapshot, scan, projection, swing)
        assert sources(signal, Direction.BULLISH) == ["long_term_trend"]

    def test_bollinger_squeeze_is_informational(self, blank, swing):
        """Test squeeze is listed with zero weight"""
        snapshot, scan, projection = blank
        snapshot = replace(snapshot, bollinger=replace(snapshot.bollinger, squeeze=True))
        signal = CompositeScorer().score("TEST", snapshot, scan, projection, swing)
        squeeze = [c for c in signal.contributing_signals if c.source == "bollinger_squeeze"]
        assert squeeze and squeeze[0].weight == 0.0

    def test_pattern_votes_scale_confidence(self, blank, swing):
        """Test pattern weight is the profile multiplier times confidence"""
        snapshot, scan, projection = blank
        scan = replace(scan, matches=(
            match("Bullish Flag", PatternClass.BULLISH, 78),
            match("Ascending Triangle", PatternClass.BULLISH, 70),
            match("Doji", PatternClass.NEUTRAL, 55),
        ))
        signal = CompositeScorer().score("TEST", snapshot, scan, projection, swing)

        assert signal.bullish_score == pytest.approx(29.6)
        # Several patterns count as one aligned source
        assert signal.alignment_count == 1
        assert signal.direction == Direction.BULLISH

    def test_trend_and_regression_votes(self, blank, swing):
        """Test structure trend and the projection"""
        snapshot, scan, projection = blank
        price = snapshot.current_price
        scan = replace(scan, trend=replace(scan.trend, direction="bearish"))
        projection = replace(projection, slope=-0.5, volatility_adjusted_price=price - 5)
        signal = CompositeScorer().score("TEST", snapshot, scan, projection, swing)

        assert sorted(sources(signal, Direction.BEARISH)) == ["regression", "trend"]
        assert signal.bearish_score == pytest.approx(20.0)

    def test_regression_needs_slope_agreement(self, blank, swing):
        """Test a projection above price with a falling slope does not vote"""
        snapshot, scan, projection = blank
        projection = replace(projection, slope=-0.5, volatility_adjusted_price=snapshot.current_price + 5)
        signal = CompositeScorer().score("TEST", snapshot, scan, projection, swing)
        assert "regression" not in [c.source for c in signal.contributing_signals]

    def test_profile_weights_apply(self, blank):
        """Test the intraday profile weights RSI more heavily"""
        snapshot, scan, projection = blank
        intraday = StrategyRegistry.with_defaults().get("intraday")
        signal = CompositeScorer().score("TEST", replace(snapshot, rsi=75.0), scan, projection, intraday)
        assert signal.bearish_score == pytest.approx(15.0)
        assert signal.strategy_id == "intraday"

    def test_score_capped(self, rising_bars, swing):
        """Test a one-sided vote never claims more than 95"""
        snapshot = IndicatorCalculator().calculate(rising_bars)
        scan = PatternDetector().scan(rising_bars)
        projection = RegressionPredictor().project(rising_bars)
        signal = CompositeScorer().score("UP", snapshot, scan, projection, swing)

        assert signal.direction == Direction.BULLISH
        assert signal.score == 95.0
        assert signal.bullish_score > 95.0


class TestQualityScore:
    """Test the diagnostic quality grade"""

    def test_quality_components(self):
        """Test dominance, strength and alignment bonus"""
        scorer = CompositeScorer()
        # 0.75 * 50 + 1.0 * 40 + 10
        assert scorer.quality_score(60.0, 20.0, 5) == pytest.approx(87.5)
        # 1.0 * 50 + 0.6 * 40
        assert scorer.quality_score(30.0, 0.0, 2) == pytest.approx(74.0)
        # 0.5 * 50 + 0.4 * 40 + 5
        assert scorer.quality_score(20.0, 20.0, 3) == pytest.approx(46.0)

    def test_quality_empty(self):
        """Test no votes grade zero"""
        assert CompositeScorer().quality_score(0.0, 0.0, 0) == 0.0
