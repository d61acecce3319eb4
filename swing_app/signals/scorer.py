"""
Composite weighted scorer.

Each signal source votes bullish or bearish with a weight taken from the
active strategy profile. The larger accumulator sets the direction unless
the two are within the neutral margin, in which case the signal is an
explicit no-trade.
"""

from typing import Optional

from ..config.defaults import ScoringParams
from ..config.strategies import StrategyProfile
from ..logging.config import get_scoring_logger
from ..models.indicators import IndicatorSnapshot
from ..models.patterns import PatternClass, PatternScan
from ..models.signals import CompositeSignal, ContributingSignal, Direction, RegressionProjection

scoring_logger = get_scoring_logger(__name__)

_DIRECTIONS = {
    "bullish": Direction.BULLISH,
    "bearish": Direction.BEARISH,
}

_PATTERN_DIRECTIONS = {
    PatternClass.BULLISH: Direction.BULLISH,
    PatternClass.BEARISH: Direction.BEARISH,
    PatternClass.NEUTRAL: Direction.NEUTRAL,
}

ADX_TREND_THRESHOLD = 25.0


class CompositeScorer:
    """Fuses indicator, pattern, trend and projection votes into a CompositeSignal"""

    def __init__(self, params: Optional[ScoringParams] = None):
        self.params = params or ScoringParams()

    def score(
        self,
        symbol: str,
        snapshot: IndicatorSnapshot,
        scan: PatternScan,
        projection: RegressionProjection,
        profile: StrategyProfile,
        current_price: Optional[float] = None,
    ) -> CompositeSignal:
        price = snapshot.current_price if current_price is None else current_price

        contributions: list[ContributingSignal] = []
        contributions.extend(self._indicator_votes(snapshot, price, profile))
        contributions.extend(self._pattern_votes(scan, profile))
        contributions.extend(self._structure_votes(scan, projection, price, profile))

        bullish = sum(c.weight for c in contributions if c.direction == Direction.BULLISH)
        bearish = sum(c.weight for c in contributions if c.direction == Direction.BEARISH)

        if bullish - bearish > self.params.neutral_margin:
            direction = Direction.BULLISH
        elif bearish - bullish > self.params.neutral_margin:
            direction = Direction.BEARISH
        else:
            direction = Direction.NEUTRAL

        dominant_side = Direction.BULLISH if bullish >= bearish else Direction.BEARISH
        dominant = max(bullish, bearish)
        alignment = len({c.source for c in contributions if c.direction == dominant_side})

        score = min(self.params.max_score, max(self.params.min_score, dominant))

        signal = CompositeSignal(
            symbol=symbol,
            strategy_id=profile.id,
            direction=direction,
            score=round(score, 1),
            bullish_score=round(bullish, 2),
            bearish_score=round(bearish, 2),
            alignment_count=alignment,
            conviction=round(abs(bullish - bearish), 2),
            quality_score=self.quality_score(bullish, bearish, alignment),
            atr_percent=snapshot.atr.percent_of_price,
            current_price=price,
            contributing_signals=tuple(contributions),
        )

        scoring_logger.debug(
            "Composite signal scored",
            symbol=symbol,
            strategy_id=profile.id,
            direction=direction.value,
            score=signal.score,
            bullish_score=signal.bullish_score,
            bearish_score=signal.bearish_score,
            alignment_count=alignment,
            sources=[c.source for c in contributions],
        )
        return signal

    def quality_score(self, bullish: float, bearish: float, alignment: int) -> float:
        """
        Diagnostic 0-100 grade of how decisive the vote was

        Half comes from dominance (share of the total held by the winning
        side), up to 40 from the winning side's absolute strength, plus an
        alignment bonus of 5 (three sources) or 10 (five or more).
        """
        total = bullish + bearish
        dominant = max(bullish, bearish)
        dominance = dominant / total if total > 0 else 0.0
        strength = min(dominant / self.params.strength_cap, 1.0)

        if alignment >= 5:
            bonus = 10.0
        elif alignment >= 3:
            bonus = 5.0
        else:
            bonus = 0.0

        quality = dominance * 50.0 + strength * 40.0 + bonus
        return round(max(0.0, min(100.0, quality)), 1)

    def _indicator_votes(self, snapshot: IndicatorSnapshot, price: float,
                         profile: StrategyProfile) -> list[ContributingSignal]:
        votes: list[ContributingSignal] = []

        # MACD: only a confirmed trend counts, weakening bias does not
        macd_direction = _DIRECTIONS.get(snapshot.macd.trend)
        if macd_direction is not None:
            votes.append(ContributingSignal(
                "macd", f"MACD {snapshot.macd.trend}", profile.weight("macd"), macd_direction
            ))

        rsi = snapshot.rsi
        rsi_weight = profile.weight("rsi")
        if rsi < 30:
            votes.append(ContributingSignal("rsi", f"RSI oversold ({rsi:.1f})", rsi_weight, Direction.BULLISH))
        elif rsi > 70:
            votes.append(ContributingSignal("rsi", f"RSI overbought ({rsi:.1f})", rsi_weight, Direction.BEARISH))
        elif rsi < 40:
            votes.append(ContributingSignal("rsi", f"RSI weak ({rsi:.1f})", rsi_weight / 2, Direction.BULLISH))
        elif rsi > 60:
            votes.append(ContributingSignal("rsi", f"RSI strong ({rsi:.1f})", rsi_weight / 2, Direction.BEARISH))

        stochastic_direction = _DIRECTIONS.get(snapshot.stochastic.signal)
        if stochastic_direction is not None:
            votes.append(ContributingSignal(
                "stochastic",
                f"Stochastic {snapshot.stochastic.signal} ({snapshot.stochastic.k:.1f})",
                profile.weight("stochastic"),
                stochastic_direction,
            ))

        bollinger = snapshot.bollinger
        bollinger_direction = _DIRECTIONS.get(bollinger.signal)
        if bollinger_direction is not None:
            votes.append(ContributingSignal(
                "bollinger",
                f"Bollinger {bollinger.signal} (position {bollinger.position:.2f})",
                profile.weight("bollinger"),
                bollinger_direction,
            ))
        if bollinger.squeeze:
            votes.append(ContributingSignal(
                "bollinger_squeeze", "Bollinger squeeze", profile.weight("bollinger_squeeze"), Direction.NEUTRAL
            ))

        if price > snapshot.sma20 > snapshot.sma50:
            votes.append(ContributingSignal(
                "ma_alignment", "Price above SMA20 above SMA50", profile.weight("ma_alignment"), Direction.BULLISH
            ))
        elif price < snapshot.sma20 < snapshot.sma50:
            votes.append(ContributingSignal(
                "ma_alignment", "Price below SMA20 below SMA50", profile.weight("ma_alignment"), Direction.BEARISH
            ))

        if snapshot.sma200 is not None:
            if price > snapshot.sma200:
                votes.append(ContributingSignal(
                    "long_term_trend", "Price above SMA200", profile.weight("long_term_trend"), Direction.BULLISH
                ))
            elif price < snapshot.sma200:
                votes.append(ContributingSignal(
                    "long_term_trend", "Price below SMA200", profile.weight("long_term_trend"), Direction.BEARISH
                ))

        adx = snapshot.adx
        adx_direction = _DIRECTIONS.get(adx.direction)
        if adx.value > ADX_TREND_THRESHOLD and adx_direction is not None:
            votes.append(ContributingSignal(
                "adx", f"ADX {adx.value:.1f} {adx.direction} trend", profile.weight("adx"), adx_direction
            ))
        else:
            votes.append(ContributingSignal(
                "adx_weak", f"ADX {adx.value:.1f} no trend", profile.weight("adx_weak"), Direction.NEUTRAL
            ))

        # Stretched VWAP readings (overbought/oversold) are not scored
        vwap_direction = _DIRECTIONS.get(snapshot.vwap.signal)
        if vwap_direction is not None:
            votes.append(ContributingSignal(
                "vwap",
                f"Price {'above' if vwap_direction == Direction.BULLISH else 'below'} VWAP",
                profile.weight("vwap"),
                vwap_direction,
            ))

        divergence_direction = _DIRECTIONS.get(snapshot.divergence.kind or "")
        if divergence_direction is not None:
            votes.append(ContributingSignal(
                "divergence", snapshot.divergence.description, profile.weight("divergence"), divergence_direction
            ))

        return votes

    @staticmethod
    def _pattern_votes(scan: PatternScan, profile: StrategyProfile) -> list[ContributingSignal]:
        multiplier = profile.weight("pattern")
        return [
            ContributingSignal(
                "pattern",
                match.name,
                match.confidence * multiplier,
                _PATTERN_DIRECTIONS[match.pattern_class],
            )
            for match in scan.matches
        ]

    @staticmethod
    def _structure_votes(scan: PatternScan, projection: RegressionProjection, price: float,
                         profile: StrategyProfile) -> list[ContributingSignal]:
        votes: list[ContributingSignal] = []

        trend_direction = _DIRECTIONS.get(scan.trend.direction)
        if trend_direction is not None:
            votes.append(ContributingSignal(
                "trend",
                f"Trend {scan.trend.direction} ({scan.trend.strength:.0f})",
                profile.weight("trend"),
                trend_direction,
            ))

        adjusted = projection.volatility_adjusted_price
        if adjusted > price and projection.slope > 0:
            votes.append(ContributingSignal(
                "regression", f"Projection up to {adjusted:.2f}", profile.weight("regression"), Direction.BULLISH
            ))
        elif adjusted < price and projection.slope < 0:
            votes.append(ContributingSignal(
                "regression", f"Projection down to {adjusted:.2f}", profile.weight("regression"), Direction.BEARISH
            ))

        return votes
