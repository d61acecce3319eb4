"""
Main signal engine coordinator.

Orchestrates the scoring pipeline for one symbol at a time:
Bars → Indicators + Patterns + Projection → Composite Signal → Trade Setup → Quality Gate
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import structlog

from .config.defaults import DefaultConfig
from .config.loader import ConfigLoader
from .config.strategies import StrategyProfile, StrategyRegistry
from .data.models import Bar, PriceSeries
from .data.parsers import parse_bars
from .data.validators import BarValidator
from .errors import DataQualityError, InsufficientDataError
from .indicators.calculator import IndicatorCalculator
from .models.indicators import IndicatorSnapshot
from .models.patterns import PatternScan
from .models.signals import (
    AnalysisReport,
    AnalysisStatus,
    CompositeSignal,
    GateResult,
    RegressionProjection,
    TradeSetup,
)
from .patterns.detector import PatternDetector
from .prediction.regression import RegressionPredictor
from .risk.trade_setup import TradeSetupCalculator
from .signals.gate import QualityGate
from .signals.scorer import CompositeScorer

logger = structlog.get_logger(__name__)

StrategyRef = Union[str, StrategyProfile]


@dataclass(frozen=True)
class Evaluation:
    """Intermediate products of one scoring pass, kept for diagnostics"""
    signal: CompositeSignal
    indicators: IndicatorSnapshot
    patterns: PatternScan
    projection: RegressionProjection


class SignalEngine:
    """
    Technical signal scoring and trade-setup engine.

    Every call is independent: the engine holds configuration and stateless
    collaborators only, so one instance may serve many symbols concurrently.
    """

    def __init__(
        self,
        config: Optional[DefaultConfig] = None,
        registry: Optional[StrategyRegistry] = None,
        config_dir: Optional[Union[str, Path]] = None,
    ) -> None:
        self.logger = logger

        self.config_loader = ConfigLoader.create(Path(config_dir) if config_dir else None)
        self.config = config or self.config_loader.build_config()
        self.registry = registry or self.config_loader.load_registry()

        self.validator = BarValidator()
        self.calculator = IndicatorCalculator(self.config.indicators)
        self.pattern_detector = PatternDetector(self.config.patterns, self.config.indicators)
        self.predictor = RegressionPredictor(self.config.regression, self.config.indicators.atr_period)
        self.scorer = CompositeScorer(self.config.scoring)
        self.setup_calculator = TradeSetupCalculator(self.config.trade_setup)
        self.quality_gate = QualityGate()

        self.logger.info(
            "Signal engine initialized",
            strategies=self.registry.ids(),
            fallback_strategy=self.registry.fallback_id,
            min_bars=self.config.analysis.min_bars,
        )

    def score(
        self,
        symbol: str,
        bars: Iterable[Any],
        current_price: Optional[float] = None,
        strategy: StrategyRef = "swing",
    ) -> CompositeSignal:
        """
        Score a bar history under one strategy profile.

        Raises:
            InsufficientDataError: If fewer than ``analysis.min_bars`` bars are supplied
            MalformedDataError, TemporalDataError: If the bars fail validation
            UnknownStrategyError: If the strategy id is not registered
        """
        profile = self._profile(strategy)
        history = self._prepare_bars(bars)
        self._require_history(symbol, history)
        return self._evaluate(symbol, history, current_price, profile).signal

    def build_trade_setup(
        self,
        signal: CompositeSignal,
        bars: Iterable[Any],
        current_price: Optional[float] = None,
        capital: Optional[float] = None,
        risk_percent: Optional[float] = None,
        strategy: Optional[StrategyRef] = None,
    ) -> TradeSetup:
        """
        Derive entry, stop, target and size for a signal from its bar history.

        Entry and profile default to the price and profile the signal was
        scored with.
        """
        profile = self._profile(signal.strategy_id if strategy is None else strategy)
        history = self._prepare_bars(bars)
        self._require_history(signal.symbol, history)

        series = PriceSeries.from_bars(history)
        price = signal.current_price if current_price is None else current_price
        indicators = self.calculator.calculate(series, price)
        patterns = self.pattern_detector.scan(history, price)
        projection = self.predictor.project(series, price)

        return self.setup_calculator.build(
            signal, profile, price,
            atr=indicators.atr.value,
            levels=patterns.support_resistance,
            projection=projection,
            capital=capital,
            risk_percent=risk_percent,
        )

    def gate(self, signal: CompositeSignal, setup: TradeSetup, strategy: StrategyRef = "swing") -> GateResult:
        """Apply the strategy's quality thresholds to a finished signal."""
        return self.quality_gate.evaluate(signal, setup, self._profile(strategy))

    def analyze(
        self,
        symbol: str,
        bars: Iterable[Any],
        current_price: Optional[float] = None,
        strategy_id: str = "swing",
        capital: Optional[float] = None,
        risk_percent: Optional[float] = None,
    ) -> AnalysisReport:
        """
        Run score, trade setup and gate in one pass with full diagnostics.

        Data problems are reported through the returned status rather than
        raised. An unknown strategy id raises UnknownStrategyError unless the
        registry has a fallback, in which case the substitution is flagged
        on the report.
        """
        lookup = self.registry.resolve(strategy_id)
        profile = lookup.profile

        try:
            history = self._prepare_bars(bars, validate=False)
        except DataQualityError as e:
            return self._invalid(symbol, profile, lookup.substituted, e)

        min_bars = self.config.analysis.min_bars
        if len(history) < min_bars:
            self.logger.warning(
                "Insufficient bar history, cannot analyze",
                symbol=symbol,
                strategy_id=profile.id,
                available=len(history),
                required=min_bars,
            )
            return AnalysisReport(
                symbol=symbol,
                strategy_id=profile.id,
                status=AnalysisStatus.INSUFFICIENT_DATA,
                message=f"Need at least {min_bars} bars, got {len(history)}",
                profile_substituted=lookup.substituted,
            )

        try:
            self.validator.validate_bars(history)
            evaluation = self._evaluate(symbol, history, current_price, profile)
        except DataQualityError as e:
            return self._invalid(symbol, profile, lookup.substituted, e)

        signal = evaluation.signal
        setup = self.setup_calculator.build(
            signal, profile, signal.current_price,
            atr=evaluation.indicators.atr.value,
            levels=evaluation.patterns.support_resistance,
            projection=evaluation.projection,
            capital=capital,
            risk_percent=risk_percent,
        )
        gate_result = self.quality_gate.evaluate(signal, setup, profile)

        self.logger.info(
            "Analysis complete",
            symbol=symbol,
            strategy_id=profile.id,
            direction=signal.direction.value,
            score=signal.score,
            accepted=gate_result.accepted,
            skip_reason=gate_result.skip_reason,
        )

        return AnalysisReport(
            symbol=symbol,
            strategy_id=profile.id,
            status=AnalysisStatus.ANALYZED,
            gate_result=gate_result,
            indicators=evaluation.indicators,
            patterns=evaluation.patterns,
            projection=evaluation.projection,
            message=gate_result.skip_reason,
            profile_substituted=lookup.substituted,
        )

    def _evaluate(self, symbol: str, history: list[Bar], current_price: Optional[float],
                  profile: StrategyProfile) -> Evaluation:
        series = PriceSeries.from_bars(history)
        price = series.last_close if current_price is None else current_price

        indicators = self.calculator.calculate(series, price)
        patterns = self.pattern_detector.scan(history, price)
        projection = self.predictor.project(series, price)
        signal = self.scorer.score(symbol, indicators, patterns, projection, profile, price)

        return Evaluation(signal=signal, indicators=indicators, patterns=patterns, projection=projection)

    def _prepare_bars(self, bars: Iterable[Any], validate: bool = True) -> list[Bar]:
        history = parse_bars(bars)
        if validate and history:
            self.validator.validate_bars(history)
        return history

    def _require_history(self, symbol: str, history: list[Bar]) -> None:
        min_bars = self.config.analysis.min_bars
        if len(history) < min_bars:
            raise InsufficientDataError(
                f"{symbol}: need at least {min_bars} bars, got {len(history)}",
                required_count=min_bars,
                available_count=len(history),
            )

    def _profile(self, strategy: StrategyRef) -> StrategyProfile:
        if isinstance(strategy, StrategyProfile):
            return strategy
        return self.registry.get(strategy)

    def _invalid(self, symbol: str, profile: StrategyProfile, substituted: bool,
                 error: DataQualityError) -> AnalysisReport:
        self.logger.warning(
            "Invalid bar data, cannot analyze",
            symbol=symbol,
            strategy_id=profile.id,
            error_type=type(error).__name__,
            error=str(error),
        )
        return AnalysisReport(
            symbol=symbol,
            strategy_id=profile.id,
            status=AnalysisStatus.INVALID_DATA,
            message=str(error),
            profile_substituted=substituted,
        )
