"""
Quality gate over finished signals.

Every check is evaluated and logged so a rejection lists all the reasons
that applied, not just the first.
"""

from ..config.strategies import StrategyProfile
from ..logging.config import get_gating_logger, log_gate_decision
from ..models.signals import CompositeSignal, GateResult, TradeSetup

gating_logger = get_gating_logger(__name__)


class QualityGate:
    """Stateless accept/reject predicate for a signal, its setup and a profile"""

    def __init__(self):
        self.gating_logger = gating_logger

    def evaluate(self, signal: CompositeSignal, setup: TradeSetup, profile: StrategyProfile) -> GateResult:
        checks = (
            self.check_direction(signal, profile),
            self.check_confidence(signal, profile),
            self.check_risk_reward(signal, setup, profile),
            self.check_alignment(signal, profile),
            self.check_volatility(signal, profile),
        )

        failures = [(name, reason) for name, passed, reason in checks if not passed]
        accepted = not failures

        self.gating_logger.info(
            "Signal accepted" if accepted else "Signal rejected",
            symbol=signal.symbol,
            strategy_id=profile.id,
            direction=signal.direction.value,
            score=signal.score,
            failed_checks=[name for name, _ in failures],
        )

        return GateResult(
            accepted=accepted,
            signal=signal,
            trade_setup=setup,
            skip_reason="; ".join(reason for _, reason in failures) if failures else None,
            failed_checks=tuple(name for name, _ in failures),
        )

    def check_direction(self, signal: CompositeSignal, profile: StrategyProfile) -> tuple[str, bool, str]:
        passed = signal.is_actionable
        reason = f"Direction {signal.direction.value}" if passed else "No directional edge (neutral)"
        self._log("direction", passed, signal, profile, reason, {
            "bullish_score": signal.bullish_score,
            "bearish_score": signal.bearish_score,
            "conviction": signal.conviction,
        })
        return "direction", passed, reason

    def check_confidence(self, signal: CompositeSignal, profile: StrategyProfile) -> tuple[str, bool, str]:
        passed = signal.score >= profile.min_confidence
        if passed:
            reason = f"Confidence {signal.score:.0f}% ≥ {profile.min_confidence:.0f}%"
        else:
            reason = f"Low confidence ({signal.score:.0f}% < {profile.min_confidence:.0f}%)"
        self._log("confidence", passed, signal, profile, reason, {
            "score": signal.score,
            "min_confidence": profile.min_confidence,
        })
        return "confidence", passed, reason

    def check_risk_reward(self, signal: CompositeSignal, setup: TradeSetup,
                          profile: StrategyProfile) -> tuple[str, bool, str]:
        ratio = setup.risk_reward_ratio
        passed = ratio >= profile.min_risk_reward
        if passed:
            reason = f"Risk:reward {ratio:.2f} ≥ {profile.min_risk_reward:.2f}"
        else:
            reason = f"Poor risk:reward ({ratio:.2f} < {profile.min_risk_reward:.2f})"
        self._log("risk_reward", passed, signal, profile, reason, {
            "risk_reward_ratio": ratio,
            "min_risk_reward": profile.min_risk_reward,
            "target_extended": setup.target_extended,
        })
        return "risk_reward", passed, reason

    def check_alignment(self, signal: CompositeSignal, profile: StrategyProfile) -> tuple[str, bool, str]:
        passed = signal.alignment_count >= profile.min_indicator_align
        if passed:
            reason = f"{signal.alignment_count} aligned indicators ≥ {profile.min_indicator_align}"
        else:
            reason = f"Weak indicator alignment ({signal.alignment_count} < {profile.min_indicator_align})"
        self._log("alignment", passed, signal, profile, reason, {
            "alignment_count": signal.alignment_count,
            "min_indicator_align": profile.min_indicator_align,
        })
        return "alignment", passed, reason

    def check_volatility(self, signal: CompositeSignal, profile: StrategyProfile) -> tuple[str, bool, str]:
        passed = signal.atr_percent <= profile.max_volatility_percent
        if passed:
            reason = f"ATR {signal.atr_percent:.2f}% within {profile.max_volatility_percent:.2f}%"
        else:
            reason = (
                f"Volatility too high (ATR {signal.atr_percent:.2f}% > "
                f"{profile.max_volatility_percent:.2f}%)"
            )
        self._log("volatility", passed, signal, profile, reason, {
            "atr_percent": signal.atr_percent,
            "max_volatility_percent": profile.max_volatility_percent,
        })
        return "volatility", passed, reason

    def _log(self, gate_name: str, passed: bool, signal: CompositeSignal, profile: StrategyProfile,
             reason: str, context: dict) -> None:
        log_gate_decision(
            self.gating_logger,
            gate_name=gate_name,
            passed=passed,
            symbol=signal.symbol,
            strategy_id=profile.id,
            reason=reason,
            context=context,
        )
