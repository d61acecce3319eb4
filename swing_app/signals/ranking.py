"""Cross-symbol ordering of gate results"""

from typing import Iterable

from ..models.signals import GateResult


def rank_key(result: GateResult) -> tuple[float, float]:
    return (-result.signal.score, -result.trade_setup.risk_reward_ratio)


def rank_signals(results: Iterable[GateResult], accepted_only: bool = True) -> list[GateResult]:
    """
    Order results by score descending, ties broken by risk:reward descending

    Rejected results are dropped unless ``accepted_only`` is False, in which
    case they are ranked alongside accepted ones for review.
    """
    pool = [r for r in results if r.accepted or not accepted_only]
    return sorted(pool, key=rank_key)
