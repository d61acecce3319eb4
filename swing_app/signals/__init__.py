"""Composite scoring, quality gating and ranking"""

from .gate import QualityGate
from .ranking import rank_key, rank_signals
from .scorer import CompositeScorer

__all__ = ["CompositeScorer", "QualityGate", "rank_key", "rank_signals"]
