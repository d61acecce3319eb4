"""
Swing App - Technical Trading-Signal Scoring Engine

Turns an OHLCV bar history for a single instrument into a graded trade
recommendation: indicators, pattern matches and a regression projection are
combined into a weighted directional score, converted into entry/stop/target
levels and filtered by a strategy-specific quality gate.
"""

__version__ = "0.1.0"
__author__ = "Swing App Team"
