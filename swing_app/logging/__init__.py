"""
Logging configuration and utilities for the swing signal engine.
"""
from .config import configure_logging, get_gating_logger, get_logger, get_scoring_logger, log_gate_decision

__all__ = ["configure_logging", "get_logger", "get_gating_logger", "get_scoring_logger", "log_gate_decision"]
