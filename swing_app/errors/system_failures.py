"""
System failure error classifications for unrecoverable errors.

These exceptions represent misconfiguration or internal calculation faults
that retrying with the same input will not fix.
"""

from typing import Optional, Dict, Any, Sequence


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class ConfigInvalidError(SystemFailureError):
    """Strategy or parameter configuration is missing or inconsistent."""

    def __init__(self, message: str, field: Optional[str] = None,
                 value: Any = None, **kwargs):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value


class UnknownStrategyError(ConfigInvalidError):
    """A strategy id was requested that the registry does not hold."""

    def __init__(self, strategy_id: str, available: Sequence[str] = (), **kwargs):
        super().__init__(
            f"Unknown strategy '{strategy_id}' (available: {', '.join(available) or 'none'})",
            field="strategy_id",
            value=strategy_id,
            **kwargs,
        )
        self.strategy_id = strategy_id
        self.available = tuple(available)


class IndicatorCalculationError(SystemFailureError):
    """Critical error in indicator calculation that prevents scoring."""

    def __init__(self, message: str, metric_name: Optional[str] = None,
                 calculation_input: Optional[Dict[str, Any]] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.metric_name = metric_name
        self.calculation_input = calculation_input
