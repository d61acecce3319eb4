"""
Error classification for the swing signal engine.

Data quality errors are recoverable problems with the supplied bars; system
failures are configuration or calculation faults.
"""

from .data_quality import (
    DataQualityError,
    TemporalDataError,
    MissingDataError,
    MalformedDataError,
    InsufficientDataError,
)
from .system_failures import (
    SystemFailureError,
    ConfigInvalidError,
    UnknownStrategyError,
    IndicatorCalculationError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "TemporalDataError",
    "MissingDataError",
    "MalformedDataError",
    "InsufficientDataError",
    # System Failures
    "SystemFailureError",
    "ConfigInvalidError",
    "UnknownStrategyError",
    "IndicatorCalculationError",
]
