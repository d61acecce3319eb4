"""
Error handling tests for the signal engine.

Covers the error classification and how data problems surface from the
engine entry points.
"""

import pytest

from swing_app.errors import (
    ConfigInvalidError,
    DataQualityError,
    IndicatorCalculationError,
    InsufficientDataError,
    MalformedDataError,
    MissingDataError,
    SystemFailureError,
    TemporalDataError,
    UnknownStrategyError,
)
from swing_app.models.signals import AnalysisStatus


class TestErrorClassification:
    """Test error classification system."""

    def test_data_quality_error_hierarchy(self):
        """Test that data quality errors are recoverable."""
        base_error = DataQualityError("base error")
        assert base_error.recoverable is True
        assert base_error.context == {}

        temporal_error = TemporalDataError("out of order", timestamp="t1", expected_timestamp="t0")
        assert isinstance(temporal_error, DataQualityError)
        assert temporal_error.expected_timestamp == "t0"

        missing_error = MissingDataError("missing data", data_type="bars")
        assert missing_error.data_type == "bars"

        malformed_error = MalformedDataError("bad", raw_data="x", expected_format="number")
        assert malformed_error.expected_format == "number"

        short_error = InsufficientDataError("short", required_count=30, available_count=10,
                                            context={"symbol": "X"})
        assert short_error.required_count == 30
        assert short_error.context == {"symbol": "X"}
        assert short_error.recoverable is True

    def test_system_failure_error_hierarchy(self):
        """Test that system failures are not recoverable."""
        calc_error = IndicatorCalculationError("calculation failed", metric_name="atr")
        assert calc_error.recoverable is False
        assert calc_error.metric_name == "atr"

        config_error = ConfigInvalidError("bad config", field="rsi_period", value=0)
        assert isinstance(config_error, SystemFailureError)
        assert config_error.field == "rsi_period"

    def test_unknown_strategy_message(self):
        """Test unknown strategy errors list what is available."""
        error = UnknownStrategyError("scalping", available=["swing", "intraday"])

        assert isinstance(error, ConfigInvalidError)
        assert error.field == "strategy_id"
        assert error.value == "scalping"
        assert str(error) == "Unknown strategy 'scalping' (available: swing, intraday)"

    def test_unknown_strategy_empty_registry(self):
        """Test the message with nothing available."""
        assert "available: none" in str(UnknownStrategyError("x"))


class TestEngineErrorSurface:
    """Test how the engine reports data problems."""

    def test_analyze_never_raises_on_data(self, engine, bar_factory):
        """Test non-finite prices become an invalid-data report."""
        bars = bar_factory([100.0 + (i % 3) for i in range(40)])
        records = [[b.ts, b.open, b.high, b.low, b.close, b.volume] for b in bars]
        records[20][4] = float("inf")
        report = engine.analyze("INF", records)

        assert report.status == AnalysisStatus.INVALID_DATA
        assert "non-finite" in report.message

    def test_score_raises_typed_errors(self, engine):
        """Test score surfaces parse failures as DataQualityError."""
        with pytest.raises(DataQualityError):
            engine.score("BAD", [{"timestamp": 1, "open": 1}])
