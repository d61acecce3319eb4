"""Unit tests for the repository scripts."""

import importlib.util
from pathlib import Path

import pytest

SCRIPTS_DIR = Path(__file__).resolve().parents[2] / "scripts"


def load_script(name):
    spec = importlib.util.spec_from_file_location(f"script_{name}", SCRIPTS_DIR / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def smoke():
    return load_script("smoke_test")


class TestSmokeScript:
    """Test the in-process part of the smoke test."""

    def test_trending_records_are_consistent(self, smoke):
        """Test the synthetic rows form a valid OHLC history."""
        records = smoke.trending_records(40)
        assert len(records) == 40
        for row in records:
            assert row["low"] <= min(row["open"], row["close"])
            assert row["high"] >= max(row["open"], row["close"])

    def test_engine_check_passes(self, smoke, capsys):
        """Test every built-in profile yields a bounded score."""
        assert smoke.check_engine() is True
        output = capsys.readouterr().out
        for strategy_id in ("intraday", "swing", "short_term", "long_term"):
            assert f"✅ {strategy_id}:" in output

    def test_missing_example_fails(self, smoke, capsys):
        """Test an absent example script is reported, not run."""
        assert smoke.run_example("does_not_exist.py") is False
        assert "not found" in capsys.readouterr().out
