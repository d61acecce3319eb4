"""Integration tests for async universe scanning."""

import asyncio

import pytest

from swing_app.config.defaults import ScanParams
from swing_app.errors import UnknownStrategyError
from swing_app.models.signals import AnalysisStatus
from swing_app.scanner import FallbackBarSource, FetchResult, UniverseScanner


class StaticSource:
    """In-memory source that records concurrency."""

    def __init__(self, name, histories, delay=0.0):
        self.name = name
        self.histories = histories
        self.delay = delay
        self.calls = []
        self.active = 0
        self.max_active = 0

    async def fetch(self, symbol):
        self.calls.append(symbol)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.active -= 1
        if symbol not in self.histories:
            return FetchResult.failure(symbol, self.name, f"no data for {symbol}")
        return FetchResult.success(symbol, self.name, self.histories[symbol])


class BrokenSource:
    """Source whose transport always fails."""

    name = "broken"

    async def fetch(self, symbol):
        raise OSError("connection refused")


class TestFallbackBarSource:
    """Test ordered source fallback."""

    def test_first_success_wins(self, flat_bars):
        """Test later sources are not consulted after a success."""
        primary = StaticSource("primary", {"FLAT": flat_bars})
        secondary = StaticSource("secondary", {"FLAT": flat_bars})
        result = asyncio.run(FallbackBarSource([primary, secondary]).fetch("FLAT"))

        assert result.ok
        assert result.source == "primary"
        assert secondary.calls == []

    def test_falls_through_failures(self, flat_bars):
        """Test a raising source and an empty source are skipped."""
        empty = StaticSource("empty", {})
        backup = StaticSource("backup", {"FLAT": flat_bars})
        result = asyncio.run(FallbackBarSource([BrokenSource(), empty, backup]).fetch("FLAT"))

        assert result.ok
        assert result.source == "backup"
        assert len(result.bars) == len(flat_bars)

    def test_all_fail(self):
        """Test the combined failure lists every source."""
        source = FallbackBarSource([BrokenSource(), StaticSource("empty", {})])
        result = asyncio.run(source.fetch("NOPE"))

        assert not result.ok
        assert result.source == "fallback"
        assert result.error == "broken: OSError: connection refused; empty: no data for NOPE"

    def test_requires_sources(self):
        """Test an empty source list is rejected."""
        with pytest.raises(ValueError):
            FallbackBarSource([])


@pytest.mark.integration
class TestUniverseScanner:
    """Test batched scanning and ranking."""

    @pytest.fixture
    def source(self, flag_bars, flat_bars, bar_factory):
        return StaticSource("memory", {
            "FLAG": flag_bars,
            "FLAT": flat_bars,
            "SHORT": bar_factory([100.0] * 5),
        }, delay=0.01)

    def test_scan_ranks_and_collects_errors(self, engine, source):
        """Test accepted symbols are ranked and failures kept per symbol."""
        scanner = UniverseScanner(engine, source, ScanParams(batch_size=2, batch_delay_seconds=0))
        report = asyncio.run(scanner.scan(["FLAG", "FLAT", "SHORT", "MISSING"]))

        assert [g.signal.symbol for g in report.accepted] == ["FLAG"]
        assert set(report.errors) == {"SHORT", "MISSING"}
        assert report.errors["MISSING"].startswith("fetch failed:")
        assert report.errors["SHORT"] == "Need at least 30 bars, got 5"

        statuses = {r.symbol: r.status for r in report.reports}
        assert statuses == {
            "FLAG": AnalysisStatus.ANALYZED,
            "FLAT": AnalysisStatus.ANALYZED,
            "SHORT": AnalysisStatus.INSUFFICIENT_DATA,
        }

    def test_concurrency_bounded(self, engine, source):
        """Test no more than batch_size fetches run at once."""
        scanner = UniverseScanner(engine, source, ScanParams(batch_size=2, batch_delay_seconds=0))
        asyncio.run(scanner.scan(["FLAG", "FLAT", "SHORT", "MISSING", "FLAG"]))

        assert source.max_active <= 2
        assert len(source.calls) == 5

    def test_review_ranking_includes_rejected(self, engine, source):
        """Test rejected results can be ranked for review."""
        scanner = UniverseScanner(engine, source, ScanParams(batch_size=5, batch_delay_seconds=0))
        report = asyncio.run(scanner.scan(["FLAT", "FLAG"]))

        everything = report.ranked(accepted_only=False)
        assert [g.signal.symbol for g in everything] == ["FLAG", "FLAT"]
        assert report.to_dict()["analyzed"] == 2

    def test_unknown_strategy_fails_before_fetch(self, engine, source):
        """Test a bad strategy id raises without touching the source."""
        scanner = UniverseScanner(engine, source)
        with pytest.raises(UnknownStrategyError):
            asyncio.run(scanner.scan(["FLAG"], strategy_id="scalping"))
        assert source.calls == []

    def test_defaults_from_engine_config(self, engine, source):
        """Test scan parameters default to the engine configuration."""
        scanner = UniverseScanner(engine, source)
        assert scanner.params == engine.config.scan
