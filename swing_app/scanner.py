"""
Universe scanning boundary.

Bar retrieval is the only suspending step; the engine itself is
synchronous. Symbols are processed in bounded batches with a pause between
batches to respect upstream rate limits, and results are ranked explicitly
since completion order carries no meaning.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Sequence

import structlog

from .config.defaults import ScanParams
from .engine import SignalEngine
from .errors import DataQualityError, IndicatorCalculationError
from .models.signals import AnalysisReport, AnalysisStatus, GateResult
from .signals.ranking import rank_signals

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """Tagged outcome of a bar-history fetch"""
    symbol: str
    source: str
    bars: Sequence[Any] = ()
    current_price: Optional[float] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, symbol: str, source: str, bars: Sequence[Any],
                current_price: Optional[float] = None) -> "FetchResult":
        return cls(symbol=symbol, source=source, bars=bars, current_price=current_price)

    @classmethod
    def failure(cls, symbol: str, source: str, error: str) -> "FetchResult":
        return cls(symbol=symbol, source=source, error=error)


class BarSource(Protocol):
    """Adapter contract for market-data providers."""

    name: str

    async def fetch(self, symbol: str) -> FetchResult: ...


class FallbackBarSource:
    """
    Tries an ordered list of sources and returns the first success.

    A source that raises is treated as a failed fetch so the next source
    still gets its turn. The combined failure lists every source's error.
    """

    name = "fallback"

    def __init__(self, sources: Sequence[BarSource]):
        if not sources:
            raise ValueError("FallbackBarSource requires at least one source")
        self.sources = tuple(sources)

    async def fetch(self, symbol: str) -> FetchResult:
        errors = []
        for source in self.sources:
            try:
                result = await source.fetch(symbol)
            except (OSError, asyncio.TimeoutError, ValueError) as e:
                result = FetchResult.failure(symbol, source.name, f"{type(e).__name__}: {e}")

            if result.ok:
                if errors:
                    logger.info("Bar source fallback succeeded", symbol=symbol, source=source.name,
                                failed_sources=len(errors))
                return result

            logger.warning("Bar source failed", symbol=symbol, source=source.name, error=result.error)
            errors.append(f"{source.name}: {result.error}")

        return FetchResult.failure(symbol, self.name, "; ".join(errors))


@dataclass(frozen=True)
class ScanReport:
    """Per-symbol analysis reports plus fetch and analysis errors"""
    strategy_id: str
    reports: tuple[AnalysisReport, ...] = ()
    errors: dict[str, str] = field(default_factory=dict)

    def ranked(self, accepted_only: bool = True) -> list[GateResult]:
        return rank_signals(
            (r.gate_result for r in self.reports if r.gate_result is not None),
            accepted_only=accepted_only,
        )

    @property
    def accepted(self) -> list[GateResult]:
        return self.ranked()

    def to_dict(self) -> dict[str, Any]:
        return {
            "strategy_id": self.strategy_id,
            "analyzed": sum(1 for r in self.reports if r.status == AnalysisStatus.ANALYZED),
            "accepted": [g.to_dict() for g in self.accepted],
            "reports": [r.to_dict() for r in self.reports],
            "errors": dict(self.errors),
        }


class UniverseScanner:
    """Runs SignalEngine.analyze over a symbol universe in bounded async batches"""

    def __init__(self, engine: SignalEngine, source: BarSource, params: Optional[ScanParams] = None):
        self.engine = engine
        self.source = source
        self.params = params or engine.config.scan

    async def scan(
        self,
        symbols: Sequence[str],
        strategy_id: str = "swing",
        capital: Optional[float] = None,
        risk_percent: Optional[float] = None,
    ) -> ScanReport:
        # Resolve up front so a bad strategy id fails before any fetch
        self.engine.registry.resolve(strategy_id)

        batch_size = max(1, self.params.batch_size)
        semaphore = asyncio.Semaphore(batch_size)
        reports: list[AnalysisReport] = []
        errors: dict[str, str] = {}

        batches = [symbols[i:i + batch_size] for i in range(0, len(symbols), batch_size)]
        for index, batch in enumerate(batches):
            outcomes = await asyncio.gather(*(
                self._scan_symbol(symbol, semaphore, strategy_id, capital, risk_percent)
                for symbol in batch
            ))
            for symbol, report, error in outcomes:
                if report is not None:
                    reports.append(report)
                if error is not None:
                    errors[symbol] = error

            if index < len(batches) - 1 and self.params.batch_delay_seconds > 0:
                await asyncio.sleep(self.params.batch_delay_seconds)

        report = ScanReport(strategy_id=strategy_id, reports=tuple(reports), errors=errors)
        logger.info(
            "Universe scan complete",
            strategy_id=strategy_id,
            symbols=len(symbols),
            batches=len(batches),
            analyzed=len(reports),
            accepted=len(report.accepted),
            errors=len(errors),
        )
        return report

    async def _scan_symbol(
        self,
        symbol: str,
        semaphore: asyncio.Semaphore,
        strategy_id: str,
        capital: Optional[float],
        risk_percent: Optional[float],
    ) -> tuple[str, Optional[AnalysisReport], Optional[str]]:
        async with semaphore:
            fetched = await self.source.fetch(symbol)

        if not fetched.ok:
            return symbol, None, f"fetch failed: {fetched.error}"

        try:
            report = self.engine.analyze(
                symbol,
                fetched.bars,
                current_price=fetched.current_price,
                strategy_id=strategy_id,
                capital=capital,
                risk_percent=risk_percent,
            )
        except (DataQualityError, IndicatorCalculationError) as e:
            logger.error("Symbol analysis failed", symbol=symbol, error_type=type(e).__name__, error=str(e))
            return symbol, None, str(e)

        if report.status != AnalysisStatus.ANALYZED:
            return symbol, report, report.message
        return symbol, report, None
