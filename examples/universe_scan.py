#!/usr/bin/env python3
"""
Universe Scan Example - Swing Signal Engine

Scans a small symbol universe through an in-memory bar source with a
failing primary feed, then prints the ranked accepted signals and the
per-symbol errors.

Run: python examples/universe_scan.py
"""

import asyncio
import math
from datetime import datetime, timedelta, timezone

from swing_app.config.defaults import ScanParams
from swing_app.data.models import Bar
from swing_app.engine import SignalEngine
from swing_app.logging.config import configure_logging
from swing_app.scanner import FallbackBarSource, FetchResult, UniverseScanner

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_bars(closes: list[float]) -> list[Bar]:
    bars = []
    for i, close in enumerate(closes):
        open_ = closes[i - 1] if i else close
        bars.append(Bar(ts=START + timedelta(days=i), open=open_, high=max(open_, close) + 0.3,
                        low=min(open_, close) - 0.3, close=close, volume=1000.0 + 10 * i))
    return bars


UNIVERSE = {
    "TREND": make_bars([50.0 + 0.6 * i for i in range(80)]),
    "SLIDE": make_bars([120.0 - 0.8 * i for i in range(80)]),
    "CHOP": make_bars([75.0 + math.sin(i / 2.0) for i in range(80)]),
    "IPO": make_bars([20.0 + 0.1 * i for i in range(12)]),
}


class OfflineFeed:
    """Primary feed that is down."""

    name = "primary"

    async def fetch(self, symbol: str) -> FetchResult:
        raise OSError("feed unavailable")


class MemoryFeed:
    """Backup feed serving the in-memory universe."""

    name = "memory"

    async def fetch(self, symbol: str) -> FetchResult:
        await asyncio.sleep(0.01)
        if symbol not in UNIVERSE:
            return FetchResult.failure(symbol, self.name, "unknown symbol")
        return FetchResult.success(symbol, self.name, UNIVERSE[symbol])


async def run_scan() -> None:
    engine = SignalEngine()
    source = FallbackBarSource([OfflineFeed(), MemoryFeed()])
    scanner = UniverseScanner(engine, source, ScanParams(batch_size=2, batch_delay_seconds=0.05))

    symbols = [*UNIVERSE, "DELISTED"]
    report = await scanner.scan(symbols, strategy_id="swing")

    print(f"📈 Ranked signals ({len(report.accepted)} accepted of {len(symbols)} symbols)")
    for rank, result in enumerate(report.ranked(accepted_only=False), 1):
        signal = result.signal
        mark = "✅" if result.accepted else "⛔"
        print(f"  {rank}. {mark} {signal.symbol:<6} {signal.direction.value:<8} score {signal.score:5.1f}  "
              f"R:R {result.trade_setup.risk_reward_ratio:.2f}  {result.skip_reason or ''}")

    if report.errors:
        print("\n⚠️  Errors")
        for symbol, error in report.errors.items():
            print(f"  {symbol}: {error}")


def main():
    """Main demonstration function."""
    configure_logging(level="WARNING")
    print("🚀 Swing Signal Engine - Universe Scan Demo")
    print("=" * 60)
    asyncio.run(run_scan())
    print("\n🎉 Demo completed!")


if __name__ == "__main__":
    main()
