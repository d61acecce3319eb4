#!/usr/bin/env python3
"""
Basic Usage Example - Swing Signal Engine

This script demonstrates the basic usage of the swing signal engine with a
synthetic daily bar history. It shows how to:
- Initialize the engine
- Analyze one symbol under every strategy profile
- Read the composite signal, trade setup and gate decision
- Run the score / setup / gate steps separately

Run: python examples/basic_usage.py
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from swing_app.engine import SignalEngine
from swing_app.logging.config import configure_logging
from swing_app.models.signals import AnalysisReport
from swing_app.risk.position_sizing import assess_trade_risk


def create_flag_history(bars: int = 90) -> list[dict[str, Any]]:
    """Slow climb, a sharp pole and a gently drifting flag, as raw records."""
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    records = []
    previous = 100.0
    for i in range(bars):
        if i < 70:
            close = 100 + i * 12 / 69
        elif i < 80:
            close = 112 + (i - 69) * 1.8
        else:
            close = 130 - (i - 79) * 0.15
        records.append({
            "timestamp": (start + timedelta(days=i)).isoformat(),
            "open": previous,
            "high": max(previous, close) + 0.25,
            "low": min(previous, close) - 0.25,
            "close": close,
            "volume": 2000.0 if i >= bars - 5 else 1000.0,
        })
        previous = close
    return records


def print_report(report: AnalysisReport) -> None:
    """Print the decision and the main diagnostics."""
    print(f"📊 {report.symbol} under '{report.strategy_id}': {report.status.value}")
    if report.signal is None:
        print(f"  {report.message}")
        return

    signal = report.signal
    setup = report.trade_setup
    print(f"  Direction: {signal.direction.value}  Score: {signal.score}  "
          f"Quality: {signal.quality_score}  Aligned: {signal.alignment_count}")
    print(f"  Bullish/Bearish points: {signal.bullish_score} / {signal.bearish_score}")
    for contribution in signal.contributing_signals:
        if contribution.weight > 0:
            print(f"    • {contribution.label} ({contribution.direction.value}, {contribution.weight:g})")

    print(f"  Entry {setup.entry:.2f}  Stop {setup.stop_loss:.2f}  Target {setup.target:.2f}  "
          f"R:R {setup.risk_reward_ratio:.2f}  Size {setup.position_size}")

    if report.accepted:
        assessment = assess_trade_risk(setup)
        print(f"  ✅ ACCEPTED  risk {assessment.level} ({assessment.score}): {assessment.recommendation}")
    else:
        print(f"  ⛔ REJECTED  {report.message}")
    print("-" * 60)


def main():
    """Main demonstration function."""
    configure_logging(level="WARNING")

    print("🚀 Swing Signal Engine - Basic Usage Demo")
    print("=" * 60)

    print("1. Initializing the signal engine...")
    engine = SignalEngine()
    print(f"   Strategies: {', '.join(engine.registry.ids())}")
    print()

    records = create_flag_history()
    print(f"2. Analyzing {len(records)} daily bars of a bullish flag...")
    print()
    for strategy_id in engine.registry.ids():
        print_report(engine.analyze("DEMO", records, strategy_id=strategy_id))

    print("3. Step by step under 'swing' with a smaller account...")
    signal = engine.score("DEMO", records, strategy="swing")
    setup = engine.build_trade_setup(signal, records, capital=25000.0, risk_percent=1.0)
    result = engine.gate(signal, setup, strategy="swing")
    print(f"   Score {signal.score} → size {setup.position_size} units, "
          f"{setup.capital_at_risk:.2f} at risk ({setup.capital_at_risk_percent:.2f}%)")
    print(f"   Gate: {'accepted' if result.accepted else result.skip_reason}")

    print("\n4. Too little history is reported, not raised...")
    print_report(engine.analyze("SHORT", records[:10]))

    print("🎉 Demo completed!")


if __name__ == "__main__":
    main()
