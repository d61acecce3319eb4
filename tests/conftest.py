"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence

import pytest

from swing_app.config.defaults import get_default_config
from swing_app.config.strategies import StrategyRegistry
from swing_app.data.models import Bar
from swing_app.engine import SignalEngine

START = datetime(2024, 1, 1, tzinfo=timezone.utc)

FLAT_CYCLE = (100.5, 100.0, 99.5, 100.0)


def build_bars(closes: Sequence[float], wick: float = 0.25,
               volumes: Optional[Sequence[float]] = None) -> list[Bar]:
    """Daily bars opening at the previous close with a fixed wick beyond the body."""
    bars = []
    for i, close in enumerate(closes):
        open_ = closes[i - 1] if i > 0 else close
        bars.append(Bar(
            ts=START + timedelta(days=i),
            open=open_,
            high=max(open_, close) + wick,
            low=min(open_, close) - wick,
            close=close,
            volume=volumes[i] if volumes is not None else 1000.0,
        ))
    return bars


def flag_closes() -> list[float]:
    """Slow climb 100 -> 112, pole to 130, then a gently declining flag to 128.5."""
    closes = []
    for i in range(90):
        if i < 70:
            closes.append(100 + i * 12 / 69)
        elif i < 80:
            closes.append(112 + (i - 69) * 1.8)
        else:
            closes.append(130 - (i - 79) * 0.15)
    return closes


@pytest.fixture
def bar_factory():
    """Expose the bar builder to tests that need custom shapes."""
    return build_bars


@pytest.fixture
def flag_bars() -> list[Bar]:
    """90 bars in a bullish flag with volume doubling over the last 5 bars."""
    volumes = [2000.0 if i >= 85 else 1000.0 for i in range(90)]
    return build_bars(flag_closes(), wick=0.25, volumes=volumes)


@pytest.fixture
def flat_bars() -> list[Bar]:
    """90 trendless bars oscillating within +/-0.5% of 100."""
    return build_bars([FLAT_CYCLE[i % 4] for i in range(90)], wick=0.2)


@pytest.fixture
def rising_bars() -> list[Bar]:
    """60 bars closing one point higher each day."""
    bars = []
    for i in range(60):
        close = 100.0 + i
        bars.append(Bar(ts=START + timedelta(days=i), open=close - 0.5, high=close + 0.5,
                        low=close - 1.0, close=close, volume=1000.0))
    return bars


@pytest.fixture
def falling_bars() -> list[Bar]:
    """60 bars closing one point lower each day."""
    bars = []
    for i in range(60):
        close = 160.0 - i
        bars.append(Bar(ts=START + timedelta(days=i), open=close + 0.5, high=close + 1.0,
                        low=close - 0.5, close=close, volume=1000.0))
    return bars


@pytest.fixture
def registry() -> StrategyRegistry:
    """Registry with the built-in profiles only."""
    return StrategyRegistry.with_defaults()


@pytest.fixture
def engine(registry, tmp_path) -> SignalEngine:
    """Engine isolated from the repository config directory."""
    return SignalEngine(config=get_default_config(), registry=registry, config_dir=tmp_path)
