"""
Canonical data models for bar histories.

Immutable structures representing validated OHLCV input, plus a column view
used by the indicator library.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence


@dataclass(frozen=True)
class Bar:
    """One OHLCV bar with a UTC timestamp."""
    ts: datetime        # UTC market timestamp
    open: float
    high: float
    low: float
    close: float
    volume: float

    @property
    def typical_price(self) -> float:
        return (self.high + self.low + self.close) / 3.0

    @property
    def range(self) -> float:
        return self.high - self.low


@dataclass(frozen=True)
class PriceSeries:
    """Column-oriented view of a bar history, oldest first."""
    opens: tuple[float, ...]
    highs: tuple[float, ...]
    lows: tuple[float, ...]
    closes: tuple[float, ...]
    volumes: tuple[float, ...]

    @classmethod
    def from_bars(cls, bars: Sequence[Bar]) -> "PriceSeries":
        return cls(
            opens=tuple(b.open for b in bars),
            highs=tuple(b.high for b in bars),
            lows=tuple(b.low for b in bars),
            closes=tuple(b.close for b in bars),
            volumes=tuple(b.volume for b in bars),
        )

    def __len__(self) -> int:
        return len(self.closes)

    @property
    def last_close(self) -> float:
        return self.closes[-1]
