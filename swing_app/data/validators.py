"""
Bar history validation.

Checks that a history is usable for indicator work: finite positive prices,
consistent OHLC, non-negative volume and strictly ascending timestamps.
"""

import math
from typing import Sequence

from ..errors import MalformedDataError, MissingDataError, TemporalDataError
from .models import Bar


class BarValidator:
    """Validates bar histories before analysis."""

    def validate_bar(self, bar: Bar, index: int = 0) -> None:
        """
        Validate a single bar.

        Raises:
            MalformedDataError: If prices or volume are invalid
        """
        prices = (bar.open, bar.high, bar.low, bar.close)

        if not all(math.isfinite(p) for p in prices) or not math.isfinite(bar.volume):
            raise MalformedDataError(f"Bar {index} contains non-finite values",
                                     raw_data=repr(bar), expected_format="finite numbers")

        if not all(p > 0 for p in prices):
            raise MalformedDataError(f"Bar {index}: all prices must be positive",
                                     raw_data=repr(bar), expected_format="positive prices")

        if bar.high < max(bar.open, bar.close):
            raise MalformedDataError(
                f"Bar {index}: high {bar.high} must be >= max(open {bar.open}, close {bar.close})",
                raw_data=repr(bar), expected_format="high >= max(open, close)")

        if bar.low > min(bar.open, bar.close):
            raise MalformedDataError(
                f"Bar {index}: low {bar.low} must be <= min(open {bar.open}, close {bar.close})",
                raw_data=repr(bar), expected_format="low <= min(open, close)")

        if bar.volume < 0:
            raise MalformedDataError(f"Bar {index}: volume {bar.volume} must be non-negative",
                                     raw_data=repr(bar), expected_format="volume >= 0")

    def validate_bars(self, bars: Sequence[Bar]) -> None:
        """
        Validate a whole history, oldest first.

        Raises:
            MissingDataError: If the history is empty
            MalformedDataError: If any bar is invalid
            TemporalDataError: If timestamps are not strictly ascending
        """
        if not bars:
            raise MissingDataError("Bar history is empty", data_type="bars")

        previous = None
        for index, bar in enumerate(bars):
            self.validate_bar(bar, index)
            if previous is not None and bar.ts <= previous.ts:
                raise TemporalDataError(
                    f"Bar {index} timestamp {bar.ts.isoformat()} is not after {previous.ts.isoformat()}",
                    timestamp=bar.ts.isoformat(),
                    expected_timestamp=previous.ts.isoformat(),
                )
            previous = bar
