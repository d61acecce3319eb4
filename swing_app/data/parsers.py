"""
Parsers turning raw bar records into canonical Bar objects.

Accepted record shapes:
- mapping with ``timestamp``/``ts``/``time``/``date`` and ``open``, ``high``,
  ``low``, ``close``, ``volume`` keys (values may be numeric strings)
- sequence ``[timestamp, open, high, low, close, volume, ...]``
"""

from typing import Any, Iterable, Mapping, Sequence

from ..errors import MalformedDataError, MissingDataError
from ..utils.time import parse_timestamp
from .models import Bar

_TIMESTAMP_KEYS = ("timestamp", "ts", "time", "date")
_PRICE_KEYS = ("open", "high", "low", "close", "volume")


def _to_float(value: Any, field_name: str, record: Any) -> float:
    if isinstance(value, bool):
        raise MalformedDataError(
            f"Field '{field_name}' must be numeric, got bool",
            raw_data=str(record)[:200],
            expected_format="number",
        )
    try:
        return float(value)
    except (TypeError, ValueError):
        raise MalformedDataError(
            f"Field '{field_name}' must be numeric, got {value!r}",
            raw_data=str(record)[:200],
            expected_format="number",
        ) from None


def parse_bar(record: Any) -> Bar:
    """
    Parse one raw record into a Bar.

    Raises:
        MissingDataError: If a required field is absent
        MalformedDataError: If a field cannot be converted
    """
    if isinstance(record, Bar):
        return record

    if isinstance(record, Mapping):
        ts_value = next((record[k] for k in _TIMESTAMP_KEYS if k in record), None)
        if ts_value is None:
            raise MissingDataError("Bar record has no timestamp field", data_type="timestamp",
                                   context={"record": str(record)[:200]})
        values = []
        for key in _PRICE_KEYS:
            if key not in record:
                raise MissingDataError(f"Bar record is missing '{key}'", data_type=key,
                                       context={"record": str(record)[:200]})
            values.append(_to_float(record[key], key, record))
    elif isinstance(record, Sequence) and not isinstance(record, (str, bytes)):
        if len(record) < 6:
            raise MalformedDataError(
                f"Bar sequence needs 6 fields, got {len(record)}",
                raw_data=str(record)[:200],
                expected_format="[ts, open, high, low, close, volume]",
            )
        ts_value = record[0]
        values = [_to_float(v, k, record) for k, v in zip(_PRICE_KEYS, record[1:6])]
    else:
        raise MalformedDataError(
            f"Unsupported bar record type: {type(record).__name__}",
            raw_data=str(record)[:200],
            expected_format="mapping or sequence",
        )

    try:
        ts = parse_timestamp(ts_value)
    except (ValueError, OverflowError, OSError) as e:
        raise MalformedDataError(
            f"Invalid bar timestamp {ts_value!r}: {e}",
            raw_data=str(record)[:200],
            expected_format="epoch seconds/ms or ISO-8601",
        ) from e

    open_, high, low, close, volume = values
    return Bar(ts=ts, open=open_, high=high, low=low, close=close, volume=volume)


def parse_bars(records: Iterable[Any]) -> list[Bar]:
    """Parse a sequence of raw records, preserving order."""
    return [parse_bar(record) for record in records]
