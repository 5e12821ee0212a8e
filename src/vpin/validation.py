"""Input validation for the VPIN pipeline.

Every check raises on the first violation and has no other side effect.
Non-fatal findings (duplicate timestamps and the like) live in
``vpin.diagnostics``.
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Mapping, Sequence
from dataclasses import astuple
from datetime import datetime
from typing import Any

import pandas as pd

from vpin.config import (
    EARLIEST_TIMESTAMP,
    MAX_BUCKETS,
    MAX_FUTURE,
    MAX_TIMEBARSIZE,
    MIN_BUCKETS,
    MIN_RECORDS,
    MIN_SAMPLENGTH,
    MIN_SPAN,
    MIN_SPLIT_FACTOR,
)
from vpin.errors import (
    EmptyInput,
    InsufficientData,
    InvalidParameter,
    InvalidVolume,
    SchemaError,
    TimeRangeError,
    UnorderedInput,
)
from vpin.models.trade import TradeRecord

TRADE_COLUMNS = ["timestamp", "price", "volume"]


def _as_integer(name: str, value: Any) -> int:
    """Return ``value`` as a plain ``int``; NumPy integer scalars are accepted."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidParameter(f"Parameter '{name}' must be an integer, got: {value!r}")
    return int(value)


def validate_parameters(timebarsize: int, buckets: int, samplength: int) -> tuple[int, int, int]:
    """Check the three control parameters.

    Returns:
        ``(timebarsize, buckets, samplength)`` as plain ints.

    Raises:
        InvalidParameter: On the first parameter outside its range.
    """
    timebarsize = _as_integer("timebarsize", timebarsize)
    buckets = _as_integer("buckets", buckets)
    samplength = _as_integer("samplength", samplength)

    if timebarsize <= 0:
        raise InvalidParameter(f"Parameter 'timebarsize' must be positive, got: {timebarsize}")
    if timebarsize > MAX_TIMEBARSIZE:
        raise InvalidParameter(
            f"Parameter 'timebarsize' should not exceed {MAX_TIMEBARSIZE} seconds (1 hour), "
            f"got: {timebarsize}"
        )

    if buckets <= 0:
        raise InvalidParameter(f"Parameter 'buckets' must be positive, got: {buckets}")
    if buckets < MIN_BUCKETS:
        raise InvalidParameter(
            f"Parameter 'buckets' should be at least {MIN_BUCKETS}, got: {buckets}"
        )
    if buckets > MAX_BUCKETS:
        raise InvalidParameter(
            f"Parameter 'buckets' should not exceed {MAX_BUCKETS}, got: {buckets}"
        )

    if samplength <= 0:
        raise InvalidParameter(f"Parameter 'samplength' must be positive, got: {samplength}")
    if samplength < MIN_SAMPLENGTH:
        raise InvalidParameter(
            f"Parameter 'samplength' should be at least {MIN_SAMPLENGTH}, got: {samplength}"
        )
    if samplength >= buckets:
        raise InvalidParameter(
            f"Parameter 'samplength' ({samplength}) must be less than 'buckets' ({buckets})"
        )
    return timebarsize, buckets, samplength


def validate_split_factor(split_factor: int) -> int:
    split_factor = _as_integer("split_factor", split_factor)
    if split_factor < MIN_SPLIT_FACTOR:
        raise InvalidParameter(
            f"Parameter 'split_factor' should be at least {MIN_SPLIT_FACTOR}, got: {split_factor}"
        )
    return split_factor


def validate_min_records(min_records: int) -> int:
    """Check the configured record floor; it can only be raised."""
    min_records = _as_integer("min_records", min_records)
    if min_records < MIN_RECORDS:
        raise InvalidParameter(
            f"Parameter 'min_records' should be at least {MIN_RECORDS}, got: {min_records}"
        )
    return min_records


def _record_fields(record: Any) -> tuple[Any, ...]:
    """Return the (timestamp, price, volume) triple of one record."""
    if isinstance(record, TradeRecord):
        return astuple(record)
    if isinstance(record, Mapping):
        missing = [c for c in TRADE_COLUMNS if c not in record]
        if missing:
            raise SchemaError(f"Trade record is missing fields: {missing}")
        return tuple(record[c] for c in TRADE_COLUMNS)
    if isinstance(record, Sequence) and not isinstance(record, (str, bytes)):
        if len(record) < 3:
            raise SchemaError(
                f"Trade record must have at least 3 fields (timestamp, price, volume), "
                f"got {len(record)}"
            )
        return tuple(record[:3])
    raise SchemaError(f"Unsupported trade record type: {type(record).__name__}")


def records_to_frame(records: Sequence[Any]) -> pd.DataFrame:
    """Lay out trade records as a raw three-column DataFrame.

    Values are not converted; ``validate_trades`` does that.
    """
    if len(records) == 0:
        raise EmptyInput("Dataset cannot be empty")
    rows = [_record_fields(r) for r in records]
    try:
        return pd.DataFrame(rows, columns=TRADE_COLUMNS)
    except (TypeError, ValueError) as exc:
        raise SchemaError(f"Trade records could not be laid out: {exc}") from exc


def validate_trades(
    trades: pd.DataFrame,
    min_records: int = MIN_RECORDS,
    now: datetime | None = None,
) -> pd.DataFrame:
    """Check a trade frame and return a typed copy.

    Args:
        trades: Frame whose first three columns are timestamp, price, volume.
        min_records: Minimum number of trades accepted.
        now: Reference time for the future-timestamp check (defaults to the
            current time in the timestamps' timezone).

    Returns:
        New frame with columns ``timestamp`` (datetime64), ``price`` and
        ``volume`` (float64), index reset.

    Raises:
        EmptyInput, SchemaError, InsufficientData, InvalidVolume,
        UnorderedInput, TimeRangeError.
    """
    if len(trades) == 0:
        raise EmptyInput("Dataset cannot be empty")
    if trades.shape[1] < 3:
        raise SchemaError(
            f"Dataset must have at least 3 columns (timestamp, price, volume), "
            f"got {trades.shape[1]} columns"
        )
    if len(trades) < min_records:
        raise InsufficientData(
            f"Dataset must contain at least {min_records} rows for reliable VPIN "
            f"calculation, got {len(trades)} rows"
        )

    frame = trades.iloc[:, :3].copy()
    frame.columns = TRADE_COLUMNS
    frame = frame.reset_index(drop=True)

    null_counts = frame.isnull().sum()
    if int(null_counts.sum()) > 0:
        details = ", ".join(f"{c}:{n}" for c, n in null_counts.items() if n > 0)
        raise SchemaError(f"Trade fields cannot contain missing values ({details})")

    frame["timestamp"] = _as_timestamps(frame["timestamp"])
    for column in ("price", "volume"):
        try:
            frame[column] = pd.to_numeric(frame[column], errors="raise").astype("float64")
        except (TypeError, ValueError) as exc:
            raise SchemaError(f"Column '{column}' must contain numeric values") from exc
        if not frame[column].map(math.isfinite).all():
            raise SchemaError(f"Column '{column}' must contain finite values")

    non_positive = int((frame["volume"] <= 0).sum())
    if non_positive:
        raise InvalidVolume(f"Volume values must be positive, got {non_positive} non-positive")

    if not frame["timestamp"].is_monotonic_increasing:
        out_of_order = int((frame["timestamp"].diff().dropna() < pd.Timedelta(0)).sum())
        raise UnorderedInput(
            f"Timestamps must be in chronological order, {out_of_order} out of order"
        )

    _check_time_range(frame["timestamp"], now)
    return frame


def _as_timestamps(column: pd.Series) -> pd.Series:
    if not pd.api.types.is_datetime64_any_dtype(column.dtype):
        # Python datetimes arrive as object dtype; mixed tz-awareness stays object.
        try:
            inferred = pd.Series(column.tolist(), index=column.index)
        except (TypeError, ValueError) as exc:
            raise SchemaError(f"Timestamp column could not be read: {exc}") from exc
        if not pd.api.types.is_datetime64_any_dtype(inferred.dtype):
            raise SchemaError(
                "Timestamp column must contain datetime values of a single timezone"
            )
        column = inferred
    return column


def _check_time_range(timestamps: pd.Series, now: datetime | None) -> None:
    min_time = timestamps.iloc[0]
    max_time = timestamps.iloc[-1]
    tz = min_time.tz

    earliest = pd.Timestamp(EARLIEST_TIMESTAMP)
    if tz is not None:
        earliest = earliest.tz_localize(tz)
    if min_time < earliest:
        raise TimeRangeError(f"Timestamps appear to be too far in the past: {min_time}")

    current = pd.Timestamp.now(tz=tz) if now is None else pd.Timestamp(now)
    if tz is not None and current.tz is None:
        current = current.tz_localize(tz)
    elif tz is None and current.tz is not None:
        current = current.tz_localize(None)
    if max_time > current + MAX_FUTURE:
        raise TimeRangeError(f"Timestamps appear to be too far in the future: {max_time}")

    span = max_time - min_time
    if span < MIN_SPAN:
        raise TimeRangeError(
            f"Time span of data is too short for meaningful VPIN analysis: {span}"
        )
