"""DataFrame and file adapters around the VPIN pipeline.

Tick files and frames come in many shapes; this module normalizes them to
the ``timestamp, price, volume`` layout the pipeline validates, and lays the
typed results back out as DataFrames for reporting.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd

from vpin.errors import EmptyInput, SchemaError
from vpin.models.bucket import VolumeBucket
from vpin.models.daily import DailyVPIN
from vpin.validation import TRADE_COLUMNS

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
_CSV_SUFFIXES = {".csv", ".txt"}
_PARQUET_SUFFIXES = {".parquet", ".pq"}


def trades_from_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Normalize a tick frame to ``timestamp, price, volume``.

    The first three columns are taken positionally, whatever their names.
    Text timestamps are cut to their first 19 characters (dropping
    fractional seconds and offsets) and parsed as ``YYYY-MM-DD HH:MM:SS``.
    """
    if len(df) == 0:
        raise EmptyInput("Dataset cannot be empty")
    if df.shape[1] < 3:
        raise SchemaError(
            f"Dataset must have at least 3 columns (timestamp, price, volume), "
            f"got {df.shape[1]} columns"
        )

    trades = df.iloc[:, :3].copy()
    trades.columns = TRADE_COLUMNS
    trades = trades.reset_index(drop=True)

    column = trades["timestamp"]
    if not pd.api.types.is_datetime64_any_dtype(column.dtype):
        if column.map(lambda v: isinstance(v, str)).all():
            try:
                trades["timestamp"] = pd.to_datetime(
                    column.str.slice(0, 19), format=TIMESTAMP_FORMAT
                )
            except ValueError as exc:
                raise SchemaError(
                    f"Timestamps must follow '{TIMESTAMP_FORMAT}': {exc}"
                ) from exc

    for name in ("price", "volume"):
        try:
            trades[name] = pd.to_numeric(trades[name], errors="raise").astype("float64")
        except (TypeError, ValueError) as exc:
            raise SchemaError(f"Column '{name}' must contain numeric values") from exc

    return trades


def read_trades(path: Path | str) -> pd.DataFrame:
    """Load a tick file (CSV or Parquet) and normalize it."""
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in _CSV_SUFFIXES:
        df = pd.read_csv(path)
    elif suffix in _PARQUET_SUFFIXES:
        df = pd.read_parquet(path)
    else:
        raise SchemaError(f"Unsupported trade file type: {path.name}")
    return trades_from_frame(df)


def buckets_to_frame(buckets: list[VolumeBucket]) -> pd.DataFrame:
    if not buckets:
        return pd.DataFrame(
            columns=[
                "bucket_index", "start_time", "end_time",
                "agg_bvol", "agg_svol", "imbalance", "vpin",
            ]
        )

    records = []
    for b in buckets:
        records.append(
            {
                "bucket_index": b.bucket_index,
                "start_time": b.start_time,
                "end_time": b.end_time,
                "agg_bvol": b.buy_volume,
                "agg_svol": b.sell_volume,
                "imbalance": b.imbalance,
                "vpin": b.vpin if b.vpin is not None else np.nan,
            }
        )
    return pd.DataFrame(records)


def daily_to_frame(daily: list[DailyVPIN]) -> pd.DataFrame:
    if not daily:
        return pd.DataFrame(columns=["day", "mean_vpin"])
    return pd.DataFrame([{"day": d.day, "mean_vpin": d.mean_vpin} for d in daily])
