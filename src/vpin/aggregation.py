"""Bucket aggregation, rolling VPIN and daily means."""

from __future__ import annotations

import numpy as np
import pandas as pd

from vpin.errors import InsufficientBuckets
from vpin.models.bucket import VolumeBucket
from vpin.models.daily import DailyVPIN

BUCKET_COLUMNS = [
    "bucket_index",
    "start_time",
    "end_time",
    "agg_bvol",
    "agg_svol",
    "imbalance",
    "vpin",
]


def aggregate_buckets(classified: pd.DataFrame, samplength: int) -> pd.DataFrame:
    """Sum classified volume per bucket.

    Returns a frame ordered by ``bucket_index`` with ``start_time``,
    ``end_time``, ``agg_bvol``, ``agg_svol``, ``imbalance`` and ``cumoi``.

    Raises:
        InsufficientBuckets: Fewer buckets than ``samplength``.
    """
    grouped = classified.groupby("bucket_index", sort=True)
    buckets = pd.DataFrame(
        {
            "start_time": grouped["interval_start"].min(),
            "end_time": grouped["interval_start"].max(),
            "agg_bvol": grouped["buy_volume"].sum(),
            "agg_svol": grouped["sell_volume"].sum(),
        }
    ).reset_index()

    if len(buckets) < samplength:
        raise InsufficientBuckets(
            f"Only {len(buckets)} volume buckets were formed, at least "
            f"samplength={samplength} are required"
        )

    buckets["imbalance"] = (buckets["agg_bvol"] - buckets["agg_svol"]).abs()
    buckets["cumoi"] = buckets["imbalance"].cumsum()
    return buckets


def rolling_vpin(cumoi: np.ndarray, samplength: int, vbs: float) -> np.ndarray:
    """Window sums of order imbalance over ``samplength * vbs``.

    Differences of the cumulative imbalance give every window in one pass.
    The first ``samplength - 1`` positions are NaN.
    """
    n = len(cumoi)
    window_volume = samplength * vbs
    vpin = np.full(n, np.nan)
    if n < samplength:
        return vpin
    vpin[samplength - 1] = cumoi[samplength - 1] / window_volume
    vpin[samplength:] = (cumoi[samplength:] - cumoi[: n - samplength]) / window_volume
    return vpin


def daily_vpin(buckets: pd.DataFrame) -> pd.DataFrame:
    """Mean defined VPIN per calendar day of bucket start.

    Days on which no bucket has a defined VPIN are left out.
    """
    day = buckets["start_time"].dt.date.rename("day")
    means = buckets["vpin"].groupby(day, sort=True).mean()
    return means.dropna().rename("mean_vpin").reset_index()


def buckets_to_models(buckets: pd.DataFrame) -> list[VolumeBucket]:
    return [
        VolumeBucket(
            bucket_index=int(row.bucket_index),
            start_time=row.start_time,
            end_time=row.end_time,
            buy_volume=float(row.agg_bvol),
            sell_volume=float(row.agg_svol),
            imbalance=float(row.imbalance),
            vpin=None if np.isnan(row.vpin) else float(row.vpin),
        )
        for row in buckets.itertuples(index=False)
    ]


def daily_to_models(daily: pd.DataFrame) -> list[DailyVPIN]:
    return [
        DailyVPIN(day=row.day, mean_vpin=float(row.mean_vpin))
        for row in daily.itertuples(index=False)
    ]
