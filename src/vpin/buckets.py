"""Volume bucket construction.

Bars are laid end to end on a volume clock and cut into buckets of equal
volume ``vbs``. Three steps, each returning a new frame:

1. ``split_large_bars`` slices every bar heavier than
   ``(1 - 1/split_factor) * vbs`` into a residual plus equal slices, so no
   single bar can dominate a bucket.
2. ``assign_buckets`` re-sorts, reissues ``sequence_id`` and assigns each bar
   to the bucket its cumulative volume ends in.
3. ``reallocate_boundaries`` splits the first bar of every bucket after the
   first, moving the part that completes the previous bucket onto a copy
   labelled with that bucket.

Total volume is unchanged by all three steps.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

DEFAULT_SPLIT_FACTOR = 10


def count_days(bars: pd.DataFrame) -> int:
    """Number of distinct calendar days among bar intervals."""
    return int(bars["interval_start"].dt.normalize().nunique())


def volume_bucket_size(bars: pd.DataFrame, buckets: int) -> float:
    """Average daily volume divided by the number of buckets per day."""
    total_volume = float(bars["total_volume"].sum())
    return (total_volume / count_days(bars)) / buckets


def split_threshold(vbs: float, split_factor: int = DEFAULT_SPLIT_FACTOR) -> float:
    return (1 - 1 / split_factor) * vbs


def split_large_bars(
    bars: pd.DataFrame,
    vbs: float,
    split_factor: int = DEFAULT_SPLIT_FACTOR,
) -> pd.DataFrame:
    """Slice bars whose volume exceeds the split threshold.

    The original bar keeps ``total_volume mod threshold``; it is followed by
    ``split_factor * (total_volume // threshold)`` slices of
    ``threshold / split_factor`` sharing its interval and price delta.
    Slices are appended after the originals, unsorted.
    """
    threshold = split_threshold(vbs, split_factor)
    large = bars["total_volume"] > threshold
    if not large.any():
        return bars.copy()

    large_bars = bars.loc[large]
    volumes = large_bars["total_volume"]
    counts = (split_factor * np.floor_divide(volumes, threshold)).astype(np.int64)

    residual = bars.copy()
    residual.loc[large, "total_volume"] = np.mod(volumes, threshold)

    slices = large_bars.iloc[np.repeat(np.arange(len(large_bars)), counts.to_numpy())].copy()
    slices["total_volume"] = threshold / split_factor

    return pd.concat([residual, slices], ignore_index=True)


def assign_buckets(bars: pd.DataFrame, vbs: float) -> pd.DataFrame:
    """Assign each bar the bucket its running volume falls in.

    Adds ``runvol`` (cumulative volume), ``bucket_index``
    (``1 + runvol // vbs``) and ``excess`` (the part of the bar inside its
    own bucket). ``sequence_id`` is reissued after the stable sort on
    ``interval_start``.
    """
    assigned = bars.sort_values("interval_start", kind="mergesort").reset_index(drop=True)
    assigned["sequence_id"] = np.arange(1, len(assigned) + 1)
    assigned["runvol"] = assigned["total_volume"].cumsum()
    assigned["bucket_index"] = (1 + np.floor_divide(assigned["runvol"], vbs)).astype(np.int64)
    assigned["excess"] = assigned["runvol"] - (assigned["bucket_index"] - 1) * vbs
    return assigned


def reallocate_boundaries(assigned: pd.DataFrame) -> pd.DataFrame:
    """Split every bucket-opening bar across the boundary it crosses.

    For each bucket after the first, the bar with the lowest ``sequence_id``
    keeps ``excess`` in its own bucket; ``total_volume - excess`` moves to a
    copy in the previous bucket. The result is sorted by
    ``(interval_start, bucket_index)``.
    """
    later = assigned.loc[assigned["bucket_index"] != 1]
    if later.empty:
        return assigned.copy()

    first_rows = later.sort_values("sequence_id").groupby("bucket_index", sort=True).head(1)
    crossing = assigned["sequence_id"].isin(first_rows["sequence_id"])

    reallocated = assigned.copy()
    reallocated.loc[crossing, "total_volume"] = assigned.loc[crossing, "excess"]

    carried = first_rows.copy()
    carried["total_volume"] = first_rows["total_volume"] - first_rows["excess"]
    carried["bucket_index"] = first_rows["bucket_index"] - 1

    combined = pd.concat([reallocated, carried], ignore_index=True)
    return combined.sort_values(["interval_start", "bucket_index"], kind="mergesort").reset_index(
        drop=True
    )


def build_volume_buckets(
    bars: pd.DataFrame,
    vbs: float,
    split_factor: int = DEFAULT_SPLIT_FACTOR,
) -> pd.DataFrame:
    """Run splitting, assignment and boundary reallocation on time bars."""
    expanded = split_large_bars(bars, vbs, split_factor)
    assigned = assign_buckets(expanded, vbs)
    return reallocate_boundaries(assigned)
