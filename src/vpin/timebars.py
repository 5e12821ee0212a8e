"""Time bar aggregation.

Trades are cut into fixed-width, right-closed intervals anchored at the
first trade. Each non-empty interval becomes one bar carrying its price
change (last minus first trade price) and its total volume.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from vpin.errors import DegenerateDistribution, InsufficientBars
from vpin.models.timebar import TimeBar

BAR_COLUMNS = ["interval_start", "price_delta", "total_volume", "sequence_id"]


def interval_boundaries(timestamps: pd.Series, timebarsize: int) -> pd.DatetimeIndex:
    """Boundaries ``start, start + step, ...`` up to ``max + step`` inclusive."""
    step = pd.Timedelta(seconds=timebarsize)
    start = timestamps.min()
    end = timestamps.max() + step
    return pd.date_range(start=start, end=end, freq=step)


def assign_intervals(timestamps: pd.Series, timebarsize: int) -> pd.Series:
    """Label each trade with the opening boundary of its interval.

    A trade falls in the first interval whose closing boundary is at or after
    its timestamp, so a trade sitting exactly on a boundary closes the
    interval before it.
    """
    boundaries = interval_boundaries(timestamps, timebarsize)
    closing = boundaries[1:]
    positions = closing.searchsorted(timestamps, side="left")
    return pd.Series(boundaries[positions], index=timestamps.index, name="interval_start")


def build_time_bars(trades: pd.DataFrame, timebarsize: int) -> pd.DataFrame:
    """Aggregate validated trades into time bars.

    Args:
        trades: Chronologically ordered frame with ``timestamp``, ``price``
            and ``volume`` columns.
        timebarsize: Bar width in seconds.

    Returns:
        Frame with columns ``interval_start``, ``price_delta``,
        ``total_volume`` and ``sequence_id`` (1..n), ordered by interval.
    """
    intervals = assign_intervals(trades["timestamp"], timebarsize)
    grouped = trades.groupby(intervals, sort=True)

    bars = pd.DataFrame(
        {
            "price_delta": grouped["price"].last() - grouped["price"].first(),
            "total_volume": grouped["volume"].sum(),
        }
    )
    bars = bars.dropna().reset_index()
    bars["sequence_id"] = np.arange(1, len(bars) + 1)
    return bars[BAR_COLUMNS]


def price_delta_std(bars: pd.DataFrame) -> float:
    """Sample standard deviation (ddof=1) of the bar price deltas.

    Raises:
        DegenerateDistribution: If the deviation is not a positive finite number.
    """
    sdp = float(bars["price_delta"].std(ddof=1))
    if not np.isfinite(sdp) or sdp <= 0:
        raise DegenerateDistribution(
            f"Standard deviation of bar price changes must be positive and finite, "
            f"got {sdp} over {len(bars)} bars"
        )
    return sdp


def aggregate_time_bars(
    trades: pd.DataFrame,
    timebarsize: int,
    samplength: int,
) -> tuple[pd.DataFrame, float]:
    """Build time bars and their price-delta deviation ``sdp``.

    Raises:
        DegenerateDistribution: All price deltas identical, or fewer than two bars.
        InsufficientBars: Fewer bars than ``samplength``.
    """
    bars = build_time_bars(trades, timebarsize)
    sdp = price_delta_std(bars)
    if len(bars) < samplength:
        raise InsufficientBars(
            f"Only {len(bars)} time bars were formed, at least samplength={samplength} "
            f"are required"
        )
    return bars, sdp


def bars_to_models(bars: pd.DataFrame) -> list[TimeBar]:
    return [
        TimeBar(
            interval_start=row.interval_start,
            price_delta=float(row.price_delta),
            total_volume=float(row.total_volume),
            sequence_id=int(row.sequence_id),
        )
        for row in bars.itertuples(index=False)
    ]
