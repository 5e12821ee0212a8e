"""VPINEstimator — runs the pipeline stages end to end."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import pandas as pd
from loguru import logger

from vpin.aggregation import (
    aggregate_buckets,
    buckets_to_models,
    daily_to_models,
    daily_vpin,
    rolling_vpin,
)
from vpin.buckets import build_volume_buckets, count_days, volume_bucket_size
from vpin.classification import classify_flow
from vpin.config import VPINConfig
from vpin.diagnostics import (
    DiagnosticReport,
    check_bucket_size,
    check_duplicate_timestamps,
    check_vpin_values,
    check_window_ratio,
)
from vpin.models.bucket import VolumeBucket
from vpin.models.daily import DailyVPIN
from vpin.models.timebar import TimeBar
from vpin.timebars import aggregate_time_bars, bars_to_models
from vpin.validation import (
    records_to_frame,
    validate_min_records,
    validate_parameters,
    validate_split_factor,
    validate_trades,
)


@dataclass
class VPINEstimate:
    """Result of one pipeline run.

    Attributes:
        daily: Mean VPIN per calendar day, ordered by day.
        buckets: Volume buckets ordered by index, VPIN populated.
        vbs: Volume bucket size.
        sdp: Standard deviation of time bar price changes.
        ndays: Distinct calendar days among time bars.
        time_bars: Time bars before bucketing, ordered by interval.
        diagnostics: Non-fatal findings of the run.
    """

    daily: list[DailyVPIN]
    buckets: list[VolumeBucket]
    vbs: float
    sdp: float
    ndays: int
    time_bars: list[TimeBar] = field(default_factory=list)
    diagnostics: DiagnosticReport = field(default_factory=DiagnosticReport)

    @property
    def vpin_values(self) -> list[float]:
        """Defined bucket VPIN values in bucket order."""
        return [b.vpin for b in self.buckets if b.vpin is not None]


class VPINEstimator:
    """Validate -> time bars -> volume buckets -> classify -> VPIN.

    Usage::

        estimator = VPINEstimator(VPINConfig(timebarsize=60, buckets=50, samplength=10))
        estimate = estimator.estimate(trades)
        for day in estimate.daily:
            print(day.day, day.mean_vpin)

    Each call works on fresh frames; the estimator holds nothing but its
    configuration.
    """

    def __init__(self, config: VPINConfig | None = None) -> None:
        self.config = config or VPINConfig()

    def estimate(self, trades: Sequence[Any] | pd.DataFrame) -> VPINEstimate:
        """Run the full pipeline on one chronologically ordered batch.

        Args:
            trades: ``TradeRecord``s, 3-field sequences, mappings, or a
                DataFrame whose first three columns are timestamp, price,
                volume.

        Raises:
            VPINError: Any subclass, on the first failed precondition.
        """
        cfg = self.config
        timebarsize, buckets, samplength = validate_parameters(
            cfg.timebarsize, cfg.buckets, cfg.samplength
        )
        split_factor = validate_split_factor(cfg.split_factor)
        min_records = validate_min_records(cfg.min_records)

        frame = trades if isinstance(trades, pd.DataFrame) else records_to_frame(trades)
        frame = validate_trades(frame, min_records=min_records)

        report = DiagnosticReport()
        report.extend(check_duplicate_timestamps(frame))
        report.extend(check_window_ratio(buckets, samplength))

        # 1. Time bars
        bars, sdp = aggregate_time_bars(frame, timebarsize, samplength)
        ndays = count_days(bars)
        vbs = volume_bucket_size(bars, buckets)
        logger.debug(
            "Built {} time bars over {} day(s): sdp={:.6g}, vbs={:.6g}",
            len(bars), ndays, sdp, vbs,
        )
        report.extend(check_bucket_size(vbs, frame))

        # 2. Volume buckets
        bucketed = build_volume_buckets(bars, vbs, split_factor)
        logger.debug(
            "Bucketed {} bars into {} buckets", len(bucketed), bucketed["bucket_index"].nunique()
        )

        # 3. Classification + aggregation
        classified = classify_flow(bucketed, sdp)
        bucket_frame = aggregate_buckets(classified, samplength)
        bucket_frame["vpin"] = rolling_vpin(
            bucket_frame["cumoi"].to_numpy(), samplength, vbs
        )
        report.extend(check_vpin_values(bucket_frame["vpin"].to_numpy(), samplength))
        daily_frame = daily_vpin(bucket_frame)

        for diagnostic in report:
            logger.warning("{}: {}", diagnostic.name, diagnostic.message)

        return VPINEstimate(
            daily=daily_to_models(daily_frame),
            buckets=buckets_to_models(bucket_frame),
            vbs=vbs,
            sdp=sdp,
            ndays=ndays,
            time_bars=bars_to_models(bars),
            diagnostics=report,
        )


def compute_vpin(
    timebarsize: int,
    buckets: int,
    samplength: int,
    trades: Sequence[Any] | pd.DataFrame,
) -> tuple[list[DailyVPIN], list[VolumeBucket]]:
    """Compute daily and bucket-level VPIN for one batch of trades.

    Args:
        timebarsize: Time bar width in seconds (1..3600).
        buckets: Volume buckets per day (5..1000).
        samplength: Rolling window in buckets (2..buckets-1).
        trades: Chronologically ordered trades.

    Returns:
        ``(daily, buckets)``: daily mean VPIN ordered by day, and volume
        buckets ordered by index with VPIN ``None`` until the first full
        window.
    """
    config = VPINConfig(timebarsize=timebarsize, buckets=buckets, samplength=samplength)
    estimate = VPINEstimator(config).estimate(trades)
    return estimate.daily, estimate.buckets
