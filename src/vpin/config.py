"""VPIN estimation configuration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

import pandas as pd

# Parameter limits
MAX_TIMEBARSIZE = 3600
MIN_BUCKETS = 5
MAX_BUCKETS = 1000
MIN_SAMPLENGTH = 2
MIN_SPLIT_FACTOR = 2

# Dataset limits
MIN_RECORDS = 10
EARLIEST_TIMESTAMP = datetime(1990, 1, 1)
MAX_FUTURE = pd.DateOffset(years=1)
MIN_SPAN = timedelta(minutes=1)

# Diagnostic thresholds
MAX_WINDOW_RATIO = 0.5


@dataclass
class VPINConfig:
    """Configuration for VPINEstimator.

    Attributes:
        timebarsize: Width of a time bar in seconds.
        buckets: Number of volume buckets per (average) trading day.
        samplength: Number of buckets in the rolling VPIN window.
        split_factor: Oversized bars are cut into slices of
            ``threshold / split_factor`` where
            ``threshold = (1 - 1 / split_factor) * vbs``.
        min_records: Minimum number of trades accepted; never below
            ``MIN_RECORDS``.
    """

    timebarsize: int = 60
    buckets: int = 50
    samplength: int = 10
    split_factor: int = 10
    min_records: int = MIN_RECORDS
