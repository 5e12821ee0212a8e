"""vpin — Volume-synchronized Probability of Informed Trading from tick data.

Trades are grouped into time bars, re-cut into equal-volume buckets,
classified into buy/sell flow with bulk volume classification, and turned
into a rolling order-imbalance metric per bucket and per day.

Quick start::

    from vpin import compute_vpin
    daily, buckets = compute_vpin(60, 50, 10, trades)
"""

from __future__ import annotations

import os

from loguru import logger

from vpin.config import VPINConfig
from vpin.diagnostics import Diagnostic, DiagnosticReport
from vpin.errors import (
    DegenerateDistribution,
    EmptyInput,
    InsufficientBars,
    InsufficientBuckets,
    InsufficientData,
    InvalidParameter,
    InvalidVolume,
    SchemaError,
    TimeRangeError,
    UnorderedInput,
    VPINError,
    VPINErrorCode,
)
from vpin.estimator import VPINEstimate, VPINEstimator, compute_vpin
from vpin.frames import buckets_to_frame, daily_to_frame, read_trades, trades_from_frame
from vpin.models.bucket import VolumeBucket
from vpin.models.daily import DailyVPIN
from vpin.models.timebar import TimeBar
from vpin.models.trade import TradeRecord

__version__ = "0.1.0"

# Silent unless the application opts in with logger.enable("vpin").
logger.disable("vpin")

__all__ = [
    # Pipeline
    "compute_vpin",
    "VPINEstimator",
    "VPINEstimate",
    "create_estimator_from_env",
    # Config
    "VPINConfig",
    # Frames
    "trades_from_frame",
    "read_trades",
    "buckets_to_frame",
    "daily_to_frame",
    # Diagnostics
    "Diagnostic",
    "DiagnosticReport",
    # Errors
    "VPINError",
    "VPINErrorCode",
    "InvalidParameter",
    "EmptyInput",
    "SchemaError",
    "InsufficientData",
    "InvalidVolume",
    "UnorderedInput",
    "TimeRangeError",
    "DegenerateDistribution",
    "InsufficientBars",
    "InsufficientBuckets",
    # Models
    "TradeRecord",
    "TimeBar",
    "VolumeBucket",
    "DailyVPIN",
    "package_info",
]


def package_info() -> dict[str, str]:
    return {
        "name": "vpin-estimation",
        "version": __version__,
        "description": "Volume-synchronized Probability of Informed Trading (VPIN) estimation",
    }


def create_estimator_from_env() -> VPINEstimator:
    """Zero-config factory — reads pipeline parameters from env vars.

    Environment variables:
        VPIN_TIMEBARSIZE: Time bar width in seconds (default: 60).
        VPIN_BUCKETS: Volume buckets per day (default: 50).
        VPIN_SAMPLENGTH: Rolling window length in buckets (default: 10).
        VPIN_SPLIT_FACTOR: Slices per oversized bar unit (default: 10).
    """
    defaults = VPINConfig()
    config = VPINConfig(
        timebarsize=int(os.getenv("VPIN_TIMEBARSIZE", str(defaults.timebarsize))),
        buckets=int(os.getenv("VPIN_BUCKETS", str(defaults.buckets))),
        samplength=int(os.getenv("VPIN_SAMPLENGTH", str(defaults.samplength))),
        split_factor=int(os.getenv("VPIN_SPLIT_FACTOR", str(defaults.split_factor))),
    )
    return VPINEstimator(config)
