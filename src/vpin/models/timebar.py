"""Time bar data model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TimeBar:
    """Fixed-width time bar aggregated from trades.

    Attributes:
        interval_start: Opening boundary of the bar's interval.
        price_delta: Last trade price minus first trade price in the bar.
        total_volume: Sum of trade volumes in the bar.
        sequence_id: Dense 1-based row key, reissued after every re-sort.
    """

    interval_start: datetime
    price_delta: float
    total_volume: float
    sequence_id: int
