"""Volume bucket data model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class VolumeBucket:
    """Equal-volume bucket with classified flow and rolling VPIN.

    Attributes:
        bucket_index: 1-based bucket number.
        start_time: Earliest bar interval attributed to the bucket.
        end_time: Latest bar interval attributed to the bucket.
        buy_volume: Volume classified as buyer-initiated.
        sell_volume: Volume classified as seller-initiated.
        imbalance: ``|buy_volume - sell_volume|``.
        vpin: Rolling VPIN, ``None`` until the window is full.
    """

    bucket_index: int
    start_time: datetime
    end_time: datetime
    buy_volume: float
    sell_volume: float
    imbalance: float
    vpin: float | None = None

    @property
    def total_volume(self) -> float:
        """Classified volume in the bucket."""
        return self.buy_volume + self.sell_volume
