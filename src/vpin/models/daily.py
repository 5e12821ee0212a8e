"""Daily VPIN data model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailyVPIN:
    """Mean of the defined bucket VPIN values starting on one calendar day."""

    day: date
    mean_vpin: float
