"""Trade (tick) data model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class TradeRecord:
    """Single executed trade.

    Attributes:
        timestamp: Execution time (microsecond resolution or finer).
        price: Trade price.
        volume: Traded quantity, strictly positive.
    """

    timestamp: datetime
    price: float
    volume: float
