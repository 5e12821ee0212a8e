"""Shared fixtures for vpin tests."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta
from pathlib import Path

import numpy as np
import pytest

# Ensure src/ is on the path for editable-style imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from vpin.models.trade import TradeRecord

SCENARIO_PRICES = [100.0, 100.1, 100.05, 100.15, 100.2, 100.1, 100.25, 100.3, 100.2, 100.35, 100.4]
SCENARIO_VOLUMES = [1000.0, 1500.0, 1200.0, 1800.0, 1600.0, 1400.0, 1700.0, 1900.0, 1300.0, 2000.0, 1100.0]


@pytest.fixture
def scenario_trades() -> list[TradeRecord]:
    """11 trades one minute apart on 2018-10-18 (total volume 16500)."""
    base = datetime(2018, 10, 18, 9, 0)
    return [
        TradeRecord(timestamp=base + timedelta(minutes=i), price=p, volume=v)
        for i, (p, v) in enumerate(zip(SCENARIO_PRICES, SCENARIO_VOLUMES))
    ]


@pytest.fixture
def two_day_trades() -> list[TradeRecord]:
    """Seeded random-walk tape, a trade every 15s over two sessions.

    Three oversized prints force the large-bar splitting path.
    """
    rng = np.random.default_rng(7)
    trades = []
    price = 50.0
    for day in (datetime(2024, 3, 4, 9, 30), datetime(2024, 3, 5, 9, 30)):
        for step in range(0, 6 * 3600 + 1800, 15):
            price += float(rng.normal(0.0, 0.02))
            volume = float(rng.integers(100, 2000))
            trades.append(TradeRecord(day + timedelta(seconds=step), round(price, 2), volume))
    for idx in (100, 700, 1860):
        t = trades[idx]
        trades[idx] = TradeRecord(t.timestamp, t.price, 250_000.0)
    return trades
