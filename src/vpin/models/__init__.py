"""VPIN data models."""

from vpin.models.bucket import VolumeBucket
from vpin.models.daily import DailyVPIN
from vpin.models.timebar import TimeBar
from vpin.models.trade import TradeRecord

__all__ = [
    "TradeRecord",
    "TimeBar",
    "VolumeBucket",
    "DailyVPIN",
]
