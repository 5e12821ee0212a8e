"""Bulk volume classification of bucketed bars.

Each bar's volume is split between buyers and sellers by the standard
normal CDF of its price change scaled by the deviation of all bar price
changes (Easley, Lopez de Prado and O'Hara).
"""

from __future__ import annotations

import pandas as pd
import scipy.stats as ss


def buy_probability(price_delta: pd.Series, sdp: float) -> pd.Series:
    return pd.Series(ss.norm.cdf(price_delta / sdp), index=price_delta.index)


def classify_flow(bars: pd.DataFrame, sdp: float) -> pd.DataFrame:
    """Add ``buy_prob``, ``sell_prob``, ``buy_volume`` and ``sell_volume``.

    Bars without volume, which the splitting arithmetic can leave behind,
    are dropped.

    Args:
        bars: Bucket-assigned bars with ``price_delta`` and ``total_volume``.
        sdp: Standard deviation of time bar price changes.
    """
    classified = bars.copy()
    classified["buy_prob"] = buy_probability(classified["price_delta"], sdp)
    classified["sell_prob"] = 1.0 - classified["buy_prob"]
    classified["buy_volume"] = classified["total_volume"] * classified["buy_prob"]
    classified["sell_volume"] = classified["total_volume"] * classified["sell_prob"]
    return classified.loc[classified["total_volume"] > 0].reset_index(drop=True)
