"""Tests for bulk volume classification."""

from datetime import datetime, timedelta

import pandas as pd
import pytest
import scipy.stats as ss

from vpin.classification import buy_probability, classify_flow

BASE = datetime(2024, 1, 15, 9, 30)


def _bucketed(deltas, volumes) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "interval_start": [BASE + timedelta(minutes=i) for i in range(len(deltas))],
            "price_delta": deltas,
            "total_volume": volumes,
            "bucket_index": [1] * len(deltas),
        }
    )


class TestBuyProbability:
    def test_flat_price_is_even(self):
        probs = buy_probability(pd.Series([0.0]), 0.05)
        assert probs.iloc[0] == 0.5

    def test_scaled_by_sdp(self):
        probs = buy_probability(pd.Series([0.1, -0.1]), 0.1)
        assert probs.iloc[0] == pytest.approx(ss.norm.cdf(1.0))
        assert probs.iloc[1] == pytest.approx(ss.norm.cdf(-1.0))


class TestClassifyFlow:
    def test_volumes_split(self):
        out = classify_flow(_bucketed([0.0, 0.2, -0.2], [100.0, 200.0, 300.0]), 0.1)
        assert out["buy_volume"].iloc[0] == 50.0
        assert out["sell_volume"].iloc[0] == 50.0
        assert out["buy_volume"].iloc[1] > out["sell_volume"].iloc[1]
        assert out["buy_volume"].iloc[2] < out["sell_volume"].iloc[2]
        assert (out["buy_volume"] + out["sell_volume"]).tolist() == pytest.approx([100.0, 200.0, 300.0])
        assert (out["buy_prob"] + out["sell_prob"]).tolist() == pytest.approx([1.0, 1.0, 1.0])

    def test_symmetric(self):
        out = classify_flow(_bucketed([0.2, -0.2], [100.0, 100.0]), 0.1)
        assert out["buy_volume"].iloc[0] == pytest.approx(out["sell_volume"].iloc[1])

    def test_zero_volume_dropped(self):
        out = classify_flow(_bucketed([0.1, 0.0, -0.1], [10.0, 0.0, 5.0]), 0.1)
        assert len(out) == 2
        assert out["total_volume"].tolist() == [10.0, 5.0]
        assert out.index.tolist() == [0, 1]

    def test_input_untouched(self):
        bars = _bucketed([0.1], [10.0])
        classify_flow(bars, 0.1)
        assert "buy_volume" not in bars.columns
