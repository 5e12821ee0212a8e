"""Tests for volume bucket construction."""

from datetime import datetime, timedelta

import numpy as np
import pandas as pd
import pytest

from vpin.buckets import (
    assign_buckets,
    build_volume_buckets,
    count_days,
    reallocate_boundaries,
    split_large_bars,
    split_threshold,
    volume_bucket_size,
)
from vpin.timebars import build_time_bars
from vpin.validation import records_to_frame, validate_trades

BASE = datetime(2024, 1, 15, 9, 30)


def _bars(volumes, deltas=None, start=BASE) -> pd.DataFrame:
    deltas = deltas or [0.0] * len(volumes)
    return pd.DataFrame(
        {
            "interval_start": [start + timedelta(minutes=i) for i in range(len(volumes))],
            "price_delta": deltas,
            "total_volume": [float(v) for v in volumes],
            "sequence_id": np.arange(1, len(volumes) + 1),
        }
    )


def _scenario_bars(trades) -> pd.DataFrame:
    return build_time_bars(validate_trades(records_to_frame(trades)), 60)


class TestBucketSize:
    def test_single_day(self):
        bars = _bars([1000, 2000, 2000])
        assert count_days(bars) == 1
        assert volume_bucket_size(bars, 5) == 1000.0

    def test_averaged_over_days(self):
        day_one = _bars([3000, 3000])
        day_two = _bars([2000, 2000], start=BASE + timedelta(days=1))
        bars = pd.concat([day_one, day_two], ignore_index=True)
        assert count_days(bars) == 2
        assert volume_bucket_size(bars, 5) == pytest.approx(1000.0)

    def test_threshold(self):
        assert split_threshold(1000.0) == pytest.approx(900.0)
        assert split_threshold(1000.0, 4) == pytest.approx(750.0)


class TestSplitLargeBars:
    def test_no_large_bars_is_copy(self):
        bars = _bars([100, 200])
        out = split_large_bars(bars, 1000.0)
        assert out.equals(bars)
        assert out is not bars

    def test_slices_and_residual(self):
        bars = _bars([2500, 100], deltas=[0.1, -0.2])
        out = split_large_bars(bars, 1000.0)
        # 2500 // 900 = 2 -> 20 slices of 90, residual 700
        assert len(out) == 2 + 20
        assert out["total_volume"].iloc[0] == pytest.approx(700.0)
        slices = out.iloc[2:]
        assert slices["total_volume"].tolist() == pytest.approx([90.0] * 20)
        assert (slices["interval_start"] == bars["interval_start"].iloc[0]).all()
        assert (slices["price_delta"] == 0.1).all()
        assert out["total_volume"].sum() == pytest.approx(2600.0)

    def test_many_multiples(self):
        bars = _bars([9500])
        out = split_large_bars(bars, 1000.0)
        assert len(out) == 1 + 10 * 10
        assert out["total_volume"].sum() == pytest.approx(9500.0)

    def test_exact_multiple_leaves_zero_residual(self):
        threshold = split_threshold(1000.0)
        bars = _bars([2 * threshold])
        out = split_large_bars(bars, 1000.0)
        assert out["total_volume"].iloc[0] == pytest.approx(0.0, abs=1e-9)
        assert out["total_volume"].sum() == pytest.approx(2 * threshold)

    def test_custom_split_factor(self):
        bars = _bars([2000])
        out = split_large_bars(bars, 1000.0, split_factor=4)
        # threshold 750: 2 units -> 8 slices of 187.5, residual 500
        assert len(out) == 9
        assert out["total_volume"].iloc[0] == pytest.approx(500.0)
        assert out["total_volume"].iloc[1:].tolist() == pytest.approx([187.5] * 8)

    def test_input_untouched(self):
        bars = _bars([2500])
        split_large_bars(bars, 1000.0)
        assert bars["total_volume"].tolist() == [2500.0]


class TestAssignBuckets:
    def test_running_volume(self):
        assigned = assign_buckets(_bars([600, 600, 600]), 1000.0)
        assert assigned["runvol"].tolist() == [600.0, 1200.0, 1800.0]
        assert assigned["bucket_index"].tolist() == [1, 2, 2]
        assert assigned["excess"].tolist() == pytest.approx([600.0, 200.0, 800.0])

    def test_reissues_sequence_ids_in_time_order(self):
        bars = split_large_bars(_bars([100, 2500, 100]), 1000.0)
        assigned = assign_buckets(bars, 1000.0)
        assert assigned["sequence_id"].tolist() == list(range(1, len(assigned) + 1))
        assert assigned["interval_start"].is_monotonic_increasing
        # the residual stays ahead of its slices
        assert assigned["total_volume"].iloc[1] == pytest.approx(700.0)


class TestReallocateBoundaries:
    def test_single_bucket_unchanged(self):
        assigned = assign_buckets(_bars([100, 200]), 1000.0)
        out = reallocate_boundaries(assigned)
        assert out["total_volume"].tolist() == [100.0, 200.0]

    def test_crossing_bar_split(self):
        assigned = assign_buckets(_bars([600, 600, 600]), 1000.0)
        out = reallocate_boundaries(assigned)
        assert len(out) == 4
        totals = out.groupby("bucket_index")["total_volume"].sum()
        assert totals.loc[1] == pytest.approx(1000.0)
        assert totals.loc[2] == pytest.approx(800.0)
        # the carried part sits in the same interval as its source bar
        second = out.loc[out["interval_start"] == BASE + timedelta(minutes=1)]
        assert second["bucket_index"].tolist() == [1, 2]
        assert second["total_volume"].tolist() == pytest.approx([400.0, 200.0])

    def test_scenario_buckets_full(self, scenario_trades):
        bars = _scenario_bars(scenario_trades)
        vbs = volume_bucket_size(bars, 5)
        assert vbs == 3300.0
        out = build_volume_buckets(bars, vbs)
        totals = out.groupby("bucket_index")["total_volume"].sum()
        assert totals.loc[1:5].tolist() == pytest.approx([3300.0] * 5)
        # the final bar ends exactly on a boundary, opening an empty bucket
        assert totals.loc[6] == pytest.approx(0.0)
        assert out["total_volume"].sum() == pytest.approx(16500.0)


class TestBuildVolumeBuckets:
    def test_volume_conserved(self, two_day_trades):
        bars = build_time_bars(validate_trades(records_to_frame(two_day_trades)), 60)
        vbs = volume_bucket_size(bars, 50)
        out = build_volume_buckets(bars, vbs)
        assert out["total_volume"].sum() == pytest.approx(bars["total_volume"].sum(), rel=1e-12)
        assert len(out) > len(bars)

    def test_bucket_index_monotonic(self, two_day_trades):
        bars = build_time_bars(validate_trades(records_to_frame(two_day_trades)), 60)
        out = build_volume_buckets(bars, volume_bucket_size(bars, 50))
        assert out["bucket_index"].is_monotonic_increasing
        indices = sorted(out["bucket_index"].unique())
        assert indices == list(range(1, len(indices) + 1))

    def test_no_bar_exceeds_bucket(self, two_day_trades):
        bars = build_time_bars(validate_trades(records_to_frame(two_day_trades)), 60)
        vbs = volume_bucket_size(bars, 50)
        out = build_volume_buckets(bars, vbs)
        assert out["total_volume"].max() <= vbs
        totals = out.groupby("bucket_index")["total_volume"].sum()
        assert totals.iloc[:-1].to_numpy() == pytest.approx(np.full(len(totals) - 1, vbs))
