"""Non-fatal diagnostics raised alongside a computed VPIN result."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from vpin.config import MAX_WINDOW_RATIO


@dataclass
class Diagnostic:
    """Single diagnostic finding."""

    name: str
    message: str
    details: str = ""


@dataclass
class DiagnosticReport:
    """Aggregate of all diagnostics for one pipeline run."""

    diagnostics: list[Diagnostic] = field(default_factory=list)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.diagnostics)

    def __len__(self) -> int:
        return len(self.diagnostics)

    @property
    def empty(self) -> bool:
        return not self.diagnostics

    @property
    def names(self) -> list[str]:
        return [d.name for d in self.diagnostics]

    def extend(self, diagnostics: list[Diagnostic]) -> None:
        self.diagnostics.extend(diagnostics)


def check_duplicate_timestamps(trades: pd.DataFrame) -> list[Diagnostic]:
    duplicated = int(trades["timestamp"].duplicated().sum())
    if duplicated:
        return [
            Diagnostic(
                "duplicate_timestamps",
                f"{duplicated} trades share a timestamp with an earlier trade",
                "This may affect VPIN calculation accuracy",
            )
        ]
    return []


def check_window_ratio(buckets: int, samplength: int) -> list[Diagnostic]:
    ratio = samplength / buckets
    if ratio > MAX_WINDOW_RATIO:
        return [
            Diagnostic(
                "large_window_ratio",
                f"samplength/buckets ratio is {ratio:.2f} (> {MAX_WINDOW_RATIO})",
                "The rolling window spans most of a trading day",
            )
        ]
    return []


def check_bucket_size(vbs: float, trades: pd.DataFrame) -> list[Diagnostic]:
    """Flag a bucket size smaller than the typical single trade."""
    median_trade = float(trades["volume"].median())
    if vbs < median_trade:
        return [
            Diagnostic(
                "small_bucket_size",
                f"Volume bucket size {vbs:.4g} is below the median trade volume "
                f"{median_trade:.4g}",
                "Consider fewer buckets or a longer sample",
            )
        ]
    return []


def check_vpin_values(vpin: np.ndarray, samplength: int) -> list[Diagnostic]:
    """Flag defined VPIN values that are negative, above 1, or non-finite.

    Positions before the first full window are undefined and skipped.
    """
    defined = vpin[samplength - 1:]
    bad = int(np.sum(~np.isfinite(defined) | (defined < 0) | (defined > 1)))
    if bad:
        return [
            Diagnostic(
                "vpin_out_of_range",
                f"{bad} bucket VPIN values outside [0, 1] or non-finite",
                "Values are kept as computed",
            )
        ]
    return []
