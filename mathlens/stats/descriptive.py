"""
Descriptive statistics shared by the inference and regression engines.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from ..errors import DomainError, UndefinedResult
from ..numerics import GEOMETRIC_TOL

FENCE_MULTIPLIER = 1.5
MAX_HISTOGRAM_BINS = 30


@dataclass(frozen=True)
class Summary:
    n: int
    mean: float
    median: float
    std: float
    minimum: float
    maximum: float
    q1: float
    q3: float

    @property
    def iqr(self) -> float:
        return self.q3 - self.q1


@dataclass(frozen=True)
class OutlierAnalysis:
    lower_fence: float
    upper_fence: float
    outliers: Tuple[float, ...]
    indices: Tuple[int, ...]


@dataclass(frozen=True)
class Histogram:
    edges: Tuple[float, ...]
    counts: Tuple[int, ...]

    @property
    def centers(self) -> Tuple[float, ...]:
        return tuple(0.5 * (lo + hi) for lo, hi in zip(self.edges[:-1], self.edges[1:]))

    @property
    def densities(self) -> Tuple[float, ...]:
        total = sum(self.counts)
        widths = np.diff(self.edges)
        if total == 0:
            return tuple(0.0 for _ in self.counts)
        return tuple(float(c / (total * w)) for c, w in zip(self.counts, widths))


def as_array(values: Sequence[float], name: str = "values") -> np.ndarray:
    """Coerce a 1-D numeric sequence, rejecting other shapes and non-finite data."""
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1:
        raise ValueError(f"{name} must be one-dimensional, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} must contain only finite numbers")
    return arr


def _require(arr: np.ndarray, minimum: int, what: str) -> None:
    if len(arr) < minimum:
        raise UndefinedResult(
            f"{what} requires at least {minimum} observations, got {len(arr)}"
        )


def quartiles(values: Sequence[float]) -> Tuple[float, float, float]:
    """Return (Q1, median, Q3) using linear-interpolation percentiles."""
    arr = as_array(values)
    _require(arr, 1, "quartiles")
    q1, q2, q3 = np.percentile(arr, [25, 50, 75])
    return float(q1), float(q2), float(q3)


def summarize(values: Sequence[float]) -> Summary:
    arr = as_array(values)
    _require(arr, 1, "a summary")
    q1, median, q3 = quartiles(arr)
    std = float(np.std(arr, ddof=1)) if len(arr) > 1 else 0.0
    return Summary(
        n=int(len(arr)),
        mean=float(np.mean(arr)),
        median=median,
        std=std,
        minimum=float(np.min(arr)),
        maximum=float(np.max(arr)),
        q1=q1,
        q3=q3,
    )


def outlier_fences(values: Sequence[float]) -> Tuple[float, float]:
    """Return Tukey fences ``(Q1 - 1.5 IQR, Q3 + 1.5 IQR)``."""
    q1, _, q3 = quartiles(values)
    iqr = q3 - q1
    return q1 - FENCE_MULTIPLIER * iqr, q3 + FENCE_MULTIPLIER * iqr


def detect_outliers(values: Sequence[float]) -> OutlierAnalysis:
    arr = as_array(values)
    lower, upper = outlier_fences(arr)
    mask = (arr < lower) | (arr > upper)
    idx = np.flatnonzero(mask)
    return OutlierAnalysis(
        lower_fence=lower,
        upper_fence=upper,
        outliers=tuple(float(v) for v in arr[idx]),
        indices=tuple(int(i) for i in idx),
    )


def skewness(values: Sequence[float]) -> float:
    """Adjusted Fisher-Pearson sample skewness.

    Raises:
        UndefinedResult: With fewer than three values or zero spread.
    """
    arr = as_array(values)
    _require(arr, 3, "skewness")
    n = len(arr)
    sd = float(np.std(arr, ddof=1))
    if sd <= GEOMETRIC_TOL:
        raise UndefinedResult("skewness is undefined for constant data")
    z = (arr - arr.mean()) / sd
    return float(n / ((n - 1) * (n - 2)) * np.sum(z**3))


def sturges_bins(n: int) -> int:
    return max(1, min(MAX_HISTOGRAM_BINS, int(math.ceil(math.log2(max(n, 1)) + 1))))


def histogram(values: Sequence[float], bins: int | None = None) -> Histogram:
    """Bin values into equal-width bins (Sturges' rule by default, max 30)."""
    arr = as_array(values)
    _require(arr, 1, "a histogram")
    if bins is None:
        bins = sturges_bins(len(arr))
    if int(bins) < 1:
        raise DomainError(f"bins must be at least 1, got {bins}")
    counts, edges = np.histogram(arr, bins=int(bins))
    return Histogram(
        edges=tuple(float(e) for e in edges),
        counts=tuple(int(c) for c in counts),
    )
