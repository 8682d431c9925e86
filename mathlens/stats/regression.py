"""Provide correlation and simple linear regression diagnostics.

This module supports:
- Pearson correlation with a verbal strength interpretation,
- ordinary least-squares straight-line fits with coefficient standard errors,
- residual analysis, leverage and Cook's distance influence measures.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np
from scipy.stats import t as student_t

from ..config import DEFAULT_CONFIDENCE
from ..errors import DomainError, UndefinedResult
from ..numerics import GEOMETRIC_TOL
from .descriptive import as_array

STANDARDIZED_RESIDUAL_LIMIT = 2.0

_CORRELATION_BANDS = (
    (0.9, "very strong"),
    (0.7, "strong"),
    (0.5, "moderate"),
    (0.3, "weak"),
    (0.1, "very weak"),
)


@dataclass(frozen=True)
class RegressionModel:
    """Least-squares line ``y = slope * x + intercept`` and its diagnostics."""

    slope: float
    intercept: float
    r: float
    r_squared: float
    standard_error: float
    slope_se: float
    intercept_se: float
    residuals: Tuple[float, ...]
    n: int

    @property
    def dof(self) -> int:
        return self.n - 2

    def predict(self, x: float) -> float:
        return self.slope * x + self.intercept


def _paired(x: Sequence[float], y: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    x_arr = as_array(x, "x")
    y_arr = as_array(y, "y")
    if len(x_arr) != len(y_arr):
        raise ValueError(
            f"x and y must have the same length, got {len(x_arr)} and {len(y_arr)}"
        )
    return x_arr, y_arr


def _sums(x_arr: np.ndarray, y_arr: np.ndarray) -> Tuple[float, float, float]:
    dx = x_arr - x_arr.mean()
    dy = y_arr - y_arr.mean()
    return float(np.sum(dx * dy)), float(np.sum(dx * dx)), float(np.sum(dy * dy))


def _is_constant(values: np.ndarray) -> bool:
    return bool(np.ptp(values) == 0.0)


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """Compute the Pearson product-moment correlation coefficient.

    Args:
        x (Sequence[float]): First variable.
        y (Sequence[float]): Second variable, paired with ``x``.

    Returns:
        float: ``r`` clipped to [-1, 1].

    Raises:
        ValueError: If the series differ in length.
        UndefinedResult: If fewer than two pairs are given or either series
            has zero variance.
    """
    x_arr, y_arr = _paired(x, y)
    if len(x_arr) < 2:
        raise UndefinedResult("correlation needs at least two paired observations")
    sxy, sxx, syy = _sums(x_arr, y_arr)
    if _is_constant(x_arr) or _is_constant(y_arr):
        raise UndefinedResult("correlation is undefined when a series is constant")
    r = sxy / math.sqrt(sxx * syy)
    return float(min(1.0, max(-1.0, r)))


def interpret_correlation(r: float) -> str:
    """Describe the strength and direction of ``r`` in words."""
    magnitude = abs(r)
    direction = "positive" if r > 0 else "negative"
    for threshold, label in _CORRELATION_BANDS:
        if magnitude >= threshold:
            return f"{label} {direction}"
    return "negligible"


def calculate_residuals(
    x: Sequence[float], y: Sequence[float], slope: float, intercept: float
) -> np.ndarray:
    """Return ``y_i - (slope * x_i + intercept)`` for every pair."""
    x_arr, y_arr = _paired(x, y)
    return y_arr - (slope * x_arr + intercept)


def standard_error_of_estimate(residuals: Sequence[float]) -> float:
    """Return ``sqrt(SSE / (n - 2))``.

    Raises:
        UndefinedResult: With two or fewer residuals.
    """
    resid = as_array(residuals, "residuals")
    if len(resid) <= 2:
        raise UndefinedResult("standard error of estimate needs more than two points")
    return float(math.sqrt(np.sum(resid**2) / (len(resid) - 2)))


def linear_regression(x: Sequence[float], y: Sequence[float]) -> RegressionModel:
    """Fit an ordinary least-squares straight line.

    Args:
        x (Sequence[float]): Independent variable.
        y (Sequence[float]): Dependent variable.

    Returns:
        RegressionModel: Slope ``Sxy / Sxx``, intercept ``y_bar - slope *
        x_bar``, correlation ``r`` and ``r_squared = r ** 2``, the standard
        error of estimate, coefficient standard errors and residuals.

    Raises:
        ValueError: If the series differ in length.
        UndefinedResult: If fewer than three points are given, the line is
            vertical (constant ``x``), or ``y`` is constant so ``r`` is
            undefined.

    Note:
        Standard errors describe statistical scatter about the line only.

    References:
        Ordinary least squares linear regression.
    """
    x_arr, y_arr = _paired(x, y)
    n = int(len(x_arr))
    if n < 3:
        raise UndefinedResult("regression needs at least three points")
    sxy, sxx, syy = _sums(x_arr, y_arr)
    if _is_constant(x_arr):
        raise UndefinedResult("regression line is vertical: x has no variance")
    if _is_constant(y_arr):
        raise UndefinedResult("correlation is undefined: y has no variance")

    slope = sxy / sxx
    xbar = float(x_arr.mean())
    intercept = float(y_arr.mean()) - slope * xbar
    r = min(1.0, max(-1.0, sxy / math.sqrt(sxx * syy)))
    resid = calculate_residuals(x_arr, y_arr, slope, intercept)
    see = standard_error_of_estimate(resid)

    return RegressionModel(
        slope=float(slope),
        intercept=float(intercept),
        r=float(r),
        r_squared=float(r * r),
        standard_error=see,
        slope_se=float(see / math.sqrt(sxx)),
        intercept_se=float(see * math.sqrt(1.0 / n + xbar**2 / sxx)),
        residuals=tuple(float(e) for e in resid),
        n=n,
    )


def slope_confidence_interval(
    model: RegressionModel, level: float = DEFAULT_CONFIDENCE
) -> Tuple[float, float]:
    """Return the t-based confidence bounds for the slope."""
    half = _t_critical(model, level) * model.slope_se
    return model.slope - half, model.slope + half


def intercept_confidence_interval(
    model: RegressionModel, level: float = DEFAULT_CONFIDENCE
) -> Tuple[float, float]:
    """Return the t-based confidence bounds for the intercept."""
    half = _t_critical(model, level) * model.intercept_se
    return model.intercept - half, model.intercept + half


def _t_critical(model: RegressionModel, level: float) -> float:
    if not 0.0 < level < 1.0:
        raise DomainError(f"confidence level must lie strictly between 0 and 1, got {level}")
    return float(student_t.ppf(1.0 - (1.0 - level) / 2.0, model.dof))


def leverage(x: Sequence[float]) -> np.ndarray:
    """Hat-matrix diagonal ``1/n + (x_i - x_bar)^2 / Sxx`` for a straight line."""
    x_arr = as_array(x, "x")
    if len(x_arr) < 2:
        raise UndefinedResult("leverage needs at least two points")
    dx = x_arr - x_arr.mean()
    sxx = float(np.sum(dx * dx))
    if _is_constant(x_arr):
        raise UndefinedResult("leverage is undefined when x has no variance")
    return 1.0 / len(x_arr) + dx * dx / sxx


def cooks_distance(
    x: Sequence[float], y: Sequence[float], i: Optional[int] = None
):
    """Quantify each point's influence on the fitted line.

    Uses the closed form ``D_i = e_i^2 / (p * MSE) * h_i / (1 - h_i)^2`` with
    ``p = 2`` parameters, which equals refitting without point ``i``.

    Args:
        x (Sequence[float]): Independent variable.
        y (Sequence[float]): Dependent variable.
        i (int, optional): Index of a single point. When omitted, distances
            for every point are returned.

    Returns:
        float | numpy.ndarray: Cook's distance. A point with leverage 1
        (the only point at its x value) has infinite influence.

    Raises:
        IndexError: If ``i`` is out of range.
        UndefinedResult: For fewer than three points or constant ``x``.
    """
    x_arr, y_arr = _paired(x, y)
    n = len(x_arr)
    if n < 3:
        raise UndefinedResult("Cook's distance needs at least three points")
    h = leverage(x_arr)
    sxy, sxx, _ = _sums(x_arr, y_arr)
    slope = sxy / sxx
    intercept = float(y_arr.mean()) - slope * float(x_arr.mean())
    resid = calculate_residuals(x_arr, y_arr, slope, intercept)
    mse = float(np.sum(resid**2)) / (n - 2)

    distances = np.zeros(n)
    for k in range(n):
        if h[k] >= 1.0 - GEOMETRIC_TOL:
            distances[k] = math.inf
        elif mse > 0:
            distances[k] = resid[k] ** 2 / (2.0 * mse) * h[k] / (1.0 - h[k]) ** 2

    if i is None:
        return distances
    if not -n <= i < n:
        raise IndexError(f"point index {i} out of range for {n} points")
    return float(distances[i])


def identify_outliers(
    x: Sequence[float], y: Sequence[float], limit: float = STANDARDIZED_RESIDUAL_LIMIT
) -> Tuple[int, ...]:
    """Indices whose residual exceeds ``limit`` standard errors of estimate."""
    model = linear_regression(x, y)
    scale = float(np.max(np.abs(as_array(y, "y"))))
    if model.standard_error <= GEOMETRIC_TOL * scale:
        return ()
    resid = np.asarray(model.residuals)
    return tuple(int(k) for k in np.flatnonzero(np.abs(resid / model.standard_error) > limit))
