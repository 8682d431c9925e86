"""Riemann-sum family numerical integration with convergence tracking.

Rules and their representative points per subinterval [x_i, x_i + dx]:

- left: f(x_i)
- right: f(x_i + dx)
- midpoint: f(x_i + dx / 2)
- trapezoidal: mean of both endpoint values
- simpson: 1-4-2-4-...-4-1 weights scaled by dx / 3 (even n only)

All rules give signed area, so a negative integrand contributes negative
area and reversing the bounds negates the result.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..config import MAX_PARTITIONS, REFERENCE_PARTITIONS
from ..errors import DomainError, UndefinedResult
from ..numerics import GEOMETRIC_TOL, require_callable, safe_eval

METHODS = ("left", "right", "midpoint", "trapezoidal", "simpson")
DEFAULT_CONVERGENCE_NS = (2, 4, 8, 16, 32, 64, 128)


@dataclass(frozen=True)
class RiemannSum:
    """A numerical integral with its rendering geometry.

    ``sample_points`` are the abscissae the rule evaluated; ``areas`` holds
    the signed contribution of each subinterval.
    """

    method: str
    a: float
    b: float
    n: int
    delta_x: float
    value: float
    sample_points: Tuple[float, ...]
    areas: Tuple[float, ...]
    exact: Optional[float] = None

    @property
    def error(self) -> Optional[float]:
        if self.exact is None:
            return None
        return abs(self.value - self.exact)

    @property
    def relative_error(self) -> Optional[float]:
        if self.exact is None or self.exact == 0:
            return None
        return abs(self.value - self.exact) / abs(self.exact)


@dataclass(frozen=True)
class ConvergenceSequence:
    method: str
    reference: float
    reference_is_exact: bool
    sums: Tuple[RiemannSum, ...]

    @property
    def errors(self) -> Tuple[float, ...]:
        return tuple(abs(s.value - self.reference) for s in self.sums)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "n": [s.n for s in self.sums],
                "approximation": [s.value for s in self.sums],
                "error": list(self.errors),
            }
        )


def _validate_partitions(n, method: str, cap: Optional[int]) -> int:
    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        raise TypeError(f"partition count must be an integer, got {n!r}")
    n = int(n)
    if n < 1:
        raise DomainError(f"partition count must be at least 1, got {n}")
    if cap is not None and n > cap:
        raise DomainError(f"partition count {n} exceeds the cap of {cap}")
    if method == "simpson" and n % 2 != 0:
        raise DomainError(f"Simpson's rule requires an even partition count, got {n}")
    return n


def _rule(method: str, a: float, b: float, n: int):
    """Return the sample points and their weights in units of dx."""
    edges = np.linspace(a, b, n + 1)
    dx = (b - a) / n
    if method == "left":
        return edges[:-1], np.ones(n)
    if method == "right":
        return edges[1:], np.ones(n)
    if method == "midpoint":
        return edges[:-1] + 0.5 * dx, np.ones(n)
    if method == "trapezoidal":
        weights = np.ones(n + 1)
        weights[0] = weights[-1] = 0.5
        return edges, weights
    if method == "simpson":
        weights = np.ones(n + 1)
        weights[1:-1:2] = 4.0
        weights[2:-1:2] = 2.0
        return edges, weights / 3.0
    raise ValueError(f"method must be one of {METHODS}, got {method!r}")


def _subinterval_areas(method: str, ys: np.ndarray, dx: float) -> np.ndarray:
    if method in ("left", "right", "midpoint"):
        return ys * dx
    if method == "trapezoidal":
        return 0.5 * (ys[:-1] + ys[1:]) * dx
    # Simpson panels span two subintervals; split each panel's area evenly.
    panels = (ys[:-2:2] + 4.0 * ys[1:-1:2] + ys[2::2]) * dx / 3.0
    return np.repeat(panels / 2.0, 2)


def _integrate(
    fn: Callable[[float], float], a: float, b: float, n: int, method: str
) -> Tuple[float, np.ndarray, np.ndarray]:
    dx = (b - a) / n
    xs, weights = _rule(method, a, b, n)
    ys = np.array([safe_eval(fn, x) for x in xs], dtype=float)
    bad = ~np.isfinite(ys)
    if np.any(bad):
        raise UndefinedResult(
            f"integrand is undefined at x={float(xs[bad][0]):g} on [{a:g}, {b:g}]"
        )
    value = float(np.dot(weights, ys) * dx)
    return value, xs, _subinterval_areas(method, ys, dx)


def _exact_value(fn, a: float, b: float, exact: Optional[float]) -> Optional[float]:
    if exact is not None:
        return float(exact)
    integral = getattr(fn, "exact_integral", None)
    if integral is None:
        return None
    return integral(a, b)


def compute_riemann_sum(
    fn: Callable[[float], float],
    a: float,
    b: float,
    n: int,
    method: str = "midpoint",
    exact: Optional[float] = None,
) -> RiemannSum:
    """Approximate the definite integral of ``fn`` over [a, b].

    Args:
        fn (callable): Integrand. Catalog functions with a known
            antiderivative attach the exact value automatically.
        a (float): Lower bound.
        b (float): Upper bound; ``b < a`` yields the negated integral.
        n (int): Number of equal subintervals, 1 to ``MAX_PARTITIONS``.
        method (str, optional): One of ``left``, ``right``, ``midpoint``,
            ``trapezoidal`` or ``simpson``. Defaults to ``"midpoint"``.
        exact (float, optional): Reference value overriding the catalog one.

    Returns:
        RiemannSum: The approximation with sample points and signed areas.

    Raises:
        TypeError: If ``n`` is not an integer.
        DomainError: If ``n`` is out of range, odd for Simpson's rule, or
            the bounds are not finite.
        UndefinedResult: If the integrand cannot be evaluated at a sample
            point.
    """
    require_callable(fn)
    if method not in METHODS:
        raise ValueError(f"method must be one of {METHODS}, got {method!r}")
    n = _validate_partitions(n, method, MAX_PARTITIONS)
    a, b = float(a), float(b)
    if not (math.isfinite(a) and math.isfinite(b)):
        raise DomainError(f"integration bounds must be finite, got [{a}, {b}]")
    reference = _exact_value(fn, a, b, exact)

    if abs(b - a) <= GEOMETRIC_TOL:
        return RiemannSum(method, a, b, n, 0.0, 0.0, (), (), reference)

    value, xs, areas = _integrate(fn, a, b, n, method)
    return RiemannSum(
        method=method,
        a=a,
        b=b,
        n=n,
        delta_x=(b - a) / n,
        value=value,
        sample_points=tuple(float(x) for x in xs),
        areas=tuple(float(v) for v in areas),
        exact=reference,
    )


def convergence_sequence(
    fn: Callable[[float], float],
    a: float,
    b: float,
    method: str = "midpoint",
    ns: Sequence[int] = DEFAULT_CONVERGENCE_NS,
    exact: Optional[float] = None,
) -> ConvergenceSequence:
    """Evaluate the same integral at increasing ``n`` against a reference.

    The reference is the closed form when known; otherwise a composite
    Simpson estimate with ``REFERENCE_PARTITIONS`` subintervals.
    """
    reference = _exact_value(fn, float(a), float(b), exact)
    is_exact = reference is not None
    if reference is None:
        if abs(float(b) - float(a)) <= GEOMETRIC_TOL:
            reference = 0.0
        else:
            reference, _, _ = _integrate(
                fn, float(a), float(b), REFERENCE_PARTITIONS, "simpson"
            )
    closed_form = reference if is_exact else None
    sums = tuple(
        compute_riemann_sum(fn, a, b, n, method, exact=closed_form)
        for n in sorted(set(ns))
    )
    return ConvergenceSequence(method, float(reference), is_exact, sums)


def compare_methods(
    fn: Callable[[float], float], a: float, b: float, n: int
) -> Dict[str, RiemannSum]:
    """Run every rule at the same ``n``; Simpson is omitted for odd ``n``."""
    return {
        method: compute_riemann_sum(fn, a, b, n, method)
        for method in METHODS
        if not (method == "simpson" and int(n) % 2 != 0)
    }
