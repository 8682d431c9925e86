"""Shared numeric primitives: tolerances, guarded evaluation and step helpers.

Tolerance scheme, one constant family per operation class:

- Limit convergence, and agreement between a limit and a function value:
  ``LIMIT_ABS_TOL`` **or** ``LIMIT_REL_TOL``. Absolute tolerance alone fails
  for large magnitudes; relative tolerance alone fails at exactly zero.
- Geometric equality (degenerate intervals, unit leverage, zero variance):
  ``GEOMETRIC_TOL``.
- Treating a derivative as zero when locating critical points:
  ``CRITICAL_TOL``.
- Root finding on monotone functions (quantiles, refinement): ``ROOT_XTOL``.
"""

from __future__ import annotations

import math
from typing import Callable, Tuple

import numpy as np

from .errors import DomainError

LIMIT_ABS_TOL = 1e-6
LIMIT_REL_TOL = 1e-4
GEOMETRIC_TOL = 1e-10
CRITICAL_TOL = 1e-6
ROOT_XTOL = 1e-12

DEFAULT_STEP = 1e-5

# 1-2-5 geometric offsets from 0.5 down to 1e-7.
APPROACH_OFFSETS: Tuple[float, ...] = tuple(
    m * 10.0**-e for e in range(1, 8) for m in (5, 2, 1)
)

SECANT_STEPS: Tuple[float, ...] = (1.0, 0.5, 0.2, 0.1, 0.05, 0.01, 0.005, 0.001)

DIRECTIONS = ("left", "right", "both")


def is_close(
    a: float,
    b: float,
    abs_tol: float = LIMIT_ABS_TOL,
    rel_tol: float = LIMIT_REL_TOL,
) -> bool:
    """Return True when ``a`` and ``b`` agree in absolute OR relative terms.

    Infinities compare equal only to an infinity of the same sign; NaN is
    never close to anything.
    """
    a = float(a)
    b = float(b)
    if math.isnan(a) or math.isnan(b):
        return False
    if math.isinf(a) or math.isinf(b):
        return a == b
    diff = abs(a - b)
    return diff <= abs_tol or diff <= rel_tol * max(abs(a), abs(b))


def safe_eval(fn: Callable[[float], float], x: float) -> float:
    """Evaluate ``fn(x)`` and map domain failures to NaN.

    Division by zero, ``math.log`` of a non-positive number and similar
    arithmetic failures become ``nan`` so that callers can sample a function
    near a singularity without guarding every call. Overflow becomes ``inf``.
    """
    try:
        value = fn(float(x))
    except OverflowError:
        return math.inf
    except (ArithmeticError, ValueError):
        return math.nan
    if value is None or isinstance(value, complex):
        return math.nan
    return float(value)


def validate_step(h: float) -> float:
    """Return ``h`` as a float, rejecting non-positive or non-finite steps."""
    try:
        h = float(h)
    except (TypeError, ValueError) as exc:
        raise TypeError(f"step size must be a real number, got {h!r}") from exc
    if not math.isfinite(h) or h <= 0:
        raise DomainError(f"step size must be positive and finite, got {h}")
    return h


def validate_direction(direction: str) -> str:
    if direction not in DIRECTIONS:
        raise ValueError(f"direction must be one of {DIRECTIONS}, got {direction!r}")
    return direction


def approach_points(point: float, side: str) -> np.ndarray:
    """Return the sample abscissae approaching ``point`` from one side.

    Args:
        point (float): The point being approached.
        side (str): ``"left"`` or ``"right"``.

    Returns:
        numpy.ndarray: ``point -/+ offset`` for each entry of
        ``APPROACH_OFFSETS``, ordered from farthest to nearest.
    """
    offsets = np.asarray(APPROACH_OFFSETS, dtype=float)
    if side == "left":
        return float(point) - offsets
    if side == "right":
        return float(point) + offsets
    raise ValueError(f"side must be 'left' or 'right', got {side!r}")


def require_callable(fn) -> None:
    if not callable(fn):
        raise TypeError(f"expected a callable function, got {type(fn).__name__}")


def require_generator(rng) -> None:
    if not isinstance(rng, np.random.Generator):
        raise TypeError(
            "rng must be a numpy.random.Generator, e.g. numpy.random.default_rng(seed)"
        )
