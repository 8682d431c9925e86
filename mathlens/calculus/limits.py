"""Numerical one- and two-sided limits and discontinuity classification.

A one-sided limit samples the function at ``APPROACH_OFFSETS`` from the
point, farthest first. The last three samples decide the outcome:

- converged: both successive differences meet the absolute OR relative
  limit tolerance; the limit is the nearest sample.
- infinite: magnitudes never decrease across the whole sequence, so the
  function is genuinely blowing up rather than oscillating.
- does not exist: neither of the above.
- undefined: no sample could be evaluated at all.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

import numpy as np

from ..errors import DomainError, UndefinedResult
from ..numerics import (
    GEOMETRIC_TOL,
    approach_points,
    is_close,
    require_callable,
    safe_eval,
    validate_direction,
)

logger = logging.getLogger(__name__)

DELTA_SEARCH_ITERATIONS = 50
DELTA_SEARCH_SAMPLES = 100
DELTA_MAX = 1.0


class LimitKind(str, Enum):
    FINITE = "finite"
    INFINITE = "infinite"
    DOES_NOT_EXIST = "does_not_exist"
    UNDEFINED = "undefined"


class ContinuityClassification(str, Enum):
    CONTINUOUS = "continuous"
    REMOVABLE = "removable"
    JUMP = "jump"
    INFINITE = "infinite"
    OSCILLATING = "oscillating"


@dataclass(frozen=True)
class LimitResult:
    """Outcome of a limit evaluation.

    ``limit`` is ``None`` unless ``kind`` is finite or infinite; an infinite
    limit is reported as a signed ``inf`` with ``exists`` False.
    """

    point: float
    direction: str
    approach: Tuple[Tuple[float, float], ...]
    limit: Optional[float]
    exists: bool
    kind: LimitKind
    left: Optional["LimitResult"] = None
    right: Optional["LimitResult"] = None


@dataclass(frozen=True)
class ContinuityResult:
    point: float
    classification: ContinuityClassification
    left: LimitResult
    right: LimitResult
    value: Optional[float]
    description: str


def _has_converged(values: np.ndarray) -> bool:
    if len(values) < 3 or not np.all(np.isfinite(values[-3:])):
        return False
    a, b, c = (float(v) for v in values[-3:])
    return is_close(a, b) and is_close(b, c)


def _diverges_monotonically(values: np.ndarray) -> bool:
    magnitudes = np.abs(values)
    if np.any(np.isnan(magnitudes)):
        return False
    if not np.all(magnitudes[1:] >= magnitudes[:-1]):
        return False
    if magnitudes[-1] <= magnitudes[0]:
        return False
    # A sign flip near the point is oscillation, not a signed infinity.
    tail = np.sign(values[len(values) // 2:])
    return bool(np.all(tail == tail[-1]))


def _one_sided(fn: Callable[[float], float], point: float, side: str) -> LimitResult:
    xs = approach_points(point, side)
    ys = np.array([safe_eval(fn, x) for x in xs], dtype=float)
    approach = tuple((float(x), float(y)) for x, y in zip(xs, ys))

    finite = ys[np.isfinite(ys)]
    if len(finite) == 0 and not np.any(np.isinf(ys)):
        return LimitResult(point, side, approach, None, False, LimitKind.UNDEFINED)

    if _has_converged(ys):
        return LimitResult(point, side, approach, float(ys[-1]), True, LimitKind.FINITE)

    if _diverges_monotonically(ys):
        signed = math.copysign(math.inf, float(ys[-1]))
        return LimitResult(point, side, approach, signed, False, LimitKind.INFINITE)

    logger.debug("No %s limit at x=%g: samples neither converge nor diverge", side, point)
    return LimitResult(point, side, approach, None, False, LimitKind.DOES_NOT_EXIST)


def evaluate_limit(
    fn: Callable[[float], float], point: float, direction: str = "both"
) -> LimitResult:
    """Numerically evaluate the limit of ``fn`` as x approaches ``point``.

    Args:
        fn (callable): Real function of one variable. It is never evaluated
            at ``point`` itself.
        point (float): Point being approached.
        direction (str, optional): ``"left"``, ``"right"`` or ``"both"``.
            Defaults to ``"both"``.

    Returns:
        LimitResult: For ``"both"`` the one-sided results are attached as
        ``left`` and ``right``. A two-sided finite limit is the midpoint of
        the agreeing one-sided limits; one-sided infinities of the same sign
        give that infinity; anything else does not exist.

    Raises:
        TypeError: If ``fn`` is not callable.
        ValueError: If ``direction`` is not recognised.
        DomainError: If ``point`` is not finite.
    """
    require_callable(fn)
    validate_direction(direction)
    point = float(point)
    if not math.isfinite(point):
        raise DomainError(f"limit point must be finite, got {point}")

    if direction != "both":
        return _one_sided(fn, point, direction)

    left = _one_sided(fn, point, "left")
    right = _one_sided(fn, point, "right")
    approach = left.approach + right.approach

    if left.kind is LimitKind.UNDEFINED and right.kind is LimitKind.UNDEFINED:
        return LimitResult(
            point, direction, approach, None, False, LimitKind.UNDEFINED, left, right
        )

    if left.kind is LimitKind.FINITE and right.kind is LimitKind.FINITE:
        if is_close(left.limit, right.limit):
            value = 0.5 * (left.limit + right.limit)
            return LimitResult(
                point, direction, approach, value, True, LimitKind.FINITE, left, right
            )

    if (
        left.kind is LimitKind.INFINITE
        and right.kind is LimitKind.INFINITE
        and left.limit == right.limit
    ):
        return LimitResult(
            point, direction, approach, left.limit, False, LimitKind.INFINITE, left, right
        )

    return LimitResult(
        point, direction, approach, None, False, LimitKind.DOES_NOT_EXIST, left, right
    )


_DESCRIPTIONS = {
    ContinuityClassification.CONTINUOUS: "Continuous: both one-sided limits equal f({p}).",
    ContinuityClassification.REMOVABLE: (
        "Removable discontinuity: the limit exists but differs from f({p}) "
        "or f is undefined there."
    ),
    ContinuityClassification.JUMP: "Jump discontinuity: left and right limits differ.",
    ContinuityClassification.INFINITE: "Infinite discontinuity: the function diverges near {p}.",
    ContinuityClassification.OSCILLATING: (
        "Oscillating discontinuity: the function has no limit at {p}."
    ),
}


def _classify(left: LimitResult, right: LimitResult, value: float) -> ContinuityClassification:
    if LimitKind.INFINITE in (left.kind, right.kind):
        return ContinuityClassification.INFINITE
    if left.kind is LimitKind.FINITE and right.kind is LimitKind.FINITE:
        if not is_close(left.limit, right.limit):
            return ContinuityClassification.JUMP
        limit = 0.5 * (left.limit + right.limit)
        if math.isfinite(value) and is_close(value, limit):
            return ContinuityClassification.CONTINUOUS
        return ContinuityClassification.REMOVABLE
    # Domain boundary: only one side can be approached.
    sides = [s for s in (left, right) if s.kind is not LimitKind.UNDEFINED]
    if len(sides) == 1 and sides[0].kind is LimitKind.FINITE:
        if math.isfinite(value) and is_close(value, sides[0].limit):
            return ContinuityClassification.CONTINUOUS
        return ContinuityClassification.REMOVABLE
    return ContinuityClassification.OSCILLATING


def classify_continuity(fn: Callable[[float], float], point: float) -> ContinuityResult:
    """Classify the behaviour of ``fn`` at ``point``.

    ``f(point)`` is evaluated defensively; a division by zero or similar
    failure counts as "undefined at the point" rather than an error.

    Raises:
        UndefinedResult: If ``fn`` cannot be evaluated on either side of
            ``point``.
    """
    require_callable(fn)
    point = float(point)
    left = evaluate_limit(fn, point, "left")
    right = evaluate_limit(fn, point, "right")
    if left.kind is LimitKind.UNDEFINED and right.kind is LimitKind.UNDEFINED:
        raise UndefinedResult(f"function is undefined on both sides of x={point:g}")

    raw = safe_eval(fn, point)
    classification = _classify(left, right, raw)
    value = raw if math.isfinite(raw) else None
    return ContinuityResult(
        point=point,
        classification=classification,
        left=left,
        right=right,
        value=value,
        description=_DESCRIPTIONS[classification].format(p=f"{point:g}"),
    )


def find_delta_for_epsilon(
    fn: Callable[[float], float],
    point: float,
    limit: float,
    epsilon: float,
) -> Optional[float]:
    """Find a delta that keeps ``fn`` within ``epsilon`` of ``limit``.

    Bisects on delta in (0, 1] for the largest value such that
    ``|fn(x) - limit| < epsilon`` at every sampled x with
    ``0 < |x - point| < delta``.

    Returns:
        float | None: The delta, or ``None`` if no tested delta works.

    Raises:
        DomainError: If ``epsilon`` is not positive.
    """
    require_callable(fn)
    if not (epsilon > 0 and math.isfinite(epsilon)):
        raise DomainError(f"epsilon must be positive, got {epsilon}")

    def works(delta: float) -> bool:
        offsets = np.linspace(delta, delta / DELTA_SEARCH_SAMPLES, DELTA_SEARCH_SAMPLES)
        for x in np.concatenate([point - offsets, point + offsets]):
            y = safe_eval(fn, x)
            if not math.isfinite(y) or abs(y - limit) >= epsilon:
                return False
        return True

    if works(DELTA_MAX):
        return DELTA_MAX

    lo, hi = 0.0, DELTA_MAX
    for _ in range(DELTA_SEARCH_ITERATIONS):
        mid = 0.5 * (lo + hi)
        if works(mid):
            lo = mid
        else:
            hi = mid
        if hi - lo < GEOMETRIC_TOL:
            break
    return lo if lo > 0 else None
