"""
Numerical calculus engines.

This subpackage evaluates limits, derivatives and definite integrals of real
functions of one variable. Functions are plain callables; catalog entries
additionally carry exact derivatives and antiderivatives that the engines
attach to their results for comparison.

Modules:
    limits:
        One- and two-sided numerical limits over a geometric approach
        sequence, discontinuity classification, and an epsilon-delta search.

    derivatives:
        Central, forward and backward differences, tangent and secant
        lines, and critical-point detection with sign-pattern
        classification.

    integration:
        Left, right, midpoint, trapezoidal and Simpson rules with
        convergence tracking against a reference value.

Design Principle:
    Every function is pure: identical inputs give identical outputs, no
    state is kept between calls, and nothing is read from or written to
    disk.
"""

from .derivatives import (
    CriticalPoint,
    CriticalPointType,
    DerivativeResult,
    Line,
    calculate_secant_line,
    calculate_tangent_line,
    classify_critical_point,
    derivative_exists,
    evaluate_derivative,
    find_critical_points,
    generate_secant_sequence,
)
from .integration import (
    ConvergenceSequence,
    RiemannSum,
    compare_methods,
    compute_riemann_sum,
    convergence_sequence,
)
from .limits import (
    ContinuityClassification,
    ContinuityResult,
    LimitKind,
    LimitResult,
    classify_continuity,
    evaluate_limit,
    find_delta_for_epsilon,
)

__all__ = [
    # Limits
    "ContinuityClassification",
    "ContinuityResult",
    "LimitKind",
    "LimitResult",
    "classify_continuity",
    "evaluate_limit",
    "find_delta_for_epsilon",
    # Derivatives
    "CriticalPoint",
    "CriticalPointType",
    "DerivativeResult",
    "Line",
    "calculate_secant_line",
    "calculate_tangent_line",
    "classify_critical_point",
    "derivative_exists",
    "evaluate_derivative",
    "find_critical_points",
    "generate_secant_sequence",
    # Integration
    "ConvergenceSequence",
    "RiemannSum",
    "compare_methods",
    "compute_riemann_sum",
    "convergence_sequence",
]
