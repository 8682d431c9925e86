"""
A numerical mathematics evaluation engine for interactive notation-to-code
visualizations.

Evaluates limits, derivatives, definite integrals, probability distributions
and statistical inference procedures with pure, deterministic functions.

Modules:
    - numerics: Shared tolerances, guarded evaluation and step helpers.
    - catalog: Preset functions with exact derivatives and antiderivatives.
    - calculus: Limit, differentiation and integration engines.
    - stats: Distribution, inference, hypothesis-testing and regression engines.
    - outcome: Tagged results that turn engine failures into explanatory states.
    - cli: Command-line entry point printing engine results as tables.
"""

__version__ = "1.0.0"

from .calculus import (
    classify_continuity,
    compute_riemann_sum,
    convergence_sequence,
    evaluate_derivative,
    evaluate_limit,
    find_critical_points,
)
from .catalog import EvaluableFunction, FunctionCatalog, build_catalog, default_catalog
from .errors import DomainError, MathEngineError, NonConvergence, UndefinedResult
from .outcome import Outcome, OutcomeKind, evaluate
from .stats import (
    bootstrap_ci,
    linear_regression,
    make_distribution,
    pearson_correlation,
)

__all__ = [
    # Errors and outcomes
    "MathEngineError",
    "DomainError",
    "UndefinedResult",
    "NonConvergence",
    "Outcome",
    "OutcomeKind",
    "evaluate",
    # Catalog
    "EvaluableFunction",
    "FunctionCatalog",
    "build_catalog",
    "default_catalog",
    # Calculus
    "evaluate_limit",
    "classify_continuity",
    "evaluate_derivative",
    "find_critical_points",
    "compute_riemann_sum",
    "convergence_sequence",
    # Statistics
    "make_distribution",
    "bootstrap_ci",
    "pearson_correlation",
    "linear_regression",
]
