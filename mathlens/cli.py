"""Command-line front end that prints engine results as tables.

Examples:
    python main.py catalog
    python main.py limit rational --point 1
    python main.py derivative polynomial --x 1 --method forward
    python main.py integrate sine --n 8 --method simpson
    python main.py distribution iq-scores --x 130
    python main.py bootstrap 1 2 3 4 5 --resamples 1000 --seed 7
    python main.py regression anscombe-4
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Dict, List

import numpy as np
import pandas as pd

from .calculus import (
    classify_continuity,
    compute_riemann_sum,
    convergence_sequence,
    evaluate_derivative,
    evaluate_limit,
    find_critical_points,
    generate_secant_sequence,
)
from .calculus.integration import METHODS as INTEGRATION_METHODS
from .catalog import FunctionCatalog, default_catalog
from .config import DEFAULT_CONFIDENCE, DEFAULT_SEED
from .datasets import ANSCOMBE_QUARTET, DISTRIBUTION_PRESETS, anscombe
from .outcome import evaluate
from .stats import (
    bootstrap_ci,
    cooks_distance,
    intercept_confidence_interval,
    interpret_correlation,
    linear_regression,
    slope_confidence_interval,
)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def _print_frame(df: pd.DataFrame) -> None:
    print(df.to_string(index=False))


def _cmd_catalog(args, catalog: FunctionCatalog) -> int:
    rows = [
        {"topic": topic, "id": fn.id, "name": fn.name, "latex": fn.latex}
        for topic, fn in catalog
    ]
    _print_frame(pd.DataFrame(rows))
    return 0


def _cmd_limit(args, catalog: FunctionCatalog) -> int:
    fn = catalog.get("limits", args.function)
    result = evaluate_limit(fn, args.point, args.direction)
    _print_frame(pd.DataFrame(result.approach, columns=["x", "f(x)"]))
    print(f"kind: {result.kind.value}")
    print(f"limit: {result.limit if result.limit is not None else 'does not exist'}")
    continuity = evaluate(classify_continuity, fn, args.point)
    if continuity.ok:
        print(continuity.value.description)
    else:
        print(f"{continuity.kind.value}: {continuity.message}")
    return 0


def _cmd_derivative(args, catalog: FunctionCatalog) -> int:
    fn = catalog.get("derivatives", args.function)
    result = evaluate_derivative(fn, args.x, args.method, args.h)
    print(f"f'({args.x:g}) ~ {result.slope} ({result.method}, h={result.step:g})")
    if result.error is not None:
        print(f"exact: {result.exact}  error: {result.error:.3e}")
    secants = generate_secant_sequence(fn, args.x)
    _print_frame(
        pd.DataFrame({"h": [s.step for s in secants], "slope": [s.slope for s in secants]})
    )
    points = find_critical_points(fn)
    if points:
        _print_frame(
            pd.DataFrame(
                {
                    "x": [p.x for p in points],
                    "f(x)": [p.y for p in points],
                    "type": [p.classification.value for p in points],
                }
            )
        )
    return 0


def _cmd_integrate(args, catalog: FunctionCatalog) -> int:
    fn = catalog.get("integrals", args.function)
    a, b = fn.default_bounds or (0.0, 1.0)
    a = args.a if args.a is not None else a
    b = args.b if args.b is not None else b
    outcome = evaluate(compute_riemann_sum, fn, a, b, args.n, args.method)
    if not outcome.ok:
        print(f"{outcome.kind.value}: {outcome.message}")
        return 1
    result = outcome.value
    print(f"{result.method} sum on [{a:g}, {b:g}] with n={result.n}: {result.value}")
    if result.error is not None:
        print(f"exact: {result.exact}  error: {result.error:.3e}")
    sequence = evaluate(convergence_sequence, fn, a, b, args.method)
    if sequence.ok:
        _print_frame(sequence.value.to_frame())
    else:
        print(f"no convergence table: {sequence.message}")
    return 0


def _cmd_distribution(args, catalog: FunctionCatalog) -> int:
    if args.preset not in DISTRIBUTION_PRESETS:
        raise KeyError(
            f"Unknown preset '{args.preset}'. Expected one of {sorted(DISTRIBUTION_PRESETS)}."
        )
    dist = DISTRIBUTION_PRESETS[args.preset].build()
    print(f"{dist.family} {dist.params}")
    print(f"mean={dist.mean:g} variance={dist.variance:g}")
    if args.x is not None:
        print(f"pdf({args.x:g})={dist.pdf(args.x):.6g} cdf({args.x:g})={dist.cdf(args.x):.6g}")
    probs = [0.025, 0.25, 0.5, 0.75, 0.975]
    _print_frame(pd.DataFrame({"p": probs, "quantile": [dist.quantile(p) for p in probs]}))
    return 0


def _cmd_bootstrap(args, catalog: FunctionCatalog) -> int:
    rng = np.random.default_rng(args.seed)
    outcome = evaluate(
        bootstrap_ci, args.values, args.resamples, args.level, rng=rng
    )
    if not outcome.ok:
        print(f"{outcome.kind.value}: {outcome.message}")
        return 1
    result = outcome.value
    ci = result.interval
    print(
        f"mean={result.estimate:g} se={result.standard_error:.4g} "
        f"{ci.level:.0%} CI=[{ci.lower:.4g}, {ci.upper:.4g}]"
    )
    return 0


def _cmd_regression(args, catalog: FunctionCatalog) -> int:
    data = anscombe(args.dataset)
    model = linear_regression(data.x, data.y)
    lo, hi = slope_confidence_interval(model)
    ilo, ihi = intercept_confidence_interval(model)
    print(f"{data.name}: y = {model.slope:.4f} x + {model.intercept:.4f}")
    print(f"r={model.r:.4f} ({interpret_correlation(model.r)}) r^2={model.r_squared:.4f}")
    print(f"slope 95% CI=[{lo:.4f}, {hi:.4f}] intercept 95% CI=[{ilo:.4f}, {ihi:.4f}]")
    print(f"SEE={model.standard_error:.4f}")
    frame = data.to_frame()
    frame["residual"] = model.residuals
    frame["cooks_d"] = cooks_distance(data.x, data.y)
    _print_frame(frame)
    return 0


COMMANDS: Dict[str, Callable[..., int]] = {
    "catalog": _cmd_catalog,
    "limit": _cmd_limit,
    "derivative": _cmd_derivative,
    "integrate": _cmd_integrate,
    "distribution": _cmd_distribution,
    "bootstrap": _cmd_bootstrap,
    "regression": _cmd_regression,
}


def _build_arg_parser() -> argparse.ArgumentParser:
    """Build command-line parser for module execution."""
    parser = argparse.ArgumentParser(
        description="Numerical mathematics evaluation engine."
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("catalog", help="List preset functions.")

    limit = sub.add_parser("limit", help="Evaluate a limit and classify continuity.")
    limit.add_argument("function", help="Function id from the 'limits' topic.")
    limit.add_argument("--point", type=float, required=True)
    limit.add_argument("--direction", default="both", choices=["left", "right", "both"])

    deriv = sub.add_parser("derivative", help="Numerical derivative and secants.")
    deriv.add_argument("function", help="Function id from the 'derivatives' topic.")
    deriv.add_argument("--x", type=float, required=True)
    deriv.add_argument("--method", default="central", choices=["central", "forward", "backward"])
    deriv.add_argument("--h", type=float, default=1e-5)

    integ = sub.add_parser("integrate", help="Riemann sum with convergence table.")
    integ.add_argument("function", help="Function id from the 'integrals' topic.")
    integ.add_argument("--a", type=float, default=None)
    integ.add_argument("--b", type=float, default=None)
    integ.add_argument("--n", type=int, default=8)
    integ.add_argument("--method", default="midpoint", choices=list(INTEGRATION_METHODS))

    dist = sub.add_parser("distribution", help="Summarize a distribution preset.")
    dist.add_argument("preset", help=f"One of {sorted(DISTRIBUTION_PRESETS)}.")
    dist.add_argument("--x", type=float, default=None)

    boot = sub.add_parser("bootstrap", help="Percentile bootstrap CI of the mean.")
    boot.add_argument("values", type=float, nargs="+")
    boot.add_argument("--resamples", type=int, default=1000)
    boot.add_argument("--level", type=float, default=DEFAULT_CONFIDENCE)
    boot.add_argument("--seed", type=int, default=DEFAULT_SEED)

    reg = sub.add_parser("regression", help="Fit an Anscombe dataset.")
    reg.add_argument("dataset", choices=sorted(ANSCOMBE_QUARTET))
    return parser


def main(argv: List[str] | None = None, catalog: FunctionCatalog | None = None) -> int:
    """CLI entrypoint; ``catalog`` defaults to the process-wide instance."""
    parser = _build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    if catalog is None:
        catalog = default_catalog()
    logging.info("Running '%s'", args.command)
    try:
        return COMMANDS[args.command](args, catalog)
    except KeyError as exc:
        print(exc.args[0])
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
