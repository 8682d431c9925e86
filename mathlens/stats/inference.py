"""
Sampling methods, standard errors, confidence intervals and the bootstrap.

Populations for the grouped methods (stratified, cluster) are pandas
DataFrames with a group-key column and a value column. Every random choice
draws from the ``numpy.random.Generator`` passed in by the caller, so a fixed
seed reproduces a sample exactly.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy.stats import t as student_t

from ..config import (
    DEFAULT_CONFIDENCE,
    LARGE_SAMPLE_THRESHOLD,
    MAX_RESAMPLES,
)
from ..errors import DomainError, UndefinedResult
from ..numerics import require_generator
from .descriptive import as_array
from .distributions import Normal

logger = logging.getLogger(__name__)

_STANDARD_NORMAL = Normal(0.0, 1.0)


@dataclass(frozen=True)
class ConfidenceInterval:
    estimate: float
    margin: float
    level: float
    lower: float
    upper: float
    critical_value: Optional[float] = None
    method: str = "z"

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper


@dataclass(frozen=True)
class PopulationSample:
    """Values drawn from a finite population, with their positions in it."""

    method: str
    indices: Tuple[int, ...]
    values: Tuple[float, ...]
    groups: Tuple[Tuple[str, int], ...] = ()

    @property
    def size(self) -> int:
        return len(self.values)

    @property
    def mean(self) -> float:
        if not self.values:
            raise UndefinedResult("mean of an empty sample is undefined")
        return float(np.mean(self.values))

    @property
    def std(self) -> float:
        if len(self.values) < 2:
            raise UndefinedResult("sample standard deviation needs two values")
        return float(np.std(self.values, ddof=1))

    @property
    def standard_error(self) -> float:
        return standard_error(self.values)


@dataclass(frozen=True)
class BootstrapResult:
    estimate: float
    standard_error: float
    interval: ConfidenceInterval
    n_resamples: int
    distribution: Tuple[float, ...]


def _check_level(level: float) -> float:
    level = float(level)
    if not 0.0 < level < 1.0:
        raise DomainError(f"confidence level must lie strictly between 0 and 1, got {level}")
    return level


def _check_sample_size(size, population_size: int) -> int:
    if isinstance(size, bool) or not isinstance(size, (int, np.integer)):
        raise TypeError(f"sample size must be an integer, got {size!r}")
    size = int(size)
    if not 1 <= size <= population_size:
        raise DomainError(
            f"sample size must be between 1 and the population size {population_size}, got {size}"
        )
    return size


def _check_frame(population: pd.DataFrame, key: str, value: str) -> None:
    if not isinstance(population, pd.DataFrame):
        raise TypeError("population must be a pandas DataFrame")
    missing = [c for c in (key, value) if c not in population.columns]
    if missing:
        raise ValueError(f"population is missing column(s): {missing}")


def simple_random_sample(
    population: Sequence[float], size: int, rng: np.random.Generator
) -> PopulationSample:
    """Shuffle the population and take the first ``size`` elements."""
    arr = as_array(population, "population")
    size = _check_sample_size(size, len(arr))
    require_generator(rng)
    idx = rng.permutation(len(arr))[:size]
    return PopulationSample(
        "simple", tuple(int(i) for i in idx), tuple(float(v) for v in arr[idx])
    )


def systematic_sample(
    population: Sequence[float], size: int, rng: np.random.Generator
) -> PopulationSample:
    """Every k-th element from a random start, with k = N // size."""
    arr = as_array(population, "population")
    size = _check_sample_size(size, len(arr))
    require_generator(rng)
    k = len(arr) // size
    start = int(rng.integers(0, k))
    idx = start + k * np.arange(size)
    return PopulationSample(
        "systematic", tuple(int(i) for i in idx), tuple(float(v) for v in arr[idx])
    )


def stratified_sample(
    population: pd.DataFrame,
    key: str,
    size: int,
    rng: np.random.Generator,
    value: str = "value",
) -> PopulationSample:
    """Proportional simple random sampling inside each stratum.

    Each stratum receives ``round(size * N_h / N)`` draws, at least one and
    at most its own size, so the total can differ slightly from ``size``.
    """
    _check_frame(population, key, value)
    size = _check_sample_size(size, len(population))
    require_generator(rng)
    values = population[value].to_numpy(dtype=float)
    total = len(population)

    picked = []
    allocation = []
    for label, positions in sorted(population.groupby(key).indices.items()):
        n_h = min(len(positions), max(1, int(round(size * len(positions) / total))))
        chosen = positions[rng.permutation(len(positions))[:n_h]]
        picked.extend(int(i) for i in chosen)
        allocation.append((str(label), n_h))

    return PopulationSample(
        "stratified",
        tuple(picked),
        tuple(float(values[i]) for i in picked),
        tuple(allocation),
    )


def cluster_sample(
    population: pd.DataFrame,
    key: str,
    n_clusters: int,
    rng: np.random.Generator,
    value: str = "value",
) -> PopulationSample:
    """Randomly choose whole groups and keep every member of each."""
    _check_frame(population, key, value)
    require_generator(rng)
    groups = sorted(population.groupby(key).indices.items())
    n_clusters = _check_sample_size(n_clusters, len(groups))
    values = population[value].to_numpy(dtype=float)

    chosen = sorted(int(i) for i in rng.choice(len(groups), size=n_clusters, replace=False))
    picked = []
    allocation = []
    for i in chosen:
        label, positions = groups[i]
        picked.extend(int(p) for p in positions)
        allocation.append((str(label), len(positions)))

    return PopulationSample(
        "cluster",
        tuple(picked),
        tuple(float(values[i]) for i in picked),
        tuple(allocation),
    )


def assign_strata(values: Sequence[float], n_strata: int) -> pd.DataFrame:
    """Label each value with one of ``n_strata`` equal-width value bands."""
    arr = as_array(values)
    if int(n_strata) < 1:
        raise DomainError(f"n_strata must be at least 1, got {n_strata}")
    strata = pd.cut(arr, bins=int(n_strata), labels=False)
    return pd.DataFrame({"value": arr, "stratum": np.asarray(strata, dtype=int)})


def standard_error(values: Sequence[float], sigma: Optional[float] = None) -> float:
    """Standard error of the mean.

    Uses the population standard deviation ``sigma`` when known, otherwise
    the sample standard deviation (ddof=1).
    """
    arr = as_array(values)
    n = len(arr)
    if sigma is not None:
        if sigma < 0 or not math.isfinite(sigma):
            raise DomainError(f"sigma must be non-negative and finite, got {sigma}")
        if n == 0:
            raise UndefinedResult("standard error needs at least one observation")
        return float(sigma) / math.sqrt(n)
    if n < 2:
        raise UndefinedResult("standard error needs at least two observations")
    return float(np.std(arr, ddof=1)) / math.sqrt(n)


def standard_error_proportion(p: float, n: int) -> float:
    if not 0.0 <= p <= 1.0:
        raise DomainError(f"proportion must lie in [0, 1], got {p}")
    if n < 1:
        raise UndefinedResult("standard error needs at least one observation")
    return math.sqrt(p * (1.0 - p) / n)


def finite_population_correction(n: int, population_size: int) -> float:
    """sqrt((N - n) / (N - 1)), applied when sampling without replacement."""
    if population_size < 2 or not 0 < n <= population_size:
        raise DomainError(
            f"need 0 < n <= N and N >= 2, got n={n}, N={population_size}"
        )
    return math.sqrt((population_size - n) / (population_size - 1))


def critical_value(level: float = DEFAULT_CONFIDENCE, df: Optional[int] = None) -> float:
    """Two-sided critical value: z when ``df`` is None, Student's t otherwise."""
    level = _check_level(level)
    upper = 1.0 - (1.0 - level) / 2.0
    if df is None:
        return _STANDARD_NORMAL.quantile(upper)
    if df < 1:
        raise DomainError(f"degrees of freedom must be at least 1, got {df}")
    return float(student_t.ppf(upper, df))


def confidence_interval(
    mean: float,
    se: float,
    level: float = DEFAULT_CONFIDENCE,
    n: Optional[int] = None,
    sigma_known: bool = False,
) -> ConfidenceInterval:
    """Interval ``mean +/- critical * se``.

    Args:
        mean (float): Point estimate.
        se (float): Standard error of the estimate.
        level (float, optional): Confidence level. Defaults to ``0.95``.
        n (int, optional): Sample size; required unless ``sigma_known``.
        sigma_known (bool, optional): Whether the population variance is
            known. Defaults to False.

    Returns:
        ConfidenceInterval: A z interval when sigma is known or
        ``n >= LARGE_SAMPLE_THRESHOLD``; a t interval with ``n - 1`` degrees
        of freedom otherwise.

    Raises:
        DomainError: If ``level`` is outside (0, 1) or ``se`` is negative.
        UndefinedResult: If the variance is unknown and ``n < 2``.
        ValueError: If the variance is unknown and ``n`` is missing.
    """
    level = _check_level(level)
    if se < 0 or not math.isfinite(se):
        raise DomainError(f"standard error must be non-negative and finite, got {se}")

    if sigma_known:
        method, crit = "z", critical_value(level)
    else:
        if n is None:
            raise ValueError("n is required when the population variance is unknown")
        if n < 2:
            raise UndefinedResult("a t interval needs at least two observations")
        if n < LARGE_SAMPLE_THRESHOLD:
            method, crit = "t", critical_value(level, df=n - 1)
        else:
            method, crit = "z", critical_value(level)

    margin = crit * float(se)
    return ConfidenceInterval(
        estimate=float(mean),
        margin=margin,
        level=level,
        lower=float(mean) - margin,
        upper=float(mean) + margin,
        critical_value=crit,
        method=method,
    )


def proportion_confidence_interval(
    successes: int, n: int, level: float = DEFAULT_CONFIDENCE
) -> ConfidenceInterval:
    """Wald interval for a proportion, clamped to [0, 1]."""
    if n < 1:
        raise UndefinedResult("a proportion needs at least one trial")
    if not 0 <= successes <= n:
        raise DomainError(f"successes must lie in [0, n], got {successes} of {n}")
    p_hat = successes / n
    crit = critical_value(level)
    margin = crit * standard_error_proportion(p_hat, n)
    return ConfidenceInterval(
        estimate=p_hat,
        margin=margin,
        level=float(level),
        lower=max(0.0, p_hat - margin),
        upper=min(1.0, p_hat + margin),
        critical_value=crit,
        method="z",
    )


def bootstrap_ci(
    sample: Sequence[float],
    n_resamples: int = 1000,
    level: float = DEFAULT_CONFIDENCE,
    *,
    rng: np.random.Generator,
    statistic: Optional[Callable[[np.ndarray], float]] = None,
) -> BootstrapResult:
    """Percentile bootstrap confidence interval.

    Args:
        sample (Sequence[float]): Observed data.
        n_resamples (int, optional): Resamples drawn with replacement, at
            most ``MAX_RESAMPLES``. Defaults to ``1000``.
        level (float, optional): Confidence level. Defaults to ``0.95``.
        rng (numpy.random.Generator): Randomness source (keyword-only).
        statistic (callable, optional): Statistic of a 1-D array. Defaults to
            the mean.

    Returns:
        BootstrapResult: The statistic on the original sample, the bootstrap
        standard error (ddof=1), and the ``(1 - level) / 2`` and
        ``1 - (1 - level) / 2`` percentiles of the resampled statistics.

    Raises:
        UndefinedResult: If ``sample`` is empty.
        DomainError: If ``n_resamples`` is outside [2, MAX_RESAMPLES] or
            ``level`` is outside (0, 1).
    """
    arr = as_array(sample, "sample")
    if len(arr) == 0:
        raise UndefinedResult("bootstrap needs a non-empty sample")
    if isinstance(n_resamples, bool) or not isinstance(n_resamples, (int, np.integer)):
        raise TypeError(f"n_resamples must be an integer, got {n_resamples!r}")
    if not 2 <= int(n_resamples) <= MAX_RESAMPLES:
        raise DomainError(
            f"n_resamples must lie in [2, {MAX_RESAMPLES}], got {n_resamples}"
        )
    level = _check_level(level)
    require_generator(rng)

    resamples = arr[rng.integers(0, len(arr), size=(int(n_resamples), len(arr)))]
    if statistic is None:
        stats = resamples.mean(axis=1)
        estimate = float(arr.mean())
    else:
        stats = np.array([float(statistic(row)) for row in resamples])
        estimate = float(statistic(arr))
    logger.debug("Bootstrap: %d resamples of n=%d", len(stats), len(arr))

    alpha = 1.0 - level
    lower, upper = (float(v) for v in np.quantile(stats, [alpha / 2.0, 1.0 - alpha / 2.0]))
    interval = ConfidenceInterval(
        estimate=estimate,
        margin=0.5 * (upper - lower),
        level=level,
        lower=lower,
        upper=upper,
        method="bootstrap-percentile",
    )
    return BootstrapResult(
        estimate=estimate,
        standard_error=float(np.std(stats, ddof=1)),
        interval=interval,
        n_resamples=int(n_resamples),
        distribution=tuple(float(s) for s in stats),
    )


def sample_size_for_mean(
    sigma: float, margin: float, level: float = DEFAULT_CONFIDENCE
) -> int:
    """Smallest n whose z interval half-width does not exceed ``margin``."""
    if sigma <= 0 or margin <= 0:
        raise DomainError("sigma and margin must both be positive")
    z = critical_value(level)
    return int(math.ceil((z * sigma / margin) ** 2))


def sample_size_for_proportion(
    margin: float, level: float = DEFAULT_CONFIDENCE, p: float = 0.5
) -> int:
    """Smallest n for a proportion interval; ``p = 0.5`` is the conservative choice."""
    if margin <= 0:
        raise DomainError("margin must be positive")
    if not 0.0 <= p <= 1.0:
        raise DomainError(f"p must lie in [0, 1], got {p}")
    z = critical_value(level)
    return int(math.ceil(z * z * p * (1.0 - p) / margin**2))
