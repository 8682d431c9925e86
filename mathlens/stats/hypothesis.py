"""Hypothesis tests, power analysis and effect sizes.

t tests draw p-values from ``scipy.stats.t``; z tests use the engine's own
standard normal CDF. Every test works from summary statistics, so a host
can drive them from sliders without raw data.

Alternatives follow the usual convention: ``"two-sided"`` (H1: theta !=
theta0), ``"less"`` (H1: theta < theta0), ``"greater"`` (H1: theta > theta0).
"""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import numpy as np
import pandas as pd
from scipy.stats import nct
from scipy.stats import t as student_t

from ..config import DEFAULT_ALPHA, LARGE_SAMPLE_THRESHOLD, MAX_SAMPLE_SIZE
from ..errors import DomainError, NonConvergence, UndefinedResult
from .descriptive import as_array
from .distributions import Normal
from .inference import ConfidenceInterval

ALTERNATIVES = ("two-sided", "less", "greater")
POWER_TESTS = ("one-sample", "two-sample")
MIN_EXPECTED_COUNT = 10

_STANDARD_NORMAL = Normal(0.0, 1.0)


@dataclass(frozen=True)
class HypothesisTest:
    """Result of a significance test.

    ``statistic`` may be infinite when the standard error is zero and the
    estimate differs from the null value; the p-value is then 0.
    """

    test: str
    null_hypothesis: str
    alternative_hypothesis: str
    alternative: str
    statistic: float
    p_value: float
    alpha: float
    estimate: float
    standard_error: float
    df: Optional[float] = None
    interval: Optional[ConfidenceInterval] = None
    effect_size: Optional[float] = None

    @property
    def reject_null(self) -> bool:
        return self.p_value < self.alpha

    @property
    def decision(self) -> str:
        return "Reject H0" if self.reject_null else "Fail to reject H0"


def _check_alternative(alternative: str) -> str:
    if alternative not in ALTERNATIVES:
        raise ValueError(f"alternative must be one of {ALTERNATIVES}, got {alternative!r}")
    return alternative


def _check_alpha(alpha: float) -> float:
    alpha = float(alpha)
    if not 0.0 < alpha < 1.0:
        raise DomainError(f"alpha must lie strictly between 0 and 1, got {alpha}")
    return alpha


def _statistic(diff: float, se: float) -> float:
    if se > 0:
        return diff / se
    if diff == 0:
        return 0.0
    return math.copysign(math.inf, diff)


def _p_value(
    stat: float,
    alternative: str,
    cdf: Callable[[float], float],
) -> float:
    # sf(x) is evaluated as cdf(-x) for the symmetric reference distributions.
    if alternative == "less":
        p = cdf(stat)
    elif alternative == "greater":
        p = cdf(-stat)
    else:
        p = 2.0 * cdf(-abs(stat))
    return min(1.0, max(0.0, float(p)))


def _hypotheses(symbol: str, null_value: float, alternative: str):
    op = {"two-sided": "!=", "less": "<", "greater": ">"}[alternative]
    return f"{symbol} = {null_value:g}", f"{symbol} {op} {null_value:g}"


def _interval(estimate: float, se: float, crit: float, level: float, method: str,
              lower_bound: float = -math.inf, upper_bound: float = math.inf):
    margin = crit * se
    return ConfidenceInterval(
        estimate=estimate,
        margin=margin,
        level=level,
        lower=max(lower_bound, estimate - margin),
        upper=min(upper_bound, estimate + margin),
        critical_value=crit,
        method=method,
    )


def one_sample_t_test(
    mean: float,
    sd: float,
    n: int,
    mu0: float = 0.0,
    alternative: str = "two-sided",
    alpha: float = DEFAULT_ALPHA,
) -> HypothesisTest:
    """Student's t test of H0: mu = mu0 from a sample mean and sd.

    Raises:
        UndefinedResult: If ``n < 2``.
        DomainError: If ``sd`` is negative or ``alpha`` is outside (0, 1).
    """
    _check_alternative(alternative)
    alpha = _check_alpha(alpha)
    if n < 2:
        raise UndefinedResult("a t test needs at least two observations")
    if sd < 0:
        raise DomainError(f"standard deviation must be non-negative, got {sd}")

    df = n - 1
    se = sd / math.sqrt(n)
    stat = _statistic(mean - mu0, se)
    null, alt = _hypotheses("mu", mu0, alternative)
    crit = float(student_t.ppf(1.0 - alpha / 2.0, df))
    return HypothesisTest(
        test="one-sample t",
        null_hypothesis=null,
        alternative_hypothesis=alt,
        alternative=alternative,
        statistic=stat,
        p_value=_p_value(stat, alternative, lambda v: student_t.cdf(v, df)),
        alpha=alpha,
        estimate=float(mean),
        standard_error=se,
        df=float(df),
        interval=_interval(float(mean), se, crit, 1.0 - alpha, "t"),
        effect_size=cohens_d(mean, mu0, sd) if sd > 0 else None,
    )


def welch_df(sd1: float, n1: int, sd2: float, n2: int) -> float:
    """Welch-Satterthwaite degrees of freedom."""
    v1 = sd1 * sd1 / n1
    v2 = sd2 * sd2 / n2
    denom = v1 * v1 / (n1 - 1) + v2 * v2 / (n2 - 1)
    if denom == 0:
        return float(n1 + n2 - 2)
    return (v1 + v2) ** 2 / denom


def two_sample_t_test(
    mean1: float,
    sd1: float,
    n1: int,
    mean2: float,
    sd2: float,
    n2: int,
    alternative: str = "two-sided",
    alpha: float = DEFAULT_ALPHA,
) -> HypothesisTest:
    """Welch's unequal-variance t test of H0: mu1 = mu2."""
    _check_alternative(alternative)
    alpha = _check_alpha(alpha)
    if n1 < 2 or n2 < 2:
        raise UndefinedResult("each group needs at least two observations")
    if sd1 < 0 or sd2 < 0:
        raise DomainError("standard deviations must be non-negative")

    se = math.sqrt(sd1 * sd1 / n1 + sd2 * sd2 / n2)
    df = welch_df(sd1, n1, sd2, n2)
    diff = mean1 - mean2
    stat = _statistic(diff, se)
    null, alt = _hypotheses("mu1 - mu2", 0.0, alternative)
    crit = float(student_t.ppf(1.0 - alpha / 2.0, df))
    effect = None
    if sd1 > 0 or sd2 > 0:
        effect = cohens_d_two_groups(mean1, sd1, n1, mean2, sd2, n2)
    return HypothesisTest(
        test="two-sample t (Welch)",
        null_hypothesis=null,
        alternative_hypothesis=alt,
        alternative=alternative,
        statistic=stat,
        p_value=_p_value(stat, alternative, lambda v: student_t.cdf(v, df)),
        alpha=alpha,
        estimate=diff,
        standard_error=se,
        df=df,
        interval=_interval(diff, se, crit, 1.0 - alpha, "t"),
        effect_size=effect,
    )


def check_test_assumptions(
    n: int, p: Optional[float] = None, n2: Optional[int] = None
) -> List[str]:
    """Return human-readable caveats about a test's approximations.

    With ``p`` given the checks are for a normal approximation to a
    proportion (at least ten expected successes and failures); otherwise
    they concern the t test's reliance on roughly normal data.
    """
    notes = []
    sizes = [n] if n2 is None else [n, n2]
    if p is None:
        if min(sizes) < LARGE_SAMPLE_THRESHOLD:
            notes.append(
                f"Sample size below {LARGE_SAMPLE_THRESHOLD}: the t test assumes "
                "approximately normal data."
            )
        return notes
    for size in sizes:
        if size * p < MIN_EXPECTED_COUNT or size * (1.0 - p) < MIN_EXPECTED_COUNT:
            notes.append(
                f"Expected counts below {MIN_EXPECTED_COUNT} (n={size}, p={p:g}): "
                "the normal approximation may be poor."
            )
    return notes


def _warn(notes: Sequence[str]) -> None:
    for note in notes:
        warnings.warn(note, UserWarning, stacklevel=3)


def one_proportion_z_test(
    successes: int,
    n: int,
    p0: float,
    alternative: str = "two-sided",
    alpha: float = DEFAULT_ALPHA,
) -> HypothesisTest:
    """z test of H0: p = p0 using the standard error under the null."""
    _check_alternative(alternative)
    alpha = _check_alpha(alpha)
    if n < 1:
        raise UndefinedResult("a proportion test needs at least one trial")
    if not 0 <= successes <= n:
        raise DomainError(f"successes must lie in [0, n], got {successes} of {n}")
    if not 0.0 < p0 < 1.0:
        raise DomainError(f"null proportion must lie strictly between 0 and 1, got {p0}")
    _warn(check_test_assumptions(n, p=p0))

    p_hat = successes / n
    se0 = math.sqrt(p0 * (1.0 - p0) / n)
    stat = _statistic(p_hat - p0, se0)
    null, alt = _hypotheses("p", p0, alternative)
    crit = _STANDARD_NORMAL.quantile(1.0 - alpha / 2.0)
    se_hat = math.sqrt(p_hat * (1.0 - p_hat) / n)
    return HypothesisTest(
        test="one-proportion z",
        null_hypothesis=null,
        alternative_hypothesis=alt,
        alternative=alternative,
        statistic=stat,
        p_value=_p_value(stat, alternative, _STANDARD_NORMAL.cdf),
        alpha=alpha,
        estimate=p_hat,
        standard_error=se0,
        interval=_interval(p_hat, se_hat, crit, 1.0 - alpha, "z", 0.0, 1.0),
        effect_size=cohens_h(p_hat, p0),
    )


def two_proportion_z_test(
    successes1: int,
    n1: int,
    successes2: int,
    n2: int,
    alternative: str = "two-sided",
    alpha: float = DEFAULT_ALPHA,
) -> HypothesisTest:
    """z test of H0: p1 = p2 with the pooled standard error."""
    _check_alternative(alternative)
    alpha = _check_alpha(alpha)
    if n1 < 1 or n2 < 1:
        raise UndefinedResult("each group needs at least one trial")
    if not (0 <= successes1 <= n1 and 0 <= successes2 <= n2):
        raise DomainError("successes must lie in [0, n] for each group")

    p1 = successes1 / n1
    p2 = successes2 / n2
    pooled = (successes1 + successes2) / (n1 + n2)
    _warn(check_test_assumptions(n1, p=pooled, n2=n2))
    se = math.sqrt(pooled * (1.0 - pooled) * (1.0 / n1 + 1.0 / n2))
    diff = p1 - p2
    stat = _statistic(diff, se)
    null, alt = _hypotheses("p1 - p2", 0.0, alternative)
    crit = _STANDARD_NORMAL.quantile(1.0 - alpha / 2.0)
    se_diff = math.sqrt(p1 * (1.0 - p1) / n1 + p2 * (1.0 - p2) / n2)
    return HypothesisTest(
        test="two-proportion z",
        null_hypothesis=null,
        alternative_hypothesis=alt,
        alternative=alternative,
        statistic=stat,
        p_value=_p_value(stat, alternative, _STANDARD_NORMAL.cdf),
        alpha=alpha,
        estimate=diff,
        standard_error=se,
        interval=_interval(diff, se_diff, crit, 1.0 - alpha, "z", -1.0, 1.0),
        effect_size=cohens_h(p1, p2),
    )


def cohens_d(mean: float, mu0: float, sd: float) -> float:
    """One-sample Cohen's d, (mean - mu0) / sd."""
    if sd <= 0:
        raise UndefinedResult("Cohen's d is undefined for zero standard deviation")
    return (mean - mu0) / sd


def cohens_d_two_groups(
    mean1: float, sd1: float, n1: int, mean2: float, sd2: float, n2: int
) -> float:
    """Two-group Cohen's d with the pooled standard deviation."""
    if n1 + n2 <= 2:
        raise UndefinedResult("pooled standard deviation needs more than two observations")
    pooled = math.sqrt(((n1 - 1) * sd1 * sd1 + (n2 - 1) * sd2 * sd2) / (n1 + n2 - 2))
    if pooled <= 0:
        raise UndefinedResult("Cohen's d is undefined for zero pooled standard deviation")
    return (mean1 - mean2) / pooled


def cohens_h(p1: float, p2: float) -> float:
    """Cohen's h, 2 asin(sqrt(p1)) - 2 asin(sqrt(p2))."""
    for p in (p1, p2):
        if not 0.0 <= p <= 1.0:
            raise DomainError(f"proportions must lie in [0, 1], got {p}")
    return 2.0 * math.asin(math.sqrt(p1)) - 2.0 * math.asin(math.sqrt(p2))


def effect_size(
    group1: Sequence[float],
    group2: Optional[Sequence[float]] = None,
    mu0: float = 0.0,
) -> float:
    """Cohen's d from raw observations.

    With one group the reference is ``mu0``; with two the pooled standard
    deviation is used.
    """
    a = as_array(group1, "group1")
    if len(a) < 2:
        raise UndefinedResult("effect size needs at least two observations per group")
    if group2 is None:
        return cohens_d(float(a.mean()), mu0, float(np.std(a, ddof=1)))
    b = as_array(group2, "group2")
    if len(b) < 2:
        raise UndefinedResult("effect size needs at least two observations per group")
    return cohens_d_two_groups(
        float(a.mean()), float(np.std(a, ddof=1)), len(a),
        float(b.mean()), float(np.std(b, ddof=1)), len(b),
    )


def interpret_effect_size(value: float) -> str:
    """Cohen's conventional bands: 0.2 small, 0.5 medium, 0.8 large."""
    magnitude = abs(value)
    if magnitude < 0.2:
        return "negligible"
    if magnitude < 0.5:
        return "small"
    if magnitude < 0.8:
        return "medium"
    return "large"


def _upper_tail(crit: float, df: float, nc: float) -> float:
    """P(T > crit) under the noncentral t.

    scipy can return NaN at large df, where T is close to N(nc, 1); the
    normal tail stands in there.
    """
    value = float(nct.sf(crit, df, nc))
    if math.isnan(value) and df >= LARGE_SAMPLE_THRESHOLD:
        value = 1.0 - _STANDARD_NORMAL.cdf(crit - nc)
    return value


def power(
    effect: float,
    n: int,
    alpha: float = DEFAULT_ALPHA,
    test: str = "two-sample",
    alternative: str = "two-sided",
) -> float:
    """Probability that a t test rejects H0 when the true effect is ``effect``.

    Args:
        effect (float): Standardized effect size (Cohen's d).
        n (int): Sample size; per group for ``"two-sample"``.
        alpha (float, optional): Significance level. Defaults to ``0.05``.
        test (str, optional): ``"one-sample"`` or ``"two-sample"``.
        alternative (str, optional): Test direction. Defaults to two-sided.

    Returns:
        float: Power in [0, 1], from the noncentral t distribution with
        noncentrality ``d sqrt(n)`` (one-sample) or ``d sqrt(n / 2)``
        (two-sample, equal groups).
    """
    _check_alternative(alternative)
    alpha = _check_alpha(alpha)
    if test not in POWER_TESTS:
        raise ValueError(f"test must be one of {POWER_TESTS}, got {test!r}")
    if n < 2:
        raise UndefinedResult("power needs at least two observations per group")

    if test == "one-sample":
        df, nc = n - 1, effect * math.sqrt(n)
    else:
        df, nc = 2 * n - 2, effect * math.sqrt(n / 2.0)

    # P(T < -c; nc) == P(T > c; -nc)
    if alternative == "two-sided":
        crit = float(student_t.ppf(1.0 - alpha / 2.0, df))
        value = _upper_tail(crit, df, nc) + _upper_tail(crit, df, -nc)
    elif alternative == "greater":
        crit = float(student_t.ppf(1.0 - alpha, df))
        value = _upper_tail(crit, df, nc)
    else:
        crit = float(student_t.ppf(1.0 - alpha, df))
        value = _upper_tail(crit, df, -nc)
    if not math.isfinite(value):
        raise NonConvergence(f"power is not finite for effect={effect}, n={n}")
    return min(1.0, max(0.0, value))


def sample_size_for_power(
    effect: float,
    target: float = 0.8,
    alpha: float = DEFAULT_ALPHA,
    test: str = "two-sample",
    alternative: str = "two-sided",
) -> int:
    """Smallest n (per group for two-sample) reaching ``target`` power.

    Raises:
        DomainError: If ``effect`` is zero or ``target`` is outside (0, 1).
        NonConvergence: If even ``MAX_SAMPLE_SIZE`` falls short.
    """
    if effect == 0:
        raise DomainError("a zero effect size can never reach the target power")
    if not 0.0 < target < 1.0:
        raise DomainError(f"target power must lie strictly between 0 and 1, got {target}")

    def reaches(n: int) -> bool:
        return power(effect, n, alpha, test, alternative) >= target

    if not reaches(MAX_SAMPLE_SIZE):
        raise NonConvergence(
            f"target power {target} not reached within n <= {MAX_SAMPLE_SIZE}"
        )
    lo, hi = 2, MAX_SAMPLE_SIZE
    while lo < hi:
        mid = (lo + hi) // 2
        if reaches(mid):
            hi = mid
        else:
            lo = mid + 1
    return lo


def sample_size_for_proportions(
    p1: float,
    p2: float,
    target: float = 0.8,
    alpha: float = DEFAULT_ALPHA,
) -> int:
    """Per-group n for a two-sided two-proportion z test to reach ``target`` power.

    Uses the normal-approximation formula with the pooled proportion under
    H0 and the unpooled variance under H1, rounded up.

    Raises:
        DomainError: If a proportion is outside (0, 1), the proportions are
            equal, or ``target`` is outside (0, 1).
    """
    for name, p in (("p1", p1), ("p2", p2)):
        if not 0.0 < p < 1.0:
            raise DomainError(f"{name} must lie strictly between 0 and 1, got {p}")
    if p1 == p2:
        raise DomainError("proportions must differ to size a test between them")
    if not 0.0 < target < 1.0:
        raise DomainError(f"target power must lie strictly between 0 and 1, got {target}")
    alpha = _check_alpha(alpha)

    z_alpha = _STANDARD_NORMAL.quantile(1.0 - alpha / 2.0)
    z_beta = _STANDARD_NORMAL.quantile(target)
    p_bar = (p1 + p2) / 2.0
    spread = (
        z_alpha * math.sqrt(2.0 * p_bar * (1.0 - p_bar))
        + z_beta * math.sqrt(p1 * (1.0 - p1) + p2 * (1.0 - p2))
    )
    return math.ceil(spread**2 / (p1 - p2) ** 2)


def power_curve(
    effect: float,
    ns: Sequence[int],
    alpha: float = DEFAULT_ALPHA,
    test: str = "two-sample",
    alternative: str = "two-sided",
) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "n": [int(n) for n in ns],
            "power": [power(effect, int(n), alpha, test, alternative) for n in ns],
        }
    )
