import math

import numpy as np
import pytest
from scipy import stats

from mathlens.config import MAX_SAMPLE_SIZE
from mathlens.datasets import DISTRIBUTION_PRESETS
from mathlens.errors import DomainError
from mathlens.stats import (
    Binomial,
    Exponential,
    Normal,
    Poisson,
    Uniform,
    central_limit_demo,
    make_distribution,
    probability_above,
    probability_below,
    probability_between,
)
from mathlens.stats.distributions import erf


def test_erf_approximation_accuracy():
    assert erf(0.0) == 0.0
    xs = np.linspace(-4.0, 4.0, 161)
    worst = max(abs(erf(x) - math.erf(x)) for x in xs)
    assert worst < 2e-7
    assert erf(-1.0) == -erf(1.0)


def test_normal_against_scipy():
    dist = Normal(100.0, 15.0)
    assert dist.cdf(100.0) == 0.5
    for x in (55.0, 85.0, 100.0, 121.0, 145.0):
        assert dist.pdf(x) == pytest.approx(stats.norm.pdf(x, 100, 15), rel=1e-12)
        assert dist.cdf(x) == pytest.approx(stats.norm.cdf(x, 100, 15), abs=2e-7)


def test_normal_quantile():
    dist = Normal()
    assert dist.quantile(0.5) == 0.0
    assert dist.quantile(0.975) == pytest.approx(1.959964, abs=1e-5)
    assert dist.quantile(0.001) == pytest.approx(stats.norm.ppf(0.001), abs=1e-4)
    assert dist.quantile(0.0) == -math.inf
    assert dist.quantile(1.0) == math.inf
    assert dist.cdf(dist.quantile(0.3)) == pytest.approx(0.3, abs=1e-9)
    with pytest.raises(DomainError):
        dist.quantile(1.5)


def test_normal_parameter_validation():
    for sigma in (0.0, -1.0, math.inf):
        with pytest.raises(DomainError):
            Normal(0.0, sigma)
    with pytest.raises(TypeError):
        Normal("zero", 1.0)
    with pytest.raises(ValueError):
        Normal(math.nan, 1.0)


def test_binomial_against_scipy():
    dist = Binomial(20, 0.5)
    assert dist.pmf(10) == pytest.approx(stats.binom.pmf(10, 20, 0.5), rel=1e-10)
    assert dist.cdf(12) == pytest.approx(stats.binom.cdf(12, 20, 0.5), rel=1e-10)
    assert dist.pmf(2.5) == 0.0
    assert dist.pmf(21) == 0.0
    assert dist.cdf(20) == 1.0
    assert dist.quantile(0.5) == 10.0
    assert dist.mean == 10.0
    assert dist.variance == 5.0


def test_binomial_large_n_does_not_overflow():
    dist = Binomial(1000, 0.5)
    assert dist.pmf(500) == pytest.approx(stats.binom.pmf(500, 1000, 0.5), rel=1e-9)


def test_binomial_degenerate_and_invalid():
    assert Binomial(5, 0.0).pmf(0) == 1.0
    assert Binomial(5, 1.0).pmf(5) == 1.0
    for n, p in ((-1, 0.5), (2.5, 0.5), (10, 1.5)):
        with pytest.raises(DomainError):
            Binomial(n, p)


def test_poisson_against_scipy():
    dist = Poisson(3.0)
    assert dist.pmf(2) == pytest.approx(stats.poisson.pmf(2, 3.0), rel=1e-10)
    assert dist.cdf(2) == pytest.approx(stats.poisson.cdf(2, 3.0), rel=1e-10)
    assert dist.cdf(2.7) == dist.cdf(2)
    for p in (0.1, 0.5, 0.9):
        assert dist.quantile(p) == stats.poisson.ppf(p, 3.0)
    assert dist.skewness == pytest.approx(1.0 / math.sqrt(3.0))


def test_poisson_requires_positive_rate():
    with pytest.raises(DomainError):
        Poisson(0.0)
    with pytest.raises(DomainError):
        Poisson(-2.0)


def test_exponential_closed_forms():
    dist = Exponential(0.5)
    assert dist.mean == 2.0
    assert dist.variance == 4.0
    assert dist.cdf(2.0) == pytest.approx(1.0 - math.exp(-1.0))
    assert dist.quantile(0.5) == pytest.approx(math.log(2.0) / 0.5)
    assert dist.pdf(-1.0) == 0.0


def test_uniform_closed_forms():
    dist = Uniform(2.0, 6.0)
    assert dist.pdf(3.0) == 0.25
    assert dist.cdf(5.0) == 0.75
    assert dist.quantile(0.25) == 3.0
    assert dist.variance == pytest.approx(16.0 / 12.0)
    with pytest.raises(DomainError):
        Uniform(1.0, 1.0)


def test_pmf_only_for_discrete_families():
    with pytest.raises(TypeError):
        Normal().pmf(0.0)


def test_sampling_is_reproducible_and_validated():
    dist = Normal(5.0, 2.0)
    first = dist.sample(100, np.random.default_rng(7))
    second = dist.sample(100, np.random.default_rng(7))
    assert first == second
    assert len(first) == 100
    assert first.source == "normal"
    with pytest.raises(TypeError):
        dist.sample(10, 7)
    with pytest.raises(DomainError):
        dist.sample(MAX_SAMPLE_SIZE + 1, np.random.default_rng(7))


def test_sample_mean_near_population_mean(rng):
    sample = Poisson(4.0).sample(5000, rng)
    assert sample.mean == pytest.approx(4.0, abs=0.15)


def test_make_distribution():
    dist = make_distribution("poisson", lam=3)
    assert isinstance(dist, Poisson)
    assert dist.params == {"lam": 3}
    with pytest.raises(ValueError):
        make_distribution("cauchy")


def test_probability_helpers():
    dist = Normal()
    assert probability_below(dist, 0.0) + probability_above(dist, 0.0) == pytest.approx(1.0)
    assert probability_between(dist, -1.959964, 1.959964) == pytest.approx(0.95, abs=1e-5)
    coins = Binomial(20, 0.5)
    assert probability_between(coins, 10, 10) == pytest.approx(coins.pmf(10))
    assert probability_between(coins, 8, 12) == pytest.approx(
        stats.binom.cdf(12, 20, 0.5) - stats.binom.cdf(7, 20, 0.5)
    )
    with pytest.raises(DomainError):
        probability_between(dist, 1.0, -1.0)


def test_presets_build_valid_distributions():
    for preset in DISTRIBUTION_PRESETS.values():
        dist = preset.build()
        low, high = dist.suggested_range()
        assert low < high
        assert math.isfinite(dist.mean) and dist.variance > 0
    iq = DISTRIBUTION_PRESETS["iq-scores"].build()
    assert probability_above(iq, 130.0) == pytest.approx(0.02275, abs=1e-4)


def test_central_limit_theorem_uniform(rng):
    demo = central_limit_demo(Uniform(0.0, 1.0), 30, 2000, rng)
    assert demo.expected_mean == 0.5
    assert demo.expected_se == pytest.approx(math.sqrt(1.0 / 12.0) / math.sqrt(30))
    assert demo.observed_mean == pytest.approx(0.5, abs=0.005)
    assert demo.observed_sd == pytest.approx(demo.expected_se, rel=0.1)
    assert sum(demo.histogram.counts) == 2000
    assert len(demo.sample_means) == 2000


def test_central_limit_skewness_shrinks_with_n(rng):
    small = central_limit_demo(Exponential(1.0), 2, 2000, rng)
    large = central_limit_demo(Exponential(1.0), 50, 2000, rng)
    assert small.observed_skewness > large.observed_skewness


def test_central_limit_demo_validation(rng):
    with pytest.raises(DomainError):
        central_limit_demo(Normal(), 0, 100, rng)
    with pytest.raises(TypeError):
        central_limit_demo(Normal(), 10, 100, None)


@pytest.mark.parametrize(
    "dist",
    [Normal(100.0, 15.0), Binomial(20, 0.3), Poisson(4.0), Exponential(0.5), Uniform(-1.0, 3.0)],
    ids=lambda d: d.family,
)
def test_cdf_is_non_decreasing_from_zero_to_one(dist):
    assert dist.cdf(-math.inf) == 0.0
    assert dist.cdf(math.inf) == 1.0
    lo, hi = dist.quantile(0.001), dist.quantile(0.999)
    grid = np.linspace(lo - 1.0, hi + 1.0, 401)
    values = np.array([dist.cdf(float(x)) for x in grid])
    assert np.all(np.diff(values) >= 0.0)
    assert values[0] <= 0.01 and values[-1] >= 0.99
