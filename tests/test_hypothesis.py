import math
import warnings

import pytest
from scipy import stats

from mathlens.errors import DomainError, NonConvergence, UndefinedResult
from mathlens.stats import (
    check_test_assumptions,
    cohens_d,
    cohens_d_two_groups,
    cohens_h,
    effect_size,
    interpret_effect_size,
    one_proportion_z_test,
    one_sample_t_test,
    power,
    power_curve,
    sample_size_for_power,
    sample_size_for_proportions,
    two_proportion_z_test,
    two_sample_t_test,
)


def test_one_sample_t_test_matches_scipy():
    result = one_sample_t_test(5.5, 1.2, 16, mu0=5.0)
    assert result.statistic == pytest.approx(0.5 / 0.3)
    assert result.df == 15
    assert result.p_value == pytest.approx(2 * stats.t.sf(0.5 / 0.3, 15))
    assert result.null_hypothesis == "mu = 5"
    assert result.alternative_hypothesis == "mu != 5"
    assert not result.reject_null
    assert result.decision == "Fail to reject H0"
    assert result.interval.contains(5.5)


def test_one_sided_p_values_are_complementary():
    less = one_sample_t_test(5.5, 1.2, 16, mu0=5.0, alternative="less")
    greater = one_sample_t_test(5.5, 1.2, 16, mu0=5.0, alternative="greater")
    assert less.p_value + greater.p_value == pytest.approx(1.0)
    assert greater.p_value < less.p_value


def test_zero_standard_error():
    shifted = one_sample_t_test(5.0, 0.0, 10, mu0=4.0)
    assert shifted.statistic == math.inf
    assert shifted.p_value == 0.0
    assert shifted.reject_null
    assert shifted.effect_size is None
    same = one_sample_t_test(4.0, 0.0, 10, mu0=4.0)
    assert same.statistic == 0.0
    assert same.p_value == pytest.approx(1.0)


def test_t_test_validation():
    with pytest.raises(UndefinedResult):
        one_sample_t_test(1.0, 1.0, 1)
    with pytest.raises(ValueError):
        one_sample_t_test(1.0, 1.0, 10, alternative="both")
    with pytest.raises(DomainError):
        one_sample_t_test(1.0, 1.0, 10, alpha=0.0)
    with pytest.raises(DomainError):
        one_sample_t_test(1.0, -1.0, 10)


def test_welch_t_test_matches_scipy():
    result = two_sample_t_test(78.0, 10.0, 25, 72.0, 14.0, 30)
    expected = stats.ttest_ind_from_stats(78.0, 10.0, 25, 72.0, 14.0, 30, equal_var=False)
    assert result.statistic == pytest.approx(expected.statistic)
    assert result.p_value == pytest.approx(expected.pvalue)
    assert result.estimate == 6.0
    assert result.effect_size == pytest.approx(cohens_d_two_groups(78.0, 10.0, 25, 72.0, 14.0, 30))


def test_one_proportion_z_test():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        result = one_proportion_z_test(28, 1000, 0.02)
    se0 = math.sqrt(0.02 * 0.98 / 1000)
    assert result.standard_error == pytest.approx(se0)
    assert result.statistic == pytest.approx(0.008 / se0)
    assert result.p_value == pytest.approx(2 * stats.norm.sf(0.008 / se0), abs=1e-6)
    assert not result.reject_null
    assert result.interval.lower >= 0.0


def test_proportion_test_warns_on_small_expected_counts():
    with pytest.warns(UserWarning, match="Expected counts"):
        one_proportion_z_test(3, 20, 0.1)


def test_proportion_test_validation():
    with pytest.raises(DomainError):
        one_proportion_z_test(5, 10, 1.0)
    with pytest.raises(DomainError):
        one_proportion_z_test(11, 10, 0.5)
    with pytest.raises(UndefinedResult):
        one_proportion_z_test(0, 0, 0.5)


def test_two_proportion_z_test_uses_pooled_error():
    result = two_proportion_z_test(45, 100, 30, 100)
    pooled = 75 / 200
    se = math.sqrt(pooled * (1 - pooled) * (2 / 100))
    assert result.standard_error == pytest.approx(se)
    assert result.statistic == pytest.approx(0.15 / se)
    assert result.p_value == pytest.approx(2 * stats.norm.sf(0.15 / se), abs=1e-6)
    assert result.reject_null
    assert result.effect_size == pytest.approx(cohens_h(0.45, 0.30))


def test_check_test_assumptions():
    assert check_test_assumptions(50) == []
    assert len(check_test_assumptions(10)) == 1
    assert len(check_test_assumptions(40, n2=12)) == 1
    assert check_test_assumptions(1000, p=0.02) == []
    assert len(check_test_assumptions(20, p=0.1)) == 1


def test_effect_sizes():
    assert cohens_d(105.0, 100.0, 15.0) == pytest.approx(1.0 / 3.0)
    assert cohens_d_two_groups(10.0, 2.0, 20, 8.0, 2.0, 20) == pytest.approx(1.0)
    assert cohens_h(0.5, 0.5) == 0.0
    assert cohens_h(0.65, 0.45) == pytest.approx(-cohens_h(0.45, 0.65))
    with pytest.raises(UndefinedResult):
        cohens_d(1.0, 0.0, 0.0)
    with pytest.raises(DomainError):
        cohens_h(1.2, 0.5)


def test_effect_size_from_raw_data():
    assert effect_size([1.0, 2.0, 3.0, 4.0, 5.0]) == pytest.approx(3.0 / math.sqrt(2.5))
    assert effect_size([2.0, 4.0, 6.0], [1.0, 3.0, 5.0]) == pytest.approx(0.5)
    with pytest.raises(UndefinedResult):
        effect_size([1.0])


def test_interpret_effect_size():
    assert interpret_effect_size(0.1) == "negligible"
    assert interpret_effect_size(-0.3) == "small"
    assert interpret_effect_size(0.5) == "medium"
    assert interpret_effect_size(1.2) == "large"


def test_power_of_medium_effect():
    assert power(0.5, 64) == pytest.approx(0.80, abs=0.01)
    assert power(0.0, 30) == pytest.approx(0.05, abs=1e-4)
    assert power(0.5, 30, alternative="greater") > power(0.5, 30)
    assert power(0.5, 30, test="one-sample") > power(0.5, 30)


def test_power_grows_with_n_and_effect():
    assert power(0.5, 20) < power(0.5, 40) < power(0.5, 80)
    assert power(0.2, 50) < power(0.5, 50) < power(0.8, 50)


def test_power_validation():
    with pytest.raises(ValueError):
        power(0.5, 30, test="paired")
    with pytest.raises(UndefinedResult):
        power(0.5, 1)


def test_sample_size_for_power():
    assert sample_size_for_power(0.5) == 64
    n = sample_size_for_power(0.8, target=0.9, test="one-sample")
    assert power(0.8, n, test="one-sample") >= 0.9
    assert power(0.8, n - 1, test="one-sample") < 0.9
    with pytest.raises(DomainError):
        sample_size_for_power(0.0)
    with pytest.raises(NonConvergence):
        sample_size_for_power(0.01)


def test_power_curve_frame():
    curve = power_curve(0.5, [10, 20, 40, 80])
    assert list(curve.columns) == ["n", "power"]
    assert curve["power"].is_monotonic_increasing


def test_power_stays_monotone_for_large_samples():
    powers = [power(0.5, n) for n in (64, 100, 1000, 5000)]
    assert powers == sorted(powers)
    assert power(0.5, 1000) == pytest.approx(1.0, abs=1e-6)
    assert power(-0.5, 1000) == pytest.approx(1.0, abs=1e-6)
    assert power(0.5, 1000, alternative="less") == pytest.approx(0.0, abs=1e-6)


def test_sample_size_for_proportions():
    assert sample_size_for_proportions(0.5, 0.6) == 388
    assert sample_size_for_proportions(0.6, 0.5) == 388
    assert sample_size_for_proportions(0.5, 0.6, target=0.9) > 388
    with pytest.raises(DomainError):
        sample_size_for_proportions(0.3, 0.3)
    with pytest.raises(DomainError):
        sample_size_for_proportions(0.0, 0.3)
