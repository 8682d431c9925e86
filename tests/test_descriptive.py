import math

import numpy as np
import pytest
from scipy import stats

from mathlens.errors import DomainError, UndefinedResult
from mathlens.stats import detect_outliers, histogram, quartiles, skewness, summarize
from mathlens.stats.descriptive import as_array, sturges_bins


def test_summary_of_small_sample():
    summary = summarize(range(1, 10))
    assert summary.n == 9
    assert summary.mean == 5.0
    assert summary.median == 5.0
    assert (summary.q1, summary.q3) == (3.0, 7.0)
    assert summary.iqr == 4.0
    assert summary.std == pytest.approx(math.sqrt(7.5))
    assert (summary.minimum, summary.maximum) == (1.0, 9.0)


def test_single_value_summary_has_zero_spread():
    summary = summarize([4.2])
    assert summary.std == 0.0
    assert quartiles([4.2]) == (4.2, 4.2, 4.2)


def test_detect_outliers_with_tukey_fences():
    analysis = detect_outliers([1.0, 2.0, 3.0, 4.0, 5.0, 100.0])
    assert analysis.lower_fence == pytest.approx(2.25 - 3.75)
    assert analysis.upper_fence == pytest.approx(4.75 + 3.75)
    assert analysis.outliers == (100.0,)
    assert analysis.indices == (5,)
    assert detect_outliers([1.0, 2.0, 3.0]).outliers == ()


def test_skewness_matches_scipy():
    values = [1.0, 2.0, 2.0, 3.0, 3.0, 3.0, 9.0, 15.0]
    assert skewness(values) == pytest.approx(stats.skew(values, bias=False))
    assert skewness([1.0, 2.0, 3.0]) == pytest.approx(0.0)
    with pytest.raises(UndefinedResult):
        skewness([1.0, 2.0])
    with pytest.raises(UndefinedResult):
        skewness([3.0, 3.0, 3.0])


def test_histogram_bins_and_densities(rng):
    values = rng.normal(0.0, 1.0, size=100)
    hist = histogram(values)
    assert sturges_bins(100) == 8
    assert len(hist.counts) == 8
    assert len(hist.edges) == 9
    assert sum(hist.counts) == 100
    widths = np.diff(hist.edges)
    assert float(np.dot(hist.densities, widths)) == pytest.approx(1.0)
    assert len(hist.centers) == 8


def test_histogram_bin_cap_and_validation():
    assert sturges_bins(10**12) == 30
    assert sturges_bins(1) == 1
    with pytest.raises(DomainError):
        histogram([1.0, 2.0], bins=0)
    with pytest.raises(UndefinedResult):
        histogram([])


def test_as_array_rejects_bad_input():
    with pytest.raises(ValueError):
        as_array([[1.0, 2.0], [3.0, 4.0]])
    with pytest.raises(ValueError):
        as_array([1.0, math.nan])
    assert as_array((1, 2, 3)).dtype == float
