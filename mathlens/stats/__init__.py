"""
Probability and statistics engines.

This subpackage provides distributions, sampling and inference, hypothesis
testing and regression. All functions operate on sequences, NumPy arrays or
pandas DataFrames; randomness always comes from a caller-supplied
``numpy.random.Generator``.

Modules:
    descriptive:
        Quartiles, Tukey outlier fences, skewness and histograms shared by
        the other modules.

    distributions:
        Normal, binomial, Poisson, exponential and uniform families with
        pdf/pmf, cdf, quantile and sampling, plus the Central Limit Theorem
        demonstration.

    inference:
        Simple random, systematic, stratified and cluster sampling;
        standard errors, confidence intervals and the percentile bootstrap.

    hypothesis:
        One- and two-sample t tests, one- and two-proportion z tests,
        power analysis and Cohen's d / h effect sizes.

    regression:
        Pearson correlation, least-squares lines, residuals, leverage and
        Cook's distance.

Design Principle:
    This subpackage has no dependency on the calculus engines. Parameters
    are validated up front and invalid input raises a DomainError instead
    of producing NaN.
"""

from .descriptive import (
    Histogram,
    OutlierAnalysis,
    Summary,
    detect_outliers,
    histogram,
    outlier_fences,
    quartiles,
    skewness,
    summarize,
)
from .distributions import (
    Binomial,
    CentralLimitDemo,
    Distribution,
    Exponential,
    Normal,
    Poisson,
    SampleSet,
    Uniform,
    central_limit_demo,
    erf,
    make_distribution,
    probability_above,
    probability_below,
    probability_between,
)
from .hypothesis import (
    HypothesisTest,
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
from .inference import (
    BootstrapResult,
    ConfidenceInterval,
    PopulationSample,
    assign_strata,
    bootstrap_ci,
    cluster_sample,
    confidence_interval,
    critical_value,
    finite_population_correction,
    proportion_confidence_interval,
    sample_size_for_mean,
    sample_size_for_proportion,
    simple_random_sample,
    standard_error,
    standard_error_proportion,
    stratified_sample,
    systematic_sample,
)
from .regression import (
    RegressionModel,
    calculate_residuals,
    cooks_distance,
    identify_outliers,
    intercept_confidence_interval,
    interpret_correlation,
    leverage,
    linear_regression,
    pearson_correlation,
    slope_confidence_interval,
    standard_error_of_estimate,
)

__all__ = [
    # Descriptive
    "Histogram",
    "OutlierAnalysis",
    "Summary",
    "detect_outliers",
    "histogram",
    "outlier_fences",
    "quartiles",
    "skewness",
    "summarize",
    # Distributions
    "Binomial",
    "CentralLimitDemo",
    "Distribution",
    "Exponential",
    "Normal",
    "Poisson",
    "SampleSet",
    "Uniform",
    "central_limit_demo",
    "erf",
    "make_distribution",
    "probability_above",
    "probability_below",
    "probability_between",
    # Inference
    "BootstrapResult",
    "ConfidenceInterval",
    "PopulationSample",
    "assign_strata",
    "bootstrap_ci",
    "cluster_sample",
    "confidence_interval",
    "critical_value",
    "finite_population_correction",
    "proportion_confidence_interval",
    "sample_size_for_mean",
    "sample_size_for_proportion",
    "simple_random_sample",
    "standard_error",
    "standard_error_proportion",
    "stratified_sample",
    "systematic_sample",
    # Hypothesis tests
    "HypothesisTest",
    "check_test_assumptions",
    "cohens_d",
    "cohens_d_two_groups",
    "cohens_h",
    "effect_size",
    "interpret_effect_size",
    "one_proportion_z_test",
    "one_sample_t_test",
    "power",
    "power_curve",
    "sample_size_for_power",
    "sample_size_for_proportions",
    "two_proportion_z_test",
    "two_sample_t_test",
    # Regression
    "RegressionModel",
    "calculate_residuals",
    "cooks_distance",
    "identify_outliers",
    "intercept_confidence_interval",
    "interpret_correlation",
    "leverage",
    "linear_regression",
    "pearson_correlation",
    "slope_confidence_interval",
    "standard_error_of_estimate",
]
