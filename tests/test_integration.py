import math

import numpy as np
import pytest

from mathlens.calculus import compare_methods, compute_riemann_sum, convergence_sequence
from mathlens.catalog import default_catalog
from mathlens.errors import DomainError, UndefinedResult
from mathlens.outcome import OutcomeKind, evaluate


def integral_fn(function_id):
    return default_catalog().get("integrals", function_id)


def identity(x):
    return x


def test_basic_rules_on_identity():
    assert compute_riemann_sum(identity, 0.0, 2.0, 4, "left").value == pytest.approx(1.5)
    assert compute_riemann_sum(identity, 0.0, 2.0, 4, "right").value == pytest.approx(2.5)
    assert compute_riemann_sum(identity, 0.0, 2.0, 4, "midpoint").value == pytest.approx(2.0)
    assert compute_riemann_sum(identity, 0.0, 2.0, 4, "trapezoidal").value == pytest.approx(2.0)


def test_rendering_geometry():
    result = compute_riemann_sum(identity, 0.0, 2.0, 4, "left")
    assert result.delta_x == pytest.approx(0.5)
    assert result.sample_points == pytest.approx((0.0, 0.5, 1.0, 1.5))
    assert sum(result.areas) == pytest.approx(result.value)
    assert len(result.areas) == 4


def test_areas_sum_to_value_for_every_rule():
    fn = integral_fn("cubic-signed")
    for method, result in compare_methods(fn, -1.0, 2.0, 6).items():
        assert len(result.areas) == 6
        assert sum(result.areas) == pytest.approx(result.value), method


def test_simpson_is_exact_for_cubics():
    result = compute_riemann_sum(integral_fn("cubic-signed"), -1.0, 2.0, 2, "simpson")
    assert result.value == pytest.approx(2.25)
    assert result.error == pytest.approx(0.0, abs=1e-12)


def test_midpoint_and_trapezoid_errors_on_convex_function():
    fn = integral_fn("quadratic")
    midpoint = compute_riemann_sum(fn, 0.0, 2.0, 4, "midpoint")
    trapezoid = compute_riemann_sum(fn, 0.0, 2.0, 4, "trapezoidal")
    assert midpoint.value == pytest.approx(2.625)
    assert trapezoid.value == pytest.approx(2.75)
    # Midpoint underestimates by half as much as the trapezoid overestimates.
    assert trapezoid.value - trapezoid.exact == pytest.approx(
        -2.0 * (midpoint.value - midpoint.exact)
    )


def test_constant_is_exact_for_every_rule():
    fn = integral_fn("constant")
    for result in compare_methods(fn, 0.0, 4.0, 4).values():
        assert result.value == pytest.approx(12.0)


def test_signed_area_and_reversed_bounds():
    fn = integral_fn("sine")
    forward = compute_riemann_sum(fn, 0.0, math.pi, 50, "midpoint")
    backward = compute_riemann_sum(fn, math.pi, 0.0, 50, "midpoint")
    assert backward.value == pytest.approx(-forward.value)
    below = compute_riemann_sum(fn, math.pi, 2 * math.pi, 50, "midpoint")
    assert below.value < 0


def test_degenerate_interval_has_zero_area():
    result = compute_riemann_sum(identity, 1.0, 1.0, 10, "left")
    assert result.value == 0.0
    assert result.sample_points == ()


def test_partition_validation():
    with pytest.raises(DomainError):
        compute_riemann_sum(identity, 0.0, 1.0, 3, "simpson")
    with pytest.raises(DomainError):
        compute_riemann_sum(identity, 0.0, 1.0, 0)
    with pytest.raises(DomainError):
        compute_riemann_sum(identity, 0.0, 1.0, 201)
    with pytest.raises(TypeError):
        compute_riemann_sum(identity, 0.0, 1.0, 2.5)
    with pytest.raises(TypeError):
        compute_riemann_sum(identity, 0.0, 1.0, True)
    with pytest.raises(ValueError):
        compute_riemann_sum(identity, 0.0, 1.0, 4, "gauss")
    with pytest.raises(DomainError):
        compute_riemann_sum(identity, 0.0, math.inf, 4)


def test_accepts_numpy_integer_partitions():
    result = compute_riemann_sum(identity, 0.0, 2.0, np.int64(4), "left")
    assert result.n == 4


def test_undefined_integrand():
    with pytest.raises(UndefinedResult):
        compute_riemann_sum(integral_fn("reciprocal"), -1.0, 1.0, 2, "left")


def test_convergence_sequence_against_exact():
    sequence = convergence_sequence(integral_fn("sine"), 0.0, math.pi, "midpoint")
    assert sequence.reference_is_exact
    assert sequence.reference == pytest.approx(2.0)
    assert [s.n for s in sequence.sums] == [2, 4, 8, 16, 32, 64, 128]
    errors = sequence.errors
    assert all(later < earlier for earlier, later in zip(errors, errors[1:]))
    # Second-order rule: doubling n quarters the error.
    assert errors[-2] / errors[-1] == pytest.approx(4.0, rel=1e-2)


def test_convergence_sequence_with_numerical_reference():
    sequence = convergence_sequence(lambda x: math.exp(-x * x), 0.0, 1.0, "trapezoidal")
    assert not sequence.reference_is_exact
    assert sequence.reference == pytest.approx(0.7468241328, abs=1e-9)
    frame = sequence.to_frame()
    assert list(frame.columns) == ["n", "approximation", "error"]
    assert len(frame) == 7
    assert frame["error"].iloc[-1] < 1e-5


def test_compare_methods_omits_simpson_for_odd_n():
    results = compare_methods(identity, 0.0, 1.0, 3)
    assert "simpson" not in results
    assert set(compare_methods(identity, 0.0, 1.0, 4)) == {
        "left",
        "right",
        "midpoint",
        "trapezoidal",
        "simpson",
    }


def test_simpson_is_exact_on_quadratic_and_beats_trapezoid():
    def square(x):
        return x * x

    for n in (2, 4, 8, 16):
        simpson = compute_riemann_sum(square, 0.0, 1.0, n, "simpson", exact=1.0 / 3.0)
        trapezoid = compute_riemann_sum(square, 0.0, 1.0, n, "trapezoidal", exact=1.0 / 3.0)
        assert simpson.value == pytest.approx(1.0 / 3.0, abs=1e-12)
        assert simpson.error < trapezoid.error


def test_numerical_reference_is_not_attached_as_exact():
    sequence = convergence_sequence(lambda x: math.exp(-x * x), 0.0, 1.0, "midpoint")
    assert all(s.exact is None for s in sequence.sums)
    assert sequence.errors[-1] < sequence.errors[0]


def test_convergence_sequence_rejects_fractional_partitions():
    with pytest.raises(TypeError):
        convergence_sequence(identity, 0.0, 1.0, "midpoint", ns=(2, 2.5))


def test_reciprocal_has_no_exact_value_across_its_pole():
    reciprocal = integral_fn("reciprocal")
    assert reciprocal.exact_integral(1.0, math.e) == pytest.approx(1.0)
    assert reciprocal.exact_integral(0.0, 1.0) is None
    assert reciprocal.exact_integral(-1.0, 1.0) is None
    assert reciprocal.exact_integral(-2.0, -1.0) == pytest.approx(-math.log(2.0))


def test_reciprocal_from_its_pole_is_a_typed_outcome():
    reciprocal = integral_fn("reciprocal")
    midpoint = evaluate(compute_riemann_sum, reciprocal, 0.0, 1.0, 4, "midpoint")
    assert midpoint.ok
    assert midpoint.value.exact is None
    left = evaluate(compute_riemann_sum, reciprocal, 0.0, 1.0, 4, "left")
    assert left.kind is OutcomeKind.UNDEFINED
