import pytest

from mathlens.calculus import compute_riemann_sum
from mathlens.errors import DomainError, MathEngineError, NonConvergence, UndefinedResult
from mathlens.outcome import Outcome, OutcomeKind, evaluate
from mathlens.stats import pearson_correlation


def test_error_taxonomy_bases():
    assert issubclass(DomainError, ValueError)
    assert issubclass(UndefinedResult, ArithmeticError)
    for exc in (DomainError, UndefinedResult, NonConvergence):
        assert issubclass(exc, MathEngineError)


def test_evaluate_ok():
    outcome = evaluate(compute_riemann_sum, lambda x: x, 0.0, 2.0, 4, "left")
    assert outcome.ok
    assert outcome.unwrap().value == pytest.approx(1.5)


def test_evaluate_domain_error():
    outcome = evaluate(compute_riemann_sum, lambda x: x, 0.0, 1.0, 3, "simpson")
    assert outcome.kind is OutcomeKind.DOMAIN_ERROR
    assert outcome.message
    with pytest.raises(DomainError):
        outcome.unwrap()


def test_evaluate_undefined():
    outcome = evaluate(pearson_correlation, [1, 2, 3], [5, 5, 5])
    assert outcome.kind is OutcomeKind.UNDEFINED
    with pytest.raises(UndefinedResult):
        outcome.unwrap()


def test_evaluate_non_convergence():
    def stubborn():
        raise NonConvergence("gave up")

    outcome = evaluate(stubborn)
    assert outcome == Outcome(OutcomeKind.NON_CONVERGENCE, message="gave up")


def test_contract_errors_propagate():
    with pytest.raises(TypeError):
        evaluate(compute_riemann_sum, lambda x: x, 0.0, 1.0, 2.5)
    with pytest.raises(ValueError):
        evaluate(pearson_correlation, [1, 2, 3], [1, 2])
