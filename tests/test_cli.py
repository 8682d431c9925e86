import pytest

from mathlens.catalog import build_catalog
from mathlens.cli import main


def test_catalog_lists_every_topic(capsys):
    assert main(["catalog"]) == 0
    out = capsys.readouterr().out
    for topic in ("limits", "derivatives", "integrals"):
        assert topic in out
    assert "sine-over-x" in out


def test_limit_command_reports_removable_discontinuity(capsys):
    assert main(["limit", "rational", "--point", "1"]) == 0
    out = capsys.readouterr().out
    assert "kind: finite" in out
    assert "Removable discontinuity" in out


def test_limit_command_with_injected_catalog(capsys):
    assert main(["limit", "reciprocal", "--point", "0"], catalog=build_catalog()) == 0
    out = capsys.readouterr().out
    assert "does not exist" in out
    assert "Infinite discontinuity" in out


def test_derivative_command(capsys):
    assert main(["derivative", "polynomial", "--x", "1"]) == 0
    out = capsys.readouterr().out
    assert "exact: 0.0" in out
    assert "maximum" in out and "minimum" in out


def test_integrate_command(capsys):
    assert main(["integrate", "sine", "--n", "8", "--method", "simpson"]) == 0
    out = capsys.readouterr().out
    assert "simpson sum" in out
    assert "approximation" in out


def test_integrate_command_reports_domain_error(capsys):
    assert main(["integrate", "sine", "--n", "7", "--method", "simpson"]) == 1
    assert "domain_error" in capsys.readouterr().out


def test_distribution_command(capsys):
    assert main(["distribution", "coin-flips", "--x", "10"]) == 0
    out = capsys.readouterr().out
    assert "binomial" in out
    assert "mean=10" in out


def test_unknown_names_return_error_code(capsys):
    assert main(["distribution", "lottery"]) == 1
    assert "Unknown preset" in capsys.readouterr().out
    assert main(["limit", "tangent", "--point", "0"]) == 1


def test_bootstrap_command_is_seeded(capsys):
    argv = ["bootstrap", "1", "2", "3", "4", "5", "--resamples", "500", "--seed", "7"]
    assert main(argv) == 0
    first = capsys.readouterr().out
    assert main(argv) == 0
    assert capsys.readouterr().out == first
    assert "mean=3" in first


def test_regression_command(capsys):
    assert main(["regression", "anscombe-4"]) == 0
    out = capsys.readouterr().out
    assert "Anscombe IV" in out
    assert "cooks_d" in out
    assert "inf" in out


def test_parser_rejects_missing_command():
    with pytest.raises(SystemExit):
        main([])


def test_integrate_from_a_pole_reports_instead_of_crashing(capsys):
    assert main(["integrate", "reciprocal", "--a", "0"]) == 0
    out = capsys.readouterr().out
    assert "midpoint sum" in out
    assert "exact:" not in out
    assert "no convergence table" in out
