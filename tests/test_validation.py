"""Run the analytic validation cases."""

import pytest

from estatic.validation.cases import CASES, lines_escape, run_all


@pytest.mark.parametrize("name", sorted(CASES))
def test_validation_case(name):
    result = CASES[name]()
    assert result["passed"], f"{result['name']}: error {result['error']:.3e} > {result['tol']:.1e}"


@pytest.mark.slow
def test_run_all_reports_every_case():
    results = run_all()

    assert len(results) == len(CASES)
    assert all({"name", "error", "tol", "passed"} <= set(result) for result in results)


def test_lines_escape_names_sign():
    assert lines_escape(-20)["name"].startswith("Negative")
    assert lines_escape(20)["name"].startswith("Positive")
