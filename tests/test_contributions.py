"""Unit tests for the NSSF 5% / 10% contribution calculator."""
from decimal import Decimal

import pytest

from hrpay.domain.contributions import (
    EMPLOYEE_RATE, EMPLOYER_RATE, compute_contribution, validate_gross_salary,
)
from hrpay.domain.exceptions import InvalidSalary


def test_rates_are_statutory():
    assert EMPLOYEE_RATE == Decimal("0.05")
    assert EMPLOYER_RATE == Decimal("0.10")


def test_five_million_gross():
    result = compute_contribution(Decimal("5000000"))
    assert result.employee_contribution == Decimal("250000.00")
    assert result.employer_contribution == Decimal("500000.00")
    assert result.total_contribution == Decimal("750000.00")


def test_accepts_int_float_and_str():
    for value in (1000000, 1000000.0, "1000000"):
        result = compute_contribution(value)
        assert result.employee_contribution == Decimal("50000.00")
        assert result.employer_contribution == Decimal("100000.00")


def test_components_round_half_up_independently():
    # 0.05 * 100.10 = 5.005 -> 5.01 ; 0.10 * 100.10 = 10.01
    result = compute_contribution(Decimal("100.10"))
    assert result.employee_contribution == Decimal("5.01")
    assert result.employer_contribution == Decimal("10.01")
    assert result.total_contribution == Decimal("15.02")


def test_total_is_sum_of_rounded_components():
    # 0.05 * 0.30 = 0.015 -> 0.02 ; 0.10 * 0.30 = 0.03 ; unrounded total 0.045
    result = compute_contribution(Decimal("0.30"))
    assert result.employee_contribution == Decimal("0.02")
    assert result.employer_contribution == Decimal("0.03")
    assert result.total_contribution == Decimal("0.05")


def test_gross_rounded_to_cents_before_rates():
    result = compute_contribution("10.099")
    assert result.gross_salary == Decimal("10.10")
    # 0.05 * 10.10 = 0.505 -> 0.51, not 0.05 * 10.099 = 0.50495 -> 0.50
    assert result.employee_contribution == Decimal("0.51")
    assert result.employer_contribution == Decimal("1.01")


def test_amount_rounding_to_zero_rejected():
    with pytest.raises(InvalidSalary):
        compute_contribution("0.004")


@pytest.mark.parametrize("bad", [0, -1, "-500", Decimal("0.00")])
def test_non_positive_gross_rejected(bad):
    with pytest.raises(InvalidSalary):
        compute_contribution(bad)


@pytest.mark.parametrize("bad", ["abc", "", None, True, float("nan"), float("inf"), "Infinity"])
def test_non_numeric_or_non_finite_rejected(bad):
    with pytest.raises(InvalidSalary):
        validate_gross_salary(bad)
