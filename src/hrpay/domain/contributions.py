"""
NSSF statutory contribution calculator.

Uganda National Social Security Fund scheme:
  - Employee: 5% of gross salary
  - Employer: 10% of gross salary

Gross is first rounded half-up to cents. Each component is then rounded
half-up to 2 decimal places on its own; the total is the sum of the two
rounded components and is never re-rounded.
"""
from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from hrpay.domain.exceptions import InvalidSalary
from hrpay.domain.money import round2, to_decimal

EMPLOYEE_RATE = Decimal("0.05")
EMPLOYER_RATE = Decimal("0.10")


@dataclass(frozen=True)
class ContributionBreakdown:
    gross_salary: Decimal
    employee_contribution: Decimal
    employer_contribution: Decimal

    @property
    def total_contribution(self) -> Decimal:
        return self.employee_contribution + self.employer_contribution


def validate_gross_salary(gross_salary) -> Decimal:
    try:
        gross = to_decimal(gross_salary)
    except InvalidOperation:
        raise InvalidSalary(f"Gross salary {gross_salary!r} is not a number")
    if not gross.is_finite():
        raise InvalidSalary(f"Gross salary {gross_salary!r} is not finite")
    # Stored at cent precision, so the rates apply to the rounded amount.
    gross = round2(gross)
    if gross <= 0:
        raise InvalidSalary(f"Gross salary must be positive, got {gross_salary!r}")
    return gross


def compute_contribution(gross_salary) -> ContributionBreakdown:
    gross = validate_gross_salary(gross_salary)
    return ContributionBreakdown(
        gross_salary=gross,
        employee_contribution=round2(gross * EMPLOYEE_RATE),
        employer_contribution=round2(gross * EMPLOYER_RATE),
    )
