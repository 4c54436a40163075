"""
Taxation policies mapping a gross monthly salary to (tax, net).

The engine treats the policy as a black box; the default follows the
Uganda Revenue Authority resident PAYE schedule (monthly bands):

  0         - 235,000     : nil
  235,001   - 335,000     : 10% of the excess over 235,000
  335,001   - 410,000     : 10,000 + 20% of the excess over 335,000
  above 410,000           : 25,000 + 30% of the excess over 410,000
  above 10,000,000        : additional 10% of the excess over 10,000,000
"""
from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol
from hrpay.domain.money import round2

ZERO = Decimal("0")


@dataclass(frozen=True)
class TaxResult:
    tax_amount: Decimal
    net_salary: Decimal


class TaxPolicy(Protocol):
    name: str

    def apply(self, gross_salary: Decimal) -> TaxResult: ...


class NoTaxPolicy:
    name = "none"

    def apply(self, gross_salary: Decimal) -> TaxResult:
        return TaxResult(tax_amount=ZERO, net_salary=round2(gross_salary))


class FlatRateTaxPolicy:
    name = "flat"

    def __init__(self, rate: Decimal) -> None:
        if rate < 0 or rate > 1:
            raise ValueError(f"flat tax rate must be within [0, 1], got {rate}")
        self.rate = rate

    def apply(self, gross_salary: Decimal) -> TaxResult:
        if gross_salary <= 0:
            return TaxResult(tax_amount=ZERO, net_salary=round2(max(gross_salary, ZERO)))
        tax = round2(gross_salary * self.rate)
        return TaxResult(tax_amount=tax, net_salary=round2(gross_salary) - tax)


class UgandaPayePolicy:
    name = "uganda_paye"

    THRESHOLD = Decimal("235000")
    BAND_2_TOP = Decimal("335000")
    BAND_3_TOP = Decimal("410000")
    SURCHARGE_FLOOR = Decimal("10000000")

    def monthly_tax(self, gross: Decimal) -> Decimal:
        if gross <= self.THRESHOLD:
            return ZERO
        if gross <= self.BAND_2_TOP:
            tax = (gross - self.THRESHOLD) * Decimal("0.10")
        elif gross <= self.BAND_3_TOP:
            tax = Decimal("10000") + (gross - self.BAND_2_TOP) * Decimal("0.20")
        else:
            tax = Decimal("25000") + (gross - self.BAND_3_TOP) * Decimal("0.30")
        if gross > self.SURCHARGE_FLOOR:
            tax += (gross - self.SURCHARGE_FLOOR) * Decimal("0.10")
        return round2(tax)

    def apply(self, gross_salary: Decimal) -> TaxResult:
        tax = self.monthly_tax(gross_salary)
        return TaxResult(tax_amount=tax, net_salary=round2(gross_salary) - tax)


def get_tax_policy(name: str | None = None) -> TaxPolicy:
    """Resolve a policy by name; defaults to ``settings.TAX_POLICY``."""
    from hrpay.config import settings

    key = (name or settings.TAX_POLICY).strip().lower()
    if key == UgandaPayePolicy.name:
        return UgandaPayePolicy()
    if key == FlatRateTaxPolicy.name:
        return FlatRateTaxPolicy(settings.FLAT_TAX_RATE)
    if key == NoTaxPolicy.name:
        return NoTaxPolicy()
    raise ValueError(f"Unknown tax policy {key!r}")
