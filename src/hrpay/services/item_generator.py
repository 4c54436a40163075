"""Payroll item generation: one line item per active employee per period."""
from __future__ import annotations
import logging
from dataclasses import dataclass
from decimal import Decimal
from hrpay.domain.exceptions import PeriodNotFound, ConcurrentModification, DuplicateItem
from hrpay.domain.lifecycle import ensure_can_generate
from hrpay.domain.money import round2
from hrpay.domain.statuses import ItemStatus, PaymentMethod, PeriodStatus
from hrpay.domain.taxation import TaxPolicy, get_tax_policy
from hrpay.infra.db.uow import UnitOfWork
from hrpay.infra.db.repositories.employee_repository import EmployeeRepository
from hrpay.infra.db.repositories.payroll_repository import PayrollRepository
from hrpay.models.employee import Employee
from hrpay.models.payroll import PayrollItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationOutcome:
    period_id: int
    created_count: int
    skipped_count: int
    eligible_count: int
    item_count: int

    @property
    def is_empty(self) -> bool:
        return self.item_count == 0


def snapshot_item(period_id: int, employee: Employee, tax_policy: TaxPolicy) -> PayrollItem:
    """Copy salary and payment details by value; later employee edits never reach the item."""
    basic = round2(Decimal(str(employee.salary)))
    taxed = tax_policy.apply(basic)
    method = PaymentMethod(employee.payment_method)
    item = PayrollItem(
        period_id=period_id,
        employee_id=employee.id,
        basic_salary=basic,
        gross_salary=basic,
        tax_amount=taxed.tax_amount,
        net_salary=taxed.net_salary,
        payment_method=method,
        status=ItemStatus.DRAFT,
    )
    if method == PaymentMethod.BANK_TRANSFER:
        item.bank_name = employee.bank_name
        item.bank_account = employee.bank_account
    elif method == PaymentMethod.MOBILE_MONEY:
        item.mobile_money_provider = employee.mobile_money_provider
        item.mobile_money_number = employee.mobile_money_number
    return item


class PayrollItemGenerator:
    def __init__(self, uow: UnitOfWork, tax_policy: TaxPolicy | None = None) -> None:
        self._uow = uow
        self._tax_policy = tax_policy or get_tax_policy()

    def generate(self, period_id: int) -> GenerationOutcome:
        """Create items for active employees still missing one; safe to re-run.

        Does not commit; the caller owns the transaction.
        """
        payroll = PayrollRepository(self._uow.session)
        directory = EmployeeRepository(self._uow.session)

        period = payroll.get_period(period_id)
        if period is None:
            raise PeriodNotFound(f"Payroll period {period_id} not found")
        ensure_can_generate(period_id, period.status)

        # Re-check DRAFT at write time and hold the write lock for the rest of the run.
        if not payroll.claim_if_status(period_id, expected=PeriodStatus.DRAFT):
            raise ConcurrentModification(
                f"Payroll period {period_id} changed status during generation"
            )

        already = payroll.employee_ids_with_items(period_id)
        eligible = directory.list_active()
        created = skipped = 0

        for employee in eligible:
            if employee.id in already:
                skipped += 1
                continue
            try:
                payroll.insert_item(snapshot_item(period_id, employee, self._tax_policy))
            except DuplicateItem:
                logger.debug("Item for employee %s already present in period %s", employee.id, period_id)
                skipped += 1
                continue
            created += 1

        outcome = GenerationOutcome(
            period_id=period_id,
            created_count=created,
            skipped_count=skipped,
            eligible_count=len(eligible),
            item_count=payroll.count_items(period_id),
        )
        if outcome.is_empty:
            logger.warning("Payroll period %s has no items: no active employees", period_id)
        logger.info(
            "Generated payroll items for period %s: created=%d skipped=%d policy=%s",
            period_id, created, skipped, self._tax_policy.name,
        )
        return outcome
