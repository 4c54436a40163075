"""Payroll period and item tables."""
from datetime import date, datetime
from decimal import Decimal
from sqlalchemy import UniqueConstraint
from sqlmodel import Field
from hrpay.domain.statuses import PeriodStatus, ItemStatus, PaymentMethod
from hrpay.models.base import TimestampMixin


class PayrollPeriod(TimestampMixin, table=True):
    id: int | None = Field(default=None, primary_key=True)
    name: str
    start_date: date
    end_date: date
    payment_date: date | None = None
    currency: str = "UGX"
    status: PeriodStatus = Field(default=PeriodStatus.DRAFT, index=True)
    # Bumped on every guarded write; see PayrollRepository.compare_and_set_status.
    version: int = Field(default=0)


class PayrollItem(TimestampMixin, table=True):
    __table_args__ = (
        UniqueConstraint("period_id", "employee_id", name="uq_payrollitem_period_employee"),
    )

    id: int | None = Field(default=None, primary_key=True)
    period_id: int = Field(foreign_key="payrollperiod.id", index=True)
    employee_id: int = Field(foreign_key="employee.id", index=True)

    # Snapshot of the employee record at generation time.
    basic_salary: Decimal = Field(max_digits=14, decimal_places=2)
    gross_salary: Decimal = Field(max_digits=14, decimal_places=2)
    tax_amount: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    net_salary: Decimal = Field(max_digits=14, decimal_places=2)

    payment_method: PaymentMethod
    bank_name: str | None = None
    bank_account: str | None = None
    mobile_money_provider: str | None = None
    mobile_money_number: str | None = None

    status: ItemStatus = Field(default=ItemStatus.DRAFT, index=True)
    paid_at: datetime | None = None
