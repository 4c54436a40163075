"""NSSF statutory contribution records."""
from datetime import datetime
from decimal import Decimal
from sqlmodel import Field
from hrpay.domain.statuses import ContributionStatus
from hrpay.models.base import TimestampMixin


class NssfContribution(TimestampMixin, table=True):
    id: int | None = Field(default=None, primary_key=True)
    employee_id: int = Field(foreign_key="employee.id", index=True)
    payroll_period_id: int = Field(foreign_key="payrollperiod.id", index=True)
    nssf_number: str

    gross_salary: Decimal = Field(max_digits=14, decimal_places=2)
    employee_contribution: Decimal = Field(max_digits=14, decimal_places=2)
    employer_contribution: Decimal = Field(max_digits=14, decimal_places=2)
    total_contribution: Decimal = Field(max_digits=14, decimal_places=2)

    status: ContributionStatus = Field(default=ContributionStatus.PENDING, index=True)
    processed_at: datetime | None = None
