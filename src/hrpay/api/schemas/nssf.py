"""NSSF contribution DTOs — pure Pydantic, zero ORM imports."""
from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel
from hrpay.domain.statuses import ContributionStatus


class NssfContributionCreate(BaseModel):
    employee_id: int
    payroll_period_id: int
    # Falls back to the employee's registered number when omitted.
    nssf_number: str | None = None
    # Falls back to the employee's current salary when omitted.
    gross_salary: Decimal | None = None


class NssfContributionUpdate(BaseModel):
    gross_salary: Decimal | None = None
    nssf_number: str | None = None


class NssfStatusUpdate(BaseModel):
    status: ContributionStatus


class NssfContributionRead(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    employee_id: int
    payroll_period_id: int
    nssf_number: str
    gross_salary: Decimal
    employee_contribution: Decimal
    employer_contribution: Decimal
    total_contribution: Decimal
    status: ContributionStatus
    processed_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class NssfContributionList(BaseModel):
    items: list[NssfContributionRead]
    total: int


class NssfPeriodSummary(BaseModel):
    payroll_period_id: int
    count: int
    employee_total: Decimal
    employer_total: Decimal
    grand_total: Decimal


class ContributionQuote(BaseModel):
    gross_salary: Decimal
    employee_contribution: Decimal
    employer_contribution: Decimal
    total_contribution: Decimal
