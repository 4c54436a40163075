"""Payroll DTOs — pure Pydantic, zero ORM imports."""
from __future__ import annotations
from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator, model_validator
from hrpay.domain.statuses import PeriodStatus, ItemStatus, PaymentMethod


class PayrollPeriodCreate(BaseModel):
    name: str | None = None
    start_date: date
    end_date: date
    payment_date: date | None = None
    currency: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("name must not be empty")
        return v

    @model_validator(mode="after")
    def dates_in_order(self) -> "PayrollPeriodCreate":
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        if self.payment_date is not None and self.payment_date < self.end_date:
            raise ValueError("payment_date must not be before end_date")
        return self


class PayrollPeriodUpdate(BaseModel):
    name: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    payment_date: date | None = None
    currency: str | None = None


class PayrollPeriodRead(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    start_date: date
    end_date: date
    payment_date: date | None = None
    currency: str
    status: PeriodStatus
    version: int
    item_count: int = 0
    total_gross: Decimal = Decimal("0")
    total_tax: Decimal = Decimal("0")
    total_net: Decimal = Decimal("0")
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PayrollPeriodList(BaseModel):
    items: list[PayrollPeriodRead]
    total: int


class PayrollItemRead(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    period_id: int
    employee_id: int
    employee_name: str | None = None
    employee_number: str | None = None
    department_name: str | None = None
    position_title: str | None = None
    basic_salary: Decimal
    gross_salary: Decimal
    tax_amount: Decimal
    net_salary: Decimal
    payment_method: PaymentMethod
    bank_name: str | None = None
    bank_account: str | None = None
    mobile_money_provider: str | None = None
    mobile_money_number: str | None = None
    status: ItemStatus
    paid_at: datetime | None = None


class PayrollItemList(BaseModel):
    items: list[PayrollItemRead]
    total: int


class PayrollItemFilters(BaseModel):
    search: str | None = None
    status: ItemStatus | None = None
    payment_method: PaymentMethod | None = None
    limit: int = Field(default=100, ge=1, le=1000)
    offset: int = Field(default=0, ge=0)


class GenerationResponse(BaseModel):
    period_id: int
    created_count: int
    skipped_count: int
    eligible_count: int
    item_count: int
    is_empty: bool


class ProcessResponse(BaseModel):
    period_id: int
    status: PeriodStatus
    processed_count: int


class MarkPaidResponse(BaseModel):
    period_id: int
    status: PeriodStatus
    paid_count: int
    paid_at: datetime


class PayrollStats(BaseModel):
    total_periods: int
    periods_by_status: dict[PeriodStatus, int]
    active_employees: int
    total_paid_net: Decimal
    total_pending_net: Decimal
