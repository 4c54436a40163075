"""Employee directory DTOs — pure Pydantic, zero ORM imports."""
from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, Field, field_validator
from hrpay.domain.statuses import PaymentMethod


def _not_blank(v: str, field: str) -> str:
    if not v.strip():
        raise ValueError(f"{field} must not be empty")
    return v.strip()


class DepartmentCreate(BaseModel):
    name: str
    code: str

    @field_validator("name", "code")
    @classmethod
    def not_empty(cls, v: str, info) -> str:
        return _not_blank(v, info.field_name)


class DepartmentRead(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    code: str


class JobPositionCreate(BaseModel):
    title: str
    code: str
    department_id: int | None = None

    @field_validator("title", "code")
    @classmethod
    def not_empty(cls, v: str, info) -> str:
        return _not_blank(v, info.field_name)


class JobPositionRead(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    title: str
    code: str
    department_id: int | None = None


class EmployeeCreate(BaseModel):
    employee_number: str
    name: str
    email: str | None = None
    phone: str | None = None
    department_id: int | None = None
    position_id: int | None = None
    salary: Decimal = Field(default=Decimal("0"), ge=0)
    is_active: bool = True
    payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER
    bank_name: str | None = None
    bank_account: str | None = None
    mobile_money_provider: str | None = None
    mobile_money_number: str | None = None
    nssf_number: str | None = None

    @field_validator("employee_number", "name")
    @classmethod
    def not_empty(cls, v: str, info) -> str:
        return _not_blank(v, info.field_name)


class EmployeeUpdate(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    department_id: int | None = None
    position_id: int | None = None
    salary: Decimal | None = Field(default=None, ge=0)
    is_active: bool | None = None
    payment_method: PaymentMethod | None = None
    bank_name: str | None = None
    bank_account: str | None = None
    mobile_money_provider: str | None = None
    mobile_money_number: str | None = None
    nssf_number: str | None = None


class EmployeeRead(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    employee_number: str
    name: str
    email: str | None = None
    phone: str | None = None
    department_id: int | None = None
    position_id: int | None = None
    salary: Decimal
    is_active: bool
    payment_method: PaymentMethod
    bank_name: str | None = None
    bank_account: str | None = None
    mobile_money_provider: str | None = None
    mobile_money_number: str | None = None
    nssf_number: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class EmployeeList(BaseModel):
    items: list[EmployeeRead]
    total: int
