"""Employee directory tables. Read-only from the payroll engine's perspective."""
from decimal import Decimal
from sqlmodel import Field
from hrpay.domain.statuses import PaymentMethod
from hrpay.models.base import TimestampMixin


class Department(TimestampMixin, table=True):
    id: int | None = Field(default=None, primary_key=True)
    name: str
    code: str = Field(index=True, unique=True)


class JobPosition(TimestampMixin, table=True):
    id: int | None = Field(default=None, primary_key=True)
    title: str
    code: str = Field(index=True, unique=True)
    department_id: int | None = Field(default=None, foreign_key="department.id")


class Employee(TimestampMixin, table=True):
    id: int | None = Field(default=None, primary_key=True)
    employee_number: str = Field(index=True, unique=True)
    name: str
    email: str | None = None
    phone: str | None = None
    department_id: int | None = Field(default=None, foreign_key="department.id")
    position_id: int | None = Field(default=None, foreign_key="jobposition.id")
    salary: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    is_active: bool = Field(default=True, index=True)

    payment_method: PaymentMethod = Field(default=PaymentMethod.BANK_TRANSFER)
    bank_name: str | None = None
    bank_account: str | None = None
    mobile_money_provider: str | None = None
    mobile_money_number: str | None = None

    nssf_number: str | None = None
