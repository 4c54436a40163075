"""Import every table module so SQLModel.metadata knows all mappers."""
from hrpay.models.employee import Department, JobPosition, Employee  # noqa: F401
from hrpay.models.payroll import PayrollPeriod, PayrollItem  # noqa: F401
from hrpay.models.nssf import NssfContribution  # noqa: F401
