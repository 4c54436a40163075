"""Repository for payroll periods and items.

No business logic; caller owns the transaction. Status writes are
compare-and-swap updates guarded on the expected pre-state so a stale reader
can never overwrite a concurrent transition.
"""
from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from sqlalchemy import delete, func, or_, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
from hrpay.domain.exceptions import DuplicateItem
from hrpay.domain.statuses import PeriodStatus, ItemStatus, PaymentMethod
from hrpay.models.employee import Employee, Department, JobPosition
from hrpay.models.payroll import PayrollPeriod, PayrollItem

ZERO = Decimal("0")


class PayrollRepository:
    def __init__(self, session: Session) -> None:
        self._s = session

    # --- Periods ---

    def get_period(self, period_id: int) -> PayrollPeriod | None:
        return self._s.get(PayrollPeriod, period_id)

    def list_periods(
        self, *, status: PeriodStatus | None = None, limit: int = 100, offset: int = 0,
    ) -> list[PayrollPeriod]:
        stmt = select(PayrollPeriod)
        if status:
            stmt = stmt.where(PayrollPeriod.status == status)
        stmt = stmt.order_by(PayrollPeriod.start_date.desc(), PayrollPeriod.id.desc())
        return list(self._s.exec(stmt.offset(offset).limit(limit)).all())

    def count_periods(self, *, status: PeriodStatus | None = None) -> int:
        stmt = select(func.count()).select_from(PayrollPeriod)
        if status:
            stmt = stmt.where(PayrollPeriod.status == status)
        return self._s.exec(stmt).one()

    def count_periods_by_status(self) -> dict[PeriodStatus, int]:
        rows = self._s.exec(
            select(PayrollPeriod.status, func.count()).group_by(PayrollPeriod.status)
        ).all()
        return {status: count for status, count in rows}

    def create_period(self, **fields) -> PayrollPeriod:
        period = PayrollPeriod(**fields)
        self._s.add(period)
        self._s.flush()  # get generated PK without committing
        return period

    def compare_and_set_status(
        self, period_id: int, *, expected: PeriodStatus, new: PeriodStatus,
    ) -> bool:
        """Move the period to *new* only if it is still in *expected*."""
        result = self._s.exec(
            update(PayrollPeriod)
            .where(PayrollPeriod.id == period_id, PayrollPeriod.status == expected)
            .values(status=new, version=PayrollPeriod.version + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def claim_if_status(self, period_id: int, *, expected: PeriodStatus) -> bool:
        """Bump the version if still in *expected*; takes the write lock for this transaction."""
        result = self._s.exec(
            update(PayrollPeriod)
            .where(PayrollPeriod.id == period_id, PayrollPeriod.status == expected)
            .values(version=PayrollPeriod.version + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def delete_period_if_status(self, period_id: int, *, expected: PeriodStatus) -> bool:
        result = self._s.exec(
            delete(PayrollPeriod)
            .where(PayrollPeriod.id == period_id, PayrollPeriod.status == expected)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    # --- Items ---

    def count_items(self, period_id: int) -> int:
        return self._s.exec(
            select(func.count()).select_from(PayrollItem).where(PayrollItem.period_id == period_id)
        ).one()

    def item_totals(self, period_id: int) -> tuple[Decimal, Decimal, Decimal]:
        gross, tax, net = self._s.exec(
            select(
                func.coalesce(func.sum(PayrollItem.gross_salary), 0),
                func.coalesce(func.sum(PayrollItem.tax_amount), 0),
                func.coalesce(func.sum(PayrollItem.net_salary), 0),
            ).where(PayrollItem.period_id == period_id)
        ).one()
        return _dec(gross), _dec(tax), _dec(net)

    def employee_ids_with_items(self, period_id: int) -> set[int]:
        return set(self._s.exec(
            select(PayrollItem.employee_id).where(PayrollItem.period_id == period_id)
        ).all())

    def insert_item(self, item: PayrollItem) -> PayrollItem:
        """Insert under a savepoint; a (period_id, employee_id) clash raises DuplicateItem."""
        try:
            with self._s.begin_nested():
                self._s.add(item)
        except IntegrityError as exc:
            raise DuplicateItem(
                f"Payroll item for employee {item.employee_id} already exists "
                f"in period {item.period_id}"
            ) from exc
        return item

    def update_items_status(
        self, period_id: int, *, from_status: ItemStatus, to_status: ItemStatus,
        paid_at: datetime | None = None,
    ) -> int:
        values: dict = {"status": to_status}
        if paid_at is not None:
            values["paid_at"] = paid_at
        result = self._s.exec(
            update(PayrollItem)
            .where(PayrollItem.period_id == period_id, PayrollItem.status == from_status)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_items(self, period_id: int) -> int:
        result = self._s.exec(
            delete(PayrollItem)
            .where(PayrollItem.period_id == period_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def _item_filters(
        self, stmt, period_id: int, *, search: str | None, status: ItemStatus | None,
        payment_method: PaymentMethod | None,
    ):
        stmt = stmt.where(PayrollItem.period_id == period_id)
        if status:
            stmt = stmt.where(PayrollItem.status == status)
        if payment_method:
            stmt = stmt.where(PayrollItem.payment_method == payment_method)
        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(or_(
                Employee.name.ilike(pattern),
                Employee.employee_number.ilike(pattern),
                Employee.email.ilike(pattern),
            ))
        return stmt

    def list_items(
        self, period_id: int, *, search: str | None = None, status: ItemStatus | None = None,
        payment_method: PaymentMethod | None = None, limit: int = 100, offset: int = 0,
    ) -> list[tuple[PayrollItem, Employee, Department | None, JobPosition | None]]:
        stmt = (
            select(PayrollItem, Employee, Department, JobPosition)
            .join(Employee, Employee.id == PayrollItem.employee_id)
            .outerjoin(Department, Department.id == Employee.department_id)
            .outerjoin(JobPosition, JobPosition.id == Employee.position_id)
        )
        stmt = self._item_filters(
            stmt, period_id, search=search, status=status, payment_method=payment_method,
        )
        stmt = stmt.order_by(Employee.name, PayrollItem.id).offset(offset).limit(limit)
        return list(self._s.exec(stmt).all())

    def count_items_filtered(
        self, period_id: int, *, search: str | None = None, status: ItemStatus | None = None,
        payment_method: PaymentMethod | None = None,
    ) -> int:
        stmt = (
            select(func.count())
            .select_from(PayrollItem)
            .join(Employee, Employee.id == PayrollItem.employee_id)
        )
        stmt = self._item_filters(
            stmt, period_id, search=search, status=status, payment_method=payment_method,
        )
        return self._s.exec(stmt).one()

    def net_total_by_item_status(self) -> dict[ItemStatus, Decimal]:
        rows = self._s.exec(
            select(PayrollItem.status, func.coalesce(func.sum(PayrollItem.net_salary), 0))
            .group_by(PayrollItem.status)
        ).all()
        return {status: _dec(total) for status, total in rows}


def _dec(value) -> Decimal:
    # SQLite returns SUM() over NUMERIC columns as float.
    if value is None:
        return ZERO
    return value if isinstance(value, Decimal) else Decimal(str(value)).quantize(Decimal("0.01"))
