"""Repository for NSSF contribution records. No business logic; caller owns the transaction."""
from __future__ import annotations
from datetime import datetime
from decimal import Decimal
from sqlalchemy import func, update
from sqlmodel import Session, select
from hrpay.domain.statuses import ContributionStatus
from hrpay.models.nssf import NssfContribution


class NssfRepository:
    def __init__(self, session: Session) -> None:
        self._s = session

    def get_by_id(self, contribution_id: int) -> NssfContribution | None:
        return self._s.get(NssfContribution, contribution_id)

    def _filtered(self, stmt, *, period_id, employee_id, status):
        if period_id is not None:
            stmt = stmt.where(NssfContribution.payroll_period_id == period_id)
        if employee_id is not None:
            stmt = stmt.where(NssfContribution.employee_id == employee_id)
        if status is not None:
            stmt = stmt.where(NssfContribution.status == status)
        return stmt

    def list_all(
        self, *, period_id: int | None = None, employee_id: int | None = None,
        status: ContributionStatus | None = None, limit: int = 100, offset: int = 0,
    ) -> list[NssfContribution]:
        stmt = self._filtered(
            select(NssfContribution), period_id=period_id, employee_id=employee_id, status=status,
        )
        return list(self._s.exec(
            stmt.order_by(NssfContribution.id.desc()).offset(offset).limit(limit)
        ).all())

    def count(
        self, *, period_id: int | None = None, employee_id: int | None = None,
        status: ContributionStatus | None = None,
    ) -> int:
        stmt = self._filtered(
            select(func.count()).select_from(NssfContribution),
            period_id=period_id, employee_id=employee_id, status=status,
        )
        return self._s.exec(stmt).one()

    def totals_for_period(self, period_id: int) -> tuple[int, Decimal, Decimal, Decimal]:
        count, employee, employer, total = self._s.exec(
            select(
                func.count(NssfContribution.id),
                func.coalesce(func.sum(NssfContribution.employee_contribution), 0),
                func.coalesce(func.sum(NssfContribution.employer_contribution), 0),
                func.coalesce(func.sum(NssfContribution.total_contribution), 0),
            ).where(NssfContribution.payroll_period_id == period_id)
        ).one()
        return count, _dec(employee), _dec(employer), _dec(total)

    def create(self, **fields) -> NssfContribution:
        contribution = NssfContribution(**fields)
        self._s.add(contribution)
        self._s.flush()
        return contribution

    def compare_and_set_status(
        self, contribution_id: int, *, expected: ContributionStatus, new: ContributionStatus,
        processed_at: datetime,
    ) -> bool:
        result = self._s.exec(
            update(NssfContribution)
            .where(NssfContribution.id == contribution_id, NssfContribution.status == expected)
            .values(status=new, processed_at=processed_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def delete(self, contribution: NssfContribution) -> None:
        self._s.delete(contribution)
        self._s.flush()


def _dec(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value)).quantize(Decimal("0.01"))
