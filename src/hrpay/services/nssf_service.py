"""NSSF contribution use-case service.

Contributions are correctable filings: unlike committed payroll periods they
may be deleted in any status. Their lifecycle is driven only by explicit
operator actions, never by payroll period transitions.
"""
from __future__ import annotations
import logging
from hrpay.domain.contributions import compute_contribution
from hrpay.domain.exceptions import (
    ContributionNotFound, EmployeeNotFound, PeriodNotFound, ValidationError,
    ConcurrentModification,
)
from hrpay.domain.lifecycle import ensure_contribution_advance, ensure_contribution_editable
from hrpay.domain.statuses import ContributionStatus
from hrpay.infra.db.uow import UnitOfWork
from hrpay.infra.db.repositories.employee_repository import EmployeeRepository
from hrpay.infra.db.repositories.nssf_repository import NssfRepository
from hrpay.infra.db.repositories.payroll_repository import PayrollRepository
from hrpay.models.base import utcnow
from hrpay.models.nssf import NssfContribution
from hrpay.api.schemas.nssf import (
    NssfContributionCreate, NssfContributionUpdate, NssfContributionRead,
    NssfContributionList, NssfPeriodSummary, ContributionQuote,
)

logger = logging.getLogger(__name__)


def _clean_nssf_number(value: str | None) -> str:
    number = (value or "").strip()
    if not number:
        raise ValidationError("nssf_number is required")
    return number


def quote(gross_salary) -> ContributionQuote:
    """Contribution amounts for a salary without persisting anything."""
    breakdown = compute_contribution(gross_salary)
    return ContributionQuote(
        gross_salary=breakdown.gross_salary,
        employee_contribution=breakdown.employee_contribution,
        employer_contribution=breakdown.employer_contribution,
        total_contribution=breakdown.total_contribution,
    )


class NssfService:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def _get(self, contribution_id: int) -> NssfContribution:
        contribution = NssfRepository(self._uow.session).get_by_id(contribution_id)
        if contribution is None:
            raise ContributionNotFound(f"NSSF contribution {contribution_id} not found")
        return contribution

    def _ensure_period(self, period_id: int) -> None:
        if PayrollRepository(self._uow.session).get_period(period_id) is None:
            raise PeriodNotFound(f"Payroll period {period_id} not found")

    def create(self, payload: NssfContributionCreate) -> NssfContributionRead:
        employee = EmployeeRepository(self._uow.session).get_by_id(payload.employee_id)
        if employee is None:
            raise EmployeeNotFound(f"Employee {payload.employee_id} not found")
        self._ensure_period(payload.payroll_period_id)

        nssf_number = _clean_nssf_number(
            payload.nssf_number if payload.nssf_number is not None else employee.nssf_number
        )
        gross = payload.gross_salary if payload.gross_salary is not None else employee.salary
        breakdown = compute_contribution(gross)

        contribution = NssfRepository(self._uow.session).create(
            employee_id=employee.id,
            payroll_period_id=payload.payroll_period_id,
            nssf_number=nssf_number,
            gross_salary=breakdown.gross_salary,
            employee_contribution=breakdown.employee_contribution,
            employer_contribution=breakdown.employer_contribution,
            total_contribution=breakdown.total_contribution,
            status=ContributionStatus.PENDING,
        )
        self._uow.commit()
        logger.info(
            "Created NSSF contribution %s for employee %s in period %s",
            contribution.id, employee.id, payload.payroll_period_id,
        )
        return NssfContributionRead.model_validate(contribution)

    def get(self, contribution_id: int) -> NssfContributionRead:
        return NssfContributionRead.model_validate(self._get(contribution_id))

    def list_contributions(
        self, period_id: int | None = None, employee_id: int | None = None,
        status: ContributionStatus | None = None, limit: int = 100, offset: int = 0,
    ) -> NssfContributionList:
        repo = NssfRepository(self._uow.session)
        items = repo.list_all(
            period_id=period_id, employee_id=employee_id, status=status, limit=limit, offset=offset,
        )
        return NssfContributionList(
            items=[NssfContributionRead.model_validate(c) for c in items],
            total=repo.count(period_id=period_id, employee_id=employee_id, status=status),
        )

    def update(self, contribution_id: int, payload: NssfContributionUpdate) -> NssfContributionRead:
        contribution = self._get(contribution_id)
        ensure_contribution_editable(contribution_id, contribution.status)

        if payload.nssf_number is not None:
            contribution.nssf_number = _clean_nssf_number(payload.nssf_number)
        if payload.gross_salary is not None:
            # All three amounts move together; total is never stored out of sync.
            breakdown = compute_contribution(payload.gross_salary)
            contribution.gross_salary = breakdown.gross_salary
            contribution.employee_contribution = breakdown.employee_contribution
            contribution.employer_contribution = breakdown.employer_contribution
            contribution.total_contribution = breakdown.total_contribution

        self._uow.session.add(contribution)
        self._uow.commit()
        return NssfContributionRead.model_validate(contribution)

    def advance_status(self, contribution_id: int, target: ContributionStatus) -> NssfContributionRead:
        contribution = self._get(contribution_id)
        ensure_contribution_advance(contribution_id, contribution.status, target)

        previous = contribution.status
        moved = NssfRepository(self._uow.session).compare_and_set_status(
            contribution_id, expected=previous, new=target, processed_at=utcnow(),
        )
        if not moved:
            raise ConcurrentModification(
                f"NSSF contribution {contribution_id} is no longer {previous.value}; refresh and retry"
            )
        self._uow.commit()
        logger.info(
            "NSSF contribution %s moved %s -> %s", contribution_id, previous.value, target.value,
        )
        return NssfContributionRead.model_validate(contribution)

    def delete(self, contribution_id: int) -> None:
        contribution = self._get(contribution_id)
        status = contribution.status
        NssfRepository(self._uow.session).delete(contribution)
        self._uow.commit()
        logger.info("Deleted NSSF contribution %s (was %s)", contribution_id, status.value)

    def period_summary(self, period_id: int) -> NssfPeriodSummary:
        self._ensure_period(period_id)
        count, employee_total, employer_total, grand_total = (
            NssfRepository(self._uow.session).totals_for_period(period_id)
        )
        return NssfPeriodSummary(
            payroll_period_id=period_id,
            count=count,
            employee_total=employee_total,
            employer_total=employer_total,
            grand_total=grand_total,
        )
