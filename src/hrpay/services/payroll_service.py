"""Payroll period lifecycle use-case service.

Every transition follows the same shape: load the period, re-derive the guard
from stored state, then commit the status change with a compare-and-swap on the
expected pre-state. The item cascade runs in the same UnitOfWork transaction.
"""
from __future__ import annotations
import logging
from hrpay.config import settings
from hrpay.domain.exceptions import (
    PeriodNotFound, ConcurrentModification, ConflictError, ValidationError,
)
from hrpay.domain.lifecycle import (
    ITEM_STATUS_FOR_PERIOD, ensure_can_process, ensure_can_mark_paid, ensure_can_delete,
    ensure_next_period_status,
)
from hrpay.domain.periods import validate_period_dates, default_period_name, normalize_currency
from hrpay.domain.statuses import PeriodStatus, ItemStatus
from hrpay.domain.taxation import TaxPolicy
from hrpay.infra.db.uow import UnitOfWork
from hrpay.infra.db.repositories.employee_repository import EmployeeRepository
from hrpay.infra.db.repositories.nssf_repository import NssfRepository
from hrpay.infra.db.repositories.payroll_repository import PayrollRepository
from hrpay.models.base import utcnow
from hrpay.models.payroll import PayrollPeriod
from hrpay.services.item_generator import PayrollItemGenerator
from hrpay.api.schemas.payroll import (
    PayrollPeriodCreate, PayrollPeriodUpdate, PayrollPeriodRead, PayrollPeriodList,
    PayrollItemRead, PayrollItemList, PayrollItemFilters,
    GenerationResponse, ProcessResponse, MarkPaidResponse, PayrollStats,
)

logger = logging.getLogger(__name__)


class PayrollService:
    def __init__(self, uow: UnitOfWork, tax_policy: TaxPolicy | None = None) -> None:
        self._uow = uow
        self._tax_policy = tax_policy

    @property
    def _repo(self) -> PayrollRepository:
        return PayrollRepository(self._uow.session)

    def _get_period(self, period_id: int) -> PayrollPeriod:
        period = self._repo.get_period(period_id)
        if period is None:
            raise PeriodNotFound(f"Payroll period {period_id} not found")
        return period

    def _to_read(self, period: PayrollPeriod) -> PayrollPeriodRead:
        repo = self._repo
        gross, tax, net = repo.item_totals(period.id)
        dto = PayrollPeriodRead.model_validate(period)
        return dto.model_copy(update={
            "item_count": repo.count_items(period.id),
            "total_gross": gross,
            "total_tax": tax,
            "total_net": net,
        })

    def _transition(self, period: PayrollPeriod, target: PeriodStatus) -> None:
        ensure_next_period_status(period.id, period.status, target)
        if not self._repo.compare_and_set_status(period.id, expected=period.status, new=target):
            raise ConcurrentModification(
                f"Payroll period {period.id} is no longer {period.status.value}; "
                "refresh and retry"
            )

    # --- Periods ---

    def create_period(self, payload: PayrollPeriodCreate) -> PayrollPeriodRead:
        validate_period_dates(payload.start_date, payload.end_date, payload.payment_date)
        period = self._repo.create_period(
            name=(payload.name or default_period_name(payload.start_date, payload.end_date)).strip(),
            start_date=payload.start_date,
            end_date=payload.end_date,
            payment_date=payload.payment_date,
            currency=normalize_currency(payload.currency or settings.DEFAULT_CURRENCY),
            status=PeriodStatus.DRAFT,
        )
        self._uow.commit()
        logger.info("Created payroll period %s (%s)", period.id, period.name)
        return self._to_read(period)

    def list_periods(
        self, status: PeriodStatus | None = None, limit: int = 100, offset: int = 0,
    ) -> PayrollPeriodList:
        repo = self._repo
        periods = repo.list_periods(status=status, limit=limit, offset=offset)
        return PayrollPeriodList(
            items=[self._to_read(p) for p in periods],
            total=repo.count_periods(status=status),
        )

    def get_period(self, period_id: int) -> PayrollPeriodRead:
        return self._to_read(self._get_period(period_id))

    def update_period(self, period_id: int, payload: PayrollPeriodUpdate) -> PayrollPeriodRead:
        """Metadata-only edit, allowed in any status; items are never regenerated or resized."""
        period = self._get_period(period_id)
        changes = payload.model_dump(exclude_unset=True)

        start = changes.get("start_date") or period.start_date
        end = changes.get("end_date") or period.end_date
        payment = changes["payment_date"] if "payment_date" in changes else period.payment_date
        validate_period_dates(start, end, payment)

        if changes.get("name") is not None:
            if not changes["name"].strip():
                raise ValidationError("name must not be empty")
            period.name = changes["name"].strip()
        if changes.get("currency") is not None:
            period.currency = normalize_currency(changes["currency"])
        period.start_date, period.end_date, period.payment_date = start, end, payment

        self._uow.session.add(period)
        self._uow.commit()
        return self._to_read(period)

    def delete_period(self, period_id: int) -> None:
        period = self._get_period(period_id)
        ensure_can_delete(period_id, period.status)

        filings = NssfRepository(self._uow.session).count(period_id=period_id)
        if filings:
            raise ConflictError(
                f"Payroll period {period_id} has {filings} NSSF contribution(s); delete them first"
            )

        repo = self._repo
        removed = repo.delete_items(period_id)
        if not repo.delete_period_if_status(period_id, expected=PeriodStatus.DRAFT):
            raise ConcurrentModification(
                f"Payroll period {period_id} is no longer DRAFT; refresh and retry"
            )
        self._uow.session.expunge(period)
        self._uow.commit()
        logger.info("Deleted payroll period %s with %d item(s)", period_id, removed)

    # --- Lifecycle ---

    def generate_items(self, period_id: int) -> GenerationResponse:
        outcome = PayrollItemGenerator(self._uow, self._tax_policy).generate(period_id)
        self._uow.commit()
        return GenerationResponse(
            period_id=outcome.period_id,
            created_count=outcome.created_count,
            skipped_count=outcome.skipped_count,
            eligible_count=outcome.eligible_count,
            item_count=outcome.item_count,
            is_empty=outcome.is_empty,
        )

    def process(self, period_id: int) -> ProcessResponse:
        period = self._get_period(period_id)
        ensure_can_process(period_id, period.status, self._repo.count_items(period_id))

        self._transition(period, PeriodStatus.PROCESSING)
        from_status, to_status = ITEM_STATUS_FOR_PERIOD[PeriodStatus.PROCESSING]
        processed = self._repo.update_items_status(
            period_id, from_status=from_status, to_status=to_status,
        )
        self._uow.commit()
        logger.info("Processed payroll period %s: %d item(s)", period_id, processed)
        return ProcessResponse(
            period_id=period_id, status=PeriodStatus.PROCESSING, processed_count=processed,
        )

    def mark_paid(self, period_id: int) -> MarkPaidResponse:
        period = self._get_period(period_id)
        ensure_can_mark_paid(period_id, period.status)

        paid_at = utcnow()
        self._transition(period, PeriodStatus.PAID)
        from_status, to_status = ITEM_STATUS_FOR_PERIOD[PeriodStatus.PAID]
        paid = self._repo.update_items_status(
            period_id, from_status=from_status, to_status=to_status, paid_at=paid_at,
        )
        self._uow.commit()
        logger.info("Marked payroll period %s paid: %d item(s)", period_id, paid)
        return MarkPaidResponse(
            period_id=period_id, status=PeriodStatus.PAID, paid_count=paid, paid_at=paid_at,
        )

    # --- Reporting ---

    def list_items(self, period_id: int, filters: PayrollItemFilters | None = None) -> PayrollItemList:
        self._get_period(period_id)
        filters = filters or PayrollItemFilters()
        criteria = dict(
            search=filters.search, status=filters.status, payment_method=filters.payment_method,
        )
        repo = self._repo
        rows = repo.list_items(period_id, limit=filters.limit, offset=filters.offset, **criteria)
        items = []
        for item, employee, department, position in rows:
            dto = PayrollItemRead.model_validate(item)
            items.append(dto.model_copy(update={
                "employee_name": employee.name,
                "employee_number": employee.employee_number,
                "department_name": department.name if department else None,
                "position_title": position.title if position else None,
            }))
        return PayrollItemList(items=items, total=repo.count_items_filtered(period_id, **criteria))

    def get_stats(self) -> PayrollStats:
        repo = self._repo
        by_status = repo.count_periods_by_status()
        net_by_item = repo.net_total_by_item_status()
        return PayrollStats(
            total_periods=sum(by_status.values()),
            periods_by_status={s: by_status.get(s, 0) for s in PeriodStatus},
            active_employees=EmployeeRepository(self._uow.session).count(is_active=True),
            total_paid_net=net_by_item.get(ItemStatus.PAID, 0),
            total_pending_net=(
                net_by_item.get(ItemStatus.DRAFT, 0) + net_by_item.get(ItemStatus.PROCESSED, 0)
            ),
        )
