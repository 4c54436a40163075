"""Lifecycle guards for payroll periods and NSSF contributions.

Guards read only stored state passed in by the caller and raise typed errors;
they never mutate anything. Services call them before any write.
"""
from __future__ import annotations
from hrpay.domain.exceptions import (
    InvalidPeriodState, NoItemsToProcess, InvalidStatusTransition, ContributionLocked,
)
from hrpay.domain.statuses import PeriodStatus, ItemStatus, ContributionStatus

PERIOD_ORDER: tuple[PeriodStatus, ...] = (
    PeriodStatus.DRAFT, PeriodStatus.PROCESSING, PeriodStatus.PAID,
)
CONTRIBUTION_ORDER: tuple[ContributionStatus, ...] = (
    ContributionStatus.PENDING, ContributionStatus.PROCESSED, ContributionStatus.PAID,
)

# Item status that follows each period transition target.
ITEM_STATUS_FOR_PERIOD = {
    PeriodStatus.PROCESSING: (ItemStatus.DRAFT, ItemStatus.PROCESSED),
    PeriodStatus.PAID: (ItemStatus.PROCESSED, ItemStatus.PAID),
}


def _require(period_id: int, status: PeriodStatus, allowed: PeriodStatus, action: str) -> None:
    if status != allowed:
        raise InvalidPeriodState(
            f"Cannot {action} payroll period {period_id}: status is {status.value}, "
            f"expected {allowed.value}"
        )


def ensure_next_period_status(period_id: int, current: PeriodStatus, target: PeriodStatus) -> None:
    """Periods move one step at a time along PERIOD_ORDER."""
    if PERIOD_ORDER.index(target) != PERIOD_ORDER.index(current) + 1:
        raise InvalidPeriodState(
            f"Payroll period {period_id} cannot move from {current.value} to {target.value}"
        )


def ensure_can_generate(period_id: int, status: PeriodStatus) -> None:
    _require(period_id, status, PeriodStatus.DRAFT, "generate items for")


def ensure_can_process(period_id: int, status: PeriodStatus, item_count: int) -> None:
    _require(period_id, status, PeriodStatus.DRAFT, "process")
    if item_count <= 0:
        raise NoItemsToProcess(f"Payroll period {period_id} has no items to process")


def ensure_can_mark_paid(period_id: int, status: PeriodStatus) -> None:
    _require(period_id, status, PeriodStatus.PROCESSING, "mark paid")


def ensure_can_delete(period_id: int, status: PeriodStatus) -> None:
    _require(period_id, status, PeriodStatus.DRAFT, "delete")


def ensure_contribution_advance(
    contribution_id: int, current: ContributionStatus, target: ContributionStatus,
) -> None:
    """Any forward jump is valid (PENDING→PAID included); same or backward is not."""
    if CONTRIBUTION_ORDER.index(target) <= CONTRIBUTION_ORDER.index(current):
        raise InvalidStatusTransition(
            f"Contribution {contribution_id} cannot move from {current.value} to {target.value}"
        )


def ensure_contribution_editable(contribution_id: int, status: ContributionStatus) -> None:
    if status == ContributionStatus.PAID:
        raise ContributionLocked(f"Contribution {contribution_id} is PAID and cannot be edited")
