"""NSSF statutory contribution endpoints."""
from decimal import Decimal
from fastapi import APIRouter, Depends, Response
from hrpay.api.deps import get_uow
from hrpay.api.schemas.nssf import (
    NssfContributionCreate, NssfContributionUpdate, NssfStatusUpdate,
    NssfContributionRead, NssfContributionList, NssfPeriodSummary, ContributionQuote,
)
from hrpay.domain.statuses import ContributionStatus
from hrpay.infra.db.uow import UnitOfWork
from hrpay.services.nssf_service import NssfService, quote

router = APIRouter(prefix="/nssf-contributions", tags=["nssf"])


@router.get("/quote", response_model=ContributionQuote)
def quote_contribution(gross_salary: Decimal) -> ContributionQuote:
    return quote(gross_salary)


@router.get("/summary", response_model=NssfPeriodSummary)
def period_summary(period_id: int, uow: UnitOfWork = Depends(get_uow)) -> NssfPeriodSummary:
    return NssfService(uow).period_summary(period_id)


@router.post("", response_model=NssfContributionRead, status_code=201)
def create_contribution(
    payload: NssfContributionCreate, uow: UnitOfWork = Depends(get_uow),
) -> NssfContributionRead:
    return NssfService(uow).create(payload)


@router.get("", response_model=NssfContributionList)
def list_contributions(
    period_id: int | None = None,
    employee_id: int | None = None,
    status: ContributionStatus | None = None,
    limit: int = 100,
    offset: int = 0,
    uow: UnitOfWork = Depends(get_uow),
) -> NssfContributionList:
    return NssfService(uow).list_contributions(
        period_id=period_id, employee_id=employee_id, status=status, limit=limit, offset=offset,
    )


@router.get("/{contribution_id}", response_model=NssfContributionRead)
def get_contribution(contribution_id: int, uow: UnitOfWork = Depends(get_uow)) -> NssfContributionRead:
    return NssfService(uow).get(contribution_id)


@router.patch("/{contribution_id}", response_model=NssfContributionRead)
def update_contribution(
    contribution_id: int, payload: NssfContributionUpdate, uow: UnitOfWork = Depends(get_uow),
) -> NssfContributionRead:
    return NssfService(uow).update(contribution_id, payload)


@router.post("/{contribution_id}/status", response_model=NssfContributionRead)
def update_status(
    contribution_id: int, payload: NssfStatusUpdate, uow: UnitOfWork = Depends(get_uow),
) -> NssfContributionRead:
    return NssfService(uow).advance_status(contribution_id, payload.status)


@router.delete("/{contribution_id}", status_code=204)
def delete_contribution(contribution_id: int, uow: UnitOfWork = Depends(get_uow)) -> Response:
    NssfService(uow).delete(contribution_id)
    return Response(status_code=204)
