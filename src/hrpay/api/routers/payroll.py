"""Payroll period lifecycle endpoints."""
from typing import Annotated
from fastapi import APIRouter, Depends, Query, Response
from hrpay.api.deps import get_uow
from hrpay.api.schemas.payroll import (
    PayrollPeriodCreate, PayrollPeriodUpdate, PayrollPeriodRead, PayrollPeriodList,
    PayrollItemList, PayrollItemFilters,
    GenerationResponse, ProcessResponse, MarkPaidResponse, PayrollStats,
)
from hrpay.domain.statuses import PeriodStatus
from hrpay.infra.db.uow import UnitOfWork
from hrpay.services.payroll_service import PayrollService

router = APIRouter(tags=["payroll"])


@router.post("/payroll-periods", response_model=PayrollPeriodRead, status_code=201)
def create_period(
    payload: PayrollPeriodCreate, uow: UnitOfWork = Depends(get_uow),
) -> PayrollPeriodRead:
    return PayrollService(uow).create_period(payload)


@router.get("/payroll-periods", response_model=PayrollPeriodList)
def list_periods(
    status: PeriodStatus | None = None,
    limit: int = 100,
    offset: int = 0,
    uow: UnitOfWork = Depends(get_uow),
) -> PayrollPeriodList:
    return PayrollService(uow).list_periods(status=status, limit=limit, offset=offset)


@router.get("/payroll-periods/{period_id}", response_model=PayrollPeriodRead)
def get_period(period_id: int, uow: UnitOfWork = Depends(get_uow)) -> PayrollPeriodRead:
    return PayrollService(uow).get_period(period_id)


@router.patch("/payroll-periods/{period_id}", response_model=PayrollPeriodRead)
def update_period(
    period_id: int, payload: PayrollPeriodUpdate, uow: UnitOfWork = Depends(get_uow),
) -> PayrollPeriodRead:
    return PayrollService(uow).update_period(period_id, payload)


@router.delete("/payroll-periods/{period_id}", status_code=204)
def delete_period(period_id: int, uow: UnitOfWork = Depends(get_uow)) -> Response:
    PayrollService(uow).delete_period(period_id)
    return Response(status_code=204)


@router.post("/payroll-periods/{period_id}/generate-items", response_model=GenerationResponse)
def generate_items(period_id: int, uow: UnitOfWork = Depends(get_uow)) -> GenerationResponse:
    return PayrollService(uow).generate_items(period_id)


@router.post("/payroll-periods/{period_id}/process", response_model=ProcessResponse)
def process_payroll(period_id: int, uow: UnitOfWork = Depends(get_uow)) -> ProcessResponse:
    return PayrollService(uow).process(period_id)


@router.post("/payroll-periods/{period_id}/mark-paid", response_model=MarkPaidResponse)
def mark_paid(period_id: int, uow: UnitOfWork = Depends(get_uow)) -> MarkPaidResponse:
    return PayrollService(uow).mark_paid(period_id)


@router.get("/payroll-periods/{period_id}/items", response_model=PayrollItemList)
def list_items(
    period_id: int,
    filters: Annotated[PayrollItemFilters, Query()],
    uow: UnitOfWork = Depends(get_uow),
) -> PayrollItemList:
    return PayrollService(uow).list_items(period_id, filters)


@router.get("/payroll/stats", response_model=PayrollStats)
def payroll_stats(uow: UnitOfWork = Depends(get_uow)) -> PayrollStats:
    return PayrollService(uow).get_stats()
