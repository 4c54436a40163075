"""Typed HTTP client for the payroll engine API.

Only imports from ``hrpay.api.schemas`` and ``hrpay.config``; never ORM, never
DB. The dashboard and scripts use it instead of talking to the database
directly. The base URL defaults to ``settings.API_BASE_URL``.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

import httpx

from hrpay.config import settings
from hrpay.api.schemas.employees import EmployeeCreate, EmployeeRead, EmployeeList
from hrpay.api.schemas.payroll import (
    PayrollPeriodCreate, PayrollPeriodUpdate, PayrollPeriodRead, PayrollPeriodList,
    PayrollItemList, GenerationResponse, ProcessResponse, MarkPaidResponse, PayrollStats,
)
from hrpay.api.schemas.nssf import (
    NssfContributionCreate, NssfContributionRead, NssfContributionList,
    NssfPeriodSummary, ContributionQuote,
)


class APIError(Exception):
    """Raised when the backend returns a 4xx/5xx response."""

    def __init__(self, status_code: int, detail: str, error: str | None = None,
                 retryable: bool = False) -> None:
        self.status_code = status_code
        self.detail = detail
        self.error = error
        self.retryable = retryable
        super().__init__(f"[{status_code}] {error or 'error'}: {detail}")


class HRPayClient:
    """One method per backend endpoint.  All return pure Pydantic DTOs."""

    def __init__(self, base_url: str | None = None, http: httpx.Client | None = None) -> None:
        self._client = http or httpx.Client(base_url=base_url or settings.API_BASE_URL, timeout=30.0)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HRPayClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _raise_for_status(self, resp: httpx.Response) -> None:
        if resp.is_success:
            return
        error = None
        retryable = False
        try:
            body = resp.json()
            detail = body.get("detail", resp.text)
            error = body.get("error")
            retryable = bool(body.get("retryable", False))
        except ValueError:
            detail = resp.text
        raise APIError(resp.status_code, str(detail), error=error, retryable=retryable)

    @staticmethod
    def _params(**kwargs: Any) -> dict[str, Any]:
        return {k: v for k, v in kwargs.items() if v is not None}

    # ------------------------------------------------------------------
    # Employees
    # ------------------------------------------------------------------

    def list_employees(self, is_active: bool | None = None, search: str | None = None) -> EmployeeList:
        resp = self._client.get("/employees", params=self._params(is_active=is_active, search=search))
        self._raise_for_status(resp)
        return EmployeeList.model_validate(resp.json())

    def create_employee(self, payload: EmployeeCreate) -> EmployeeRead:
        resp = self._client.post("/employees", json=payload.model_dump(mode="json"))
        self._raise_for_status(resp)
        return EmployeeRead.model_validate(resp.json())

    # ------------------------------------------------------------------
    # Payroll periods
    # ------------------------------------------------------------------

    def create_period(
        self, start_date: date, end_date: date, name: str | None = None,
        payment_date: date | None = None, currency: str | None = None,
    ) -> PayrollPeriodRead:
        payload = PayrollPeriodCreate(
            name=name, start_date=start_date, end_date=end_date,
            payment_date=payment_date, currency=currency,
        )
        resp = self._client.post(
            "/payroll-periods", json=payload.model_dump(mode="json", exclude_none=True),
        )
        self._raise_for_status(resp)
        return PayrollPeriodRead.model_validate(resp.json())

    def list_periods(self, status: str | None = None) -> PayrollPeriodList:
        resp = self._client.get("/payroll-periods", params=self._params(status=status))
        self._raise_for_status(resp)
        return PayrollPeriodList.model_validate(resp.json())

    def get_period(self, period_id: int) -> PayrollPeriodRead:
        resp = self._client.get(f"/payroll-periods/{period_id}")
        self._raise_for_status(resp)
        return PayrollPeriodRead.model_validate(resp.json())

    def update_period(self, period_id: int, payload: PayrollPeriodUpdate) -> PayrollPeriodRead:
        resp = self._client.patch(
            f"/payroll-periods/{period_id}", json=payload.model_dump(mode="json", exclude_unset=True),
        )
        self._raise_for_status(resp)
        return PayrollPeriodRead.model_validate(resp.json())

    def delete_period(self, period_id: int) -> None:
        resp = self._client.delete(f"/payroll-periods/{period_id}")
        self._raise_for_status(resp)

    def generate_items(self, period_id: int) -> GenerationResponse:
        resp = self._client.post(f"/payroll-periods/{period_id}/generate-items")
        self._raise_for_status(resp)
        return GenerationResponse.model_validate(resp.json())

    def process_payroll(self, period_id: int) -> ProcessResponse:
        resp = self._client.post(f"/payroll-periods/{period_id}/process")
        self._raise_for_status(resp)
        return ProcessResponse.model_validate(resp.json())

    def mark_paid(self, period_id: int) -> MarkPaidResponse:
        resp = self._client.post(f"/payroll-periods/{period_id}/mark-paid")
        self._raise_for_status(resp)
        return MarkPaidResponse.model_validate(resp.json())

    def list_items(
        self, period_id: int, search: str | None = None, status: str | None = None,
        payment_method: str | None = None,
    ) -> PayrollItemList:
        resp = self._client.get(
            f"/payroll-periods/{period_id}/items",
            params=self._params(search=search, status=status, payment_method=payment_method),
        )
        self._raise_for_status(resp)
        return PayrollItemList.model_validate(resp.json())

    def payroll_stats(self) -> PayrollStats:
        resp = self._client.get("/payroll/stats")
        self._raise_for_status(resp)
        return PayrollStats.model_validate(resp.json())

    # ------------------------------------------------------------------
    # NSSF
    # ------------------------------------------------------------------

    def create_contribution(
        self, employee_id: int, period_id: int, nssf_number: str | None = None,
    ) -> NssfContributionRead:
        payload = NssfContributionCreate(
            employee_id=employee_id, payroll_period_id=period_id, nssf_number=nssf_number,
        )
        resp = self._client.post(
            "/nssf-contributions", json=payload.model_dump(mode="json", exclude_none=True),
        )
        self._raise_for_status(resp)
        return NssfContributionRead.model_validate(resp.json())

    def list_contributions(self, period_id: int | None = None) -> NssfContributionList:
        resp = self._client.get("/nssf-contributions", params=self._params(period_id=period_id))
        self._raise_for_status(resp)
        return NssfContributionList.model_validate(resp.json())

    def update_contribution_status(self, contribution_id: int, status: str) -> NssfContributionRead:
        resp = self._client.post(f"/nssf-contributions/{contribution_id}/status", json={"status": status})
        self._raise_for_status(resp)
        return NssfContributionRead.model_validate(resp.json())

    def delete_contribution(self, contribution_id: int) -> None:
        resp = self._client.delete(f"/nssf-contributions/{contribution_id}")
        self._raise_for_status(resp)

    def nssf_summary(self, period_id: int) -> NssfPeriodSummary:
        resp = self._client.get("/nssf-contributions/summary", params={"period_id": period_id})
        self._raise_for_status(resp)
        return NssfPeriodSummary.model_validate(resp.json())

    def quote_contribution(self, gross_salary: Decimal | int | str) -> ContributionQuote:
        resp = self._client.get("/nssf-contributions/quote", params={"gross_salary": str(gross_salary)})
        self._raise_for_status(resp)
        return ContributionQuote.model_validate(resp.json())

    # ------------------------------------------------------------------
    # Health
    # ------------------------------------------------------------------

    def health(self) -> dict:
        resp = self._client.get("/health")
        self._raise_for_status(resp)
        return resp.json()
