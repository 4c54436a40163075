"""Payroll period metadata rules (dates, naming, currency)."""
from __future__ import annotations
from datetime import date
from hrpay.domain.exceptions import ValidationError


def validate_period_dates(start_date: date, end_date: date, payment_date: date | None = None) -> None:
    if start_date > end_date:
        raise ValidationError(f"start_date {start_date} is after end_date {end_date}")
    if payment_date is not None and payment_date < end_date:
        raise ValidationError(f"payment_date {payment_date} is before end_date {end_date}")


def default_period_name(start_date: date, end_date: date) -> str:
    """``"January 2024 Payroll"``, ``"January - March 2024 Payroll"`` or
    ``"December 2024 - January 2025 Payroll"``."""
    start_month = start_date.strftime("%B")
    end_month = end_date.strftime("%B")
    if start_date.year != end_date.year:
        return f"{start_month} {start_date.year} - {end_month} {end_date.year} Payroll"
    if start_month == end_month:
        return f"{start_month} {start_date.year} Payroll"
    return f"{start_month} - {end_month} {start_date.year} Payroll"


def normalize_currency(code: str) -> str:
    value = code.strip().upper()
    if len(value) != 3 or not value.isalpha():
        raise ValidationError(f"currency must be a 3-letter code, got {code!r}")
    return value
