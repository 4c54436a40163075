"""Shared test fixtures.

  use_test_engine  — redirects UoW + infra layer to a temp-file SQLite DB.
  client           — FastAPI TestClient wired to the test engine.
  make_employee    — inserts an Employee row directly through the test engine.
  make_period      — creates a DRAFT period through PayrollService.
"""
from datetime import date
from decimal import Decimal

import pytest
from sqlmodel import SQLModel, create_engine, Session


@pytest.fixture
def use_test_engine(tmp_path, monkeypatch):
    """Monkeypatch infra/db engine references to an isolated temp-file SQLite DB.

    Uses a file (not :memory:) so concurrent sessions see each other's commits.
    """
    db_path = tmp_path / "test_hrpay.db"
    test_engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False},
    )

    import hrpay.models  # noqa: F401 — register all ORM mappers
    SQLModel.metadata.create_all(test_engine)

    # Redirect all infra/db references to the test engine
    monkeypatch.setattr("hrpay.infra.db.engine.engine", test_engine)
    monkeypatch.setattr("hrpay.infra.db.uow.engine", test_engine)

    yield test_engine

    SQLModel.metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture
def client(use_test_engine):
    """FastAPI TestClient backed by the isolated test engine."""
    from fastapi.testclient import TestClient
    from hrpay.api.app import create_app

    app = create_app()
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_employee(use_test_engine):
    from hrpay.models.employee import Employee

    counter = {"n": 0}

    def _make(**overrides) -> int:
        counter["n"] += 1
        fields = dict(
            employee_number=f"EMP{counter['n']:03d}",
            name=f"Employee {counter['n']}",
            salary=Decimal("1000000"),
            is_active=True,
        )
        fields.update(overrides)
        with Session(use_test_engine) as s:
            employee = Employee(**fields)
            s.add(employee)
            s.commit()
            return employee.id

    return _make


@pytest.fixture
def make_period(use_test_engine):
    from hrpay.api.schemas.payroll import PayrollPeriodCreate
    from hrpay.infra.db.uow import UnitOfWork
    from hrpay.services.payroll_service import PayrollService

    def _make(start=date(2024, 1, 1), end=date(2024, 1, 31), **kwargs) -> int:
        with UnitOfWork() as uow:
            period = PayrollService(uow).create_period(
                PayrollPeriodCreate(start_date=start, end_date=end, **kwargs)
            )
        return period.id

    return _make
