"""Service-level tests for the payroll period lifecycle."""
from datetime import date
from decimal import Decimal

import pytest
from sqlmodel import Session, select

from hrpay.api.schemas.payroll import PayrollPeriodCreate, PayrollPeriodUpdate, PayrollItemFilters
from hrpay.domain.exceptions import (
    ConcurrentModification, ConflictError, DuplicateItem, InvalidPeriodState,
    NoItemsToProcess, PeriodNotFound, ValidationError,
)
from hrpay.domain.statuses import PeriodStatus, ItemStatus, PaymentMethod
from hrpay.domain.taxation import NoTaxPolicy
from hrpay.infra.db.repositories.payroll_repository import PayrollRepository
from hrpay.infra.db.uow import UnitOfWork
from hrpay.models.employee import Employee
from hrpay.models.nssf import NssfContribution
from hrpay.models.payroll import PayrollItem, PayrollPeriod
from hrpay.services.payroll_service import PayrollService


def _items(engine, period_id: int) -> list[PayrollItem]:
    with Session(engine) as s:
        return list(s.exec(
            select(PayrollItem).where(PayrollItem.period_id == period_id).order_by(PayrollItem.id)
        ).all())


def _period(engine, period_id: int) -> PayrollPeriod | None:
    with Session(engine) as s:
        return s.get(PayrollPeriod, period_id)


def test_create_period_defaults(use_test_engine):
    with UnitOfWork() as uow:
        period = PayrollService(uow).create_period(
            PayrollPeriodCreate(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31), currency="ugx")
        )
    assert period.name == "January 2024 Payroll"
    assert period.status == PeriodStatus.DRAFT
    assert period.currency == "UGX"
    assert period.item_count == 0
    assert period.version == 0


def test_full_lifecycle_draft_to_paid(use_test_engine, make_employee, make_period):
    for _ in range(3):
        make_employee()
    period_id = make_period(name="Jan 2024")

    with UnitOfWork() as uow:
        gen = PayrollService(uow).generate_items(period_id)
    assert gen.created_count == 3
    assert gen.item_count == 3
    assert _period(use_test_engine, period_id).status == PeriodStatus.DRAFT

    with UnitOfWork() as uow:
        processed = PayrollService(uow).process(period_id)
    assert processed.status == PeriodStatus.PROCESSING
    assert processed.processed_count == 3
    assert {i.status for i in _items(use_test_engine, period_id)} == {ItemStatus.PROCESSED}

    with UnitOfWork() as uow:
        paid = PayrollService(uow).mark_paid(period_id)
    assert paid.status == PeriodStatus.PAID
    assert paid.paid_count == 3
    items = _items(use_test_engine, period_id)
    assert {i.status for i in items} == {ItemStatus.PAID}
    assert all(i.paid_at is not None for i in items)

    period = _period(use_test_engine, period_id)
    assert period.status == PeriodStatus.PAID
    # generate claim + two transitions
    assert period.version == 3


def test_generate_twice_creates_nothing_new(use_test_engine, make_employee, make_period):
    make_employee()
    make_employee()
    period_id = make_period()

    with UnitOfWork() as uow:
        first = PayrollService(uow).generate_items(period_id)
    with UnitOfWork() as uow:
        second = PayrollService(uow).generate_items(period_id)

    assert first.created_count == 2
    assert second.created_count == 0
    assert second.skipped_count == 2
    assert second.item_count == 2
    assert len(_items(use_test_engine, period_id)) == 2


def test_generate_picks_up_newly_hired_employee(use_test_engine, make_employee, make_period):
    make_employee()
    period_id = make_period()
    with UnitOfWork() as uow:
        PayrollService(uow).generate_items(period_id)

    make_employee()
    with UnitOfWork() as uow:
        again = PayrollService(uow).generate_items(period_id)
    assert again.created_count == 1
    assert again.item_count == 2


def test_generate_skips_inactive_employees(use_test_engine, make_employee, make_period):
    make_employee()
    make_employee(is_active=False)
    period_id = make_period()
    with UnitOfWork() as uow:
        gen = PayrollService(uow).generate_items(period_id)
    assert gen.created_count == 1
    assert gen.eligible_count == 1


def test_generate_with_no_active_employees_is_flagged_empty(use_test_engine, make_period):
    period_id = make_period()
    with UnitOfWork() as uow:
        gen = PayrollService(uow).generate_items(period_id)
    assert gen.is_empty
    assert gen.created_count == 0


def test_generate_rejected_outside_draft(use_test_engine, make_employee, make_period):
    make_employee()
    period_id = make_period()
    with UnitOfWork() as uow:
        PayrollService(uow).generate_items(period_id)
    with UnitOfWork() as uow:
        PayrollService(uow).process(period_id)

    with pytest.raises(InvalidPeriodState):
        with UnitOfWork() as uow:
            PayrollService(uow).generate_items(period_id)


def test_generate_unknown_period(use_test_engine):
    with pytest.raises(PeriodNotFound):
        with UnitOfWork() as uow:
            PayrollService(uow).generate_items(999)


def test_items_snapshot_employee_at_generation(use_test_engine, make_employee, make_period):
    employee_id = make_employee(
        salary=Decimal("800000"),
        payment_method=PaymentMethod.MOBILE_MONEY,
        mobile_money_provider="MTN",
        mobile_money_number="0770000000",
        bank_name="Stanbic",
        bank_account="9030000",
    )
    period_id = make_period()
    with UnitOfWork() as uow:
        PayrollService(uow, tax_policy=NoTaxPolicy()).generate_items(period_id)

    # Later edits to the employee must not reach the item.
    with Session(use_test_engine) as s:
        employee = s.get(Employee, employee_id)
        employee.salary = Decimal("2000000")
        employee.mobile_money_number = "0780000000"
        s.add(employee)
        s.commit()

    (item,) = _items(use_test_engine, period_id)
    assert item.basic_salary == Decimal("800000.00")
    assert item.gross_salary == Decimal("800000.00")
    assert item.net_salary == Decimal("800000.00")
    assert item.tax_amount == Decimal("0")
    assert item.mobile_money_provider == "MTN"
    assert item.mobile_money_number == "0770000000"
    # Only the fields for the chosen payment method are copied.
    assert item.bank_name is None
    assert item.bank_account is None


def test_items_use_tax_policy(use_test_engine, make_employee, make_period):
    make_employee(salary=Decimal("5000000"))
    period_id = make_period()
    with UnitOfWork() as uow:
        PayrollService(uow).generate_items(period_id)
        period = PayrollService(uow).get_period(period_id)

    assert period.total_gross == Decimal("5000000.00")
    assert period.total_tax == Decimal("1402000.00")
    assert period.total_net == Decimal("3598000.00")


def test_process_without_items_rejected(use_test_engine, make_period):
    period_id = make_period()
    with pytest.raises(NoItemsToProcess):
        with UnitOfWork() as uow:
            PayrollService(uow).process(period_id)
    assert _period(use_test_engine, period_id).status == PeriodStatus.DRAFT


def test_mark_paid_requires_processing(use_test_engine, make_employee, make_period):
    make_employee()
    period_id = make_period()
    with UnitOfWork() as uow:
        PayrollService(uow).generate_items(period_id)

    with pytest.raises(InvalidPeriodState):
        with UnitOfWork() as uow:
            PayrollService(uow).mark_paid(period_id)
    assert {i.status for i in _items(use_test_engine, period_id)} == {ItemStatus.DRAFT}


def test_delete_processing_period_rejected(use_test_engine, make_employee, make_period):
    make_employee()
    make_employee()
    period_id = make_period()
    with UnitOfWork() as uow:
        PayrollService(uow).generate_items(period_id)
    with UnitOfWork() as uow:
        PayrollService(uow).process(period_id)

    with pytest.raises(InvalidPeriodState):
        with UnitOfWork() as uow:
            PayrollService(uow).delete_period(period_id)

    assert _period(use_test_engine, period_id).status == PeriodStatus.PROCESSING
    items = _items(use_test_engine, period_id)
    assert len(items) == 2
    assert {i.status for i in items} == {ItemStatus.PROCESSED}


def test_delete_draft_period_removes_items(use_test_engine, make_employee, make_period):
    make_employee()
    period_id = make_period()
    with UnitOfWork() as uow:
        PayrollService(uow).generate_items(period_id)
    with UnitOfWork() as uow:
        PayrollService(uow).delete_period(period_id)

    assert _period(use_test_engine, period_id) is None
    assert _items(use_test_engine, period_id) == []


def test_delete_period_with_contributions_rejected(use_test_engine, make_employee, make_period):
    employee_id = make_employee()
    period_id = make_period()
    with Session(use_test_engine) as s:
        s.add(NssfContribution(
            employee_id=employee_id, payroll_period_id=period_id, nssf_number="N1",
            gross_salary=Decimal("1000000"), employee_contribution=Decimal("50000"),
            employer_contribution=Decimal("100000"), total_contribution=Decimal("150000"),
        ))
        s.commit()

    with pytest.raises(ConflictError):
        with UnitOfWork() as uow:
            PayrollService(uow).delete_period(period_id)
    assert _period(use_test_engine, period_id) is not None


def test_update_period_metadata_in_any_status(use_test_engine, make_employee, make_period):
    make_employee()
    period_id = make_period()
    with UnitOfWork() as uow:
        PayrollService(uow).generate_items(period_id)
    with UnitOfWork() as uow:
        PayrollService(uow).process(period_id)

    with UnitOfWork() as uow:
        updated = PayrollService(uow).update_period(
            period_id, PayrollPeriodUpdate(name="January payroll (final)", payment_date=date(2024, 2, 5)),
        )
    assert updated.name == "January payroll (final)"
    assert updated.payment_date == date(2024, 2, 5)
    assert updated.status == PeriodStatus.PROCESSING
    assert updated.item_count == 1


def test_update_period_rejects_inverted_dates(use_test_engine, make_period):
    period_id = make_period()
    with pytest.raises(ValidationError):
        with UnitOfWork() as uow:
            PayrollService(uow).update_period(period_id, PayrollPeriodUpdate(end_date=date(2023, 12, 1)))


def test_list_items_filters(use_test_engine, make_employee, make_period):
    make_employee(name="Alice Namuli", payment_method=PaymentMethod.BANK_TRANSFER)
    make_employee(name="Brian Okello", payment_method=PaymentMethod.MOBILE_MONEY)
    make_employee(name="Carol Achieng", payment_method=PaymentMethod.CASH)
    period_id = make_period()
    with UnitOfWork() as uow:
        PayrollService(uow).generate_items(period_id)

    with UnitOfWork() as uow:
        svc = PayrollService(uow)
        everyone = svc.list_items(period_id)
        by_name = svc.list_items(period_id, PayrollItemFilters(search="okello"))
        by_method = svc.list_items(period_id, PayrollItemFilters(payment_method=PaymentMethod.CASH))
        by_status = svc.list_items(period_id, PayrollItemFilters(status=ItemStatus.PAID))

    assert everyone.total == 3
    assert [i.employee_name for i in everyone.items] == ["Alice Namuli", "Brian Okello", "Carol Achieng"]
    assert [i.employee_name for i in by_name.items] == ["Brian Okello"]
    assert [i.employee_name for i in by_method.items] == ["Carol Achieng"]
    assert by_status.total == 0


def test_insert_duplicate_item_raises(use_test_engine, make_employee):
    employee_id = make_employee()
    with UnitOfWork() as uow:
        repo = PayrollRepository(uow.session)
        period = repo.create_period(
            name="Dup", start_date=date(2024, 1, 1), end_date=date(2024, 1, 31),
        )

        def _item():
            return PayrollItem(
                period_id=period.id, employee_id=employee_id,
                basic_salary=Decimal("1"), gross_salary=Decimal("1"), net_salary=Decimal("1"),
                payment_method=PaymentMethod.CASH,
            )

        repo.insert_item(_item())
        with pytest.raises(DuplicateItem):
            repo.insert_item(_item())
        # The savepoint rollback leaves the outer transaction usable.
        assert repo.count_items(period.id) == 1
        uow.commit()


def test_stale_process_loses_to_concurrent_transition(use_test_engine, make_employee, make_period, monkeypatch):
    make_employee()
    period_id = make_period()
    with UnitOfWork() as uow:
        PayrollService(uow).generate_items(period_id)

    original = PayrollRepository.count_items
    fired = {"done": False}

    def count_then_race(self, pid):
        result = original(self, pid)
        if not fired["done"]:
            fired["done"] = True
            # Another writer processes the period between our read and our write.
            with UnitOfWork() as other:
                assert PayrollRepository(other.session).compare_and_set_status(
                    pid, expected=PeriodStatus.DRAFT, new=PeriodStatus.PROCESSING,
                )
        return result

    monkeypatch.setattr(PayrollRepository, "count_items", count_then_race)

    with pytest.raises(ConcurrentModification) as exc_info:
        with UnitOfWork() as uow:
            PayrollService(uow).process(period_id)
    assert exc_info.value.retryable

    # The loser never reached the item cascade.
    assert {i.status for i in _items(use_test_engine, period_id)} == {ItemStatus.DRAFT}
    assert _period(use_test_engine, period_id).status == PeriodStatus.PROCESSING


def test_stats(use_test_engine, make_employee, make_period):
    make_employee(salary=Decimal("200000"))
    make_employee(salary=Decimal("200000"), is_active=False)
    paid_id = make_period()
    draft_id = make_period(start=date(2024, 2, 1), end=date(2024, 2, 29))
    with UnitOfWork() as uow:
        svc = PayrollService(uow)
        svc.generate_items(paid_id)
        svc.process(paid_id)
        svc.mark_paid(paid_id)
        svc.generate_items(draft_id)

    with UnitOfWork() as uow:
        stats = PayrollService(uow).get_stats()
    assert stats.total_periods == 2
    assert stats.periods_by_status[PeriodStatus.PAID] == 1
    assert stats.periods_by_status[PeriodStatus.DRAFT] == 1
    assert stats.periods_by_status[PeriodStatus.PROCESSING] == 0
    assert stats.active_employees == 1
    # 200,000 is below the PAYE threshold, so net == gross.
    assert stats.total_paid_net == Decimal("200000.00")
    assert stats.total_pending_net == Decimal("200000.00")


def test_generate_counts_lost_insert_race_as_skipped(use_test_engine, make_employee, make_period, monkeypatch):
    make_employee()
    make_employee()
    period_id = make_period()
    with UnitOfWork() as uow:
        PayrollService(uow).generate_items(period_id)

    # Simulate a concurrent generator that inserted the items after our read.
    monkeypatch.setattr(PayrollRepository, "employee_ids_with_items", lambda self, pid: set())

    with UnitOfWork() as uow:
        again = PayrollService(uow).generate_items(period_id)
    assert again.created_count == 0
    assert again.skipped_count == 2
    assert again.item_count == 2
    assert len(_items(use_test_engine, period_id)) == 2
