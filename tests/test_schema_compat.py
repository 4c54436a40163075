from __future__ import annotations

from pathlib import Path

from sqlalchemy import create_engine, text

from hrpay.infra.db.schema_compat import ensure_schema_compat


def _column_names(db_path: Path, table_name: str) -> set[str]:
    engine = create_engine(f"sqlite:///{db_path}")
    with engine.connect() as conn:
        rows = conn.execute(text(f"PRAGMA table_info({table_name})")).fetchall()
    return {row[1] for row in rows}


def _index_names(db_path: Path, table_name: str) -> set[str]:
    engine = create_engine(f"sqlite:///{db_path}")
    with engine.connect() as conn:
        rows = conn.execute(text(f"PRAGMA index_list({table_name})")).fetchall()
    return {row[1] for row in rows}


def test_ensure_schema_compat_adds_period_version_for_legacy_db(tmp_path):
    db_path = tmp_path / "legacy.db"
    engine = create_engine(f"sqlite:///{db_path}")
    with engine.begin() as conn:
        conn.execute(
            text(
                """
                CREATE TABLE payrollperiod (
                    id INTEGER PRIMARY KEY,
                    name VARCHAR NOT NULL,
                    start_date DATE NOT NULL,
                    end_date DATE NOT NULL,
                    payment_date DATE,
                    currency VARCHAR NOT NULL,
                    status VARCHAR NOT NULL,
                    created_at DATETIME,
                    updated_at DATETIME
                )
                """
            )
        )
        conn.execute(text(
            "INSERT INTO payrollperiod (name, start_date, end_date, currency, status) "
            "VALUES ('Old', '2023-01-01', '2023-01-31', 'UGX', 'PAID')"
        ))

    ensure_schema_compat(engine)

    assert "version" in _column_names(db_path, "payrollperiod")
    with engine.connect() as conn:
        assert conn.execute(text("SELECT version FROM payrollperiod")).scalar_one() == 0

    # idempotent: running again should not fail and should keep schema intact
    ensure_schema_compat(engine)
    assert "version" in _column_names(db_path, "payrollperiod")


def test_ensure_schema_compat_dedupes_items_and_adds_unique_index(tmp_path):
    db_path = tmp_path / "legacy_items.db"
    engine = create_engine(f"sqlite:///{db_path}")
    with engine.begin() as conn:
        conn.execute(
            text(
                """
                CREATE TABLE payrollitem (
                    id INTEGER PRIMARY KEY,
                    period_id INTEGER NOT NULL,
                    employee_id INTEGER NOT NULL,
                    net_salary NUMERIC(14, 2) NOT NULL
                )
                """
            )
        )
        conn.execute(text(
            "INSERT INTO payrollitem (period_id, employee_id, net_salary) VALUES "
            "(1, 10, 100), (1, 10, 200), (1, 11, 300), (2, 10, 400)"
        ))

    ensure_schema_compat(engine)

    assert "uq_payrollitem_period_employee" in _index_names(db_path, "payrollitem")
    with engine.connect() as conn:
        rows = conn.execute(
            text("SELECT period_id, employee_id, net_salary FROM payrollitem ORDER BY id")
        ).fetchall()
    # Oldest row of the duplicate pair is kept.
    assert [(r[0], r[1], r[2]) for r in rows] == [(1, 10, 100), (1, 11, 300), (2, 10, 400)]

    ensure_schema_compat(engine)
    assert "uq_payrollitem_period_employee" in _index_names(db_path, "payrollitem")


def test_ensure_schema_compat_is_noop_on_fresh_schema(use_test_engine):
    ensure_schema_compat(use_test_engine)
    with use_test_engine.connect() as conn:
        rows = conn.execute(text("PRAGMA index_list(payrollitem)")).fetchall()
    # The table-level unique constraint already covers the pair; no extra index added.
    assert "uq_payrollitem_period_employee" not in {row[1] for row in rows}
