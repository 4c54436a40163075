"""Runtime DB compatibility helpers for legacy SQLite schemas.

These helpers backfill additive schema changes for deployments that still rely
on ``SQLModel.metadata.create_all()`` instead of migrations. ``create_all``
never alters an existing table, so columns and indexes introduced after a
database file was first created have to be added here.
"""

from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)


def ensure_schema_compat(engine: Engine) -> None:
    """Apply additive compatibility upgrades for existing SQLite databases."""
    if engine.dialect.name != "sqlite":
        return

    with engine.begin() as conn:
        _ensure_period_version(conn)
        _ensure_item_uniqueness(conn)


def _ensure_period_version(conn: Connection) -> None:
    if not _table_exists(conn, "payrollperiod"):
        return

    if not _column_exists(conn, "payrollperiod", "version"):
        conn.execute(text("ALTER TABLE payrollperiod ADD COLUMN version INTEGER NOT NULL DEFAULT 0"))
        logger.info("Applied compatibility upgrade: added payrollperiod.version")


def _ensure_item_uniqueness(conn: Connection) -> None:
    """Guarantee one item per (period_id, employee_id) on files created before the constraint."""
    if not _table_exists(conn, "payrollitem"):
        return

    if _has_unique_index_on(conn, "payrollitem", ("period_id", "employee_id")):
        return

    # Keep the oldest row of any duplicate pair before the index can be built.
    removed = conn.execute(text(
        "DELETE FROM payrollitem WHERE id NOT IN ("
        "SELECT MIN(id) FROM payrollitem GROUP BY period_id, employee_id)"
    )).rowcount
    if removed:
        logger.warning("Removed %d duplicate payroll item(s) while adding uniqueness index", removed)
    conn.execute(text(
        "CREATE UNIQUE INDEX uq_payrollitem_period_employee "
        "ON payrollitem (period_id, employee_id)"
    ))
    logger.info("Applied compatibility upgrade: unique index on payrollitem(period_id, employee_id)")


def _table_exists(conn: Connection, table_name: str) -> bool:
    return (
        conn.execute(
            text(
                "SELECT 1 FROM sqlite_master "
                "WHERE type = 'table' AND name = :name LIMIT 1"
            ),
            {"name": table_name},
        ).first()
        is not None
    )


def _column_exists(conn: Connection, table_name: str, column_name: str) -> bool:
    rows = conn.execute(text(f"PRAGMA table_info({table_name})")).fetchall()
    return any(row[1] == column_name for row in rows)


def _has_unique_index_on(conn: Connection, table_name: str, columns: tuple[str, ...]) -> bool:
    for row in conn.execute(text(f"PRAGMA index_list({table_name})")).fetchall():
        index_name, is_unique = row[1], row[2]
        if not is_unique:
            continue
        cols = conn.execute(text(f"PRAGMA index_info('{index_name}')")).fetchall()
        if tuple(c[2] for c in cols) == columns:
            return True
    return False
