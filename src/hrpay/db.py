"""Database engine singleton and bootstrap helpers."""
from __future__ import annotations
from pathlib import Path
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine
from hrpay.config import settings


def _connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(settings.db_url, echo=False, connect_args=_connect_args(settings.db_url))


def init_db(target: Engine | None = None) -> None:
    """Create all tables and apply additive compatibility upgrades."""
    import hrpay.models  # noqa: F401
    from hrpay.infra.db.schema_compat import ensure_schema_compat

    target = target if target is not None else engine
    database = target.url.database
    if target.dialect.name == "sqlite" and database and database != ":memory:":
        Path(database).parent.mkdir(parents=True, exist_ok=True)
    SQLModel.metadata.create_all(target)
    ensure_schema_compat(target)
