"""Re-export the singleton engine from hrpay.db and register SQLite pragmas."""
from sqlalchemy import event
from hrpay.db import engine          # singleton; created once at hrpay.db import
import hrpay.models  # noqa: F401   # registers all ORM table mappers


def _set_sqlite_pragmas(dbapi_conn, _):
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA journal_mode=WAL")
    cur.execute("PRAGMA synchronous=NORMAL")
    cur.close()


if engine.dialect.name == "sqlite":
    event.listen(engine, "connect", _set_sqlite_pragmas)

__all__ = ["engine"]
