"""Process-wide logger with run and request correlation ids."""
from __future__ import annotations
import logging
import sys
import uuid
from contextvars import ContextVar
from hrpay.config import settings

_RUN_ID = uuid.uuid4().hex[:8]
_request_id: ContextVar[str] = ContextVar("hrpay_request_id", default="-")


def get_run_id() -> str:
    """Identifier of this process; stable for its lifetime."""
    return _RUN_ID


def get_request_id() -> str:
    return _request_id.get()


def set_request_id(request_id: str | None = None) -> str:
    rid = request_id or uuid.uuid4().hex[:12]
    _request_id.set(rid)
    return rid


class _CorrelationFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = _RUN_ID
        record.request_id = _request_id.get()
        return True


def _build_logger() -> logging.Logger:
    log = logging.getLogger("hrpay")
    if log.handlers:
        return log
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s [%(run_id)s/%(request_id)s] %(name)s: %(message)s"
    ))
    handler.addFilter(_CorrelationFilter())
    log.addHandler(handler)
    log.setLevel(settings.LOG_LEVEL.upper())
    return log


logger = _build_logger()
