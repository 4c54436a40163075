"""FastAPI application factory."""
from __future__ import annotations
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from hrpay import __version__
from hrpay.domain.exceptions import HRPayError, NotFoundError, ConflictError, ValidationError
from hrpay.logging import logger, set_request_id


def _error_body(exc: HRPayError) -> dict:
    return {"detail": exc.message, "error": exc.code, "retryable": exc.retryable}


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from hrpay.infra.db import engine as engine_module  # triggers pragmas + mapper registration
        from hrpay.db import init_db
        init_db(engine_module.engine)
        logger.info("hrpay API %s started", __version__)
        yield

    app = FastAPI(
        title="HR Payroll Engine API",
        version=__version__,
        lifespan=lifespan,
    )

    # Import routers inside create_app() to avoid circular imports at module load time
    from hrpay.api.routers.employees import router as employees_router
    from hrpay.api.routers.payroll import router as payroll_router
    from hrpay.api.routers.nssf import router as nssf_router

    app.include_router(employees_router)
    app.include_router(payroll_router)
    app.include_router(nssf_router)

    @app.middleware("http")
    async def _request_id(request: Request, call_next):
        rid = set_request_id(request.headers.get("X-Request-ID"))
        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response

    @app.exception_handler(NotFoundError)
    def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content=_error_body(exc))

    @app.exception_handler(ConflictError)
    def _conflict(request: Request, exc: ConflictError) -> JSONResponse:
        if exc.retryable:
            logger.warning("Retryable conflict on %s: %s", request.url.path, exc.message)
        return JSONResponse(status_code=409, content=_error_body(exc))

    @app.exception_handler(ValidationError)
    def _invalid(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content=_error_body(exc))

    @app.get("/health", tags=["ops"])
    def health() -> dict:
        return {"status": "ok", "version": __version__}

    return app
