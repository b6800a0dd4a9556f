"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from config.settings import settings
from src.bank_accounts.api.router import router as bank_account_router
from src.bank_common.database import engine
from src.bank_common.errors import (
    AppError,
    ConflictError,
    PersistenceError,
    RequestValidationFailedError,
)
from src.bank_common.request_log import RequestLogMiddleware
from src.bank_common.response import error_response

VERSION = "0.1.0"
API_PREFIX = "/api/v1"
# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB connection. Shutdown: dispose the pool."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info(
        "%s running (env=%s, port=%d)", settings.APP_NAME, settings.ENVIRONMENT, settings.PORT
    )
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Bank account management API",
    version=VERSION,
    lifespan=lifespan,
    docs_url=f"{API_PREFIX}/docs",
    openapi_url=f"{API_PREFIX}/openapi.json",
)


app.add_middleware(RequestLogMiddleware)


def _render(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, request)
    return JSONResponse(status_code=exc.http_status, content=resp.model_dump())


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _render(request, exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    detail = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return _render(request, RequestValidationFailedError(detail))


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    # CHECK, FK and NOT NULL violations are not client conflicts.
    if getattr(exc.orig, "sqlstate", None) == UNIQUE_VIOLATION:
        logger.warning("Unique constraint violation: %s", exc.orig)
        return _render(request, ConflictError())
    logger.error("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return _render(request, PersistenceError())


@app.exception_handler(SQLAlchemyError)
async def persistence_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return _render(request, PersistenceError())


app.include_router(bank_account_router, prefix=API_PREFIX)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": VERSION}
