"""FastAPI application factory."""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from payslip_engine import __version__
from payslip_engine.api.routes import (
    employees_router,
    health_router,
    ledger_router,
    payroll_router,
    periods_router,
)
from payslip_engine.config import configure_logging
from payslip_engine.database import dispose_db, init_db
from payslip_engine.errors import (
    AlreadyProcessedError,
    BusinessRuleViolationError,
    ConflictError,
    InvalidInputError,
    InvalidRangeError,
    NotFoundError,
    PayslipError,
    PeriodFrozenError,
)

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

ERROR_STATUS: dict[type[PayslipError], int] = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    InvalidRangeError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    BusinessRuleViolationError: 422,
    ConflictError: status.HTTP_409_CONFLICT,
    PeriodFrozenError: status.HTTP_409_CONFLICT,
    AlreadyProcessedError: status.HTTP_409_CONFLICT,
}


def status_for_error(exc: PayslipError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in ERROR_STATUS:
            return ERROR_STATUS[error_type]
    return status.HTTP_400_BAD_REQUEST


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    configure_logging()
    init_db()
    yield
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Payslip Engine API",
        description="Attendance-based payroll and payslips",
        version=__version__,
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        """Assign a request id and log one access line per request."""
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        start = time.perf_counter()

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "RequestID: %s, Method: %s, Path: %s, Status: %d, Duration: %.1fms",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - start) * 1000,
        )
        return response

    # Exception handlers
    @app.exception_handler(PayslipError)
    async def payslip_error_handler(request: Request, exc: PayslipError) -> JSONResponse:
        """Map domain errors to HTTP responses."""
        return JSONResponse(
            status_code=status_for_error(exc),
            content={"detail": exc.message, "code": exc.code},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(periods_router, prefix="/api/v1")
    app.include_router(payroll_router, prefix="/api/v1")
    app.include_router(ledger_router, prefix="/api/v1")
    app.include_router(employees_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
