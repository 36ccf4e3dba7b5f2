"""Tutoring API - Main FastAPI Application.

Accepts student enrolments, issue reports and session summary reports from
the web forms and the Flowise chatbot, stores them in MongoDB and alerts the
operations inbox by email.
"""

import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.database import db
from app.exceptions import TutoringServiceException, validation_error_details
from app.logging_config import setup_logging
from app.routers import flowise, guardians, health, issues, students, summary_reports

setup_logging(settings.LOG_LEVEL, settings.SERVICE_NAME)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Connects to MongoDB on startup and exits the process when the database
    cannot be reached.
    """
    logger.info(
        "Starting tutoring API",
        service=settings.SERVICE_NAME,
        environment=settings.ENVIRONMENT,
        api_prefix=settings.api_prefix,
    )

    try:
        await db.connect()
    except Exception as e:
        logger.error("Failed to start service", error=str(e))
        sys.exit(1)

    yield

    logger.info("Shutting down tutoring API")
    await db.disconnect()


app = FastAPI(
    title="Tutoring API",
    description="Student enrolments, issue reports and session summary reports",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    expose_headers=["Content-Length", "X-Request-Id"],
    max_age=86400,
)

for module in (health, students, guardians, issues, summary_reports, flowise):
    app.include_router(module.router, prefix=settings.api_prefix)

metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)


def error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": status_code, "code": code, "message": message, "details": details},
    )


@app.exception_handler(TutoringServiceException)
async def tutoring_exception_handler(request: Request, exc: TutoringServiceException):
    """Render domain exceptions with their status and code."""
    logger.info(
        "Request rejected",
        path=request.url.path,
        method=request.method,
        code=exc.code,
        status_code=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("Invalid request", path=request.url.path, method=request.method)
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "VALIDATION_ERROR",
        "Invalid request",
        validation_error_details(exc.errors()),
    )


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    logger.info("Invalid data", path=request.url.path, method=request.method)
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "VALIDATION_ERROR",
        "Invalid request",
        validation_error_details(exc.errors()),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return error_response(exc.status_code, "NOT_FOUND", "Route not found")

    code = "BAD_REQUEST" if exc.status_code < 500 else "INTERNAL_ERROR"
    return error_response(exc.status_code, code, str(exc.detail))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions."""
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=True,
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", "Something went wrong"
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.SERVICE_HOST,
        port=settings.SERVICE_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
