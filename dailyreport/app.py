"""FastAPI application entry point for the daily report service."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dailyreport import __version__
from dailyreport.config import get_settings
from dailyreport.errors import ReportError, ReportPreconditionError


logger = logging.getLogger("dailyreport.web")
logging.basicConfig(level=logging.INFO)

settings = get_settings()

app = FastAPI(title="School Daily Report Service", debug=settings.DEBUG)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup() -> None:
    """Log when the application starts."""
    logger.info("Daily report service starting up (fonts: %s)", settings.FONT_PATH.parent)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Simple health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Custom HTTP exception responses."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        detail = exc.detail or "The requested resource was not found."
    else:
        detail = exc.detail or "An error occurred while processing the request."
    return JSONResponse({"detail": detail}, status_code=exc.status_code)


@app.exception_handler(ReportError)
async def report_error_handler(request: Request, exc: ReportError):
    """Report build failures that escaped the routes."""
    if isinstance(exc, ReportPreconditionError):
        return JSONResponse({"detail": str(exc)}, status_code=status.HTTP_400_BAD_REQUEST)
    logger.exception("Report generation failed: %s", exc)
    return JSONResponse(
        {"detail": "The report could not be generated. Please try again later."},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all handler for unhandled errors."""
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        {"detail": "Internal server error. Please try again later."},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


# Import routes after the app is configured to avoid circular imports.
from dailyreport.routes import reports as report_routes  # noqa: E402  pylint: disable=wrong-import-position

app.include_router(report_routes.router, prefix="/reports")
