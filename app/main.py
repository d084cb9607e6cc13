"""
ICU Operations Reports API
Backend: FastAPI for KPI aggregation, period comparison and report exports (PDF/CSV/Excel).
"""
import logging
import sys

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.exceptions import EventSourceError, FetchCancelledError, StaleReportError
from app.routers import analytics, etl, exports, reports

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger("icu_reports")

app = FastAPI(
    title=settings.app_title,
    version=settings.app_version,
    description="ICU metrics, activity breakdowns, period comparison and report exports.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(reports.router)
app.include_router(analytics.router)
app.include_router(exports.router)
app.include_router(etl.router)


@app.exception_handler(EventSourceError)
async def event_source_error_handler(request: Request, exc: EventSourceError):
    logger.warning("Report aborted on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": "Failed to load report data", "source": exc.source})


@app.exception_handler(StaleReportError)
async def stale_report_handler(request: Request, exc: StaleReportError):
    return JSONResponse(status_code=409, content={"detail": str(exc), "latest": exc.latest})


@app.exception_handler(FetchCancelledError)
async def fetch_cancelled_handler(request: Request, exc: FetchCancelledError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.get("/")
def root():
    return {
        "service": settings.app_title,
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health")
def health():
    return {"status": "ok"}
