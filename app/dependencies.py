"""
Shared FastAPI dependencies: report window parsing, report service, caller identity.
"""
from datetime import date, timedelta
from typing import Optional

from fastapi import Header, HTTPException, Query

from app.config import settings
from app.schemas import Actor, TimeWindow
from app.services.report import ReportService

_report_service = None


def get_report_service() -> ReportService:
    global _report_service
    if _report_service is None:
        _report_service = ReportService()
    return _report_service


def get_window(
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
) -> TimeWindow:
    if not date_to:
        date_to = date.today()
    if not date_from:
        date_from = date_to - timedelta(days=settings.default_window_days)
    if date_from > date_to:
        raise HTTPException(status_code=422, detail="date_from must not be after date_to")
    return TimeWindow.from_dates(date_from, date_to)


def get_actor(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
) -> Actor:
    return Actor(user_id=x_user_id or "anonymous", role=x_user_role or "Staff")
