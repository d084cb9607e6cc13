"""
ICU performance report (JSON) for dashboards.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_report_service, get_window
from app.schemas import ReportData, TimeWindow
from app.services.report import ReportService

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/summary", response_model=ReportData)
def report_summary(
    compare: bool = Query(False, description="Include deltas against the preceding equal-length window"),
    client_id: Optional[str] = Query(None, description="Superseded requests for the same client are discarded"),
    window: TimeWindow = Depends(get_window),
    service: ReportService = Depends(get_report_service),
):
    """Key metrics, activity breakdowns and optional period comparison."""
    previous = window.previous() if compare else None
    return service.generate(window, previous_window=previous, client_id=client_id)
