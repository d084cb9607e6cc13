"""
Analytics API: metrics, activity breakdowns and period comparison for a window.
"""
from fastapi import APIRouter, Depends

from app.dependencies import get_report_service, get_window
from app.schemas import ComparisonData, ReportActivities, ReportMetrics, TimeWindow
from app.services.activities import compute_activities
from app.services.comparison import compare_periods
from app.services.metrics import compute_metrics
from app.services.report import ReportService

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("/metrics", response_model=ReportMetrics)
def get_metrics(
    window: TimeWindow = Depends(get_window),
    service: ReportService = Depends(get_report_service),
):
    """Patients, critical cases, medications, lab tests, stay, occupancy, readmission and mortality."""
    bundle = service.source.fetch(window)
    return compute_metrics(bundle, total_beds=service.total_beds, deceased_condition=service.deceased_condition)


@router.get("/activities", response_model=ReportActivities)
def get_activities(
    window: TimeWindow = Depends(get_window),
    service: ReportService = Depends(get_report_service),
):
    """Status distribution, today's activity, procedure categories and common diagnoses."""
    return compute_activities(service.source.fetch(window))


@router.get("/comparison", response_model=ComparisonData)
def get_comparison(
    window: TimeWindow = Depends(get_window),
    service: ReportService = Depends(get_report_service),
):
    """Deltas against the preceding equal-length window."""
    kwargs = {"total_beds": service.total_beds, "deceased_condition": service.deceased_condition}
    current = compute_metrics(service.source.fetch(window), **kwargs)
    previous = compute_metrics(service.source.fetch(window.previous()), **kwargs)
    return compare_periods(current, previous)
