"""
Export API: ICU report as PDF, CSV and Excel.
"""
import logging
from io import BytesIO

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response, StreamingResponse
import pandas as pd

from app.dependencies import get_actor, get_report_service, get_window
from app.schemas import Actor, TimeWindow
from app.services.pdf_report import export_filename, metrics_rows, render_report_pdf
from app.services.report import ReportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/exports", tags=["exports"])


def _attachment(filename: str) -> dict:
    return {"Content-Disposition": f"attachment; filename={filename}"}


@router.get("/pdf/report")
def export_report_pdf(
    window: TimeWindow = Depends(get_window),
    service: ReportService = Depends(get_report_service),
    actor: Actor = Depends(get_actor),
):
    """ICU performance report PDF: key metrics, distributions, procedures and diagnoses."""
    report = service.generate(window)
    rendered = render_report_pdf(report, window)
    logger.info("Report %s exported by %s (%s)", rendered.filename, actor.user_id, actor.role)
    return Response(content=rendered.content, media_type=rendered.media_type, headers=_attachment(rendered.filename))


@router.get("/csv/report")
def export_report_csv(
    compare: bool = Query(False),
    window: TimeWindow = Depends(get_window),
    service: ReportService = Depends(get_report_service),
    actor: Actor = Depends(get_actor),
):
    """Key metrics as a single CSV row; with compare, one row per period plus the deltas."""
    report = service.generate(window, previous_window=window.previous() if compare else None)
    rows = [{"period": "current", **report.metrics.model_dump()}]
    if report.comparison is not None:
        rows.append({"period": "previous", **report.comparison.previous_period.model_dump()})
        rows.append({"period": "change", **report.comparison.changes.model_dump()})
    dframe = pd.DataFrame(rows)
    buf = BytesIO()
    dframe.to_csv(buf, index=False)
    buf.seek(0)
    filename = export_filename("csv")
    logger.info("Report %s exported by %s (%s)", filename, actor.user_id, actor.role)
    return StreamingResponse(buf, media_type="text/csv", headers=_attachment(filename))


@router.get("/excel/report")
def export_report_excel(
    compare: bool = Query(False),
    window: TimeWindow = Depends(get_window),
    service: ReportService = Depends(get_report_service),
    actor: Actor = Depends(get_actor),
):
    """Workbook with one sheet per report table."""
    report = service.generate(window, previous_window=window.previous() if compare else None)
    activities = report.activities
    buf = BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        pd.DataFrame(metrics_rows(report.metrics), columns=["Metric", "Value"]).to_excel(
            writer, sheet_name="Key Metrics", index=False
        )
        pd.DataFrame([s.model_dump() for s in activities.patient_status_distribution], columns=["name", "value"]).to_excel(
            writer, sheet_name="Patient Status", index=False
        )
        pd.DataFrame([a.model_dump() for a in activities.daily_activities], columns=["name", "value"]).to_excel(
            writer, sheet_name="Daily Activities", index=False
        )
        pd.DataFrame([p.model_dump() for p in activities.top_procedures], columns=["name", "count"]).to_excel(
            writer, sheet_name="Top Procedures", index=False
        )
        pd.DataFrame([d.model_dump() for d in activities.common_diagnoses], columns=["name", "count"]).to_excel(
            writer, sheet_name="Common Diagnoses", index=False
        )
        if report.comparison is not None:
            changes = report.comparison.changes.model_dump()
            previous = report.comparison.previous_period.model_dump()
            current = report.metrics.model_dump()
            pd.DataFrame(
                [{"metric": k, "current": current[k], "previous": previous[k], "change": v} for k, v in changes.items()]
            ).to_excel(writer, sheet_name="Comparison", index=False)
    buf.seek(0)
    filename = export_filename("xlsx")
    logger.info("Report %s exported by %s (%s)", filename, actor.user_id, actor.role)
    return StreamingResponse(
        buf,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers=_attachment(filename),
    )
