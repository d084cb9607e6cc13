"""
ICU performance report PDF (reportlab).
"""
from dataclasses import dataclass
from datetime import date
from io import BytesIO
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from app.config import settings
from app.schemas import ReportData, ReportMetrics, TimeWindow

PERIOD_FORMAT = "%b %d, %Y"
SECTION_MARGIN = 0.3 * inch

TABLE_STYLE = TableStyle([
    ("BACKGROUND", (0, 0), (-1, 0), colors.grey),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
    ("ALIGN", (0, 0), (-1, -1), "LEFT"),
    ("FONTSIZE", (0, 0), (-1, -1), 9),
    ("BOTTOMPADDING", (0, 0), (-1, 0), 12),
    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.beige]),
    ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
])


@dataclass
class RenderedReport:
    content: bytes
    filename: str
    page_count: int
    media_type: str = "application/pdf"


def export_filename(extension: str, export_date: Optional[date] = None, prefix: Optional[str] = None) -> str:
    """<Prefix>-Report-<YYYY-MM-DD>.<ext>, dated at export time."""
    if export_date is None:
        export_date = date.today()
    if prefix is None:
        prefix = settings.report_prefix
    return f"{prefix}-Report-{export_date:%Y-%m-%d}.{extension}"


def format_percent(rate: float) -> str:
    return f"{rate * 100:.1f}%"


def format_days(days: float) -> str:
    return f"{days:.1f} days"


def metrics_rows(metrics: ReportMetrics) -> list:
    return [
        ["Total Patients", str(metrics.total_patients)],
        ["Critical Cases", str(metrics.critical_cases)],
        ["Medications Given", str(metrics.medications_given)],
        ["Lab Tests", str(metrics.lab_tests)],
        ["Average Stay Duration", format_days(metrics.average_stay_duration)],
        ["Bed Occupancy Rate", format_percent(metrics.bed_occupancy_rate)],
        ["Readmission Rate", format_percent(metrics.readmission_rate)],
        ["Mortality Rate", format_percent(metrics.mortality_rate)],
    ]


def period_line(window: TimeWindow) -> str:
    return f"Period: {window.start:{PERIOD_FORMAT}} - {window.end:{PERIOD_FORMAT}}"


def _table(header, rows):
    t = Table([header] + rows, colWidths=[3 * inch, 2 * inch])
    t.setStyle(TABLE_STYLE)
    return t


def _section(story, styles, title, header, rows):
    story.append(Paragraph(title, styles["Heading3"]))
    story.append(_table(header, rows))
    story.append(Spacer(1, SECTION_MARGIN))


def render_report_pdf(
    report: ReportData,
    window: TimeWindow,
    export_date: Optional[date] = None,
    prefix: Optional[str] = None,
) -> RenderedReport:
    """Lay out the report; Top Procedures always starts a new page."""
    activities = report.activities
    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        rightMargin=inch,
        leftMargin=inch,
        topMargin=inch,
        bottomMargin=inch,
        title="ICU Performance Report",
        invariant=1,
        pageCompression=0,
    )
    styles = getSampleStyleSheet()
    story = []
    story.append(Paragraph("ICU Performance Report", styles["Title"]))
    story.append(Paragraph(period_line(window), styles["Normal"]))
    story.append(Spacer(1, SECTION_MARGIN))

    _section(story, styles, "Key Metrics", ["Metric", "Value"], metrics_rows(report.metrics))
    _section(
        story, styles, "Patient Status Distribution", ["Status", "Count"],
        [[s.name, str(s.value)] for s in activities.patient_status_distribution],
    )
    _section(
        story, styles, "Daily Activities", ["Activity", "Count"],
        [[a.name, str(a.value)] for a in activities.daily_activities],
    )
    story.append(PageBreak())
    _section(
        story, styles, "Top Procedures", ["Procedure", "Count"],
        [[p.name, str(p.count)] for p in activities.top_procedures],
    )
    _section(
        story, styles, "Common Diagnoses", ["Diagnosis", "Count"],
        [[d.name, str(d.count)] for d in activities.common_diagnoses],
    )
    doc.build(story)

    return RenderedReport(
        content=buf.getvalue(),
        filename=export_filename("pdf", export_date=export_date, prefix=prefix),
        page_count=doc.page,
    )
