"""
Activity breakdowns: status distribution, today's activity, procedure categories, diagnoses.
"""
from collections import Counter
from datetime import date, datetime
from typing import Optional, Iterable

from app.schemas import EventBundle, NameCount, NameValue, ReportActivities

UNKNOWN = "Unknown"
TOP_DIAGNOSES = 5


def _local_date(ts: datetime) -> date:
    if ts.tzinfo is not None:
        ts = ts.astimezone()
    return ts.date()


def _count_on(timestamps: Iterable[datetime], day: date) -> int:
    return sum(1 for ts in timestamps if _local_date(ts) == day)


def status_distribution(bundle: EventBundle) -> list:
    # Counter keeps first-seen key order
    counts = Counter(a.status or UNKNOWN for a in bundle.admissions)
    return [NameValue(name=name, value=value) for name, value in counts.items()]


def daily_activities(bundle: EventBundle, today: Optional[date] = None) -> list:
    """Counts for the current calendar date, independent of the report window."""
    if today is None:
        today = date.today()
    return [
        NameValue(name="Admissions", value=_count_on((a.admission_date for a in bundle.admissions), today)),
        NameValue(name="Discharges", value=_count_on((d.discharge_date for d in bundle.discharges), today)),
        NameValue(name="Lab Tests", value=_count_on((l.created_at for l in bundle.lab_results), today)),
        NameValue(name="Medications", value=_count_on((m.created_at for m in bundle.medications), today)),
    ]


def top_procedures(bundle: EventBundle) -> list:
    # Fixed categories backed by record counts; there is no procedure log to rank.
    return [
        NameCount(name="Vital Signs", count=len(bundle.vitals)),
        NameCount(name="Lab Tests", count=len(bundle.lab_results)),
        NameCount(name="Medication Administration", count=len(bundle.medications)),
        NameCount(name="Patient Assessment", count=len(bundle.admissions)),
        NameCount(name="Discharge Planning", count=len(bundle.discharges)),
    ]


def common_diagnoses(bundle: EventBundle, limit: int = TOP_DIAGNOSES) -> list:
    counts = Counter(a.diagnosis or UNKNOWN for a in bundle.admissions)
    return [NameCount(name=name, count=count) for name, count in counts.most_common(limit)]


def compute_activities(bundle: EventBundle, today: Optional[date] = None) -> ReportActivities:
    return ReportActivities(
        patient_status_distribution=status_distribution(bundle),
        daily_activities=daily_activities(bundle, today=today),
        top_procedures=top_procedures(bundle),
        common_diagnoses=common_diagnoses(bundle),
    )
