"""
KPI computation for the ICU performance report.
"""
from collections import Counter
from typing import Optional

from app.config import settings
from app.schemas import EventBundle, ReportMetrics

SECONDS_PER_DAY = 86400
CRITICAL = "Critical"
DISCHARGED = "Discharged"


def _stay_days(bundle: EventBundle) -> list:
    """Length of stay per discharge; 0 when the patient was not admitted in-window."""
    admitted = {}
    for a in bundle.admissions:
        # first admission wins for a repeated id
        admitted.setdefault(a.id, a)
    durations = []
    for d in bundle.discharges:
        patient = admitted.get(d.patient_id)
        if patient is None:
            durations.append(0.0)
            continue
        durations.append((d.discharge_date - patient.admission_date).total_seconds() / SECONDS_PER_DAY)
    return durations


def compute_metrics(
    bundle: EventBundle,
    total_beds: Optional[int] = None,
    deceased_condition: Optional[str] = None,
) -> ReportMetrics:
    if total_beds is None:
        total_beds = settings.total_beds
    if deceased_condition is None:
        deceased_condition = settings.deceased_condition
    if total_beds <= 0:
        raise ValueError(f"total_beds must be positive, got {total_beds}")

    admissions = bundle.admissions
    discharges = bundle.discharges

    critical = sum(1 for a in admissions if a.status == CRITICAL)
    occupied = sum(1 for a in admissions if a.status != DISCHARGED)
    deceased = sum(1 for d in discharges if d.discharge_condition == deceased_condition)

    # Same MRN admitted more than once within the window
    per_mrn = Counter(a.mrn for a in admissions)
    readmitted = sum(1 for n in per_mrn.values() if n > 1)

    stays = _stay_days(bundle)
    avg_stay = sum(stays) / len(stays) if stays else 0.0

    return ReportMetrics(
        total_patients=len(admissions),
        critical_cases=critical,
        medications_given=len(bundle.medications),
        lab_tests=len(bundle.lab_results),
        average_stay_duration=avg_stay,
        bed_occupancy_rate=occupied / total_beds,
        readmission_rate=readmitted / max(len(admissions), 1),
        mortality_rate=deceased / max(len(discharges), 1),
    )
