from datetime import date, datetime, time, timedelta
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TimeWindow(BaseModel):
    """Inclusive time range used to filter event records."""

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _check_order(self):
        if self.start > self.end:
            raise ValueError("window start must not be after window end")
        return self

    @classmethod
    def from_dates(cls, date_from: date, date_to: date) -> "TimeWindow":
        return cls(start=datetime.combine(date_from, time.min), end=datetime.combine(date_to, time.max))

    @property
    def span(self) -> timedelta:
        return self.end - self.start

    def previous(self) -> "TimeWindow":
        """Equal-length window immediately preceding this one."""
        return TimeWindow(start=self.start - self.span, end=self.start)


# ---------- Event records (read-only inputs) ----------

class EventRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)


class AdmissionRecord(EventRecord):
    id: str
    mrn: str
    status: Optional[str] = None
    diagnosis: Optional[str] = None
    admission_date: datetime


class MedicationRecord(EventRecord):
    id: Optional[str] = None
    patient_id: str
    created_at: datetime


class LabRecord(EventRecord):
    id: Optional[str] = None
    patient_id: str
    created_at: datetime


class DischargeRecord(EventRecord):
    id: Optional[str] = None
    patient_id: str
    discharge_date: datetime
    discharge_condition: Optional[str] = None


class VitalsRecord(EventRecord):
    id: Optional[str] = None
    patient_id: str
    created_at: datetime


class EventBundle(BaseModel):
    """The five in-window record collections for one report."""

    admissions: List[AdmissionRecord] = Field(default_factory=list)
    medications: List[MedicationRecord] = Field(default_factory=list)
    lab_results: List[LabRecord] = Field(default_factory=list)
    discharges: List[DischargeRecord] = Field(default_factory=list)
    vitals: List[VitalsRecord] = Field(default_factory=list)


# ---------- Derived report values ----------

class ReportMetrics(BaseModel):
    total_patients: int = 0
    critical_cases: int = 0
    medications_given: int = 0
    lab_tests: int = 0
    average_stay_duration: float = 0.0  # days
    bed_occupancy_rate: float = 0.0
    readmission_rate: float = 0.0
    mortality_rate: float = 0.0


class NameValue(BaseModel):
    name: str
    value: int


class NameCount(BaseModel):
    name: str
    count: int


class ReportActivities(BaseModel):
    patient_status_distribution: List[NameValue] = Field(default_factory=list)
    daily_activities: List[NameValue] = Field(default_factory=list)
    top_procedures: List[NameCount] = Field(default_factory=list)
    common_diagnoses: List[NameCount] = Field(default_factory=list)


class MetricChanges(BaseModel):
    total_patients: int
    critical_cases: int
    average_stay_duration: float
    bed_occupancy_rate: float
    readmission_rate: float
    mortality_rate: float


class ComparisonData(BaseModel):
    previous_period: ReportMetrics
    changes: MetricChanges


class ReportData(BaseModel):
    metrics: ReportMetrics
    activities: ReportActivities
    comparison: Optional[ComparisonData] = None


class Actor(BaseModel):
    """Caller identity passed explicitly into operations that record who acted."""

    user_id: str
    role: str = "Staff"
