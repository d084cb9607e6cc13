import os
import tempfile

# Point the app at a throwaway SQLite file before anything imports app.database
_TMP_DIR = tempfile.mkdtemp(prefix="icu_reports_test_")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_TMP_DIR, "test_icu_reports.db")

from datetime import datetime

import pytest

from app.database import SessionLocal, engine
from app.models import Base
from app.schemas import (
    AdmissionRecord,
    DischargeRecord,
    EventBundle,
    LabRecord,
    MedicationRecord,
    VitalsRecord,
)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


# ── Record factories ──────────────────────────────────────────────────────

@pytest.fixture
def admission():
    counter = {"n": 0}

    def _make(mrn=None, status="Stable", diagnosis="Sepsis", at=datetime(2024, 3, 10, 8, 0), id=None):
        counter["n"] += 1
        n = counter["n"]
        return AdmissionRecord(
            id=id or f"pat-{n}",
            mrn=mrn or f"MRN-{n}",
            status=status,
            diagnosis=diagnosis,
            admission_date=at,
        )

    return _make


@pytest.fixture
def discharge():
    def _make(patient_id, at=datetime(2024, 3, 12, 8, 0), condition="Improved"):
        return DischargeRecord(patient_id=patient_id, discharge_date=at, discharge_condition=condition)

    return _make


@pytest.fixture
def bundle():
    def _make(admissions=(), discharges=(), medications=0, labs=0, vitals=0, at=datetime(2024, 3, 10, 9, 0)):
        return EventBundle(
            admissions=list(admissions),
            discharges=list(discharges),
            medications=[MedicationRecord(patient_id="pat-1", created_at=at) for _ in range(medications)],
            lab_results=[LabRecord(patient_id="pat-1", created_at=at) for _ in range(labs)],
            vitals=[VitalsRecord(patient_id="pat-1", created_at=at) for _ in range(vitals)],
        )

    return _make
